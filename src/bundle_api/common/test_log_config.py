"""
Unit tests for :mod:`bundle_api.common.log_config`.
"""

import logging
from collections.abc import Generator

import pytest
import structlog

from bundle_api.common import log_config


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    yield
    structlog.reset_defaults()


def test_get_log_level_defaults_to_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    assert log_config.get_log_level() == logging.INFO


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("debug", logging.DEBUG),
        (" WARNING ", logging.WARNING),
        ("ERROR", logging.ERROR),
    ],
)
def test_get_log_level_reads_environment(
    monkeypatch: pytest.MonkeyPatch, value: str, expected: int
) -> None:
    monkeypatch.setenv("LOG_LEVEL", value)

    assert log_config.get_log_level() == expected


def test_get_log_level_rejects_unknown_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(RuntimeError, match="LOG_LEVEL environment variable is invalid"):
        log_config.get_log_level()


def test_configure_logging_filters_below_configured_level(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    log_config.configure_logging()
    logger = structlog.get_logger("bundle_api.test")

    with caplog.at_level(logging.DEBUG):
        logger.info("not_logged")
        logger.warning("logged", bundle_id="bundle-1")

    messages = [record.getMessage() for record in caplog.records]
    assert len(messages) == 1
    assert '"event": "logged"' in messages[0]
    assert '"bundle_id": "bundle-1"' in messages[0]
    assert '"level": "warning"' in messages[0]
