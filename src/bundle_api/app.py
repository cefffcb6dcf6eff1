import os
from typing import TypedDict

import structlog
from flask import Flask, Response, request

from bundle_api.common.log_config import configure_logging
from bundle_api.render_bundle import (
    RenderSearchBundleRequest,
    RenderTransactionBundleRequest,
    RequestValidationError,
)
from bundle_api.render_bundle.handler import RenderBundleHandler
from bundle_api.render_bundle.request import build_operation_outcome_response

configure_logging()
logger = structlog.get_logger(__name__)

app = Flask(__name__)


class HealthResponse(TypedDict):
    status: str


def get_app_host() -> str:
    host = os.getenv("FLASK_HOST")
    if host is None:
        raise RuntimeError("FLASK_HOST environment variable is not set.")
    return host


def get_app_port() -> int:
    port = os.getenv("FLASK_PORT")
    if port is None:
        raise RuntimeError("FLASK_PORT environment variable is not set.")
    return int(port)


@app.route("/Bundle/$render-search", methods=["POST"])
def render_search_bundle() -> Response:
    """Wrap one page of search or history results in a Bundle."""
    try:
        render_request = RenderSearchBundleRequest(request)
    except RequestValidationError as e:
        return _operation_outcome_response(str(e), status_code=400)

    RenderBundleHandler.handle_search(render_request)
    return render_request.build_response()


@app.route("/Bundle/$render-transaction", methods=["POST"])
def render_transaction_bundle() -> Response:
    """Summarise the operations of an executed batch in a transaction-response."""
    try:
        render_request = RenderTransactionBundleRequest(request)
    except RequestValidationError as e:
        return _operation_outcome_response(str(e), status_code=400)

    RenderBundleHandler.handle_transaction(render_request)
    return render_request.build_response()


def _operation_outcome_response(error: str, status_code: int) -> Response:
    logger.info("render_request_rejected", reason=error, status_code=status_code)
    return build_operation_outcome_response(error, status_code)


@app.route("/health", methods=["GET"])
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    app.run(host=get_app_host(), port=get_app_port())
