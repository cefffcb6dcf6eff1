"""Pytest configuration and shared fixtures for bundle API tests."""

from datetime import datetime, timezone
from typing import Any

import pytest

from bundle_api.bundle_generator import BundleGenerator

FIXED_NOW = datetime(2026, 1, 12, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_generator() -> BundleGenerator:
    """A generator with a predictable clock and sequential ids."""
    ids = iter(f"bundle-{n}" for n in range(1, 1000))
    return BundleGenerator(new_id=lambda: next(ids), now=lambda: FIXED_NOW)


@pytest.fixture
def patient_entry() -> dict[str, Any]:
    return {
        "fullUrl": "https://example.org/fhir/Patient/9999999999",
        "resource": {
            "resourceType": "Patient",
            "id": "9999999999",
            "name": [{"use": "official", "family": "Doe", "given": ["John"]}],
            "gender": "male",
            "birthDate": "1985-04-12",
        },
        "search": {"mode": "match"},
    }


@pytest.fixture
def valid_search_request_payload(patient_entry: dict[str, Any]) -> dict[str, Any]:
    return {
        "baseUrl": "https://example.org/fhir",
        "queryParams": {"name": "Doe"},
        "bundleType": "searchset",
        "resourceType": "Patient",
        "searchResult": {
            "numberOfResults": 21,
            "entries": [patient_entry],
            "nextResultUrl": "https://example.org/fhir/Patient?name=Doe&page=2",
            "firstResultUrl": "https://example.org/fhir/Patient?name=Doe",
        },
    }


@pytest.fixture
def valid_transaction_request_payload(
    patient_entry: dict[str, Any],
) -> dict[str, Any]:
    return {
        "baseUrl": "https://example.org/fhir",
        "responses": [
            {
                "operation": "create",
                "resourceType": "Patient",
                "id": "1",
                "vid": "1",
                "lastModified": "2026-01-12T09:00:00Z",
            },
            {
                "operation": "read",
                "resourceType": "Patient",
                "id": "9999999999",
                "vid": "3",
                "lastModified": "2026-01-10T08:30:00Z",
                "resource": patient_entry["resource"],
            },
        ],
    }
