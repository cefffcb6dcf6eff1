"""FHIR data types and resources."""

from fhir.bundle import (
    Bundle,
    BundleLink,
    BundleMeta,
    BundleType,
    LinkRelation,
    TransactionBundle,
    TransactionEntry,
    TransactionEntryResponse,
)
from fhir.operation_outcome import OperationOutcome, OperationOutcomeIssue

__all__ = [
    "Bundle",
    "BundleLink",
    "BundleMeta",
    "BundleType",
    "LinkRelation",
    "OperationOutcome",
    "OperationOutcomeIssue",
    "TransactionBundle",
    "TransactionEntry",
    "TransactionEntryResponse",
]
