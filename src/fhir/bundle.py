"""FHIR Bundle resource."""

from typing import Any, Literal, NotRequired, TypeAlias, TypedDict

BundleType: TypeAlias = Literal["searchset", "history"]
LinkRelation: TypeAlias = Literal["self", "previous", "next", "first", "last"]


class BundleLink(TypedDict):
    relation: LinkRelation
    url: str


class BundleMeta(TypedDict):
    lastUpdated: str


class Bundle(TypedDict):
    """A searchset or history Bundle."""

    resourceType: str
    id: str
    meta: BundleMeta
    type: BundleType
    total: int
    link: list[BundleLink]
    entry: list[dict[str, Any]]


class TransactionEntryResponse(TypedDict):
    status: str
    location: str
    etag: str | None
    lastModified: str | None


class TransactionEntry(TypedDict):
    response: TransactionEntryResponse
    resource: NotRequired[dict[str, Any]]


class TransactionBundle(TypedDict):
    """A transaction-response Bundle."""

    resourceType: str
    id: str
    type: str
    link: list[BundleLink]
    entry: list[TransactionEntry]
