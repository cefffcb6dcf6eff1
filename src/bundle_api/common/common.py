"""
Input records supplied to the bundle generator by the surrounding FHIR server.

Both records are produced upstream (by the search executor and the batch
executor respectively) and are treated as read-only here.
"""

from dataclasses import dataclass, field
from typing import Any, TypeAlias

# Query string values as received by the server: a single value, or a list of
# values for a repeated parameter (e.g. ``?_include=a&_include=b``).
QueryParams: TypeAlias = dict[str, str | list[str]]


@dataclass(frozen=True)
class SearchResult:
    """
    One page of search results.

    :param number_of_results: Total number of matches across every page.
    :param entries: The already-rendered Bundle entries for the current page.
    :param previous_result_url: Absolute URL of the previous page, if any.
    :param next_result_url: Absolute URL of the next page, if any.
    :param first_result_url: Absolute URL of the first page, if any.
    :param last_result_url: Absolute URL of the last page, if any.
    """

    number_of_results: int
    entries: list[dict[str, Any]] = field(default_factory=list)
    previous_result_url: str | None = None
    next_result_url: str | None = None
    first_result_url: str | None = None
    last_result_url: str | None = None


@dataclass(frozen=True)
class BatchReadWriteResponse:
    """
    Outcome of a single operation executed as part of a batch or transaction.

    :param operation: Interaction performed, e.g. ``create``, ``read``, ``vread``.
    :param resource_type: FHIR resource type the operation acted on.
    :param id: Logical id of the resource.
    :param vid: Version id of the resource, returned as the entry ETag.
    :param last_modified: Last-modified instant of the resource.
    :param resource: Resource body for reads. Empty or ``None`` when the resource
        could not be returned.
    """

    operation: str
    resource_type: str
    id: str
    vid: str | None = None
    last_modified: str | None = None
    resource: dict[str, Any] | None = None
