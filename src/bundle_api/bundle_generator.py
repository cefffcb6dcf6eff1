"""
Module: bundle_api.bundle_generator

Builds the FHIR Bundle envelopes returned by search, history and
batch/transaction interactions.

The generator only wraps data that has already been produced upstream: the
search executor supplies a :class:`~bundle_api.common.common.SearchResult` and
the batch executor supplies one
:class:`~bundle_api.common.common.BatchReadWriteResponse` per operation. Links
to other pages are passed through exactly as the paginator built them.

See https://www.hl7.org/fhir/search.html
"""

import uuid
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from urllib.parse import quote, urlencode

import structlog
from fhir.bundle import (
    Bundle,
    BundleLink,
    BundleType,
    LinkRelation,
    TransactionBundle,
    TransactionEntry,
)

from bundle_api.common.common import BatchReadWriteResponse, QueryParams, SearchResult

logger = structlog.get_logger(__name__)

# Characters left unescaped in query strings, alongside letters and digits.
QUERY_SAFE_CHARS = "-_.!~*'()"

STATUS_CREATED = "201 Created"
STATUS_FORBIDDEN = "403 Forbidden"
STATUS_OK = "200 OK"

READ_OPERATIONS = ("read", "vread")


def _new_id() -> str:
    return str(uuid.uuid4())


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BundleGenerator:
    """
    Assembles searchset, history and transaction-response Bundles.

    An instance holds no mutable state, so a single generator can be shared
    between requests.

    :param new_id: Returns a fresh Bundle id on every call. Defaults to a
        random UUID.
    :param now: Returns the current time. Defaults to UTC now.
    """

    def __init__(
        self,
        new_id: Callable[[], str] = _new_id,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._new_id = new_id
        self._now = now

    def generate_bundle(
        self,
        base_url: str,
        query_params: QueryParams | None,
        search_result: SearchResult,
        bundle_type: BundleType,
        resource_type: str | None = None,
        id: str | None = None,  # noqa: A002
    ) -> Bundle:
        """
        Build a searchset or history Bundle for one page of results.

        :param base_url: Server base URL, used as the host of the ``self`` link.
        :param query_params: The query parameters of the original request. They
            are carried into the ``self`` link unchanged.
        :param search_result: The page of results to wrap.
        :param bundle_type: ``searchset`` or ``history``.
        :param resource_type: Resource type the interaction was made against, if
            any.
        :param id: Resource id for instance level history, if any.
        :returns: The Bundle. ``total`` is the number of matches across all
            pages, not the number of entries on this page.
        """
        bundle: Bundle = {
            "resourceType": "Bundle",
            "id": self._new_id(),
            "meta": {"lastUpdated": self._now().isoformat()},
            "type": bundle_type,
            "total": search_result.number_of_results,
            "link": [
                self.create_link_with_query(
                    "self",
                    base_url,
                    bundle_type == "history",
                    resource_type,
                    id,
                    query_params,
                )
            ],
            "entry": search_result.entries,
        }

        paging_urls: list[tuple[LinkRelation, str | None]] = [
            ("previous", search_result.previous_result_url),
            ("next", search_result.next_result_url),
            ("first", search_result.first_result_url),
            ("last", search_result.last_result_url),
        ]
        for relation, url in paging_urls:
            if url:
                bundle["link"].append(self.create_link(relation, url))

        logger.debug(
            "bundle_generated",
            bundle_id=bundle["id"],
            bundle_type=bundle_type,
            total=bundle["total"],
            entries=len(bundle["entry"]),
            links=len(bundle["link"]),
        )
        return bundle

    @staticmethod
    def create_link_with_query(
        relation: LinkRelation,
        host: str,
        is_history: bool,
        resource_type: str | None = None,
        id: str | None = None,  # noqa: A002
        query: Mapping[str, str | Sequence[str]] | None = None,
    ) -> BundleLink:
        """
        Build a link to ``host`` + ``[/resource_type][/id][/_history]`` + query.

        Nothing stops a history link being built without a resource type; that
        yields ``{host}/_history``.
        """
        pathname = ""
        if resource_type:
            pathname += f"/{resource_type}"
        if id:
            pathname += f"/{id}"
        if is_history:
            pathname += "/_history"

        # Keep path characters from being read as a query or fragment boundary
        pathname = pathname.replace("#", "%23").replace("?", "%3F")

        url = f"{host}{pathname}"
        if query:
            search = urlencode(
                query, doseq=True, safe=QUERY_SAFE_CHARS, quote_via=quote
            )
            if search:
                url += f"?{search}"

        return {"relation": relation, "url": url}

    @staticmethod
    def create_link(relation: LinkRelation, url: str) -> BundleLink:
        """Wrap an already formed URL, e.g. one built by the paginator."""
        return {"relation": relation, "url": url}

    def generate_transaction_bundle(
        self,
        base_url: str,
        bundle_entry_responses: Sequence[BatchReadWriteResponse],
    ) -> TransactionBundle:
        """
        Build a transaction-response Bundle with one entry per operation.

        Entries keep the order of ``bundle_entry_responses``. A ``read`` or
        ``vread`` that produced no resource is reported as ``403 Forbidden``,
        whether the resource was missing or access to it was denied. Only a
        successful ``read`` carries the resource body on its entry; a ``vread``
        never does.

        :param base_url: URL used for the ``self`` link.
        :param bundle_entry_responses: Outcomes of the executed operations.
        :returns: The transaction-response Bundle.
        """
        entries: list[TransactionEntry] = []
        for bundle_entry_response in bundle_entry_responses:
            entry: TransactionEntry = {
                "response": {
                    "status": self._entry_status(bundle_entry_response),
                    "location": (
                        f"{bundle_entry_response.resource_type}"
                        f"/{bundle_entry_response.id}"
                    ),
                    "etag": bundle_entry_response.vid,
                    "lastModified": bundle_entry_response.last_modified,
                },
            }
            if (
                bundle_entry_response.operation == "read"
                and bundle_entry_response.resource
            ):
                entry["resource"] = bundle_entry_response.resource

            entries.append(entry)

        bundle: TransactionBundle = {
            "resourceType": "Bundle",
            "id": self._new_id(),
            "type": "transaction-response",
            "link": [self.create_link("self", base_url)],
            "entry": entries,
        }

        logger.debug(
            "transaction_bundle_generated",
            bundle_id=bundle["id"],
            entries=len(entries),
        )
        return bundle

    @staticmethod
    def _entry_status(bundle_entry_response: BatchReadWriteResponse) -> str:
        if bundle_entry_response.operation == "create":
            return STATUS_CREATED
        if (
            bundle_entry_response.operation in READ_OPERATIONS
            and not bundle_entry_response.resource
        ):
            return STATUS_FORBIDDEN
        # Anything else, including operations this module does not know about.
        return STATUS_OK
