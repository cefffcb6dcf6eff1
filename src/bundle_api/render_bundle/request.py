import json
from typing import Any, cast

from fhir import OperationOutcome
from fhir.bundle import Bundle, BundleType, TransactionBundle
from fhir.operation_outcome import OperationOutcomeIssue
from flask.wrappers import Request, Response

from bundle_api.common.common import BatchReadWriteResponse, QueryParams, SearchResult

FHIR_JSON_MIMETYPE = "application/fhir+json"
BUNDLE_TYPES = ("searchset", "history")


class RequestValidationError(Exception):
    """Exception raised for errors in the request validation."""


def build_operation_outcome(error: str, status_code: int) -> OperationOutcome:
    """
    Build the OperationOutcome returned for a failed render request.

    A 400 is reported as an ``invalid`` issue, anything else as ``exception``.
    """
    return OperationOutcome(
        resourceType="OperationOutcome",
        issue=[
            OperationOutcomeIssue(
                severity="error",
                code="invalid" if status_code == 400 else "exception",
                diagnostics=error,
            )
        ],
    )


def build_operation_outcome_response(error: str, status_code: int) -> Response:
    return Response(
        response=json.dumps(build_operation_outcome(error, status_code)),
        status=status_code,
        mimetype=FHIR_JSON_MIMETYPE,
    )


class _RenderBundleRequest:
    """Shared handling of the JSON body and the response of a render request."""

    def __init__(self, request: Request) -> None:
        self._http_request = request
        body = request.get_json(force=True, silent=True)
        if not isinstance(body, dict):
            raise RequestValidationError("Request body must be a JSON object")
        self._request_body: dict[str, Any] = body
        self._response_body: Bundle | TransactionBundle | OperationOutcome | None = (
            None
        )
        self._status_code: int | None = None

    @property
    def base_url(self) -> str:
        return _require_str(self._request_body, "baseUrl")

    def build_response(self) -> Response:
        return Response(
            response=json.dumps(self._response_body),
            status=self._status_code,
            mimetype=FHIR_JSON_MIMETYPE,
        )

    def set_response(self, bundle: Bundle | TransactionBundle) -> None:
        self._status_code = 200
        self._response_body = bundle

    def set_negative_response(self, error: str, status_code: int = 500) -> None:
        self._status_code = status_code
        self._response_body = build_operation_outcome(error, status_code)


class RenderSearchBundleRequest(_RenderBundleRequest):
    """
    A request to wrap one page of search or history results in a Bundle.

    Expected body::

        {
            "baseUrl": "https://example.org/fhir",
            "queryParams": {"name": "Smith"},
            "bundleType": "searchset",
            "resourceType": "Patient",
            "id": null,
            "searchResult": {
                "numberOfResults": 42,
                "entries": [...],
                "nextResultUrl": "https://example.org/fhir/Patient?name=Smith&page=2"
            }
        }

    :raises RequestValidationError: If the body is not a usable render request.
    """

    def __init__(self, request: Request) -> None:
        super().__init__(request)
        # Validate eagerly so a bad request never reaches the generator
        _ = self.base_url
        _ = self.bundle_type
        _ = self.query_params
        _ = self.search_result
        _ = self.resource_type
        _ = self.resource_id

    @property
    def bundle_type(self) -> BundleType:
        bundle_type = self._request_body.get("bundleType", "searchset")
        if bundle_type not in BUNDLE_TYPES:
            raise RequestValidationError(
                f'"bundleType" must be "searchset" or "history", got {bundle_type!r}'
            )
        return cast("BundleType", bundle_type)

    @property
    def query_params(self) -> QueryParams:
        query_params = self._request_body.get("queryParams") or {}
        if not isinstance(query_params, dict):
            raise RequestValidationError('"queryParams" must be a JSON object')
        for value in query_params.values():
            if not _is_query_value(value):
                raise RequestValidationError(
                    '"queryParams" values must be strings or arrays of strings'
                )
        return cast("QueryParams", query_params)

    @property
    def resource_type(self) -> str | None:
        return _optional_str(self._request_body, "resourceType")

    @property
    def resource_id(self) -> str | None:
        return _optional_str(self._request_body, "id")

    @property
    def search_result(self) -> SearchResult:
        search_result = self._request_body.get("searchResult")
        if not isinstance(search_result, dict):
            raise RequestValidationError(
                'Missing or invalid required field "searchResult"'
            )

        number_of_results = search_result.get("numberOfResults")
        # bool is an int subclass but never a valid count
        if not isinstance(number_of_results, int) or isinstance(
            number_of_results, bool
        ):
            raise RequestValidationError(
                '"searchResult.numberOfResults" must be an integer'
            )

        entries = search_result.get("entries") or []
        if not isinstance(entries, list):
            raise RequestValidationError('"searchResult.entries" must be a JSON array')

        return SearchResult(
            number_of_results=number_of_results,
            entries=entries,
            previous_result_url=_optional_str(search_result, "previousResultUrl"),
            next_result_url=_optional_str(search_result, "nextResultUrl"),
            first_result_url=_optional_str(search_result, "firstResultUrl"),
            last_result_url=_optional_str(search_result, "lastResultUrl"),
        )


class RenderTransactionBundleRequest(_RenderBundleRequest):
    """
    A request to summarise the executed operations of a batch or transaction.

    Expected body::

        {
            "baseUrl": "https://example.org/fhir",
            "responses": [
                {
                    "operation": "read",
                    "resourceType": "Patient",
                    "id": "2",
                    "vid": "1",
                    "lastModified": "2026-01-12T10:00:00Z",
                    "resource": {...}
                }
            ]
        }

    :raises RequestValidationError: If the body is not a usable render request.
    """

    def __init__(self, request: Request) -> None:
        super().__init__(request)
        _ = self.base_url
        _ = self.responses

    @property
    def responses(self) -> list[BatchReadWriteResponse]:
        responses = self._request_body.get("responses")
        if not isinstance(responses, list):
            raise RequestValidationError(
                'Missing or invalid required field "responses"'
            )

        batch_responses = []
        for index, response in enumerate(responses):
            if not isinstance(response, dict):
                raise RequestValidationError(
                    f'"responses[{index}]" must be a JSON object'
                )
            resource = response.get("resource")
            if resource is not None and not isinstance(resource, dict):
                raise RequestValidationError(
                    f'"responses[{index}].resource" must be a JSON object'
                )
            batch_responses.append(
                BatchReadWriteResponse(
                    operation=_require_str(response, "operation"),
                    resource_type=_require_str(response, "resourceType"),
                    id=_require_str(response, "id"),
                    vid=_optional_str(response, "vid"),
                    last_modified=_optional_str(response, "lastModified"),
                    resource=resource,
                )
            )
        return batch_responses


def _require_str(body: dict[str, Any], field: str) -> str:
    value = body.get(field)
    if not isinstance(value, str) or not value.strip():
        raise RequestValidationError(f'Missing or empty required field "{field}"')
    return value


def _optional_str(body: dict[str, Any], field: str) -> str | None:
    value = body.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise RequestValidationError(f'"{field}" must be a string')
    return value


def _is_query_value(value: Any) -> bool:
    if isinstance(value, str):
        return True
    return isinstance(value, list) and all(isinstance(item, str) for item in value)
