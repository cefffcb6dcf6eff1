"""FHIR OperationOutcome resource, used for request failures."""

from typing import Literal, TypeAlias, TypedDict

IssueSeverity: TypeAlias = Literal["fatal", "error", "warning", "information"]
IssueType: TypeAlias = Literal["invalid", "required", "value", "exception"]


class OperationOutcomeIssue(TypedDict):
    severity: IssueSeverity
    code: IssueType
    diagnostics: str


class OperationOutcome(TypedDict):
    resourceType: Literal["OperationOutcome"]
    issue: list[OperationOutcomeIssue]
