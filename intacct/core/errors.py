"""Error types for the Intacct client.

Every failure raised by this package derives from IntacctError. Fatal
errors (``is_fatal``) mean no function in the request was executed, or the
request never completed. ResultsError is the only non-fatal error: the
request ran and some functions succeeded while others failed.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from intacct.models.response import Response


class ErrorCode(str, Enum):
    """Standardized error codes for the client."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    HTTP_STATUS_ERROR = "HTTP_STATUS_ERROR"
    RESPONSE_PARSE_ERROR = "RESPONSE_PARSE_ERROR"
    CONTROL_ERROR = "CONTROL_ERROR"
    OPERATION_ERROR = "OPERATION_ERROR"
    RESULTS_ERROR = "RESULTS_ERROR"
    SESSION_REFRESH_ERROR = "SESSION_REFRESH_ERROR"
    PAGINATION_ERROR = "PAGINATION_ERROR"
    RESULT_MAP_ERROR = "RESULT_MAP_ERROR"


# Suggested actions for common errors
SUGGESTED_ACTIONS = {
    ErrorCode.CONFIGURATION_ERROR: "Check the sender credentials, authenticator and functions passed to the service.",
    ErrorCode.TRANSPORT_ERROR: "Could not reach the Intacct gateway. Check network access and try again.",
    ErrorCode.HTTP_STATUS_ERROR: "The gateway rejected the HTTP request. Retry later or verify the endpoint URL.",
    ErrorCode.RESPONSE_PARSE_ERROR: "The gateway returned malformed XML. Enable debug logging and inspect the payload.",
    ErrorCode.CONTROL_ERROR: "The request was rejected before execution. Verify the sender id and password.",
    ErrorCode.OPERATION_ERROR: "The operation was rejected. Verify the user login or session id.",
    ErrorCode.RESULTS_ERROR: "One or more functions failed. Inspect the per-position error details.",
    ErrorCode.SESSION_REFRESH_ERROR: "The session expired and cannot be refreshed. Supply login credentials.",
    ErrorCode.PAGINATION_ERROR: "The gateway stopped returning continuation data. Re-run the query.",
    ErrorCode.RESULT_MAP_ERROR: "The requested path does not address a structured element.",
}

# Retryable error codes
RETRYABLE_ERRORS = {
    ErrorCode.TRANSPORT_ERROR,
    ErrorCode.HTTP_STATUS_ERROR,
}


class ErrorDetail(BaseModel):
    """A single error entry from an Intacct ``errormessage`` block.

    ``error`` is set instead of the wire fields when the detail records a
    local failure, such as a result that could not be decoded.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    errorno: str = ""
    description: str = ""
    description2: str = ""
    correction: str = ""
    error: Optional[BaseException] = Field(default=None, exclude=True)

    def format(self, prefix: str) -> str:
        if self.error is not None:
            return f"{prefix} {self.description or 'Error'}: {self.error}"
        return f"{prefix} ErrorNo: {self.errorno} - {self.description} - {self.description2}"


class IntacctError(Exception):
    """Base exception for Intacct client errors."""

    code: ErrorCode = ErrorCode.CONFIGURATION_ERROR
    is_fatal: bool = True

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def suggested_action(self) -> Optional[str]:
        return SUGGESTED_ACTIONS.get(self.code)

    @property
    def is_retryable(self) -> bool:
        return self.code in RETRYABLE_ERRORS


class ConfigurationError(IntacctError):
    """Raised when a service, authenticator or function is misconfigured."""

    code = ErrorCode.CONFIGURATION_ERROR


class TransportError(IntacctError):
    """Raised when the request could not be delivered."""

    code = ErrorCode.TRANSPORT_ERROR


class HTTPStatusError(TransportError):
    """Raised when the gateway answers with a non-2xx status."""

    code = ErrorCode.HTTP_STATUS_ERROR

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(
            f"HTTP {status_code}: {body[:200]}",
            details={"status_code": status_code},
        )
        self.status_code = status_code
        self.body = body

    @property
    def is_retryable(self) -> bool:
        return self.status_code >= 500


class ResponseParseError(IntacctError):
    """Raised when the response document is not valid XML."""

    code = ErrorCode.RESPONSE_PARSE_ERROR


class _EnvelopeError(IntacctError):
    section = ""

    def __init__(
        self,
        errors: List[ErrorDetail],
        response: Optional["Response"] = None,
    ):
        message = errors[0].format(self.section) if errors else "No error"
        super().__init__(message)
        self.errors = errors
        self.response = response

    def __getitem__(self, idx: int) -> ErrorDetail:
        return self.errors[idx]

    def __len__(self) -> int:
        return len(self.errors)


class ControlError(_EnvelopeError):
    """Top level failure: the request was rejected before any function ran."""

    code = ErrorCode.CONTROL_ERROR
    section = "control"


class OperationError(_EnvelopeError):
    """Authentication passed but the operation as a whole was rejected."""

    code = ErrorCode.OPERATION_ERROR
    section = "operation"


class ResultsError(IntacctError):
    """Per-function failures, indexed by the position of the submitted function.

    Positions that succeeded hold ``None``.
    """

    code = ErrorCode.RESULTS_ERROR
    is_fatal = False

    def __init__(self, results: List[Optional[List[ErrorDetail]]]):
        self.results = results
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        parts = []
        for idx, details in enumerate(self.results):
            if details:
                parts.append(details[0].format(f"result[{idx}]"))
        return " | ".join(parts)

    @property
    def positions(self) -> List[int]:
        return [idx for idx, details in enumerate(self.results) if details]

    def __getitem__(self, idx: int) -> Optional[List[ErrorDetail]]:
        return self.results[idx]

    def __len__(self) -> int:
        return len(self.results)


class SessionRefreshError(IntacctError):
    """Raised when a stale session has no way to refresh itself."""

    code = ErrorCode.SESSION_REFRESH_ERROR


class PaginationError(IntacctError):
    """Raised when a continuation page violates the paging protocol."""

    code = ErrorCode.PAGINATION_ERROR


class ResultMapError(IntacctError):
    """Raised when a ResultMap path addresses the wrong kind of value."""

    code = ErrorCode.RESULT_MAP_ERROR
