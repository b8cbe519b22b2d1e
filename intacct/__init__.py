"""Async client for the Sage Intacct XML gateway."""

from intacct.core.errors import (
    ConfigurationError,
    ControlError,
    ErrorCode,
    ErrorDetail,
    HTTPStatusError,
    IntacctError,
    OperationError,
    PaginationError,
    ResponseParseError,
    ResultMapError,
    ResultsError,
    SessionRefreshError,
    TransportError,
)
from intacct.models import ControlConfig, ListOf, One, Preference, Response, ResultMap, XMLModel
from intacct.services import (
    Filter,
    Login,
    Query,
    Select,
    Service,
    Session,
    SessionID,
    fetch_all,
    service_from_config,
    service_from_config_json,
    service_from_settings,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ControlError",
    "ErrorCode",
    "ErrorDetail",
    "HTTPStatusError",
    "IntacctError",
    "OperationError",
    "PaginationError",
    "ResponseParseError",
    "ResultMapError",
    "ResultsError",
    "SessionRefreshError",
    "TransportError",
    "ControlConfig",
    "ListOf",
    "One",
    "Preference",
    "Response",
    "ResultMap",
    "XMLModel",
    "Filter",
    "Login",
    "Query",
    "Select",
    "Service",
    "Session",
    "SessionID",
    "fetch_all",
    "service_from_config",
    "service_from_config_json",
    "service_from_settings",
]
