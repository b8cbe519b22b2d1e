"""Authentication, execution, transport and function builders."""

from intacct.services.auth import (
    Authenticator,
    Login,
    ResponseObserver,
    Session,
    SessionID,
    login_session_refresher,
)
from intacct.services.functions import (
    Function,
    Inspector,
    ReadKind,
    Reader,
    Writer,
    create,
    delete,
    get_api_session,
    get_dimension_autofill_details,
    get_dimension_relationships,
    get_dimension_restricted_data,
    get_dimensions,
    get_financial_setup,
    install_app,
    object_fields,
    object_list,
    read,
    read_by_name,
    read_by_query,
    read_more,
    read_related,
    update,
)
from intacct.services.pagination import fetch_all
from intacct.services.query import Filter, Lookup, OrderBy, Query, QueryOptions, QuerySort, Select
from intacct.services.service import (
    AuthenticationConfig,
    LoginConfig,
    Service,
    SessionConfig,
    service_from_config,
    service_from_config_json,
    service_from_settings,
)
from intacct.services.transport import Transport

__all__ = [
    "Authenticator",
    "Login",
    "ResponseObserver",
    "Session",
    "SessionID",
    "login_session_refresher",
    "Function",
    "Inspector",
    "ReadKind",
    "Reader",
    "Writer",
    "create",
    "delete",
    "get_api_session",
    "get_dimension_autofill_details",
    "get_dimension_relationships",
    "get_dimension_restricted_data",
    "get_dimensions",
    "get_financial_setup",
    "install_app",
    "object_fields",
    "object_list",
    "read",
    "read_by_name",
    "read_by_query",
    "read_more",
    "read_related",
    "update",
    "fetch_all",
    "Filter",
    "Lookup",
    "OrderBy",
    "Query",
    "QueryOptions",
    "QuerySort",
    "Select",
    "AuthenticationConfig",
    "LoginConfig",
    "Service",
    "SessionConfig",
    "service_from_config",
    "service_from_config_json",
    "service_from_settings",
    "Transport",
]
