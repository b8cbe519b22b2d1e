"""Request executor.

Service batches function calls into one request document, posts it and
parses the response:

    async with Service(sender_id, sender_pwd, Login("user", "company", "pw")) as service:
        response = await service.exec(read("VENDOR", "V100"), read_by_name("PROJECT", "P1"))
        vendors, projects = ListOf(Vendor), ListOf(Project)
        response.decode(vendors, projects)

A request the gateway refused outright raises ControlError or
OperationError; the parsed Response is attached to the exception.
"""

import logging
import time
from datetime import datetime
from typing import Callable, Optional, Sequence, Union

from pydantic import BaseModel, ValidationError

from intacct.core.config import Settings, settings
from intacct.core.errors import ConfigurationError
from intacct.core.logging import LoggerAdapter
from intacct.models.request import Control, ControlConfig, Request, RequestFunction
from intacct.models.response import Response
from intacct.services.auth import (
    Authenticator,
    Login,
    ResponseObserver,
    Session,
    SessionID,
    login_session_refresher,
)
from intacct.services.functions import Function
from intacct.services.transport import Transport

logger = logging.getLogger(__name__)

ControlIDFunc = Callable[[], str]


def monotonic_control_id() -> str:
    """Default control id: the monotonic clock in hex."""
    return f"{time.monotonic_ns():x}"


class Service:
    """Executes batches of functions against the gateway.

    Args:
        sender_id: Web Services sender id
        password: Web Services sender password
        authenticator: Login, SessionID or Session
        control_id_func: generates request control ids; set it for
            reproducible requests in tests
        transport: shared Transport; when omitted the service creates one
            and closes it with the service
    """

    def __init__(
        self,
        sender_id: str,
        password: str,
        authenticator: Optional[Authenticator],
        *,
        control_id_func: Optional[ControlIDFunc] = None,
        transport: Optional[Transport] = None,
        dtd_version: Optional[str] = None,
    ):
        self.sender_id = sender_id
        self.password = password
        self.authenticator = authenticator
        self.control_id_func = control_id_func or monotonic_control_id
        self.dtd_version = dtd_version or settings.dtd_version
        self._owns_transport = transport is None
        self.transport = transport or Transport()

    async def close(self) -> None:
        if self._owns_transport:
            await self.transport.close()

    async def __aenter__(self) -> "Service":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def endpoint(self) -> str:
        if self.authenticator is None:
            return settings.endpoint
        return self.authenticator.endpoint

    def _validate(self, functions: Sequence[Function]) -> None:
        if self.authenticator is None:
            raise ConfigurationError("no authenticator specified")
        if not self.sender_id or not self.password:
            raise ConfigurationError("sender id or sender password is empty")
        if not functions:
            raise ConfigurationError("no functions specified")

    def control(self, cc: Optional[ControlConfig] = None) -> Control:
        """Build the request header for cc."""
        cc = cc or ControlConfig()
        return Control(
            sender_id=self.sender_id,
            password=self.password,
            control_id=cc.control_id or self.control_id_func(),
            unique_id=cc.is_unique,
            dtd_version=cc.dtd_version or self.dtd_version,
            policy_id=cc.policy_id,
            debug=cc.debug,
            include_whitespace=cc.include_whitespace,
        )

    async def build_request(
        self,
        cc: Optional[ControlConfig],
        functions: Sequence[Function],
        control: Optional[Control] = None,
    ) -> bytes:
        """Serialize a request document; may refresh a stale session."""
        self._validate(functions)
        cc = cc or ControlConfig()
        control = control or self.control(cc)
        auth = await self.authenticator.get_auth_element()
        request = Request(
            control=control,
            auth=auth,
            functions=[
                RequestFunction(
                    control_id=getattr(f, "control_id", "") or control.control_id,
                    payload=f.to_element(),
                )
                for f in functions
            ],
            is_transaction=cc.is_transaction,
            company_prefs=cc.company_prefs,
            module_prefs=cc.module_prefs,
        )
        return request.to_bytes()

    async def exec(self, *functions: Function) -> Response:
        """Execute functions with the default control settings."""
        return await self.exec_with_control(None, *functions)

    async def exec_with_control(self, cc: Optional[ControlConfig], *functions: Function) -> Response:
        """Execute functions in one request.

        Raises:
            ConfigurationError: missing authenticator, credentials or functions
            TransportError: the request could not be delivered
            ResponseParseError: the response is not XML
            ControlError, OperationError: the gateway executed nothing
        """
        self._validate(functions)
        control = self.control(cc)
        log = LoggerAdapter(logger, {"controlid": control.control_id})

        body = await self.build_request(cc, functions, control=control)
        endpoint = self.endpoint
        log.debug(f"Posting {len(functions)} function(s) to {endpoint}")
        raw = await self.transport.post(endpoint, body)
        response = Response.from_xml(raw)

        if isinstance(self.authenticator, ResponseObserver):
            await self.authenticator.check_response(response)

        error = response.exec_error()
        if error is not None:
            log.warning(f"Request rejected: {error}")
            raise error
        log.debug(f"Received {len(response.results)} result(s)")
        return response


# =============================================================================
# Configuration
# =============================================================================


class LoginConfig(BaseModel):
    user_id: str
    company: str
    password: str
    client_id: str = ""
    location_id: str = ""


class SessionConfig(BaseModel):
    session_id: str = ""
    endpoint: str = ""
    location_id: str = ""
    expires: Optional[datetime] = None
    expiry_delta: float = 0  # seconds


class AuthenticationConfig(BaseModel):
    """Credentials for building a Service."""

    sender_id: str = ""
    sender_pwd: str = ""
    login: Optional[LoginConfig] = None
    session: Optional[SessionConfig] = None


def service_from_config(
    cfg: AuthenticationConfig,
    *,
    transport: Optional[Transport] = None,
    control_id_func: Optional[ControlIDFunc] = None,
) -> Service:
    """Build a Service from cfg.

    A session block yields a Session authenticator, refreshed through the
    login when one is given. Otherwise the login is sent with each request.
    """
    login = Login(**cfg.login.model_dump()) if cfg.login is not None else None
    authenticator: Authenticator
    if cfg.session is not None:
        refresher = None
        if login is not None:
            refresher = login_session_refresher(
                cfg.sender_id,
                cfg.sender_pwd,
                login,
                transport=transport,
                control_id_func=control_id_func,
            )
        authenticator = Session(
            session_id=cfg.session.session_id,
            endpoint=cfg.session.endpoint,
            location_id=cfg.session.location_id,
            expires=cfg.session.expires,
            expiry_delta=cfg.session.expiry_delta,
            refresher=refresher,
        )
    elif login is not None:
        authenticator = login
    else:
        raise ConfigurationError("a sessionid or login must be specified")

    return Service(
        cfg.sender_id,
        cfg.sender_pwd,
        authenticator,
        control_id_func=control_id_func,
        transport=transport,
    )


def service_from_config_json(
    data: Union[str, bytes],
    *,
    transport: Optional[Transport] = None,
    control_id_func: Optional[ControlIDFunc] = None,
) -> Service:
    """Build a Service from a JSON AuthenticationConfig document."""
    try:
        cfg = AuthenticationConfig.model_validate_json(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid authentication config: {e}") from e
    return service_from_config(cfg, transport=transport, control_id_func=control_id_func)


def service_from_settings(
    source: Optional[Settings] = None,
    *,
    transport: Optional[Transport] = None,
    control_id_func: Optional[ControlIDFunc] = None,
) -> Service:
    """Build a Service from INTACCT_* settings.

    INTACCT_SESSION_ID alone is sent as a fixed session token. Together
    with INTACCT_USER_ID it seeds a session that is refreshed through the
    login settings.
    """
    source = source or settings
    if source.session_id and not source.user_id:
        return Service(
            source.sender_id,
            source.sender_password,
            SessionID(source.session_id, endpoint=source.endpoint),
            control_id_func=control_id_func,
            transport=transport,
        )
    cfg = AuthenticationConfig(sender_id=source.sender_id, sender_pwd=source.sender_password)
    if source.user_id:
        cfg.login = LoginConfig(
            user_id=source.user_id,
            company=source.company_id,
            password=source.user_password,
            client_id=source.client_id,
            location_id=source.location_id,
        )
    if source.session_id is not None:
        cfg.session = SessionConfig(
            session_id=source.session_id,
            endpoint=source.endpoint,
            location_id=source.location_id,
            expiry_delta=source.session_expiry_delta,
        )
    return service_from_config(cfg, transport=transport, control_id_func=control_id_func)
