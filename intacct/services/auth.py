"""Authenticators: the credential element embedded in every request.

Login sends the user's credentials with each request. SessionID sends a
pre-issued session token. Session caches a token and refreshes it through
an injected refresher when it goes stale:

    refresher = login_session_refresher(sender_id, sender_pwd, Login("u", "co", "pw"))
    session = Session(refresher=refresher, expiry_delta=60)
    async with Service(sender_id, sender_pwd, session) as service:
        response = await service.exec(read("VENDOR"))

A Session is safe to share between tasks. One asyncio.Lock guards the
token state and the refresh itself, so concurrent callers of a stale
session wait for a single refresh and then reuse its token.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Protocol, Union, runtime_checkable
from xml.etree import ElementTree as ET

from intacct.core.config import settings
from intacct.core.errors import ConfigurationError, SessionRefreshError
from intacct.core.xmlcodec import sub_element
from intacct.models.results import SessionResult

if TYPE_CHECKING:
    from intacct.models.response import Response
    from intacct.services.transport import Transport

logger = logging.getLogger(__name__)

SessionRefresher = Callable[[], Awaitable[SessionResult]]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Authenticator(ABC):
    """Supplies the credential element of a request."""

    @abstractmethod
    async def get_auth_element(self) -> ET.Element:
        """Return the element placed inside ``authentication``."""

    @property
    def endpoint(self) -> str:
        """Gateway URL requests using this authenticator are sent to."""
        return settings.endpoint


@runtime_checkable
class ResponseObserver(Protocol):
    """An authenticator that wants to see every parsed response."""

    async def check_response(self, response: "Response") -> None:
        ...


class Login(Authenticator):
    """User credentials sent with each request."""

    def __init__(
        self,
        user_id: str,
        company: str,
        password: str,
        client_id: str = "",
        location_id: str = "",
    ):
        self.user_id = user_id
        self.company = company
        self.password = password
        self.client_id = client_id
        self.location_id = location_id

    async def get_auth_element(self) -> ET.Element:
        element = ET.Element("login")
        sub_element(element, "userid", self.user_id)
        sub_element(element, "companyid", self.company)
        sub_element(element, "password", self.password)
        if self.client_id:
            sub_element(element, "clientid", self.client_id)
        if self.location_id:
            sub_element(element, "locationid", self.location_id)
        return element

    def __repr__(self) -> str:
        return f"Login(user_id={self.user_id!r}, company={self.company!r})"


class SessionID(Authenticator):
    """A pre-issued session token."""

    def __init__(self, token: str, endpoint: str = ""):
        if not token:
            raise ConfigurationError("session id is empty")
        self.token = token
        self._endpoint = endpoint

    async def get_auth_element(self) -> ET.Element:
        element = ET.Element("sessionid")
        element.text = self.token
        return element

    @property
    def endpoint(self) -> str:
        return self._endpoint or settings.endpoint


class Session(Authenticator):
    """A cached session token, refreshed when stale.

    The token is stale when it is empty or once ``clock() + expiry_delta``
    reaches the expiry. A token with no known expiry is sent as is, so a
    pre-issued token works without a refresher. Responses seen by the
    service move the expiry forward, never back.
    """

    def __init__(
        self,
        session_id: str = "",
        endpoint: str = "",
        location_id: str = "",
        expires: Optional[datetime] = None,
        expiry_delta: Union[int, float, timedelta] = 0,
        refresher: Optional[SessionRefresher] = None,
        clock: Optional[Clock] = None,
    ):
        self.session_id = session_id
        self._endpoint = endpoint
        self.location_id = location_id
        self.expires = expires
        if not isinstance(expiry_delta, timedelta):
            expiry_delta = timedelta(seconds=expiry_delta)
        self.expiry_delta = expiry_delta
        self.refresher = refresher
        self.clock = clock or utc_now
        self._lock = asyncio.Lock()

    @property
    def endpoint(self) -> str:
        return self._endpoint or settings.endpoint

    def is_stale(self) -> bool:
        if not self.session_id:
            return True
        if self.expires is None:
            return False
        return self.clock() + self.expiry_delta >= self.expires

    async def get_auth_element(self) -> ET.Element:
        async with self._lock:
            if self.is_stale():
                await self._refresh()
            token = self.session_id
        element = ET.Element("sessionid")
        element.text = token
        return element

    async def refresh(self) -> None:
        """Fetch a new token now, whether or not the current one is stale."""
        async with self._lock:
            await self._refresh()

    async def _refresh(self) -> None:
        # caller holds self._lock
        if self.refresher is None:
            raise SessionRefreshError("expired session, no refresher configured")
        logger.info(f"Refreshing session (expired at {self.expires})")
        result = await self.refresher()
        self.session_id = result.session_id
        self._endpoint = result.endpoint
        self.location_id = result.location_id
        self.expires = result.expires
        logger.info(f"Session refreshed, expires at {self.expires}")

    async def check_response(self, response: "Response") -> None:
        timeout = response.auth.session_timeout if response.auth is not None else None
        if timeout is None:
            return
        async with self._lock:
            if self.expires is None or timeout > self.expires:
                logger.debug(f"Session expiry advanced from {self.expires} to {timeout}")
                self.expires = timeout

    def __repr__(self) -> str:
        return f"Session(endpoint={self.endpoint!r}, expires={self.expires})"


def login_session_refresher(
    sender_id: str,
    password: str,
    login: Login,
    *,
    transport: Optional["Transport"] = None,
    control_id_func: Optional[Callable[[], str]] = None,
) -> SessionRefresher:
    """Build a refresher that logs in and calls getAPISession.

    The refresher holds no reference to the Session it feeds.
    """
    from intacct.models.bindings import One
    from intacct.services.functions import Writer, get_api_session
    from intacct.services.service import Service

    async def refresh() -> SessionResult:
        function = get_api_session(login.location_id) if login.location_id else Writer("getAPISession")
        async with Service(
            sender_id,
            password,
            login,
            transport=transport,
            control_id_func=control_id_func,
        ) as service:
            response = await service.exec(function)
        target = One(SessionResult)
        response.decode(target)
        if target.value is None:
            raise SessionRefreshError("getAPISession returned no session")
        result = target.value
        result.expires = response.auth.session_timeout if response.auth is not None else None
        return result

    return refresh
