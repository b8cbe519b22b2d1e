"""Pytest configuration and fixtures for tests.

Provides a fake gateway built on httpx.MockTransport plus builders for
response documents.
"""

from typing import List, Optional, Sequence, Union
from xml.etree import ElementTree as ET

import httpx
import pytest
import pytest_asyncio

from intacct.services.auth import Authenticator, Login
from intacct.services.service import Service
from intacct.services.transport import Transport

SENDER_ID = "test-sender"
SENDER_PASSWORD = "test-sender-pw"
ENDPOINT = "https://gateway.example.com/ia/xml/xmlgw.phtml"


# =============================================================================
# Response builders
# =============================================================================


def error_xml(errorno: str, description: str = "", description2: str = "", correction: str = "") -> str:
    return (
        "<error>"
        f"<errorno>{errorno}</errorno>"
        f"<description>{description}</description>"
        f"<description2>{description2}</description2>"
        f"<correction>{correction}</correction>"
        "</error>"
    )


def result_xml(
    payload: str = "",
    function: str = "read",
    control_id: str = "ctl",
    count: Optional[int] = None,
    num_remaining: int = 0,
    result_id: str = "",
    list_type: str = "",
    with_data: bool = True,
) -> str:
    """A successful result carrying payload in its data element."""
    data = ""
    if with_data:
        count = count if count is not None else _top_level_count(payload)
        data = (
            f'<data listtype="{list_type}" count="{count}" totalcount="{count + num_remaining}" '
            f'numremaining="{num_remaining}" resultId="{result_id}">{payload}</data>'
        )
    return (
        "<result>"
        "<status>success</status>"
        f"<function>{function}</function>"
        f"<controlid>{control_id}</controlid>"
        f"{data}"
        "</result>"
    )


def failed_result_xml(*errors: str, function: str = "read", control_id: str = "ctl") -> str:
    return (
        "<result>"
        "<status>failure</status>"
        f"<function>{function}</function>"
        f"<controlid>{control_id}</controlid>"
        f"<errormessage>{''.join(errors)}</errormessage>"
        "</result>"
    )


def response_xml(
    *results: str,
    control_status: str = "success",
    top_errors: Sequence[str] = (),
    operation_errors: Sequence[str] = (),
    session_timeout: str = "",
    with_operation: bool = True,
) -> bytes:
    control = (
        "<control>"
        f"<status>{control_status}</status>"
        f"<senderid>{SENDER_ID}</senderid>"
        "<controlid>ctl</controlid>"
        "<uniqueid>false</uniqueid>"
        "<dtdversion>3.0</dtdversion>"
        "</control>"
    )
    top = f"<errormessage>{''.join(top_errors)}</errormessage>" if top_errors else ""
    operation = ""
    if with_operation:
        body = (
            f"<errormessage>{''.join(operation_errors)}</errormessage>"
            if operation_errors
            else "".join(results)
        )
        operation = (
            "<operation>"
            "<authentication>"
            "<status>success</status>"
            "<userid>user</userid>"
            "<companyid>company</companyid>"
            "<locationid></locationid>"
            "<sessiontimestamp>2026-10-18T09:00:00+00:00</sessiontimestamp>"
            f"<sessiontimeout>{session_timeout}</sessiontimeout>"
            "</authentication>"
            f"{body}"
            "</operation>"
        )
    doc = f'<?xml version="1.0" encoding="UTF-8"?><response>{control}{top}{operation}</response>'
    return doc.encode("utf-8")


def _top_level_count(payload: str) -> int:
    if not payload:
        return 0
    return len(ET.fromstring(f"<root>{payload}</root>"))


# =============================================================================
# Fake gateway
# =============================================================================


class FakeGateway:
    """Answers each POST with the next queued body and records the request."""

    def __init__(self, *responses: Union[bytes, httpx.Response]):
        self.responses: List[Union[bytes, httpx.Response]] = list(responses)
        self.requests: List[httpx.Request] = []
        self.clients: List[httpx.AsyncClient] = []

    def queue(self, *responses: Union[bytes, httpx.Response]) -> None:
        self.responses.extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            return httpx.Response(500, text="no response queued")
        response = self.responses.pop(0)
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, content=response, headers={"Content-Type": "application/xml"})

    def transport(self, **kwargs) -> Transport:
        client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        self.clients.append(client)
        return Transport(client=client, **kwargs)

    async def aclose(self) -> None:
        for client in self.clients:
            await client.aclose()

    def request_xml(self, idx: int = -1) -> ET.Element:
        return ET.fromstring(self.requests[idx].content)

    @property
    def call_count(self) -> int:
        return len(self.requests)


class StaticLogin(Login):
    """Login with a fixed endpoint for tests."""

    @property
    def endpoint(self) -> str:
        return ENDPOINT


def counter_ids(prefix: str = "id"):
    """Deterministic control id generator."""
    state = {"n": 0}

    def next_id() -> str:
        state["n"] += 1
        return f"{prefix}-{state['n']}"

    return next_id


def make_service(
    gateway: FakeGateway,
    authenticator: Optional[Authenticator] = None,
    **kwargs,
) -> Service:
    if authenticator is None:
        authenticator = StaticLogin("user", "company", "user-pw")
    kwargs.setdefault("control_id_func", counter_ids())
    return Service(
        SENDER_ID,
        SENDER_PASSWORD,
        authenticator,
        transport=gateway.transport(),
        **kwargs,
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def gateway():
    """An empty fake gateway; queue responses in the test."""
    fake = FakeGateway()
    yield fake
    await fake.aclose()


@pytest.fixture
def service(gateway):
    """A login-authenticated service talking to the fake gateway."""
    return make_service(gateway)
