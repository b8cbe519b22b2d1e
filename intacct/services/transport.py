"""HTTP delivery of request documents.

Transport posts a serialized request to the gateway and returns the raw
response body. It owns timeouts and the connection retry policy; everything
above it deals only in bytes.
"""

import asyncio
import logging
from typing import Optional

import httpx

from intacct.core.config import settings
from intacct.core.errors import HTTPStatusError, TransportError

logger = logging.getLogger(__name__)

XML_CONTENT_TYPE = "application/xml"


class Transport:
    """Posts XML documents with an httpx.AsyncClient.

    A client passed in is used as-is and left open on close(); otherwise
    one is created on first use and closed with the transport.

    Only connection failures are retried, since the request never reached
    the gateway. Server errors and read timeouts are raised at once: a
    posted batch may already have been applied.

    Example:
        ```python
        async with Transport(max_retries=2) as transport:
            body = await transport.post(endpoint, request_bytes)
        ```
    """

    INITIAL_RETRY_DELAY = 1.0  # seconds
    MAX_RETRY_DELAY = 30.0  # seconds

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.max_retries = max_retries if max_retries is not None else settings.max_retries
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or (self._owns_client and self._client.is_closed):
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": XML_CONTENT_TYPE},
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def post(self, url: str, body: bytes) -> bytes:
        """POST body to url and return the response body.

        Raises:
            TransportError: the request could not be delivered
            HTTPStatusError: the gateway answered with a non-2xx status
        """
        client = await self._get_client()
        last_exception: Optional[TransportError] = None

        for attempt in range(self.max_retries + 1):
            try:
                response = await client.post(
                    url,
                    content=body,
                    headers={"Content-Type": XML_CONTENT_TYPE},
                )
            except (httpx.ConnectError, httpx.ConnectTimeout) as e:
                last_exception = TransportError(f"Cannot connect to {url}: {e}")
                if attempt < self.max_retries:
                    delay = min(
                        self.INITIAL_RETRY_DELAY * (2 ** attempt),
                        self.MAX_RETRY_DELAY,
                    )
                    logger.warning(
                        f"Connection failed, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{self.max_retries + 1}): {e}"
                    )
                    await asyncio.sleep(delay)
                    continue
                raise last_exception from e
            except httpx.TimeoutException as e:
                raise TransportError(f"Request to {url} timed out: {e}") from e
            except httpx.HTTPError as e:
                raise TransportError(f"Request to {url} failed: {e}") from e

            if not response.is_success:
                raise HTTPStatusError(response.status_code, response.text)
            return response.content

        # max_retries < 0 leaves the loop without a request
        raise last_exception or TransportError(f"No request sent to {url}")
