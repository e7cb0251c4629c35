"""HTTP transport used by LLM nodes.

The transport is the only component that touches the network. It issues one
request and hands back the status and raw body; it never interprets either.
TLS and timeouts are its concern, retries are nobody's.

Any object with an ``async send(request) -> HTTPResponse`` method can stand in
for the default ``AiohttpTransport``, which is how tests replace the network.
"""

import asyncio
from typing import Dict, Optional, Protocol, runtime_checkable
import aiohttp
from pydantic import BaseModel, Field

from llmgraph.core.logging import get_logger, LogComponent

logger = get_logger(LogComponent.TRANSPORT)


class HTTPRequest(BaseModel):
    """An outgoing HTTP request."""
    method: str = Field(default="POST")
    url: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes = Field(default=b"")


class HTTPResponse(BaseModel):
    """A received HTTP response."""
    status: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes = Field(default=b"")

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@runtime_checkable
class Transport(Protocol):
    """Protocol for sending a single HTTP request."""

    async def send(self, request: HTTPRequest) -> HTTPResponse:
        ...


class AiohttpTransport:
    """Transport backed by an ``aiohttp.ClientSession``.

    A session is opened per request unless one is supplied, so the transport
    holds no state between runs.

    Args:
        timeout: Total timeout in seconds for one request
        session: Optional externally managed session (left open on exit)
    """

    def __init__(self, timeout: Optional[float] = None, session: Optional[aiohttp.ClientSession] = None):
        self.timeout = timeout
        self._session = session

    async def send(self, request: HTTPRequest) -> HTTPResponse:
        """Send the request and read the whole body.

        Raises:
            aiohttp.ClientError: On connection or protocol errors
            asyncio.TimeoutError: When the configured timeout elapses
        """
        timeout = aiohttp.ClientTimeout(total=self.timeout) if self.timeout else None
        logger.debug(f"{request.method} {request.url} ({len(request.body)} bytes)")

        if self._session is not None:
            return await self._send(self._session, request, timeout)

        async with aiohttp.ClientSession() as session:
            return await self._send(session, request, timeout)

    async def _send(
        self,
        session: aiohttp.ClientSession,
        request: HTTPRequest,
        timeout: Optional[aiohttp.ClientTimeout]
    ) -> HTTPResponse:
        kwargs = {"headers": request.headers, "data": request.body}
        if timeout is not None:
            kwargs["timeout"] = timeout

        async with session.request(request.method, request.url, **kwargs) as response:
            body = await response.read()
            logger.debug(f"HTTP {response.status} from {request.url} ({len(body)} bytes)")
            return HTTPResponse(
                status=response.status,
                headers=dict(response.headers),
                body=body
            )


TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)
