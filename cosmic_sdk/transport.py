"""HTTP transport.

The client talks to the network only through :class:`HttpTransport`. The
default implementation wraps an aiohttp ``ClientSession``; tests or callers
with their own HTTP stack can pass any object with the same ``send``
signature.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, runtime_checkable

import aiohttp

from .exceptions import TransportError
from .helpers import redact_url
from .request_builder import PreparedRequest

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@runtime_checkable
class HttpTransport(Protocol):
    async def send(self, request: PreparedRequest) -> HttpResponse:
        """Perform one request. Raise TransportError on network failure."""
        ...

    async def close(self) -> None:
        ...


class AiohttpTransport:
    """aiohttp-backed transport with a lazily created session."""

    def __init__(self, timeout: float = 30.0, session: Optional[aiohttp.ClientSession] = None):
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None

    async def _ensure_session(self) -> None:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
            self._owns_session = True

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def send(self, request: PreparedRequest) -> HttpResponse:
        await self._ensure_session()
        data = self._encode_body(request)
        target = redact_url(request.url)
        try:
            async with self._session.request(request.method, request.url, headers=request.headers, data=data) as resp:
                body = await resp.read()
                log.debug(f"{request.method} {target} -> {resp.status}, {len(body)} bytes")
                return HttpResponse(status=resp.status, body=body, headers=dict(resp.headers))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.error(f"Request failed for {request.method} {target}: {e!r}")
            raise TransportError(f"Request failed for {request.method} {target}: {e!r}") from e

    @staticmethod
    def _encode_body(request: PreparedRequest):
        if not request.multipart:
            return request.body
        form = aiohttp.FormData()
        for part in request.multipart:
            form.add_field(
                part.name,
                part.content,
                filename=part.filename,
                content_type=part.content_type,
            )
        return form
