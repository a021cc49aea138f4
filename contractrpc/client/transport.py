"""Client transports: async callables from ``httpx.Request`` to ``httpx.Response``."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

import httpx

from contractrpc.config.access import get_settings

Transport = Callable[[httpx.Request], Awaitable[httpx.Response]]


class HttpxTransport:
    """Send requests through an ``httpx.AsyncClient`` (owned unless injected)."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float | None = None):
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout if timeout is not None else get_settings().client_timeout

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        client = await self._get_client()
        response = await client.send(request)
        await response.aread()
        return response

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def router_transport(router: Any, *, pathname: str, context: Any = None) -> Transport:
    """In-process transport that hands requests straight to ``router.process``."""

    async def transport(request: httpx.Request) -> httpx.Response:
        return await router.process(pathname=pathname, context=context, request=request)

    return transport
