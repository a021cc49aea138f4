"""FastAPI hosting for a router."""

from __future__ import annotations

from typing import Any, Awaitable, Callable

import httpx
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import Response

from contractrpc.config.access import get_settings
from contractrpc.server.pipeline import resolve
from contractrpc.server.router import Router

RequestContextFactory = Callable[[Request], Awaitable[Any] | Any]

# Verbs other than GET/POST are routed too so the router can answer
# METHOD_NOT_SUPPORTED in its own error format.
ROUTED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


def _no_context(_request: Request) -> None:
    return None


async def to_httpx_request(request: Request) -> httpx.Request:
    """Convert an incoming Starlette request into the router's wire type."""
    body = await request.body()
    return httpx.Request(
        request.method,
        str(request.url),
        headers=[(k.decode("latin-1"), v.decode("latin-1")) for k, v in request.headers.raw],
        content=body if request.method != "GET" else None,
    )


def request_pathname(path: str, procedure: str) -> str:
    """Everything in ``path`` before the procedure name.

    Include prefixes and ``root_path`` of enclosing mounts end up here too,
    not only the path given to :func:`mount_router`.
    """
    if procedure and path.endswith(procedure):
        path = path[: len(path) - len(procedure)]
    return path.rstrip("/")


def from_httpx_response(response: httpx.Response) -> Response:
    return Response(
        content=response.content,
        status_code=response.status_code,
        media_type=response.headers.get("content-type"),
    )


def mount_router(
    app: FastAPI | APIRouter,
    router: Router[Any],
    *,
    path: str | None = None,
    create_context: RequestContextFactory = _no_context,
) -> None:
    """Serve ``router`` under ``{path}/{procedure}``; path defaults to the configured mount path."""
    raw_path = path if path is not None else get_settings().mount_path
    mount_path = f"/{raw_path.strip('/')}" if raw_path.strip("/") else ""

    async def endpoint(request: Request, procedure: str) -> Response:
        context = await resolve(create_context(request))
        wire_request = await to_httpx_request(request)
        response = await router.process(
            pathname=request_pathname(wire_request.url.path, procedure),
            context=context,
            request=wire_request,
        )
        return from_httpx_response(response)

    app.add_api_route(
        f"{mount_path}/{{procedure:path}}",
        endpoint,
        methods=list(ROUTED_METHODS),
        include_in_schema=False,
    )


def create_asgi_app(
    router: Router[Any],
    *,
    path: str | None = None,
    create_context: RequestContextFactory = _no_context,
    title: str = "contractrpc",
) -> FastAPI:
    """Standalone FastAPI app with ``router`` mounted."""
    app = FastAPI(title=title)
    mount_router(app, router, path=path, create_context=create_context)
    return app
