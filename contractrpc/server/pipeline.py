"""Utilities for sequential procedure pipelines."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Iterable

from loguru import logger

from contractrpc.utils.exceptions import sanitize_error_message

MiddlewareStep = Callable[..., Awaitable[Any] | Any]
ErrorTap = Callable[[Any], Awaitable[None] | None]


async def resolve(outcome: Any) -> Any:
    """Await ``outcome`` when it is awaitable, otherwise return it."""
    return await outcome if inspect.isawaitable(outcome) else outcome


async def run_middleware_chain(steps: Iterable[MiddlewareStep], context: Any) -> Any:
    """Run steps in order, each receiving the previous step's context."""
    current = context
    for step in steps:
        current = await resolve(step(ctx=current))
    return current


async def invoke_error_tap(tap: ErrorTap | None, error: Any, *, source: str) -> None:
    """Call an observational error tap; its own failures are logged and dropped."""
    if tap is None:
        return
    try:
        await resolve(tap(error))
    except Exception as exc:
        logger.debug("Error tap on {} failed: {}", source, sanitize_error_message(str(exc)))
