"""In-process invocation of procedures with a fresh context per call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from contractrpc.core.contracts import Procedure, Result
from contractrpc.server.pipeline import resolve
from contractrpc.utils.exceptions import RPCError

ContextFactory = Callable[[], Awaitable[Any] | Any]


@dataclass(frozen=True, slots=True)
class DirectCaller:
    procedure: Procedure[Any, Any]
    create_context: ContextFactory

    async def call(self, input: Any = None) -> Any:
        context = await resolve(self.create_context())
        return await self.procedure.callable.call(context, input)

    async def try_call(self, input: Any = None) -> Result[Any, RPCError]:
        context = await resolve(self.create_context())
        return await self.procedure.callable.try_call(context, input)


def make_direct_caller(create_context: ContextFactory) -> Callable[[Procedure[Any, Any]], DirectCaller]:
    """Return ``direct(procedure)`` bound to ``create_context``."""

    def direct(procedure: Procedure[Any, Any]) -> DirectCaller:
        return DirectCaller(procedure=procedure, create_context=create_context)

    return direct
