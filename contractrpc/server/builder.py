"""Fluent, immutable procedure builder.

Every setter returns a new builder, so chains that share a prefix never
interfere with each other. ``query``/``mutation`` freeze the current
configuration into a :class:`Procedure` whose callable runs:

1. input validation (PARSE_ERROR with issues on failure),
2. the middleware chain, in declaration order,
3. the handler (failures classified, tapped, re-raised),
4. output validation (PARSE_ERROR with issues on failure).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

from loguru import logger

from contractrpc.core.contracts import (
    MiddlewareHandler,
    MockHandler,
    Procedure,
    ProcedureContract,
    ProcedureHandler,
    ProcedureMethod,
    Result,
)
from contractrpc.core.error_codes import RPCErrorCode
from contractrpc.core.schema import parse_with_schema
from contractrpc.server.pipeline import ErrorTap, invoke_error_tap, resolve, run_middleware_chain
from contractrpc.utils.exceptions import ConfigurationError, RPCError, to_rpc_error

ContextT = TypeVar("ContextT")


async def _capture(target: Any, context: Any, input: Any) -> Result[Any, RPCError]:
    """Run ``target.call`` and return failures as values.

    Configuration errors stay fatal; anything else that is not already an
    RPCError (e.g. a failing middleware step) is classified.
    """
    try:
        return Result.success(await target.call(context, input))
    except ConfigurationError:
        raise
    except RPCError as exc:
        return Result.failure(exc)
    except Exception as exc:
        return Result.failure(to_rpc_error(exc, procedure=target.contract.name, input=input))


@dataclass(frozen=True, slots=True)
class ValidatingCallable:
    """Validating pipeline bound to one procedure."""

    contract: ProcedureContract
    handler: ProcedureHandler
    middlewares: tuple[MiddlewareHandler, ...] = ()
    error_tap: ErrorTap | None = None

    async def call(self, context: Any, input: Any) -> Any:
        name = self.contract.name
        parsed_input = parse_with_schema(self.contract.input_schema, input)
        if not parsed_input.success:
            raise RPCError(
                RPCErrorCode.PARSE_ERROR,
                "Error parsing input",
                issues=parsed_input.issues,
                procedure=name,
            )

        ctx = await run_middleware_chain(self.middlewares, context)

        try:
            output = await resolve(self.handler(ctx=ctx, input=parsed_input.value))
        except Exception as exc:
            error = to_rpc_error(exc, procedure=name, input=parsed_input.value)
            await invoke_error_tap(self.error_tap, error, source=f"procedure {name}")
            raise error from exc

        parsed_output = parse_with_schema(self.contract.output_schema, output)
        if not parsed_output.success:
            raise RPCError(
                RPCErrorCode.PARSE_ERROR,
                "Error parsing output",
                issues=parsed_output.issues,
                procedure=name,
                input=parsed_input.value,
            )
        return parsed_output.value

    async def try_call(self, context: Any, input: Any) -> Result[Any, RPCError]:
        return await _capture(self, context, input)


@dataclass(frozen=True, slots=True)
class MockCallable:
    """Callable that skips validation and middleware and just runs the handler."""

    contract: ProcedureContract
    handler: MockHandler

    async def call(self, context: Any, input: Any) -> Any:
        return await resolve(self.handler(input))

    async def try_call(self, context: Any, input: Any) -> Result[Any, RPCError]:
        return await _capture(self, context, input)


@dataclass(frozen=True, slots=True)
class ProcedureBuilder(Generic[ContextT]):
    """Immutable snapshot of a procedure configuration."""

    procedure_name: str | None = None
    input_schema: Any = None
    output_schema: Any = None
    middlewares: tuple[MiddlewareHandler, ...] = ()
    error_tap: ErrorTap | None = None

    def name(self, name: str) -> ProcedureBuilder[ContextT]:
        return replace(self, procedure_name=name)

    def input(self, schema: Any) -> ProcedureBuilder[ContextT]:
        return replace(self, input_schema=schema)

    def output(self, schema: Any) -> ProcedureBuilder[ContextT]:
        return replace(self, output_schema=schema)

    def use(self, middleware: MiddlewareHandler) -> ProcedureBuilder[Any]:
        return replace(self, middlewares=(*self.middlewares, middleware))

    def tap_on_error(self, tap: ErrorTap) -> ProcedureBuilder[ContextT]:
        return replace(self, error_tap=tap)

    def query(self, handler: ProcedureHandler) -> Procedure[Any, Any]:
        return self._build(ProcedureMethod.QUERY, handler)

    def mutation(self, handler: ProcedureHandler) -> Procedure[Any, Any]:
        return self._build(ProcedureMethod.MUTATION, handler)

    def query_contract(self) -> ProcedureContract:
        return self._contract(ProcedureMethod.QUERY)

    def mutation_contract(self) -> ProcedureContract:
        return self._contract(ProcedureMethod.MUTATION)

    def mock(self, handler: MockHandler, kind: str = "query") -> Procedure[Any, Any]:
        """Stub procedure: no validation, no middleware, ``handler(input)`` only."""
        contract = self._contract(ProcedureMethod.from_kind(kind))
        logger.debug("Built mocked procedure {} ({})", contract.name, contract.method.value)
        return Procedure(contract=contract, callable=MockCallable(contract, handler), mocked=True)

    def _contract(self, method: ProcedureMethod) -> ProcedureContract:
        if not self.procedure_name:
            raise ConfigurationError("Procedure name is not set")
        return ProcedureContract(
            name=self.procedure_name,
            method=method,
            input_schema=self.input_schema,
            output_schema=self.output_schema,
        )

    def _build(self, method: ProcedureMethod, handler: ProcedureHandler) -> Procedure[Any, Any]:
        contract = self._contract(method)
        procedure_callable = ValidatingCallable(
            contract=contract,
            handler=handler,
            middlewares=self.middlewares,
            error_tap=self.error_tap,
        )
        return Procedure(contract=contract, callable=procedure_callable, mocked=False)


def make_procedure_builder() -> ProcedureBuilder[Any]:
    return ProcedureBuilder()
