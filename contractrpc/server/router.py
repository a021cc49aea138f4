"""Procedure registry and request dispatch over ``httpx`` request/response objects."""

from __future__ import annotations

from typing import Any, Generic, TypeVar
from urllib.parse import unquote

import httpx
from loguru import logger

from contractrpc.config.access import get_settings
from contractrpc.core.contracts import Procedure, RouterErrorDetails
from contractrpc.core.schema import schema_to_json_schema
from contractrpc.core.serialization import parse, stringify
from contractrpc.server.error_boundary import (
    classify_failure,
    error_response_body,
    method_not_supported_error,
    success_response_body,
    unknown_procedure_error,
)
from contractrpc.server.pipeline import ErrorTap, invoke_error_tap
from contractrpc.utils.exceptions import ConfigurationError, sanitize_error_message

ContextT = TypeVar("ContextT")

CONTENT_TYPE = "application/json"
INPUT_QUERY_PARAM = "input"


class Router(Generic[ContextT]):
    """Name -> procedure registry that turns requests into wire responses.

    Registration is expected to finish before concurrent dispatch starts;
    the registry is not locked. Registering a name twice replaces the
    earlier procedure.
    """

    def __init__(self, *, production: bool | None = None):
        self._procedures: dict[str, Procedure[Any, Any]] = {}
        self._error_tap: ErrorTap | None = None
        self._production = production

    @property
    def production(self) -> bool:
        if self._production is not None:
            return self._production
        return get_settings().is_production

    def tap_on_error(self, tap: ErrorTap) -> Router[ContextT]:
        self._error_tap = tap
        return self

    def register(self, procedure: Procedure[Any, Any]) -> Router[ContextT]:
        if not isinstance(procedure, Procedure):
            raise ConfigurationError("Only built procedures can be registered", value=repr(procedure))
        if procedure.name in self._procedures:
            logger.debug("Replacing procedure {}", procedure.name)
        self._procedures[procedure.name] = procedure
        logger.debug("Registered procedure {} ({})", procedure.name, procedure.method.value)
        return self

    def resolve(self, name: str) -> Procedure[Any, Any]:
        procedure = self._procedures.get(name)
        if procedure is None:
            raise unknown_procedure_error(name)
        return procedure

    def procedures(self) -> list[Procedure[Any, Any]]:
        return list(self._procedures.values())

    def __contains__(self, name: object) -> bool:
        return name in self._procedures

    def __len__(self) -> int:
        return len(self._procedures)

    def _parse_procedure(self, pathname: str, request: httpx.Request) -> Procedure[Any, Any]:
        path = request.url.path
        if pathname and path.startswith(pathname):
            path = path[len(pathname):]
        name = path.removeprefix("/").removesuffix("/")
        return self.resolve(name)

    async def _parse_input(self, procedure_name: str, request: httpx.Request) -> Any:
        # Undecodable input becomes None and is left for schema validation to reject.
        if request.method == "GET":
            raw = unquote(request.url.params.get(INPUT_QUERY_PARAM, ""))
            try:
                return parse(raw)
            except Exception as exc:
                logger.debug("Discarding undecodable query input for {}: {}", procedure_name, exc)
                return None
        if request.method == "POST":
            try:
                return parse(await request.aread())
            except Exception as exc:
                logger.debug("Discarding undecodable body input for {}: {}", procedure_name, exc)
                return None
        raise method_not_supported_error(procedure_name, request.method)

    async def _process_request(self, pathname: str, context: ContextT, request: httpx.Request) -> Any:
        procedure = self._parse_procedure(pathname, request)
        if request.method != procedure.method.value:
            raise method_not_supported_error(procedure.name, request.method)
        input = await self._parse_input(procedure.name, request)
        return await procedure.callable.call(context, input)

    async def process(self, *, pathname: str, context: ContextT, request: httpx.Request) -> httpx.Response:
        """Dispatch one request; failures are always encoded, never raised."""
        try:
            data = await self._process_request(pathname, context, request)
            body = stringify(success_response_body(data))
            status = 200
        except Exception as exc:
            details = classify_failure(exc, include_stack=not self.production)
            await invoke_error_tap(self._error_tap, details, source="router")
            body = self._encode_error(details)
            status = details.http_status

        return httpx.Response(
            status,
            headers={"Content-Type": CONTENT_TYPE},
            content=body.encode("utf-8"),
            request=request,
        )

    def _encode_error(self, details: RouterErrorDetails) -> str:
        try:
            return stringify(error_response_body(details))
        except (TypeError, ValueError) as exc:
            logger.warning(
                "Dropping unserializable input from {} error payload: {}",
                details.procedure,
                sanitize_error_message(str(exc)),
            )
            details.input = None
            return stringify(error_response_body(details))

    def specs(self) -> dict[str, Any]:
        """Export every registered contract with JSON-Schema input/output descriptions."""
        return {
            "procedures": [
                {
                    "name": procedure.name,
                    "method": procedure.method.value,
                    "inputSchema": schema_to_json_schema(procedure.input_schema),
                    "outputSchema": schema_to_json_schema(procedure.output_schema),
                }
                for procedure in self._procedures.values()
            ]
        }
