"""Client call pipeline mirroring the router's request lifecycle.

``procedure(contract).try_call(input)`` never raises for call failures;
it returns a :class:`Result` whose error is an :class:`RPCClientError`.
``call`` unwraps the result and raises the error instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from contractrpc.client.errors import ClientErrorCode, RPCClientError, local_error
from contractrpc.client.transport import HttpxTransport, Transport
from contractrpc.core.contracts import Procedure, ProcedureContract, ProcedureMethod, Result, RouterErrorDetails
from contractrpc.core.schema import parse_with_schema
from contractrpc.core.serialization import parse, stringify
from contractrpc.utils.exceptions import sanitize_error_message

CONTENT_TYPE = "application/json"
INPUT_QUERY_PARAM = "input"

ClientResult = Result[Any, RPCClientError]


def as_contract(target: Any) -> ProcedureContract:
    """Accept a Procedure, a ProcedureContract or any object with the contract attributes."""
    if isinstance(target, ProcedureContract):
        return target
    if isinstance(target, Procedure):
        return target.contract
    return ProcedureContract(
        name=target.name,
        method=ProcedureMethod(getattr(target.method, "value", target.method)),
        input_schema=getattr(target, "input_schema", None),
        output_schema=getattr(target, "output_schema", None),
    )


@dataclass(frozen=True, slots=True)
class ClientProcedure:
    client: RPCClient
    contract: ProcedureContract

    async def try_call(self, input: Any = None) -> ClientResult:
        return await self.client.execute(self.contract, input)

    async def call(self, input: Any = None) -> Any:
        return (await self.try_call(input)).unwrap()


class RPCClient:
    """Builds requests for ``{base_url}/{procedure}`` and classifies every outcome."""

    def __init__(self, base_url: str, transport: Transport | None = None):
        self.base_url = httpx.URL(base_url)
        self._transport: Transport = transport if transport is not None else HttpxTransport()

    def procedure(self, contract: Any) -> ClientProcedure:
        return ClientProcedure(client=self, contract=as_contract(contract))

    def prepare_request(self, contract: ProcedureContract, input: Any) -> httpx.Request:
        payload = stringify(input)
        path = f"{self.base_url.path.rstrip('/')}/{contract.name}"
        url = self.base_url.copy_with(path=path)
        headers = {"Content-Type": CONTENT_TYPE}
        if contract.method is ProcedureMethod.QUERY:
            url = url.copy_merge_params({INPUT_QUERY_PARAM: quote(payload, safe="")})
            return httpx.Request("GET", url, headers=headers)
        return httpx.Request("POST", url, headers=headers, content=payload.encode("utf-8"))

    async def execute(self, contract: ProcedureContract, input: Any) -> ClientResult:
        name = contract.name

        parsed_input = parse_with_schema(contract.input_schema, input)
        if not parsed_input.success:
            return Result.failure(
                local_error(
                    ClientErrorCode.VALIDATION_ERROR,
                    procedure=name,
                    input=input,
                    message="Error validating input",
                    issues=parsed_input.issues,
                )
            )

        try:
            request = self.prepare_request(contract, input)
        except (TypeError, ValueError) as exc:
            return Result.failure(
                local_error(
                    ClientErrorCode.VALIDATION_ERROR,
                    procedure=name,
                    input=input,
                    message="Error serializing input",
                    cause=exc,
                )
            )

        try:
            response = await self._transport(request)
            content = await response.aread()
        except Exception as exc:
            logger.warning("RPC fetch for {} failed: {}", name, sanitize_error_message(str(exc)))
            return Result.failure(
                local_error(ClientErrorCode.FETCH_ERROR, procedure=name, input=input, message="Fetch error", cause=exc)
            )

        try:
            body = parse(content)
        except Exception as exc:
            return Result.failure(
                local_error(
                    ClientErrorCode.PARSE_ERROR,
                    procedure=name,
                    input=input,
                    message="Error parsing json response",
                    cause=exc,
                )
            )

        if isinstance(body, dict) and isinstance(body.get("result"), dict):
            data = body["result"].get("data")
        elif isinstance(body, dict) and "message" in body and isinstance(body.get("data"), dict):
            error = RPCClientError(ClientErrorCode.RPC_ERROR, RouterErrorDetails.from_dict(body["data"]))
            logger.debug("RPC {} returned an error: {}", name, error.to_dict())
            return Result.failure(error)
        else:
            return Result.failure(
                local_error(
                    ClientErrorCode.PARSE_ERROR,
                    procedure=name,
                    input=input,
                    message="Unexpected response shape",
                )
            )

        # Re-validated locally in case client and server schemas drifted apart.
        parsed_output = parse_with_schema(contract.output_schema, data)
        if not parsed_output.success:
            return Result.failure(
                local_error(
                    ClientErrorCode.VALIDATION_ERROR,
                    procedure=name,
                    input=parsed_input.value,
                    message="Error validating output",
                    issues=parsed_output.issues,
                    output=data,
                )
            )
        return Result.success(parsed_output.value)

    async def aclose(self) -> None:
        closer = getattr(self._transport, "aclose", None)
        if closer is not None:
            await closer()


def make_rpc_client(base_url: str, transport: Transport | None = None) -> RPCClient:
    return RPCClient(base_url, transport=transport)
