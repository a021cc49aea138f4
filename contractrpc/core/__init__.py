"""Contracts, taxonomy, schemas and wire serialization shared by server and client."""

from contractrpc.core.contracts import (
    Procedure,
    ProcedureContract,
    ProcedureMethod,
    Result,
    RouterErrorDetails,
)
from contractrpc.core.error_codes import (
    JSON_RPC_ERROR_CODES_BY_KEY,
    JSON_RPC_ERROR_KEYS_BY_CODE,
    RPC_ERROR_CODE,
    RPCErrorCode,
    http_status_for,
    json_rpc_code_for,
    rpc_error_key_from_json_rpc_code,
)

__all__ = [
    "Procedure",
    "ProcedureContract",
    "ProcedureMethod",
    "Result",
    "RouterErrorDetails",
    "JSON_RPC_ERROR_CODES_BY_KEY",
    "JSON_RPC_ERROR_KEYS_BY_CODE",
    "RPC_ERROR_CODE",
    "RPCErrorCode",
    "http_status_for",
    "json_rpc_code_for",
    "rpc_error_key_from_json_rpc_code",
]
