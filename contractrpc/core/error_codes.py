"""Closed error taxonomy shared by server and client.

Every taxonomy key maps to exactly one HTTP-style status and one
JSON-RPC style negative code. The JSON-RPC table is bijective so a code
received over the wire can be turned back into its key.
"""

from __future__ import annotations

from enum import Enum


class RPCErrorCode(str, Enum):
    """Taxonomy keys."""

    PARSE_ERROR = "PARSE_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_SUPPORTED = "METHOD_NOT_SUPPORTED"
    TIMEOUT = "TIMEOUT"
    CONFLICT = "CONFLICT"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    UNPROCESSABLE_CONTENT = "UNPROCESSABLE_CONTENT"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    CLIENT_CLOSED_REQUEST = "CLIENT_CLOSED_REQUEST"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    BAD_GATEWAY = "BAD_GATEWAY"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    GATEWAY_TIMEOUT = "GATEWAY_TIMEOUT"


RPC_ERROR_CODE: dict[str, int] = {
    "PARSE_ERROR": 400,
    "BAD_REQUEST": 400,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "METHOD_NOT_SUPPORTED": 405,
    "TIMEOUT": 408,
    "CONFLICT": 409,
    "PRECONDITION_FAILED": 412,
    "PAYLOAD_TOO_LARGE": 413,
    "UNSUPPORTED_MEDIA_TYPE": 415,
    "UNPROCESSABLE_CONTENT": 422,
    "TOO_MANY_REQUESTS": 429,
    "CLIENT_CLOSED_REQUEST": 499,
    "INTERNAL_SERVER_ERROR": 500,
    "NOT_IMPLEMENTED": 501,
    "BAD_GATEWAY": 502,
    "SERVICE_UNAVAILABLE": 503,
    "GATEWAY_TIMEOUT": 504,
}

JSON_RPC_ERROR_CODES_BY_KEY: dict[str, int] = {
    "PARSE_ERROR": -32700,
    "BAD_REQUEST": -32600,
    "UNAUTHORIZED": -32001,
    "FORBIDDEN": -32003,
    "NOT_FOUND": -32004,
    "METHOD_NOT_SUPPORTED": -32005,
    "TIMEOUT": -32008,
    "CONFLICT": -32009,
    "PRECONDITION_FAILED": -32012,
    "PAYLOAD_TOO_LARGE": -32013,
    "UNSUPPORTED_MEDIA_TYPE": -32015,
    "UNPROCESSABLE_CONTENT": -32022,
    "TOO_MANY_REQUESTS": -32029,
    "CLIENT_CLOSED_REQUEST": -32099,
    "INTERNAL_SERVER_ERROR": -32603,
    "NOT_IMPLEMENTED": -32501,
    "BAD_GATEWAY": -32502,
    "SERVICE_UNAVAILABLE": -32503,
    "GATEWAY_TIMEOUT": -32504,
}

JSON_RPC_ERROR_KEYS_BY_CODE: dict[int, str] = {
    code: key for key, code in JSON_RPC_ERROR_CODES_BY_KEY.items()
}


def normalize_error_key(code: RPCErrorCode | str) -> str:
    """Return the plain taxonomy key, rejecting anything outside the closed set."""
    key = code.value if isinstance(code, RPCErrorCode) else str(code)
    if key not in RPC_ERROR_CODE:
        raise ValueError(f"unknown RPC error code: {key}")
    return key


def http_status_for(code: RPCErrorCode | str) -> int:
    return RPC_ERROR_CODE[normalize_error_key(code)]


def json_rpc_code_for(code: RPCErrorCode | str) -> int:
    return JSON_RPC_ERROR_CODES_BY_KEY[normalize_error_key(code)]


def rpc_error_key_from_json_rpc_code(code: int) -> str | None:
    """Map a wire JSON-RPC code back to its taxonomy key (None if unknown)."""
    return JSON_RPC_ERROR_KEYS_BY_CODE.get(code)
