"""Common RPC error-boundary helpers for router dispatch."""

from __future__ import annotations

from typing import Any

from loguru import logger

from contractrpc.core.contracts import RouterErrorDetails
from contractrpc.core.error_codes import RPCErrorCode, http_status_for, json_rpc_code_for
from contractrpc.utils.exceptions import (
    INTERNAL_SERVER_ERROR_MESSAGE,
    RPCError,
    format_stack,
    sanitize_error_message,
)


def unknown_procedure_error(name: str) -> RPCError:
    """Build standardized unknown-procedure error."""
    return RPCError(RPCErrorCode.NOT_FOUND, "Procedure not found!", procedure=name or None)


def method_not_supported_error(procedure: str, method: str) -> RPCError:
    """Build standardized verb/declared-method mismatch error."""
    return RPCError(
        RPCErrorCode.METHOD_NOT_SUPPORTED,
        f"Procedure {procedure} does not support {method} method.",
        procedure=procedure,
    )


def rpc_error_details(exc: RPCError, *, include_stack: bool) -> RouterErrorDetails:
    """Map RPCError to wire error details, keeping procedure and input."""
    level = "ERROR" if exc.status >= 500 else "WARNING"
    logger.log(level, "RPC procedure {} failed: {}", exc.procedure, exc.to_dict())
    return RouterErrorDetails(
        code=exc.code,
        http_status=exc.status,
        message=exc.message,
        procedure=exc.procedure,
        issues=exc.issues,
        stack=format_stack(exc) if include_stack else None,
        input=exc.input,
    )


def unhandled_exception_details(exc: Any, *, include_stack: bool) -> RouterErrorDetails:
    """Map unexpected failures to INTERNAL_SERVER_ERROR details.

    Exceptions keep their own message; anything else gets a generic one.
    """
    code = RPCErrorCode.INTERNAL_SERVER_ERROR.value
    if isinstance(exc, BaseException):
        message = str(exc) or INTERNAL_SERVER_ERROR_MESSAGE
        logger.opt(exception=exc).error("RPC dispatch failed with [{}]: {}", code, sanitize_error_message(message))
        stack = format_stack(exc) if include_stack else None
    else:
        message = INTERNAL_SERVER_ERROR_MESSAGE
        logger.error("RPC dispatch failed with non-exception value of type {}", type(exc).__name__)
        stack = None
    return RouterErrorDetails(
        code=code,
        http_status=http_status_for(code),
        message=message,
        stack=stack,
    )


def classify_failure(exc: Any, *, include_stack: bool) -> RouterErrorDetails:
    if isinstance(exc, RPCError):
        return rpc_error_details(exc, include_stack=include_stack)
    return unhandled_exception_details(exc, include_stack=include_stack)


def error_response_body(details: RouterErrorDetails) -> dict[str, Any]:
    """Failure variant: ``{message, code, data}`` with the JSON-RPC code."""
    return {
        "message": details.message,
        "code": json_rpc_code_for(details.code),
        "data": details.to_dict(),
    }


def success_response_body(data: Any) -> dict[str, Any]:
    return {"result": {"data": data}}
