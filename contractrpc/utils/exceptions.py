"""
Exception hierarchy and error handling utilities for contractrpc.

Provides:
- Base exception class with error codes and details
- RPCError, the single server-side error representation
- Classification of arbitrary exceptions into the RPC taxonomy
- Safe error message formatting (no sensitive data leak)
"""

from __future__ import annotations

import re
import traceback
from typing import Any

from contractrpc.core.error_codes import RPCErrorCode, http_status_for, normalize_error_key

INTERNAL_SERVER_ERROR_MESSAGE = "Internal server error"


class ContractRPCError(Exception):
    """Base exception for all contractrpc errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigurationError(ContractRPCError):
    """Fatal wiring error: unnamed procedure, async schema, bad target."""

    def __init__(self, message: str, **details: Any):
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)


class RPCError(ContractRPCError):
    """A failure classified into the RPC taxonomy.

    ``code`` holds the taxonomy key, ``status`` its HTTP-style status.
    ``procedure`` and ``input`` are stamped by the procedure pipeline;
    ``issues`` is set for validation failures. The cause is kept both as
    ``cause`` and as the chained ``__cause__``.
    """

    def __init__(
        self,
        code: RPCErrorCode | str,
        message: str,
        *,
        issues: list[dict[str, Any]] | None = None,
        procedure: str | None = None,
        input: Any = None,
        cause: BaseException | Any = None,
    ):
        key = normalize_error_key(code)
        super().__init__(message, code=key)
        self.status = http_status_for(key)
        self.issues = issues
        self.procedure = procedure
        self.input = input
        self.cause = cause
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "error": self.code,
            "status": self.status,
            "message": self.message,
        }
        if self.procedure is not None:
            data["procedure"] = self.procedure
        if self.issues is not None:
            data["issues"] = self.issues
        return data

    def __repr__(self) -> str:
        return f"RPCError(code={self.code!r}, message={self.message!r}, procedure={self.procedure!r})"


def to_rpc_error(
    exc: BaseException | Any,
    *,
    procedure: str | None = None,
    input: Any = None,
) -> RPCError:
    """Classify any raised value into an RPCError stamped with procedure/input.

    RPCErrors keep their code, message and cause; anything else becomes
    INTERNAL_SERVER_ERROR with the original value as cause.
    """
    if isinstance(exc, RPCError):
        return RPCError(
            exc.code,
            exc.message,
            issues=exc.issues,
            procedure=procedure,
            input=input,
            cause=exc.cause,
        )
    return RPCError(
        RPCErrorCode.INTERNAL_SERVER_ERROR,
        INTERNAL_SERVER_ERROR_MESSAGE,
        procedure=procedure,
        input=input,
        cause=exc,
    )


def format_stack(exc: BaseException) -> str:
    """Render a traceback (including the cause chain) as one string."""
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"[a-zA-Z0-9]{32,}"),
    re.compile(r"sk-[a-zA-Z0-9]{20,}"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized
