"""Tests for contractrpc.utils.exceptions module."""

from __future__ import annotations

import pytest

from contractrpc.utils.exceptions import (
    INTERNAL_SERVER_ERROR_MESSAGE,
    ConfigurationError,
    ContractRPCError,
    RPCError,
    format_stack,
    sanitize_error_message,
    to_rpc_error,
)


class TestExceptionClasses:
    """Test custom exception classes."""

    def test_base_error_to_dict(self) -> None:
        exc = ContractRPCError("test message", code="TEST_CODE")
        assert exc.to_dict() == {"error": "TEST_CODE", "message": "test message", "details": {}}
        assert str(exc) == "[TEST_CODE] test message"

    def test_configuration_error_keeps_details(self) -> None:
        exc = ConfigurationError("bad wiring", target="app:router")
        assert exc.code == "CONFIGURATION_ERROR"
        assert exc.details == {"target": "app:router"}

    def test_rpc_error_derives_status(self) -> None:
        exc = RPCError("TOO_MANY_REQUESTS", "slow down", procedure="hello")
        assert exc.code == "TOO_MANY_REQUESTS"
        assert exc.status == 429
        assert exc.to_dict() == {
            "error": "TOO_MANY_REQUESTS",
            "status": 429,
            "message": "slow down",
            "procedure": "hello",
        }

    def test_rpc_error_rejects_unknown_code(self) -> None:
        with pytest.raises(ValueError):
            RPCError("TEAPOT", "short and stout")

    def test_rpc_error_chains_exception_cause(self) -> None:
        cause = OSError("disk")
        exc = RPCError("INTERNAL_SERVER_ERROR", "failed", cause=cause)
        assert exc.cause is cause
        assert exc.__cause__ is cause

    def test_rpc_error_accepts_non_exception_cause(self) -> None:
        exc = RPCError("BAD_REQUEST", "failed", cause={"field": "x"})
        assert exc.cause == {"field": "x"}
        assert exc.__cause__ is None


class TestToRpcError:
    def test_generic_exception_becomes_internal_error(self) -> None:
        boom = RuntimeError("secret detail")
        exc = to_rpc_error(boom, procedure="hello", input={"a": 1})
        assert exc.code == "INTERNAL_SERVER_ERROR"
        assert exc.message == INTERNAL_SERVER_ERROR_MESSAGE
        assert exc.cause is boom
        assert exc.procedure == "hello"
        assert exc.input == {"a": 1}

    def test_rpc_error_keeps_kind_message_and_cause(self) -> None:
        original = RPCError("NOT_FOUND", "No such user", cause="db", issues=[{"message": "x"}])
        exc = to_rpc_error(original, procedure="users.get", input=7)
        assert exc is not original
        assert exc.code == "NOT_FOUND"
        assert exc.message == "No such user"
        assert exc.cause == "db"
        assert exc.issues == [{"message": "x"}]
        assert exc.procedure == "users.get"
        assert exc.input == 7

    def test_non_exception_value_is_classified(self) -> None:
        exc = to_rpc_error("just a string")
        assert exc.code == "INTERNAL_SERVER_ERROR"
        assert exc.cause == "just a string"


def test_format_stack_includes_cause_chain() -> None:
    try:
        try:
            raise KeyError("inner")
        except KeyError as inner:
            raise RPCError("CONFLICT", "outer") from inner
    except RPCError as exc:
        stack = format_stack(exc)
    assert "KeyError" in stack
    assert "outer" in stack


class TestSanitizeErrorMessage:
    def test_sanitize_api_key(self) -> None:
        msg = "Error: api_key=sk-1234567890abcdefghij"
        assert "sk-1234567890" not in sanitize_error_message(msg)

    def test_sanitize_bearer_token(self) -> None:
        msg = "Authorization: Bearer abc123xyz"
        assert "abc123xyz" not in sanitize_error_message(msg)

    def test_plain_message_untouched(self) -> None:
        assert sanitize_error_message("connection refused") == "connection refused"
