"""Shared procedure contracts, results and wire error details."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Protocol, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")
ValueT = TypeVar("ValueT")
ErrorT = TypeVar("ErrorT", bound=BaseException)

ProcedureHandler = Callable[..., Awaitable[Any] | Any]
MiddlewareHandler = Callable[..., Awaitable[Any] | Any]
MockHandler = Callable[[Any], Awaitable[Any] | Any]


class ProcedureMethod(str, Enum):
    """Procedure kind; the value is the HTTP verb used on the wire."""

    QUERY = "GET"
    MUTATION = "POST"

    @classmethod
    def from_kind(cls, kind: str) -> ProcedureMethod:
        normalized = kind.strip().lower()
        if normalized == "query":
            return cls.QUERY
        if normalized == "mutation":
            return cls.MUTATION
        raise ValueError(f"unknown procedure kind: {kind!r} (expected 'query' or 'mutation')")


@dataclass(frozen=True, slots=True)
class ProcedureContract:
    """Public shape of a procedure: everything a client needs."""

    name: str
    method: ProcedureMethod
    input_schema: Any = None
    output_schema: Any = None


@dataclass(slots=True)
class Result(Generic[ValueT, ErrorT]):
    """Success/failure value returned by the non-raising entry points."""

    ok: bool
    value: ValueT | None = None
    error: ErrorT | None = None

    @classmethod
    def success(cls, value: ValueT) -> Result[ValueT, ErrorT]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorT) -> Result[ValueT, ErrorT]:
        return cls(ok=False, error=error)

    def unwrap(self) -> ValueT:
        if self.ok:
            return self.value  # type: ignore[return-value]
        if self.error is None:
            raise ValueError("failed result carries no error")
        raise self.error


class ProcedureCallable(Protocol):
    async def call(self, context: Any, input: Any) -> Any:
        ...

    async def try_call(self, context: Any, input: Any) -> Result[Any, Any]:
        ...


@dataclass(frozen=True, slots=True)
class Procedure(Generic[InputT, OutputT]):
    """A built procedure: frozen contract plus its execution pipeline."""

    contract: ProcedureContract
    callable: ProcedureCallable
    mocked: bool = False

    @property
    def name(self) -> str:
        return self.contract.name

    @property
    def method(self) -> ProcedureMethod:
        return self.contract.method

    @property
    def input_schema(self) -> Any:
        return self.contract.input_schema

    @property
    def output_schema(self) -> Any:
        return self.contract.output_schema


@dataclass(slots=True)
class RouterErrorDetails:
    """Failure payload carried in ``data`` of an error response."""

    code: str
    http_status: int
    message: str
    procedure: str | None = None
    issues: list[dict[str, Any]] | None = None
    stack: str | None = None
    input: Any = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "code": self.code,
            "httpStatus": self.http_status,
            "message": self.message,
        }
        if self.procedure is not None:
            data["procedure"] = self.procedure
        if self.issues is not None:
            data["issues"] = self.issues
        if self.stack is not None:
            data["stack"] = self.stack
        if self.input is not None:
            data["input"] = self.input
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RouterErrorDetails:
        return cls(
            code=str(data.get("code", "")),
            http_status=int(data.get("httpStatus", -1)),
            message=str(data.get("message", "")),
            procedure=data.get("procedure"),
            issues=data.get("issues"),
            stack=data.get("stack"),
            input=data.get("input"),
        )
