"""Client-side error taxonomy."""

from __future__ import annotations

from enum import Enum
from typing import Any

from contractrpc.core.contracts import RouterErrorDetails
from contractrpc.utils.exceptions import ContractRPCError


class ClientErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FETCH_ERROR = "FETCH_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    RPC_ERROR = "RPC_ERROR"


class RPCClientError(ContractRPCError):
    """A failed client call.

    ``details`` holds either locally built details (``http_status`` -1)
    or the remote failure payload verbatim for ``RPC_ERROR``.
    """

    def __init__(
        self,
        code: ClientErrorCode,
        details: RouterErrorDetails,
        *,
        output: Any = None,
        cause: BaseException | None = None,
    ):
        super().__init__(details.message, code=ClientErrorCode(code).value, details=details.to_dict())
        self.error = details
        self.procedure = details.procedure
        self.input = details.input
        self.issues = details.issues
        self.output = output
        self.rpc_code = details.code
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def status(self) -> int:
        """Remote HTTP-style status, -1 for failures that never reached the server."""
        return self.error.http_status


def local_error(
    code: ClientErrorCode,
    *,
    procedure: str,
    input: Any,
    message: str,
    issues: list[dict[str, Any]] | None = None,
    output: Any = None,
    cause: BaseException | None = None,
) -> RPCClientError:
    details = RouterErrorDetails(
        code=code.value,
        http_status=-1,
        message=message,
        procedure=procedure,
        issues=issues,
        input=input,
    )
    return RPCClientError(code, details, output=output, cause=cause)
