"""contractrpc - typed procedure contracts with validated dispatch over HTTP."""

__version__ = "0.1.0"

from contractrpc.client import ClientErrorCode, RPCClient, RPCClientError, make_rpc_client, router_transport
from contractrpc.core import (
    RPC_ERROR_CODE,
    Procedure,
    ProcedureContract,
    ProcedureMethod,
    Result,
    RouterErrorDetails,
    RPCErrorCode,
)
from contractrpc.server import ProcedureBuilder, Router, make_direct_caller, make_rpc
from contractrpc.utils.exceptions import ConfigurationError, RPCError

__all__ = [
    "__version__",
    "ClientErrorCode",
    "ConfigurationError",
    "Procedure",
    "ProcedureBuilder",
    "ProcedureContract",
    "ProcedureMethod",
    "RPCClient",
    "RPCClientError",
    "RPCError",
    "RPCErrorCode",
    "RPC_ERROR_CODE",
    "Result",
    "Router",
    "RouterErrorDetails",
    "make_direct_caller",
    "make_rpc",
    "make_rpc_client",
    "router_transport",
]
