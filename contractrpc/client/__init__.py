"""Client side: call pipeline, transports and client errors."""

from contractrpc.client.client import ClientProcedure, RPCClient, as_contract, make_rpc_client
from contractrpc.client.errors import ClientErrorCode, RPCClientError
from contractrpc.client.transport import HttpxTransport, Transport, router_transport

__all__ = [
    "ClientErrorCode",
    "ClientProcedure",
    "HttpxTransport",
    "RPCClient",
    "RPCClientError",
    "Transport",
    "as_contract",
    "make_rpc_client",
    "router_transport",
]
