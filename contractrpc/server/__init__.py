"""Server side: procedure builder, router, direct caller and HTTP hosting."""

from contractrpc.server.builder import ProcedureBuilder, make_procedure_builder
from contractrpc.server.direct import DirectCaller, make_direct_caller
from contractrpc.server.router import Router
from contractrpc.server.rpc import RPC, make_rpc

__all__ = [
    "DirectCaller",
    "ProcedureBuilder",
    "RPC",
    "Router",
    "make_direct_caller",
    "make_procedure_builder",
    "make_rpc",
]
