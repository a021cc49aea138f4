"""Entry point pairing a router with a procedure builder."""

from __future__ import annotations

from typing import Any, NamedTuple

from contractrpc.server.builder import ProcedureBuilder, make_procedure_builder
from contractrpc.server.router import Router


class RPC(NamedTuple):
    router: Router[Any]
    procedure: ProcedureBuilder[Any]


def make_rpc(*, production: bool | None = None) -> RPC:
    """Create a fresh router and an empty procedure builder."""
    return RPC(router=Router(production=production), procedure=make_procedure_builder())
