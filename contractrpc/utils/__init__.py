"""Utility functions for contractrpc."""

from contractrpc.utils.exceptions import (
    ConfigurationError,
    ContractRPCError,
    RPCError,
    format_stack,
    sanitize_error_message,
    to_rpc_error,
)

__all__ = [
    "ConfigurationError",
    "ContractRPCError",
    "RPCError",
    "format_stack",
    "sanitize_error_message",
    "to_rpc_error",
]
