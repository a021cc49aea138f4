"""CLI module for contractrpc."""
