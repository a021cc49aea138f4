"""Configuration module for contractrpc."""

from contractrpc.config.schema import RPCSettings
from contractrpc.config.loader import load_settings, get_settings_path
from contractrpc.config.access import get_settings, clear_settings_cache

__all__ = ["RPCSettings", "load_settings", "get_settings_path", "get_settings", "clear_settings_cache"]
