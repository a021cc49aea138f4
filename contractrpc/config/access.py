"""Process-wide settings lookup.

Routers, transports and the CLI read settings on demand rather than
threading an ``RPCSettings`` instance through every call. Each settings
file (or the env-only case) is loaded once and then served from memory
until the cache is cleared.
"""

from __future__ import annotations

import threading
from pathlib import Path

from contractrpc.config.loader import get_settings_path, load_settings
from contractrpc.config.schema import RPCSettings

_ENV_ONLY = ""

_lock = threading.RLock()
_loaded: dict[str, RPCSettings] = {}


def _settings_key(settings_path: Path | None) -> str:
    """Resolved file path, or ``_ENV_ONLY`` when no settings file is configured."""
    path = settings_path or get_settings_path()
    if path is None:
        return _ENV_ONLY
    return str(Path(path).expanduser().resolve())


def get_settings(*, settings_path: Path | None = None, force_reload: bool = False) -> RPCSettings:
    """Settings for ``settings_path`` (default: ``CONTRACTRPC_SETTINGS_FILE``).

    Environment variables are only read when an entry is first loaded, so
    a changed environment needs ``force_reload=True`` or a cache clear.
    """
    key = _settings_key(settings_path)
    with _lock:
        settings = _loaded.get(key)
        if settings is None or force_reload:
            settings = load_settings(Path(key) if key != _ENV_ONLY else None)
            _loaded[key] = settings
        return settings


def clear_settings_cache(*, settings_path: Path | None = None) -> None:
    """Forget loaded settings for one file, or for every file when none is given."""
    with _lock:
        if settings_path is None:
            _loaded.clear()
        else:
            _loaded.pop(_settings_key(settings_path), None)
