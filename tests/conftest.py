"""Pytest hooks and fixtures."""

import pytest

from contractrpc.config import access


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Keep settings independent of the developer's environment."""
    for key in ("ENVIRONMENT", "MOUNT_PATH", "LOG_LEVEL", "LOG_FILE", "CLIENT_TIMEOUT", "SETTINGS_FILE"):
        monkeypatch.delenv(f"CONTRACTRPC_{key}", raising=False)
    access.clear_settings_cache()
    yield
    access.clear_settings_cache()
