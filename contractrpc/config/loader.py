"""Settings loading utilities."""

import json
import os
import re
from pathlib import Path
from typing import Any

from contractrpc.config.schema import RPCSettings

SETTINGS_FILE_ENV = "CONTRACTRPC_SETTINGS_FILE"


def get_settings_path() -> Path | None:
    """Settings file path from the environment, if one is configured."""
    raw = os.getenv(SETTINGS_FILE_ENV, "").strip()
    return Path(raw).expanduser() if raw else None


def camel_to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def convert_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Accept camelCase keys from JSON files."""
    return {camel_to_snake(k): v for k, v in data.items()}


def load_settings(settings_path: Path | None = None) -> RPCSettings:
    """
    Load settings from an optional JSON file, with environment overrides.

    Args:
        settings_path: Optional path to a JSON settings file.

    Returns:
        Loaded settings object.
    """
    path = settings_path or get_settings_path()
    if path is None or not path.exists():
        return RPCSettings()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("settings file must contain a JSON object")
        file_values = convert_keys(data)
    except (json.JSONDecodeError, ValueError) as e:
        raise ValueError(
            f"Failed to load settings from {path}: {e}. "
            "Fix the file or remove it to use defaults."
        ) from e

    # Environment variables win over file values.
    env_values = RPCSettings().model_dump(exclude_unset=True)
    return RPCSettings.model_validate({**file_values, **env_values})
