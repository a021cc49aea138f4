"""Settings schema using pydantic-settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RPCSettings(BaseSettings):
    """Runtime settings for routers, clients and the CLI."""

    environment: Literal["development", "production", "test"] = "development"
    mount_path: str = "/rpc"
    log_level: str = "INFO"
    log_file: Path | None = None
    client_timeout: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="CONTRACTRPC_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

