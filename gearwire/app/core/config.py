from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GEARWIRE_", extra="ignore")

    app_name: str = "Gearwire API"
    app_version: str = "0.1.0"
    debug: bool = False

    api_prefix: str = "/api"

    catalog_path: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parents[1] / "data" / "devices.json"
    )

    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    max_workspaces: int = Field(default=64, ge=1)
    max_connections_per_workspace: int = Field(default=512, ge=1)


@lru_cache
def get_settings() -> Settings:
    return Settings()
