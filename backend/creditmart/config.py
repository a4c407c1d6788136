"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - admin_user_id names the inbox that receives purchase and top-up notices
    - database_url always carries an async driver (postgresql+asyncpg or
      sqlite+aiosqlite)

Design Decisions:
    - Defaults work out-of-the-box with docker-compose
    - CORS_ORIGINS accepts a JSON list or a comma-separated string
"""

import json
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "postgres://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


class Settings(BaseSettings):
    """CreditMart settings, read from the environment or .env."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # ─── Database ───────────────────────────────────────────────
    database_url: str = "postgresql+asyncpg://creditmart:creditmart@db:5432/creditmart"
    database_pool_size: int = Field(20, ge=1)
    database_max_overflow: int = Field(10, ge=0)

    # ─── Identity ───────────────────────────────────────────────
    # Header set by the upstream gateway after it authenticates the caller
    identity_header: str = "X-User-Id"

    # ─── Marketplace ────────────────────────────────────────────
    admin_user_id: int = Field(1, ge=1)
    default_admin_contact: str = "https://t.me/creditmart_support"

    # ─── API ────────────────────────────────────────────────────
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:5173"]

    # ─── Observability ──────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but the engine is async."""
        if isinstance(v, str):
            for sync_prefix, async_prefix in _ASYNC_DRIVERS.items():
                if v.startswith(sync_prefix):
                    return async_prefix + v[len(sync_prefix):]
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


@lru_cache
def get_settings() -> Settings:
    return Settings()
