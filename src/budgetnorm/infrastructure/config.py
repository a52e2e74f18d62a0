"""Application settings.

Values are read from environment variables prefixed with ``BUDGETNORM_``
(and from a local ``.env`` file when present).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration for budgetnorm."""

    datasets_dir: Path = Field(
        default=Path("datasets"),
        description="Directory holding normalization dataset files (<id>.json).",
    )
    default_limit: int = Field(default=50, ge=0, description="Page size when none is requested.")
    max_limit: int = Field(default=1000, ge=0, description="Upper bound for the page size.")
    max_db_rows: int = Field(
        default=100_000,
        ge=1,
        description="Safety cap on classification-period rows fetched for in-memory aggregation.",
    )
    execution_strategy: Literal["in_memory", "store_delegated"] = Field(
        default="in_memory",
        description="Where normalization, sorting and pagination run.",
    )
    log_level: str = Field(default="INFO", description="Root log level.")
    log_json: bool = Field(default=False, description="Render logs as JSON lines.")

    model_config = SettingsConfigDict(
        env_prefix="BUDGETNORM_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings (cached; call ``cache_clear`` in tests)."""
    return Settings()
