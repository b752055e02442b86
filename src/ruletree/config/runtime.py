"""Pydantic-based runtime settings.

Loads from ``RULETREE_*`` environment variables (with optional .env file).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ..domain.index_builder import UnknownAttributePolicy


class RuntimeSettings(BaseSettings):
    """All configuration for the CLI and MCP server, validated at startup."""

    model_config = SettingsConfigDict(
        env_prefix="RULETREE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # --- Index ---
    attribute_order: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Attribute names in index order (comma-separated in env)",
    )
    rules_path: Path | None = Field(default=None, description="JSON file holding the rule set")
    unknown_attribute_policy: UnknownAttributePolicy = Field(
        default=UnknownAttributePolicy.ignore,
        description="'ignore' treats unknown rule attributes as unconstrained; 'reject' skips the rule",
    )

    # --- Limits ---
    max_batch_size: int = Field(default=500, ge=1, le=100_000, description="Objects per classify page")

    # --- Logging ---
    log_level: str = Field(default="INFO", description="Root log level for CLI/MCP entry points")

    @field_validator("attribute_order", mode="before")
    @classmethod
    def _split_attrs(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [n.strip() for n in v.split(",") if n.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def _level_name(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"log_level must be a logging level name, got {v!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> RuntimeSettings:
    """Return the singleton RuntimeSettings (cached after first call)."""
    return RuntimeSettings()
