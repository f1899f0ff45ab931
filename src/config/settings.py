# src/config/settings.py - v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM ===
    llm_default_model: str = "claude-sonnet-4-20250514"
    llm_temperature: float = 0.0
    llm_max_tokens: int = 1024
    anthropic_api_key: str = ""

    # === Cache ===
    cache_enabled: bool = True
    cache_file: Path = Path(".document-cache.json")
    # Fold the model name into cache keys so a capability upgrade misses.
    cache_include_capability_id: bool = False

    # === Grouping snapshot ===
    grouping_file: Path = Path(".document-grouping.json")
    similarity_threshold: float = 0.8

    # === Chunking ===
    chunk_max_size: int = 50_000
    chunk_size_threshold: int = 100_000
    chunk_overlap: int = 500
    chunk_max_extraction_chunks: int = 5

    # === Batch ===
    rate_limit_delay_s: float = 30.0
    scan_extensions: str = ".json,.txt,.md,.text"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("chunk_overlap", "rate_limit_delay_s")
    @classmethod
    def validate_non_negative(cls, v: float, info) -> float:  # noqa: N805
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @field_validator("chunk_max_size", "chunk_size_threshold", "chunk_max_extraction_chunks")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.chunk_overlap >= self.chunk_max_size:
            errors.append("CHUNK_OVERLAP must be < CHUNK_MAX_SIZE")

        if self.chunk_size_threshold < self.chunk_max_size:
            errors.append("CHUNK_SIZE_THRESHOLD must be >= CHUNK_MAX_SIZE")

        if not 0.0 < self.similarity_threshold <= 1.0:
            errors.append("SIMILARITY_THRESHOLD must be in (0, 1]")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def scan_extensions_list(self) -> list[str]:
        """Parse comma-separated scan extensions."""
        return [e.strip().lower() for e in self.scan_extensions.split(",") if e.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-run config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
