# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings. Environment
variables use the ``DEFVIEW_`` prefix, e.g. ``DEFVIEW_UPDATE_MODE=sticky``.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from defview.extraction.boundary_policy import BoundaryPolicy


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DEFVIEW_",
        extra="ignore",
    )

    # === Preview panel ===
    update_mode: Literal["live", "sticky"] = "live"
    loading_indicator_delay_ms: int = 250
    no_content_message: str = "No symbol found at current cursor position"

    # === Disambiguation ===
    disambiguate: bool = True
    picker_context_lines: int = 3
    picker_timeout_s: float = 0.0

    # === Rendering ===
    highlighter: Literal["html", "plain"] = "html"
    highlighter_theme: str = "default"

    # === Snippet boundaries ===
    snippet_leading_prefixes: str = "@,/,#,[,;,-"
    snippet_block_last_chars: str = ":,{,;,}"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("loading_indicator_delay_ms", "picker_context_lines")
    @classmethod
    def validate_non_negative(cls, v: int, info) -> int:  # noqa: N805
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @field_validator("picker_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:  # noqa: N805
        if v < 0:
            raise ValueError("picker_timeout_s must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if not self.snippet_leading_prefixes_list:
            errors.append("SNIPPET_LEADING_PREFIXES must list at least one prefix")

        if not self.snippet_block_last_chars_list:
            errors.append("SNIPPET_BLOCK_LAST_CHARS must list at least one character")

        if any(len(c) != 1 for c in self.snippet_block_last_chars_list):
            errors.append("SNIPPET_BLOCK_LAST_CHARS entries must be single characters")

        if self.highlighter == "html" and not self.highlighter_theme.strip():
            errors.append("HIGHLIGHTER_THEME must not be empty for the html highlighter")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def snippet_leading_prefixes_list(self) -> list[str]:
        """Parse comma-separated leading prefixes."""
        return [p.strip() for p in self.snippet_leading_prefixes.split(",") if p.strip()]

    @property
    def snippet_block_last_chars_list(self) -> list[str]:
        """Parse comma-separated block last characters."""
        return [c.strip() for c in self.snippet_block_last_chars.split(",") if c.strip()]

    @property
    def loading_indicator_delay_s(self) -> float:
        return self.loading_indicator_delay_ms / 1000

    def boundary_policy(self) -> BoundaryPolicy:
        """Default boundary policy with the configured tables applied."""
        from defview.extraction.boundary_policy import DEFAULT_POLICY

        return DEFAULT_POLICY.with_overrides(
            leading_prefixes=self.snippet_leading_prefixes_list,
            block_last_chars=self.snippet_block_last_chars_list,
        )


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-host config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
