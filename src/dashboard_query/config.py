"""Centralized configuration for dashboard-query using Pydantic Settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dashboard_query.domain.search import SearchOptions


class Settings(BaseSettings):
    """Typed defaults loaded from ``DASHBOARD_QUERY_*`` environment variables.

    Components accept explicit arguments; these values only fill in what a
    caller leaves out.
    """

    model_config = SettingsConfigDict(
        env_prefix="DASHBOARD_QUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Search defaults
    fuzzy: bool = Field(default=True, description="Fall back to edit-distance scoring when no substring matches")
    case_sensitive: bool = Field(default=False, description="Match query case exactly")
    exact_match: bool = Field(default=False, description="Only whole-field equality counts as a match")
    search_limit: int = Field(default=100, ge=0, description="Maximum ranked results per query")
    search_threshold: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Minimum per-field score for a field to count as matched",
    )
    highlight_style: Literal["html", "plain"] = Field(default="html", description="Match marker style")

    # Reactive controller
    debounce_ms: int = Field(default=300, ge=0, description="Quiet period before recomputing results")

    # Saved searches
    saved_search_storage_key: str = Field(default="saved_searches", description="Key holding the saved search list")
    saved_search_dir: Path = Field(
        default=Path.home() / ".dashboard-query",
        description="Directory used by the file-backed key-value store",
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    def search_options(self, **overrides: object) -> SearchOptions:
        """Build :class:`SearchOptions` from these defaults plus ``overrides``."""
        values: dict[str, object] = {
            "fuzzy": self.fuzzy,
            "case_sensitive": self.case_sensitive,
            "exact_match": self.exact_match,
            "limit": self.search_limit,
            "threshold": self.search_threshold,
            "highlight_style": self.highlight_style,
        }
        values.update(overrides)
        return SearchOptions(**values)

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings (cached; call ``cache_clear`` to reload)."""
    return Settings()
