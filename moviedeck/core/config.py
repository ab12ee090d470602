# moviedeck/core/config.py
import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from moviedeck.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

# ─── 1) Locate the JSON file ──────────────────────────────────────────────────
# Defaults to moviedeck/core/config.json; MOVIEDECK_CONFIG points elsewhere.

BASE_DIR    = Path(__file__).parent           # .../moviedeck/core
CONFIG_PATH = BASE_DIR / "config.json"
CONFIG_ENV  = "MOVIEDECK_CONFIG"

# Value shipped in config.json until the user pastes a real token
PLACEHOLDER_TOKEN = "YOUR_TMDB_BEARER_TOKEN_HERE"


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV)
    return Path(override).expanduser() if override else CONFIG_PATH


# ─── 2) Validated settings model ──────────────────────────────────────────────
class Settings(BaseModel):
    # TMDb
    tmdb_base_url:        str = "https://api.themoviedb.org/3"
    tmdb_image_base_url:  str = "https://image.tmdb.org/t/p/w500"
    tmdb_bearer_token:    Optional[str] = None
    tmdb_timeout_seconds: float = 10.0
    tmdb_rate_limit:      int = Field(
        40,
        ge=1,
        description="Maximum TMDb requests per 10 second window",
    )
    trending_window:      str = "week"

    # Watch Later storage
    storage_path:  Optional[str] = "~/.moviedeck/storage.json"
    watchlist_key: str = "watchLaterMovies"

    # UI timing (seconds)
    render_delay_seconds:    float = Field(0.3, ge=0)
    search_delay_seconds:    float = Field(0.3, ge=0)
    search_debounce_seconds: float = Field(0.5, ge=0)

    notification_history: int = Field(50, ge=1)
    log_level:            str = "INFO"

    # ─── coerce a blank token into None ───────────────────────────────────────
    @field_validator("tmdb_bearer_token", mode="before")
    @classmethod
    def _none_if_blank_token(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("trending_window")
    @classmethod
    def _known_window(cls, v: str) -> str:
        if v not in ("day", "week"):
            raise ValueError("trending_window must be 'day' or 'week'")
        return v

    @property
    def is_configured(self) -> bool:
        return bool(self.tmdb_bearer_token) and self.tmdb_bearer_token != PLACEHOLDER_TOKEN

    def require_configured(self) -> None:
        """Raise ConfigurationError unless a usable bearer token is present."""
        if not self.is_configured:
            raise ConfigurationError(
                "TMDB bearer token is missing; set tmdb_bearer_token in "
                f"{config_path()}"
            )


# ─── 3) Cached loader for settings ───────────────────────────────────────────
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load and return the Settings instance from config.json, cached in-memory.
    Calling get_settings again returns the same object without re-reading disk.
    """
    path = config_path()
    if not path.exists():
        logger.warning("No config file at %s; using defaults", path)
        return Settings()
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    return Settings(**data)


def reload_settings() -> None:
    """
    Clear the cached Settings so that next get_settings() re-reads config.json.
    """
    get_settings.cache_clear()
