"""Application settings loaded from the environment."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Default data directory (next to the source checkout)
DEFAULT_DATA_DIR = Path(__file__).parent.parent.parent / "data"


class Settings(BaseSettings):
    """Runtime configuration for repcycle.

    Every field can be overridden with a ``REPCYCLE_`` prefixed environment
    variable or a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="REPCYCLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = DEFAULT_DATA_DIR
    db_filename: str = "repcycle.db"

    # Strava sync relay
    strava_sync_api_base_url: str = ""
    strava_timeout_seconds: float = 10.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def strava_configured(self) -> bool:
        """Check if the sync relay URL is set."""
        return bool(self.strava_sync_api_base_url.strip())

    @property
    def strava_base_url(self) -> str | None:
        """Relay base URL without trailing slashes."""
        if not self.strava_configured:
            return None
        return self.strava_sync_api_base_url.strip().rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
