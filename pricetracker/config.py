"""Application configuration via Pydantic Settings."""

from typing import List

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pricetracker.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./pricetracker.db"

    @model_validator(mode="after")
    def fix_database_url(self) -> "Settings":
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://"""
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            self.DATABASE_URL = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgres://"):
            self.DATABASE_URL = url.replace("postgres://", "postgresql+asyncpg://", 1)
        return self

    # App
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Bright Data
    BRIGHT_DATA_API_TOKEN: str = ""
    BRIGHT_DATA_API_URL: str = "https://api.brightdata.com"
    WEB_UNLOCKER_ZONE: str = "ecommerce_tracker"
    USER_AGENT: str = "pricetracker/1.0.0"
    HTTP_TIMEOUT: float = 60.0

    # Dataset collection polling
    DATASET_POLL_INTERVAL: float = 2.0
    DATASET_MAX_ATTEMPTS: int = 30

    # Platforms forced onto raw scraping even though a dataset exists
    DISABLED_DATASET_PLATFORMS: str = ""  # Comma-separated platform tags

    def get_disabled_dataset_platforms(self) -> List[str]:
        """Parse DISABLED_DATASET_PLATFORMS into lower-case platform tags.

        Returns:
            List of platform tag strings, empty if the setting is not set
        """
        if not self.DISABLED_DATASET_PLATFORMS:
            return []
        return [
            p.strip().lower()
            for p in self.DISABLED_DATASET_PLATFORMS.split(",")
            if p.strip()
        ]

    def require_api_token(self) -> str:
        """Return the provider token, failing hard when it is not configured.

        Raises:
            ConfigurationError: If BRIGHT_DATA_API_TOKEN is empty
        """
        if not self.BRIGHT_DATA_API_TOKEN:
            raise ConfigurationError(
                "Cannot run the tool server without BRIGHT_DATA_API_TOKEN"
            )
        return self.BRIGHT_DATA_API_TOKEN


settings = Settings()
