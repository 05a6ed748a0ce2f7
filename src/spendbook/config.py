"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str | None = None

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/spending.db"
    db_echo: bool = False

    # Money / amounts
    base_currency: str = "CZK"

    # Two-phase import sessions
    import_session_max_size: int = 100
    import_session_ttl_seconds: int = 3600

    # Exchange rates
    exchange_rate_api_url: str = "https://open.er-api.com/v6/latest"
    exchange_rate_ttl_seconds: int = 3600
    exchange_rate_timeout_seconds: float = 10.0

    # Uploads
    max_upload_size_mb: int = 5
    max_files_per_upload: int = 10

    @field_validator("base_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Store the base currency as an upper-case ISO code."""
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("base_currency must be a 3-letter ISO code")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
