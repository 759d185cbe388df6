"""Configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from SHEETRECORDS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SHEETRECORDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google auth
    access_token: str = ""
    service_account_path: str = ""

    # Default target, used when the CLI is not given one
    spreadsheet_id: str = ""
    range_name: str = ""

    # HTTP
    timeout: int = 60

    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
