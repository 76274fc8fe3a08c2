"""Application configuration and settings management."""
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables or .env."""

    model_config = SettingsConfigDict(
        env_file=(Path(__file__).resolve().parent.parent / ".." / ".env"),
        env_file_encoding="utf-8",
        env_prefix="TRAVELBLOG_",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = "Travel Blog"
    secret_key: str = "change-me"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./travelblog.db"

    # Credential store (static JSON seed file)
    users_file: str = "users.json"

    # Sessions
    session_cookie_name: str = "session"
    session_cookie_secure: bool = True
    session_ttl_seconds: int = 60 * 60 * 24
    remember_me_ttl_seconds: int = 60 * 60 * 24 * 7
    allowed_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8788",
    ]

    # Listing
    default_page_size: int = 20
    max_page_size: int = 100

    # Cloudflare Images (photos)
    images_account_id: str | None = None
    images_account_hash: str | None = None
    images_api_token: str | None = None
    images_api_base: str = "https://api.cloudflare.com/client/v4"
    max_photo_size_mb: int = 10

    # Local object store (videos)
    media_root: str = "./media"
    media_base_url: str = "/media"
    max_video_size_mb: int = 200

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: List[str] | str) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings instance."""

    return Settings()
