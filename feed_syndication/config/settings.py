"""
Centralized configuration using Pydantic BaseSettings.
All environment variables are loaded here - no hardcoded values.
"""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Syndication Feed Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Site
    SITE_NAME: str = "Stylist"
    WEB_BASE_URL: str = "https://www.example.com"
    IMAGES_HOST: Optional[str] = None  # Hostname override for hero images
    SITE_CHARSET: str = "UTF-8"

    # Feed
    FEED_LANGUAGE: str = "en-US"
    FEED_ITEM_LIMIT: int = 30
    EMBED_PROXY_DOMAIN: str = "embedly.com"

    # Content-length lookup for MSN enclosures
    CONTENT_LENGTH_TIMEOUT_SEC: float = 2.0
    CONTENT_LENGTH_CACHE_TTL_SEC: int = 3600

    # Circuit Breaker
    CIRCUIT_BREAKER_FAILURE_THRESHOLD: int = 5
    CIRCUIT_BREAKER_RECOVERY_TIMEOUT_SEC: int = 30

    # Telemetry
    ENABLE_OTEL: bool = False  # Default to False to prevent gRPC errors in dev
    ENABLE_PROMETHEUS: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance - singleton pattern."""
    return Settings()
