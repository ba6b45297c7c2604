"""
Configuration settings for the Content Gateway.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Content Gateway"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # === Content API ===
    CONTENT_API_BASE_URL: str = "https://jsonplaceholder.typicode.com"
    CONTENT_API_TIMEOUT: float = 30.0  # seconds

    # === Generative-text API ===
    GENERATIVE_API_BASE_URL: str = "https://api.anthropic.com"
    GENERATIVE_API_KEY: str = ""
    GENERATIVE_API_VERSION: str = "2023-06-01"
    GENERATIVE_DEFAULT_MODEL: str = "claude-3-5-sonnet-20241022"
    GENERATIVE_DEFAULT_MAX_TOKENS: int = 1000
    GENERATIVE_DEFAULT_TEMPERATURE: float = 0.7
    GENERATIVE_TIMEOUT: float = 120.0  # seconds, dispatch to response completion

    # === Retry ===
    RETRY_MAX_RETRIES: int = 3  # Retries, not attempts: up to 1 + 3 upstream calls
    RETRY_BACKOFF_BASE_SECONDS: float = 1.0  # Doubles per attempt
    RETRY_JITTER: float = 0.0  # Fraction of the delay added on top, never below the floor

    # === Cache ===
    CACHE_TYPE: str = "redis"  # "redis" probes the distributed tier, anything else stays local
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 50
    REDIS_KEY_PREFIX: str = "content-gateway:"
    CACHE_TTL_SECONDS: Optional[int] = None  # No expiry unless set
    CACHE_FALLBACK_ON_ERROR: bool = True  # Demote to local cache on runtime Redis failures
    CACHE_SINGLE_FLIGHT: bool = False  # Coalesce concurrent misses for the same key

    # === Documents ===
    RTF_FONT: str = "Arial"
    DOCUMENT_TITLE: str = "Posts"

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
