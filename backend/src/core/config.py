"""
Application configuration using Pydantic Settings.

Supports hierarchical environment configuration:
- .env.base: Common non-secret defaults (committed to git)
- .env.{ENVIRONMENT}: Environment-specific overrides (gitignored)
- Environment variables: Highest priority
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get environment from env var, default to development
ENV = os.getenv("ENVIRONMENT", "development")


class Settings(BaseSettings):
    """Application settings with hierarchical env file support."""

    model_config = SettingsConfigDict(
        env_file=[
            ".env.base",
            f".env.{ENV}",
        ],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "test", "production"] = "development"
    port: int = 5000

    # Database connections
    mongodb_url: str = Field(
        "mongodb://localhost:27017/krypton_db",
        validation_alias=AliasChoices("mongodb_url", "mongo_uri", "mongodb_uri"),
    )
    redis_url: str | None = None  # Optional: enables the spot price cache

    # Security
    secret_key: str | None = Field(
        None, validation_alias=AliasChoices("secret_key", "jwt_secret")
    )
    require_secret_key: bool = False  # Refuse to start without SECRET_KEY
    token_expire_days: int = 7
    bcrypt_rounds: int = 12
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Market data (CoinGecko)
    reference_currency: str = "usd"
    coingecko_api_key: str = ""
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    price_timeout_seconds: float = 10.0
    price_cache_ttl_seconds: int = 60

    # Rate limiting
    rate_limit_storage_uri: str = "memory://"
    rate_limit_default: str = "200/minute"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
