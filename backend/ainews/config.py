"""
Application configuration using Pydantic Settings.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ainews.models.domain import Category


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "AI News Reader"
    app_version: str = "0.1.0"
    debug: bool = Field(default=False)
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./ainews.db",
        description="Async database URL (SQLAlchemy format)",
    )

    # API Keys (all optional for local development)
    newsapi_key: str | None = Field(default=None)
    gnews_api_key: str | None = Field(default=None)
    perplexity_api_key: str | None = Field(default=None)
    anthropic_api_key: str | None = Field(default=None)

    perplexity_base_url: str = Field(default="https://api.perplexity.ai")

    # Feed sources
    news_country: str = Field(default="us")
    news_language: str = Field(default="en")
    articles_per_source: int = Field(
        default=3,
        ge=1,
        le=100,
        description="Articles requested per source per category (kept low for free tiers)",
    )
    fetch_timeout_seconds: float = Field(default=10.0, gt=0)

    # Summarizer
    summary_models: list[str] = Field(
        default=["sonar-pro", "sonar"],
        description="Perplexity models tried in order",
    )
    anthropic_models: list[str] = Field(
        default=["claude-3-haiku-20240307"],
        description="Anthropic models appended to the chain when a key is set",
    )
    summary_max_input_chars: int = Field(default=1500, ge=1)
    summary_max_tokens: int = Field(default=100, ge=1)
    summary_temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    summary_timeout_seconds: float = Field(default=30.0, gt=0)

    # Aggregation pipeline
    enrichment_limit: int = Field(
        default=5,
        ge=0,
        description="Leading articles summarized per run; the rest get a placeholder",
    )
    category_delay_seconds: float = Field(
        default=1.0,
        description="Pause between categories to stay under provider rate limits",
    )
    summary_delay_seconds: float = Field(
        default=3.0,
        description="Pause between summarizer calls (low per-minute quota)",
    )

    # News feed
    page_size: int = Field(default=20, ge=1, le=100)
    min_cached_articles: int = Field(
        default=5,
        ge=0,
        description="Below this many stored matches a live refresh is triggered",
    )
    default_categories: list[Category] = Field(default=[Category.GENERAL])

    # Scheduler
    scheduler_enabled: bool = Field(default=True)
    refresh_interval_minutes: int = Field(default=60, ge=1)
    refresh_startup_delay_seconds: float = Field(default=2.0, ge=0)

    # Auth
    jwt_secret: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")
    token_expire_hours: int = Field(default=24, ge=1)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
    )

    @field_validator("category_delay_seconds", "summary_delay_seconds")
    @classmethod
    def validate_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Delays must not be negative")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
