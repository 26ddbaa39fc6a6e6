"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    image_bucket: str = "food-images"
    openai_api_key: str
    openai_vision_model: str = "gpt-4o-mini"
    openai_insight_model: str = "gpt-4o-mini"
    openai_reasoning_effort: str | None = None
    openai_store: bool = False
    analysis_timeout_seconds: float = 60.0
    insight_timeout_seconds: float = 30.0
    profile_retry_attempts: int = 3
    profile_retry_delay_seconds: float = 1.0
    aggregate_cache_ttl_seconds: int = 300
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
