"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from glycemic_tracker.domain.models import StoreMode

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Supabase and OpenAI credentials are optional: without them the service
    runs against the in-process store and returns simulated analyses.
    """

    supabase_url: str | None = None
    supabase_key: str | None = None
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    openai_base_url: str | None = None
    analysis_temperature: float = 0.3
    plan_temperature: float = 0.7
    analysis_max_output_tokens: int = 1500
    ai_timeout_seconds: float = 30.0
    store_read_timeout_seconds: float = 5.0
    store_write_timeout_seconds: float = 10.0
    recent_meals_limit: int = 10
    default_timezone: str = "UTC"
    login_url: str = "/auth/login"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def store_mode(self) -> StoreMode:
        """Return which store variant the credentials allow."""
        if self.supabase_url and self.supabase_key:
            return StoreMode.ONLINE
        return StoreMode.OFFLINE
