"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Server settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None
    openai_timeout_seconds: float = 30.0
    ai_rate_limit_requests: int = 10
    ai_rate_limit_window_seconds: int = 60
    session_cookie_name: str = "sb-access-token"
    skip_email_confirmation: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


class ClientSettings(BaseSettings):
    """Settings for the API client and view controllers."""

    api_base_url: str = "http://localhost:8000"
    request_timeout: float = 15.0
    dashboard_page_size: int = 30
    day_meals_limit: int = 100

    model_config = SettingsConfigDict(
        env_prefix="CALORIE_TRACKER_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
