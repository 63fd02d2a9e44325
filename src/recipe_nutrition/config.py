"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from recipe_nutrition.services.nutrition import DEFAULT_MAX_DEPTH, MissingDataPolicy

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    max_nesting_depth: int = DEFAULT_MAX_DEPTH
    missing_data_policy: MissingDataPolicy = MissingDataPolicy.ZERO
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
