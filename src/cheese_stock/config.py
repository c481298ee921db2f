"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

FULL_DEPLETION_NOTE = "Corte final – queso agotado"
DEFAULT_CUT_NOTE = "Corte sin observaciones"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"
    full_depletion_note: str = FULL_DEPLETION_NOTE
    default_cut_note: str = DEFAULT_CUT_NOTE

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
