"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    sendgrid_api_key: str
    email_from: str = "noreply@bmspros.com.au"
    booking_base_url: str = "https://book.bmspros.com.au"
    webhook_secret: str | None = None
    accounts_table: str = "users"
    slot_holds_table: str = "slot_holds"
    scheduler_enabled: bool = True
    hold_sweep_interval_seconds: int = Field(default=300, gt=0)
    hold_sweep_batch_size: int = Field(default=500, gt=0, le=500)
    slug_claim_max_attempts: int = Field(default=5, gt=0)
    store_timeout_seconds: float = 10
    email_timeout_seconds: float = 10
    invocation_timeout_seconds: float = 120
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
