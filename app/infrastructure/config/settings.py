"""Application settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    debug_mode: bool = False
    lead_repository: str = "in_memory"  # in_memory or postgres
    stage_catalog_repository: str = "in_memory"  # in_memory or postgres
    database_url: str = (
        ""  # Required when lead_repository=postgres or stage_catalog_repository=postgres
    )
    redis_url: str = "redis://localhost:6379/0"
    transition_idempotency_enabled: bool = False
    transition_idempotency_ttl_seconds: int = 86400  # 24 hours default
    x_date_lead_days: int = 60
    transition_notifications_enabled: bool = False
    email_sender: str = "log"  # log or smtp
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    sender_email: str = ""
    admin_notification_email: str = ""
    site_url: str = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
    )


settings = Settings()
