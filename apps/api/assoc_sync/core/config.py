from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "CRM Association Sync"
    environment: str = "dev"
    api_prefix: str = "/v1"
    log_level: str = "INFO"

    pg_dsn: str = "sqlite:///./assoc_sync.db"
    db_pool_size: int = Field(default=5, ge=1, le=200)
    db_max_overflow: int = Field(default=10, ge=0, le=400)
    db_pool_recycle_seconds: int = Field(default=1800, ge=30, le=86400)

    redis_url: str = "redis://redis:6379/0"
    queue_mode: str = "redis"
    queue_retry_max: int = Field(default=2, ge=0, le=10)
    queue_retry_interval_seconds: int = Field(default=60, ge=5, le=3600)
    queue_job_timeout_seconds: int = Field(default=3000, ge=60, le=86400)

    sync_webhook_secret: str = ""
    cors_allow_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    passthrough_base_url: str = ""
    passthrough_api_key: str = ""
    customer_id: str = ""
    provider_name: str = ""
    passthrough_timeout_seconds: float = Field(default=30.0, gt=0, le=300)

    contacts_page_size: int = Field(default=100, ge=1, le=100)
    association_tx_max_wait_seconds: float = Field(default=5.0, gt=0, le=120)
    association_tx_timeout_seconds: float = Field(default=10.0, gt=0, le=600)
    association_sync_enabled: bool = True
    # Consumed by the external scheduler; hourly at minute 49.
    association_sync_schedule_cron: str = "49 * * * *"
    association_sync_timezone: str = "US/Pacific"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


@dataclass(frozen=True)
class AssociationSyncConfig:
    """Connection strings and budgets for one sync run, resolved at process entry."""

    base_url: str
    api_key: str
    customer_id: str
    provider_name: str
    page_size: int = 100
    request_timeout_seconds: float = 30.0
    tx_max_wait_seconds: float = 5.0
    tx_timeout_seconds: float = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> AssociationSyncConfig:
        missing = [
            name
            for name, value in (
                ("PASSTHROUGH_BASE_URL", settings.passthrough_base_url),
                ("PASSTHROUGH_API_KEY", settings.passthrough_api_key),
                ("CUSTOMER_ID", settings.customer_id),
                ("PROVIDER_NAME", settings.provider_name),
            )
            if not value.strip()
        ]
        if missing:
            raise ValueError(f"Association sync is not configured: missing {', '.join(missing)}")
        return cls(
            base_url=settings.passthrough_base_url.strip(),
            api_key=settings.passthrough_api_key,
            customer_id=settings.customer_id.strip(),
            provider_name=settings.provider_name.strip(),
            page_size=settings.contacts_page_size,
            request_timeout_seconds=settings.passthrough_timeout_seconds,
            tx_max_wait_seconds=settings.association_tx_max_wait_seconds,
            tx_timeout_seconds=settings.association_tx_timeout_seconds,
        )
