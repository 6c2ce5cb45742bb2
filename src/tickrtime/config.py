"""Application configuration via pydantic-settings."""

import json
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tickrtime.core.constants import (
    DEFAULT_FINNHUB_API_URL,
    DEV_JWT_SECRET,
    ENRICHMENT_BATCH_SIZE,
    ENRICHMENT_DELAY_SECONDS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Core
    env: Literal["development", "staging", "production"] = Field(
        default="development", alias="TICKRTIME_ENV"
    )
    debug: bool = Field(default=False, alias="TICKRTIME_DEBUG")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="TICKRTIME_LOG_LEVEL"
    )

    # Redis
    redis_url: str = Field(default="redis://localhost:6379/0")

    # Finnhub
    finnhub_api_key: SecretStr | None = Field(
        default=None,
        description="Finnhub API key for earnings calendar and ticker data",
    )
    finnhub_api_url: str = Field(default=DEFAULT_FINNHUB_API_URL)
    finnhub_timeout: float = Field(default=30.0, description="Finnhub request timeout (seconds)")
    finnhub_max_concurrency: int = Field(
        default=4,
        ge=1,
        description="Max concurrent sub-range requests per calendar query",
    )

    # Auth
    jwt_secret: SecretStr = Field(default=SecretStr(DEV_JWT_SECRET), validate_default=True)
    jwt_expire_days: int = Field(default=7, ge=1)

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr, info: ValidationInfo) -> SecretStr:
        """Require a real signing secret in production."""
        env = info.data.get("env", "development")
        if env == "production" and v.get_secret_value() in ("", DEV_JWT_SECRET):
            raise ValueError("JWT_SECRET must be set in production")
        return v

    # Cron
    cron_secret: SecretStr | None = Field(
        default=None,
        description="Shared secret expected in the x-cron-secret header",
    )

    # CORS
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:3001",
            "http://localhost:3002",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:3001",
            "http://127.0.0.1:3002",
        ],
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str] | None) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                v = json.loads(v)
            else:
                v = [o.strip() for o in v.split(",") if o.strip()]
        return [o.rstrip("/") for o in v]

    # Ticker universe sync
    ticker_sync_enabled: bool = Field(default=True)
    ticker_sync_hour: int = Field(default=6, ge=0, le=23, description="UTC hour for daily sync")
    ticker_enrichment_batch_size: int = Field(default=ENRICHMENT_BATCH_SIZE, ge=0)
    ticker_enrichment_delay: float = Field(
        default=ENRICHMENT_DELAY_SECONDS,
        ge=0,
        description="Pause between profile requests during enrichment (seconds)",
    )

    @property
    def is_production(self) -> bool:
        return self.env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
