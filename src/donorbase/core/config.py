"""DonorBase settings.

Values come from ``DONORBASE_*`` environment variables or a ``.env`` file
and are validated once when the settings object is built. Use
``get_settings()`` everywhere; it returns one shared instance per process.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the API server, CLI and services."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DONORBASE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "DonorBase"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = Field(default=1, ge=1)

    # Storage. Pool options only apply to server databases, not SQLite.
    database_url: str = "sqlite+aiosqlite:///./db_data/donorbase.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Browser clients
    cors_origins: list[str] = Field(default=["http://localhost:3000", "http://localhost:5173"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Realtime snapshot streams
    realtime_heartbeat_seconds: float = Field(default=30.0, gt=0)
    realtime_max_subscriptions: int = Field(
        default=3, ge=1, description="Topics one WebSocket connection may follow"
    )

    # Donations
    reject_non_positive_amounts: bool = Field(
        default=False,
        description="Reject zero and negative amounts instead of recording them",
    )
    projection_placeholder: str = Field(
        default="-", description="Shown for current fields a donation has no value for"
    )
    export_currency_label: str = Field(default="INR", min_length=1, max_length=8)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v: str | list[str]) -> list[str]:
        """Accept ``a,b`` as well as a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("export_currency_label")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @model_validator(mode="after")
    def check_single_writer(self) -> "Settings":
        """SQLite allows one writer process, so the server must run one worker."""
        if self.is_sqlite and self.workers > 1:
            raise ValueError(
                f"workers={self.workers} is not supported with SQLite; "
                "run a single worker or point DONORBASE_DATABASE_URL at a server database"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
