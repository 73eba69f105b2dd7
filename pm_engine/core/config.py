from functools import lru_cache
from typing import Literal

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pm_engine.domain.maintenance.value_objects.enums import WorkOrderPriority


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "pm-engine"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "test", "staging", "production"] = "local"

    # Database
    DATABASE_URL: str = "sqlite:///./pm_engine.db"
    DATABASE_ECHO: bool = False
    DATABASE_POOL_PRE_PING: bool = True
    SQLITE_BUSY_TIMEOUT_SECONDS: float = 30.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        # Hosted Postgres URLs come without a driver; pin psycopg
        if self.DATABASE_URL.startswith("postgresql://"):
            return self.DATABASE_URL.replace(
                "postgresql://", "postgresql+psycopg://", 1
            )
        elif self.DATABASE_URL.startswith("postgres://"):
            return self.DATABASE_URL.replace("postgres://", "postgresql+psycopg://", 1)
        return self.DATABASE_URL

    # Observability Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # "json" or "console"
    LOG_SQL: bool = False

    @field_validator("LOG_FORMAT")
    @classmethod
    def _validate_log_format(cls, v: str) -> str:
        if v not in ("json", "console"):
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return v

    # PM engine behaviour
    RECENT_WORK_ORDERS_LIMIT: int = 5
    DEFAULT_WORK_ORDER_PRIORITY: WorkOrderPriority = WorkOrderPriority.MEDIUM


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
