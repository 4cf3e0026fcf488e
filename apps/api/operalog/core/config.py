"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_SEVEN_DAYS_SECONDS = 7 * 24 * 60 * 60


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expires_in_seconds: int = _SEVEN_DAYS_SECONDS

    storage_backend: Literal["memory", "postgres"] = "postgres"
    database_url: str | None = None
    database_pool_min_size: int = 1
    database_pool_max_size: int = 10

    environment: Literal["development", "production", "test"] = "development"
    cors_allow_origins: list[str] = [
        "http://localhost:5173",
        "https://perenco-frontend.onrender.com",
    ]
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="OPERALOG_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
