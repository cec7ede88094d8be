"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.durations import parse_duration

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"

    # HTTP listener
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Storage backend: "postgres" (production) or "sqlite" (local/testing)
    DB_TYPE: Literal["postgres", "sqlite"] = "sqlite"

    # Postgres connection; only used when DB_TYPE=postgres
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: SecretStr = SecretStr("postgres")
    DB_NAME: str = "fleet_auth"
    DB_POOL_SIZE: int = 10
    DB_CONNECT_TIMEOUT_SEC: int = 10
    # Pooled connections idle longer than this are recycled
    DB_IDLE_TIMEOUT_SEC: int = 300

    # SQLite database file; only used when DB_TYPE=sqlite
    SQLITE_PATH: str = "./test.db"

    # JWT authentication
    JWT_SECRET: SecretStr = SecretStr("change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    # Number + unit, e.g. "30m", "24h", "7d"
    JWT_EXPIRES_IN: str = "24h"

    # Create the USERS table and seed the roster when it is missing or empty
    AUTO_SEED_ON_STARTUP: bool = True

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = (v or "").strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}")
        return level

    @field_validator("PORT", "DB_PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("DB_HOST", "DB_USER", "DB_NAME")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Database host, user and name must be non-empty")
        return v.strip()

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        if v < 1 or v > 100:
            raise ValueError("DB_POOL_SIZE must be between 1 and 100")
        return v

    @field_validator("DB_CONNECT_TIMEOUT_SEC", "DB_IDLE_TIMEOUT_SEC")
    @classmethod
    def validate_timeouts(cls, v: int) -> int:
        if v < 1 or v > 3600:
            raise ValueError("Database timeouts must be between 1 and 3600 seconds")
        return v

    @field_validator("SQLITE_PATH")
    @classmethod
    def validate_sqlite_path(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SQLITE_PATH must be set and non-empty")
        return v.strip()

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ALGORITHM must be set and non-empty")
        return v.strip()

    @field_validator("JWT_EXPIRES_IN")
    @classmethod
    def validate_jwt_expires_in(cls, v: str) -> str:
        # Raises ValueError for malformed values such as "7 days" or "-1h".
        parse_duration(v)
        return v.strip()


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
