"""
Configuration settings for the time tracker.

Uses Pydantic Settings to load environment variables (and an optional `.env`
file) for database connections, the HTTP server, the external people-info
service, and logging.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    app_env: str = Field("local", alias="APP_ENV")
    log_level: Optional[str] = Field(None, alias="LOG_LEVEL")

    # Database
    db_url: Optional[str] = Field(None, alias="DB_URL")
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("time_tracker", alias="DB_NAME")

    # Connection pool
    db_pool_min_size: int = Field(2, alias="DB_POOL_MIN_SIZE")
    db_pool_max_size: int = Field(10, alias="DB_POOL_MAX_SIZE")
    db_pool_max_idle_seconds: float = Field(300.0, alias="DB_POOL_MAX_IDLE_SECONDS")
    db_command_timeout: float = Field(30.0, alias="DB_COMMAND_TIMEOUT")

    # HTTP server
    server_host: str = Field("0.0.0.0", alias="SERVER_HOST")
    server_port: int = Field(8080, alias="SERVER_PORT")
    req_timeout: float = Field(5.0, alias="REQ_TIMEOUT")
    idle_timeout: float = Field(60.0, alias="IDLE_TIMEOUT")
    shutdown_grace_period: float = Field(10.0, alias="SHUTDOWN_GRACE_PERIOD")

    # External people-info service
    external_api_host: str = Field("localhost", alias="EXTERNAL_API_HOST")
    external_api_port: int = Field(8081, alias="EXTERNAL_API_PORT")
    external_api_timeout: float = Field(5.0, alias="EXTERNAL_API_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def build_dsn(self) -> str:
        """Compose the PostgreSQL DSN, preferring an explicit DB_URL."""
        if self.db_url:
            return self.db_url
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def external_api_base_url(self) -> str:
        return f"http://{self.external_api_host}:{self.external_api_port}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
