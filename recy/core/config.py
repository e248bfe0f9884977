"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here; no scattered magic strings.
"""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        log_format: "text" for development consoles, "json" for log shippers.
        rate_limit_enabled: Toggle slowapi enforcement.
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for endpoints calling external services.
        storage_backend: "sql" for the relational store, "memory" for a
            process-local store (development and tests only).
        auto_create_schema: Create missing tables at startup.
        web3_service_url: Base URL of the NFT minting service.
        web3_timeout_seconds: HTTP timeout for minting calls.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Recy Network"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"
    rate_limit_enabled: bool = True
    rate_limit_default: str = "100/minute"
    rate_limit_heavy: str = "10/minute"

    storage_backend: Literal["sql", "memory"] = "sql"
    auto_create_schema: bool = False

    # Postgres settings
    database_url: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "recy_network"

    web3_service_url: str = "http://localhost:4000"
    web3_timeout_seconds: float = 30.0

    def get_database_dsn(self) -> str:
        """Return the effective DSN for the record store.

        Priority:
        1. Explicit `DATABASE_URL`
        2. Build DSN from postgres_* values (useful for Docker Compose or local setups)
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
