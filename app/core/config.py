"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here — no scattered magic strings.
"""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode (exposes /docs). Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        storage_backend: "postgres" for the SQL adapters, "memory" for
            the process-local store.
        database_url: Full SQLAlchemy DSN. Built from postgres_* when unset.
        db_pool_size: SQLAlchemy connection pool size.
        create_schema_on_startup: Apply db/schema.sql when the app starts.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    project_name: str = "Stock Trade API"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"

    storage_backend: Literal["postgres", "memory"] = "postgres"
    database_url: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "brokerage"
    db_pool_size: int = 5
    create_schema_on_startup: bool = False

    def get_database_dsn(self) -> str:
        """Return the effective DSN for the brokerage database.

        Priority:
        1. Explicit `DATABASE_URL`
        2. DSN built from postgres_* values (Docker Compose or local setups)
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
