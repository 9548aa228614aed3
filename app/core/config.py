"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here, no scattered magic strings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Rate limit for write endpoints.
        rate_limit_heavy: Rate limit for the discovery query.
        database_url: Full SQLAlchemy URL; overrides the postgres_* parts.
        auto_create_schema: Create missing tables at startup.
        default_search_radius_km: Radius given to new members.
        max_search_radius_km: Upper bound a member may choose.
        default_temperature: Starting reputation of new members.
        ranking_size: Entries in the top-liked and warmest rankings.
        max_page_size: Largest page a paged query may request.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Neighborhood Market"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "30/minute"

    database_url: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "market"
    auto_create_schema: bool = False
    sql_echo: bool = False

    default_search_radius_km: float = 3.0
    max_search_radius_km: float = 50.0
    default_temperature: float = 36.5
    ranking_size: int = 3
    max_page_size: int = 100

    def get_database_dsn(self) -> str:
        """Return the effective database DSN.

        Priority:
        1. Explicit `DATABASE_URL`
        2. Build DSN from postgres_* values (useful for Docker Compose or local setups)
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
