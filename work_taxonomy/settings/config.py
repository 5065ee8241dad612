"""
Settings module for the work taxonomy engine.

Environment-based configuration with sensible defaults.
All settings can be overridden via WORK_TAXONOMY_* environment variables
or a local .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Either set WORK_TAXONOMY_DATABASE_URL directly or provide the individual
    WORK_TAXONOMY_DB_* parts; the URL wins when both are present.
    """

    # Environment
    environment: str = Field(
        default="development",
        description="Environment name (development, staging, production)"
    )

    # Database
    database_url: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy database URL"
    )
    db_driver: str = Field(
        default="postgresql",
        description="SQLAlchemy driver name used when assembling the URL"
    )
    db_host: str = Field(default="localhost", description="Database host")
    db_port: int = Field(default=5432, description="Database port")
    db_user: str = Field(default="postgres", description="Database user")
    db_password: Optional[str] = Field(
        default=None,
        description="Database password"
    )
    db_name: str = Field(default="work_taxonomy", description="Database name")
    db_echo: bool = Field(
        default=False,
        description="Echo SQL statements (debugging only)"
    )

    # Coverage
    saturation_threshold: int = Field(
        default=4,
        ge=1,
        description="Linked skills a work type needs to count as saturated"
    )
    knowledge_base_path: Optional[str] = Field(
        default=None,
        description="Default knowledge base JSON file for reconciliation passes"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string"
    )
    datadog_service: str = Field(
        default="work-taxonomy",
        description="Service name reported to Datadog"
    )

    model_config = SettingsConfigDict(
        env_prefix="WORK_TAXONOMY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def sqlalchemy_url(self):
        """Database URL, assembled from the individual parts when not set."""
        if self.database_url:
            return self.database_url
        return URL.create(
            drivername=self.db_driver,
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are cached for performance. To reload, use:
        get_settings.cache_clear()

    Returns:
        Settings instance
    """
    return Settings()

