"""
Catalog Admin
Centralized Configuration Management

Configuration is read with Pydantic settings from environment variables
and an optional ``.env`` file, validated once and cached.
"""

from datetime import date
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENVIRONMENTS = ("development", "staging", "production", "testing")


class DatabaseSettings(BaseSettings):
    """PostgreSQL Database Configuration"""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_", populate_by_name=True)

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    db: str = Field(default="catalog", alias="POSTGRES_DB", description="Database name")
    user: str = Field(default="catalog", description="Database user")
    password: SecretStr = Field(default="secure_password", description="Database password")
    echo: bool = Field(default=False, description="Echo SQL queries")
    url: Optional[str] = Field(
        default=None,
        alias="DATABASE_URL",
        description="Full SQLAlchemy async URL (overrides host/port)",
    )

    @property
    def async_url(self) -> str:
        """Async database URL - uses DATABASE_URL if set, otherwise builds an asyncpg URL"""
        if self.url:
            return self.url
        return f"postgresql+asyncpg://{self.user}:{self.password.get_secret_value()}@{self.host}:{self.port}/{self.db}"


class CatalogSettings(BaseSettings):
    """Catalog View Assembly Configuration"""

    model_config = SettingsConfigDict(env_prefix="CATALOG_")

    reference_date: Optional[date] = Field(
        default=None,
        description="Fixed reference date for pricing windows (defaults to today)",
    )
    discount_backend: Literal["local", "database"] = Field(
        default="local",
        description="Where discounted prices are computed: local strategies or the stored procedure",
    )
    discount_basis: Literal["variant", "region"] = Field(
        default="variant",
        description="Price fed to the discount function: variant base price or regional price",
    )
    discount_procedure: str = Field(
        default="pm_calculate_discounted_price",
        description="Name of the stored procedure used by the database discount backend",
    )


class SecuritySettings(BaseSettings):
    """HTTP Security Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins"
    )


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="", populate_by_name=True)

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="json", alias="LOG_FORMAT", description="Log renderer")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="catalog-admin", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        env = v.lower()
        if env not in ENVIRONMENTS:
            raise ValueError(f"APP_ENV must be one of: {', '.join(ENVIRONMENTS)}")
        return env

    @property
    def is_development(self) -> bool:
        """Development runs create missing tables on startup"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    The environment is read once per process; tests build their own
    ``Settings`` instead of clearing the cache.
    """
    return Settings()

