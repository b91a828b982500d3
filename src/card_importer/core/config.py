"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        description="PostgreSQL async connection string",
    )
    database_schema: str | None = Field(
        default=None,
        description="PostgreSQL schema for isolated environments (e.g., pr_42)",
    )

    @field_validator("database_schema")
    @classmethod
    def validate_database_schema(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not re.match(r"^[a-z_][a-z0-9_]{0,62}$", v):
            msg = "Invalid database_schema: must match ^[a-z_][a-z0-9_]{0,62}$"
            raise ValueError(msg)
        return v

    # JWT (tokens are issued by the auth platform; this service only verifies them)
    jwt_secret_key: str = Field(min_length=32, description="Secret used to verify access tokens (minimum 32 characters)")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_audience: str = Field(default="authenticated", description="Expected access token audience")

    # Collection import
    import_batch_size: int = Field(
        default=50,
        description="Export rows mapped and inserted per batch",
        gt=0,
    )
    import_problem_log_limit: int = Field(
        default=500,
        description="Maximum per-row problem entries kept on an import job",
        ge=0,
    )
    import_max_file_size_mb: int = Field(
        default=20,
        description="Largest accepted upload in megabytes",
        gt=0,
    )
    listing_currency: str = Field(
        default="GBP",
        description="Currency code given to imported listings",
        min_length=3,
        max_length=3,
    )

    # Remote functions
    functions_base_url: str = Field(
        default="",
        description="Base URL of the serverless functions endpoint (e.g. https://<project>.supabase.co/functions/v1)",
    )
    functions_api_key: str = Field(
        default="",
        description="Public API key sent with function calls",
    )
    portfolio_import_function: str = Field(
        default="import-collectr-portfolio",
        description="Name of the function that imports a portfolio showcase URL",
    )
    functions_timeout: float = Field(
        default=60.0,
        description="Remote function request timeout in seconds",
        gt=0,
    )

    @field_validator("listing_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.upper()

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (must be explicitly configured)",
    )
    cors_origin_regex: str = Field(
        default="",
        description="Regex pattern for allowed CORS origins",
    )

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (e.g. production, dev, staging)",
    )

    # API
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version prefix",
    )

    @property
    def import_max_file_size_bytes(self) -> int:
        return self.import_max_file_size_mb * 1024 * 1024

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]
