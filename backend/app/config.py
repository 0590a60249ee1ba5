"""
Product API: Application Configuration
=========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before app starts.

Only two knobs matter to API consumers: the listening port (PORT, default
9000) and the database connection string (DATABASE_URL). Everything else
has a development-friendly default.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Format: mongodb://host:port/dbname
    # The database name is taken from the URL path when present.
    database_url: str = Field(
        default="mongodb://127.0.0.1:27017/dummy",
        description="MongoDB connection URL",
    )

    # Used only when database_url carries no database path
    database_name: str = Field(default="dummy")

    products_collection: str = Field(default="products")

    # How long the driver waits to find a usable server before failing an operation
    mongo_server_selection_timeout_ms: int = Field(default=5000, ge=100, le=60000)

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=9000, ge=1, le=65535)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Rejects connection strings the driver could never parse."""
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                f"Invalid database_url '{v}'. Must start with mongodb:// or mongodb+srv://"
            )
        return v

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # PORT and port both work
        "extra": "ignore",
    }


# Singleton instance, imported throughout the application
settings = Settings()
