"""
Inventory API - Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the database helpers and the entry point.
When:  Loaded once at module import time.

Environment variables (case-insensitive):
    MONGODB_URI          Store connection string
    MONGODB_DATABASE     Database used when the URI does not name one
    MONGODB_TIMEOUT_MS   Server selection timeout in milliseconds
    HOST / PORT          Listen address for uvicorn
    PUBLIC_URL           Extra server entry in the OpenAPI document
    CORS_ORIGINS         Comma-separated allowed origins ("*" for any)
    LOG_LEVEL            DEBUG, INFO, WARNING, ERROR, CRITICAL
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every setting has a default suitable for local development against a
    MongoDB instance on localhost.
    """

    # ── Document Store ────────────────────────────────────────────────────
    # Format: mongodb://[user:password@]host[:port]/[database][?options]
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017/productos",
        description="MongoDB connection string",
    )

    mongodb_database: str = Field(
        default="productos",
        description="Database name used when the URI does not include one",
    )

    # Only the server selection timeout is tuned; all other driver
    # timeouts keep their defaults.
    mongodb_timeout_ms: int = Field(default=5000, ge=100, le=120_000)

    @field_validator("mongodb_uri")
    @classmethod
    def validate_mongodb_uri(cls, v: str) -> str:
        """Rejects connection strings the driver would not accept."""
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                "MONGODB_URI must start with 'mongodb://' or 'mongodb+srv://'"
            )
        return v

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)

    # Listed next to the local server in the OpenAPI "servers" block
    public_url: Optional[str] = Field(default=None)

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Logging ───────────────────────────────────────────────────────────
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

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance, imported throughout the application
settings = Settings()
