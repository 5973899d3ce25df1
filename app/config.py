# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Database (analysis history, error logs) and Storage (uploaded photos)

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    STORAGE_BUCKET: str = Field(
        default="photos",
        description="Public storage bucket that receives uploaded photos"
    )

    # -------------------------------------------------------------------------
    # OpenAI / Vision Model Configuration
    # -------------------------------------------------------------------------

    OPENAI_API_KEY: str = Field(
        ...,
        description="OpenAI API key for the color analysis calls"
    )

    OPENAI_MODEL: str = Field(
        default="gpt-4o",
        description="Vision-capable model with structured (JSON schema) output"
    )

    ANALYSIS_TEMPERATURE: float = Field(
        default=0.4,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for both analysis calls"
    )

    ANALYSIS_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        gt=0,
        le=600,
        description="Hard limit for a single AI request"
    )

    # -------------------------------------------------------------------------
    # Upload Pipeline
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=15,
        ge=1,
        le=100,
        description="Maximum photo size in MB"
    )

    UPLOAD_MAX_ATTEMPTS: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Storage upload attempts before giving up"
    )

    UPLOAD_BACKOFF_BASE_SECONDS: float = Field(
        default=1.0,
        ge=0.0,
        description="Backoff after attempt n is 2**n times this value"
    )

    REACHABILITY_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for the HEAD check on the uploaded photo URL"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting & Monitoring
    # -------------------------------------------------------------------------

    RATE_LIMIT_MAX_ATTEMPTS: int = Field(
        default=5,
        ge=1,
        description="Analyses allowed per user per window"
    )

    RATE_LIMIT_WINDOW_SECONDS: int = Field(
        default=900,
        ge=1,
        description="Rate limit sliding window (seconds)"
    )

    SLOW_OPERATION_SECONDS: float = Field(
        default=5.0,
        gt=0,
        description="Stages slower than this are logged as performance warnings"
    )

    ERROR_LOG_CAPACITY: int = Field(
        default=100,
        ge=1,
        description="Error records kept in memory"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:5173, https://myapp.com" -> ["http://localhost:5173", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB (MiB) to bytes for file size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
