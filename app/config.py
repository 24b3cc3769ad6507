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
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_ROLE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    # -------------------------------------------------------------------------
    # Clerk (identity provider)
    # -------------------------------------------------------------------------

    CLERK_JWKS_URL: str = Field(
        default="",
        description="Clerk JWKS endpoint used to verify session tokens"
    )

    CLERK_ISSUER: str = Field(
        default="",
        description="Expected 'iss' claim of Clerk session tokens (empty = not checked)"
    )

    CLERK_WEBHOOK_SECRET: str = Field(
        default="",
        description="Svix signing secret for the Clerk user webhook"
    )

    # -------------------------------------------------------------------------
    # Shared Secrets
    # -------------------------------------------------------------------------
    # Empty means "disabled": requests are rejected rather than let through

    ADMIN_SYNC_KEY: str = Field(
        default="",
        description="Shared admin secret for diagnostic and admin routes (x-admin-key header)"
    )

    CRON_SECRET_KEY: str = Field(
        default="",
        description="Bearer token the external scheduler sends to /api/cron/*"
    )

    # -------------------------------------------------------------------------
    # Public URLs and Analytics
    # -------------------------------------------------------------------------

    PUBLIC_BASE_URL: str = Field(
        default="https://argenstats.com",
        description="Public site URL used in robots.txt and sitemap.xml"
    )

    API_BASE_URL: str = Field(
        default="http://localhost:8000",
        description="Base URL the API client helpers call"
    )

    GA_MEASUREMENT_ID: str = Field(
        default="",
        description="Google Analytics measurement ID exposed to the frontend"
    )

    CLARITY_PROJECT_ID: str = Field(
        default="",
        description="Microsoft Clarity project ID exposed to the frontend"
    )

    # -------------------------------------------------------------------------
    # Upstream Data Sources
    # -------------------------------------------------------------------------

    ARGENTINADATOS_BASE_URL: str = Field(
        default="https://api.argentinadatos.com",
        description="Public API used by the dollar and country-risk refresh jobs"
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
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Query Settings
    # -------------------------------------------------------------------------

    DEFAULT_QUERY_LIMIT: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Rows returned by list endpoints when no limit is given"
    )

    MAX_QUERY_LIMIT: int = Field(
        default=1000,
        ge=1,
        description="Largest limit accepted by list endpoints"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://argenstats.com" -> ["http://localhost:3000", "https://argenstats.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def sitemap_url(self) -> str:
        return f"{self.PUBLIC_BASE_URL.rstrip('/')}/sitemap.xml"

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
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
