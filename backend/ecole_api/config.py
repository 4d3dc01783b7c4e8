"""
École API — Application Configuration
======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; checked again in the app lifespan.

Missing provider credentials are NOT fatal: the server still starts, answers
health checks, and reports the disabled dependency through API responses.
"""

from enum import Enum
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class AuditMode(str, Enum):
    """How an audit write failure affects the triggering identity mutation."""

    BEST_EFFORT = "best_effort"  # log and return the mutation result
    STRICT = "strict"            # fail the request (mutation is not rolled back)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── Supabase (auth + relational data) ─────────────────────────────────
    # What: Project URL and service-role key of the hosted provider
    # Why service role: Admin user management needs auth.admin.* endpoints
    supabase_url: str = Field(default="", description="Supabase project URL")
    supabase_key: str = Field(default="", description="Supabase service-role API key")

    # ── Token verification ────────────────────────────────────────────────
    # What: Secret used by the provider to sign access tokens
    # Why HS256: Supabase signs project JWTs with the shared project secret
    jwt_secret: str = Field(default="", description="JWT signing secret")
    jwt_algorithm: str = Field(default="HS256")
    # Empty string disables the audience check
    jwt_audience: str = Field(default="authenticated")

    # ── Google Drive ──────────────────────────────────────────────────────
    google_client_id: str = Field(default="")
    google_client_secret: str = Field(default="")
    google_refresh_token: str = Field(default="")
    google_drive_folder_id: str = Field(default="", description="Parent folder for uploads")
    google_token_uri: str = Field(default="https://oauth2.googleapis.com/token")

    # What: Maximum accepted upload size in bytes
    # Default: 20MB = 20 * 1024 * 1024
    max_upload_size: int = Field(default=20_971_520, ge=1_048_576, le=104_857_600)

    # ── Audit trail ───────────────────────────────────────────────────────
    audit_mode: AuditMode = Field(default=AuditMode.BEST_EFFORT)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(LOG_LEVELS)}, got '{v}'")
        return level

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every missing value and raises one ValueError listing them.
        """
        errors = []
        if not self.supabase_configured:
            errors.append("SUPABASE_URL / SUPABASE_KEY are not set; data routes will answer 503.")
        if not self.jwt_secret:
            errors.append("JWT_SECRET is not set; every authenticated route will answer 403.")
        if not self.google_drive_folder_id:
            errors.append("GOOGLE_DRIVE_FOLDER_ID is not set; uploads land in the Drive root.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
