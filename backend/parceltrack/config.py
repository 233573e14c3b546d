"""
ParcelTrack Backend — Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before app starts.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults that match the layout of a fresh
    checkout: records in ./packages.json, photos under ./public/uploads.
    """

    # ── Record Store ──────────────────────────────────────────────────────
    # What: Path of the JSON file holding the whole package collection
    # Format: A JSON array of record objects, rewritten on every mutation
    data_file: str = Field(
        default="packages.json",
        description="Path of the JSON record store",
    )

    # ── Static Files ──────────────────────────────────────────────────────
    # What: Directory served as-is at the site root (stylesheets, images)
    # Routes registered by the app take precedence over files of the same path
    public_dir: str = Field(default="public")

    # ── Uploads ───────────────────────────────────────────────────────────
    # What: Directory holding uploaded photos, served under upload_url_prefix
    # Records reference photos as f"{upload_url_prefix}/{stored_name}"
    upload_dir: str = Field(default="public/uploads")
    upload_url_prefix: str = Field(default="/uploads")

    # What: Maximum allowed photo size in bytes
    # Default: 10MB = 10 * 1024 * 1024 = 10485760
    # Valid range: 1MB to 50MB
    max_file_size: int = Field(default=10_485_760, ge=1_048_576, le=52_428_800)

    # What: Comma-separated list of accepted photo extensions
    allowed_image_extensions: str = Field(default=".png,.jpg,.jpeg,.gif,.webp")

    @property
    def allowed_image_extensions_set(self) -> set:
        """Normalized extension set (lowercase, leading dot)."""
        extensions = set()
        for ext in self.allowed_image_extensions.split(","):
            ext = ext.strip().lower()
            if not ext:
                continue
            extensions.add(ext if ext.startswith(".") else f".{ext}")
        return extensions

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (split by cors_origins_list)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1024, le=65535)

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

    @field_validator("upload_url_prefix")
    @classmethod
    def validate_upload_url_prefix(cls, v: str) -> str:
        """Mount paths must start with a slash and must not end with one."""
        v = "/" + v.strip().strip("/")
        if v == "/":
            raise ValueError("upload_url_prefix cannot be the site root")
        return v

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATA_FILE and data_file both work
    }


# Singleton instance, imported throughout the application
settings = Settings()
