"""
Blog API Backend — Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py (app factory), database.py and the CLI entry point.
When:  Loaded once at module import time; tests build their own Settings.

Design Decision:
    The app factory accepts a Settings instance instead of reading the
    singleton directly, so tests can point the service at a temporary
    SQLite file without patching module globals.
"""

from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development; a fresh
    checkout runs with no .env file at all.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # What: Location of the single-file SQLite database
    # Why a path (not a URL): The initializer must create the parent
    # directory before the driver can open the file
    database_path: str = Field(
        default="./storage/blog-db/blog.db",
        description="Path to the SQLite database file",
    )

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs, or "*" to allow any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Static Client Assets ──────────────────────────────────────────────
    # What: Directory holding the browser client (index.html, js/, css/)
    # Mounted only when it exists on disk
    static_dir: str = Field(default="./public")

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    # PORT is the conventional variable on PaaS hosts
    port: int = Field(default=3001, ge=1, le=65535)

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

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def database_file(self) -> Path:
        return Path(self.database_path).expanduser()

    @property
    def database_url(self) -> str:
        """
        Async SQLAlchemy URL for the database file.

        Why aiosqlite: SQLAlchemy's asyncio extension needs an async driver;
        aiosqlite runs sqlite3 calls on a worker thread so queries don't
        block the event loop.
        """
        return f"sqlite+aiosqlite:///{self.database_file}"


# Singleton instance used by the module-level app and the CLI
settings = Settings()
