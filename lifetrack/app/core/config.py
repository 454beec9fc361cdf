# lifetrack/app/core/config.py
"""
Application configuration using pydantic-settings.

Values come from environment variables first, then a local .env file,
then the defaults below (which are only safe for local development).
"""
from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed settings for the Lifetrack API."""

    # ─────────────────────────────────────────────────────────────
    # Application metadata
    # ─────────────────────────────────────────────────────────────
    PROJECT_NAME: str = "Lifetrack"
    PROJECT_VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ─────────────────────────────────────────────────────────────
    # Database
    # ─────────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./lifetrack.db"
    DATABASE_ECHO: bool = False

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """
        Rewrite plain database URLs to their async driver variants.

        - postgres://   → postgresql+asyncpg://
        - postgresql:// → postgresql+asyncpg://
        - sqlite:///    → sqlite+aiosqlite:///
        """
        if v is None:
            return "sqlite+aiosqlite:///./lifetrack.db"

        url = v.strip()

        if url.startswith("postgres://"):
            return url.replace("postgres://", "postgresql+asyncpg://", 1)

        if url.startswith("postgresql://") and "+asyncpg" not in url:
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)

        if url.startswith("sqlite:///") and "+aiosqlite" not in url:
            return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

        return url

    # ─────────────────────────────────────────────────────────────
    # Sessions
    # Server-side session table, mirrored to the browser as a cookie.
    # SESSION_SWEEP_INTERVAL_SECONDS = 0 turns the background sweep off;
    # expired sessions are still rejected lazily on lookup.
    # ─────────────────────────────────────────────────────────────
    SESSION_COOKIE_NAME: str = "lifetrack_session"
    SESSION_TTL_HOURS: int = 24
    SESSION_COOKIE_SECURE: bool = False
    SESSION_SWEEP_INTERVAL_SECONDS: int = 600

    # ─────────────────────────────────────────────────────────────
    # Accounts
    # The admin account lives only in configuration. Leaving
    # ADMIN_PASSWORD empty disables admin login entirely.
    # ─────────────────────────────────────────────────────────────
    MIN_PASSWORD_LENGTH: int = 6
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = ""

    # ─────────────────────────────────────────────────────────────
    # CORS (comma separated, empty means no cross-origin access)
    # ─────────────────────────────────────────────────────────────
    CORS_ORIGINS: str = "http://localhost:5500,http://127.0.0.1:5500,http://localhost:8000,http://127.0.0.1:8000"

    @property
    def BACKEND_CORS_ORIGINS(self) -> List[str]:
        if not self.CORS_ORIGINS or not self.CORS_ORIGINS.strip():
            return []

        return [
            origin.strip()
            for origin in self.CORS_ORIGINS.split(",")
            if origin.strip()
        ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_sqlite(self) -> bool:
        return "sqlite" in self.DATABASE_URL.lower()

    @property
    def session_cookie_secure(self) -> bool:
        """Secure cookies are mandatory once served over HTTPS in production."""
        return self.SESSION_COOKIE_SECURE or self.is_production

    @property
    def admin_enabled(self) -> bool:
        return bool(self.ADMIN_USERNAME and self.ADMIN_PASSWORD)


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()


settings = get_settings()
