"""Application configuration management"""

import json
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, List
from urllib.parse import quote_plus

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

# Base directory: backend/
_BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application
    APP_NAME: str = "Newsroom"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    WORKERS: int = 4

    # Database (PostgreSQL by default, any SQLAlchemy URL accepted)
    DATABASE_URL: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "newsroom_db"
    POSTGRES_USER: str = "newsroom"
    POSTGRES_PASSWORD: str = "newsroom"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20

    # Sessions
    SESSION_LIFETIME_DAYS: int = 30
    SESSION_RENEWAL_THRESHOLD_DAYS: int = 15
    SESSION_TOKEN_BYTES: int = 18
    SESSION_COOKIE_NAME: str = "auth-session"
    SESSION_COOKIE_SECURE: bool = False

    # Login throttling
    LOGIN_RATE_LIMIT_PER_MINUTE: int = 10
    LOGIN_RATE_LIMIT_PER_HOUR: int = 50

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    # CORS
    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["http://localhost:5173"]

    # Database initialization discipline
    DB_INIT_MODE: str = "migrate"  # migrate | create_all | off
    DB_REQUIRE_HEAD: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, value: Any) -> Any:
        """
        Accept JSON array or comma-separated origins from env.

        Examples:
            CORS_ORIGINS=["http://localhost:5173","http://example.com"]
            CORS_ORIGINS=http://localhost:5173,http://example.com
        """
        if not isinstance(value, str):
            return value

        raw = value.strip()
        if not raw:
            return []

        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            parsed = None

        if isinstance(parsed, str):
            return [parsed]
        if isinstance(parsed, list):
            return [str(origin).strip() for origin in parsed if str(origin).strip()]

        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    def get_log_file(self) -> str:
        p = self.LOG_FILE
        if not p or p.startswith(".."):
            return str(_BASE_DIR.parent / "logs" / "app.log")
        return p

    def get_database_url(self) -> str:
        """
        Resolve database URL.

        Priority:
          1) Explicit DATABASE_URL
          2) Construct from POSTGRES_* parts with safe URL encoding
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        user = quote_plus(self.POSTGRES_USER)
        password = quote_plus(self.POSTGRES_PASSWORD)
        return (
            f"postgresql://{user}:{password}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    def session_lifetime(self) -> timedelta:
        return timedelta(days=self.SESSION_LIFETIME_DAYS)

    def session_renewal_threshold(self) -> timedelta:
        return timedelta(days=self.SESSION_RENEWAL_THRESHOLD_DAYS)

    def validate_security_settings(self) -> None:
        """
        Validate runtime security settings.

        The session window check always runs; the cookie check only in production.

        Raises:
            ValueError: If the session policy is inconsistent or insecure
                defaults are detected in production.
        """
        if self.SESSION_LIFETIME_DAYS <= 0 or self.SESSION_RENEWAL_THRESHOLD_DAYS <= 0:
            raise ValueError("Session lifetime and renewal threshold must be positive.")
        if self.SESSION_RENEWAL_THRESHOLD_DAYS > self.SESSION_LIFETIME_DAYS:
            raise ValueError("SESSION_RENEWAL_THRESHOLD_DAYS cannot exceed SESSION_LIFETIME_DAYS.")
        if self.SESSION_TOKEN_BYTES < 16:
            raise ValueError("SESSION_TOKEN_BYTES must be at least 16.")

        if self.ENVIRONMENT.lower() != "production":
            return

        if not self.SESSION_COOKIE_SECURE:
            raise ValueError(
                "SESSION_COOKIE_SECURE must be enabled in production so the session cookie is HTTPS-only."
            )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
