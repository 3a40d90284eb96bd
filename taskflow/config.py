"""Configuration settings for TaskFlow."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

_JWT_SECRET_FROM_ENV = os.getenv("JWT_SECRET_KEY", "")


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./taskflow.db")

    # JWT
    JWT_SECRET_KEY: str = _JWT_SECRET_FROM_ENV or secrets.token_urlsafe(32)
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", "1440"))

    # Password reset links
    RESET_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "60"))

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    APP_VERSION: str = os.getenv("APP_VERSION", "1.0.0")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() == "production"

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if not _JWT_SECRET_FROM_ENV:
            errors.append("JWT_SECRET_KEY is not set - using auto-generated key (not persistent across restarts)")
        if self.is_production and self.DATABASE_URL.startswith("sqlite"):
            errors.append("DATABASE_URL points at SQLite in production")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
