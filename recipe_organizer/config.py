"""Application configuration"""

import logging
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    app_name: str = "Recipe Organizer API"
    app_env: str = "development"  # "development" or "production"
    debug: bool = False
    root_path: str = ""
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:8081",
        "http://localhost:19006",
    ]

    # Security
    secret_key: str = "dev-secret-change-me"
    access_token_expire_minutes: int = 60 * 24  # 24 hours

    # Database
    database_path: str = "/app/data/recipes.json"

    # Family groups
    invite_code_length: int = 8
    invite_code_max_attempts: int = 20

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def validate_production_settings(settings: Settings) -> list:
    """Validate that all required settings are configured for production"""
    errors = []

    if settings.secret_key == "dev-secret-change-me":
        errors.append("SECRET_KEY must be changed from default value")

    if len(settings.secret_key) < 32:
        errors.append("SECRET_KEY should be at least 32 characters long")

    if settings.debug:
        errors.append("DEBUG should be disabled in production")

    return errors


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    base_settings = Settings()

    if base_settings.app_env == "production":
        errors = validate_production_settings(base_settings)
        if errors:
            for error in errors:
                logger.warning(f"Production config warning: {error}")

    return base_settings


# Convenience access
settings = get_settings()
