# teamcode/core/config.py
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings, read from the environment or a local .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Storage
    DATABASE_URL: str = "sqlite:///./teamcode.db"

    # Application
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Version-control defaults
    DEFAULT_LANGUAGE: str = "java"
    INITIAL_COMMIT_MESSAGE: str = "Initial draft"
    AUTOSAVE_MESSAGE: str = "Auto-save"
    DEFAULT_COMMIT_MESSAGE: str = "Update code"


settings = Settings()

DATABASE_URL = settings.DATABASE_URL
