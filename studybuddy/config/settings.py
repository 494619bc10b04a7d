"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Usage:
    from studybuddy.config import settings

    model = settings.TEXT_MODEL
    initial_ease = settings.SRS_INITIAL_EASE
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Study Buddy"
    DEBUG: bool = False

    # LLM provider keys (LiteLLM also reads these from the environment)
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    GEMINI_API_KEY: str = ""
    MISTRAL_API_KEY: str = ""

    # Default text model, LiteLLM format: provider/model-name
    TEXT_MODEL: str = "openai/gpt-5-mini"

    # Spaced repetition (SM-2 family)
    SRS_INITIAL_EASE: float = 2.5
    SRS_MIN_EASE: float = 1.3
    SRS_FAIL_INTERVAL_DAYS: int = 1

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
