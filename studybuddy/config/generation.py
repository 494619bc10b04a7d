"""
Content Generation Configuration

Model selection and sampling parameters for the LLM-backed content
generator, plus the orchestrator's dispatch mode.

All settings can be overridden via environment variables with the
GENERATION_ prefix.

Usage:
    from studybuddy.config.generation import generation_settings

    model = generation_settings.MODEL_FLASHCARDS
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class GenerationSettings(BaseSettings):
    """
    Content generation configuration.

    Attributes are grouped by category:
    - LLM model configuration
    - Sampling parameters
    - Output limits
    - Dispatch
    """

    # =========================================================================
    # LLM MODEL CONFIGURATION
    # =========================================================================
    # Model identifiers use LiteLLM format: provider/model-name

    MODEL_NOTES: str = "gemini/gemini-3-flash-preview"
    MODEL_FLASHCARDS: str = "gemini/gemini-3-flash-preview"
    MODEL_SCHEDULE: str = "gemini/gemini-3-flash-preview"
    MODEL_FUN: str = "gemini/gemini-3-flash-preview"

    # =========================================================================
    # SAMPLING PARAMETERS
    # =========================================================================

    NOTES_TEMPERATURE: float = 0.3
    FLASHCARDS_TEMPERATURE: float = 0.4
    SCHEDULE_TEMPERATURE: float = 0.2
    # Creative writing benefits from more variety
    FUN_TEMPERATURE: float = 0.9

    # =========================================================================
    # OUTPUT LIMITS
    # =========================================================================

    NOTES_MAX_TOKENS: int = 3000
    FLASHCARDS_MAX_TOKENS: int = 4000
    SCHEDULE_MAX_TOKENS: int = 2000
    FUN_MAX_TOKENS: int = 1500

    # Upper bound on cards requested in a single completion
    MAX_CARDS_PER_REQUEST: int = 50

    # =========================================================================
    # DISPATCH
    # =========================================================================

    # Run independent target lanes concurrently; actions on one target stay ordered
    CONCURRENT_DISPATCH: bool = True

    class Config:
        env_prefix = "GENERATION_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_generation_settings() -> GenerationSettings:
    """Get cached generation settings instance."""
    return GenerationSettings()


# Convenience instance
generation_settings = get_generation_settings()
