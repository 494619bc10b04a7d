"""
Request Understanding Configuration

Settings for the deterministic request understanding stages: the
normalizer's fuzzy matching thresholds, the extractor's defaults and
the location of the keyword lexicon.

All settings can be overridden via environment variables with the
UNDERSTANDING_ prefix.

Usage:
    from studybuddy.config.understanding import understanding_settings

    threshold = understanding_settings.SIMILARITY_THRESHOLD
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class UnderstandingSettings(BaseSettings):
    """
    Request understanding configuration.

    Attributes are grouped by category:
    - Fuzzy matching
    - Extraction defaults
    - Lexicon source
    """

    # =========================================================================
    # FUZZY MATCHING
    # =========================================================================

    # Minimum normalized Levenshtein similarity (0-1) to accept a correction
    SIMILARITY_THRESHOLD: float = 0.8

    # Tokens shorter than this are never fuzzy-corrected ("rm", "of", "car")
    MIN_FUZZY_TOKEN_LENGTH: int = 4

    # Candidates must share the token's first letter
    ANCHOR_FIRST_LETTER: bool = True

    # Letter runs longer than this are treated as stretched typing
    MAX_LETTER_RUN: int = 2

    # Adjacent unknown tokens joined when looking for split words
    WINDOW_SIZE: int = 2

    # =========================================================================
    # EXTRACTION DEFAULTS
    # =========================================================================

    DEFAULT_TOPIC: str = "general"
    DEFAULT_CREATE_COUNT: int = 1

    # =========================================================================
    # LEXICON
    # =========================================================================

    # None selects the packaged lexicon.yaml
    LEXICON_PATH: Optional[Path] = None

    class Config:
        env_prefix = "UNDERSTANDING_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_understanding_settings() -> UnderstandingSettings:
    """Get cached understanding settings instance."""
    return UnderstandingSettings()


# Convenience instance
understanding_settings = get_understanding_settings()
