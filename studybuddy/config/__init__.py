"""Configuration package."""

from studybuddy.config.generation import GenerationSettings, generation_settings
from studybuddy.config.lexicon import Lexicon, get_lexicon, load_lexicon
from studybuddy.config.settings import Settings, get_settings, settings
from studybuddy.config.understanding import (
    UnderstandingSettings,
    understanding_settings,
)

__all__ = [
    # Application settings
    "Settings",
    "get_settings",
    "settings",
    # Request understanding
    "UnderstandingSettings",
    "understanding_settings",
    "Lexicon",
    "get_lexicon",
    "load_lexicon",
    # Content generation
    "GenerationSettings",
    "generation_settings",
]
