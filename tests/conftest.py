"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across the unit tests: fake
content generator and deletion sink collaborators, plus shared
understanding components.
"""

import os
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from dotenv import load_dotenv

from studybuddy.config.lexicon import Lexicon, load_lexicon
from studybuddy.enums.request import FunKind
from studybuddy.models.results import CardDraft, NoteDraft, ScheduleItemDraft
from studybuddy.services.understanding.similarity import SimilarityMatcher

# Load .env file from project root BEFORE any fixtures run
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


# ============================================================================
# Environment Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """
    Set up test environment variables before any tests run.

    Settings objects created inside tests see these values; no test
    ever reaches a real LLM provider.
    """
    original_env = os.environ.copy()

    test_env = {
        "OPENAI_API_KEY": os.environ.get("OPENAI_API_KEY", "test-api-key"),
        "DEBUG": "true",
    }
    os.environ.update(test_env)

    yield

    os.environ.clear()
    os.environ.update(original_env)


# ============================================================================
# Understanding Components
# ============================================================================


@pytest.fixture
def lexicon() -> Lexicon:
    """The packaged keyword lexicon."""
    return load_lexicon()


@pytest.fixture
def matcher() -> SimilarityMatcher:
    """Matcher with the default thresholds."""
    return SimilarityMatcher(threshold=0.8, min_length=4, anchor_first_letter=True)


# ============================================================================
# Collaborator Fakes
# ============================================================================


def _notes(topic: str) -> list[NoteDraft]:
    return [NoteDraft(title=f"{topic} overview", content=f"Key ideas of {topic}.", topic=topic)]


def _cards(topic: str, count: int) -> list[CardDraft]:
    return [
        CardDraft(front=f"{topic} question {i + 1}", back=f"{topic} answer {i + 1}", topic=topic)
        for i in range(count)
    ]


def _schedule(topic: str) -> list[ScheduleItemDraft]:
    return [
        ScheduleItemDraft(title=f"Study {topic}", day_offset=0, duration_minutes=45, topic=topic),
        ScheduleItemDraft(title=f"Review {topic}", day_offset=2, duration_minutes=30, topic=topic),
    ]


def _fun(topic: str, kind: FunKind) -> str:
    return f"A {FunKind(kind).value} about {topic}."


@pytest.fixture
def mock_generator() -> MagicMock:
    """
    Create a mock ContentGenerator.

    Each method returns well-formed drafts for the requested topic:
    one note per call, `count` flashcards, two schedule sessions.
    """
    mock = MagicMock()
    mock.generate_notes = AsyncMock(side_effect=_notes)
    mock.generate_flashcards = AsyncMock(side_effect=_cards)
    mock.generate_schedule = AsyncMock(side_effect=_schedule)
    mock.generate_fun_content = AsyncMock(side_effect=_fun)
    return mock


@pytest.fixture
def mock_sink() -> MagicMock:
    """
    Create a mock DeletionSink that reports 3 items per domain and 1 per topic.
    """
    mock = MagicMock()
    mock.delete_all = AsyncMock(return_value=3)
    mock.delete_topic = AsyncMock(return_value=1)
    return mock
