"""
Learning Services

Spaced repetition scheduling for generated flashcards.
"""

from studybuddy.services.learning.srs import (
    SrsScheduler,
    SrsState,
    create_scheduler,
    get_review_forecast,
    init_srs,
    is_due,
    review,
)

__all__ = [
    "SrsScheduler",
    "SrsState",
    "create_scheduler",
    "get_review_forecast",
    "init_srs",
    "is_due",
    "review",
]
