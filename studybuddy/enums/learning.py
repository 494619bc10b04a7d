"""
Learning System Enums

Defines the review grades accepted by the SM-2 spaced repetition scheduler.
"""

from enum import Enum


class ReviewQuality(int, Enum):
    """
    Reviewer's self-assessed recall quality.

    Grades below GOOD count as a failed recall and reset the card.
    The value 1 is deliberately not part of the scale.
    """

    AGAIN = 0  # Complete failure, reset repetitions
    HARD = 2  # Recalled with great difficulty, still treated as a lapse
    GOOD = 3  # Correct with reasonable effort, normal interval
    EASY = 4  # Effortless recall, ease factor grows


# Grades at or above this value count as a successful recall
PASSING_QUALITY = ReviewQuality.GOOD
