"""
SM-2 Spaced Repetition Scheduler

Computes a flashcard's next due date and ease factor after each review.
The policy is the SM-2 family used by classic flashcard apps: each card
has an ease factor that controls how quickly its review interval grows.

Key Concepts:
- Ease factor: Per-card interval multiplier (starts at 2.5, never below 1.3)
- Interval: Days until the next review
- Repetitions: Consecutive successful reviews since the last lapse
- Lapse: A failed review (quality below GOOD), which resets repetitions

Review transition:
    quality < GOOD  → repetitions = 0, interval = 1 day, ease reduced, lapses + 1
    quality >= GOOD → repetitions + 1, interval 1 → 3 → round(interval * ease)

Usage:
    from studybuddy.services.learning.srs import init_srs, is_due, review

    state = init_srs(now)
    if is_due(state, now):
        state = review(state, ReviewQuality.GOOD, now)
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from studybuddy.config.settings import settings
from studybuddy.enums.learning import PASSING_QUALITY, ReviewQuality
from studybuddy.exceptions import InvalidQualityError

logger = logging.getLogger(__name__)

# Interval for the first and second successful review in a row
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 3

# Ease adjustment per grade; monotonically increasing in quality
EASE_DELTAS: dict[ReviewQuality, float] = {
    ReviewQuality.AGAIN: -0.20,
    ReviewQuality.HARD: -0.15,
    ReviewQuality.GOOD: 0.0,
    ReviewQuality.EASY: 0.15,
}


@dataclass
class SrsState:
    """
    Scheduling state of one flashcard.

    All datetimes are timezone-aware UTC.
    """

    ease_factor: float = 2.5
    interval_days: int = 0
    repetitions: int = 0  # Consecutive successful reviews
    due_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_reviewed_at: Optional[datetime] = None
    lapses: int = 0  # Number of failed reviews

    def is_new(self) -> bool:
        """Check if this card has never been reviewed."""
        return self.last_reviewed_at is None


def _validate_quality(quality: Union[ReviewQuality, int]) -> ReviewQuality:
    """Coerce a grade to ReviewQuality, rejecting anything outside {0, 2, 3, 4}."""
    # bool is an int subclass; True would otherwise pass as 1
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQualityError(
            f"Review quality must be one of 0, 2, 3, 4; got {quality!r}",
            details={"quality": repr(quality)},
        )
    try:
        return ReviewQuality(quality)
    except ValueError as e:
        raise InvalidQualityError(
            f"Review quality must be one of 0, 2, 3, 4; got {quality}",
            details={"quality": quality},
        ) from e


class SrsScheduler:
    """
    SM-2 scheduler.

    Attributes:
        initial_ease: Ease factor of a new card
        min_ease: Lower bound for the ease factor
        fail_interval_days: Interval after a failed review (at least 1 day)
    """

    def __init__(
        self,
        initial_ease: float = 2.5,
        min_ease: float = 1.3,
        fail_interval_days: int = 1,
    ):
        if fail_interval_days < 1:
            raise ValueError("fail_interval_days must be at least 1")
        if initial_ease < min_ease:
            raise ValueError("initial_ease cannot be below min_ease")

        self.initial_ease = initial_ease
        self.min_ease = min_ease
        self.fail_interval_days = fail_interval_days

    def init(self, now: Optional[datetime] = None) -> SrsState:
        """Create the state of a new card; it is due immediately."""
        now = now or datetime.now(timezone.utc)
        return SrsState(
            ease_factor=self.initial_ease,
            interval_days=0,
            repetitions=0,
            due_at=now,
        )

    @staticmethod
    def is_due(state: SrsState, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now >= state.due_at

    def review(
        self,
        state: SrsState,
        quality: Union[ReviewQuality, int],
        now: Optional[datetime] = None,
    ) -> SrsState:
        """
        Apply one review and return the card's next state.

        The input state is not modified.

        Failed recall (AGAIN, HARD):
            Repetitions reset to 0 and the card comes back after the fail
            interval. The ease factor drops (never below min_ease) and the
            lapse counter increments.

        Successful recall (GOOD, EASY):
            Repetitions increment. The first success after a reset waits
            1 day, the second 3 days; later intervals multiply the previous
            interval by the updated ease factor, rounded to whole days.
            EASY raises the ease factor, GOOD keeps it.

        Args:
            state: Current scheduling state
            quality: Reviewer's grade, one of 0, 2, 3, 4
            now: Review time. Defaults to current UTC time.
                Pass explicit time for batch processing or testing.

        Returns:
            New SrsState with due_at = now + interval_days

        Raises:
            InvalidQualityError: If quality is outside the supported scale

        Example:
            >>> scheduler = SrsScheduler()
            >>> state = scheduler.init(now)
            >>> state = scheduler.review(state, ReviewQuality.GOOD, now)
            >>> state.interval_days
            1
        """
        grade = _validate_quality(quality)
        now = now or datetime.now(timezone.utc)

        ease = round(max(self.min_ease, state.ease_factor + EASE_DELTAS[grade]), 2)

        if grade < PASSING_QUALITY:
            # Failing grades only ever lower the ease factor
            ease = min(ease, state.ease_factor)
            new_state = replace(
                state,
                ease_factor=ease,
                interval_days=self.fail_interval_days,
                repetitions=0,
                due_at=now + timedelta(days=self.fail_interval_days),
                last_reviewed_at=now,
                lapses=state.lapses + 1,
            )
        else:
            repetitions = state.repetitions + 1
            if repetitions == 1:
                interval = FIRST_INTERVAL_DAYS
            elif repetitions == 2:
                interval = SECOND_INTERVAL_DAYS
            else:
                interval = max(1, round(state.interval_days * ease))

            new_state = replace(
                state,
                ease_factor=ease,
                interval_days=interval,
                repetitions=repetitions,
                due_at=now + timedelta(days=interval),
                last_reviewed_at=now,
            )

        logger.debug(
            f"Review {grade.name}: reps {state.repetitions}->{new_state.repetitions}, "
            f"interval {new_state.interval_days}d, ease {new_state.ease_factor}"
        )
        return new_state


def create_scheduler(
    initial_ease: Optional[float] = None,
    min_ease: Optional[float] = None,
    fail_interval_days: Optional[int] = None,
) -> SrsScheduler:
    """
    Create a scheduler, filling unset parameters from SRS_* settings.

    Returns:
        Configured SrsScheduler instance
    """
    return SrsScheduler(
        initial_ease=initial_ease or settings.SRS_INITIAL_EASE,
        min_ease=min_ease or settings.SRS_MIN_EASE,
        fail_interval_days=fail_interval_days or settings.SRS_FAIL_INTERVAL_DAYS,
    )


# =============================================================================
# Module-level API
# =============================================================================

_default_scheduler = SrsScheduler()


def init_srs(now: Optional[datetime] = None) -> SrsState:
    """Create a new card state, due at `now`."""
    return _default_scheduler.init(now)


def is_due(state: SrsState, now: Optional[datetime] = None) -> bool:
    """True when `now` is at or past the card's due time."""
    return SrsScheduler.is_due(state, now)


def review(
    state: SrsState,
    quality: Union[ReviewQuality, int],
    now: Optional[datetime] = None,
) -> SrsState:
    """Apply one review with the standard SM-2 parameters. See SrsScheduler.review."""
    return _default_scheduler.review(state, quality, now)


def get_review_forecast(
    states: list[SrsState],
    as_of: Optional[datetime] = None,
) -> dict[str, int]:
    """
    Get forecast of upcoming reviews.

    Args:
        states: Card states
        as_of: Reference time (default: now)

    Returns:
        Dict with counts: overdue, today, tomorrow, this_week, later
    """
    as_of = as_of or datetime.now(timezone.utc)
    today_start = as_of.replace(hour=0, minute=0, second=0, microsecond=0)
    tomorrow_start = today_start + timedelta(days=1)
    week_end = today_start + timedelta(days=7)

    forecast = {
        "overdue": 0,
        "today": 0,
        "tomorrow": 0,
        "this_week": 0,
        "later": 0,
    }

    for state in states:
        if state.is_new():
            continue

        if state.due_at < today_start:
            forecast["overdue"] += 1
        elif state.due_at < tomorrow_start:
            forecast["today"] += 1
        elif state.due_at < tomorrow_start + timedelta(days=1):
            forecast["tomorrow"] += 1
        elif state.due_at < week_end:
            forecast["this_week"] += 1
        else:
            forecast["later"] += 1

    return forecast
