"""
Unit tests for the SM-2 spaced repetition scheduler.

Tests due checks, review transitions, ease factor bounds and quality
validation.
"""

from datetime import datetime, timedelta, timezone

import pytest

from studybuddy.enums.learning import ReviewQuality
from studybuddy.exceptions import InvalidQualityError
from studybuddy.services.learning.srs import (
    SrsScheduler,
    SrsState,
    create_scheduler,
    get_review_forecast,
    init_srs,
    is_due,
    review,
)

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class TestModuleApi:
    """Tests for init_srs / is_due / review."""

    def test_new_card_due_immediately(self):
        state = init_srs(T0)

        assert is_due(state, T0)
        assert state.repetitions == 0
        assert state.interval_days == 0
        assert state.ease_factor == 2.5
        assert state.is_new()

    def test_not_due_before_due_time(self):
        state = init_srs(T0)
        assert not is_due(state, T0 - timedelta(seconds=1))

    def test_again_resets_and_defers(self):
        """A failed review resets repetitions and schedules a day out."""
        state = review(init_srs(T0), ReviewQuality.AGAIN, T0)

        assert state.repetitions == 0
        assert not is_due(state, T0 + timedelta(hours=12))
        assert is_due(state, T0 + timedelta(days=1))

    def test_good_good_intervals(self):
        first = review(init_srs(T0), ReviewQuality.GOOD, T0)
        second = review(first, ReviewQuality.GOOD, first.due_at)

        assert (first.interval_days, first.repetitions) == (1, 1)
        assert second.interval_days >= 3
        assert second.repetitions == 2

    def test_easy_ease_at_least_good_ease(self):
        good = review(init_srs(T0), ReviewQuality.GOOD, T0)
        easy = review(init_srs(T0), ReviewQuality.EASY, T0)

        assert easy.ease_factor >= good.ease_factor

    def test_accepts_plain_int_quality(self):
        state = review(init_srs(T0), 3, T0)
        assert state.repetitions == 1


class TestReviewTransitions:
    """Tests for interval growth and ease factor changes."""

    @pytest.fixture
    def scheduler(self):
        return SrsScheduler(initial_ease=2.5, min_ease=1.3, fail_interval_days=1)

    def test_third_success_multiplies_interval(self, scheduler):
        state = scheduler.init(T0)
        for _ in range(3):
            state = scheduler.review(state, ReviewQuality.GOOD, state.due_at)

        # 3 days * 2.5 ease, rounded
        assert state.interval_days == 8
        assert state.due_at == T0 + timedelta(days=1 + 3 + 8)

    def test_hard_is_a_lapse(self, scheduler):
        state = scheduler.review(scheduler.init(T0), ReviewQuality.GOOD, T0)
        state = scheduler.review(state, ReviewQuality.HARD, T0 + timedelta(days=1))

        assert state.repetitions == 0
        assert state.lapses == 1
        assert state.interval_days == 1
        assert state.ease_factor == pytest.approx(2.35)

    def test_again_lowers_ease_more_than_hard(self, scheduler):
        hard = scheduler.review(scheduler.init(T0), ReviewQuality.HARD, T0)
        again = scheduler.review(scheduler.init(T0), ReviewQuality.AGAIN, T0)

        assert again.ease_factor < hard.ease_factor

    def test_good_keeps_ease(self, scheduler):
        state = scheduler.review(scheduler.init(T0), ReviewQuality.GOOD, T0)
        assert state.ease_factor == pytest.approx(2.5)

    def test_ease_never_below_minimum(self, scheduler):
        state = scheduler.init(T0)
        for day in range(20):
            state = scheduler.review(state, ReviewQuality.AGAIN, T0 + timedelta(days=day))

        assert state.ease_factor == pytest.approx(1.3)
        assert state.lapses == 20

    def test_input_state_unchanged(self, scheduler):
        state = scheduler.init(T0)
        scheduler.review(state, ReviewQuality.EASY, T0)

        assert state.repetitions == 0
        assert state.last_reviewed_at is None

    def test_review_records_time(self, scheduler):
        state = scheduler.review(scheduler.init(T0), ReviewQuality.GOOD, T0)

        assert state.last_reviewed_at == T0
        assert not state.is_new()

    def test_success_after_lapse_restarts_intervals(self, scheduler):
        state = scheduler.init(T0)
        state = scheduler.review(state, ReviewQuality.GOOD, T0)
        state = scheduler.review(state, ReviewQuality.GOOD, state.due_at)
        state = scheduler.review(state, ReviewQuality.AGAIN, state.due_at)
        state = scheduler.review(state, ReviewQuality.GOOD, state.due_at)

        assert state.repetitions == 1
        assert state.interval_days == 1


class TestQualityValidation:
    """Grades outside {0, 2, 3, 4} are rejected."""

    @pytest.mark.parametrize("quality", [1, 5, -1, True, False, 3.0, "3", None])
    def test_invalid_quality_raises(self, quality):
        with pytest.raises(InvalidQualityError):
            review(init_srs(T0), quality, T0)

    def test_invalid_quality_is_value_error(self):
        with pytest.raises(ValueError):
            review(init_srs(T0), 1, T0)


class TestSchedulerConfig:
    """Tests for scheduler construction."""

    def test_create_scheduler_defaults(self):
        scheduler = create_scheduler()

        assert scheduler.initial_ease == 2.5
        assert scheduler.min_ease == 1.3
        assert scheduler.fail_interval_days == 1

    def test_create_scheduler_overrides(self):
        scheduler = create_scheduler(initial_ease=2.0, fail_interval_days=2)
        state = scheduler.review(scheduler.init(T0), ReviewQuality.AGAIN, T0)

        assert state.interval_days == 2
        assert state.ease_factor == pytest.approx(1.8)

    def test_invalid_parameters(self):
        with pytest.raises(ValueError):
            SrsScheduler(fail_interval_days=0)
        with pytest.raises(ValueError):
            SrsScheduler(initial_ease=1.0, min_ease=1.3)


class TestReviewForecast:
    """Tests for get_review_forecast."""

    def test_buckets(self):
        def reviewed(due_at):
            return SrsState(due_at=due_at, last_reviewed_at=T0 - timedelta(days=30))

        states = [
            reviewed(T0 - timedelta(days=2)),  # overdue
            reviewed(T0 + timedelta(hours=3)),  # today
            reviewed(T0 + timedelta(days=1)),  # tomorrow
            reviewed(T0 + timedelta(days=4)),  # this week
            reviewed(T0 + timedelta(days=30)),  # later
            init_srs(T0),  # new cards are not forecast
        ]

        assert get_review_forecast(states, as_of=T0) == {
            "overdue": 1,
            "today": 1,
            "tomorrow": 1,
            "this_week": 1,
            "later": 1,
        }
