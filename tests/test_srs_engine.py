"""
Tests for SRS Engine - memory-state transitions after one attempt.

Tests cover:
- Quality scoring
- Success / failure branches (streak, interval, ease)
- Ease bounds and config fallback
- Mastery thresholds
- Per-direction recall strength
"""

import datetime
import random

import pytest

from lexiquiz_app.modules.srs.constants import SrsDefaults
from lexiquiz_app.modules.srs.engine import SrsEngine
from lexiquiz_app.modules.srs.schemas import AttemptOutcome, MemoryState, QuizDirection, SrsConfig
from lexiquiz_app.utils.numeric import round_half_up

NOW = datetime.datetime(2024, 3, 1, 12, 0, tzinfo=datetime.timezone.utc)


def _correct(**kwargs):
    kwargs.setdefault('now', NOW)
    return AttemptOutcome(is_correct=True, **kwargs)


def _wrong(**kwargs):
    kwargs.setdefault('now', NOW)
    return AttemptOutcome(is_correct=False, **kwargs)


class TestComputeQuality:
    def test_incorrect_is_always_one(self):
        assert SrsEngine.compute_quality(False, 3, 500) == 1
        assert SrsEngine.compute_quality(False, 1, 20000) == 1

    def test_plain_correct_is_three(self):
        assert SrsEngine.compute_quality(True, 2) == 3

    def test_confident_and_fast_hits_ceiling(self):
        # 3 + 1 + 0.5 = 4.5 rounds up to 5
        assert SrsEngine.compute_quality(True, 3, 1200) == 5

    def test_half_values_round_up(self):
        """2.5 rounds to 3, not to 2 as round() would."""
        assert SrsEngine.compute_quality(True, 1) == 3
        assert SrsEngine.compute_quality(True, 2, 15000) == 3

    def test_unsure_and_slow_drops_below_pass(self):
        assert SrsEngine.compute_quality(True, 1, 15000) == 2


class TestApplyAttemptFailure:
    def test_incorrect_answer_resets_streak(self):
        """Incorrect, confidence 2, 5s on a streak of 5."""
        state = MemoryState(correct_streak=5, wrong_count=1, ease_factor=2.5, interval=20, mastery_level=3)

        new_state = SrsEngine.apply_attempt(state, _wrong(confidence_level=2, response_time_ms=5000))

        assert new_state.correct_streak == 0
        assert new_state.wrong_count == 2
        assert new_state.interval == 1
        assert new_state.ease_factor == pytest.approx(2.3)
        assert new_state.mastery_level == 0
        assert new_state.next_review == NOW + datetime.timedelta(days=1)

    def test_ease_penalty_clamped_at_minimum(self):
        state = MemoryState(correct_streak=2, ease_factor=1.35)
        new_state = SrsEngine.apply_attempt(state, _wrong())
        assert new_state.ease_factor == pytest.approx(1.3)

    def test_low_quality_correct_answer_takes_failure_branch(self):
        state = MemoryState(correct_streak=4, interval=10)
        new_state = SrsEngine.apply_attempt(state, _correct(confidence_level=1, response_time_ms=15000))
        assert new_state.correct_streak == 0
        assert new_state.interval == 1
        assert new_state.wrong_count == 1


class TestApplyAttemptSuccess:
    def test_first_attempt_on_new_item(self):
        new_state = SrsEngine.apply_attempt(None, _correct())

        assert new_state.correct_streak == 1
        assert new_state.interval == 1
        assert new_state.mastery_level == 1
        assert new_state.last_seen == NOW
        assert new_state.srs_config_version == 'v1'

    def test_second_success_interval_is_six(self):
        state = MemoryState(correct_streak=1, interval=1)
        assert SrsEngine.apply_attempt(state, _correct()).interval == 6

    def test_later_successes_multiply_by_ease(self):
        # q=4 leaves ease at 2.5; 6 * 2.5 = 15
        state = MemoryState(correct_streak=2, interval=6, ease_factor=2.5)
        new_state = SrsEngine.apply_attempt(state, _correct(confidence_level=3, response_time_ms=5000))
        assert new_state.ease_factor == pytest.approx(2.5)
        assert new_state.interval == 15
        assert new_state.next_review == NOW + datetime.timedelta(days=15)

    def test_minimum_quality_lowers_ease(self):
        state = MemoryState(correct_streak=3, interval=10, ease_factor=2.5)
        new_state = SrsEngine.apply_attempt(state, _correct())
        assert new_state.ease_factor == pytest.approx(2.36)
        assert new_state.interval == round_half_up(10 * 2.36)

    def test_ease_clamped_at_maximum(self):
        state = MemoryState(correct_streak=3, interval=4, ease_factor=2.95)
        new_state = SrsEngine.apply_attempt(state, _correct(confidence_level=3, response_time_ms=100))
        assert new_state.ease_factor == pytest.approx(3.0)

    def test_input_state_not_mutated(self):
        state = MemoryState(correct_streak=2, interval=6)
        SrsEngine.apply_attempt(state, _correct())
        assert state.correct_streak == 2
        assert state.interval == 6


class TestEaseBounds:
    def test_random_sequences_stay_in_bounds(self):
        config = SrsConfig(version='v2', ease_min=1.5, ease_max=2.8, incorrect_ease_penalty=0.3)
        rng = random.Random(11)
        state = None
        for _ in range(200):
            outcome = AttemptOutcome(
                is_correct=rng.random() < 0.6,
                confidence_level=rng.choice([1, 2, 3]),
                response_time_ms=rng.choice([None, 800, 5000, 14000]),
                now=NOW,
            )
            state = SrsEngine.apply_attempt(state, outcome, config)
            assert 1.5 <= state.ease_factor <= 2.8
            assert state.srs_config_version == 'v2'

    def test_inconsistent_config_uses_defaults(self):
        bad = {'version': 'broken', 'ease_min': 3.0, 'ease_max': 1.0, 'incorrect_ease_penalty': 0.2}
        state = MemoryState(correct_streak=1, ease_factor=1.4)
        new_state = SrsEngine.apply_attempt(state, _wrong(), bad)
        assert new_state.ease_factor == pytest.approx(1.3)
        assert new_state.srs_config_version == 'v1'


class TestMastery:
    @pytest.mark.parametrize("streak,level", [
        (0, 0), (1, 1), (2, 1), (3, 2), (4, 2), (5, 3), (6, 3), (7, 4), (30, 4),
    ])
    def test_thresholds(self, streak, level):
        assert SrsEngine.mastery_for_streak(streak) == level

    def test_monotonic_in_streak(self):
        levels = [SrsEngine.mastery_for_streak(streak) for streak in range(20)]
        assert levels == sorted(levels)


class TestDirectionStrength:
    def test_only_answered_direction_moves(self):
        state = MemoryState(correct_streak=1, source_to_target_strength=0.5, target_to_source_strength=0.5)
        new_state = SrsEngine.apply_attempt(
            state, _correct(direction=QuizDirection.TARGET_TO_SOURCE)
        )
        assert new_state.source_to_target_strength == 0.5
        assert new_state.target_to_source_strength == pytest.approx(0.62)

    def test_missing_direction_moves_both(self):
        new_state = SrsEngine.apply_attempt(None, _wrong(confidence_level=3))
        # 0.5 - 0.18 + 1 * 0.02
        assert new_state.source_to_target_strength == pytest.approx(0.34)
        assert new_state.target_to_source_strength == pytest.approx(0.34)

    def test_direction_accepts_plain_string(self):
        new_state = SrsEngine.apply_attempt(None, _correct(direction='source_to_target'))
        assert new_state.source_to_target_strength == pytest.approx(0.62)
        assert new_state.target_to_source_strength is None

    def test_strength_is_clamped(self):
        assert SrsEngine.update_strength(0.98, True, 3) == 1.0
        assert SrsEngine.update_strength(0.05, False, 1) == 0.0


class TestIntervalCeiling:
    """Long streaks must keep producing valid review dates."""

    def test_long_confident_streak_stays_schedulable(self):
        state = None
        for _ in range(40):
            state = SrsEngine.apply_attempt(state, _correct(confidence_level=3, response_time_ms=500))
            assert 1 <= state.interval <= SrsDefaults.MAX_INTERVAL_DAYS
            assert state.next_review == NOW + datetime.timedelta(days=state.interval)
        assert state.correct_streak == 40
        assert state.interval == SrsDefaults.MAX_INTERVAL_DAYS

    def test_oversized_stored_interval_is_capped(self):
        state = MemoryState(correct_streak=10, interval=2_000_000)
        new_state = SrsEngine.apply_attempt(state, _correct())
        assert new_state.interval == SrsDefaults.MAX_INTERVAL_DAYS
        assert new_state.next_review == NOW + datetime.timedelta(days=SrsDefaults.MAX_INTERVAL_DAYS)

    def test_next_review_saturates_near_end_of_calendar(self):
        late = datetime.datetime(9990, 1, 1, tzinfo=datetime.timezone.utc)
        state = MemoryState(correct_streak=5, interval=3000)
        new_state = SrsEngine.apply_attempt(state, _correct(now=late))
        assert new_state.next_review == datetime.datetime.max.replace(tzinfo=datetime.timezone.utc)
