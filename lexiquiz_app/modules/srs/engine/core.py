"""
SRS Engine - Pure Memory State Update

SM-2 style state transition for one (learner, item) pair after one attempt.
No database access, no Flask context - only calculations based on inputs.

This engine provides:
- Quality scoring from correctness, confidence and response time
- Ease / interval / streak transitions
- Mastery level derivation
- Per-direction recall strength
"""

from __future__ import annotations

import datetime
from dataclasses import replace
from typing import Any, Optional

from lexiquiz_app.utils.numeric import clamp, round_half_up
from lexiquiz_app.utils.time_utils import ensure_utc, utcnow

from ..config import resolve_srs_config
from ..constants import EaseUpdate, MasteryRules, QualityRules, SrsDefaults, StrengthRules
from ..schemas import AttemptOutcome, MemoryState, QuizDirection, SrsConfig


class SrsEngine:
    """
    Pure calculation engine for memory-state updates.
    All methods are static, never raise, and never mutate their inputs.
    """

    # === Quality ===

    @staticmethod
    def compute_quality(
        is_correct: bool,
        confidence_level: int,
        response_time_ms: Optional[float] = None
    ) -> int:
        """
        Map an attempt to an SM-2 quality score (0-5).

        Incorrect answers are always quality 1. Correct answers start at 3 and
        are nudged by confidence and response time before rounding.
        """
        if not is_correct:
            return QualityRules.INCORRECT_QUALITY

        quality = float(QualityRules.BASE_QUALITY)
        if confidence_level >= QualityRules.HIGH_CONFIDENCE_THRESHOLD:
            quality += QualityRules.HIGH_CONFIDENCE_BONUS
        if confidence_level <= QualityRules.LOW_CONFIDENCE_THRESHOLD:
            quality -= QualityRules.LOW_CONFIDENCE_PENALTY

        if response_time_ms is not None:
            if response_time_ms <= QualityRules.FAST_RESPONSE_MS_THRESHOLD:
                quality += QualityRules.FAST_RESPONSE_BONUS
            if response_time_ms >= QualityRules.SLOW_RESPONSE_MS_THRESHOLD:
                quality -= QualityRules.SLOW_RESPONSE_PENALTY

        return int(clamp(round_half_up(quality), QualityRules.QUALITY_MIN, QualityRules.QUALITY_MAX))

    # === Mastery ===

    @staticmethod
    def mastery_for_streak(correct_streak: int) -> int:
        """Mastery level 0-4 as a step function of the correct streak."""
        for min_streak, level in MasteryRules.THRESHOLDS:
            if correct_streak >= min_streak:
                return level
        return 0

    # === Direction Strength ===

    @staticmethod
    def update_strength(current: Optional[float], is_correct: bool, confidence_level: int) -> float:
        base = (
            StrengthRules.CORRECT_BASE_ADJUSTMENT if is_correct
            else StrengthRules.INCORRECT_BASE_ADJUSTMENT
        )
        confidence_delta = confidence_level - StrengthRules.CONFIDENCE_BASELINE
        scale = (
            StrengthRules.CORRECT_CONFIDENCE_SCALE if is_correct
            else StrengthRules.INCORRECT_CONFIDENCE_SCALE
        )
        previous = StrengthRules.DEFAULT_STRENGTH if current is None else current
        return clamp(
            previous + base + confidence_delta * scale,
            StrengthRules.MIN_STRENGTH,
            StrengthRules.MAX_STRENGTH,
        )

    @staticmethod
    def _parse_direction(direction: Any) -> Optional[QuizDirection]:
        if direction is None or isinstance(direction, QuizDirection):
            return direction
        try:
            return QuizDirection(direction)
        except ValueError:
            return None

    # === Scheduling ===

    @staticmethod
    def add_days(now: datetime.datetime, days: int) -> datetime.datetime:
        """now + days, saturating at the largest representable UTC datetime."""
        try:
            return now + datetime.timedelta(days=days)
        except OverflowError:
            return datetime.datetime.max.replace(tzinfo=datetime.timezone.utc)

    # === Main Transition ===

    @staticmethod
    def apply_attempt(
        state: Optional[MemoryState],
        outcome: AttemptOutcome,
        config: Optional[Any] = None
    ) -> MemoryState:
        """
        Compute the learner's new memory state after one attempt.

        Args:
            state: Previous state, or None for a first attempt.
            outcome: The attempt result.
            config: Active SrsConfig (or anything resolve_srs_config accepts).
                Missing or inconsistent values fall back to the defaults.

        Returns:
            A new MemoryState; the input state is left untouched.
        """
        previous = state or MemoryState()
        active: SrsConfig = resolve_srs_config(config)
        now = ensure_utc(outcome.now) or utcnow()
        confidence = outcome.confidence_level if outcome.confidence_level is not None else 2

        quality = SrsEngine.compute_quality(outcome.is_correct, confidence, outcome.response_time_ms)

        current_ease = previous.ease_factor if previous.ease_factor is not None else SrsDefaults.DEFAULT_EASE
        current_interval = previous.interval if previous.interval is not None else SrsDefaults.DEFAULT_INTERVAL_DAYS
        current_interval = min(current_interval, SrsDefaults.MAX_INTERVAL_DAYS)
        streak = previous.correct_streak or 0
        wrong_count = previous.wrong_count or 0

        if quality < SrsDefaults.QUALITY_PASS_THRESHOLD:
            streak = 0
            wrong_count += 1
            interval = SrsDefaults.DEFAULT_INTERVAL_DAYS
            ease = clamp(current_ease - active.incorrect_ease_penalty, active.ease_min, active.ease_max)
        else:
            streak += 1
            gap = EaseUpdate.QUALITY_OFFSET - quality
            ease = current_ease + (
                EaseUpdate.BASE_INCREMENT
                - gap * (EaseUpdate.PRIMARY_FACTOR + gap * EaseUpdate.SECONDARY_FACTOR)
            )
            ease = clamp(ease, active.ease_min, active.ease_max)

            if streak == MasteryRules.FIRST_STREAK_STEP:
                interval = SrsDefaults.DEFAULT_INTERVAL_DAYS
            elif streak == MasteryRules.SECOND_STREAK_STEP:
                interval = SrsDefaults.SECOND_INTERVAL_DAYS
            else:
                interval = int(clamp(
                    round_half_up(current_interval * ease),
                    SrsDefaults.DEFAULT_INTERVAL_DAYS,
                    SrsDefaults.MAX_INTERVAL_DAYS,
                ))

        source_to_target = previous.source_to_target_strength
        target_to_source = previous.target_to_source_strength
        direction = SrsEngine._parse_direction(outcome.direction)
        if direction in (QuizDirection.SOURCE_TO_TARGET, None):
            source_to_target = SrsEngine.update_strength(source_to_target, outcome.is_correct, confidence)
        if direction in (QuizDirection.TARGET_TO_SOURCE, None):
            # No direction: legacy submission, both directions move.
            target_to_source = SrsEngine.update_strength(target_to_source, outcome.is_correct, confidence)

        return replace(
            previous,
            correct_streak=streak,
            wrong_count=wrong_count,
            ease_factor=ease,
            interval=interval,
            mastery_level=SrsEngine.mastery_for_streak(streak),
            source_to_target_strength=source_to_target,
            target_to_source_strength=target_to_source,
            last_seen=now,
            next_review=SrsEngine.add_days(now, interval),
            srs_config_version=active.version,
        )
