"""
Candidate Scorer - review priority for quiz items.

Pure logic, no Database access.
"""

from __future__ import annotations

import datetime
import math
from typing import List, Mapping, Optional, Sequence

from lexiquiz_app.modules.srs.schemas import MemoryState
from lexiquiz_app.utils.numeric import round_half_up
from lexiquiz_app.utils.time_utils import EPOCH, ensure_utc, utcnow

from ..constants import CandidateScoring
from ..schemas import CandidateScore, Item


class CandidateScorer:
    """
    Assigns every item a numeric priority and ranks the pool.

    Never-seen items get a large flat boost; seen items are pushed up by age,
    mistakes and weak recall directions, and pushed far down once mastered
    and not yet due.
    """

    @staticmethod
    def _difficulty(item: Item) -> int:
        if item.difficulty is None:
            return CandidateScoring.DEFAULT_ITEM_DIFFICULTY
        return item.difficulty

    @classmethod
    def score(
        cls,
        item: Item,
        memory_state: Optional[MemoryState],
        now: Optional[datetime.datetime] = None
    ) -> CandidateScore:
        now = ensure_utc(now) or utcnow()
        difficulty = cls._difficulty(item)

        if memory_state is None:
            total = difficulty * CandidateScoring.NEW_ITEM_DIFFICULTY_MULTIPLIER + CandidateScoring.NEW_ITEM_BASE_BOOST
            return CandidateScore(
                difficulty_weight=difficulty,
                days_since_last_seen=0,
                wrong_penalty_bonus=0,
                streak_penalty=0,
                direction_weakness_bonus=0,
                new_word_boost=CandidateScoring.NEW_ITEM_BASE_BOOST,
                mastered_penalty=0,
                total=total,
            )

        last_seen = ensure_utc(memory_state.last_seen) or EPOCH
        elapsed_seconds = (now - last_seen).total_seconds()
        days_since_last_seen = max(0, math.floor(elapsed_seconds / CandidateScoring.SECONDS_PER_DAY))

        wrong_penalty_bonus = (memory_state.wrong_count or 0) * CandidateScoring.WRONG_COUNT_WEIGHT
        streak_penalty = memory_state.correct_streak or 0

        weakest_direction = min(
            CandidateScoring.DEFAULT_DIRECTION_STRENGTH if memory_state.source_to_target_strength is None
            else memory_state.source_to_target_strength,
            CandidateScoring.DEFAULT_DIRECTION_STRENGTH if memory_state.target_to_source_strength is None
            else memory_state.target_to_source_strength,
        )
        direction_weakness_bonus = round_half_up((1 - weakest_direction) * CandidateScoring.DIRECTION_WEAKNESS_SCALE)

        mastered_penalty = 0
        if (memory_state.mastery_level or 0) >= CandidateScoring.MASTERED_MIN_LEVEL and not memory_state.is_due(now):
            mastered_penalty = CandidateScoring.MASTERED_NOT_DUE_PENALTY

        total = (
            difficulty
            + days_since_last_seen
            + wrong_penalty_bonus
            - streak_penalty
            + direction_weakness_bonus
            + mastered_penalty
        )
        return CandidateScore(
            difficulty_weight=difficulty,
            days_since_last_seen=days_since_last_seen,
            wrong_penalty_bonus=wrong_penalty_bonus,
            streak_penalty=streak_penalty,
            direction_weakness_bonus=direction_weakness_bonus,
            new_word_boost=0,
            mastered_penalty=mastered_penalty,
            total=total,
        )

    @classmethod
    def rank(
        cls,
        items: Sequence[Item],
        memory_states: Mapping[int, MemoryState],
        now: Optional[datetime.datetime] = None
    ) -> List[Item]:
        """
        Sort items by priority: total desc, then difficulty desc, then id asc.

        The ordering is total, so equal-priority items come back in the same
        order on every call.
        """
        now = ensure_utc(now) or utcnow()
        scored = [(cls.score(item, memory_states.get(item.id), now), item) for item in items]
        scored.sort(key=lambda pair: (-pair[0].total, -cls._difficulty(pair[1]), pair[1].id))
        return [item for _, item in scored]
