"""
Session Composer - Pure functions for quiz session building.

This module contains ONLY pure Python logic.
NO database, NO Flask, NO model dependencies allowed.

Functions here handle:
- Partitioning the ranked pool into due / weak / fresh views
- Mode-specific mixing of those views
- Throttling new content for struggling learners
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from lexiquiz_app.modules.srs.schemas import MemoryState
from lexiquiz_app.utils.numeric import round_half_up
from lexiquiz_app.utils.time_utils import ensure_utc, utcnow

from ..constants import MixDefaults, SessionRules
from ..schemas import Item, QuizMode
from .candidate_scoring import CandidateScorer


@dataclass(frozen=True)
class SessionMixConfig:
    """Daily-review shares and the accuracy throttle applied to them."""
    review_share: float = MixDefaults.REVIEW_SHARE
    new_share: float = MixDefaults.NEW_SHARE
    throttle_threshold: float = MixDefaults.THROTTLE_THRESHOLD
    throttled_new_share: float = MixDefaults.THROTTLED_NEW_SHARE
    throttled_review_share: float = MixDefaults.THROTTLED_REVIEW_SHARE
    boost_threshold: Optional[float] = MixDefaults.BOOST_THRESHOLD
    boosted_new_share: float = MixDefaults.BOOSTED_NEW_SHARE
    boosted_review_share: float = MixDefaults.BOOSTED_REVIEW_SHARE

    def is_consistent(self) -> bool:
        shares = (
            self.review_share, self.new_share,
            self.throttled_new_share, self.throttled_review_share,
            self.boosted_new_share, self.boosted_review_share,
        )
        if any(share is None or not 0 <= share <= 1 for share in shares):
            return False
        # Lower accuracy must never raise the new-item share.
        if self.throttled_new_share > self.new_share:
            return False
        if self.boost_threshold is not None:
            if self.boost_threshold < self.throttle_threshold or self.boosted_new_share < self.new_share:
                return False
        return True

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "SessionMixConfig":
        """Build from Flask-style config keys; inconsistent values give the defaults."""
        candidate = cls(
            review_share=config.get('SESSION_REVIEW_SHARE', MixDefaults.REVIEW_SHARE),
            new_share=config.get('SESSION_NEW_SHARE', MixDefaults.NEW_SHARE),
            throttle_threshold=config.get('SESSION_THROTTLE_THRESHOLD', MixDefaults.THROTTLE_THRESHOLD),
            throttled_new_share=config.get('SESSION_THROTTLED_NEW_SHARE', MixDefaults.THROTTLED_NEW_SHARE),
            throttled_review_share=config.get('SESSION_THROTTLED_REVIEW_SHARE', MixDefaults.THROTTLED_REVIEW_SHARE),
            boost_threshold=config.get('SESSION_BOOST_THRESHOLD', MixDefaults.BOOST_THRESHOLD),
            boosted_new_share=config.get('SESSION_BOOSTED_NEW_SHARE', MixDefaults.BOOSTED_NEW_SHARE),
            boosted_review_share=config.get('SESSION_BOOSTED_REVIEW_SHARE', MixDefaults.BOOSTED_REVIEW_SHARE),
        )
        return candidate if candidate.is_consistent() else cls()

    def daily_targets(self, count: int, recent_accuracy: Optional[float] = None) -> Tuple[int, int, int]:
        """
        Split count into (due, fresh, weak) quotas.

        Examples:
            >>> SessionMixConfig().daily_targets(10)
            (3, 5, 2)
            >>> SessionMixConfig().daily_targets(10, recent_accuracy=0.4)
            (4, 2, 4)
        """
        review_share, new_share = self.review_share, self.new_share
        if recent_accuracy is not None:
            if recent_accuracy < self.throttle_threshold:
                review_share, new_share = self.throttled_review_share, self.throttled_new_share
            elif self.boost_threshold is not None and recent_accuracy > self.boost_threshold:
                review_share, new_share = self.boosted_review_share, self.boosted_new_share

        review_target = round_half_up(count * review_share)
        new_target = round_half_up(count * new_share)
        weak_target = max(0, count - review_target - new_target)
        return review_target, new_target, weak_target


DEFAULT_MIX_CONFIG = SessionMixConfig()


def unique_by_id(items: Iterable[Item]) -> List[Item]:
    """Drop repeated ids, keeping the first occurrence."""
    seen = set()
    result = []
    for item in items:
        if item.id not in seen:
            seen.add(item.id)
            result.append(item)
    return result


def take(items: Sequence[Item], n: int) -> List[Item]:
    if n <= 0:
        return []
    return list(items[:n])


def _is_weak(state: Optional[MemoryState], now: datetime.datetime) -> bool:
    if state is None:
        return False
    return (state.wrong_count or 0) >= SessionRules.WEAK_MIN_WRONG_COUNT or state.is_overdue(now)


@dataclass
class _Pool:
    ranked: List[Item]
    due: List[Item]
    weak: List[Item]
    fresh: List[Item]


class SessionComposer:
    """
    Selects and orders the items for one quiz session.

    Never mutates its inputs; the result never exceeds count and is shorter
    only when the (mode-filtered) pool runs out.
    """

    @staticmethod
    def partition(
        ranked: Sequence[Item],
        memory_states: Mapping[int, MemoryState],
        now: datetime.datetime
    ) -> Tuple[List[Item], List[Item], List[Item]]:
        """Return the (due, weak, fresh) views of a ranked pool, rank order preserved."""
        due, weak, fresh = [], [], []
        for item in ranked:
            state = memory_states.get(item.id)
            if state is None:
                fresh.append(item)
                continue
            if state.is_due(now):
                due.append(item)
            if _is_weak(state, now):
                weak.append(item)
        return due, weak, fresh

    @classmethod
    def compose(
        cls,
        mode: Union[QuizMode, str],
        count: int,
        items: Sequence[Item],
        memory_states: Mapping[int, MemoryState],
        recent_accuracy: Optional[float] = None,
        now: Optional[datetime.datetime] = None,
        mix_config: Optional[SessionMixConfig] = None
    ) -> List[Item]:
        """
        Main entry point: rank, partition, mix per mode, dedupe, truncate.

        Args:
            mode: Quiz mode (already validated by the caller).
            count: Maximum number of items to return.
            items: Candidate pool snapshot.
            memory_states: item_id -> MemoryState for items the learner has seen.
            recent_accuracy: Recent accuracy in [0, 1]; None disables throttling.
            now: Evaluation time (default: utcnow).
            mix_config: Daily-review shares (default: SessionMixConfig()).
        """
        if count <= 0 or not items:
            return []

        mode = QuizMode(mode)
        now = ensure_utc(now) or utcnow()

        if mode is QuizMode.LISTEN_IDENTIFY:
            # Only items with audio are playable; filter before ranking.
            items = [item for item in items if item.audio_url]

        ranked = CandidateScorer.rank(items, memory_states, now)
        due, weak, fresh = cls.partition(ranked, memory_states, now)
        pool = _Pool(ranked=ranked, due=due, weak=weak, fresh=fresh)

        policy = _MODE_POLICIES[mode]
        mixed = policy(pool, count, recent_accuracy, mix_config or DEFAULT_MIX_CONFIG)
        return unique_by_id(mixed)[:count]

    # === Mode policies ===

    @staticmethod
    def _ranked_only(pool: _Pool, count: int, recent_accuracy, mix_config) -> List[Item]:
        return pool.ranked

    @staticmethod
    def _new_words(pool: _Pool, count: int, recent_accuracy, mix_config) -> List[Item]:
        return take(pool.fresh, count) + pool.ranked

    @staticmethod
    def _weak_words(pool: _Pool, count: int, recent_accuracy, mix_config) -> List[Item]:
        return take(pool.weak, count) + pool.ranked

    @staticmethod
    def _complex_workout(pool: _Pool, count: int, recent_accuracy, mix_config) -> List[Item]:
        hard = [item for item in pool.ranked
                if (item.difficulty or 1) >= SessionRules.COMPLEX_WORKOUT_MIN_DIFFICULTY]
        easy = [item for item in pool.ranked
                if (item.difficulty or 1) < SessionRules.COMPLEX_WORKOUT_MIN_DIFFICULTY]
        return pool.weak + hard + easy

    @staticmethod
    def _daily_review(pool: _Pool, count: int, recent_accuracy, mix_config: SessionMixConfig) -> List[Item]:
        review_target, new_target, weak_target = mix_config.daily_targets(count, recent_accuracy)
        return (
            take(pool.due, review_target)
            + take(pool.fresh, new_target)
            + take(pool.weak, weak_target)
            + pool.ranked
        )


_Policy = Callable[[_Pool, int, Optional[float], SessionMixConfig], List[Item]]

_MODE_POLICIES: Dict[QuizMode, _Policy] = {
    QuizMode.DAILY_REVIEW: SessionComposer._daily_review,
    QuizMode.NEW_WORDS: SessionComposer._new_words,
    QuizMode.CLUSTER: SessionComposer._ranked_only,
    QuizMode.WEAK_WORDS: SessionComposer._weak_words,
    QuizMode.COMPLEX_WORKOUT: SessionComposer._complex_workout,
    QuizMode.LISTEN_IDENTIFY: SessionComposer._ranked_only,
}

_unhandled = set(QuizMode) - set(_MODE_POLICIES)
if _unhandled:
    raise RuntimeError(f"Quiz modes without a session policy: {sorted(m.value for m in _unhandled)}")
