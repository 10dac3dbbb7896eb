# File: lexiquiz_app/modules/srs/schemas.py
from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from lexiquiz_app.utils.time_utils import ensure_utc

from .constants import SrsDefaults


class QuizDirection(str, Enum):
    """Recall direction of a question."""
    SOURCE_TO_TARGET = "source_to_target"
    TARGET_TO_SOURCE = "target_to_source"


@dataclass(frozen=True)
class SrsConfig:
    """Immutable snapshot of the scoring parameters used for one update."""
    version: str = SrsDefaults.VERSION
    ease_min: float = SrsDefaults.EASE_MIN
    ease_max: float = SrsDefaults.EASE_MAX
    incorrect_ease_penalty: float = SrsDefaults.INCORRECT_EASE_PENALTY


DEFAULT_SRS_CONFIG = SrsConfig()


@dataclass(frozen=True)
class MemoryState:
    """
    Per-(learner, item) spaced-repetition state.

    Bridges the database row (UserItemProgress) and the SRS engine. None means
    "never set"; the engine applies documented defaults for those fields.
    """
    correct_streak: int = 0
    wrong_count: int = 0
    ease_factor: float = SrsDefaults.DEFAULT_EASE
    interval: Optional[int] = None          # days
    last_seen: Optional[datetime.datetime] = None
    next_review: Optional[datetime.datetime] = None
    mastery_level: int = 0
    source_to_target_strength: Optional[float] = None
    target_to_source_strength: Optional[float] = None
    srs_config_version: Optional[str] = None

    def is_due(self, now: datetime.datetime) -> bool:
        next_review = ensure_utc(self.next_review)
        return next_review is not None and next_review <= ensure_utc(now)

    def is_overdue(self, now: datetime.datetime) -> bool:
        next_review = ensure_utc(self.next_review)
        return next_review is not None and next_review < ensure_utc(now)


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one quiz answer, as seen by the SRS engine."""
    is_correct: bool
    confidence_level: int = 2               # 1=unsure, 2=normal, 3=confident
    response_time_ms: Optional[float] = None
    direction: Optional[QuizDirection] = None
    now: Optional[datetime.datetime] = None
