# File: lexiquiz_app/modules/quiz/schemas.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional


class QuizMode(str, Enum):
    """Session composition policies. Closed set; validated at the HTTP edge."""
    DAILY_REVIEW = "daily_review"
    NEW_WORDS = "new_words"
    CLUSTER = "cluster"
    WEAK_WORDS = "weak_words"
    COMPLEX_WORKOUT = "complex_workout"
    LISTEN_IDENTIFY = "listen_identify"


@dataclass(frozen=True)
class Item:
    """Immutable snapshot of a vocabulary item handed to the engines."""
    id: int
    source_text: str
    target_text: str
    transliteration: str = ""
    difficulty: int = 1
    part_of_speech: Optional[str] = None
    audio_url: Optional[str] = None
    cluster_ids: FrozenSet[int] = field(default_factory=frozenset)


@dataclass(frozen=True)
class CandidateScore:
    """Priority of one item with the terms that produced it."""
    difficulty_weight: int
    days_since_last_seen: int
    wrong_penalty_bonus: int
    streak_penalty: int
    direction_weakness_bonus: int
    new_word_boost: int
    mastered_penalty: int
    total: int


@dataclass
class QuizOption:
    id: int
    text: str


@dataclass
class QuizQuestion:
    """One multiple-choice question ready for serialization."""
    item_id: int
    type: str
    question_text: str
    pronunciation: Optional[str]
    audio_url: Optional[str]
    options: List[QuizOption]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'item_id': self.item_id,
            'type': self.type,
            'question_text': self.question_text,
            'pronunciation': self.pronunciation,
            'audio_url': self.audio_url,
            'options': [{'id': option.id, 'text': option.text} for option in self.options],
        }
