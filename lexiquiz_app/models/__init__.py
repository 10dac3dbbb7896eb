"""Database models package for LexiQuiz."""

from ..db_instance import db

from .vocabulary import Cluster, VocabularyItem, item_clusters
from ..modules.srs.models import QuizAttempt, SrsConfigRecord, UserItemProgress

__all__ = [
    "db",
    "Cluster",
    "VocabularyItem",
    "item_clusters",
    "QuizAttempt",
    "SrsConfigRecord",
    "UserItemProgress",
]
