from datetime import datetime, timezone

from lexiquiz_app.db_instance import db
from lexiquiz_app.utils.time_utils import ensure_utc

from .schemas import MemoryState


# Columns that mirror MemoryState one-to-one
MEMORY_STATE_COLUMNS = (
    'correct_streak',
    'wrong_count',
    'ease_factor',
    'interval',
    'last_seen',
    'next_review',
    'mastery_level',
    'source_to_target_strength',
    'target_to_source_strength',
    'srs_config_version',
)


class UserItemProgress(db.Model):
    """
    Persisted memory state of one item for one learner.
    `version` is bumped on every write and checked on update (compare-and-swap).
    """
    __tablename__ = 'user_item_progress'

    progress_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    item_id = db.Column(db.Integer, db.ForeignKey('vocabulary_items.item_id'), nullable=False, index=True)

    # SRS state
    correct_streak = db.Column(db.Integer, nullable=False, default=0)
    wrong_count = db.Column(db.Integer, nullable=False, default=0)
    ease_factor = db.Column(db.Float, nullable=False, default=2.5)
    interval = db.Column(db.Integer, nullable=True)  # days
    mastery_level = db.Column(db.Integer, nullable=False, default=0)
    source_to_target_strength = db.Column(db.Float, nullable=True)
    target_to_source_strength = db.Column(db.Float, nullable=True)
    srs_config_version = db.Column(db.String(32), nullable=True)

    # Scheduling
    last_seen = db.Column(db.DateTime(timezone=True), nullable=True)
    next_review = db.Column(db.DateTime(timezone=True), nullable=True, index=True)

    version = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
                           onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('user_id', 'item_id', name='uq_user_item_progress'),
    )

    def to_memory_state(self) -> MemoryState:
        return MemoryState(
            correct_streak=self.correct_streak or 0,
            wrong_count=self.wrong_count or 0,
            ease_factor=self.ease_factor if self.ease_factor is not None else 2.5,
            interval=self.interval,
            last_seen=ensure_utc(self.last_seen),
            next_review=ensure_utc(self.next_review),
            mastery_level=self.mastery_level or 0,
            source_to_target_strength=self.source_to_target_strength,
            target_to_source_strength=self.target_to_source_strength,
            srs_config_version=self.srs_config_version,
        )

    def apply_memory_state(self, state: MemoryState) -> None:
        for column, value in self.columns_from_state(state).items():
            setattr(self, column, value)

    @staticmethod
    def columns_from_state(state: MemoryState) -> dict:
        return {column: getattr(state, column) for column in MEMORY_STATE_COLUMNS}


class SrsConfigRecord(db.Model):
    """Versioned SRS parameter set; at most one row is active."""
    __tablename__ = 'srs_configs'

    config_id = db.Column(db.Integer, primary_key=True)
    version = db.Column(db.String(32), nullable=False, unique=True)
    ease_min = db.Column(db.Float, nullable=True)
    ease_max = db.Column(db.Float, nullable=True)
    incorrect_ease_penalty = db.Column(db.Float, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


class QuizAttempt(db.Model):
    """Audit log of answered questions."""
    __tablename__ = 'quiz_attempts'

    attempt_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    item_id = db.Column(db.Integer, db.ForeignKey('vocabulary_items.item_id'), nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False)
    confidence_level = db.Column(db.Integer, nullable=False)
    response_time_ms = db.Column(db.Integer, nullable=True)
    direction = db.Column(db.String(32), nullable=True)
    question_type = db.Column(db.String(32), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)
