import logging
from typing import Dict, Iterable, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from lexiquiz_app.db_instance import db
from lexiquiz_app.utils.time_utils import utcnow

from ..exceptions import ConcurrentUpdateError
from ..models import QuizAttempt, UserItemProgress
from ..schemas import AttemptOutcome, MemoryState

logger = logging.getLogger(__name__)


class ProgressService:
    """
    Persistence for memory states and the attempt log.
    The engines never touch the database; this is the only writer.
    """

    @staticmethod
    def get_progress_record(user_id: str, item_id: int) -> Optional[UserItemProgress]:
        return (
            UserItemProgress.query
            .filter_by(user_id=user_id, item_id=item_id)
            .execution_options(populate_existing=True)
            .first()
        )

    @staticmethod
    def get_memory_state(user_id: str, item_id: int) -> Optional[MemoryState]:
        record = ProgressService.get_progress_record(user_id, item_id)
        return record.to_memory_state() if record else None

    @staticmethod
    def get_memory_states(user_id: str, item_ids: Iterable[int]) -> Dict[int, MemoryState]:
        item_ids = list(item_ids)
        if not item_ids:
            return {}
        records = UserItemProgress.query.filter(
            UserItemProgress.user_id == user_id,
            UserItemProgress.item_id.in_(item_ids),
        ).all()
        return {record.item_id: record.to_memory_state() for record in records}

    @staticmethod
    def persist_memory_state(user_id: str, item_id: int, state: MemoryState, expected_version: int) -> int:
        """
        Write a state if nobody else wrote since it was read.

        Args:
            expected_version: Version read alongside the previous state,
                0 when there was no row yet.

        Returns:
            The new version number.

        Raises:
            ConcurrentUpdateError: The row changed (or appeared) in between.
                The session is rolled back.
        """
        columns = UserItemProgress.columns_from_state(state)

        if expected_version == 0:
            record = UserItemProgress(user_id=user_id, item_id=item_id, version=1)
            record.apply_memory_state(state)
            db.session.add(record)
            try:
                db.session.flush()
            except IntegrityError as exc:
                db.session.rollback()
                raise ConcurrentUpdateError(
                    f"Progress for user={user_id}, item={item_id} was created concurrently"
                ) from exc
            return 1

        result = db.session.execute(
            update(UserItemProgress)
            .where(
                UserItemProgress.user_id == user_id,
                UserItemProgress.item_id == item_id,
                UserItemProgress.version == expected_version,
            )
            .values(**columns, version=expected_version + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            db.session.rollback()
            raise ConcurrentUpdateError(
                f"Progress for user={user_id}, item={item_id} is no longer at version {expected_version}"
            )
        return expected_version + 1

    @staticmethod
    def log_attempt(
        user_id: str,
        item_id: int,
        outcome: AttemptOutcome,
        question_type: Optional[str] = None
    ) -> QuizAttempt:
        attempt = QuizAttempt(
            user_id=user_id,
            item_id=item_id,
            is_correct=outcome.is_correct,
            confidence_level=outcome.confidence_level,
            response_time_ms=int(outcome.response_time_ms) if outcome.response_time_ms is not None else None,
            direction=getattr(outcome.direction, 'value', outcome.direction),
            question_type=question_type,
            created_at=outcome.now or utcnow(),
        )
        db.session.add(attempt)
        return attempt

    @staticmethod
    def get_recent_accuracy(user_id: str, window: int = 20) -> Optional[float]:
        """Share of correct answers among the last `window` attempts; None without history."""
        attempts = (
            QuizAttempt.query
            .filter_by(user_id=user_id)
            .order_by(QuizAttempt.created_at.desc(), QuizAttempt.attempt_id.desc())
            .limit(window)
            .all()
        )
        if not attempts:
            return None
        return sum(1 for attempt in attempts if attempt.is_correct) / len(attempts)
