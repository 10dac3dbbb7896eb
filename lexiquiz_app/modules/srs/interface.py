# File: lexiquiz_app/modules/srs/interface.py
import logging
from dataclasses import replace
from typing import Optional

from flask import current_app

from lexiquiz_app.db_instance import db
from lexiquiz_app.models import VocabularyItem
from lexiquiz_app.utils.time_utils import utcnow

from .engine import SrsEngine
from .exceptions import ConcurrentUpdateError, UnknownItemError
from .locks import KeyedLocks
from .schemas import AttemptOutcome, MemoryState
from .services.progress_service import ProgressService
from .services.srs_config_service import SrsConfigService
from .signals import attempt_recorded

logger = logging.getLogger(__name__)

_progress_locks = KeyedLocks()


class SrsInterface:
    """Public API for SRS module."""

    @staticmethod
    def process_attempt(
        user_id: str,
        item_id: int,
        outcome: AttemptOutcome,
        question_type: Optional[str] = None
    ) -> MemoryState:
        """
        Apply one graded attempt: read, update, persist, log.

        At most one update per (user, item) is in flight inside this process;
        a write that loses a race with another process is recomputed from the
        fresh state, up to SRS_WRITE_RETRIES times.
        """
        if db.session.get(VocabularyItem, item_id) is None:
            raise UnknownItemError(f"Item {item_id} not found")

        if outcome.now is None:
            outcome = replace(outcome, now=utcnow())

        config = SrsConfigService.get_active()
        retries = current_app.config.get('SRS_WRITE_RETRIES', 3)

        with _progress_locks.hold((user_id, item_id)):
            for attempt_no in range(1, retries + 1):
                record = ProgressService.get_progress_record(user_id, item_id)
                previous = record.to_memory_state() if record else None
                expected_version = record.version if record else 0

                new_state = SrsEngine.apply_attempt(previous, outcome, config)
                try:
                    ProgressService.persist_memory_state(user_id, item_id, new_state, expected_version)
                    break
                except ConcurrentUpdateError:
                    logger.warning(
                        "Concurrent progress update for user=%s item=%s (try %d/%d)",
                        user_id, item_id, attempt_no, retries,
                    )
            else:
                raise ConcurrentUpdateError(
                    f"Could not persist progress for user={user_id}, item={item_id} after {retries} tries"
                )

            ProgressService.log_attempt(user_id, item_id, outcome, question_type=question_type)
            db.session.commit()

        attempt_recorded.send(
            SrsInterface, user_id=user_id, item_id=item_id, outcome=outcome, state=new_state
        )
        return new_state
