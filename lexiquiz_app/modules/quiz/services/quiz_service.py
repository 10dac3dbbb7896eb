"""
Quiz Service - Orchestrates database access and calls the quiz engines.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from flask import current_app

from lexiquiz_app.db_instance import db
from lexiquiz_app.models import VocabularyItem
from lexiquiz_app.modules.srs.exceptions import UnknownItemError
from lexiquiz_app.modules.srs.interface import SrsInterface
from lexiquiz_app.modules.srs.schemas import AttemptOutcome
from lexiquiz_app.modules.srs.services.progress_service import ProgressService
from lexiquiz_app.utils.time_utils import utcnow

from ..engine import DistractorSelector, MCQEngine, SessionComposer, SessionMixConfig
from ..schemas import QuizMode
from .vocabulary_service import VocabularyService

logger = logging.getLogger(__name__)


class QuizService:
    @staticmethod
    def generate_quiz(
        user_id: str,
        mode: QuizMode,
        count: int,
        cluster_id: Optional[int] = None,
        now=None,
        rng: Optional[random.Random] = None
    ) -> List[Dict[str, Any]]:
        """
        Build one quiz session for a learner.

        Returns serialized questions in session order. An empty pool gives an
        empty list.
        """
        config = current_app.config
        mode = QuizMode(mode)
        now = now or utcnow()
        rng = rng or random.Random()
        count = min(count, config.get('QUIZ_MAX_COUNT', 50))

        items = VocabularyService.list_items(
            cluster_id=cluster_id if mode is QuizMode.CLUSTER else None,
            audio_only=mode is QuizMode.LISTEN_IDENTIFY,
        )
        memory_states = ProgressService.get_memory_states(user_id, [item.id for item in items])

        recent_accuracy = ProgressService.get_recent_accuracy(
            user_id, window=config.get('QUIZ_RECENT_ACCURACY_WINDOW', 20)
        )
        if recent_accuracy is None:
            recent_accuracy = 1.0

        session_items = SessionComposer.compose(
            mode,
            count,
            items,
            memory_states,
            recent_accuracy=recent_accuracy,
            now=now,
            mix_config=SessionMixConfig.from_mapping(config),
        )

        distractor_pool = VocabularyService.list_items(limit=config.get('QUIZ_DISTRACTOR_POOL_LIMIT', 500))
        membership = VocabularyService.cluster_membership(
            {item.id for item in distractor_pool} | {item.id for item in session_items}
        )
        distractor_count = config.get('QUIZ_DISTRACTOR_COUNT', 3)

        questions = []
        for item in session_items:
            distractors = DistractorSelector.choose(
                item,
                distractor_pool,
                cluster_membership=membership,
                count=distractor_count,
                random_source=rng.random,
            )
            questions.append(MCQEngine.build_question(item, distractors, mode, rng=rng).to_dict())

        logger.info(
            "Generated %s quiz for user=%s: requested=%d returned=%d (pool=%d, accuracy=%.2f)",
            mode.value, user_id, count, len(questions), len(items), recent_accuracy,
        )
        return questions

    @staticmethod
    def submit_answer(user_id: str, request) -> Dict[str, Any]:
        """
        Grade an answer and update the learner's memory state.

        Args:
            request: SubmitAnswerRequest (validated at the HTTP edge).
        """
        item = db.session.get(VocabularyItem, request.item_id)
        if item is None:
            raise UnknownItemError(f"Item {request.item_id} not found")

        result = MCQEngine.check_answer(request.item_id, request.selected_option_id)
        outcome = AttemptOutcome(
            is_correct=result['is_correct'],
            confidence_level=request.confidence_level,
            response_time_ms=request.response_time_ms,
            direction=request.direction or request.question_type,
            now=utcnow(),
        )
        question_type = request.question_type.value if request.question_type else None
        state = SrsInterface.process_attempt(user_id, request.item_id, outcome, question_type=question_type)

        logger.debug(
            "Answer from user=%s on item=%s: correct=%s streak=%d",
            user_id, request.item_id, outcome.is_correct, state.correct_streak,
        )
        return {
            'is_correct': outcome.is_correct,
            'correct_answer': item.target_text,
            'progress_update': {
                'streak': state.correct_streak,
                'mastery_level': state.mastery_level,
                'next_review': state.next_review.isoformat() if state.next_review else None,
            },
        }
