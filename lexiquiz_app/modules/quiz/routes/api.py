import json
import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError as PydanticValidationError

from lexiquiz_app.core.error_handlers import (
    ConflictError,
    NotFoundError,
    ValidationError,
    success_response,
)
from lexiquiz_app.modules.srs.exceptions import ConcurrentUpdateError, UnknownItemError
from lexiquiz_app.schemas import GenerateQuizRequest, SubmitAnswerRequest

from ..services.quiz_service import QuizService

logger = logging.getLogger(__name__)

quiz_api_bp = Blueprint('quiz_api', __name__)


def _parse(model, data):
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(errors=json.loads(e.json(include_url=False))) from e


@quiz_api_bp.route('/generate', methods=['GET'])
def generate_quiz():
    """
    Build a quiz session.
    Query: user_id, mode (default daily_review), count (default 10), cluster_id
    """
    params = request.args.to_dict()
    params.setdefault('count', current_app.config.get('QUIZ_DEFAULT_COUNT', 10))
    payload = _parse(GenerateQuizRequest, params)

    questions = QuizService.generate_quiz(
        user_id=payload.user_id,
        mode=payload.mode,
        count=payload.count,
        cluster_id=payload.cluster_id,
    )
    return jsonify(success_response({
        'mode': payload.mode.value,
        'count': len(questions),
        'questions': questions,
    })), 200


@quiz_api_bp.route('/submit', methods=['POST'])
def submit_answer():
    """
    Grade an answer.
    Input: {
        "user_id": str,
        "item_id": int,
        "selected_option_id": int,
        "confidence_level": 1-3 (optional),
        "response_time_ms": int (optional),
        "question_type": "source_to_target" | "target_to_source" (optional)
    }
    """
    data = request.get_json(silent=True)
    if not data:
        raise ValidationError('No input data provided')
    payload = _parse(SubmitAnswerRequest, data)

    try:
        result = QuizService.submit_answer(payload.user_id, payload)
    except UnknownItemError as e:
        raise NotFoundError(str(e), resource='item') from e
    except ConcurrentUpdateError as e:
        logger.error("Gave up on progress update: %s", e)
        raise ConflictError(str(e)) from e

    return jsonify(success_response(result)), 200
