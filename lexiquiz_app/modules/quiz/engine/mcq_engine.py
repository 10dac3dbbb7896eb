"""
MCQ Business Rules Engine.
Pure logic, no Database access.
"""

import random
from typing import Any, Dict, Optional, Sequence

from lexiquiz_app.modules.srs.schemas import QuizDirection

from ..constants import LISTEN_IDENTIFY_PROMPT
from ..schemas import Item, QuizMode, QuizOption, QuizQuestion


def format_pronunciation_first(item: Item) -> str:
    """'transliteration (source)' for target->source options."""
    if item.transliteration:
        return f"{item.transliteration} ({item.source_text})"
    return item.source_text


class MCQEngine:
    @staticmethod
    def pick_direction(mode: QuizMode, rng: random.Random) -> QuizDirection:
        if mode is QuizMode.LISTEN_IDENTIFY:
            return QuizDirection.SOURCE_TO_TARGET
        return rng.choice([QuizDirection.SOURCE_TO_TARGET, QuizDirection.TARGET_TO_SOURCE])

    @staticmethod
    def build_question(
        item: Item,
        distractors: Sequence[Item],
        mode: QuizMode,
        rng: Optional[random.Random] = None
    ) -> QuizQuestion:
        """
        Assemble a single MCQ question for an item.

        Args:
            item: The target item (correct answer).
            distractors: Wrong answers from DistractorSelector.
            mode: Session mode; listen_identify hides the written prompt.
            rng: Random generator for direction and option order.
        """
        rng = rng or random.Random()
        direction = MCQEngine.pick_direction(mode, rng)
        listening = mode is QuizMode.LISTEN_IDENTIFY

        if listening:
            question_text = LISTEN_IDENTIFY_PROMPT
        elif direction is QuizDirection.SOURCE_TO_TARGET:
            question_text = item.source_text
        else:
            question_text = item.target_text

        pronunciation = None
        if not listening and direction is QuizDirection.SOURCE_TO_TARGET:
            pronunciation = item.transliteration or None

        choices = [item, *distractors]
        rng.shuffle(choices)
        options = [
            QuizOption(
                id=choice.id,
                text=choice.target_text if direction is QuizDirection.SOURCE_TO_TARGET
                else format_pronunciation_first(choice),
            )
            for choice in choices
        ]

        return QuizQuestion(
            item_id=item.id,
            type=direction.value,
            question_text=question_text,
            pronunciation=pronunciation,
            audio_url=item.audio_url,
            options=options,
        )

    @staticmethod
    def check_answer(item_id: int, selected_option_id: int) -> Dict[str, Any]:
        """Options carry item ids, so the answer is correct when they match."""
        return {'is_correct': item_id == selected_option_id}
