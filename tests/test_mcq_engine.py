"""Tests for MCQ question assembly."""

import random

from lexiquiz_app.modules.quiz.engine import MCQEngine
from lexiquiz_app.modules.quiz.engine.mcq_engine import format_pronunciation_first
from lexiquiz_app.modules.quiz.schemas import Item, QuizMode
from lexiquiz_app.modules.srs.schemas import QuizDirection

TARGET = Item(id=1, source_text='犬', target_text='dog', transliteration='inu', audio_url='/audio/1.mp3')
DISTRACTORS = [
    Item(id=2, source_text='猫', target_text='cat', transliteration='neko'),
    Item(id=3, source_text='鳥', target_text='bird'),
    Item(id=4, source_text='水', target_text='water', transliteration='mizu'),
]


class _FixedRng:
    """Always picks the given direction; reverses instead of shuffling."""

    def __init__(self, direction):
        self.direction = direction

    def choice(self, seq):
        assert self.direction in seq
        return self.direction

    def shuffle(self, seq):
        seq.reverse()


class TestBuildQuestion:
    def test_source_to_target(self):
        question = MCQEngine.build_question(
            TARGET, DISTRACTORS, QuizMode.DAILY_REVIEW, rng=_FixedRng(QuizDirection.SOURCE_TO_TARGET)
        )
        assert question.type == 'source_to_target'
        assert question.question_text == '犬'
        assert question.pronunciation == 'inu'
        assert [(o.id, o.text) for o in question.options] == [
            (4, 'water'), (3, 'bird'), (2, 'cat'), (1, 'dog'),
        ]

    def test_target_to_source_shows_pronunciation_first(self):
        question = MCQEngine.build_question(
            TARGET, DISTRACTORS, QuizMode.NEW_WORDS, rng=_FixedRng(QuizDirection.TARGET_TO_SOURCE)
        )
        assert question.type == 'target_to_source'
        assert question.question_text == 'dog'
        assert question.pronunciation is None
        texts = {o.id: o.text for o in question.options}
        assert texts[1] == 'inu (犬)'
        assert texts[3] == '鳥'

    def test_listen_identify_hides_prompt(self):
        question = MCQEngine.build_question(TARGET, DISTRACTORS, QuizMode.LISTEN_IDENTIFY, rng=random.Random(5))
        assert question.type == 'source_to_target'
        assert question.question_text == 'Listen and pick the correct meaning'
        assert question.pronunciation is None
        assert question.audio_url == '/audio/1.mp3'

    def test_options_contain_answer_once(self):
        for seed in range(10):
            question = MCQEngine.build_question(TARGET, DISTRACTORS, QuizMode.WEAK_WORDS, rng=random.Random(seed))
            ids = [option.id for option in question.options]
            assert sorted(ids) == [1, 2, 3, 4]

    def test_same_seed_same_question(self):
        first = MCQEngine.build_question(TARGET, DISTRACTORS, QuizMode.DAILY_REVIEW, rng=random.Random(42))
        second = MCQEngine.build_question(TARGET, DISTRACTORS, QuizMode.DAILY_REVIEW, rng=random.Random(42))
        assert first.to_dict() == second.to_dict()


class TestHelpers:
    def test_check_answer(self):
        assert MCQEngine.check_answer(3, 3) == {'is_correct': True}
        assert MCQEngine.check_answer(3, 4) == {'is_correct': False}

    def test_format_without_transliteration(self):
        assert format_pronunciation_first(DISTRACTORS[1]) == '鳥'
