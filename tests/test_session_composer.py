"""
Tests for SessionComposer - mode policies, size bounds and the accuracy throttle.
"""

import datetime

import pytest

from lexiquiz_app.modules.quiz.engine import SessionComposer, SessionMixConfig
from lexiquiz_app.modules.quiz.engine.session_composer import _MODE_POLICIES
from lexiquiz_app.modules.quiz.schemas import Item, QuizMode
from lexiquiz_app.modules.srs.schemas import MemoryState

NOW = datetime.datetime(2024, 3, 1, 12, 0, tzinfo=datetime.timezone.utc)
DAY = datetime.timedelta(days=1)
STRONG = {'source_to_target_strength': 1.0, 'target_to_source_strength': 1.0}


def _item(item_id, difficulty=1, audio_url=None):
    return Item(id=item_id, source_text=f"s{item_id}", target_text=f"t{item_id}",
                difficulty=difficulty, audio_url=audio_url)


def _ids(items):
    return [item.id for item in items]


def _daily_pool():
    """Due 1-4 (due exactly now), fresh 11-16, weak 21-23 (not yet due)."""
    items = [_item(i) for i in (1, 2, 3, 4, 11, 12, 13, 14, 15, 16, 21, 22, 23)]
    states = {}
    for i in (1, 2, 3, 4):
        states[i] = MemoryState(last_seen=NOW - DAY, next_review=NOW, **STRONG)
    for i in (21, 22, 23):
        states[i] = MemoryState(wrong_count=2, last_seen=NOW, next_review=NOW + DAY, **STRONG)
    return items, states


class TestComposeBounds:
    def test_empty_pool(self):
        assert SessionComposer.compose(QuizMode.DAILY_REVIEW, 10, [], {}, now=NOW) == []

    def test_non_positive_count(self):
        items = [_item(1), _item(2)]
        assert SessionComposer.compose(QuizMode.NEW_WORDS, 0, items, {}, now=NOW) == []

    @pytest.mark.parametrize("mode", list(QuizMode))
    def test_never_exceeds_count(self, mode):
        items, states = _daily_pool()
        items = [Item(id=item.id, source_text='s', target_text='t', audio_url='a.mp3') for item in items]
        result = SessionComposer.compose(mode, 5, items, states, now=NOW)
        assert len(result) == 5
        assert len(set(_ids(result))) == 5

    @pytest.mark.parametrize("mode", list(QuizMode))
    def test_short_pool_returns_everything_once(self, mode):
        items = [_item(1, audio_url='a'), _item(2, audio_url='b'), _item(1, audio_url='a')]
        result = SessionComposer.compose(mode, 10, items, {}, now=NOW)
        assert sorted(_ids(result)) == [1, 2]

    def test_inputs_not_mutated(self):
        items, states = _daily_pool()
        items_copy, states_copy = list(items), dict(states)
        SessionComposer.compose(QuizMode.DAILY_REVIEW, 10, items, states, recent_accuracy=0.3, now=NOW)
        assert items == items_copy
        assert states == states_copy


class TestModePolicies:
    def test_every_mode_has_a_policy(self):
        assert set(_MODE_POLICIES) == set(QuizMode)

    def test_listen_identify_keeps_audio_items_only(self):
        items = [_item(1, audio_url='x'), _item(2), _item(3, audio_url='y')]
        result = SessionComposer.compose(QuizMode.LISTEN_IDENTIFY, 10, items, {}, now=NOW)
        assert _ids(result) == [1, 3]

    def test_listen_identify_ignores_empty_audio(self):
        items = [_item(1, audio_url=''), _item(2, audio_url='z')]
        result = SessionComposer.compose(QuizMode.LISTEN_IDENTIFY, 10, items, {}, now=NOW)
        assert _ids(result) == [2]

    def test_new_words_puts_unseen_first(self):
        items = [_item(1), _item(2), _item(3), _item(4)]
        seen = MemoryState(last_seen=NOW, next_review=NOW + DAY)
        result = SessionComposer.compose(QuizMode.NEW_WORDS, 4, items, {1: seen, 2: seen}, now=NOW)
        assert _ids(result) == [3, 4, 1, 2]

    def test_weak_words_puts_struggling_items_first(self):
        items = [_item(1, difficulty=9), _item(2), _item(3), _item(4)]
        states = {
            1: MemoryState(last_seen=NOW, next_review=NOW + DAY, **STRONG),
            2: MemoryState(last_seen=NOW, next_review=NOW + DAY, **STRONG),
            3: MemoryState(wrong_count=3, last_seen=NOW, next_review=NOW + DAY, **STRONG),
            4: MemoryState(last_seen=NOW - 2 * DAY, next_review=NOW - DAY, **STRONG),
        }
        assert _ids(SessionComposer.compose(QuizMode.WEAK_WORDS, 4, items, states, now=NOW)) == [3, 4, 1, 2]
        assert _ids(SessionComposer.compose(QuizMode.WEAK_WORDS, 2, items, states, now=NOW)) == [3, 4]

    def test_complex_workout_order(self):
        """Weak items, then difficulty >= 2, then the rest."""
        items = [_item(1), _item(2, difficulty=3), _item(3), _item(4, difficulty=2)]
        states = {1: MemoryState(wrong_count=2, last_seen=NOW, next_review=NOW + DAY, **STRONG)}
        result = SessionComposer.compose(QuizMode.COMPLEX_WORKOUT, 4, items, states, now=NOW)
        assert _ids(result) == [1, 2, 4, 3]

    def test_cluster_mode_is_rank_order(self):
        items = [_item(3), _item(1, difficulty=2), _item(2)]
        result = SessionComposer.compose('cluster', 3, items, {}, now=NOW)
        assert _ids(result) == [1, 2, 3]


class TestDailyReview:
    def test_baseline_mix(self):
        items, states = _daily_pool()
        result = SessionComposer.compose(QuizMode.DAILY_REVIEW, 10, items, states, recent_accuracy=1.0, now=NOW)
        assert _ids(result) == [1, 2, 3, 11, 12, 13, 14, 15, 21, 22]

    def test_low_accuracy_throttles_new_items(self):
        items, states = _daily_pool()
        result = SessionComposer.compose(QuizMode.DAILY_REVIEW, 10, items, states, recent_accuracy=0.4, now=NOW)
        assert _ids(result) == [1, 2, 3, 4, 11, 12, 21, 22, 23, 13]

    def test_no_accuracy_means_no_throttle(self):
        items, states = _daily_pool()
        baseline = SessionComposer.compose(QuizMode.DAILY_REVIEW, 10, items, states, recent_accuracy=1.0, now=NOW)
        assert SessionComposer.compose(QuizMode.DAILY_REVIEW, 10, items, states, now=NOW) == baseline

    def test_lower_accuracy_never_adds_new_items(self):
        items, states = _daily_pool()
        fresh_ids = {11, 12, 13, 14, 15, 16}
        previous = None
        for accuracy in (1.0, 0.9, 0.7, 0.6, 0.59, 0.3, 0.0):
            result = SessionComposer.compose(
                QuizMode.DAILY_REVIEW, 8, items, states, recent_accuracy=accuracy, now=NOW
            )
            new_count = len([i for i in _ids(result) if i in fresh_ids])
            if previous is not None:
                assert new_count <= previous
            previous = new_count


class TestSessionMixConfig:
    def test_default_targets(self):
        config = SessionMixConfig()
        assert config.daily_targets(10) == (3, 5, 2)
        assert config.daily_targets(10, 1.0) == (3, 5, 2)
        assert config.daily_targets(10, 0.4) == (4, 2, 4)

    def test_half_quotas_round_up(self):
        assert SessionMixConfig().daily_targets(5) == (2, 3, 0)

    def test_opt_in_boost(self):
        config = SessionMixConfig(boost_threshold=0.85)
        assert config.daily_targets(20, 0.9) == (5, 12, 3)
        assert config.daily_targets(20, 0.8) == (6, 10, 4)

    def test_from_mapping_reads_config_keys(self):
        config = SessionMixConfig.from_mapping({
            'SESSION_THROTTLE_THRESHOLD': 0.5,
            'SESSION_THROTTLED_NEW_SHARE': 0.1,
        })
        assert config.throttle_threshold == 0.5
        assert config.throttled_new_share == 0.1
        assert config.daily_targets(10, 0.55) == (3, 5, 2)

    def test_inconsistent_mapping_falls_back(self):
        config = SessionMixConfig.from_mapping({'SESSION_THROTTLED_NEW_SHARE': 0.9})
        assert config == SessionMixConfig()
        config = SessionMixConfig.from_mapping({'SESSION_NEW_SHARE': 1.5})
        assert config == SessionMixConfig()
