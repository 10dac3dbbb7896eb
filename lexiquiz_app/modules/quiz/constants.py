# File: lexiquiz_app/modules/quiz/constants.py
# Weights for candidate priority and session mixing.


class CandidateScoring:
    DEFAULT_ITEM_DIFFICULTY = 1
    NEW_ITEM_DIFFICULTY_MULTIPLIER = 2
    NEW_ITEM_BASE_BOOST = 50
    SECONDS_PER_DAY = 86400
    WRONG_COUNT_WEIGHT = 2
    DEFAULT_DIRECTION_STRENGTH = 0.5
    DIRECTION_WEAKNESS_SCALE = 8
    MASTERED_MIN_LEVEL = 4
    MASTERED_NOT_DUE_PENALTY = -1000


class SessionRules:
    WEAK_MIN_WRONG_COUNT = 2
    COMPLEX_WORKOUT_MIN_DIFFICULTY = 2


class MixDefaults:
    REVIEW_SHARE = 0.3
    NEW_SHARE = 0.5
    THROTTLE_THRESHOLD = 0.6
    THROTTLED_NEW_SHARE = 0.2
    THROTTLED_REVIEW_SHARE = 0.4
    BOOST_THRESHOLD = None
    BOOSTED_NEW_SHARE = 0.6
    BOOSTED_REVIEW_SHARE = 0.25


class DistractorRules:
    DEFAULT_COUNT = 3


LISTEN_IDENTIFY_PROMPT = "Listen and pick the correct meaning"
