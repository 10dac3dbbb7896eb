# File: lexiquiz_app/modules/srs/constants.py
# Numeric rules for the memory-state update.


class SrsDefaults:
    VERSION = "v1"
    EASE_MIN = 1.3
    EASE_MAX = 3.0
    INCORRECT_EASE_PENALTY = 0.2
    DEFAULT_EASE = 2.5
    DEFAULT_INTERVAL_DAYS = 1
    SECOND_INTERVAL_DAYS = 6
    MAX_INTERVAL_DAYS = 36500
    QUALITY_PASS_THRESHOLD = 3


class QualityRules:
    INCORRECT_QUALITY = 1
    BASE_QUALITY = 3
    HIGH_CONFIDENCE_THRESHOLD = 3
    HIGH_CONFIDENCE_BONUS = 1
    LOW_CONFIDENCE_THRESHOLD = 1
    LOW_CONFIDENCE_PENALTY = 0.5
    FAST_RESPONSE_MS_THRESHOLD = 3000
    FAST_RESPONSE_BONUS = 0.5
    SLOW_RESPONSE_MS_THRESHOLD = 10000
    SLOW_RESPONSE_PENALTY = 0.5
    QUALITY_MIN = 0
    QUALITY_MAX = 5


class EaseUpdate:
    # SM-2: EF' = EF + (0.1 - (5-q) * (0.08 + (5-q) * 0.02))
    BASE_INCREMENT = 0.1
    QUALITY_OFFSET = 5
    PRIMARY_FACTOR = 0.08
    SECONDARY_FACTOR = 0.02


class MasteryRules:
    # (minimum streak, level), checked top-down
    THRESHOLDS = ((7, 4), (5, 3), (3, 2), (1, 1))
    FIRST_STREAK_STEP = 1
    SECOND_STREAK_STEP = 2


class StrengthRules:
    DEFAULT_STRENGTH = 0.5
    MIN_STRENGTH = 0.0
    MAX_STRENGTH = 1.0
    CORRECT_BASE_ADJUSTMENT = 0.12
    INCORRECT_BASE_ADJUSTMENT = -0.18
    CONFIDENCE_BASELINE = 2
    CORRECT_CONFIDENCE_SCALE = 0.04
    INCORRECT_CONFIDENCE_SCALE = 0.02
