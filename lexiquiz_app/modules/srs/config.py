# File: lexiquiz_app/modules/srs/config.py
"""Resolution of the active SrsConfig from whatever the store hands back."""

import math
from collections.abc import Mapping
from typing import Any, Optional

from .constants import SrsDefaults
from .schemas import DEFAULT_SRS_CONFIG, SrsConfig


def _read(raw: Any, key: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(key)
    return getattr(raw, key, None)


def resolve_srs_config(raw: Optional[Any]) -> SrsConfig:
    """
    Turn a stored config (SrsConfig, mapping or DB row) into a usable snapshot.

    Falls back to DEFAULT_SRS_CONFIG when nothing is supplied, when a value is
    missing or non-finite, or when the bounds are inconsistent
    (ease_min <= 0, ease_max <= ease_min, incorrect_ease_penalty <= 0).
    """
    if raw is None:
        return DEFAULT_SRS_CONFIG

    try:
        ease_min = float(_read(raw, 'ease_min'))
        ease_max = float(_read(raw, 'ease_max'))
        penalty = float(_read(raw, 'incorrect_ease_penalty'))
    except (TypeError, ValueError):
        return DEFAULT_SRS_CONFIG

    if not all(math.isfinite(value) for value in (ease_min, ease_max, penalty)):
        return DEFAULT_SRS_CONFIG
    if ease_min <= 0 or ease_max <= ease_min or penalty <= 0:
        return DEFAULT_SRS_CONFIG

    version = _read(raw, 'version') or SrsDefaults.VERSION
    return SrsConfig(
        version=str(version),
        ease_min=ease_min,
        ease_max=ease_max,
        incorrect_ease_penalty=penalty,
    )
