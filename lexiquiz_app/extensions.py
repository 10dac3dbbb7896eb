"""Application-wide extensions.

This module centralizes extension instances so they can be imported without
causing circular dependencies.
"""

from .db_instance import db

__all__ = ["db"]
