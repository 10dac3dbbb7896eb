class SrsError(Exception):
    """Base exception for SRS module."""
    pass

class UnknownItemError(SrsError):
    """Raised when an answer refers to an item that does not exist."""
    pass

class ConcurrentUpdateError(SrsError):
    """Raised when a memory state changed between read and write."""
    pass
