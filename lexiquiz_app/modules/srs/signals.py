from blinker import Namespace

# Define a signal namespace for SRS
_signals = Namespace()

# Signal emitted after an attempt is graded, persisted and logged
# Arguments:
# - sender: SrsInterface
# - user_id: str
# - item_id: int
# - outcome: AttemptOutcome
# - state: MemoryState (new state)
attempt_recorded = _signals.signal('attempt-recorded')
