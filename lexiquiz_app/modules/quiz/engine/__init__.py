from .candidate_scoring import CandidateScorer
from .mcq_engine import MCQEngine
from .selector import DistractorSelector
from .session_composer import SessionComposer, SessionMixConfig

__all__ = ['CandidateScorer', 'DistractorSelector', 'MCQEngine', 'SessionComposer', 'SessionMixConfig']
