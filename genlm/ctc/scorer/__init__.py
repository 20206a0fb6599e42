from .base import (
    BaseBeamScorer,
    ScorerParams,
    initial_state,
    expand,
    expand_states,
    prefill,
    finalize,
    expansion_scores,
)
from .prefix import PrefixBeamState, PrefixScorer
from .language_model import KenLMBeamState, KenLMBeamScorer

__all__ = [
    "BaseBeamScorer",
    "ScorerParams",
    "PrefixBeamState",
    "PrefixScorer",
    "KenLMBeamState",
    "KenLMBeamScorer",
    "initial_state",
    "expand",
    "expand_states",
    "prefill",
    "finalize",
    "expansion_scores",
]
