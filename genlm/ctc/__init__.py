from .alphabet import LabelTranslator, APOSTROPHE, SPACE, BLANK
from .trie import CharTrie, TrieFormatError
from .lm import LanguageModel, KenLanguageModel
from .scorer import (
    BaseBeamScorer,
    ScorerParams,
    PrefixBeamState,
    PrefixScorer,
    KenLMBeamState,
    KenLMBeamScorer,
    initial_state,
    expand,
    expand_states,
    prefill,
    finalize,
    expansion_scores,
)
from .util import Chart

__all__ = [
    "LabelTranslator",
    "APOSTROPHE",
    "SPACE",
    "BLANK",
    "CharTrie",
    "TrieFormatError",
    "LanguageModel",
    "KenLanguageModel",
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
    "Chart",
]
