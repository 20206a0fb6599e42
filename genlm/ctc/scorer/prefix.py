from arsenal import colors

from .base import BaseBeamScorer, ScorerParams
from ..trie import CharTrie
from ..alphabet import LabelTranslator


class PrefixBeamState:
    """Trie position of a beam and the penalty it has accrued.

    Args:
        prob (float): Sum of out-of-vocabulary penalties, never positive
        node (int|None): Current trie node, None once the current word left the trie
    """

    __slots__ = ("prob", "node")

    def __init__(self, prob=0.0, node=None):
        self.prob = prob
        self.node = node

    def copy(self):
        return PrefixBeamState(self.prob, self.node)

    def __eq__(self, other):
        return (
            isinstance(other, PrefixBeamState)
            and self.prob == other.prob
            and self.node == other.node
        )

    # Mutable; compared by value, never used as a key.
    __hash__ = None

    def __repr__(self):
        node = colors.red % "oov" if self.node is None else colors.green % self.node
        return f"{self.prob:.2f}: node={node}"


class PrefixScorer(BaseBeamScorer[PrefixBeamState]):
    """Penalizes beams that spell words outside a vocabulary trie.

    The penalty is charged once per word, on the first label that leaves
    the trie; the word separator brings the beam back to the root.

    Args:
        trie (CharTrie): Vocabulary trie
        params (ScorerParams, optional): Scorer parameters
        translator (LabelTranslator, optional): Label alphabet
    """

    def __init__(self, trie, params=None, translator=None):
        super().__init__(translator)
        self.trie = trie
        self.params = params or ScorerParams()

    @classmethod
    def from_file(cls, trie_path, params=None, translator=None):
        """Loads the trie at `trie_path`; fails if it is missing or malformed."""
        translator = translator or LabelTranslator()
        trie = CharTrie.load(trie_path, vocab_size=translator.vocab_size)
        return cls(trie, params=params, translator=translator)

    def new_state(self):
        return PrefixBeamState()

    def initialize_state(self, root):
        root.prob = 0.0
        root.node = self.trie.root

    def expand_state(self, from_state, from_label, to_state, to_label):
        to_state.prob = from_state.prob
        to_state.node = from_state.node

        if from_label == to_label or self.translator.is_blank_label(to_label):
            return

        if self.translator.is_space_label(to_label):
            to_state.node = self.trie.root
            return

        if to_state.node is None:
            # Already out of vocabulary; this word has been charged.
            return

        to_state.node = self.trie.child_at(to_state.node, to_label)
        if to_state.node is None:
            to_state.prob -= self.params.oov_penalty
            if self.params.verbose:
                print(
                    f"[prefix] {colors.red % 'oov'} at label {to_label}: "
                    f"prob={to_state.prob:.2f}"
                )

    def state_expansion_score(self, state, previous_score):
        return state.prob

    def state_end_expansion_score(self, state):
        return state.prob
