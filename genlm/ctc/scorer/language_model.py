import math
import logging
from arsenal import colors

from .base import BaseBeamScorer, ScorerParams
from ..alphabet import LabelTranslator
from ..lm import KenLanguageModel
from ..trie import CharTrie
from ..util import escape

logger = logging.getLogger(__name__)


class KenLMBeamState:
    """Language-model state of a beam.

    Args:
        score (float): Cumulative log10 score of the beam
        language_model_score (float): Sum of the language model scores of completed words
        delta_score (float): Change of `score` made by the last transition
        incomplete_word (str): Characters emitted since the last word boundary
        incomplete_word_trie_node (int|None): Trie node of `incomplete_word`, None once
            it left the trie
        model_state: Language model state after the last completed word
    """

    __slots__ = (
        "score",
        "language_model_score",
        "delta_score",
        "incomplete_word",
        "incomplete_word_trie_node",
        "model_state",
    )

    def __init__(
        self,
        score=0.0,
        language_model_score=0.0,
        delta_score=0.0,
        incomplete_word="",
        incomplete_word_trie_node=None,
        model_state=None,
    ):
        self.score = score
        self.language_model_score = language_model_score
        self.delta_score = delta_score
        self.incomplete_word = incomplete_word
        self.incomplete_word_trie_node = incomplete_word_trie_node
        self.model_state = model_state

    def copy(self):
        # Strings and model states are never mutated in place, sharing them is a copy.
        return KenLMBeamState(
            score=self.score,
            language_model_score=self.language_model_score,
            delta_score=self.delta_score,
            incomplete_word=self.incomplete_word,
            incomplete_word_trie_node=self.incomplete_word_trie_node,
            model_state=self.model_state,
        )

    def __eq__(self, other):
        return isinstance(other, KenLMBeamState) and all(
            getattr(self, name) == getattr(other, name) for name in self.__slots__
        )

    # Mutable; compared by value, never used as a key.
    __hash__ = None

    def __repr__(self):
        word = colors.green % ("|" + escape(self.incomplete_word))
        if self.incomplete_word_trie_node is None:
            word = colors.red % ("|" + escape(self.incomplete_word))
        return (
            f"{self.score:.2f} (lm={self.language_model_score:.2f}, "
            f"delta={self.delta_score:.2f}): {word}"
        )


class KenLMBeamScorer(BaseBeamScorer[KenLMBeamState]):
    """Scores beams with an n-gram language model at word boundaries and a
    trie unigram estimate in between.

    While a word is being spelled, a beam's score is the last language model
    score plus log10(count(prefix) / count(root)) from the trie, or
    `params.unigram_floor` once the prefix leaves the trie. When the word
    separator is emitted the word is scored by the language model and its
    score is added to the running total, replacing the estimate.

    Args:
        lm (LanguageModel): Word-level language model
        trie (CharTrie): Vocabulary trie with word counts
        params (ScorerParams, optional): Scorer parameters
        translator (LabelTranslator, optional): Label alphabet
    """

    def __init__(self, lm, trie, params=None, translator=None):
        super().__init__(translator)
        self.lm = lm
        self.trie = trie
        self.params = params or ScorerParams()
        root_frequency = trie.frequency(trie.root)
        self._log_root_frequency = math.log10(root_frequency) if root_frequency > 0 else 0.0

    @classmethod
    def from_file(cls, lm_path, params=None, translator=None):
        """Loads a KenLM model and the trie stored next to it.

        The trie is read from `lm_path + params.trie_suffix`.

        Raises:
            FileNotFoundError: if either file is missing.
            TrieFormatError: if the trie file is malformed.
        """
        params = params or ScorerParams()
        translator = translator or LabelTranslator()
        lm = KenLanguageModel(lm_path)
        trie = CharTrie.load(lm_path + params.trie_suffix, vocab_size=translator.vocab_size)
        logger.info("Beam scorer ready: %r, %r", lm, trie)
        return cls(lm, trie, params=params, translator=translator)

    def new_state(self):
        return KenLMBeamState()

    def initialize_state(self, root):
        root.language_model_score = 0.0
        root.score = 0.0
        root.delta_score = 0.0
        root.incomplete_word = ""
        root.incomplete_word_trie_node = self.trie.root
        root.model_state = self.lm.begin_state()

    def expand_state(self, from_state, from_label, to_state, to_label):
        self._copy_state(from_state, to_state)

        if from_label == to_label or self.translator.is_blank_label(to_label):
            to_state.delta_score = 0.0
            return

        if not self.translator.is_space_label(to_label):
            to_state.incomplete_word += self.translator.character_from_label(to_label)

            node = from_state.incomplete_word_trie_node
            prefix_prob = self.params.unigram_floor
            if node is not None:
                node = self.trie.child_at(node, to_label)
                to_state.incomplete_word_trie_node = node
                if node is not None:
                    frequency = self.trie.frequency(node)
                    # A zero count has no log; treat it like a missing prefix.
                    if frequency > 0:
                        prefix_prob = math.log10(frequency) - self._log_root_frequency

            to_state.score = prefix_prob + to_state.language_model_score
            to_state.delta_score = to_state.score - from_state.score
        else:
            prob, to_state.model_state = self.lm.score_word(
                from_state.model_state, to_state.incomplete_word
            )
            if self.params.verbose:
                print(f"[lm] {escape(to_state.incomplete_word)}: {prob:.4f}")
            self._update_with_lm_score(to_state, prob)
            self._reset_incomplete_word(to_state)

    def expand_state_end(self, state):
        start_score = state.score
        if state.incomplete_word:
            prob, state.model_state = self.lm.score_word(
                state.model_state, state.incomplete_word
            )
            if self.params.verbose:
                print(f"[end] {escape(state.incomplete_word)}: {prob:.4f}")
            self._update_with_lm_score(state, prob)
            self._reset_incomplete_word(state)

        prob, state.model_state = self.lm.full_score(state.model_state, self.lm.eos)
        if self.params.verbose:
            print(f"[end] {colors.bold % 'eos'}: {prob:.4f}")
        self._update_with_lm_score(state, prob)
        # delta spans the whole finalization, flush included.
        state.delta_score = state.score - start_score

    def state_expansion_score(self, state, previous_score):
        return state.delta_score + previous_score

    def state_end_expansion_score(self, state):
        return state.delta_score

    def _update_with_lm_score(self, state, word_score):
        previous_score = state.score
        state.language_model_score += word_score
        state.score = state.language_model_score
        state.delta_score = state.score - previous_score

    def _reset_incomplete_word(self, state):
        state.incomplete_word = ""
        state.incomplete_word_trie_node = self.trie.root

    def _copy_state(self, from_state, to_state):
        to_state.language_model_score = from_state.language_model_score
        to_state.score = from_state.score
        to_state.delta_score = from_state.delta_score
        to_state.incomplete_word = from_state.incomplete_word
        to_state.incomplete_word_trie_node = from_state.incomplete_word_trie_node
        to_state.model_state = from_state.model_state
