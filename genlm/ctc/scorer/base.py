from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

from ..alphabet import LabelTranslator, BLANK
from ..util import Chart

S = TypeVar("S")

OOV_PENALTY = 1.0
UNIGRAM_FLOOR = -10.0
TRIE_SUFFIX = ".trie"


@dataclass(frozen=True)
class ScorerParams:
    """Parameters shared by the beam scorers.

    Args:
        oov_penalty (float, optional): Penalty charged once per word that leaves the
            trie (prefix scorer). Defaults to 1.0
        unigram_floor (float, optional): log10 unigram estimate used for a partial word
            that is not in the trie (language-model scorer). Defaults to -10.0
        trie_suffix (str, optional): Suffix appended to the language model path to find
            its companion trie. Defaults to ".trie"
        verbose (bool, optional): Whether to print every state transition. Defaults to False
    """

    oov_penalty: float = OOV_PENALTY
    unigram_floor: float = UNIGRAM_FLOOR
    trie_suffix: str = TRIE_SUFFIX
    verbose: bool = False

    def __post_init__(self):
        if self.oov_penalty < 0:
            raise ValueError(f"oov_penalty must be non-negative, got {self.oov_penalty}")
        if self.unigram_floor > 0:
            raise ValueError(
                f"unigram_floor must be a log probability (<= 0), got {self.unigram_floor}"
            )
        if not self.trie_suffix:
            raise ValueError("trie_suffix must not be empty")


class BaseBeamScorer(ABC, Generic[S]):
    """Scoring hooks called by a CTC beam search as it grows its beams.

    Every beam owns one state of type `S`. The search calls
    `initialize_state` on each root beam, `expand_state` once per explored
    parent -> child edge, and `expand_state_end` once per surviving beam
    after the last frame. Scores are log-probabilities; the search adds the
    value of `state_expansion_score` to the network's score for the label.

    Only the state passed for writing is ever mutated, never the parent
    state or the scorer, so a scorer can serve concurrent expansions.

    The defaults implement plain CTC decoding: no state, no extra score.
    """

    def __init__(self, translator=None):
        self.translator = translator or LabelTranslator()

    @abstractmethod
    def new_state(self) -> S:
        """Allocates an empty state for a beam."""

    @abstractmethod
    def initialize_state(self, root: S) -> None:
        """Sets `root` to the start state of a decode."""

    def expand_state(self, from_state: S, from_label: int, to_state: S, to_label: int) -> None:
        """Writes into `to_state` the state of the child reached from
        `from_state` by emitting `to_label` after `from_label`."""

    def expand_state_end(self, state: S) -> None:
        """Final scoring of a beam once decoding is over."""

    def state_expansion_score(self, state: S, previous_score: float) -> float:
        """Cheap read of the score cached by `expand_state`, log-added to `previous_score`."""
        return previous_score

    def state_end_expansion_score(self, state: S) -> float:
        """Cheap read of the score cached by `expand_state_end`."""
        return 0.0


def initial_state(scorer):
    state = scorer.new_state()
    scorer.initialize_state(state)
    return state


def expand(scorer, state, from_label, to_label):
    """Returns the child of `state` along `to_label`; `state` is left untouched."""
    child = scorer.new_state()
    scorer.expand_state(state, from_label, child, to_label)
    return child


def expand_states(scorer, states, from_labels, to_labels, executor=None):
    """Expands a batch of beams.

    Args:
        scorer (BaseBeamScorer): Scorer to expand with
        states (list): Parent states
        from_labels (list[int]): Last label of each parent
        to_labels (list[int]): Label each parent is extended with
        executor (concurrent.futures.Executor, optional): Runs the expansions
            concurrently when given

    Returns:
        (list): Child states, in input order.
    """
    if not (len(states) == len(from_labels) == len(to_labels)):
        raise ValueError(
            f"got {len(states)} states, {len(from_labels)} from_labels and "
            f"{len(to_labels)} to_labels"
        )
    args = [
        (scorer, state, a, b) for state, a, b in zip(states, from_labels, to_labels)
    ]
    if executor is None:
        return [expand(*arg) for arg in args]
    return list(executor.map(lambda arg: expand(*arg), args))


def prefill(scorer, labels, state=None, from_label=BLANK):
    """Walks a label path, accumulating expansion scores the way the search does.

    Args:
        scorer (BaseBeamScorer): Scorer to expand with
        labels (list[int]): Frame-level labels, blanks and repeats included
        state (optional): State to start from. Defaults to a fresh initial state
        from_label (int, optional): Label preceding `labels`. Defaults to the blank

    Returns:
        (tuple): The state after the last label and the accumulated score.
    """
    if state is None:
        state = initial_state(scorer)
    score = 0.0
    for label in labels:
        state = expand(scorer, state, from_label, label)
        score = scorer.state_expansion_score(state, score)
        from_label = label
    return state, score


def finalize(scorer, state):
    """Returns a finalized copy of `state` and its end expansion score."""
    final = state.copy()
    scorer.expand_state_end(final)
    return final, scorer.state_end_expansion_score(final)


def expansion_scores(scorer, state, from_label):
    """Expansion score of every label from `state`, as a Chart label -> score."""
    scores = Chart(float("-inf"))
    for label in range(scorer.translator.alphabet_size):
        child = expand(scorer, state, from_label, label)
        scores[label] = scorer.state_expansion_score(child, 0.0)
    return scores
