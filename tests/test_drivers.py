from concurrent.futures import ThreadPoolExecutor

import pytest

from genlm.ctc import (
    BaseBeamScorer,
    LabelTranslator,
    BLANK,
    SPACE,
    initial_state,
    expand,
    expand_states,
    prefill,
    finalize,
    expansion_scores,
)

T = LabelTranslator()


class CountingState:
    def __init__(self, history=()):
        self.history = tuple(history)

    def copy(self):
        return CountingState(self.history)


class CountingScorer(BaseBeamScorer[CountingState]):
    """Minimal scorer relying on the default hooks except initialization."""

    def new_state(self):
        return CountingState()

    def initialize_state(self, root):
        root.history = ("root",)


def test_default_hooks_score_nothing():
    scorer = CountingScorer()
    state = initial_state(scorer)
    child = expand(scorer, state, BLANK, 3)

    assert state.history == ("root",)
    assert child.history == ()
    assert scorer.state_expansion_score(child, -2.5) == -2.5
    final, end_score = finalize(scorer, state)
    assert end_score == 0.0
    assert final is not state


def test_expand_states_batches(scorer):
    root = initial_state(scorer)
    parents = [prefill(scorer, T.labels_from_text(text))[0] for text in ["ca", "th", "the"]]
    before = [p.incomplete_word for p in parents]

    children = expand_states(
        scorer, parents, [T.label_from_character(c) for c in "ahe"], [19, 4, SPACE]
    )

    assert [c.incomplete_word for c in children] == ["cat", "the", ""]
    assert children[2].language_model_score == -1.0
    # Parents are unchanged
    assert [p.incomplete_word for p in parents] == before
    assert root.incomplete_word == ""


def test_expand_states_with_executor(scorer):
    texts = ["the", "cat", "cap", "sat", "qua", "don'", "ca"]
    parents = [prefill(scorer, T.labels_from_text(text))[0] for text in texts]
    from_labels = [T.label_from_character(text[-1]) for text in texts]
    to_labels = [SPACE, SPACE, 19, BLANK, SPACE, 19, 15]

    want = expand_states(scorer, parents, from_labels, to_labels)
    with ThreadPoolExecutor(max_workers=4) as executor:
        got = expand_states(scorer, parents, from_labels, to_labels, executor=executor)

    for a, b in zip(want, got):
        assert (a.score, a.delta_score, a.incomplete_word, a.incomplete_word_trie_node) == (
            b.score,
            b.delta_score,
            b.incomplete_word,
            b.incomplete_word_trie_node,
        )


def test_expand_states_length_mismatch(scorer):
    with pytest.raises(ValueError):
        expand_states(scorer, [initial_state(scorer)], [], [])


def test_expand_states_empty_inputs(scorer):
    assert expand_states(scorer, [], [], []) == []


def test_prefill_continues_from_state(scorer):
    whole, whole_score = prefill(scorer, T.labels_from_text("the cat"))
    head, head_score = prefill(scorer, T.labels_from_text("the "))
    tail, tail_score = prefill(
        scorer, T.labels_from_text("cat"), state=head, from_label=SPACE
    )
    assert tail.score == whole.score
    assert tail.incomplete_word == whole.incomplete_word
    assert head_score + tail_score == pytest.approx(whole_score)


def test_expansion_scores(scorer):
    state, _ = prefill(scorer, T.labels_from_text("ca"))
    a = T.label_from_character("a")
    scores = expansion_scores(scorer, state, a)

    assert len(scores) == T.alphabet_size
    assert scores[BLANK] == 0.0
    assert scores[a] == 0.0
    # "cat" is the most frequent continuation of "ca" in the trie
    letters = scores.filter(lambda label: label < SPACE and label != a)
    assert letters.argmax() == T.label_from_character("t")
    assert scores[T.label_from_character("q")] == pytest.approx(-10.0 - state.score)


def test_expansion_scores_prefix(prefix_scorer):
    state = initial_state(prefix_scorer)
    scores = expansion_scores(prefix_scorer, state, BLANK)
    assert scores[T.label_from_character("c")] == 0.0
    assert scores[T.label_from_character("q")] == -1.0
    assert scores[SPACE] == 0.0
