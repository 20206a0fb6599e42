import pytest

from genlm.ctc import CharTrie, LanguageModel, KenLMBeamScorer, PrefixScorer


class DummyLM(LanguageModel):
    """Unigram stand-in for an n-gram model; records every query."""

    def __init__(self, logprobs, unk=-7.0):
        self.logprobs = dict(logprobs)
        self.unk = unk
        self.queries = []

    def begin_state(self):
        return ("<s>",)

    def full_score(self, state, token):
        self.queries.append((state, token))
        return self.logprobs.get(token, self.unk), state + (token,)

    def index(self, word):
        return word if word in self.logprobs else "<unk>"

    @property
    def eos(self):
        return "</s>"


WORD_COUNTS = {"the": 50, "cat": 20, "cap": 10, "sat": 15, "don't": 5}

LOGPROBS = {"the": -1.0, "cat": -2.0, "cap": -2.5, "sat": -2.25, "don't": -3.0, "</s>": -0.5}


@pytest.fixture
def trie():
    return CharTrie.from_counts(WORD_COUNTS)


@pytest.fixture
def lm():
    return DummyLM(LOGPROBS)


@pytest.fixture
def scorer(lm, trie):
    return KenLMBeamScorer(lm, trie)


@pytest.fixture
def prefix_scorer(trie):
    return PrefixScorer(trie)
