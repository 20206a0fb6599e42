import os
import logging
import kenlm
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class LanguageModel(ABC):
    """A read-only n-gram language model seen as a scoring oracle.

    Model states are opaque and treated as immutable: `full_score` always
    returns a fresh state, so beams may share a state object.
    """

    @abstractmethod
    def begin_state(self):
        """Returns the state at the beginning of a sentence."""

    @abstractmethod
    def full_score(self, state, token):
        """Scores `token` after `state`.

        Returns:
            (tuple[float, object]): log10 probability of `token` and the state after it.
        """

    @abstractmethod
    def index(self, word):
        """Maps a word to the token `full_score` expects. Unknown words map to
        the model's unknown token rather than failing."""

    @property
    @abstractmethod
    def eos(self):
        """The end-of-sentence token."""

    def score_word(self, state, word):
        return self.full_score(state, self.index(word))


class KenLanguageModel(LanguageModel):
    """`LanguageModel` backed by a KenLM ARPA or binary model.

    Args:
        path (str): Path to the model file
        load_method (kenlm.LoadMethod, optional): How KenLM maps the file into
            memory. Defaults to POPULATE_OR_READ.

    Raises:
        FileNotFoundError: if `path` does not exist.
    """

    def __init__(self, path, load_method=kenlm.LoadMethod.POPULATE_OR_READ):
        if not os.path.isfile(path):
            raise FileNotFoundError(f"language model not found: {path}")
        config = kenlm.Config()
        config.load_method = load_method
        self.path = path
        self.model = kenlm.Model(path, config)
        logger.info("Loaded %d-gram language model from %s", self.model.order, path)

    @property
    def order(self):
        return self.model.order

    @property
    def eos(self):
        return "</s>"

    def begin_state(self):
        state = kenlm.State()
        self.model.BeginSentenceWrite(state)
        return state

    def full_score(self, state, token):
        out = kenlm.State()
        ret = self.model.BaseFullScore(state, token, out)
        return ret.log_prob, out

    def index(self, word):
        # KenLM resolves words itself and maps unknown ones to <unk>.
        return word

    def __contains__(self, word):
        return word in self.model

    def __repr__(self):
        return f"KenLanguageModel({self.path!r}, order={self.order})"
