import os
import logging
import numpy as np
from collections import Counter

from .alphabet import LabelTranslator

logger = logging.getLogger(__name__)

# Marks an absent child in the serialized stream.
NULL_CHILD = -1


class TrieFormatError(ValueError):
    """Raised when a serialized trie stream cannot be parsed."""


class CharTrie:
    """A read-only character trie with prefix counts.

    Nodes are integer ids and the root is node 0. Each node stores how many
    inserted words pass through it, so `frequency(child) / frequency(root)`
    is an empirical estimate of the probability that a word starts with the
    prefix spelled by `child`.

    Args:
        children (list[dict[int, int]]): Maps each node to its `label -> child` edges
        counts (array-like): Prefix count for each node
        vocab_size (int, optional): Number of labels a node can branch on
    """

    root = 0

    def __init__(self, children, counts, vocab_size=LabelTranslator.vocab_size):
        if len(children) != len(counts):
            raise ValueError(
                f"children and counts disagree on the number of nodes: "
                f"{len(children)} != {len(counts)}"
            )
        if not children:
            raise ValueError("a trie needs at least a root node")
        self.children = children
        self.counts = np.asarray(counts, dtype=np.int64)
        self.vocab_size = vocab_size

    @classmethod
    def from_counts(cls, word_counts, translator=None):
        """Builds a trie from a mapping of words to their corpus counts.

        Every occurrence of a word increments the count of each node along
        its path, the root included. Words with a count below 1 are skipped.

        Raises:
            ValueError: if a word holds a character the trie cannot branch on.
        """
        translator = translator or LabelTranslator()
        children = [{}]
        counts = [0]
        for word, count in word_counts.items():
            if count < 1:
                continue
            node = cls.root
            counts[node] += count
            for ch in word:
                try:
                    label = translator.label_from_character(ch)
                except KeyError:
                    raise ValueError(f"cannot insert {word!r}: unknown character {ch!r}") from None
                if label >= translator.vocab_size:
                    raise ValueError(f"cannot insert {word!r}: {ch!r} is not a word character")
                child = children[node].get(label)
                if child is None:
                    child = len(counts)
                    children[node][label] = child
                    children.append({})
                    counts.append(0)
                node = child
                counts[node] += count
        return cls(children, counts, vocab_size=translator.vocab_size)

    @classmethod
    def from_words(cls, words, translator=None):
        """Builds a trie from an iterable of words; repeated words count repeatedly."""
        return cls.from_counts(Counter(words), translator=translator)

    @classmethod
    def read(cls, fh, vocab_size=LabelTranslator.vocab_size):
        """Parses the whitespace-separated preorder stream written by `write`."""
        tokens = iter(fh.read().split())

        def take():
            try:
                tok = next(tokens)
            except StopIteration:
                raise TrieFormatError("unexpected end of trie stream") from None
            try:
                value = int(tok)
            except ValueError:
                raise TrieFormatError(f"expected an integer, got {tok!r}") from None
            if value < NULL_CHILD:
                raise TrieFormatError(f"invalid prefix count {value}")
            return value

        count = take()
        if count == NULL_CHILD:
            raise TrieFormatError("trie stream has no root node")

        children = [{}]
        counts = [count]
        stack = [(cls.root, 0)]
        while stack:
            node, label = stack.pop()
            if label == vocab_size:
                continue
            stack.append((node, label + 1))
            count = take()
            if count == NULL_CHILD:
                continue
            if count < 1:
                raise TrieFormatError(f"prefix count {count} below 1 at a non-root node")
            if count > counts[node]:
                raise TrieFormatError(
                    f"prefix count {count} exceeds its parent's count {counts[node]}"
                )
            child = len(counts)
            children[node][label] = child
            children.append({})
            counts.append(count)
            stack.append((child, 0))

        if next(tokens, None) is not None:
            raise TrieFormatError("trailing data after trie stream")

        return cls(children, counts, vocab_size=vocab_size)

    @classmethod
    def load(cls, path, vocab_size=LabelTranslator.vocab_size):
        """Loads a trie file.

        Raises:
            FileNotFoundError: if `path` does not exist.
            TrieFormatError: if the file is not a valid trie stream.
        """
        if not os.path.isfile(path):
            raise FileNotFoundError(f"trie file not found: {path}")
        with open(path, "r") as fh:
            trie = cls.read(fh, vocab_size=vocab_size)
        logger.info("Loaded trie with %d nodes from %s", len(trie), path)
        return trie

    def _stream(self):
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node is None:
                yield NULL_CHILD
                continue
            yield int(self.counts[node])
            edges = self.children[node]
            stack.extend(edges.get(label) for label in reversed(range(self.vocab_size)))

    def write(self, fh):
        for value in self._stream():
            fh.write(f"{value}\n")

    def save(self, path):
        with open(path, "w") as fh:
            self.write(fh)
        logger.info("Wrote trie with %d nodes to %s", len(self), path)

    def child_at(self, node, label):
        """Returns the child of `node` along `label`, or None if there is none."""
        return self.children[node].get(label)

    def frequency(self, node):
        return int(self.counts[node])

    def walk(self, labels, node=None):
        """Follows `labels` from `node` (default: root); None once the path leaves the trie."""
        node = self.root if node is None else node
        for label in labels:
            node = self.children[node].get(label)
            if node is None:
                return None
        return node

    def __len__(self):
        return len(self.children)

    def __repr__(self):
        return f"CharTrie(nodes={len(self)}, words={self.frequency(self.root)})"
