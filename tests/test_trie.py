import io
import pytest
import numpy as np

from genlm.ctc import CharTrie, LabelTranslator, TrieFormatError


@pytest.fixture(scope="module")
def translator():
    return LabelTranslator()


def test_from_words_counts_prefixes(translator):
    trie = CharTrie.from_words(["cat", "cap", "cat", "the"])
    c, a, t, p = (translator.label_from_character(x) for x in "catp")

    assert trie.frequency(trie.root) == 4
    ca = trie.walk([c, a])
    assert trie.frequency(ca) == 3
    assert trie.frequency(trie.child_at(ca, t)) == 2
    assert trie.frequency(trie.child_at(ca, p)) == 1
    assert trie.child_at(ca, translator.label_from_character("z")) is None
    assert trie.walk([c, t]) is None


def test_from_counts_skips_words_without_counts(translator):
    trie = CharTrie.from_counts({"ab": 0, "cd": -2, "c": 5})
    assert trie.frequency(trie.root) == 5
    assert trie.walk(translator.labels_from_text("a")) is None
    assert trie.frequency(trie.walk(translator.labels_from_text("c"))) == 5


def test_from_counts_matches_from_words():
    a = CharTrie.from_counts({"ab": 2, "b": 1})
    b = CharTrie.from_words(["ab", "b", "ab"])
    assert a.children == b.children
    assert np.array_equal(a.counts, b.counts)


def test_apostrophe_is_a_word_character(translator):
    trie = CharTrie.from_words(["don't"])
    assert trie.walk(translator.labels_from_text("don't")) is not None


@pytest.mark.parametrize("word", ["the cat", "café"])
def test_from_words_rejects_non_word_characters(word):
    with pytest.raises(ValueError):
        CharTrie.from_words([word])


def test_read_stream():
    # root(3) -> label 0 (2), label 1 absent; vocab of two labels
    trie = CharTrie.read(io.StringIO("3\n2\n-1\n-1\n-1\n"), vocab_size=2)
    assert len(trie) == 2
    assert trie.frequency(trie.root) == 3
    assert trie.frequency(trie.child_at(trie.root, 0)) == 2
    assert trie.child_at(trie.root, 1) is None


def test_write_stream():
    trie = CharTrie([{0: 1}, {}], [3, 2], vocab_size=2)
    fh = io.StringIO()
    trie.write(fh)
    assert fh.getvalue().split() == ["3", "2", "-1", "-1", "-1"]


def dump(trie):
    fh = io.StringIO()
    trie.write(fh)
    return fh.getvalue()


def test_save_and_load(tmp_path, translator):
    trie = CharTrie.from_counts({"the": 5, "then": 2, "cat": 1, "don't": 3})
    path = tmp_path / "words.trie"
    trie.save(str(path))

    loaded = CharTrie.load(str(path))
    assert len(loaded) == len(trie)
    assert path.read_text() == dump(loaded)
    for word in ["t", "the", "then", "cat", "don't"]:
        labels = translator.labels_from_text(word)
        assert loaded.frequency(loaded.walk(labels)) == trie.frequency(trie.walk(labels))


@pytest.mark.parametrize(
    "stream",
    [
        "",
        "-1",
        "3 2 -1",
        "3 x -1 -1 -1",
        "3 -5 -1",
        "3 -1 -1 7",
        "3 0 -1 -1 -1",
        "3 4 -1 -1 -1",
    ],
)
def test_malformed_streams(stream):
    with pytest.raises(TrieFormatError):
        CharTrie.read(io.StringIO(stream), vocab_size=2)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        CharTrie.load(str(tmp_path / "missing.trie"))


def test_inconsistent_arrays():
    with pytest.raises(ValueError):
        CharTrie([{}, {}], [1])
