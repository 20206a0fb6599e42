import string

# Labels 0-25 are 'a'-'z', then the apostrophe, the word separator and the
# CTC blank. Only the first 27 labels ever reach the trie.
APOSTROPHE = 26
SPACE = 27
BLANK = 28


class LabelTranslator:
    """Maps the integer labels emitted by a CTC network to characters.

    The alphabet is fixed: lowercase letters, apostrophe, a word separator
    (space) and the blank label. Blank never reaches character translation,
    so `character_from_label` is only defined on labels 0 to 27.
    """

    alphabet_size = 29
    vocab_size = 27

    _chars = string.ascii_lowercase + "' "
    _labels = {c: i for i, c in enumerate(_chars)}

    def is_blank_label(self, label):
        return label == BLANK

    def is_space_label(self, label):
        return label == SPACE

    def character_from_label(self, label):
        return self._chars[label]

    def label_from_character(self, ch):
        """Inverse of `character_from_label`.

        Raises:
            KeyError: if `ch` is not part of the alphabet.
        """
        return self._labels[ch]

    def labels_from_text(self, text):
        return [self.label_from_character(c) for c in text]

    def text_from_labels(self, labels):
        """Collapses a frame-level label path the way CTC does: merge
        repeats, then drop blanks."""
        out = []
        prev = BLANK
        for label in labels:
            if label != prev and not self.is_blank_label(label):
                out.append(self.character_from_label(label))
            prev = label
        return "".join(out)

    def __repr__(self):
        return f"LabelTranslator({self._chars!r})"
