import argparse
import logging
from collections import Counter

from genlm.ctc import CharTrie, LabelTranslator

logger = logging.getLogger("build_trie")


def read_vocab(path, translator):
    """Counts the words of a text file, dropping the ones the trie cannot spell."""
    counts = Counter()
    skipped = 0
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            for word in line.lower().split():
                try:
                    labels = translator.labels_from_text(word)
                except KeyError:
                    skipped += 1
                    continue
                if max(labels) >= translator.vocab_size:
                    skipped += 1
                    continue
                counts[word] += 1
    if skipped:
        logger.info("Skipped %d words with characters outside the alphabet", skipped)
    return counts


def main():
    parser = argparse.ArgumentParser(
        description="Build the prefix trie read by the CTC beam scorers"
    )
    parser.add_argument("vocab", help="Text file with the words of the LM corpus")
    parser.add_argument(
        "out", help="Where to write the trie (usually the LM path plus '.trie')"
    )
    parser.add_argument("--log_level", default="INFO", help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)-5.5s] [%(name)-20.20s]: %(message)s",
    )

    translator = LabelTranslator()
    counts = read_vocab(args.vocab, translator)
    logger.info("Read %d distinct words", len(counts))
    CharTrie.from_counts(counts, translator=translator).save(args.out)


if __name__ == "__main__":
    main()
