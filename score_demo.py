import argparse

from genlm.ctc.util import escape
from genlm.ctc import (
    KenLMBeamScorer,
    LabelTranslator,
    ScorerParams,
    BLANK,
    prefill,
    finalize,
    expansion_scores,
)


TEXT = "the cat sat on the mat"


def frames(text, translator):
    """A frame-level path for `text`: each character once, a blank between
    doubled letters so CTC does not merge them."""
    labels = []
    for label in translator.labels_from_text(text):
        if labels and labels[-1] == label:
            labels.append(BLANK)
        labels.append(label)
    return labels


def describe(label, translator):
    if translator.is_blank_label(label):
        return "<blank>"
    return escape(translator.character_from_label(label))


def main():
    parser = argparse.ArgumentParser(description="Score a transcript with the KenLM beam scorer")
    parser.add_argument("lm", help="KenLM model; its trie is expected next to it")
    parser.add_argument("--text", type=str, default=TEXT, help="Transcript to score")
    parser.add_argument("--verbose", action="store_true", help="Print every language model query")
    args = parser.parse_args()

    scorer = KenLMBeamScorer.from_file(args.lm, ScorerParams(verbose=args.verbose))
    translator = LabelTranslator()

    labels = frames(args.text, translator)
    state, score = prefill(scorer, labels)
    print(f"[result] after {len(labels)} frames: {state!r}, accumulated={score:.4f}")

    last = labels[-1] if labels else BLANK
    best = expansion_scores(scorer, state, last).top(5)
    print("[result] best next labels:", best.map_keys(lambda x: describe(x, translator)))

    final, end_score = finalize(scorer, state)
    print(f"[result] finalized: {final!r}, total={score + end_score:.4f}")


if __name__ == "__main__":
    main()
