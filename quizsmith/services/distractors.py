"""
Distractor generation with uniqueness and near-duplicate guarantees
"""
import random
import re
from typing import Iterable, List, Optional, Sequence

import structlog

from quizsmith.services.keyphrases import contains_phrase
from quizsmith.services.lexicon import GENERIC_TERMS, UNRELATED_NOUNS

logger = structlog.get_logger()

LONG_WORD_RE = re.compile(r"[A-Za-z]{4,}")


def word_overlap(a: str, b: str) -> float:
    """Jaccard similarity over the words longer than three characters."""
    sa = {w.lower() for w in LONG_WORD_RE.findall(a)}
    sb = {w.lower() for w in LONG_WORD_RE.findall(b)}
    if not sa or not sb:
        return 0.0
    return len(sa & sb) / len(sa | sb)


def generate_distractors(correct: str, candidates: Iterable[str], rng: Optional[random.Random] = None,
                         count: int = 3, overlap_threshold: float = 0.5,
                         fallback: Sequence[str] = GENERIC_TERMS, exclude_text: Optional[str] = None,
                         check_overlap: bool = True) -> List[str]:
    """Pick ``count`` wrong options for ``correct``.

    Candidates are tried in shuffled order and rejected when they repeat the
    answer or an earlier pick (case-insensitively), when they share too many
    words with either (``check_overlap``), or when they occur in
    ``exclude_text``. Remaining slots are padded from ``fallback`` and then
    from a list of unrelated nouns, under the same rules.
    """
    rng = rng or random.Random()
    pool = list(dict.fromkeys(c.strip() for c in candidates if c and c.strip()))
    rng.shuffle(pool)

    chosen: List[str] = []
    taken = {correct.strip().lower()}

    def accept(option: str) -> bool:
        if option.lower() in taken:
            return False
        if exclude_text and contains_phrase(exclude_text, option):
            return False
        if check_overlap:
            if word_overlap(option, correct) >= overlap_threshold:
                return False
            if any(word_overlap(option, c) >= overlap_threshold for c in chosen):
                return False
        return True

    for option in list(pool) + list(fallback) + UNRELATED_NOUNS:
        if len(chosen) >= count:
            break
        if accept(option):
            chosen.append(option)
            taken.add(option.lower())

    if len(chosen) < count:
        logger.warning("distractor_pool_exhausted", correct=correct, found=len(chosen), wanted=count)
    return chosen


def shuffle_options(options: Sequence[str], rng: Optional[random.Random] = None) -> List[str]:
    copy = list(options)
    (rng or random.Random()).shuffle(copy)
    return copy
