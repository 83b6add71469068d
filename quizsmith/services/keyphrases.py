"""
Key-phrase extraction: frequency scored 1-4 word terms with heuristic boosts
"""
import re
from typing import Dict, List, Optional, Tuple

from quizsmith.config import GenerationConfig
from quizsmith.models import KeyPhrase
from quizsmith.services.lexicon import DOMAIN_INDICATORS, STOPWORDS
from quizsmith.services.text_processing import SENT_SPLIT

WORD_RE = re.compile(r"[A-Za-z][A-Za-z-]*[A-Za-z]|[A-Za-z]")
CLAUSE_BREAK_RE = re.compile(r"[,;:()\"]")


def is_content_word(word: str) -> bool:
    if word.lower() in STOPWORDS:
        return False
    return word[0].isupper() or len(word) >= 3


def content_runs(sentence: str) -> List[List[Tuple[str, bool]]]:
    """Maximal runs of consecutive content words, as (word, is_sentence_initial)."""
    runs = []
    first = True
    for clause in CLAUSE_BREAK_RE.split(sentence):
        run: List[Tuple[str, bool]] = []
        for m in WORD_RE.finditer(clause):
            word = m.group(0)
            if is_content_word(word):
                run.append((word, first))
            elif run:
                runs.append(run)
                run = []
            first = False
        if run:
            runs.append(run)
    return runs


def extract_key_phrases(text: str, config: Optional[GenerationConfig] = None) -> List[KeyPhrase]:
    """Rank candidate phrases by frequency times multiword/title-case/domain boosts."""
    config = config or GenerationConfig()
    counts: Dict[str, int] = {}
    surfaces: Dict[str, str] = {}
    titled = set()

    for sentence in SENT_SPLIT.split(text):
        for run in content_runs(sentence):
            for n in range(1, config.max_phrase_words + 1):
                for i in range(len(run) - n + 1):
                    words = run[i:i + n]
                    key = " ".join(w.lower() for w, _ in words)
                    counts[key] = counts.get(key, 0) + 1
                    head, initial = words[0]
                    if head[0].isupper() and not initial:
                        titled.add(key)
                        surfaces.setdefault(key, " ".join(w for w, _ in words))

    by_frequency = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    scored = []
    for key, freq in by_frequency:
        score = float(freq)
        tokens = key.split()
        if len(tokens) >= 2:
            score *= config.multiword_boost
        if key in titled:
            score *= config.titlecase_boost
        if any(t in DOMAIN_INDICATORS for t in tokens):
            score *= config.domain_boost
        scored.append(KeyPhrase(phrase=surfaces.get(key, key), score=score, frequency=freq))

    scored.sort(key=lambda kp: kp.score, reverse=True)
    return scored[:config.max_key_phrases]


def phrase_pattern(phrase: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(phrase) + r"\b", re.I)


def contains_phrase(text: str, phrase: str) -> bool:
    return bool(phrase_pattern(phrase).search(text))
