"""
True/False synthesis and statement falsification
"""
import random
import re
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from quizsmith.config import GenerationConfig
from quizsmith.models import TRUE_FALSE_OPTIONS, CandidateSentence, KeyPhrase, Question, QuestionKind
from quizsmith.services.keyphrases import WORD_RE
from quizsmith.services.lexicon import (
    ANTONYMS, GENERIC_SUBJECTS, STOPWORDS, UNRELATED_NOUNS, UNRELATED_PROPER_NOUNS,
)
from quizsmith.services.synthesizers import claim_sentences

NUMBER_RE = re.compile(r"\b\d+(?:\.\d+)?\b")
AUX_RE = re.compile(r"\b(is|are|was|were|can|will|does|do|has|have|should|must)\b(\s+not\b)?", re.I)
LINKING_VERB_RE = re.compile(r"\b(is|are|was|were|can|will)\b", re.I)


def lower_first(sentence: str) -> str:
    """Lowercase the first letter unless the first word looks like a name."""
    first = sentence.split(" ", 1)[0]
    if first.lower() in STOPWORDS:
        return sentence[:1].lower() + sentence[1:]
    return sentence


def _match_case(word: str, like: str) -> str:
    return word.capitalize() if like[:1].isupper() else word


def _splice(sentence: str, m: re.Match, replacement: str) -> str:
    return sentence[:m.start()] + replacement + sentence[m.end():]


def wrap_negation(sentence: str) -> str:
    return "It is not true that " + lower_first(sentence)


# -------------------- FALSIFICATION STRATEGIES --------------------

def substitute_word(sentence: str, rng: random.Random) -> str:
    """Swap in a dictionary antonym, else replace a long word with an unrelated noun."""
    for m in WORD_RE.finditer(sentence):
        antonym = ANTONYMS.get(m.group(0).lower())
        if antonym:
            return _splice(sentence, m, _match_case(antonym, m.group(0)))
    long_words = [m for m in WORD_RE.finditer(sentence)
                  if len(m.group(0)) > 5 and m.group(0).lower() not in STOPWORDS]
    if not long_words:
        return wrap_negation(sentence)
    m = rng.choice(long_words)
    filler = rng.choice([n for n in UNRELATED_NOUNS if n != m.group(0).lower()])
    return _splice(sentence, m, _match_case(filler, m.group(0)))


def negate(sentence: str, rng: random.Random) -> str:
    m = AUX_RE.search(sentence)
    if not m:
        return wrap_negation(sentence)
    if m.group(2):
        return sentence[:m.end(1)] + sentence[m.end():]
    return sentence[:m.end(1)] + " not" + sentence[m.end(1):]


def exaggerate(sentence: str, rng: random.Random) -> str:
    """Multiply the first number by ten, else add an absolute qualifier."""
    m = NUMBER_RE.search(sentence)
    if m:
        scaled = format((Decimal(m.group(0)) * 10).normalize(), "f")
        return _splice(sentence, m, scaled)
    qualifier = rng.choice(["always", "never"])
    verb = LINKING_VERB_RE.search(sentence)
    if verb:
        return sentence[:verb.end()] + f" {qualifier}" + sentence[verb.end():]
    return "It is always the case that " + lower_first(sentence)


def swap_subject(sentence: str, rng: random.Random) -> str:
    """Replace a proper noun (or a long word) with an unrelated one."""
    words = list(WORD_RE.finditer(sentence))
    proper = [m for m in words[1:] if m.group(0)[0].isupper() and m.group(0).lower() not in STOPWORDS]
    if proper:
        m = rng.choice(proper)
        return _splice(sentence, m, rng.choice([p for p in UNRELATED_PROPER_NOUNS if p != m.group(0)]))
    long_words = [m for m in words if len(m.group(0)) > 5 and m.group(0).lower() not in STOPWORDS]
    if long_words:
        m = rng.choice(long_words)
        return _splice(sentence, m, rng.choice(GENERIC_SUBJECTS))
    return wrap_negation(sentence)


FALSIFIERS: Dict[str, Callable[[str, random.Random], str]] = {
    "substitute": substitute_word,
    "negate": negate,
    "exaggerate": exaggerate,
    "swap_subject": swap_subject,
}


def falsify(sentence: str, rng: Optional[random.Random] = None) -> Tuple[str, str]:
    """Apply one randomly chosen strategy; returns (false statement, strategy name)."""
    rng = rng or random.Random()
    name = rng.choice(sorted(FALSIFIERS))
    statement = FALSIFIERS[name](sentence, rng)
    if statement == sentence:
        statement = wrap_negation(sentence)
    return statement, name


def rephrase_true(sentence: str, rng: random.Random) -> str:
    if rng.random() < 0.5:
        return sentence
    return "According to the document, " + lower_first(sentence)


def synthesize_true_false(ranked: Sequence[CandidateSentence], phrases: Sequence[KeyPhrase],
                          used: Set[str], count: int, rng: Optional[random.Random] = None,
                          config: Optional[GenerationConfig] = None) -> List[Question]:
    rng = rng or random.Random()
    config = config or GenerationConfig()

    def build(cand: CandidateSentence) -> Question:
        if rng.random() < config.true_probability:
            prompt, key = rephrase_true(cand.text, rng), "True"
        else:
            prompt, key = falsify(cand.text, rng)[0], "False"
        return Question(
            prompt=prompt,
            options=list(TRUE_FALSE_OPTIONS),
            answer_key=key,
            kind=QuestionKind.TRUE_FALSE,
            source=cand.text,
        )

    return claim_sentences(ranked, used, count, build)
