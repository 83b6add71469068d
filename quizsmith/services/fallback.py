"""
Conceptual questions built from key phrases alone, used when the sentence
synthesizers fall short of the requested count.
"""
import random
from itertools import combinations
from typing import List, Optional, Sequence

from quizsmith.config import GenerationConfig
from quizsmith.models import TRUE_FALSE_OPTIONS, KeyPhrase, Question, QuestionKind
from quizsmith.services.distractors import generate_distractors, shuffle_options
from quizsmith.services.keyphrases import contains_phrase, phrase_pattern
from quizsmith.services.lexicon import GENERIC_TERMS, UNRELATED_NOUNS


def distinct_phrases(phrases: Sequence[KeyPhrase]) -> List[str]:
    """Phrases in rank order, skipping any that shares a word with an earlier one."""
    kept: List[str] = []
    seen_words = set()
    for kp in phrases:
        words = set(kp.phrase.lower().split())
        if words & seen_words:
            continue
        kept.append(kp.phrase)
        seen_words |= words
    return kept


def absent_terms(text: str) -> List[str]:
    return [t for t in GENERIC_TERMS + UNRELATED_NOUNS if not contains_phrase(text, t)]


def cooccur(text: str, a: str, b: str, window: int = 200) -> bool:
    """True when some occurrence of ``a`` starts within ``window`` chars of one of ``b``."""
    starts_a = [m.start() for m in phrase_pattern(a).finditer(text)]
    starts_b = [m.start() for m in phrase_pattern(b).finditer(text)]
    return any(abs(x - y) <= window for x in starts_a for y in starts_b)


def conceptual_multiple_choice(text: str, phrases: Sequence[KeyPhrase], count: int,
                               rng: Optional[random.Random] = None,
                               config: Optional[GenerationConfig] = None) -> List[Question]:
    """One question per distinct concept, with lower-ranked concepts as distractors."""
    rng = rng or random.Random()
    config = config or GenerationConfig()
    concepts = distinct_phrases(phrases)
    if not concepts:
        return []
    padding = absent_terms(text)
    questions = []
    for idx, concept in enumerate(concepts[:count]):
        distractors = generate_distractors(
            concept, concepts[idx + 1:], rng, config.distractor_count,
            config.overlap_threshold, fallback=padding)
        if idx == 0:
            prompt = "Which of the following concepts is most central to the document?"
        else:
            prompt = "Which of the following concepts receives the most emphasis in the document?"
        questions.append(Question(
            prompt=prompt,
            options=shuffle_options([concept] + distractors, rng),
            answer_key=concept,
            kind=QuestionKind.SINGLE,
        ))
    return questions


def conceptual_true_false(text: str, phrases: Sequence[KeyPhrase], count: int,
                          rng: Optional[random.Random] = None,
                          config: Optional[GenerationConfig] = None) -> List[Question]:
    """Relationship claims from phrase co-occurrence, then plain mention claims."""
    rng = rng or random.Random()
    config = config or GenerationConfig()
    concepts = distinct_phrases(phrases)
    if not concepts:
        return []
    pairs = list(combinations(concepts[:10], 2))
    rng.shuffle(pairs)

    items = []
    for a, b in pairs:
        related = cooccur(text, a, b, config.cooccurrence_window)
        items.append((f"The document discusses {a} in close connection with {b}.", related))
    for concept in concepts:
        items.append((f"The document mentions {concept}.", True))
    for term in absent_terms(text):
        items.append((f"The document mentions {term}.", False))

    questions = []
    for statement, truth in items[:count]:
        questions.append(Question(
            prompt=statement,
            options=list(TRUE_FALSE_OPTIONS),
            answer_key="True" if truth else "False",
            kind=QuestionKind.TRUE_FALSE,
        ))
    return questions


def conceptual_multi_select(text: str, phrases: Sequence[KeyPhrase], count: int,
                            rng: Optional[random.Random] = None,
                            config: Optional[GenerationConfig] = None) -> List[Question]:
    """Each distinct pair of concepts is the key of at most one question."""
    rng = rng or random.Random()
    concepts = distinct_phrases(phrases)
    if len(concepts) < 2:
        return []
    questions = []
    for pair in combinations(concepts, 2):
        if len(questions) >= count:
            break
        keys = list(pair)
        decoys = generate_distractors(keys[0], [], rng, 2, exclude_text=text)
        if len(decoys) < 2:
            break
        questions.append(Question(
            prompt="Which of the following concepts are discussed in the document? Select all that apply.",
            options=shuffle_options(keys + decoys, rng),
            answer_key=frozenset(keys),
            kind=QuestionKind.MULTI,
        ))
    return questions
