"""
Multiple-choice and multi-select question synthesizers.

Every synthesizer takes the ranked candidate sentences, the key phrases, a
shared ``used`` set of sentence texts, the number of questions wanted, a
random source and the generation config. A sentence already in ``used`` is
never read; a sentence is added to ``used`` only once a question has been
built from it, so the set is a single-use pool shared by all synthesizers
run in the same pass.
"""
import random
import re
from typing import Callable, List, Optional, Sequence, Set

from quizsmith.config import GenerationConfig
from quizsmith.models import CandidateSentence, KeyPhrase, Question, QuestionKind
from quizsmith.services.distractors import generate_distractors, shuffle_options
from quizsmith.services.keyphrases import WORD_RE, contains_phrase, phrase_pattern
from quizsmith.services.lexicon import STOPWORDS
from quizsmith.services.ranking import CAUSAL_RE, COMPARATIVE_RE

BLANK = "_____"
CONNECTIVES = (
    r"(?:is defined as|is known as|refers to|defined as|known as|consists of|is|are|was|were|"
    r"means|involves|includes|leads to|causes|results in|describes|represents)"
)
CLAUSE_RE = re.compile(r"\b" + CONNECTIVES + r"\s+([^.;:!?]+)", re.I)

COMPREHENSION_PROMPTS = [
    "According to the document, what is true of {focus}?",
    "Which statement best describes {focus}?",
    "How does the document characterize {focus}?",
]
APPLICATION_PROMPTS = [
    "How could the idea of {x} described in the document be applied in practice?",
    "Which of the following is the best practical application of {x}?",
]
APPLICATION_ANSWERS = [
    "Applying {x} to improve {y}",
    "Using {x} to solve problems involving {y}",
]
MISAPPLICATIONS = [
    "Applying {x} only where {y} plays no role",
    "Avoiding {x} whenever {y} is involved",
    "Using {x} to prevent any change in {y}",
    "Replacing {y} entirely with unrelated practices",
    "Treating {x} as a substitute for every aspect of {y}",
]
FALSE_RELATIONSHIPS = [
    "{a} directly contradicts {b}",
    "{a} and {b} are completely unrelated",
    "{a} makes {b} obsolete",
    "{b} has no connection to {a}",
]


# -------------------- HELPERS --------------------

def capitalize_first(s: str) -> str:
    return s[:1].upper() + s[1:]


def truncate(s: str, max_chars: int) -> str:
    if len(s) <= max_chars:
        return s
    cut = s[:max_chars].rsplit(" ", 1)[0]
    return cut.rstrip(",;: ") + "..."


def content_words(sentence: str, min_len: int = 5) -> List[str]:
    seen = set()
    out = []
    for w in WORD_RE.findall(sentence):
        lw = w.lower()
        if len(w) < min_len or lw in STOPWORDS or lw in seen:
            continue
        seen.add(lw)
        out.append(w)
    return out


def find_focus_concepts(sentence: str, phrases: Sequence[KeyPhrase], limit: int = 3) -> List[str]:
    """Key phrases found in the sentence, else its long or capitalized words."""
    found: List[str] = []
    used_words: Set[str] = set()
    for kp in phrases:
        if len(found) >= limit:
            break
        words = set(kp.phrase.lower().split())
        if words & used_words or not contains_phrase(sentence, kp.phrase):
            continue
        found.append(kp.phrase)
        used_words |= words
    if found:
        return found
    for w in content_words(sentence, min_len=6):
        if len(found) >= limit:
            break
        if len(w) > 7 or w[0].isupper():
            found.append(w)
    return found


def extract_clause(sentence: str, focus: str, max_chars: int = 120) -> Optional[str]:
    """The clause following a definitional/relational connective after ``focus``."""
    m = phrase_pattern(focus).search(sentence)
    if not m:
        return None
    clause = CLAUSE_RE.search(sentence, m.end())
    if not clause:
        return None
    text = clause.group(1).strip().rstrip(",")
    if len(text.split()) < 3:
        return None
    return capitalize_first(truncate(text, max_chars))


def blank_out(sentence: str, terms: Sequence[str]) -> str:
    for term in terms:
        sentence = phrase_pattern(term).sub(BLANK, sentence)
    return sentence


def claim_sentences(ranked: Sequence[CandidateSentence], used: Set[str], count: int,
                    build: Callable[[CandidateSentence], Optional[Question]]) -> List[Question]:
    """Run ``build`` over unused sentences, marking a sentence used only on success."""
    questions: List[Question] = []
    for cand in ranked:
        if len(questions) >= count:
            break
        if cand.text in used:
            continue
        q = build(cand)
        if q is None:
            continue
        used.add(cand.text)
        questions.append(q)
    return questions


def single_choice(prompt: str, correct: str, distractors: Sequence[str], source: str,
                  rng: random.Random) -> Question:
    return Question(
        prompt=prompt,
        options=shuffle_options([correct] + list(distractors), rng),
        answer_key=correct,
        kind=QuestionKind.SINGLE,
        source=source,
    )


# -------------------- COMPREHENSION --------------------

def synthesize_comprehension(ranked: Sequence[CandidateSentence], phrases: Sequence[KeyPhrase],
                             used: Set[str], count: int, rng: Optional[random.Random] = None,
                             config: Optional[GenerationConfig] = None) -> List[Question]:
    rng = rng or random.Random()
    config = config or GenerationConfig()

    def build(cand: CandidateSentence) -> Optional[Question]:
        focus = find_focus_concepts(cand.text, phrases)
        if not focus:
            return None
        others = [c.text for c in ranked if c.text != cand.text]

        for concept in focus:
            clause = extract_clause(cand.text, concept, config.answer_max_chars)
            if clause:
                pool = [m.group(1).strip() for s in others for m in CLAUSE_RE.finditer(s)]
                pool = [capitalize_first(truncate(p, config.answer_max_chars)) for p in pool if len(p.split()) >= 3]
                distractors = generate_distractors(
                    clause, pool, rng, config.distractor_count, config.overlap_threshold)
                prompt = rng.choice(COMPREHENSION_PROMPTS).format(focus=concept)
                return single_choice(prompt, clause, distractors, cand.text, rng)

        concept = focus[0]
        blanked = blank_out(cand.text, [concept])
        if len(blanked.split()) >= 6:
            pool = [kp.phrase for kp in phrases]
            distractors = generate_distractors(
                concept, pool, rng, config.distractor_count, config.overlap_threshold,
                exclude_text=cand.text)
            return single_choice(f"Fill in the blank: {blanked}", concept, distractors, cand.text, rng)

        statement = truncate(cand.text, config.answer_max_chars)
        pool = [truncate(s, config.answer_max_chars) for s in others if not contains_phrase(s, concept)]
        distractors = generate_distractors(
            statement, pool, rng, config.distractor_count, config.overlap_threshold)
        prompt = f"Which statement from the document is about {concept}?"
        return single_choice(prompt, statement, distractors, cand.text, rng)

    return claim_sentences(ranked, used, count, build)


# -------------------- APPLICATION --------------------

def synthesize_application(ranked: Sequence[CandidateSentence], phrases: Sequence[KeyPhrase],
                           used: Set[str], count: int, rng: Optional[random.Random] = None,
                           config: Optional[GenerationConfig] = None) -> List[Question]:
    rng = rng or random.Random()
    config = config or GenerationConfig()

    def build(cand: CandidateSentence) -> Optional[Question]:
        focus = find_focus_concepts(cand.text, phrases, limit=1)
        words = content_words(cand.text)
        x = focus[0] if focus else (words[0] if words else None)
        if not x:
            return None
        x_words = set(x.lower().split())
        y = next((w for w in words if w.lower() not in x_words), None)
        if not y:
            return None
        y = y.lower()
        correct = rng.choice(APPLICATION_ANSWERS).format(x=x, y=y)
        misuses = [t.format(x=x, y=y) for t in MISAPPLICATIONS]
        distractors = generate_distractors(
            correct, misuses, rng, config.distractor_count, check_overlap=False)
        prompt = rng.choice(APPLICATION_PROMPTS).format(x=x)
        return single_choice(prompt, correct, distractors, cand.text, rng)

    return claim_sentences(ranked, used, count, build)


# -------------------- ANALYSIS --------------------

def synthesize_analysis(ranked: Sequence[CandidateSentence], phrases: Sequence[KeyPhrase],
                        used: Set[str], count: int, rng: Optional[random.Random] = None,
                        config: Optional[GenerationConfig] = None) -> List[Question]:
    rng = rng or random.Random()
    config = config or GenerationConfig()

    def build(cand: CandidateSentence) -> Optional[Question]:
        focus = find_focus_concepts(cand.text, phrases)
        if len(focus) < 2:
            return None
        a, b = focus[0], focus[1]
        if CAUSAL_RE.search(cand.text):
            correct = f"{capitalize_first(a)} directly affects {b}"
        elif COMPARATIVE_RE.search(cand.text):
            correct = f"{capitalize_first(a)} is contrasted with {b}"
        else:
            correct = f"{capitalize_first(a)} is closely related to {b}"
        wrong = [capitalize_first(t.format(a=a, b=b)) for t in FALSE_RELATIONSHIPS]
        distractors = generate_distractors(
            correct, wrong, rng, config.distractor_count, check_overlap=False)
        prompt = (f"Based on the document, which statement best describes the "
                  f"relationship between {a} and {b}?")
        return single_choice(prompt, correct, distractors, cand.text, rng)

    return claim_sentences(ranked, used, count, build)


# -------------------- MULTI-SELECT --------------------

def synthesize_multi_select(ranked: Sequence[CandidateSentence], phrases: Sequence[KeyPhrase],
                            used: Set[str], count: int, rng: Optional[random.Random] = None,
                            config: Optional[GenerationConfig] = None) -> List[Question]:
    """Multi-cloze items: every focus concept of the sentence is blanked and must be picked."""
    rng = rng or random.Random()
    config = config or GenerationConfig()

    def build(cand: CandidateSentence) -> Optional[Question]:
        keys = find_focus_concepts(cand.text, phrases)
        if len(keys) < 2:
            return None
        decoy_count = max(4, len(keys) + 2) - len(keys)
        decoys = generate_distractors(
            keys[0], [kp.phrase for kp in phrases], rng, decoy_count,
            config.overlap_threshold, exclude_text=cand.text)
        if len(decoys) < decoy_count:
            return None
        statement = truncate(blank_out(cand.text, keys), config.answer_max_chars * 2)
        return Question(
            prompt=f'Select all terms that complete the statement: "{statement}"',
            options=shuffle_options(keys + decoys, rng),
            answer_key=frozenset(keys),
            kind=QuestionKind.MULTI,
            source=cand.text,
        )

    return claim_sentences(ranked, used, count, build)
