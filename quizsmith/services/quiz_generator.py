"""
Question synthesis pipeline: normalize, segment, extract key phrases, rank,
run the synthesizers over a shared used-sentence set, then assemble.
"""
import asyncio
import math
import random
from typing import List, Optional, Sequence, Set, Tuple

import structlog

from quizsmith.config import GenerationConfig
from quizsmith.models import CandidateSentence, KeyPhrase, Question, QuizType
from quizsmith.services.fallback import (
    conceptual_multi_select, conceptual_multiple_choice, conceptual_true_false,
)
from quizsmith.services.keyphrases import extract_key_phrases
from quizsmith.services.logging import log_performance
from quizsmith.services.ranking import rank_sentences
from quizsmith.services.synthesizers import (
    synthesize_analysis, synthesize_application, synthesize_comprehension, synthesize_multi_select,
)
from quizsmith.services.text_processing import normalize_text, segment_with_fallback
from quizsmith.services.true_false import synthesize_true_false

logger = structlog.get_logger()


def _portion(ratio: float, count: int, rounding) -> int:
    # round first so 0.3 * 10 does not ceil to 4
    return int(rounding(round(ratio * count, 6)))


def plan_distribution(count: int, config: Optional[GenerationConfig] = None) -> Tuple[int, int, int]:
    """Comprehension/application/analysis split of a balanced multiple-choice set.

    The two ceilings can overshoot ``count`` by one; assembly truncates.
    """
    config = config or GenerationConfig()
    return (
        _portion(config.comprehension_ratio, count, math.ceil),
        _portion(config.application_ratio, count, math.ceil),
        _portion(config.analysis_ratio, count, math.floor),
    )


def fit_plan(plan: Tuple[int, int, int], count: int) -> Tuple[int, int, int]:
    """Drop the ceiling overshoot of ``plan``, analysis first, so it sums to ``count``."""
    n_comp, n_app, n_ana = plan
    excess = n_comp + n_app + n_ana - count
    while excess > 0:
        if n_ana:
            n_ana -= 1
        elif n_app:
            n_app -= 1
        else:
            n_comp -= 1
        excess -= 1
    return n_comp, n_app, n_ana


def _multiple_choice(ranked: Sequence[CandidateSentence], phrases: Sequence[KeyPhrase], used: Set[str],
                     count: int, rng: random.Random, config: GenerationConfig,
                     exact: bool = False) -> List[Question]:
    plan = plan_distribution(count, config)
    n_comp, n_app, n_ana = fit_plan(plan, count) if exact else plan
    questions = synthesize_comprehension(ranked, phrases, used, n_comp, rng, config)
    questions += synthesize_application(ranked, phrases, used, n_app, rng, config)
    questions += synthesize_analysis(ranked, phrases, used, n_ana, rng, config)
    return questions


def assemble(questions: Sequence[Question], count: int) -> List[Question]:
    """Drop repeated (prompt, answer) items, truncate to ``count`` and renumber ids 1..n."""
    seen = set()
    unique = []
    for q in questions:
        key = (q.prompt, q.answer_key)
        if key in seen:
            continue
        seen.add(key)
        unique.append(q)
    return [q.model_copy(update={"id": i}) for i, q in enumerate(unique[:count], start=1)]


@log_performance("build_question_set")
def build_question_set(text: str, count: int, quiz_type: QuizType = QuizType.MCQ,
                       rng: Optional[random.Random] = None,
                       config: Optional[GenerationConfig] = None) -> List[Question]:
    if count < 1:
        raise ValueError("count must be at least 1")
    rng = rng or random.Random()
    config = config or GenerationConfig()
    quiz_type = QuizType(quiz_type)

    normalized = normalize_text(text)
    sentences = segment_with_fallback(normalized, config)
    phrases = extract_key_phrases(normalized, config)
    ranked = rank_sentences(sentences, phrases, count, config)
    used: Set[str] = set()

    if quiz_type is QuizType.TRUE_FALSE:
        questions = synthesize_true_false(ranked, phrases, used, count, rng, config)
    elif quiz_type is QuizType.MULTI_SELECT:
        questions = synthesize_multi_select(ranked, phrases, used, count, rng, config)
    elif quiz_type is QuizType.MIXED:
        n_mcq = math.ceil(count / 2)
        n_tf = max(0, math.ceil(count * 3 / 10))
        n_multi = max(0, count - n_mcq - n_tf)
        questions = _multiple_choice(ranked, phrases, used, n_mcq, rng, config, exact=True)
        questions += synthesize_true_false(ranked, phrases, used, n_tf, rng, config)
        questions += synthesize_multi_select(ranked, phrases, used, n_multi, rng, config)
    else:
        questions = _multiple_choice(ranked, phrases, used, count, rng, config)

    missing = count - len(questions)
    if missing > 0:
        logger.info("conceptual_fallback", quiz_type=quiz_type.value, missing=missing,
                    key_phrases=len(phrases), sentences=len(sentences))
        if quiz_type is QuizType.TRUE_FALSE:
            questions += conceptual_true_false(normalized, phrases, missing, rng, config)
        elif quiz_type is QuizType.MULTI_SELECT:
            questions += conceptual_multi_select(normalized, phrases, missing, rng, config)
        missing = count - len(questions)
        if missing > 0 and quiz_type is not QuizType.TRUE_FALSE:
            questions += conceptual_multiple_choice(normalized, phrases, missing, rng, config)

    result = assemble(questions, count)
    if len(result) < count:
        logger.warning("question_set_short", requested=count, produced=len(result))
    return result


async def generate_questions(text: str, count: int, quiz_type: QuizType = QuizType.MCQ,
                             rng: Optional[random.Random] = None,
                             config: Optional[GenerationConfig] = None,
                             latency: float = 0.0) -> List[Question]:
    """Generate a numbered question set from raw document text.

    Never raises for empty or degenerate text; such input yields fewer
    questions (possibly none). ``latency`` adds a cosmetic delay.
    """
    questions = build_question_set(text, count, quiz_type, rng, config)
    if latency > 0:
        await asyncio.sleep(latency)
    return questions
