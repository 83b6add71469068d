"""
Informativeness filter and sentence ranking
"""
import re
from dataclasses import replace
from typing import List, Optional, Sequence

import structlog

from quizsmith.config import GenerationConfig
from quizsmith.models import CandidateSentence, KeyPhrase
from quizsmith.services.keyphrases import contains_phrase

logger = structlog.get_logger()

DEFINITIONAL_RE = re.compile(r"\b(is|are|means|defined as|refers to|known as|consists of)\b", re.I)
DEFINITION_PATTERN_RE = re.compile(
    r"\b(is|are)\s+(a|an|the)\b|\b(means|defined as|refers to|known as|consists of)\b", re.I)
CAUSAL_RE = re.compile(
    r"\b(because|therefore|thus|as a result|leads? to|causes?|caused by|results? in)\b", re.I)
COMPARATIVE_RE = re.compile(r"\b(compared (to|with)|whereas|in contrast|unlike|similar to)\b", re.I)
IMPORTANCE_RE = re.compile(
    r"\b(important|key|significant|main|primary|critical|essential|crucial|fundamental|major)\b", re.I)
NUMBER_RE = re.compile(r"\d+(\.\d+)?\s*(%|percent)?")
ORDINAL_RE = re.compile(r"\b(first|second|third|firstly|secondly|finally|lastly)\b", re.I)
EVIDENCE_RE = re.compile(
    r"\b(according to|studies (show|suggest)|research (shows|suggests|indicates)|evidence suggests)\b", re.I)
ANALYTICAL_RE = re.compile(r"\b(analy[sz]\w*|evaluat\w*|interpret\w*|appl(y|ies|ied|ication)\w*)\b", re.I)

INFORMATIVE_PATTERNS = (
    DEFINITIONAL_RE, CAUSAL_RE, COMPARATIVE_RE, IMPORTANCE_RE,
    NUMBER_RE, ORDINAL_RE, EVIDENCE_RE, ANALYTICAL_RE,
)


def is_informative(sentence: str) -> bool:
    return any(p.search(sentence) for p in INFORMATIVE_PATTERNS)


def score_sentence(sentence: CandidateSentence, phrases: Sequence[KeyPhrase],
                   config: Optional[GenerationConfig] = None) -> float:
    config = config or GenerationConfig()
    text = sentence.text
    total = len(phrases)
    score = sum(1 - idx / total for idx, kp in enumerate(phrases) if contains_phrase(text, kp.phrase))
    if IMPORTANCE_RE.search(text):
        score += config.importance_weight
    if CAUSAL_RE.search(text):
        score += config.causal_weight
    if DEFINITION_PATTERN_RE.search(text):
        score += config.definitional_weight
    low, high = config.ideal_length
    if low <= len(text) <= high:
        score += config.ideal_length_weight
    if sentence.position < 2:
        score += config.lead_position_weight
    return score


def rank_sentences(sentences: Sequence[CandidateSentence], phrases: Sequence[KeyPhrase],
                   count: int, config: Optional[GenerationConfig] = None) -> List[CandidateSentence]:
    """Score and order candidates, preferring informative ones when there are enough."""
    config = config or GenerationConfig()
    informative = [s for s in sentences if is_informative(s.text)]
    if len(informative) >= config.informative_pool_factor * count:
        pool = informative
    else:
        pool = list(sentences)
        logger.info("ranking_pool_widened", informative=len(informative), total=len(pool))
    ranked = [replace(s, score=score_sentence(s, phrases, config)) for s in pool]
    ranked.sort(key=lambda s: s.score, reverse=True)
    return ranked
