"""
Text normalization and sentence segmentation
"""
import re
from typing import List, Optional

import structlog

from quizsmith.config import GenerationConfig
from quizsmith.models import CandidateSentence

logger = structlog.get_logger()


# -------------------- CLEANING / NORMALIZATION --------------------

TYPOGRAPHIC = str.maketrans({
    "\u2018": "'", "\u2019": "'", "\u201c": '"', "\u201d": '"',
    "\u2013": "-", "\u2014": "-", "\u00a0": " ", "\u00ad": "",
})
HYPHEN_BREAK_RE = re.compile(r"-\s*\n\s*(?=\w)")
LINE_BREAK_RE = re.compile(r"(\r\n|\n|\r)")
DISALLOWED_RE = re.compile(r"[^\w\s.,;:!?'\"()%/&-]")
MULTI_SPACE_RE = re.compile(r"\s+")


def normalize_text(raw_text: str) -> str:
    """Collapse a raw document into a single line of allow-listed characters."""
    if not raw_text:
        return ""
    text = raw_text.translate(TYPOGRAPHIC)
    text = HYPHEN_BREAK_RE.sub("", text)  # de-hyphenate across linebreaks
    text = LINE_BREAK_RE.sub(" ", text)
    text = DISALLOWED_RE.sub("", text.replace("_", " "))
    return MULTI_SPACE_RE.sub(" ", text).strip()


# -------------------- CHUNKING / SENTENCES --------------------

PARAGRAPH_SPLIT = re.compile(r"(?<=\.)\s+(?=[A-Z])")
SENT_SPLIT = re.compile(r"(?<=[.?!])\s+(?=[A-Z\"'(])")
LIST_MARKER_RE = re.compile(r"^\d+\.")
CAPTION_RE = re.compile(r"\b(Figure|Table|References?)\b")


def is_noise_chunk(chunk: str) -> bool:
    return bool(LIST_MARKER_RE.match(chunk) or CAPTION_RE.search(chunk))


def split_paragraphs(text: str, config: Optional[GenerationConfig] = None,
                     reject_noise: bool = True) -> List[str]:
    config = config or GenerationConfig()
    out = []
    for chunk in PARAGRAPH_SPLIT.split(text):
        chunk = chunk.strip()
        if not config.min_paragraph_chars <= len(chunk) <= config.max_paragraph_chars:
            continue
        if reject_noise and is_noise_chunk(chunk):
            continue
        out.append(chunk)
    return out


def split_sentences(paragraph: str, config: Optional[GenerationConfig] = None) -> List[str]:
    config = config or GenerationConfig()
    out = []
    for s in SENT_SPLIT.split(paragraph):
        s = s.strip()
        if not config.min_sentence_chars <= len(s) <= config.max_sentence_chars:
            continue
        if not s.endswith((".", "?", "!")):
            s = s + "."
        out.append(s)
    return out


def segment_sentences(text: str, config: Optional[GenerationConfig] = None,
                      reject_noise: bool = True) -> List[CandidateSentence]:
    """Split normalized text into paragraph chunks, then into sentences."""
    config = config or GenerationConfig()
    sentences = []
    for p_idx, paragraph in enumerate(split_paragraphs(text, config, reject_noise)):
        for pos, s in enumerate(split_sentences(paragraph, config)):
            sentences.append(CandidateSentence(text=s, paragraph=p_idx, position=pos))
    return sentences


def segment_with_fallback(text: str, config: Optional[GenerationConfig] = None) -> List[CandidateSentence]:
    """Segment text, retrying without caption/list rejection when nothing survives."""
    sentences = segment_sentences(text, config)
    if not sentences and text:
        sentences = segment_sentences(text, config, reject_noise=False)
        logger.info("segmentation_fallback", sentence_count=len(sentences))
    return sentences
