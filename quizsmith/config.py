import os
from typing import Tuple

from pydantic import BaseModel, ConfigDict


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings(BaseModel):
    redis_url: str = os.getenv("QUIZSMITH_REDIS_URL", "redis://localhost:6379/0")
    time_limit_minutes: int = int(os.getenv("QUIZSMITH_TIME_LIMIT_MINUTES", "5"))
    max_questions: int = int(os.getenv("QUIZSMITH_MAX_QUESTIONS", "50"))
    generation_rate_limit: str = os.getenv("QUIZSMITH_GENERATION_RATE_LIMIT", "30/minute")
    rate_limit_enabled: bool = _flag("QUIZSMITH_RATE_LIMIT_ENABLED", "true")
    simulated_latency: float = float(os.getenv("QUIZSMITH_SIMULATED_LATENCY", "0"))
    log_level: str = os.getenv("QUIZSMITH_LOG_LEVEL", "INFO")
    cache_ttl_seconds: int = int(os.getenv("QUIZSMITH_CACHE_TTL_SECONDS", "3600"))
    memory_cache_size: int = int(os.getenv("QUIZSMITH_MEMORY_CACHE_SIZE", "256"))
    session_ttl_minutes: int = int(os.getenv("QUIZSMITH_SESSION_TTL_MINUTES", "30"))
    host: str = os.getenv("QUIZSMITH_HOST", "127.0.0.1")
    port: int = int(os.getenv("QUIZSMITH_PORT", "8000"))


class GenerationConfig(BaseModel):
    """Tunable heuristics of the question synthesis pipeline.

    The ranking weights and the cognitive-level split are tuning values,
    so they are fields here rather than constants in the algorithms.
    """

    model_config = ConfigDict(frozen=True)

    # segmentation
    min_paragraph_chars: int = 50
    max_paragraph_chars: int = 500
    min_sentence_chars: int = 30
    max_sentence_chars: int = 200

    # key phrases
    max_key_phrases: int = 30
    max_phrase_words: int = 4
    multiword_boost: float = 1.5
    titlecase_boost: float = 1.3
    domain_boost: float = 1.4

    # ranking
    informative_pool_factor: int = 2
    importance_weight: float = 0.7
    causal_weight: float = 0.5
    definitional_weight: float = 0.6
    ideal_length_weight: float = 0.4
    lead_position_weight: float = 0.3
    ideal_length: Tuple[int, int] = (60, 180)

    # synthesis
    comprehension_ratio: float = 0.4
    application_ratio: float = 0.3
    analysis_ratio: float = 0.3
    true_probability: float = 0.6
    distractor_count: int = 3
    overlap_threshold: float = 0.5
    answer_max_chars: int = 120
    cooccurrence_window: int = 200


settings = Settings()
