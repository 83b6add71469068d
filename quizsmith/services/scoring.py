"""
Quiz scoring
"""
import math
from typing import Any, Dict, List, Mapping, Sequence

from quizsmith.models import Question


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def is_correct(question: Question, submitted: Any) -> bool:
    """Exact comparison against the answer key; wrong shapes are simply incorrect."""
    if question.is_multi:
        if not isinstance(submitted, (set, frozenset)):
            return False
        return frozenset(submitted) == question.answer_key
    return isinstance(submitted, str) and submitted == question.answer_key


def score_quiz(questions: Sequence[Question], answers: Mapping[int, Any]) -> int:
    if not questions:
        return 0
    correct = sum(1 for q in questions if is_correct(q, answers.get(q.id)))
    return round_half_up(100 * correct / len(questions))


def grade_quiz(questions: Sequence[Question], answers: Mapping[int, Any]) -> Dict[str, Any]:
    """Score plus a per-question breakdown."""
    results: List[Dict[str, Any]] = []
    for q in questions:
        results.append({"question_id": q.id, "correct": is_correct(q, answers.get(q.id))})
    correct_count = sum(1 for r in results if r["correct"])
    return {
        "score": score_quiz(questions, answers),
        "correct_count": correct_count,
        "total": len(questions),
        "results": results,
    }
