from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from quizsmith.models import Question, QuizType

AnswerValue = Union[str, List[str]]


def answer_payload(value: Any) -> Any:
    """JSON form of a submitted answer; multi-select selections become sorted lists."""
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return value


class QuestionSetResponse(BaseModel):
    quiz_type: QuizType
    requested: int
    count: int
    cached: bool = False
    questions: List[Question]


class ScoreRequest(BaseModel):
    questions: List[Question]
    answers: Dict[int, AnswerValue] = {}


class QuestionResult(BaseModel):
    question_id: int
    correct: bool


class ScoreResponse(BaseModel):
    score: int
    correct_count: int
    total: int
    feedback: str
    results: List[QuestionResult]


class SessionCreate(BaseModel):
    questions: List[Question] = Field(..., min_length=1)
    name: str = "Student"
    time_limit_seconds: Optional[int] = Field(None, ge=1)


class AnswerUpdate(BaseModel):
    answer: Optional[AnswerValue] = None


class SessionState(BaseModel):
    session_id: str
    name: str
    remaining_seconds: int
    submitted: bool
    auto_submitted: bool
    score: Optional[int] = None
    answers: Dict[int, Any]
    questions: List[Question]
