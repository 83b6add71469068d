from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator


TRUE_FALSE_OPTIONS = ["True", "False"]


class QuestionKind(str, Enum):
    SINGLE = "multiple-choice-single"
    MULTI = "multiple-choice-multi"
    TRUE_FALSE = "true-false"


class QuizType(str, Enum):
    MCQ = "mcq"
    TRUE_FALSE = "truefalse"
    MULTI_SELECT = "multiselect"
    MIXED = "mixed"


AnswerKey = Union[str, FrozenSet[str]]
SubmittedAnswers = Dict[int, AnswerKey]


class Question(BaseModel):
    """A single scorable quiz item.

    ``answer_key`` is a plain string for single-answer kinds and a frozenset
    for multi-select; the shape is checked once here and never inferred later.
    """

    model_config = ConfigDict(frozen=True)

    id: int = 0
    prompt: str
    options: List[str]
    answer_key: AnswerKey
    kind: QuestionKind
    source: Optional[str] = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def check_answer_shape(self) -> "Question":
        if len(set(self.options)) != len(self.options):
            raise ValueError("options must be unique")
        if self.kind is QuestionKind.MULTI:
            if not isinstance(self.answer_key, frozenset):
                raise ValueError("multi-select answer key must be a set")
            if len(self.answer_key) < 2:
                raise ValueError("multi-select needs at least two correct options")
            if len(self.options) < len(self.answer_key) + 1:
                raise ValueError("multi-select needs at least one decoy option")
            if not self.answer_key <= set(self.options):
                raise ValueError("answer key must be drawn from options")
        else:
            if not isinstance(self.answer_key, str):
                raise ValueError("single-answer key must be a string")
            if self.answer_key not in self.options:
                raise ValueError("answer key must be drawn from options")
            if self.kind is QuestionKind.TRUE_FALSE and self.options != TRUE_FALSE_OPTIONS:
                raise ValueError("true/false options must be exactly True, False")
        return self

    @field_serializer("answer_key")
    def serialize_answer_key(self, key: AnswerKey):
        if isinstance(key, frozenset):
            return [opt for opt in self.options if opt in key]
        return key

    @property
    def is_multi(self) -> bool:
        return self.kind is QuestionKind.MULTI


@dataclass(frozen=True)
class KeyPhrase:
    phrase: str
    score: float
    frequency: int

    @property
    def words(self) -> int:
        return len(self.phrase.split())


@dataclass(frozen=True)
class CandidateSentence:
    text: str
    paragraph: int = 0
    position: int = 0
    score: float = 0.0
