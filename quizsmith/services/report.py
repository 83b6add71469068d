"""
Result feedback and the plain-text result report
"""
from datetime import date as date_type
from typing import Any, Mapping, Optional, Sequence

from quizsmith.models import Question
from quizsmith.services.scoring import is_correct

FEEDBACK_BANDS = [
    (90, "Excellent! You have a great understanding of the material."),
    (80, "Great job! You know the material well."),
    (70, "Good work! You have a solid grasp of most concepts."),
    (60, "Not bad. You're on the right track."),
    (50, "You passed, but there's room for improvement."),
]
LOW_SCORE_FEEDBACK = "You might need to review the material again."


def feedback_for_score(score: int) -> str:
    for threshold, message in FEEDBACK_BANDS:
        if score >= threshold:
            return message
    return LOW_SCORE_FEEDBACK


def format_answer(question: Question, answer: Any) -> str:
    if answer is None or answer == "" or answer == frozenset():
        return "Not answered"
    if isinstance(answer, (set, frozenset)):
        # option order keeps the report stable
        ordered = [opt for opt in question.options if opt in answer]
        ordered += sorted(a for a in answer if a not in question.options)
        return ", ".join(ordered)
    return str(answer)


def format_result_report(name: str, score: int, questions: Sequence[Question],
                         answers: Mapping[int, Any], date: Optional[date_type] = None) -> str:
    """Render the downloadable plain-text report of a finished quiz."""
    date = date or date_type.today()
    lines = [
        f"Quiz Results for {name}",
        f"Date: {date.isoformat()}",
        f"Score: {score}%",
        f"Feedback: {feedback_for_score(score)}",
        "",
        "Questions and Answers:",
        "",
    ]
    for index, question in enumerate(questions, start=1):
        answer = answers.get(question.id)
        lines.append(f"{index}. {question.prompt}")
        lines.append(f"Your answer: {format_answer(question, answer)}")
        lines.append(f"Correct answer: {format_answer(question, question.answer_key)}")
        lines.append(f"Result: {'Correct' if is_correct(question, answer) else 'Incorrect'}")
        lines.append("")
    lines.append("Thank you for using QuizSmith!")
    return "\n".join(lines)
