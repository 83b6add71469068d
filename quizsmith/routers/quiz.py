import random
from typing import Optional

import structlog
from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import PlainTextResponse

from quizsmith.config import settings
from quizsmith.middleware.rate_limit import general_api_limit, quiz_generation_limit
from quizsmith.models import QuizType
from quizsmith.schemas import (
    AnswerUpdate, QuestionSetResponse, ScoreRequest, ScoreResponse, SessionCreate, SessionState,
    answer_payload,
)
from quizsmith.services.cache import cache_questions, generation_key, get_cached_questions
from quizsmith.services.monitoring import GENERATED_QUESTIONS, GENERATION_REQUESTS, QUIZ_SUBMISSIONS
from quizsmith.services.quiz_generator import generate_questions
from quizsmith.services.report import feedback_for_score
from quizsmith.services.scoring import grade_quiz
from quizsmith.services.session import (
    QuizSession, QuizSessionError, SessionNotFound, UnknownQuestion, sessions,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/quiz", tags=["quiz"])


def _session_error(e: QuizSessionError) -> HTTPException:
    if isinstance(e, (SessionNotFound, UnknownQuestion)):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=409, detail=str(e))


def _state(session: QuizSession) -> SessionState:
    return SessionState(
        session_id=session.id,
        name=session.name,
        remaining_seconds=session.remaining_seconds,
        submitted=session.submitted,
        auto_submitted=session.auto_submitted,
        score=session.score,
        answers={qid: answer_payload(a) for qid, a in session.answers.items()},
        questions=session.questions,
    )


def _count_submission(session: QuizSession) -> None:
    QUIZ_SUBMISSIONS.labels(mode="auto" if session.auto_submitted else "manual").inc()


async def _read_upload(file: UploadFile) -> str:
    content = await file.read()
    if (file.filename or "").lower().endswith(".pdf") or file.content_type == "application/pdf":
        raise HTTPException(status_code=400, detail="PDF uploads must be converted to text before generation")
    return content.decode("utf-8", errors="ignore")


# -------------------- GENERATION --------------------

@router.post("/generate", response_model=QuestionSetResponse)
@quiz_generation_limit()
async def generate_quiz(
    request: Request,
    text: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    count: int = Form(10, ge=1, le=settings.max_questions),
    quiz_type: QuizType = Form(QuizType.MCQ),
    seed: Optional[int] = Form(None),
):
    if file is not None:
        text = await _read_upload(file)
    if text is None:
        raise HTTPException(status_code=400, detail="Provide document text or a text file")

    key = generation_key(text, count, quiz_type.value, seed) if seed is not None else None
    if key:
        cached = get_cached_questions(key)
        if cached is not None:
            GENERATION_REQUESTS.labels(quiz_type=quiz_type.value, status="cached").inc()
            return QuestionSetResponse(quiz_type=quiz_type, requested=count, count=len(cached),
                                       cached=True, questions=cached)

    rng = random.Random(seed) if seed is not None else random.Random()
    try:
        questions = await generate_questions(text, count, quiz_type, rng=rng,
                                             latency=settings.simulated_latency)
    except Exception as e:
        GENERATION_REQUESTS.labels(quiz_type=quiz_type.value, status="error").inc()
        logger.error("quiz_generation_failed", quiz_type=quiz_type.value, error=str(e))
        raise HTTPException(status_code=500, detail=f"Question generation failed: {e}")

    status = "success" if questions else "empty"
    GENERATION_REQUESTS.labels(quiz_type=quiz_type.value, status=status).inc()
    for q in questions:
        GENERATED_QUESTIONS.labels(kind=q.kind.value).inc()
    logger.info("quiz_generated", quiz_type=quiz_type.value, requested=count,
                produced=len(questions), chars=len(text))

    if key and questions:
        cache_questions(key, questions)
    return QuestionSetResponse(quiz_type=quiz_type, requested=count, count=len(questions),
                               questions=questions)


@router.post("/score", response_model=ScoreResponse)
@general_api_limit()
async def score(request: Request, payload: ScoreRequest):
    by_id = {q.id: q for q in payload.questions}
    answers = {}
    for qid, value in payload.answers.items():
        question = by_id.get(qid)
        if question is not None and question.is_multi and isinstance(value, list):
            value = frozenset(value)
        answers[qid] = value
    result = grade_quiz(payload.questions, answers)
    return ScoreResponse(feedback=feedback_for_score(result["score"]), **result)


# -------------------- SESSIONS --------------------

@router.post("/sessions", response_model=SessionState, status_code=201)
@general_api_limit()
async def create_session(request: Request, payload: SessionCreate):
    time_limit = payload.time_limit_seconds or settings.time_limit_minutes * 60
    session = sessions.create(payload.questions, payload.name, time_limit,
                              on_submit=_count_submission)
    return _state(session)


@router.get("/sessions/{session_id}", response_model=SessionState)
async def get_session(session_id: str):
    try:
        return _state(sessions.get(session_id))
    except QuizSessionError as e:
        raise _session_error(e)


@router.put("/sessions/{session_id}/answers/{question_id}", response_model=SessionState)
async def answer_question(session_id: str, question_id: int, payload: AnswerUpdate):
    try:
        session = sessions.get(session_id)
        if payload.answer is None:
            session.clear_answer(question_id)
        else:
            session.answer(question_id, payload.answer)
        return _state(session)
    except QuizSessionError as e:
        raise _session_error(e)


@router.post("/sessions/{session_id}/submit", response_model=ScoreResponse)
async def submit_session(session_id: str):
    try:
        session = sessions.get(session_id)
        timer = sessions.timer(session_id)
        if timer:
            timer.stop()
        session.submit()
        return ScoreResponse(**session.grade())
    except QuizSessionError as e:
        raise _session_error(e)


@router.get("/sessions/{session_id}/report", response_class=PlainTextResponse)
async def download_report(session_id: str):
    try:
        session = sessions.get(session_id)
        report = session.report()
    except QuizSessionError as e:
        raise _session_error(e)
    filename = "quiz-results-" + "-".join(session.name.lower().split()) + ".txt"
    return PlainTextResponse(report, headers={"Content-Disposition": f'attachment; filename="{filename}"'})


@router.delete("/sessions/{session_id}", status_code=204)
async def discard_session(session_id: str):
    try:
        sessions.discard(session_id)
    except QuizSessionError as e:
        raise _session_error(e)
