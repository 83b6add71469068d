"""
Quiz-taking sessions: answer map, countdown timer and auto-submission.
"""
import asyncio
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence

import structlog

from quizsmith.config import settings
from quizsmith.models import Question, SubmittedAnswers
from quizsmith.services.report import feedback_for_score, format_result_report
from quizsmith.services.scoring import grade_quiz, score_quiz

logger = structlog.get_logger()


class QuizSessionError(Exception):
    """Base class for session misuse"""


class SessionNotFound(QuizSessionError):
    pass


class UnknownQuestion(QuizSessionError):
    pass


class SessionAlreadySubmitted(QuizSessionError):
    pass


class QuizSession:
    def __init__(self, questions: Sequence[Question], name: str = "Student",
                 time_limit_seconds: int = 300, on_submit: Optional[Callable[["QuizSession"], None]] = None):
        self.id = uuid.uuid4().hex
        self.name = name
        self.questions: List[Question] = list(questions)
        self.answers: SubmittedAnswers = {}
        self.remaining_seconds = max(0, int(time_limit_seconds))
        self.submitted = False
        self.auto_submitted = False
        self.score: Optional[int] = None
        self.submitted_at: Optional[datetime] = None
        self._on_submit = on_submit
        self._by_id = {q.id: q for q in self.questions}

    def _question(self, question_id: int) -> Question:
        question = self._by_id.get(question_id)
        if question is None:
            raise UnknownQuestion(f"Question {question_id} is not part of session {self.id}")
        return question

    def answer(self, question_id: int, value: Any) -> None:
        """Record an answer; lists are taken as multi-select selections."""
        if self.submitted:
            raise SessionAlreadySubmitted(f"Session {self.id} has already been submitted")
        question = self._question(question_id)
        if question.is_multi and isinstance(value, (list, tuple, set, frozenset)):
            value = frozenset(value)
        self.answers[question_id] = value

    def clear_answer(self, question_id: int) -> None:
        if self.submitted:
            raise SessionAlreadySubmitted(f"Session {self.id} has already been submitted")
        self._question(question_id)
        self.answers.pop(question_id, None)

    def submit(self, auto: bool = False) -> int:
        """Finalize the answer map. Repeated calls return the first score."""
        if self.submitted:
            return self.score
        self.submitted = True
        self.auto_submitted = auto
        self.submitted_at = datetime.now()
        self.score = score_quiz(self.questions, self.answers)
        logger.info("quiz_submitted", session_id=self.id, score=self.score, auto=auto,
                    answered=len(self.answers), total=len(self.questions))
        if self._on_submit:
            self._on_submit(self)
        return self.score

    def tick(self, seconds: int = 1) -> bool:
        """Advance the countdown; returns True on the tick that auto-submits."""
        if self.submitted:
            return False
        self.remaining_seconds = max(0, self.remaining_seconds - seconds)
        if self.remaining_seconds == 0:
            self.submit(auto=True)
            return True
        return False

    def grade(self) -> Dict[str, Any]:
        if not self.submitted:
            raise QuizSessionError(f"Session {self.id} has not been submitted")
        result = grade_quiz(self.questions, self.answers)
        result["feedback"] = feedback_for_score(result["score"])
        return result

    def report(self) -> str:
        if not self.submitted:
            raise QuizSessionError(f"Session {self.id} has not been submitted")
        return format_result_report(self.name, self.score, self.questions, self.answers,
                                    self.submitted_at.date())


class QuizTimer:
    """Ticks a session once per interval on the running event loop."""

    def __init__(self, session: QuizSession, interval: float = 1.0):
        self.session = session
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while not self.session.submitted:
            await asyncio.sleep(self.interval)
            self.session.tick()

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None


class SessionRegistry:
    """In-memory sessions of this process.

    Submitted sessions are kept for ``ttl_seconds`` so their results and
    report stay readable, then dropped the next time a session is created.
    """

    def __init__(self, ttl_seconds: float = settings.session_ttl_minutes * 60):
        self.ttl = timedelta(seconds=ttl_seconds)
        self._sessions: Dict[str, QuizSession] = {}
        self._timers: Dict[str, QuizTimer] = {}

    def create(self, questions: Sequence[Question], name: str = "Student", time_limit_seconds: int = 300,
               start_timer: bool = True, on_submit: Optional[Callable[[QuizSession], None]] = None,
               interval: float = 1.0) -> QuizSession:
        self.prune()
        session = QuizSession(questions, name, time_limit_seconds, on_submit)
        self._sessions[session.id] = session
        if start_timer:
            timer = QuizTimer(session, interval)
            timer.start()
            self._timers[session.id] = timer
        logger.info("quiz_session_created", session_id=session.id, questions=len(session.questions),
                    time_limit_seconds=session.remaining_seconds)
        return session

    def get(self, session_id: str) -> QuizSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(f"Session {session_id} not found")
        return session

    def timer(self, session_id: str) -> Optional[QuizTimer]:
        return self._timers.get(session_id)

    def discard(self, session_id: str) -> None:
        """Drop a session and cancel its timer."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFound(f"Session {session_id} not found")
        timer = self._timers.pop(session_id, None)
        if timer:
            timer.stop()
        logger.info("quiz_session_discarded", session_id=session_id, submitted=session.submitted)

    def prune(self, now: Optional[datetime] = None) -> int:
        """Discard submitted sessions older than the TTL; returns how many went."""
        now = now or datetime.now()
        expired = [sid for sid, s in self._sessions.items()
                   if s.submitted and s.submitted_at + self.ttl <= now]
        for session_id in expired:
            self.discard(session_id)
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        for session_id in list(self._sessions):
            self.discard(session_id)


sessions = SessionRegistry()
