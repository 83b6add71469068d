import pytest
from fastapi.testclient import TestClient

from quizsmith.main import app
from quizsmith.middleware.rate_limit import limiter
from quizsmith.models import TRUE_FALSE_OPTIONS, Question, QuestionKind

limiter.enabled = False

BIOLOGY_TEXT = (
    "Photosynthesis is the process by which plants convert light into chemical energy. "
    "Chlorophyll is the green pigment that absorbs light in the leaves of plants. "
    "The Calvin cycle uses carbon dioxide to build sugars inside the chloroplast. "
    "Cellular respiration releases the energy stored in glucose because cells need a constant supply of fuel. "
    "Unlike respiration, photosynthesis stores energy rather than releasing it. "
    "About 70 percent of the oxygen in the atmosphere comes from marine algae. "
    "Scientists evaluate plant growth by measuring the rate of oxygen production. "
    "Temperature is a key factor that controls the speed of enzyme reactions in plants."
)


@pytest.fixture
def biology_text():
    return BIOLOGY_TEXT


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def sample_questions():
    return [
        Question(id=1, prompt="Which gas do plants absorb?",
                 options=["Oxygen", "Carbon dioxide", "Helium", "Neon"],
                 answer_key="Carbon dioxide", kind=QuestionKind.SINGLE),
        Question(id=2, prompt="Plants release oxygen.", options=list(TRUE_FALSE_OPTIONS),
                 answer_key="True", kind=QuestionKind.TRUE_FALSE),
        Question(id=3, prompt="Select all pigments.",
                 options=["chlorophyll", "carotene", "glucose", "starch"],
                 answer_key=frozenset({"chlorophyll", "carotene"}), kind=QuestionKind.MULTI),
    ]
