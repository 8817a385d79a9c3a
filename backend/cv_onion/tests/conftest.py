import httpx
import pytest

from cv_onion.core import AnalyzeCvOutput, AnalyzeJobDescriptionOutput, MatchCvToJobOutput
from cv_onion.main import create_app
from cv_onion.prompts import ANALYZE_CV_PROMPT, ANALYZE_JOB_DESCRIPTION_PROMPT, MATCH_CV_TO_JOB_PROMPT
from cv_onion.settings import Settings


CV_ANALYSIS = AnalyzeCvOutput(
    skills=["Python", "FastAPI", "Kubernetes"],
    experience="Six years building backend services.",
    qualifications="BSc Computer Science",
)
JOB_ANALYSIS = AnalyzeJobDescriptionOutput(
    required_skills=["Python", "AWS"],
    required_experience="3+ years of backend development.",
    required_qualifications="Degree in a technical field",
)
MATCH_RESULT = MatchCvToJobOutput(
    match_score=82,
    highlighted_cv="<mark>Python</mark> developer\nLoves APIs",
    color_code="green",
)


class FakeBackend:
    """Canned answers per prompt; `fail` maps prompt names to exceptions to raise."""

    def __init__(self, answers=None, fail=None):
        self.answers = {
            ANALYZE_CV_PROMPT.name: CV_ANALYSIS,
            ANALYZE_JOB_DESCRIPTION_PROMPT.name: JOB_ANALYSIS,
            MATCH_CV_TO_JOB_PROMPT.name: MATCH_RESULT,
        }
        self.answers.update(answers or {})
        self.fail = fail or {}
        self.calls = []

    async def generate(self, prompt, request):
        self.calls.append((prompt.name, request))
        if prompt.name in self.fail:
            raise self.fail[prompt.name]
        return self.answers[prompt.name]

    def calls_for(self, prompt):
        return [req for name, req in self.calls if name == prompt.name]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def app(backend):
    return create_app(backend=backend, settings=Settings(env="test"))


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
