"""Shared pytest fixtures."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

# Point the service at a throwaway database before any settings are cached.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="neuroaura-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'test.db'}"
os.environ.setdefault("API_SECRET_KEY", "change-me-to-a-random-secret")

import pytest  # noqa: E402
import structlog  # noqa: E402

from neuroaura.models import (  # noqa: E402
    AssessmentPayload,
    QuestionAnswer,
    QuestionKind,
    TypingMetricsSummary,
)
from neuroaura.storage.database import dispose_engine, init_db  # noqa: E402


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


def make_payload(
    sleep: str = "Very poor",
    overwhelm: str = "Always",
    workload: str = "Unmanageable",
    connection: str = "Very isolated",
    *,
    wpm: float | None = 20.0,
    backspaces: int | None = 10,
    chars: int | None = 50,
    sentiment: float | None = -0.8,
    slider: float | None = None,
    idle_total_ms: float = 0.0,
    choice_latency_ms: float = 6000.0,
    user_id: str = "U001",
) -> AssessmentPayload:
    """Build a full six-question payload; defaults are the high-stress example."""
    questions = [
        QuestionAnswer(id="q1", kind=QuestionKind.MCQ, answer=sleep, latency_ms=choice_latency_ms),
        QuestionAnswer(id="q2", kind=QuestionKind.MCQ, answer=overwhelm, latency_ms=choice_latency_ms),
        QuestionAnswer(id="q3", kind=QuestionKind.MCQ, answer=workload, latency_ms=choice_latency_ms),
        QuestionAnswer(
            id="q4",
            kind=QuestionKind.TEXT,
            answer="I have too much going on",
            chars=chars,
            wpm=wpm,
            backspaces=backspaces,
            sentiment=sentiment,
        ),
        QuestionAnswer(id="q5", kind=QuestionKind.MCQ, answer=connection, latency_ms=choice_latency_ms),
    ]
    if slider is not None:
        questions.append(QuestionAnswer(id="q6", kind=QuestionKind.SLIDER, answer=slider))
    return AssessmentPayload(
        user_id=user_id,
        questions=tuple(questions),
        typing_metrics=TypingMetricsSummary(avg_wpm=wpm or 0.0, idle_total_ms=idle_total_ms),
    )


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop logging configuration made by the CLI or the app lifespan."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def high_stress_payload() -> AssessmentPayload:
    return make_payload()


@pytest.fixture
def relaxed_payload() -> AssessmentPayload:
    """Rested, unpressured, fast typist with positive text."""
    return make_payload(
        "Excellent", "Never", "Light", "Very connected",
        wpm=40.0, backspaces=0, chars=50, sentiment=1.0, choice_latency_ms=1500.0,
    )


@pytest.fixture
def payload_dict(high_stress_payload: AssessmentPayload) -> dict:
    """JSON-ready form of the high-stress payload."""
    return high_stress_payload.model_dump(mode="json")


@pytest.fixture
async def db():
    """Initialised database; pooled connections are closed afterwards."""
    await init_db()
    yield
    await dispose_engine()
