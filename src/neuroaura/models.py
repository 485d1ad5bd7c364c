"""Shared Pydantic models: the scoring engine's input and output records.

Every record is frozen.  An assessment is built once, scored once, and
rendered; nothing downstream is allowed to mutate it.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ── Enums ─────────────────────────────────────────────────────


class QuestionKind(str, Enum):
    """How a question is answered."""
    MCQ = "mcq"
    TEXT = "text"
    SLIDER = "slider"


class Mood(str, Enum):
    """Coarse mood label derived from the stress score."""
    CALM = "calm"
    NEUTRAL = "neutral"
    ANXIOUS = "anxious"
    FATIGUED = "fatigued"
    OVERWHELMED = "overwhelmed"
    MOTIVATED = "motivated"


class InterventionPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Fixed question roles in the core assessment.
SLEEP_QUESTION_ID = "q1"
OVERWHELM_QUESTION_ID = "q2"
WORKLOAD_QUESTION_ID = "q3"
REFLECTION_QUESTION_ID = "q4"
CONNECTION_QUESTION_ID = "q5"
SELF_REPORT_QUESTION_ID = "q6"

SLIDER_MIN = 0.0
SLIDER_MAX = 10.0

_TEXT_ONLY_FIELDS = ("chars", "time_ms", "wpm", "backspaces", "pauses", "sentiment", "keystroke_variance")


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ── Input records ─────────────────────────────────────────────


class QuestionAnswer(_Frozen):
    """One answered question.

    Free-text questions additionally carry the typing summary of that answer
    (``chars`` .. ``keystroke_variance``); those fields stay ``None`` for every
    other kind.
    """

    id: str
    kind: QuestionKind
    answer: str | int | float
    latency_ms: float = Field(0.0, ge=0.0, description="Display-to-commit time.")

    # ── Free-text only
    chars: int | None = Field(None, ge=0)
    time_ms: float | None = Field(None, ge=0.0)
    wpm: float | None = Field(None, ge=0.0)
    backspaces: int | None = Field(None, ge=0)
    pauses: int | None = Field(None, ge=0)
    sentiment: float | None = Field(None, ge=-1.0, le=1.0)
    keystroke_variance: float | None = Field(None, ge=0.0)

    @model_validator(mode="after")
    def _check_kind_fields(self) -> QuestionAnswer:
        if self.kind is not QuestionKind.TEXT:
            stray = [name for name in _TEXT_ONLY_FIELDS if getattr(self, name) is not None]
            if stray:
                raise ValueError(
                    f"question {self.id!r}: fields {', '.join(stray)} are only valid for free-text answers"
                )
        if self.kind is QuestionKind.SLIDER:
            if isinstance(self.answer, str) or not SLIDER_MIN <= self.answer <= SLIDER_MAX:
                raise ValueError(
                    f"question {self.id!r}: slider answer must be a number in "
                    f"[{SLIDER_MIN:g}, {SLIDER_MAX:g}], got {self.answer!r}"
                )
        return self


class TypingMetricsSummary(_Frozen):
    """Session-wide aggregate over all free-text entry."""
    avg_wpm: float = Field(0.0, ge=0.0)
    avg_cps: float = Field(0.0, ge=0.0)
    backspace_total: int = Field(0, ge=0)
    idle_total_ms: float = Field(0.0, ge=0.0)


class DeviceContext(_Frozen):
    """Client environment; recorded for audit, never used in scoring."""
    platform: str = ""
    agent: str = ""
    screen: str = ""
    timezone: str | None = None
    local_time: str | None = None


class AssessmentPayload(_Frozen):
    """The scoring engine's sole input."""
    user_id: str
    questions: tuple[QuestionAnswer, ...]
    typing_metrics: TypingMetricsSummary
    device_context: DeviceContext = Field(default_factory=DeviceContext)

    def question(self, question_id: str) -> QuestionAnswer | None:
        """Return the first answer with *question_id*, if any."""
        return next((q for q in self.questions if q.id == question_id), None)


# ── Output records ────────────────────────────────────────────


class Intervention(_Frozen):
    id: str
    title: str
    priority: InterventionPriority


class StressResult(_Frozen):
    """The scoring engine's sole output."""

    stress_score: int = Field(ge=0, le=100)
    confidence: float = Field(ge=0.0, le=1.0)
    mood: Mood
    explanations: tuple[str, ...] = Field(min_length=1, max_length=3)
    recommended_intervention: Intervention


class SignalContribution(_Frozen):
    """One normalised signal and its share of the weighted composite."""
    signal: str
    value: float = Field(ge=0.0, le=1.0)
    weight: float
    weighted: float
    missing: bool = False


def validate_payload(data: object) -> AssessmentPayload:
    """Validate raw (JSON-decoded) input into an :class:`AssessmentPayload`.

    The engine assumes well-formed input; callers run untrusted data through
    here first.  Raises :class:`pydantic.ValidationError` on malformed shape.
    """
    return AssessmentPayload.model_validate(data)
