"""Request / response models for the HTTP API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from neuroaura.analysis.keystrokes import KeystrokeEvent
from neuroaura.analysis.sentiment import SentimentPolarity, SentimentResult
from neuroaura.models import SignalContribution, StressResult
from neuroaura.scoring.presentation import ColorBand


class Presentation(BaseModel):
    emoji: str
    mood_label: str
    color_band: ColorBand


class ScoredAssessment(BaseModel):
    """A stress result plus display hints and, when stored, its record id."""
    id: str | None = None
    user_id: str
    scored_at: datetime
    result: StressResult
    presentation: Presentation
    signals: list[SignalContribution] = Field(default_factory=list)


class HistoryResponse(BaseModel):
    user_id: str
    count: int
    history: list[ScoredAssessment]


class SentimentRequest(BaseModel):
    text: str = Field(..., max_length=20_000)


class SentimentResponse(SentimentResult):
    polarity: SentimentPolarity


class TypingMetricsRequest(BaseModel):
    """A recorded keystroke timeline for one free-text answer."""
    events: list[KeystrokeEvent] = Field(default_factory=list)
    started_at_ms: float | None = None
    ended_at_ms: float
    final_text: str = ""


class QuestionnaireRequest(BaseModel):
    responses: dict[str, int]
