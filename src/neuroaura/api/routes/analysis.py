"""Stand-alone analyzer routes: sentiment, typing metrics, questionnaires."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from neuroaura.analysis import (
    Instrument,
    QuestionnaireError,
    QuestionnaireScore,
    TypingMetrics,
    analyze_sentiment,
    compute_typing_metrics,
    score_questionnaire,
    sentiment_polarity,
)
from neuroaura.api.schemas import (
    QuestionnaireRequest,
    SentimentRequest,
    SentimentResponse,
    TypingMetricsRequest,
)

router = APIRouter(tags=["analysis"])


@router.post("/sentiment")
async def sentiment(req: SentimentRequest) -> SentimentResponse:
    """Lexicon sentiment of a piece of text, with its polarity bucket."""
    result = analyze_sentiment(req.text)
    return SentimentResponse(**result.model_dump(), polarity=sentiment_polarity(result.score))


@router.post("/typing/metrics")
async def typing_metrics(req: TypingMetricsRequest) -> TypingMetrics:
    """Reduce a recorded keystroke timeline to typing metrics."""
    return compute_typing_metrics(
        req.events,
        started_at_ms=req.started_at_ms,
        ended_at_ms=req.ended_at_ms,
        final_text=req.final_text,
    )


@router.post("/questionnaires/{instrument}")
async def questionnaire(instrument: Instrument, req: QuestionnaireRequest) -> QuestionnaireScore:
    """Raw total for a standard questionnaire (PSS-10, GAD-7, PHQ-9)."""
    try:
        return score_questionnaire(instrument, req.responses)
    except QuestionnaireError as exc:
        raise HTTPException(422, str(exc)) from exc
