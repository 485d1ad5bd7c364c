"""Assessment scoring and history routes."""

from __future__ import annotations

from datetime import datetime

import structlog
from fastapi import APIRouter, HTTPException, Query

from neuroaura.api.schemas import HistoryResponse, Presentation, ScoredAssessment
from neuroaura.config import get_settings
from neuroaura.models import AssessmentPayload, StressResult
from neuroaura.scoring import (
    calculate_stress_score,
    explain_signals,
    mood_label,
    mood_to_emoji,
    stress_score_to_color_band,
)
from neuroaura.storage.database import AssessmentResultRow
from neuroaura.storage.repository import AssessmentResultRepository, row_to_result

router = APIRouter(prefix="/assessments", tags=["assessments"])

logger = structlog.get_logger(__name__)


def _presentation(result: StressResult) -> Presentation:
    return Presentation(
        emoji=mood_to_emoji(result.mood),
        mood_label=mood_label(result.mood),
        color_band=stress_score_to_color_band(result.stress_score),
    )


def _from_row(row: AssessmentResultRow) -> ScoredAssessment:
    result = row_to_result(row)
    return ScoredAssessment(
        id=row.id,
        user_id=row.user_id,
        scored_at=row.scored_at,
        result=result,
        presentation=_presentation(result),
    )


@router.post("/score")
async def score_assessment(payload: AssessmentPayload) -> ScoredAssessment:
    """Score a completed assessment.

    The payload is validated by pydantic before the engine sees it, so a
    malformed body is answered with 422.  The result is stored when
    ``persist_results`` is enabled.
    """
    result = calculate_stress_score(payload)
    scored_at = datetime.utcnow()

    record_id: str | None = None
    if get_settings().persist_results:
        row = await AssessmentResultRepository().save(
            payload.user_id, result, payload.device_context, scored_at=scored_at
        )
        record_id = row.id

    logger.info(
        "api.assessment_scored",
        user=payload.user_id,
        score=result.stress_score,
        mood=result.mood.value,
        confidence=result.confidence,
        persisted=record_id is not None,
    )
    return ScoredAssessment(
        id=record_id,
        user_id=payload.user_id,
        scored_at=scored_at,
        result=result,
        presentation=_presentation(result),
        signals=list(explain_signals(payload)),
    )


@router.get("/{user_id}/latest")
async def get_latest_assessment(user_id: str) -> ScoredAssessment:
    """Most recent stored result for a user."""
    rows = await AssessmentResultRepository().get_latest(user_id, limit=1)
    if not rows:
        raise HTTPException(404, "No stored assessments for this user.")
    return _from_row(rows[0])


@router.get("/{user_id}/history")
async def get_assessment_history(
    user_id: str,
    limit: int | None = Query(None, ge=1, le=500),
) -> HistoryResponse:
    """Stored results for a user, newest first."""
    rows = await AssessmentResultRepository().get_latest(
        user_id, limit=limit or get_settings().history_default_limit
    )
    history = [_from_row(r) for r in rows]
    return HistoryResponse(user_id=user_id, count=len(history), history=history)
