"""Data-access layer — thin async wrappers around SQLAlchemy queries."""

from __future__ import annotations

import json
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from neuroaura.models import DeviceContext, Intervention, StressResult
from neuroaura.storage.database import AssessmentResultRow, get_session_factory


class BaseRepository:
    """Shared base with session management for all repositories."""

    def __init__(self, session: AsyncSession | None = None) -> None:
        self._external_session = session

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        if self._external_session is not None:
            yield self._external_session
            return
        async with get_session_factory()() as session:
            yield session


class AssessmentResultRepository(BaseRepository):
    """CRUD for scored :class:`StressResult` records."""

    # ── Write ─────────────────────────────────────────────────

    async def save(
        self,
        user_id: str,
        result: StressResult,
        device_context: DeviceContext | None = None,
        scored_at: datetime | None = None,
    ) -> AssessmentResultRow:
        row = AssessmentResultRow(
            id=str(uuid.uuid4()),
            user_id=user_id,
            stress_score=result.stress_score,
            confidence=result.confidence,
            mood=result.mood.value,
            explanations_json=json.dumps(list(result.explanations)),
            intervention_id=result.recommended_intervention.id,
            intervention_title=result.recommended_intervention.title,
            intervention_priority=result.recommended_intervention.priority.value,
            device_json=(device_context or DeviceContext()).model_dump_json(),
            scored_at=scored_at or datetime.utcnow(),
        )
        async with self._session() as session:
            session.add(row)
            await session.commit()
        return row

    # ── Read ──────────────────────────────────────────────────

    async def get_latest(self, user_id: str, limit: int = 1) -> Sequence[AssessmentResultRow]:
        stmt = (
            select(AssessmentResultRow)
            .where(AssessmentResultRow.user_id == user_id)
            .order_by(AssessmentResultRow.scored_at.desc())
            .limit(limit)
        )
        return await self._scalars(stmt)

    async def get_range(
        self, user_id: str, start: datetime, end: datetime
    ) -> Sequence[AssessmentResultRow]:
        stmt = (
            select(AssessmentResultRow)
            .where(
                AssessmentResultRow.user_id == user_id,
                AssessmentResultRow.scored_at >= start,
                AssessmentResultRow.scored_at <= end,
            )
            .order_by(AssessmentResultRow.scored_at.asc())
        )
        return await self._scalars(stmt)

    async def count_for_user(self, user_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(AssessmentResultRow)
            .where(AssessmentResultRow.user_id == user_id)
        )
        async with self._session() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0

    async def _scalars(self, stmt) -> Sequence[AssessmentResultRow]:
        async with self._session() as session:
            result = await session.execute(stmt)
            return result.scalars().all()


def row_to_result(row: AssessmentResultRow) -> StressResult:
    """Rebuild the immutable result from a stored row."""
    return StressResult(
        stress_score=row.stress_score,
        confidence=row.confidence,
        mood=row.mood,
        explanations=tuple(json.loads(row.explanations_json)),
        recommended_intervention=Intervention(
            id=row.intervention_id,
            title=row.intervention_title,
            priority=row.intervention_priority,
        ),
    )
