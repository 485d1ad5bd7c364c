"""Standard self-report questionnaires: PSS-10, GAD-7 and PHQ-9.

Only raw totals are computed.  No severity bands or clinical cut-offs are
attached; these instruments are screening aids, and the totals are shown to
the user as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

import structlog
from pydantic import BaseModel, ConfigDict

logger = structlog.get_logger(__name__)


class Instrument(str, Enum):
    PSS10 = "pss10"
    GAD7 = "gad7"
    PHQ9 = "phq9"


@dataclass(frozen=True)
class InstrumentSpec:
    """Item layout of one questionnaire."""

    item_prefix: str
    item_count: int
    max_item_value: int
    reverse_items: frozenset[str] = frozenset()

    @property
    def item_ids(self) -> tuple[str, ...]:
        return tuple(f"{self.item_prefix}{n}" for n in range(1, self.item_count + 1))

    @property
    def max_total(self) -> int:
        return self.item_count * self.max_item_value


INSTRUMENTS: dict[Instrument, InstrumentSpec] = {
    # Perceived Stress Scale: 0 (never) .. 4 (very often); positively
    # worded items 4, 5, 7 and 8 are reverse-scored.
    Instrument.PSS10: InstrumentSpec(
        item_prefix="pss",
        item_count=10,
        max_item_value=4,
        reverse_items=frozenset({"pss4", "pss5", "pss7", "pss8"}),
    ),
    # 0 (not at all) .. 3 (nearly every day)
    Instrument.GAD7: InstrumentSpec(item_prefix="gad", item_count=7, max_item_value=3),
    Instrument.PHQ9: InstrumentSpec(item_prefix="phq", item_count=9, max_item_value=3),
}


class QuestionnaireError(ValueError):
    """Responses do not fit the questionnaire (missing, unknown or out of range)."""


class QuestionnaireScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    instrument: Instrument
    total: int
    max_total: int
    item_scores: dict[str, int]


def score_questionnaire(instrument: Instrument, responses: Mapping[str, int]) -> QuestionnaireScore:
    """Sum item responses into a raw total.

    Every item must be answered.  Reverse-scored items contribute
    ``max_item_value - response``.

    Raises
    ------
    QuestionnaireError
        On unknown item ids, missing items or out-of-range values.
    """
    instrument = Instrument(instrument)
    spec = INSTRUMENTS[instrument]
    expected = spec.item_ids

    unknown = sorted(set(responses) - set(expected))
    if unknown:
        raise QuestionnaireError(f"{instrument.value}: unknown items {', '.join(unknown)}")
    missing = [item for item in expected if item not in responses]
    if missing:
        raise QuestionnaireError(f"{instrument.value}: unanswered items {', '.join(missing)}")

    item_scores: dict[str, int] = {}
    for item in expected:
        value = responses[item]
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= spec.max_item_value:
            raise QuestionnaireError(
                f"{instrument.value}: {item} must be an integer in [0, {spec.max_item_value}], got {value!r}"
            )
        item_scores[item] = spec.max_item_value - value if item in spec.reverse_items else value

    total = sum(item_scores.values())
    logger.debug("questionnaire.scored", instrument=instrument.value, total=total)
    return QuestionnaireScore(
        instrument=instrument,
        total=total,
        max_total=spec.max_total,
        item_scores=item_scores,
    )
