"""Stress scoring engine — deterministic fusion of self-report and behaviour.

:func:`calculate_stress_score` maps one :class:`AssessmentPayload` to one
:class:`StressResult`.  It is a pure function: no I/O, no randomness, no
shared state, so identical payloads always produce identical results and
concurrent calls need no coordination.

Pipeline
--------
1. Normalise every signal to ``[0, 1]`` (1 = more stress-indicative).
2. Weighted composite (weights sum to 1.0).
3. Optional blend with the self-reported stress slider (70 / 30).
4. Integer score 0-100.
5. Confidence from signal coverage and latency consistency.
6. Mood bucket, with a "motivated" override for rested, unpressured users.
7. Intervention by score threshold.
8. Up to three explanations, in signal evaluation order.

=================  ===============================  ======  =========
Signal             Normalisation                    Weight  Notable
=================  ===============================  ======  =========
sleep              ordinal scale                    0.15    >= 0.75
overwhelm          ordinal scale                    0.15    >= 0.75
workload           ordinal scale                    0.15    >= 0.75
connection         ordinal scale                    0.10    >= 0.75
typing_speed       1 - wpm / 40                     0.12    >= 0.6
correction_rate    (backspaces / chars) / 0.3       0.10    >= 0.6
idle_pauses        idle_ms / 30000                  0.08    >= 0.5
sentiment          (1 - sentiment) / 2              0.08    >= 0.6
choice_latency     mean MCQ latency / 15000         0.07    never
self_report        slider / 10 (blended at 0.3)     --      >= 0.7
=================  ===============================  ======  =========
"""

from __future__ import annotations

import statistics
from dataclasses import dataclass
from typing import NamedTuple, Sequence

from neuroaura.models import (
    CONNECTION_QUESTION_ID,
    OVERWHELM_QUESTION_ID,
    REFLECTION_QUESTION_ID,
    SELF_REPORT_QUESTION_ID,
    SLEEP_QUESTION_ID,
    SLIDER_MAX,
    WORKLOAD_QUESTION_ID,
    AssessmentPayload,
    Intervention,
    InterventionPriority,
    Mood,
    QuestionAnswer,
    QuestionKind,
    SignalContribution,
    StressResult,
)
from neuroaura.numeric import clamp, coefficient_of_variation, round_half_up
from neuroaura.scoring.ordinal import (
    CONNECTION_SCALE,
    OVERWHELM_SCALE,
    SLEEP_SCALE,
    WORKLOAD_SCALE,
)

# ── Normalisation baselines ──────────────────────────────────

BASELINE_WPM = 40.0
MAX_BACKSPACE_RATIO = 0.3
MAX_IDLE_MS = 30_000.0
MAX_CHOICE_LATENCY_MS = 15_000.0
DEFAULT_CHOICE_LATENCY_MS = 5_000.0
NEUTRAL_VALUE = 0.5

SELF_REPORT_WEIGHT = 0.3
SELF_REPORT_NOTABLE = 0.7

# ── Confidence ────────────────────────────────────────────────

EXPECTED_SIGNAL_COUNT = 6
COVERAGE_WEIGHT = 0.6
CONSISTENCY_WEIGHT = 0.4
DEFAULT_CONSISTENCY = 0.8
MIN_CONSISTENCY = 0.5
MAX_LATENCY_CV = 0.5

# ── Mood & intervention ───────────────────────────────────────

_MOOD_BANDS: tuple[tuple[int, Mood], ...] = (
    (25, Mood.CALM),
    (45, Mood.NEUTRAL),
    (65, Mood.ANXIOUS),
    (80, Mood.FATIGUED),
)
MOTIVATED_MAX_SCORE = 30
MOTIVATED_MAX_WORKLOAD = 0.5
MOTIVATED_MAX_SLEEP = 0.25

HIGH_PRIORITY_SCORE = 70
MEDIUM_PRIORITY_SCORE = 45

INTERVENTIONS: dict[InterventionPriority, Intervention] = {
    InterventionPriority.HIGH: Intervention(
        id="recovery_guided_10", title="10min Guided Recovery", priority=InterventionPriority.HIGH,
    ),
    InterventionPriority.MEDIUM: Intervention(
        id="micro_breath_60", title="60s Breathing Exercise", priority=InterventionPriority.MEDIUM,
    ),
    InterventionPriority.LOW: Intervention(
        id="micro_breath_30", title="30s Quick Breath", priority=InterventionPriority.LOW,
    ),
}

MAX_EXPLANATIONS = 3
FALLBACK_EXPLANATION = "Overall indicators within normal range"


@dataclass(frozen=True)
class SignalSpec:
    name: str
    weight: float
    notable_at: float | None = None
    explanation: str | None = None


# Evaluation order is also explanation order.
SIGNALS: tuple[SignalSpec, ...] = (
    SignalSpec("sleep", 0.15, 0.75, "Poor sleep quality reported"),
    SignalSpec("overwhelm", 0.15, 0.75, "Frequently feeling overwhelmed"),
    SignalSpec("workload", 0.15, 0.75, "High workload indicated"),
    SignalSpec("connection", 0.10, 0.75, "Feeling isolated from peers"),
    SignalSpec("typing_speed", 0.12, 0.6, "Slower typing speed detected"),
    SignalSpec("correction_rate", 0.10, 0.6, "High correction rate while typing"),
    SignalSpec("idle_pauses", 0.08, 0.5, "Extended pauses during responses"),
    SignalSpec("sentiment", 0.08, 0.6, "Negative sentiment in written response"),
    SignalSpec("choice_latency", 0.07),
)
SELF_REPORT_EXPLANATION = "High self-reported stress level"


class _Measurement(NamedTuple):
    values: dict[str, float]
    missing: frozenset[str]
    self_report: float | None


# ── Normalisation ─────────────────────────────────────────────


def _answer(payload: AssessmentPayload, question_id: str) -> object:
    q = payload.question(question_id)
    return q.answer if q is not None else None


def _measure(payload: AssessmentPayload) -> _Measurement:
    values: dict[str, float] = {}
    missing: set[str] = set()
    text = payload.question(REFLECTION_QUESTION_ID)

    values["sleep"] = SLEEP_SCALE.normalize(_answer(payload, SLEEP_QUESTION_ID))
    values["overwhelm"] = OVERWHELM_SCALE.normalize(_answer(payload, OVERWHELM_QUESTION_ID))
    values["workload"] = WORKLOAD_SCALE.normalize(_answer(payload, WORKLOAD_QUESTION_ID))
    values["connection"] = CONNECTION_SCALE.normalize(_answer(payload, CONNECTION_QUESTION_ID))

    if text is not None and text.wpm is not None:
        values["typing_speed"] = clamp(1 - text.wpm / BASELINE_WPM)
    else:
        values["typing_speed"] = NEUTRAL_VALUE
        missing.add("typing_speed")

    if text is not None and text.backspaces is not None and text.chars:
        ratio = text.backspaces / max(text.chars, 1)
        values["correction_rate"] = clamp(ratio / MAX_BACKSPACE_RATIO)
    else:
        values["correction_rate"] = NEUTRAL_VALUE
        missing.add("correction_rate")

    idle_ms = payload.typing_metrics.idle_total_ms
    values["idle_pauses"] = clamp(idle_ms / MAX_IDLE_MS) if idle_ms > 0 else 0.0

    # Absent sentiment is neutral, not missing.
    if text is not None and text.sentiment is not None:
        values["sentiment"] = clamp((1 - text.sentiment) / 2)
    else:
        values["sentiment"] = NEUTRAL_VALUE

    mcq_latencies = [q.latency_ms for q in payload.questions if q.kind is QuestionKind.MCQ]
    mean_latency = statistics.fmean(mcq_latencies) if mcq_latencies else DEFAULT_CHOICE_LATENCY_MS
    values["choice_latency"] = clamp(mean_latency / MAX_CHOICE_LATENCY_MS)

    slider = payload.question(SELF_REPORT_QUESTION_ID)
    self_report: float | None = None
    if slider is not None and not isinstance(slider.answer, str):
        self_report = clamp(slider.answer / SLIDER_MAX)

    return _Measurement(values=values, missing=frozenset(missing), self_report=self_report)


def _composite(m: _Measurement) -> float:
    weighted = sum(spec.weight * m.values[spec.name] for spec in SIGNALS)
    if m.self_report is None:
        return weighted
    return (1 - SELF_REPORT_WEIGHT) * weighted + SELF_REPORT_WEIGHT * m.self_report


# ── Confidence ────────────────────────────────────────────────


def signal_coverage(missing_count: int) -> float:
    """Share of the expected behavioural signals that were present."""
    return 1 - min(missing_count, EXPECTED_SIGNAL_COUNT) / EXPECTED_SIGNAL_COUNT


def answer_consistency(questions: Sequence[QuestionAnswer]) -> float:
    """Consistency of response timing; steadier latencies score higher.

    Uses the coefficient of variation of all positive latencies.  With fewer
    than two latencies there is nothing to compare and a fixed 0.8 is used.
    """
    latencies = [q.latency_ms for q in questions if q.latency_ms > 0]
    if len(latencies) < 2:
        return DEFAULT_CONSISTENCY
    cv = coefficient_of_variation(latencies)
    return max(MIN_CONSISTENCY, 1 - min(cv, MAX_LATENCY_CV))


def _confidence(payload: AssessmentPayload, missing_count: int) -> float:
    raw = (
        COVERAGE_WEIGHT * signal_coverage(missing_count)
        + CONSISTENCY_WEIGHT * answer_consistency(payload.questions)
    )
    return round_half_up(raw, 2)


# ── Classification ────────────────────────────────────────────


def classify_mood(stress_score: int, workload: float, sleep: float) -> Mood:
    """Bucket the score into a mood; rested users under light load read as motivated."""
    if (
        stress_score < MOTIVATED_MAX_SCORE
        and workload <= MOTIVATED_MAX_WORKLOAD
        and sleep <= MOTIVATED_MAX_SLEEP
    ):
        return Mood.MOTIVATED
    for upper, mood in _MOOD_BANDS:
        if stress_score < upper:
            return mood
    return Mood.OVERWHELMED


def select_intervention(stress_score: int) -> Intervention:
    if stress_score >= HIGH_PRIORITY_SCORE:
        return INTERVENTIONS[InterventionPriority.HIGH]
    if stress_score >= MEDIUM_PRIORITY_SCORE:
        return INTERVENTIONS[InterventionPriority.MEDIUM]
    return INTERVENTIONS[InterventionPriority.LOW]


def _explanations(m: _Measurement) -> tuple[str, ...]:
    notes = [
        spec.explanation
        for spec in SIGNALS
        if spec.notable_at is not None and m.values[spec.name] >= spec.notable_at
    ]
    if m.self_report is not None and m.self_report >= SELF_REPORT_NOTABLE:
        notes.append(SELF_REPORT_EXPLANATION)
    return tuple(notes[:MAX_EXPLANATIONS]) or (FALLBACK_EXPLANATION,)


# ── Entry points ──────────────────────────────────────────────


def calculate_stress_score(payload: AssessmentPayload) -> StressResult:
    """Score one assessment.

    Missing optional inputs (slider, free-text metrics, sentiment) fall back
    to documented defaults; the payload itself must already be valid (see
    :func:`neuroaura.models.validate_payload`).
    """
    m = _measure(payload)
    stress_score = int(clamp(round_half_up(_composite(m) * 100), 0, 100))

    return StressResult(
        stress_score=stress_score,
        confidence=_confidence(payload, len(m.missing)),
        mood=classify_mood(stress_score, workload=m.values["workload"], sleep=m.values["sleep"]),
        explanations=_explanations(m),
        recommended_intervention=select_intervention(stress_score),
    )


def explain_signals(payload: AssessmentPayload) -> tuple[SignalContribution, ...]:
    """Per-signal breakdown of the composite, for audit and display.

    ``weighted`` is each signal's share of the final (blended) composite, so
    the ``weighted`` values sum to ``stress_score / 100`` before rounding.
    """
    m = _measure(payload)
    scale = 1.0 if m.self_report is None else 1 - SELF_REPORT_WEIGHT
    contributions = [
        SignalContribution(
            signal=spec.name,
            value=m.values[spec.name],
            weight=spec.weight * scale,
            weighted=spec.weight * scale * m.values[spec.name],
            missing=spec.name in m.missing,
        )
        for spec in SIGNALS
    ]
    if m.self_report is not None:
        contributions.append(
            SignalContribution(
                signal="self_report",
                value=m.self_report,
                weight=SELF_REPORT_WEIGHT,
                weighted=SELF_REPORT_WEIGHT * m.self_report,
            )
        )
    return tuple(contributions)
