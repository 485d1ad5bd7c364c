"""Choice latency — time from showing a multiple-choice question to the answer."""

from __future__ import annotations

from typing import Callable

from pydantic import BaseModel, ConfigDict

from neuroaura.analysis.keystrokes import monotonic_ms


class ChoiceMetric(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: str
    latency_ms: float
    answer: str


class ChoiceLatencyTracker:
    """Per-session response-time tracker for discrete-choice questions.

    Re-answering a question replaces its earlier metric, and the new entry
    moves to the end of :attr:`metrics`.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or monotonic_ms
        self._started: dict[str, float] = {}
        self._metrics: dict[str, ChoiceMetric] = {}

    @property
    def metrics(self) -> list[ChoiceMetric]:
        return list(self._metrics.values())

    def start_question(self, question_id: str) -> None:
        self._started[question_id] = self._clock()

    def record_choice(self, question_id: str, answer: str) -> ChoiceMetric:
        """Record an answer; latency is 0 if the question was never started."""
        started = self._started.get(question_id)
        latency = self._clock() - started if started is not None else 0.0
        metric = ChoiceMetric(question_id=question_id, latency_ms=max(0.0, latency), answer=answer)
        self._metrics.pop(question_id, None)
        self._metrics[question_id] = metric
        return metric

    def get(self, question_id: str) -> ChoiceMetric | None:
        return self._metrics.get(question_id)

    def reset(self) -> None:
        self._started.clear()
        self._metrics.clear()
