"""Assessment session — owns the collectors for one run and assembles the payload.

A session is created when the user starts an assessment and discarded after
scoring.  It holds the only mutable state in the scoring path: question
timers, keystroke logs and the answers given so far.  Nothing is shared
between sessions.
"""

from __future__ import annotations

from typing import Callable

import structlog

from neuroaura.analysis.keystrokes import KeystrokeLog, TypingMetrics, monotonic_ms, summarize_typing
from neuroaura.analysis.latency import ChoiceLatencyTracker
from neuroaura.analysis.sentiment import analyze_sentiment
from neuroaura.models import (
    AssessmentPayload,
    DeviceContext,
    QuestionAnswer,
    QuestionKind,
)

logger = structlog.get_logger(__name__)


class AssessmentSession:
    """Collect one user's answers and behavioural signals.

    Parameters
    ----------
    user_id : str
        Identifier copied into the payload.
    clock : Callable[[], float]
        Millisecond clock shared by every collector in the session.
    """

    def __init__(self, user_id: str, clock: Callable[[], float] | None = None) -> None:
        self.user_id = user_id
        self._clock = clock or monotonic_ms
        self._choices = ChoiceLatencyTracker(clock=self._clock)
        self._keystrokes: dict[str, KeystrokeLog] = {}
        self._typing: dict[str, TypingMetrics] = {}
        self._shown_at: dict[str, float] = {}
        self._answers: dict[str, QuestionAnswer] = {}

    @property
    def answers(self) -> list[QuestionAnswer]:
        return list(self._answers.values())

    # ── Question lifecycle ───────────────────────────────────

    def show_question(self, question_id: str, kind: QuestionKind) -> None:
        """Start the timers for a question that has just been displayed."""
        kind = QuestionKind(kind)
        self._shown_at[question_id] = self._clock()
        if kind is QuestionKind.MCQ:
            self._choices.start_question(question_id)
        elif kind is QuestionKind.TEXT and question_id not in self._keystrokes:
            # Keys already typed keep their log, timed from the first key.
            log = KeystrokeLog(clock=self._clock)
            log.start()
            self._keystrokes[question_id] = log

    def keystroke(self, question_id: str, key: str, is_deletion: bool | None = None) -> None:
        """Record a key press in a free-text answer."""
        log = self._keystrokes.get(question_id)
        if log is None:
            log = KeystrokeLog(clock=self._clock)
            log.start()
            self._keystrokes[question_id] = log
        log.record(key, is_deletion=is_deletion)

    def answer_choice(self, question_id: str, label: str) -> QuestionAnswer:
        metric = self._choices.record_choice(question_id, label)
        return self._store(
            QuestionAnswer(id=question_id, kind=QuestionKind.MCQ, answer=label, latency_ms=metric.latency_ms)
        )

    def answer_text(self, question_id: str, text: str) -> QuestionAnswer:
        """Commit a free-text answer with its typing metrics and sentiment."""
        log = self._keystrokes.pop(question_id, None) or KeystrokeLog(clock=self._clock)
        metrics = log.stop(text)
        self._typing[question_id] = metrics
        sentiment = analyze_sentiment(text)
        timed = metrics.total_time_ms > 0
        return self._store(
            QuestionAnswer(
                id=question_id,
                kind=QuestionKind.TEXT,
                answer=text,
                latency_ms=metrics.total_time_ms,
                chars=metrics.answer_length,
                time_ms=metrics.total_time_ms,
                wpm=metrics.typing_speed_wpm if timed else None,
                backspaces=metrics.backspace_count,
                pauses=metrics.idle_pauses_count,
                sentiment=sentiment.score,
                keystroke_variance=metrics.keystroke_rhythm_variability,
            )
        )

    def answer_slider(self, question_id: str, value: float) -> QuestionAnswer:
        return self._store(
            QuestionAnswer(
                id=question_id,
                kind=QuestionKind.SLIDER,
                answer=value,
                latency_ms=self._elapsed_since_shown(question_id),
            )
        )

    # ── Assembly ─────────────────────────────────────────────

    def build_payload(self, device_context: DeviceContext | None = None) -> AssessmentPayload:
        """Freeze everything collected so far into an :class:`AssessmentPayload`."""
        payload = AssessmentPayload(
            user_id=self.user_id,
            questions=tuple(self._answers.values()),
            typing_metrics=summarize_typing(list(self._typing.values())),
            device_context=device_context or DeviceContext(),
        )
        logger.info(
            "session.payload_built",
            user=self.user_id,
            questions=len(payload.questions),
            text_answers=len(self._typing),
        )
        return payload

    def reset(self) -> None:
        self._choices.reset()
        self._keystrokes.clear()
        self._typing.clear()
        self._shown_at.clear()
        self._answers.clear()

    # ── Internals ────────────────────────────────────────────

    def _elapsed_since_shown(self, question_id: str) -> float:
        shown = self._shown_at.get(question_id)
        return max(0.0, self._clock() - shown) if shown is not None else 0.0

    def _store(self, answer: QuestionAnswer) -> QuestionAnswer:
        self._answers.pop(answer.id, None)
        self._answers[answer.id] = answer
        return answer
