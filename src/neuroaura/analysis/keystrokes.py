"""Typing dynamics — keystroke event log and metric reduction.

A :class:`KeystrokeLog` is an append-only record of the keys pressed while
one free-text answer was being written.  All arithmetic lives in the pure
function :func:`compute_typing_metrics`, so the reduction can be tested (and
re-run) on any event sequence without a live input device.

Only timing and key class matter; the text itself is read once at the end
for its length and word count.
"""

from __future__ import annotations

import time
from typing import Callable, Sequence

import structlog
from pydantic import BaseModel, ConfigDict, Field

from neuroaura.models import TypingMetricsSummary
from neuroaura.numeric import coefficient_of_variation, round_half_up

logger = structlog.get_logger(__name__)

# ── Constants ─────────────────────────────────────────────────

IDLE_THRESHOLD_MS = 2000.0  # gap between keys that counts as an idle pause
MIN_RHYTHM_KEYSTROKES = 3
DELETION_KEYS = frozenset({"Backspace"})


def monotonic_ms() -> float:
    """Default clock: monotonic milliseconds."""
    return time.monotonic() * 1000


# ── Records ───────────────────────────────────────────────────


class KeystrokeEvent(BaseModel):
    """A single key press."""

    model_config = ConfigDict(frozen=True)

    timestamp_ms: float
    key: str
    is_deletion: bool = False

    @property
    def is_character(self) -> bool:
        """Printable single-character key that adds text."""
        return not self.is_deletion and len(self.key) == 1


class TypingMetrics(BaseModel):
    """Objective typing metrics for one free-text answer."""

    model_config = ConfigDict(frozen=True)

    time_to_first_key_ms: float = 0.0
    typing_speed_cps: float = Field(0.0, description="Characters per second (2 dp).")
    typing_speed_wpm: float = Field(0.0, description="Words per minute (1 dp).")
    total_time_ms: float = 0.0
    idle_pauses_count: int = 0
    idle_pause_total_ms: float = 0.0
    backspace_count: int = 0
    correction_ratio: float = Field(0.0, description="Deletions per typed character (3 dp).")
    answer_length: int = 0
    word_count: int = 0
    keystroke_rhythm_variability: float = Field(
        0.0, description="Coefficient of variation of inter-key intervals (3 dp)."
    )


# ── Reducer ───────────────────────────────────────────────────


def compute_typing_metrics(
    events: Sequence[KeystrokeEvent],
    started_at_ms: float | None,
    ended_at_ms: float,
    final_text: str,
    idle_threshold_ms: float = IDLE_THRESHOLD_MS,
) -> TypingMetrics:
    """Reduce a keystroke timeline to :class:`TypingMetrics`.

    Parameters
    ----------
    events
        Key presses in the order they happened.
    started_at_ms
        When tracking began (question shown).  ``None`` if tracking was never
        started; elapsed-time metrics are then 0.
    ended_at_ms
        When the answer was committed.
    final_text
        The committed answer text.
    idle_threshold_ms
        Minimum gap between consecutive key presses counted as an idle pause.
    """
    total_time_ms = ended_at_ms - started_at_ms if started_at_ms is not None else 0.0
    time_to_first_key = (
        events[0].timestamp_ms - started_at_ms if events and started_at_ms is not None else 0.0
    )

    answer_length = len(final_text)
    word_count = len(final_text.split())
    seconds = total_time_ms / 1000
    wpm = word_count / seconds * 60 if seconds > 0 else 0.0
    cps = answer_length / seconds if seconds > 0 else 0.0

    # Idle pauses between any two consecutive key presses
    idle_count = 0
    idle_total = 0.0
    for prev, cur in zip(events, events[1:]):
        gap = cur.timestamp_ms - prev.timestamp_ms
        if gap >= idle_threshold_ms:
            idle_count += 1
            idle_total += gap

    deletions = sum(1 for e in events if e.is_deletion)
    typed = [e for e in events if e.is_character]
    correction_ratio = deletions / len(typed) if typed else 0.0

    rhythm = 0.0
    if len(typed) >= MIN_RHYTHM_KEYSTROKES:
        intervals = [cur.timestamp_ms - prev.timestamp_ms for prev, cur in zip(typed, typed[1:])]
        rhythm = coefficient_of_variation(intervals)

    return TypingMetrics(
        time_to_first_key_ms=time_to_first_key,
        typing_speed_cps=round_half_up(cps, 2),
        typing_speed_wpm=round_half_up(wpm, 1),
        total_time_ms=total_time_ms,
        idle_pauses_count=idle_count,
        idle_pause_total_ms=idle_total,
        backspace_count=deletions,
        correction_ratio=round_half_up(correction_ratio, 3),
        answer_length=answer_length,
        word_count=word_count,
        keystroke_rhythm_variability=round_half_up(rhythm, 3),
    )


def summarize_typing(metrics: Sequence[TypingMetrics]) -> TypingMetricsSummary:
    """Aggregate per-answer metrics into the session-wide summary.

    Speeds are averaged across answers; deletions and idle time are summed.
    """
    if not metrics:
        return TypingMetricsSummary()
    return TypingMetricsSummary(
        avg_wpm=round_half_up(sum(m.typing_speed_wpm for m in metrics) / len(metrics), 1),
        avg_cps=round_half_up(sum(m.typing_speed_cps for m in metrics) / len(metrics), 2),
        backspace_total=sum(m.backspace_count for m in metrics),
        idle_total_ms=sum(m.idle_pause_total_ms for m in metrics),
    )


# ── Event log ─────────────────────────────────────────────────


class KeystrokeLog:
    """Append-only keystroke log for one free-text answer.

    Owned by a single assessment session; not safe to share between
    sessions or threads.

    Parameters
    ----------
    clock : Callable[[], float]
        Millisecond clock.  Defaults to :func:`monotonic_ms`; tests pass a
        fake clock to make timelines exact.
    idle_threshold_ms : float
        Gap counted as an idle pause when the log is reduced.
    """

    def __init__(
        self,
        clock: Callable[[], float] | None = None,
        idle_threshold_ms: float = IDLE_THRESHOLD_MS,
    ) -> None:
        self._clock = clock or monotonic_ms
        self._idle_threshold_ms = idle_threshold_ms
        self._events: list[KeystrokeEvent] = []
        self._started_at: float | None = None

    @property
    def events(self) -> tuple[KeystrokeEvent, ...]:
        return tuple(self._events)

    @property
    def started_at_ms(self) -> float | None:
        return self._started_at

    def start(self) -> None:
        """Begin tracking; discards any previous timeline."""
        self._started_at = self._clock()
        self._events = []

    def record(self, key: str, is_deletion: bool | None = None) -> KeystrokeEvent:
        """Append one key press.

        ``is_deletion`` defaults to whether *key* is a deletion key.
        """
        if is_deletion is None:
            is_deletion = key in DELETION_KEYS
        event = KeystrokeEvent(timestamp_ms=self._clock(), key=key, is_deletion=is_deletion)
        self._events.append(event)
        return event

    def metrics(self, final_text: str) -> TypingMetrics:
        """Reduce the log as of now; the log itself is unchanged."""
        return compute_typing_metrics(
            self._events,
            self._started_at,
            self._clock(),
            final_text,
            idle_threshold_ms=self._idle_threshold_ms,
        )

    def stop(self, final_text: str) -> TypingMetrics:
        """Commit the answer and return its metrics."""
        result = self.metrics(final_text)
        logger.debug(
            "typing.answer_committed",
            keystrokes=len(self._events),
            wpm=result.typing_speed_wpm,
            idle_pauses=result.idle_pauses_count,
        )
        return result
