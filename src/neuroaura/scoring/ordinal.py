"""Ordinal answer scales for the fixed multiple-choice questions.

Each scale pairs a ``str`` enum of the answer labels shown to the user with
a value in ``[0, 1]`` (1 = most stress-indicative).  :class:`OrdinalScale`
refuses to build unless every label has a value, so adding an option to an
enum without scoring it fails at import time instead of silently scoring 0.5.
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, Mapping, TypeVar

UNMAPPED_VALUE = 0.5

E = TypeVar("E", bound=Enum)


class SleepQuality(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    VERY_POOR = "Very poor"


class OverwhelmFrequency(str, Enum):
    NEVER = "Never"
    RARELY = "Rarely"
    SOMETIMES = "Sometimes"
    OFTEN = "Often"
    ALWAYS = "Always"


class Workload(str, Enum):
    LIGHT = "Light"
    MANAGEABLE = "Manageable"
    BUSY = "Busy"
    OVERLOADED = "Overloaded"
    UNMANAGEABLE = "Unmanageable"


class SocialConnection(str, Enum):
    VERY_CONNECTED = "Very connected"
    SOMEWHAT = "Somewhat"
    NEUTRAL = "Neutral"
    ISOLATED = "Isolated"
    VERY_ISOLATED = "Very isolated"


class OrdinalScale(Generic[E]):
    """Exhaustive mapping from an answer enum to a stress contribution."""

    def __init__(self, options: type[E], values: Mapping[E, float]) -> None:
        missing = [member.value for member in options if member not in values]
        if missing:
            raise ValueError(f"{options.__name__}: no value for {', '.join(missing)}")
        out_of_range = [k.value for k, v in values.items() if not 0.0 <= v <= 1.0]
        if out_of_range:
            raise ValueError(f"{options.__name__}: values outside [0, 1] for {', '.join(out_of_range)}")
        self.options = options
        self._values = {member.value: float(values[member]) for member in options}

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(self._values)

    def normalize(self, answer: object) -> float:
        """Value for *answer*; labels outside the scale score ``UNMAPPED_VALUE``."""
        if isinstance(answer, Enum):
            answer = answer.value
        if not isinstance(answer, str):
            return UNMAPPED_VALUE
        return self._values.get(answer, UNMAPPED_VALUE)


SLEEP_SCALE = OrdinalScale(SleepQuality, {
    SleepQuality.EXCELLENT: 0.0,
    SleepQuality.GOOD: 0.25,
    SleepQuality.FAIR: 0.5,
    SleepQuality.POOR: 0.75,
    SleepQuality.VERY_POOR: 1.0,
})

OVERWHELM_SCALE = OrdinalScale(OverwhelmFrequency, {
    OverwhelmFrequency.NEVER: 0.0,
    OverwhelmFrequency.RARELY: 0.25,
    OverwhelmFrequency.SOMETIMES: 0.5,
    OverwhelmFrequency.OFTEN: 0.75,
    OverwhelmFrequency.ALWAYS: 1.0,
})

WORKLOAD_SCALE = OrdinalScale(Workload, {
    Workload.LIGHT: 0.0,
    Workload.MANAGEABLE: 0.25,
    Workload.BUSY: 0.5,
    Workload.OVERLOADED: 0.75,
    Workload.UNMANAGEABLE: 1.0,
})

CONNECTION_SCALE = OrdinalScale(SocialConnection, {
    SocialConnection.VERY_CONNECTED: 0.0,
    SocialConnection.SOMEWHAT: 0.25,
    SocialConnection.NEUTRAL: 0.5,
    SocialConnection.ISOLATED: 0.75,
    SocialConnection.VERY_ISOLATED: 1.0,
})
