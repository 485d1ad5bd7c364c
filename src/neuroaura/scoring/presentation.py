"""Display helpers for a :class:`StressResult`.  Not part of the scoring contract."""

from __future__ import annotations

from enum import Enum

from neuroaura.models import Mood


class ColorBand(str, Enum):
    """Colour band of the stress gauge, lowest to highest."""
    CALM = "calm"
    BALANCED = "balanced"
    RISING = "rising"
    HIGH = "high"
    CRITICAL = "critical"


_BANDS: tuple[tuple[int, ColorBand], ...] = (
    (25, ColorBand.CALM),
    (45, ColorBand.BALANCED),
    (65, ColorBand.RISING),
    (80, ColorBand.HIGH),
)

_EMOJI: dict[Mood, str] = {
    Mood.CALM: "\N{RELIEVED FACE}",
    Mood.NEUTRAL: "\N{NEUTRAL FACE}",
    Mood.ANXIOUS: "\N{FACE WITH OPEN MOUTH AND COLD SWEAT}",
    Mood.FATIGUED: "\N{TIRED FACE}",
    Mood.OVERWHELMED: "\N{OVERHEATED FACE}",
    Mood.MOTIVATED: "\N{FLEXED BICEPS}",
}

_LABELS: dict[Mood, str] = {
    Mood.CALM: "Calm & Relaxed",
    Mood.NEUTRAL: "Balanced",
    Mood.ANXIOUS: "Mildly Anxious",
    Mood.FATIGUED: "Fatigued",
    Mood.OVERWHELMED: "Overwhelmed",
    Mood.MOTIVATED: "Motivated",
}


def mood_to_emoji(mood: Mood) -> str:
    return _EMOJI[Mood(mood)]


def mood_label(mood: Mood) -> str:
    """Human-friendly mood name for result cards."""
    return _LABELS[Mood(mood)]


def stress_score_to_color_band(score: int) -> ColorBand:
    for upper, band in _BANDS:
        if score < upper:
            return band
    return ColorBand.CRITICAL
