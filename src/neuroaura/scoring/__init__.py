"""Stress scoring — the pure engine plus its ordinal scales and display helpers."""

from neuroaura.scoring.engine import (
    FALLBACK_EXPLANATION,
    INTERVENTIONS,
    SIGNALS,
    answer_consistency,
    calculate_stress_score,
    classify_mood,
    explain_signals,
    select_intervention,
    signal_coverage,
)
from neuroaura.scoring.presentation import (
    ColorBand,
    mood_label,
    mood_to_emoji,
    stress_score_to_color_band,
)

__all__ = [
    "FALLBACK_EXPLANATION",
    "INTERVENTIONS",
    "SIGNALS",
    "ColorBand",
    "answer_consistency",
    "calculate_stress_score",
    "classify_mood",
    "explain_signals",
    "mood_label",
    "mood_to_emoji",
    "select_intervention",
    "signal_coverage",
    "stress_score_to_color_band",
]
