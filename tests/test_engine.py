"""Tests for the stress scoring engine, ordinal scales and display helpers."""

from __future__ import annotations

import pytest

from conftest import make_payload
from neuroaura.models import (
    AssessmentPayload,
    InterventionPriority,
    Mood,
    QuestionAnswer,
    QuestionKind,
    TypingMetricsSummary,
)
from neuroaura.scoring import (
    FALLBACK_EXPLANATION,
    SIGNALS,
    ColorBand,
    answer_consistency,
    calculate_stress_score,
    classify_mood,
    explain_signals,
    mood_label,
    mood_to_emoji,
    select_intervention,
    signal_coverage,
    stress_score_to_color_band,
)
from neuroaura.scoring.ordinal import (
    SLEEP_SCALE,
    OrdinalScale,
    OverwhelmFrequency,
    SleepQuality,
)


# ── Ordinal scales ───────────────────────────────────────────


class TestOrdinalScale:
    def test_known_labels(self):
        assert SLEEP_SCALE.normalize("Excellent") == 0.0
        assert SLEEP_SCALE.normalize("Very poor") == 1.0
        assert SLEEP_SCALE.normalize(SleepQuality.POOR) == 0.75

    def test_unknown_label_defaults_to_midpoint(self):
        assert SLEEP_SCALE.normalize("Terrible") == 0.5
        assert SLEEP_SCALE.normalize(None) == 0.5
        assert SLEEP_SCALE.normalize(3) == 0.5

    def test_incomplete_mapping_rejected(self):
        with pytest.raises(ValueError, match="Very poor"):
            OrdinalScale(SleepQuality, {
                SleepQuality.EXCELLENT: 0.0,
                SleepQuality.GOOD: 0.25,
                SleepQuality.FAIR: 0.5,
                SleepQuality.POOR: 0.75,
            })

    def test_out_of_range_value_rejected(self):
        values = {member: 0.0 for member in SleepQuality}
        values[SleepQuality.POOR] = 1.5
        with pytest.raises(ValueError, match="outside"):
            OrdinalScale(SleepQuality, values)

    def test_labels_in_display_order(self):
        assert SLEEP_SCALE.labels == ("Excellent", "Good", "Fair", "Poor", "Very poor")


# ── Composite score ──────────────────────────────────────────


class TestStressScore:
    def test_high_stress_example(self, high_stress_payload: AssessmentPayload):
        result = calculate_stress_score(high_stress_payload)
        assert result.stress_score == 78
        assert result.mood in (Mood.FATIGUED, Mood.OVERWHELMED)
        assert result.recommended_intervention.priority == InterventionPriority.HIGH
        assert result.recommended_intervention.id == "recovery_guided_10"
        assert result.confidence == 1.0

    def test_deterministic(self, high_stress_payload: AssessmentPayload):
        first = calculate_stress_score(high_stress_payload)
        second = calculate_stress_score(high_stress_payload.model_copy(deep=True))
        assert first == second

    def test_ranges(self):
        for payload in (
            make_payload(),
            make_payload("Excellent", "Never", "Light", "Very connected", sentiment=1.0),
            make_payload(wpm=0.0, backspaces=500, chars=1, idle_total_ms=10**7, slider=10),
            make_payload(wpm=None, backspaces=None, chars=None, sentiment=None),
        ):
            result = calculate_stress_score(payload)
            assert 0 <= result.stress_score <= 100
            assert 0.0 <= result.confidence <= 1.0
            assert 1 <= len(result.explanations) <= 3

    def test_overwhelm_is_monotonic(self):
        scores = [
            calculate_stress_score(
                make_payload("Fair", level.value, "Busy", "Neutral")
            ).stress_score
            for level in OverwhelmFrequency
        ]
        assert scores == sorted(scores)
        assert scores[-1] > scores[0]

    def test_slider_max_never_lowers_score(self, high_stress_payload: AssessmentPayload):
        without = calculate_stress_score(high_stress_payload)
        with_slider = calculate_stress_score(make_payload(slider=10))
        assert with_slider.stress_score >= without.stress_score
        # 0.7 * 0.7767 + 0.3 * 1.0
        assert with_slider.stress_score == 84

    def test_slider_blend_pulls_towards_self_report(self, relaxed_payload: AssessmentPayload):
        calm = calculate_stress_score(relaxed_payload)
        reported = calculate_stress_score(
            make_payload(
                "Excellent", "Never", "Light", "Very connected",
                wpm=40.0, backspaces=0, chars=50, sentiment=1.0,
                choice_latency_ms=1500.0, slider=5,
            )
        )
        # 0.7 * 0.007 + 0.3 * 0.5
        assert calm.stress_score == 1
        assert reported.stress_score == 15

    def test_string_slider_answer_ignored(self, high_stress_payload: AssessmentPayload):
        questions = high_stress_payload.questions + (
            QuestionAnswer(id="q6", kind=QuestionKind.MCQ, answer="10", latency_ms=6000.0),
        )
        payload = high_stress_payload.model_copy(update={"questions": questions})
        assert calculate_stress_score(payload).stress_score == 78

    def test_idle_time_contributes(self):
        quiet = calculate_stress_score(make_payload(idle_total_ms=0.0))
        paused = calculate_stress_score(make_payload(idle_total_ms=30_000.0))
        # idle weight 0.08 at full contribution
        assert paused.stress_score - quiet.stress_score == 8


# ── Mood & intervention ──────────────────────────────────────


class TestMood:
    def test_motivated_override(self, relaxed_payload: AssessmentPayload):
        result = calculate_stress_score(relaxed_payload)
        assert result.stress_score == 1
        assert result.mood == Mood.MOTIVATED
        assert result.recommended_intervention.priority == InterventionPriority.LOW

    def test_no_override_when_sleep_is_fair(self):
        result = calculate_stress_score(
            make_payload(
                "Fair", "Never", "Light", "Very connected",
                wpm=40.0, backspaces=0, chars=50, sentiment=1.0, choice_latency_ms=1500.0,
            )
        )
        assert result.stress_score == 8
        assert result.mood == Mood.CALM

    @pytest.mark.parametrize(
        "score,expected",
        [
            (0, Mood.CALM),
            (24, Mood.CALM),
            (25, Mood.NEUTRAL),
            (44, Mood.NEUTRAL),
            (45, Mood.ANXIOUS),
            (64, Mood.ANXIOUS),
            (65, Mood.FATIGUED),
            (79, Mood.FATIGUED),
            (80, Mood.OVERWHELMED),
            (100, Mood.OVERWHELMED),
        ],
    )
    def test_bands(self, score: int, expected: Mood):
        assert classify_mood(score, workload=1.0, sleep=1.0) == expected

    def test_override_boundaries(self):
        assert classify_mood(29, workload=0.5, sleep=0.25) == Mood.MOTIVATED
        assert classify_mood(30, workload=0.0, sleep=0.0) == Mood.NEUTRAL
        assert classify_mood(29, workload=0.75, sleep=0.0) == Mood.NEUTRAL
        assert classify_mood(10, workload=0.0, sleep=0.5) == Mood.CALM


class TestIntervention:
    @pytest.mark.parametrize(
        "score,priority,title",
        [
            (100, InterventionPriority.HIGH, "10min Guided Recovery"),
            (70, InterventionPriority.HIGH, "10min Guided Recovery"),
            (69, InterventionPriority.MEDIUM, "60s Breathing Exercise"),
            (45, InterventionPriority.MEDIUM, "60s Breathing Exercise"),
            (44, InterventionPriority.LOW, "30s Quick Breath"),
            (0, InterventionPriority.LOW, "30s Quick Breath"),
        ],
    )
    def test_thresholds(self, score: int, priority: InterventionPriority, title: str):
        intervention = select_intervention(score)
        assert intervention.priority == priority
        assert intervention.title == title


# ── Confidence ───────────────────────────────────────────────


class TestConfidence:
    def test_coverage(self):
        assert signal_coverage(0) == 1.0
        assert signal_coverage(2) == pytest.approx(1 - 2 / 6)
        assert signal_coverage(9) == 0.0

    def test_missing_typing_lowers_confidence(self, high_stress_payload: AssessmentPayload):
        complete = calculate_stress_score(high_stress_payload)
        missing = calculate_stress_score(make_payload(wpm=None, backspaces=None))
        # 0.6 * (4 / 6) + 0.4 * 1.0
        assert missing.confidence == 0.8
        assert missing.confidence < complete.confidence

    def test_consistency_needs_two_latencies(self):
        one = (QuestionAnswer(id="q1", kind=QuestionKind.MCQ, answer="Good", latency_ms=1000),)
        assert answer_consistency(one) == 0.8
        assert answer_consistency(()) == 0.8

    def test_consistency_from_latency_spread(self):
        def answers(*latencies: float) -> tuple[QuestionAnswer, ...]:
            return tuple(
                QuestionAnswer(id=f"q{i}", kind=QuestionKind.MCQ, answer="Good", latency_ms=ms)
                for i, ms in enumerate(latencies)
            )

        assert answer_consistency(answers(2000, 2000, 2000)) == 1.0
        # mean 2000, population sd 1000
        assert answer_consistency(answers(1000, 3000)) == pytest.approx(0.5)
        assert answer_consistency(answers(100, 10_000)) == 0.5
        # zero latencies are ignored
        assert answer_consistency(answers(0, 2000)) == 0.8


# ── Explanations ─────────────────────────────────────────────


class TestExplanations:
    def test_first_three_in_signal_order(self, high_stress_payload: AssessmentPayload):
        result = calculate_stress_score(high_stress_payload)
        assert result.explanations == (
            "Poor sleep quality reported",
            "Frequently feeling overwhelmed",
            "High workload indicated",
        )

    def test_behavioural_explanations(self):
        result = calculate_stress_score(
            make_payload(
                "Good", "Sometimes", "Busy", "Isolated",
                wpm=10.0, backspaces=15, chars=50, idle_total_ms=30_000.0,
            )
        )
        assert result.explanations == (
            "Feeling isolated from peers",
            "Slower typing speed detected",
            "High correction rate while typing",
        )

    def test_fallback(self, relaxed_payload: AssessmentPayload):
        assert calculate_stress_score(relaxed_payload).explanations == (FALLBACK_EXPLANATION,)

    def test_self_report_explanation_comes_last(self):
        result = calculate_stress_score(
            make_payload(
                "Fair", "Never", "Light", "Very connected",
                wpm=40.0, backspaces=0, chars=50, sentiment=1.0,
                choice_latency_ms=1500.0, slider=8,
            )
        )
        assert result.explanations == ("High self-reported stress level",)
        # 0.7 * 0.082 + 0.3 * 0.8
        assert result.stress_score == 30
        assert result.mood == Mood.NEUTRAL


# ── Signal breakdown ─────────────────────────────────────────


class TestExplainSignals:
    def test_weighted_sum_matches_score(self, high_stress_payload: AssessmentPayload):
        contributions = explain_signals(high_stress_payload)
        assert [c.signal for c in contributions] == [s.name for s in SIGNALS]
        assert sum(c.weighted for c in contributions) == pytest.approx(0.7767, abs=1e-4)

    def test_blend_adds_self_report(self):
        contributions = explain_signals(make_payload(slider=10))
        assert contributions[-1].signal == "self_report"
        assert contributions[-1].weight == pytest.approx(0.3)
        assert sum(c.weight for c in contributions) == pytest.approx(1.0)

    def test_missing_flags(self):
        contributions = {c.signal: c for c in explain_signals(make_payload(wpm=None, backspaces=None))}
        assert contributions["typing_speed"].missing
        assert contributions["correction_rate"].missing
        assert contributions["typing_speed"].value == 0.5
        assert not contributions["sentiment"].missing

    def test_no_free_text(self):
        payload = AssessmentPayload(
            user_id="U002",
            questions=(QuestionAnswer(id="q1", kind=QuestionKind.MCQ, answer="Good", latency_ms=3000),),
            typing_metrics=TypingMetricsSummary(),
        )
        values = {c.signal: c.value for c in explain_signals(payload)}
        assert values["sentiment"] == 0.5
        assert values["idle_pauses"] == 0.0
        assert values["choice_latency"] == pytest.approx(0.2)
        assert values["overwhelm"] == 0.5


# ── Presentation ─────────────────────────────────────────────


class TestPresentation:
    @pytest.mark.parametrize(
        "score,band",
        [
            (0, ColorBand.CALM),
            (24, ColorBand.CALM),
            (25, ColorBand.BALANCED),
            (45, ColorBand.RISING),
            (65, ColorBand.HIGH),
            (79, ColorBand.HIGH),
            (80, ColorBand.CRITICAL),
            (100, ColorBand.CRITICAL),
        ],
    )
    def test_color_bands(self, score: int, band: ColorBand):
        assert stress_score_to_color_band(score) == band

    def test_every_mood_has_emoji_and_label(self):
        for mood in Mood:
            assert mood_to_emoji(mood)
            assert mood_label(mood)

    def test_emoji(self):
        assert mood_to_emoji(Mood.CALM) == "\N{RELIEVED FACE}"
        assert mood_to_emoji("motivated") == "\N{FLEXED BICEPS}"

    def test_label(self):
        assert mood_label(Mood.CALM) == "Calm & Relaxed"
        assert mood_label(Mood.ANXIOUS) == "Mildly Anxious"
