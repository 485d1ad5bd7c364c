"""Signal analyzers — reduce raw assessment events to numeric summaries.

1. **Sentiment** (`sentiment.py`) — lexicon polarity of free text.
2. **Keystrokes** (`keystrokes.py`) — append-only keystroke log and a pure
   reducer for speed, pauses, corrections and rhythm.
3. **Latency** (`latency.py`) — per-question choice response time.
4. **Questionnaires** (`questionnaires.py`) — PSS-10 / GAD-7 / PHQ-9 totals.

Collectors are per-session objects; create one set per assessment.
"""

from neuroaura.analysis.keystrokes import (
    KeystrokeEvent,
    KeystrokeLog,
    TypingMetrics,
    compute_typing_metrics,
    summarize_typing,
)
from neuroaura.analysis.latency import ChoiceLatencyTracker, ChoiceMetric
from neuroaura.analysis.questionnaires import (
    Instrument,
    QuestionnaireError,
    QuestionnaireScore,
    score_questionnaire,
)
from neuroaura.analysis.sentiment import (
    SentimentPolarity,
    SentimentResult,
    analyze_sentiment,
    sentiment_polarity,
)

__all__ = [
    "ChoiceLatencyTracker",
    "ChoiceMetric",
    "Instrument",
    "KeystrokeEvent",
    "KeystrokeLog",
    "QuestionnaireError",
    "QuestionnaireScore",
    "SentimentPolarity",
    "SentimentResult",
    "TypingMetrics",
    "analyze_sentiment",
    "compute_typing_metrics",
    "score_questionnaire",
    "sentiment_polarity",
    "summarize_typing",
]
