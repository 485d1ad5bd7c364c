"""Lexicon-based sentiment scoring for free-text answers.

The scorer is intentionally small and fully deterministic: four fixed word
lists, one left-to-right pass, no model.

Rules
-----
- A negation word flips the polarity of the *next* emotion word only.
  A negated positive counts as negative at full weight; a negated negative
  counts as positive at half weight ("not terrible" is weak relief, not joy).
- An intensifier immediately before an emotion word multiplies it by 1.5.
- Negation lapses after one intervening ordinary word.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from neuroaura.numeric import round_half_up

_PUNCTUATION = re.compile(r"[^\w\s]")

POSITIVE_WORDS = frozenset({
    "happy", "good", "great", "excellent", "wonderful", "amazing", "love", "excited",
    "hopeful", "confident", "calm", "peaceful", "relaxed", "motivated", "energetic",
    "optimistic", "grateful", "thankful", "proud", "accomplished", "successful",
    "better", "improved", "progress", "healthy", "strong", "capable", "focused",
})

NEGATIVE_WORDS = frozenset({
    "sad", "bad", "terrible", "awful", "horrible", "hate", "worried", "anxious",
    "stressed", "overwhelmed", "exhausted", "tired", "frustrated", "angry", "upset",
    "depressed", "hopeless", "scared", "afraid", "nervous", "panic", "pressure",
    "difficult", "hard", "struggling", "failing", "behind", "lost", "confused",
    "lonely", "isolated", "worthless", "useless", "burden", "burnout", "burned",
})

# Stored with apostrophes stripped: tokens lose their punctuation before lookup.
NEGATION_WORDS = frozenset(_PUNCTUATION.sub("", w) for w in (
    "not", "no", "never", "neither", "nobody", "nothing", "nowhere", "hardly",
    "barely", "scarcely", "don't", "doesn't", "didn't", "won't", "wouldn't",
    "couldn't", "shouldn't", "can't", "cannot", "isn't", "aren't", "wasn't",
))

INTENSIFIERS = frozenset({
    "very", "really", "extremely", "incredibly", "absolutely", "totally",
    "completely", "utterly", "highly", "so", "too", "super",
})

INTENSIFIER_MULTIPLIER = 1.5
NEGATED_NEGATIVE_WEIGHT = 0.5
MAX_EMOTION_WORDS = 10

# Polarity label cut-offs on the final score.
POSITIVE_THRESHOLD = 0.3
NEGATIVE_THRESHOLD = -0.3


class SentimentPolarity(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class SentimentResult(BaseModel):
    """Outcome of :func:`analyze_sentiment`.

    Counts are weighted sums (intensified words add 1.5, negated negatives
    add 0.5), so they are floats.
    """

    model_config = ConfigDict(frozen=True)

    score: float = Field(0.0, ge=-1.0, le=1.0)
    positive_count: float = 0.0
    negative_count: float = 0.0
    negation_count: int = 0
    emotion_words: tuple[str, ...] = ()


def tokenize(text: str) -> list[str]:
    """Lower-case, strip punctuation and split on whitespace."""
    return _PUNCTUATION.sub("", text.lower()).split()


def analyze_sentiment(text: str) -> SentimentResult:
    """Score *text* on a ``[-1, 1]`` polarity scale.

    Empty text, or text with no emotion words, scores 0.
    """
    words = tokenize(text)

    positive = 0.0
    negative = 0.0
    negations = 0
    emotion_words: list[str] = []
    negated = False
    multiplier = 1.0

    for i, word in enumerate(words):
        if word in NEGATION_WORDS:
            negated = True
            negations += 1
            continue

        if word in INTENSIFIERS:
            multiplier = INTENSIFIER_MULTIPLIER
            continue

        if word in POSITIVE_WORDS:
            if negated:
                negative += multiplier
                emotion_words.append(f"not {word}")
            else:
                positive += multiplier
                emotion_words.append(word)
            negated = False
            multiplier = 1.0
        elif word in NEGATIVE_WORDS:
            if negated:
                positive += multiplier * NEGATED_NEGATIVE_WEIGHT
                emotion_words.append(f"not {word}")
            else:
                negative += multiplier
                emotion_words.append(word)
            negated = False
            multiplier = 1.0
        else:
            # Ordinary word: negation survives one of these, not two.
            if i > 0 and words[i - 1] not in NEGATION_WORDS:
                negated = False
            multiplier = 1.0

    total = positive + negative
    score = (positive - negative) / total if total > 0 else 0.0

    return SentimentResult(
        score=round_half_up(score, 2),
        positive_count=positive,
        negative_count=negative,
        negation_count=negations,
        emotion_words=tuple(emotion_words[:MAX_EMOTION_WORDS]),
    )


def sentiment_polarity(score: float) -> SentimentPolarity:
    """Map a sentiment score to a coarse polarity label."""
    if score >= POSITIVE_THRESHOLD:
        return SentimentPolarity.POSITIVE
    if score <= NEGATIVE_THRESHOLD:
        return SentimentPolarity.NEGATIVE
    return SentimentPolarity.NEUTRAL

