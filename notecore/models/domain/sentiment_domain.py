# notecore/models/domain/sentiment_domain.py
"""
Sentiment domain models: polarity, emotions and derived analyses.
"""

from dataclasses import dataclass, field
from enum import Enum


class SentimentPolarity(str, Enum):
    VERY_NEGATIVE = "very_negative"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    POSITIVE = "positive"
    VERY_POSITIVE = "very_positive"

    @property
    def score(self) -> float:
        return _POLARITY_SCORES[self]


_POLARITY_SCORES = {
    SentimentPolarity.VERY_NEGATIVE: -1.0,
    SentimentPolarity.NEGATIVE: -0.5,
    SentimentPolarity.NEUTRAL: 0.0,
    SentimentPolarity.POSITIVE: 0.5,
    SentimentPolarity.VERY_POSITIVE: 1.0,
}


class EmotionType(str, Enum):
    JOY = "joy"
    SADNESS = "sadness"
    ANGER = "anger"
    FEAR = "fear"
    SURPRISE = "surprise"
    DISGUST = "disgust"
    TRUST = "trust"
    ANTICIPATION = "anticipation"


@dataclass(slots=True, frozen=True)
class Emotion:
    type: EmotionType
    confidence: float
    intensity: float

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "confidence": round(self.confidence, 4),
            "intensity": round(self.intensity, 4),
        }


@dataclass(slots=True, frozen=True)
class SentimentAnalysis:
    polarity: SentimentPolarity
    confidence: float
    intensity: float
    emotions: list[Emotion] = field(default_factory=list)

    @property
    def dominant_emotion(self) -> Emotion | None:
        if not self.emotions:
            return None
        return max(self.emotions, key=lambda e: e.confidence)

    def to_dict(self) -> dict:
        return {
            "polarity": self.polarity.value,
            "polarity_score": self.polarity.score,
            "confidence": round(self.confidence, 4),
            "intensity": round(self.intensity, 4),
            "emotions": [emotion.to_dict() for emotion in self.emotions],
        }


@dataclass(slots=True, frozen=True)
class EmotionalMoment:
    """Sentiment of one punctuation-delimited segment."""

    position: int
    text: str
    sentiment: SentimentPolarity
    intensity: float
    emotions: list[Emotion] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "text": self.text,
            "sentiment": self.sentiment.value,
            "intensity": round(self.intensity, 4),
            "emotions": [emotion.to_dict() for emotion in self.emotions],
        }


@dataclass(slots=True, frozen=True)
class SarcasmAnalysis:
    has_sarcasm: bool
    confidence: float
    indicators: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "has_sarcasm": self.has_sarcasm,
            "confidence": round(self.confidence, 4),
            "indicators": list(self.indicators),
        }
