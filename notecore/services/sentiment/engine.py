"""
Lexicon-based sentiment engine.

Scores polarity, intensity and emotions for note text in the language the
classifier detected. This scorer is the only sentiment source; there is no
trained model behind it.
"""

import asyncio

from notecore.infrastructure.observability.logging import get_logger
from notecore.models.domain.language_domain import DetectedLanguage
from notecore.models.domain.sentiment_domain import (
    Emotion,
    EmotionalMoment,
    SarcasmAnalysis,
    SentimentAnalysis,
    SentimentPolarity,
)
from notecore.services.sentiment.lexicon import (
    EMOTION_KEYWORDS,
    INTENSIFIERS,
    SARCASM_INDICATORS,
    SentimentLexicon,
    lexicon_for,
)
from notecore.services.text.statistics import normalize_tokens, split_segments

logger = get_logger(__name__)

VERY_POSITIVE_THRESHOLD = 0.3
POSITIVE_THRESHOLD = 0.1
INTENSITY_SCALE = 5.0
MIN_WORDS_FOR_CONFIDENCE = 10.0
SARCASM_INDICATOR_WEIGHT = 0.2
SARCASM_THRESHOLD = 0.3
JOURNEY_DEFAULT_LANGUAGE = "de"


def _language_code(language: DetectedLanguage | str) -> str:
    return language.code if isinstance(language, DetectedLanguage) else language


def determine_polarity(score: float) -> SentimentPolarity:
    if score > VERY_POSITIVE_THRESHOLD:
        return SentimentPolarity.VERY_POSITIVE
    if score > POSITIVE_THRESHOLD:
        return SentimentPolarity.POSITIVE
    if score < -VERY_POSITIVE_THRESHOLD:
        return SentimentPolarity.VERY_NEGATIVE
    if score < -POSITIVE_THRESHOLD:
        return SentimentPolarity.NEGATIVE
    return SentimentPolarity.NEUTRAL


class SentimentEngine:
    async def analyze(self, text: str, language: DetectedLanguage | str) -> SentimentAnalysis:
        return await asyncio.to_thread(self.analyze_sync, text, language)

    def analyze_sync(self, text: str, language: DetectedLanguage | str) -> SentimentAnalysis:
        words = normalize_tokens(text)
        if not words:
            return SentimentAnalysis(
                polarity=SentimentPolarity.NEUTRAL, confidence=0.0, intensity=0.0, emotions=[]
            )

        lexicon = lexicon_for(_language_code(language))
        score = self._sentiment_score(words, lexicon)
        analysis = SentimentAnalysis(
            polarity=determine_polarity(score),
            confidence=self._confidence(words, lexicon),
            intensity=self._intensity(words),
            emotions=self._extract_emotions(text),
        )

        logger.debug(
            "Sentiment analyzed",
            language=_language_code(language),
            polarity=analysis.polarity.value,
            score=round(score, 3),
            emotions=len(analysis.emotions),
        )
        return analysis

    def _sentiment_score(self, words: list[str], lexicon: SentimentLexicon) -> float:
        if not words:
            return 0.0
        positive = sum(1 for word in words if word in lexicon.positive)
        negative = sum(1 for word in words if word in lexicon.negative)
        return (positive - negative) / len(words)

    def _intensity(self, words: list[str]) -> float:
        if not words:
            return 0.0
        intensifiers = sum(1 for word in words if word in INTENSIFIERS)
        return min(intensifiers / len(words) * INTENSITY_SCALE, 1.0)

    def _extract_emotions(self, text: str) -> list[Emotion]:
        lowered = text.lower()
        if not lowered:
            return []

        emotions: list[Emotion] = []
        for keyword, emotion_type in EMOTION_KEYWORDS:
            occurrences = lowered.count(keyword)
            if occurrences == 0:
                continue
            # Normalized by text length per 100 characters
            confidence = min(occurrences / (len(text) / 100.0), 1.0)
            emotions.append(Emotion(type=emotion_type, confidence=confidence, intensity=confidence))
        return emotions

    def _confidence(self, words: list[str], lexicon: SentimentLexicon) -> float:
        if not words:
            return 0.0
        length_confidence = min(len(words) / MIN_WORDS_FOR_CONFIDENCE, 1.0)
        indicators = sum(1 for word in words if lexicon.is_indicator(word))
        indicator_confidence = indicators / len(words)
        return (length_confidence + indicator_confidence) / 2.0

    # Advanced analysis

    def emotional_journey_sync(
        self, text: str, language: DetectedLanguage | str = JOURNEY_DEFAULT_LANGUAGE
    ) -> list[EmotionalMoment]:
        lexicon = lexicon_for(_language_code(language))
        journey: list[EmotionalMoment] = []
        for position, segment in split_segments(text):
            words = normalize_tokens(segment)
            journey.append(
                EmotionalMoment(
                    position=position,
                    text=segment,
                    sentiment=determine_polarity(self._sentiment_score(words, lexicon)),
                    intensity=self._intensity(words),
                    emotions=self._extract_emotions(segment),
                )
            )
        return journey

    async def emotional_journey(
        self, text: str, language: DetectedLanguage | str = JOURNEY_DEFAULT_LANGUAGE
    ) -> list[EmotionalMoment]:
        return await asyncio.to_thread(self.emotional_journey_sync, text, language)

    def detect_sarcasm_sync(self, text: str) -> SarcasmAnalysis:
        lowered = text.lower()
        indicators = [indicator for indicator in SARCASM_INDICATORS if indicator in lowered]
        score = SARCASM_INDICATOR_WEIGHT * len(indicators)
        return SarcasmAnalysis(
            has_sarcasm=score > SARCASM_THRESHOLD,
            confidence=min(score, 1.0),
            indicators=indicators,
        )

    async def detect_sarcasm(self, text: str) -> SarcasmAnalysis:
        return await asyncio.to_thread(self.detect_sarcasm_sync, text)
