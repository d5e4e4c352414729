"""
Text intelligence pipeline: statistics -> language -> sentiment.
"""

import asyncio
from dataclasses import dataclass

from notecore.infrastructure.observability.logging import get_logger
from notecore.models.domain.language_domain import DetectedLanguage
from notecore.models.domain.sentiment_domain import SarcasmAnalysis, SentimentAnalysis
from notecore.models.domain.text_domain import TextAnalysis
from notecore.services.language.classifier import LanguageClassifier
from notecore.services.sentiment.engine import SentimentEngine
from notecore.services.text.statistics import analyze_text

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class NoteInsight:
    statistics: TextAnalysis
    language: DetectedLanguage
    sentiment: SentimentAnalysis
    sarcasm: SarcasmAnalysis | None = None

    def to_dict(self) -> dict:
        return {
            "statistics": self.statistics.to_dict(),
            "language": self.language.to_dict(),
            "sentiment": self.sentiment.to_dict(),
            "sarcasm": self.sarcasm.to_dict() if self.sarcasm else None,
        }


class TextIntelligenceService:
    def __init__(
        self,
        classifier: LanguageClassifier | None = None,
        sentiment_engine: SentimentEngine | None = None,
    ):
        self.classifier = classifier or LanguageClassifier()
        self.sentiment_engine = sentiment_engine or SentimentEngine()

    async def analyze(self, text: str, include_sarcasm: bool = False) -> NoteInsight:
        """Run the full analysis; sentiment uses the detected language's lexicon."""
        statistics = await asyncio.to_thread(analyze_text, text)
        language = await self.classifier.detect(text)
        sentiment = await self.sentiment_engine.analyze(text, language)
        sarcasm = await self.sentiment_engine.detect_sarcasm(text) if include_sarcasm else None

        logger.info(
            "Note analyzed",
            word_count=statistics.word_count,
            language=language.code,
            language_reliable=language.is_reliable,
            polarity=sentiment.polarity.value,
        )
        return NoteInsight(
            statistics=statistics, language=language, sentiment=sentiment, sarcasm=sarcasm
        )
