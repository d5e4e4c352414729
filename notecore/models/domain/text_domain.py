# notecore/models/domain/text_domain.py
"""
Text statistics domain models.
"""

from dataclasses import dataclass
from enum import Enum

# Flesch Reading Ease constants
FLESCH_BASE = 206.835
FLESCH_SENTENCE_WEIGHT = 1.015
FLESCH_SYLLABLE_WEIGHT = 84.6

# Approximation: no syllable counter, average of 1.5 syllables per word
ESTIMATED_SYLLABLES_PER_WORD = 1.5


class TextComplexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    VERY_COMPLEX = "very_complex"


@dataclass(slots=True, frozen=True)
class TextAnalysis:
    """Counts and averages computed from raw note text."""

    char_count: int = 0
    word_count: int = 0
    sentence_count: int = 0
    paragraph_count: int = 0
    avg_words_per_sentence: float = 0.0
    estimated_reading_time: int = 0  # minutes at 200 wpm

    @property
    def readability_score(self) -> float:
        """Flesch Reading Ease approximation using a fixed syllable estimate."""
        if self.word_count == 0:
            return 0.0
        return (
            FLESCH_BASE
            - FLESCH_SENTENCE_WEIGHT * self.avg_words_per_sentence
            - FLESCH_SYLLABLE_WEIGHT * ESTIMATED_SYLLABLES_PER_WORD
        )

    @property
    def complexity(self) -> TextComplexity:
        if self.avg_words_per_sentence < 10:
            return TextComplexity.SIMPLE
        if self.avg_words_per_sentence < 20:
            return TextComplexity.MODERATE
        if self.avg_words_per_sentence < 30:
            return TextComplexity.COMPLEX
        return TextComplexity.VERY_COMPLEX

    def to_dict(self) -> dict:
        return {
            "char_count": self.char_count,
            "word_count": self.word_count,
            "sentence_count": self.sentence_count,
            "paragraph_count": self.paragraph_count,
            "avg_words_per_sentence": round(self.avg_words_per_sentence, 2),
            "estimated_reading_time": self.estimated_reading_time,
            "readability_score": round(self.readability_score, 2),
            "complexity": self.complexity.value,
        }
