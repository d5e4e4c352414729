# notecore/models/domain/language_domain.py
"""
Language detection domain models.
Immutable values produced per detection call, never persisted.
"""

from dataclasses import dataclass, field
from enum import Enum

RELIABILITY_THRESHOLD = 0.7


class SentenceStructure(str, Enum):
    SVO = "svo"
    SOV = "sov"
    VSO = "vso"
    OSV = "osv"
    VOS = "vos"
    V2 = "v2"


@dataclass(slots=True, frozen=True)
class LanguageCharacteristics:
    """Static reference data for one candidate language."""

    common_words: frozenset[str]
    special_chars: frozenset[str]
    sentence_structure: SentenceStructure
    punctuation: frozenset[str] = frozenset()


@dataclass(slots=True, frozen=True)
class LanguageDetectionResult:
    """Intermediate result of one detection source (hypothesis or statistical)."""

    language_code: str
    confidence: float
    nlp_based: bool = False
    statistical_based: bool = False


@dataclass(slots=True, frozen=True)
class DetectedLanguage:
    code: str
    confidence: float
    localized_name: str

    @property
    def is_reliable(self) -> bool:
        return self.confidence > RELIABILITY_THRESHOLD

    @property
    def is_english(self) -> bool:
        return self.code.lower().startswith("en")

    @property
    def is_german(self) -> bool:
        return self.code.lower().startswith("de")

    @property
    def is_multilingual(self) -> bool:
        return self.confidence < RELIABILITY_THRESHOLD

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "confidence": round(self.confidence, 4),
            "is_reliable": self.is_reliable,
            "localized_name": self.localized_name,
        }


@dataclass(slots=True, frozen=True)
class LanguageSegment:
    position: int
    text: str
    language: DetectedLanguage
    confidence: float

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "text": self.text,
            "language": self.language.to_dict(),
            "confidence": round(self.confidence, 4),
        }


@dataclass(slots=True, frozen=True)
class LanguageMixingAnalysis:
    is_mixed_language: bool
    mixing_score: float
    language_distribution: dict[str, int]
    dominant_language: str
    segments: list[LanguageSegment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "is_mixed_language": self.is_mixed_language,
            "mixing_score": round(self.mixing_score, 4),
            "language_distribution": dict(self.language_distribution),
            "dominant_language": self.dominant_language,
            "segments": [segment.to_dict() for segment in self.segments],
        }
