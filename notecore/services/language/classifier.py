"""
Language classifier.

Combines a ranked hypothesis source with an internal statistical scorer
(common words, stop words, special characters, character 3-grams) into a
single language code and confidence.
"""

import asyncio
import re
from collections.abc import Iterator

from notecore.infrastructure.observability.logging import get_logger
from notecore.models.domain.language_domain import (
    DetectedLanguage,
    LanguageDetectionResult,
    LanguageMixingAnalysis,
    LanguageSegment,
)
from notecore.services.language.hypothesis import (
    MAX_HYPOTHESES,
    HypothesisSource,
    ProfileHypothesisSource,
)
from notecore.services.language.reference_data import (
    CANDIDATE_LANGUAGES,
    DEFAULT_CONFIDENCE,
    DEFAULT_LANGUAGE,
    LANGUAGE_CHARACTERISTICS,
    STOP_WORDS,
    localized_language_name,
)
from notecore.services.text.statistics import normalize_tokens, split_segments

logger = get_logger(__name__)

# Scoring weights
COMMON_WORD_WEIGHT = 2.0
SPECIAL_CHAR_WEIGHT = 3.0
NGRAM_WEIGHT = 1.0
STOP_WORD_WEIGHT = 1.5
NGRAM_SIZE = 3
NGRAM_DIVERSITY_FACTOR = 0.1

# Combination weights
NLP_WEIGHT = 0.6
STATISTICAL_WEIGHT = 0.4

MAX_MIXING_LANGUAGES = 5.0
MIXING_THRESHOLD = 0.3

_NON_LETTERS = re.compile(r"[^a-zäöüßáéíóúàèìòùñçâêîôûãõëï]")


def _clamp(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


def default_detection() -> DetectedLanguage:
    return DetectedLanguage(
        code=DEFAULT_LANGUAGE,
        confidence=DEFAULT_CONFIDENCE,
        localized_name=localized_language_name(DEFAULT_LANGUAGE),
    )


def combine_results(
    nlp_result: LanguageDetectionResult, statistical_result: LanguageDetectionResult
) -> DetectedLanguage:
    """
    Weighted combination of the two detection sources.

    The final code comes from the more confident source; the hypothesis
    source wins ties.
    """
    nlp_confidence = _clamp(nlp_result.confidence)
    statistical_confidence = _clamp(statistical_result.confidence)

    combined = NLP_WEIGHT * nlp_confidence + STATISTICAL_WEIGHT * statistical_confidence
    code = (
        nlp_result.language_code
        if nlp_confidence >= statistical_confidence
        else statistical_result.language_code
    )
    return DetectedLanguage(
        code=code,
        confidence=_clamp(combined),
        localized_name=localized_language_name(code),
    )


def extract_character_ngrams(text: str, size: int = NGRAM_SIZE) -> dict[str, int]:
    clean_text = _NON_LETTERS.sub(" ", text.lower())
    ngrams: dict[str, int] = {}
    for i in range(len(clean_text) - size + 1):
        ngram = clean_text[i : i + size]
        ngrams[ngram] = ngrams.get(ngram, 0) + 1
    return ngrams


class LanguageClassifier:
    """
    Detects the language of note text.

    Detection runs in a worker thread so awaiting callers never block the
    event loop.
    """

    def __init__(
        self,
        hypothesis_source: HypothesisSource | None = None,
        languages: tuple[str, ...] = CANDIDATE_LANGUAGES,
    ):
        self.hypothesis_source = hypothesis_source or ProfileHypothesisSource(languages)
        self.languages = languages

    async def detect(self, text: str) -> DetectedLanguage:
        return await asyncio.to_thread(self.detect_sync, text)

    def detect_sync(self, text: str) -> DetectedLanguage:
        normalized = text.strip()
        if not normalized:
            return default_detection()

        nlp_result = self._detect_with_hypotheses(normalized)
        statistical_result = self._detect_with_statistics(normalized)
        detected = combine_results(nlp_result, statistical_result)

        logger.debug(
            "Language detected",
            language=detected.code,
            confidence=round(detected.confidence, 3),
            nlp_language=nlp_result.language_code,
            statistical_language=statistical_result.language_code,
        )
        return detected

    def _detect_with_hypotheses(self, text: str) -> LanguageDetectionResult:
        hypotheses = self.hypothesis_source.rank(text, MAX_HYPOTHESES)
        if not hypotheses:
            return LanguageDetectionResult(DEFAULT_LANGUAGE, DEFAULT_CONFIDENCE, nlp_based=True)

        code, probability = hypotheses[0]
        return LanguageDetectionResult(code, _clamp(probability), nlp_based=True)

    def _detect_with_statistics(self, text: str) -> LanguageDetectionResult:
        scores = self._score_languages(text)
        if not scores:
            return LanguageDetectionResult(
                DEFAULT_LANGUAGE, DEFAULT_CONFIDENCE, statistical_based=True
            )

        best_language = None
        best_score = float("-inf")
        for code, score in scores.items():
            # Strict comparison: first candidate wins ties
            if score > best_score:
                best_language, best_score = code, score

        max_score = max(scores.values())
        if max_score <= 0:
            return LanguageDetectionResult(
                DEFAULT_LANGUAGE, DEFAULT_CONFIDENCE, statistical_based=True
            )

        return LanguageDetectionResult(
            best_language, min(best_score / max_score, 1.0), statistical_based=True
        )

    def _score_languages(self, text: str) -> dict[str, float]:
        """Per-language statistical score, in candidate order."""
        words = normalize_tokens(text)
        lowered = text.lower()
        ngram_score = len(extract_character_ngrams(text)) * NGRAM_DIVERSITY_FACTOR
        word_total = max(len(words), 1)

        scores: dict[str, float] = {}
        has_evidence = False
        for code in self.languages:
            characteristics = LANGUAGE_CHARACTERISTICS[code]
            stop_words = STOP_WORDS.get(code, frozenset())

            common_word_matches = sum(1 for word in words if word in characteristics.common_words)
            special_char_matches = sum(1 for char in lowered if char in characteristics.special_chars)
            stop_word_matches = sum(1 for word in words if word in stop_words)
            if common_word_matches or special_char_matches or stop_word_matches:
                has_evidence = True

            score = (
                COMMON_WORD_WEIGHT * common_word_matches
                + SPECIAL_CHAR_WEIGHT * special_char_matches
                + NGRAM_WEIGHT * ngram_score
                + STOP_WORD_WEIGHT * stop_word_matches
            )
            scores[code] = score / word_total

        # N-gram diversity is language-neutral and cannot decide on its own
        return scores if has_evidence else {}

    # Advanced detection

    def iter_language_segments(self, text: str) -> Iterator[LanguageSegment]:
        """Lazily detect the language of every sentence-like unit."""
        for position, segment in split_segments(text):
            language = self.detect_sync(segment)
            yield LanguageSegment(
                position=position,
                text=segment,
                language=language,
                confidence=language.confidence,
            )

    def detect_language_change_sync(self, text: str) -> list[LanguageSegment]:
        return list(self.iter_language_segments(text))

    async def detect_language_change(self, text: str) -> list[LanguageSegment]:
        return await asyncio.to_thread(self.detect_language_change_sync, text)

    def analyze_mixing_sync(self, text: str) -> LanguageMixingAnalysis:
        segments = self.detect_language_change_sync(text)

        distribution: dict[str, int] = {}
        for segment in segments:
            distribution[segment.language.code] = distribution.get(segment.language.code, 0) + 1

        dominant = "unknown"
        dominant_count = 0
        for code, count in distribution.items():
            if count > dominant_count:
                dominant, dominant_count = code, count

        mixing_score = (
            min(len(distribution) / MAX_MIXING_LANGUAGES, 1.0) if segments else 0.0
        )
        return LanguageMixingAnalysis(
            is_mixed_language=mixing_score > MIXING_THRESHOLD,
            mixing_score=mixing_score,
            language_distribution=distribution,
            dominant_language=dominant,
            segments=segments,
        )

    async def analyze_mixing(self, text: str) -> LanguageMixingAnalysis:
        return await asyncio.to_thread(self.analyze_mixing_sync, text)
