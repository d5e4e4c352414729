"""
Language hypothesis sources.

The classifier only needs something that ranks candidate languages for a
text; the default implementation is a frequency-profile ranker built from
the same reference data the statistical scorer uses.
"""

from typing import Protocol

from notecore.services.language.reference_data import (
    CANDIDATE_LANGUAGES,
    LANGUAGE_CHARACTERISTICS,
    STOP_WORDS,
)
from notecore.services.text.statistics import normalize_tokens

MAX_HYPOTHESES = 5
SPECIAL_CHAR_WEIGHT = 2


class HypothesisSource(Protocol):
    def rank(self, text: str, max_hypotheses: int = MAX_HYPOTHESES) -> list[tuple[str, float]]:
        """Return (language_code, probability) pairs, most likely first."""
        ...


class ProfileHypothesisSource:
    """Rank languages by the share of profile hits each language collects."""

    def __init__(self, languages: tuple[str, ...] = CANDIDATE_LANGUAGES):
        self.languages = languages
        self._profiles = {
            code: STOP_WORDS.get(code, frozenset()) | LANGUAGE_CHARACTERISTICS[code].common_words
            for code in languages
        }

    def rank(self, text: str, max_hypotheses: int = MAX_HYPOTHESES) -> list[tuple[str, float]]:
        tokens = normalize_tokens(text)
        lowered = text.lower()

        hits: dict[str, int] = {}
        for code in self.languages:
            profile = self._profiles[code]
            special_chars = LANGUAGE_CHARACTERISTICS[code].special_chars
            word_hits = sum(1 for token in tokens if token in profile)
            char_hits = sum(1 for char in lowered if char in special_chars)
            hits[code] = word_hits + SPECIAL_CHAR_WEIGHT * char_hits

        total = sum(hits.values())
        if total == 0:
            return []

        # sorted() is stable, so equal shares keep candidate order
        ranked = sorted(
            ((code, count / total) for code, count in hits.items() if count > 0),
            key=lambda pair: pair[1],
            reverse=True,
        )
        return ranked[:max_hypotheses]
