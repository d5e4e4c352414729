"""
Text statistics: counts, averages and readability for raw note text.
Pure functions, also used by the language and sentiment services for
tokenization.
"""

import re
import string

from notecore.models.domain.text_domain import TextAnalysis

WORDS_PER_MINUTE = 200

SENTENCE_BOUNDARY = re.compile(r"[.!?;…]+")
# Sentence-like units for per-segment analyses also break on commas and colons
SEGMENT_BOUNDARY = re.compile(r"[.!?;:,…\n]+")
PARAGRAPH_BOUNDARY = "\n\n"

_STRIP_CHARS = string.punctuation + "„“”‘’«»…–—"


def tokenize_words(text: str) -> list[str]:
    """Split on whitespace/newlines, dropping empty tokens."""
    return text.split()


def normalize_tokens(text: str) -> list[str]:
    """Lowercase word tokens with surrounding punctuation removed."""
    tokens = (token.strip(_STRIP_CHARS) for token in text.lower().split())
    return [token for token in tokens if token]


def split_sentences(text: str) -> list[str]:
    return [piece for piece in SENTENCE_BOUNDARY.split(text) if piece.strip()]


def split_segments(text: str) -> list[tuple[int, str]]:
    """
    Split text into punctuation-delimited segments.

    Returns:
        (position, stripped segment) for every non-blank segment; position is
        the segment's index among all pieces, blanks included.
    """
    return [
        (position, piece.strip())
        for position, piece in enumerate(SEGMENT_BOUNDARY.split(text))
        if piece.strip()
    ]


def split_paragraphs(text: str) -> list[str]:
    return [piece for piece in text.split(PARAGRAPH_BOUNDARY) if piece.strip()]


def estimate_reading_time(word_count: int) -> int:
    """Minutes at 200 wpm, never below one minute for non-empty text."""
    if word_count <= 0:
        return 0
    return max(1, word_count // WORDS_PER_MINUTE)


def analyze_text(text: str) -> TextAnalysis:
    """Compute statistics for text; blank input yields zeroed statistics."""
    stripped = text.strip()
    if not stripped:
        return TextAnalysis()

    word_count = len(tokenize_words(stripped))
    sentence_count = len(split_sentences(stripped))
    paragraph_count = len(split_paragraphs(stripped))
    avg_words_per_sentence = word_count / sentence_count if sentence_count > 0 else 0.0

    return TextAnalysis(
        char_count=len(stripped),
        word_count=word_count,
        sentence_count=sentence_count,
        paragraph_count=paragraph_count,
        avg_words_per_sentence=avg_words_per_sentence,
        estimated_reading_time=estimate_reading_time(word_count),
    )
