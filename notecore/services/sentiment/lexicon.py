"""
Sentiment lexicons.

Per-language positive/negative word sets plus the language-independent
intensifier, emotion keyword and sarcasm indicator tables. Add a language by
adding an entry to SENTIMENT_LEXICONS.
"""

from dataclasses import dataclass
from types import MappingProxyType

from notecore.models.domain.sentiment_domain import EmotionType


@dataclass(slots=True, frozen=True)
class SentimentLexicon:
    positive: frozenset[str]
    negative: frozenset[str]

    def is_indicator(self, word: str) -> bool:
        return word in self.positive or word in self.negative


GERMAN_LEXICON = SentimentLexicon(
    positive=frozenset(
        ["gut", "toll", "super", "großartig", "fantastisch", "ausgezeichnet", "perfekt",
         "schön", "freude", "glücklich", "zufrieden", "erfolgreich", "stark", "klar",
         "deutlich", "überzeugend", "positiv", "optimistisch", "interessant", "innovativ",
         "kreativ", "dynamisch", "flexibel", "sicher", "stabil", "kontinuierlich",
         "intelligent", "professionell"]
    ),
    negative=frozenset(
        ["schlecht", "furchtbar", "schrecklich", "schlimm", "negativ", "traurig",
         "frustriert", "enttäuscht", "ärgerlich", "wütend", "unsicher", "instabil",
         "kritisch", "problematisch", "kompliziert", "überfordernd", "stressig", "mühsam",
         "schwierig", "schwach", "fehlerhaft", "inkonsistent", "langsam", "veraltet",
         "ineffizient"]
    ),
)

ENGLISH_LEXICON = SentimentLexicon(
    positive=frozenset(
        ["good", "great", "excellent", "amazing", "fantastic", "wonderful", "perfect",
         "beautiful", "happy", "joy", "satisfied", "successful", "strong", "clear",
         "convincing", "positive", "optimistic", "interesting", "innovative", "creative",
         "dynamic", "flexible", "secure", "stable", "intelligent", "professional"]
    ),
    negative=frozenset(
        ["bad", "terrible", "awful", "horrible", "negative", "sad", "frustrated",
         "disappointed", "angry", "mad", "unsafe", "unstable", "critical", "problematic",
         "complicated", "overwhelming", "stressful", "difficult", "weak", "buggy",
         "inconsistent", "slow", "outdated", "inefficient"]
    ),
)

SENTIMENT_LEXICONS = MappingProxyType({"de": GERMAN_LEXICON, "en": ENGLISH_LEXICON})
FALLBACK_LEXICON_LANGUAGE = "en"

INTENSIFIERS = frozenset(
    ["sehr", "wirklich", "extrem", "total", "absolut",
     "very", "really", "extremely", "totally", "absolutely"]
)

# Ordered keyword -> emotion table, matched as substrings of the lowercased text
EMOTION_KEYWORDS: tuple[tuple[str, EmotionType], ...] = (
    ("freude", EmotionType.JOY),
    ("glück", EmotionType.JOY),
    ("lachen", EmotionType.JOY),
    ("fröhlich", EmotionType.JOY),
    ("trauer", EmotionType.SADNESS),
    ("traurig", EmotionType.SADNESS),
    ("kummer", EmotionType.SADNESS),
    ("verlust", EmotionType.SADNESS),
    ("wut", EmotionType.ANGER),
    ("ärger", EmotionType.ANGER),
    ("frustriert", EmotionType.ANGER),
    ("verärgert", EmotionType.ANGER),
    ("angst", EmotionType.FEAR),
    ("furcht", EmotionType.FEAR),
    ("beängstigend", EmotionType.FEAR),
    ("sorge", EmotionType.FEAR),
    ("überraschung", EmotionType.SURPRISE),
    ("erstaunlich", EmotionType.SURPRISE),
    ("unerwartet", EmotionType.SURPRISE),
    ("ekel", EmotionType.DISGUST),
    ("abstoßend", EmotionType.DISGUST),
    ("widerlich", EmotionType.DISGUST),
    ("vertrauen", EmotionType.TRUST),
    ("zuversichtlich", EmotionType.TRUST),
    ("glaubwürdig", EmotionType.TRUST),
    ("erwartung", EmotionType.ANTICIPATION),
    ("hoffnung", EmotionType.ANTICIPATION),
    ("spannend", EmotionType.ANTICIPATION),
)

SARCASM_INDICATORS: tuple[str, ...] = (
    "ironisch",
    "sarkastisch",
    "klar doch",
    "natürlich",
    "ach so",
    "ironic",
    "sarcastic",
    "of course",
    "oh really",
    "yeah right",
)


def lexicon_for(language_code: str) -> SentimentLexicon:
    code = language_code.lower()[:2]
    return SENTIMENT_LEXICONS.get(code, SENTIMENT_LEXICONS[FALLBACK_LEXICON_LANGUAGE])
