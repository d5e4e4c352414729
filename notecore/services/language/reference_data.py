"""
Static per-language reference data for statistical language detection.

Candidate languages are kept in a fixed order so that scoring ties always
resolve the same way.
"""

from types import MappingProxyType

from notecore.models.domain.language_domain import LanguageCharacteristics, SentenceStructure

CANDIDATE_LANGUAGES: tuple[str, ...] = ("de", "en", "fr", "es", "it", "pt")

DEFAULT_LANGUAGE = "en"
DEFAULT_CONFIDENCE = 0.5

LANGUAGE_CHARACTERISTICS = MappingProxyType(
    {
        "de": LanguageCharacteristics(
            common_words=frozenset(
                ["der", "die", "das", "und", "ist", "zu", "mit", "auf", "für", "von",
                 "in", "an", "als", "auch", "es"]
            ),
            special_chars=frozenset("äöüß"),
            sentence_structure=SentenceStructure.V2,
            punctuation=frozenset("§%°"),
        ),
        "en": LanguageCharacteristics(
            common_words=frozenset(
                ["the", "and", "to", "of", "a", "in", "for", "is", "on", "that", "by",
                 "this", "with", "i", "it"]
            ),
            special_chars=frozenset(),
            sentence_structure=SentenceStructure.SVO,
        ),
        "fr": LanguageCharacteristics(
            common_words=frozenset(
                ["le", "de", "et", "à", "un", "il", "être", "en", "avoir", "que", "pour",
                 "dans", "ce", "son"]
            ),
            special_chars=frozenset("éèêëàâùôîïç"),
            sentence_structure=SentenceStructure.SVO,
        ),
        "es": LanguageCharacteristics(
            common_words=frozenset(
                ["el", "de", "que", "y", "a", "en", "un", "es", "se", "no", "te", "lo",
                 "le", "da", "su"]
            ),
            special_chars=frozenset("ñáéíóúü"),
            sentence_structure=SentenceStructure.SVO,
        ),
        "it": LanguageCharacteristics(
            common_words=frozenset(
                ["il", "che", "di", "e", "la", "per", "una", "in", "con", "del", "da",
                 "un", "è", "non", "mi"]
            ),
            special_chars=frozenset("àèéìíòóùú"),
            sentence_structure=SentenceStructure.SVO,
        ),
        "pt": LanguageCharacteristics(
            common_words=frozenset(
                ["o", "de", "a", "e", "do", "da", "em", "um", "para", "é", "com", "não",
                 "uma", "os", "no"]
            ),
            special_chars=frozenset("áàãâéêíóôõúç"),
            sentence_structure=SentenceStructure.SVO,
        ),
    }
)

STOP_WORDS = MappingProxyType(
    {
        "de": frozenset(
            ["der", "die", "das", "und", "ist", "zu", "mit", "auf", "für", "von", "in",
             "an", "als", "auch", "es", "ich", "du", "er", "sie", "wir", "ihr", "den",
             "dem", "des"]
        ),
        "en": frozenset(
            ["the", "and", "to", "of", "a", "in", "for", "is", "on", "that", "by", "this",
             "with", "i", "it", "you", "he", "she", "we", "they", "be", "have", "do",
             "will"]
        ),
        "fr": frozenset(
            ["le", "de", "et", "à", "un", "il", "être", "en", "avoir", "que", "pour",
             "dans", "ce", "son", "une", "sur", "avec", "ne", "se", "pas", "tout", "plus"]
        ),
        "es": frozenset(
            ["el", "de", "que", "y", "a", "en", "un", "es", "se", "no", "te", "lo", "le",
             "da", "su", "por", "son", "con", "para", "como", "las", "del"]
        ),
        "it": frozenset(
            ["il", "che", "di", "e", "la", "per", "una", "in", "con", "del", "da", "un",
             "è", "non", "mi", "ma", "se", "più", "lei", "questo"]
        ),
        "pt": frozenset(
            ["o", "de", "a", "e", "do", "da", "em", "um", "para", "é", "com", "não", "uma",
             "os", "no", "se", "na", "por", "mais", "as", "dos"]
        ),
    }
)

LANGUAGE_NAMES = MappingProxyType(
    {
        "de": "Deutsch",
        "en": "English",
        "fr": "Français",
        "es": "Español",
        "it": "Italiano",
        "pt": "Português",
        "nl": "Nederlands",
        "sv": "Svenska",
        "da": "Dansk",
        "no": "Norsk",
        "fi": "Suomi",
        "pl": "Polski",
        "cs": "Čeština",
        "hu": "Magyar",
        "ro": "Română",
        "bg": "Български",
        "hr": "Hrvatski",
        "sk": "Slovenčina",
        "sl": "Slovenščina",
        "et": "Eesti",
        "lv": "Latviešu",
        "lt": "Lietuvių",
        "ru": "Русский",
        "uk": "Українська",
        "be": "Беларуская",
        "zh": "中文",
        "ja": "日本語",
        "ko": "한국어",
        "ar": "العربية",
        "he": "עברית",
        "hi": "हिन्दी",
        "th": "ไทย",
        "vi": "Tiếng Việt",
        "id": "Bahasa Indonesia",
        "ms": "Bahasa Melayu",
        "tr": "Türkçe",
    }
)


def localized_language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code, code.upper())
