# notecore/models/domain/preferences_domain.py
"""
User prompt preference models.
Serialized as one JSON blob by the preferences service.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PromptLanguage(str, Enum):
    GERMAN = "de"
    ENGLISH = "en"
    FRENCH = "fr"
    SPANISH = "es"
    ITALIAN = "it"
    PORTUGUESE = "pt"


class PromptLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    UNLIMITED = "unlimited"

    @property
    def token_limit(self) -> int:
        return {
            PromptLength.SHORT: 1000,
            PromptLength.MEDIUM: 2500,
            PromptLength.LONG: 4000,
            PromptLength.UNLIMITED: 8000,
        }[self]


class ModelPreference(str, Enum):
    GPT4 = "gpt-4"
    GPT35 = "gpt-3.5"
    CLAUDE = "claude"
    GEMINI = "gemini"
    LOCAL = "local"
    AUTO = "auto"

    @property
    def is_premium(self) -> bool:
        return self in (ModelPreference.GPT4, ModelPreference.CLAUDE)


class ResponseFormat(str, Enum):
    STRUCTURED = "structured"
    NARRATIVE = "narrative"
    BULLET = "bullet"
    CONCISE = "concise"


class PromptTone(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    FORMAL = "formal"
    FRIENDLY = "friendly"
    TECHNICAL = "technical"


class DetailLevel(str, Enum):
    BRIEF = "brief"
    MEDIUM = "medium"
    COMPREHENSIVE = "comprehensive"
    EXHAUSTIVE = "exhaustive"


class ContentFiltering(str, Enum):
    NONE = "none"
    STANDARD = "standard"
    STRICT = "strict"
    CUSTOM = "custom"


class AccessibilitySettings(BaseModel):
    high_contrast: bool = False
    large_text: bool = False
    voice_output: bool = False
    keyboard_navigation: bool = True
    screen_reader_optimized: bool = False
    color_blind_friendly: bool = False


class UserPromptPreferences(BaseModel):
    """Everything the assistant needs to shape prompts for this user."""

    preferred_language: PromptLanguage = PromptLanguage.GERMAN
    auto_detect_language: bool = True
    default_prompt_length: PromptLength = PromptLength.MEDIUM
    enable_auto_optimization: bool = True
    enable_caching: bool = True
    cache_retention_days: int = Field(default=7, ge=0, le=365)
    enable_ab_testing: bool = False
    privacy_mode: bool = False
    model_preference: ModelPreference = ModelPreference.GPT4
    response_format: ResponseFormat = ResponseFormat.STRUCTURED
    tone: PromptTone = PromptTone.PROFESSIONAL
    detail_level: DetailLevel = DetailLevel.MEDIUM
    include_examples: bool = True
    include_context: bool = True
    enable_real_time_optimization: bool = True
    max_response_time: float = Field(default=30.0, gt=0)
    content_filtering: ContentFiltering = ContentFiltering.STANDARD
    accessibility: AccessibilitySettings = Field(default_factory=AccessibilitySettings)
    custom_prompts: dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)
    last_modified: datetime = Field(default_factory=_utcnow)
    version: str = "1.0"

    @property
    def is_german_preferred(self) -> bool:
        return self.preferred_language == PromptLanguage.GERMAN

    @property
    def should_use_cache(self) -> bool:
        return self.enable_caching and not self.privacy_mode

    @property
    def max_tokens(self) -> int:
        return self.default_prompt_length.token_limit


GERMAN_INDICATORS = ("der", "die", "das", "und", "ist", "mit", "auf")
ENGLISH_INDICATORS = ("the", "and", "is", "with", "for", "this", "that")


class LanguagePreferences(BaseModel):
    primary_language: PromptLanguage = PromptLanguage.GERMAN
    secondary_languages: list[PromptLanguage] = Field(
        default_factory=lambda: [PromptLanguage.ENGLISH]
    )
    auto_detect: bool = True
    fallback_language: PromptLanguage = PromptLanguage.ENGLISH
    show_translations: bool = False
    native_terms: bool = True
    formal_tone: bool = False

    @property
    def supported_languages(self) -> list[PromptLanguage]:
        ordered = [self.primary_language, *self.secondary_languages, self.fallback_language]
        return list(dict.fromkeys(ordered))

    def optimal_language(self, content: str) -> PromptLanguage:
        """Pick German or English for content by counting indicator words."""
        if not self.auto_detect:
            return self.primary_language

        words = set(content.lower().split())
        german_score = sum(1 for word in GERMAN_INDICATORS if word in words)
        english_score = sum(1 for word in ENGLISH_INDICATORS if word in words)
        if german_score == english_score:
            return self.primary_language
        return PromptLanguage.GERMAN if german_score > english_score else PromptLanguage.ENGLISH
