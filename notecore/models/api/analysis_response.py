# notecore/models/api/analysis_response.py
"""
Text analysis API response models.
Used by routes for output formatting.
"""

from pydantic import BaseModel, Field


class TextStatisticsResponse(BaseModel):
    char_count: int = Field(..., description="Characters, surrounding whitespace excluded")
    word_count: int = Field(..., description="Whitespace-separated words")
    sentence_count: int
    paragraph_count: int
    avg_words_per_sentence: float
    estimated_reading_time: int = Field(..., description="Minutes at 200 words per minute")
    readability_score: float = Field(..., description="Flesch reading ease approximation")
    complexity: str


class DetectedLanguageResponse(BaseModel):
    code: str = Field(..., description="ISO 639-1 language code")
    confidence: float = Field(..., ge=0.0, le=1.0)
    is_reliable: bool
    localized_name: str


class LanguageSegmentResponse(BaseModel):
    position: int
    text: str
    language: DetectedLanguageResponse
    confidence: float


class LanguageSegmentsResponse(BaseModel):
    segments: list[LanguageSegmentResponse]
    total_count: int


class LanguageMixingResponse(BaseModel):
    is_mixed_language: bool
    mixing_score: float
    language_distribution: dict[str, int]
    dominant_language: str
    segments: list[LanguageSegmentResponse]


class EmotionResponse(BaseModel):
    type: str
    confidence: float
    intensity: float


class SentimentResponse(BaseModel):
    polarity: str
    polarity_score: float
    confidence: float
    intensity: float
    emotions: list[EmotionResponse]
    language: str | None = Field(None, description="Lexicon language used")


class EmotionalMomentResponse(BaseModel):
    position: int
    text: str
    sentiment: str
    intensity: float
    emotions: list[EmotionResponse]


class EmotionalJourneyResponse(BaseModel):
    moments: list[EmotionalMomentResponse]
    total_count: int


class SarcasmResponse(BaseModel):
    has_sarcasm: bool
    confidence: float
    indicators: list[str]


class NoteAnalysisResponse(BaseModel):
    statistics: TextStatisticsResponse
    language: DetectedLanguageResponse
    sentiment: SentimentResponse
    sarcasm: SarcasmResponse | None = None
