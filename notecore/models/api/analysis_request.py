# notecore/models/api/analysis_request.py
"""
Text analysis API request models.
Used by routes for input validation.
"""

from pydantic import BaseModel, Field

MAX_TEXT_LENGTH = 200_000


class TextRequest(BaseModel):
    """Request carrying raw note text."""

    text: str = Field(..., max_length=MAX_TEXT_LENGTH, description="Note text to analyze")


class NoteAnalysisRequest(TextRequest):
    include_sarcasm: bool = Field(default=False, description="Also run sarcasm detection")


class SentimentRequest(TextRequest):
    language: str | None = Field(
        default=None,
        min_length=2,
        max_length=8,
        description="Language code for the lexicon (detected when omitted)",
    )


class JourneyRequest(TextRequest):
    language: str = Field(default="de", min_length=2, max_length=8, description="Lexicon language")
