"""
Text analysis API routes.
HTTP endpoints for statistics, language detection and sentiment.
"""

from fastapi import APIRouter, Depends

from notecore.container import ServiceContainer
from notecore.infrastructure.observability.logging import get_logger
from notecore.models.api.analysis_request import (
    JourneyRequest,
    NoteAnalysisRequest,
    SentimentRequest,
    TextRequest,
)
from notecore.models.api.analysis_response import (
    DetectedLanguageResponse,
    EmotionalJourneyResponse,
    LanguageMixingResponse,
    LanguageSegmentsResponse,
    NoteAnalysisResponse,
    SarcasmResponse,
    SentimentResponse,
    TextStatisticsResponse,
)
from notecore.routes.dependencies import get_services
from notecore.services.text.statistics import analyze_text

logger = get_logger(__name__)

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.post("", response_model=NoteAnalysisResponse)
async def analyze_note(
    request: NoteAnalysisRequest, services: ServiceContainer = Depends(get_services)
):
    """Statistics, language and sentiment in one call."""
    insight = await services.text_intelligence.analyze(
        request.text, include_sarcasm=request.include_sarcasm
    )
    body = insight.to_dict()
    body["sentiment"]["language"] = insight.language.code
    return NoteAnalysisResponse.model_validate(body)


@router.post("/statistics", response_model=TextStatisticsResponse)
async def text_statistics(request: TextRequest):
    return TextStatisticsResponse.model_validate(analyze_text(request.text).to_dict())


@router.post("/language", response_model=DetectedLanguageResponse)
async def detect_language(request: TextRequest, services: ServiceContainer = Depends(get_services)):
    detected = await services.classifier.detect(request.text)
    return DetectedLanguageResponse.model_validate(detected.to_dict())


@router.post("/language/segments", response_model=LanguageSegmentsResponse)
async def language_segments(
    request: TextRequest, services: ServiceContainer = Depends(get_services)
):
    segments = await services.classifier.detect_language_change(request.text)
    return LanguageSegmentsResponse(
        segments=[segment.to_dict() for segment in segments], total_count=len(segments)
    )


@router.post("/language/mixing", response_model=LanguageMixingResponse)
async def language_mixing(request: TextRequest, services: ServiceContainer = Depends(get_services)):
    analysis = await services.classifier.analyze_mixing(request.text)
    return LanguageMixingResponse.model_validate(analysis.to_dict())


@router.post("/sentiment", response_model=SentimentResponse)
async def sentiment(request: SentimentRequest, services: ServiceContainer = Depends(get_services)):
    """Sentiment for the given language, or the detected one when omitted."""
    language = request.language
    if language is None:
        language = (await services.classifier.detect(request.text)).code

    analysis = await services.sentiment_engine.analyze(request.text, language)
    return SentimentResponse.model_validate({**analysis.to_dict(), "language": language})


@router.post("/sentiment/journey", response_model=EmotionalJourneyResponse)
async def emotional_journey(
    request: JourneyRequest, services: ServiceContainer = Depends(get_services)
):
    moments = await services.sentiment_engine.emotional_journey(request.text, request.language)
    return EmotionalJourneyResponse(
        moments=[moment.to_dict() for moment in moments], total_count=len(moments)
    )


@router.post("/sarcasm", response_model=SarcasmResponse)
async def sarcasm(request: TextRequest, services: ServiceContainer = Depends(get_services)):
    analysis = await services.sentiment_engine.detect_sarcasm(request.text)
    return SarcasmResponse.model_validate(analysis.to_dict())
