"""
Tests for the lexicon sentiment engine.
"""

import pytest

from notecore.models.domain.language_domain import DetectedLanguage
from notecore.models.domain.sentiment_domain import EmotionType, SentimentPolarity
from notecore.services.sentiment.engine import SentimentEngine, determine_polarity


@pytest.fixture
def engine():
    return SentimentEngine()


def german():
    return DetectedLanguage(code="de", confidence=0.9, localized_name="Deutsch")


@pytest.mark.parametrize("text", ["", "   ", "... !!!"])
def test_text_without_words_is_neutral(engine, text):
    analysis = engine.analyze_sync(text, "de")

    assert analysis.polarity == SentimentPolarity.NEUTRAL
    assert analysis.confidence == 0.0
    assert analysis.intensity == 0.0
    assert analysis.emotions == []


def test_positive_german_text_with_intensifier(engine):
    analysis = engine.analyze_sync("Das ist wirklich super und toll.", german())

    assert analysis.polarity == SentimentPolarity.VERY_POSITIVE
    assert analysis.intensity == pytest.approx(5 / 6)
    # length 6/10 and 2 of 6 words in the lexicon
    assert analysis.confidence == pytest.approx((0.6 + 2 / 6) / 2)


def test_only_positive_lexicon_words(engine):
    analysis = engine.analyze_sync("Das ist fantastisch und großartig", "de")

    assert analysis.polarity in (SentimentPolarity.POSITIVE, SentimentPolarity.VERY_POSITIVE)


def test_negative_english_text(engine):
    analysis = engine.analyze_sync("This is a terrible and awful day", "en")

    assert analysis.polarity == SentimentPolarity.NEGATIVE
    assert analysis.intensity == 0.0


def test_unknown_language_uses_english_lexicon(engine):
    assert engine.analyze_sync("This is terrible", "xx").polarity == SentimentPolarity.VERY_NEGATIVE
    assert engine.analyze_sync("This is terrible", "de").polarity == SentimentPolarity.NEUTRAL


def test_emotions_follow_keyword_order(engine):
    analysis = engine.analyze_sync("Ich habe Angst und Sorge", "de")

    assert [emotion.type for emotion in analysis.emotions] == [EmotionType.FEAR, EmotionType.FEAR]
    assert all(emotion.confidence == 1.0 for emotion in analysis.emotions)
    assert analysis.dominant_emotion.type == EmotionType.FEAR


def test_emotion_confidence_scales_with_text_length(engine):
    text = "Freude " + "x" * 193
    analysis = engine.analyze_sync(text, "de")

    assert [emotion.type for emotion in analysis.emotions] == [EmotionType.JOY]
    assert analysis.emotions[0].confidence == pytest.approx(0.5)


@pytest.mark.parametrize(
    "score,expected",
    [
        (0.31, SentimentPolarity.VERY_POSITIVE),
        (0.3, SentimentPolarity.POSITIVE),
        (0.1, SentimentPolarity.NEUTRAL),
        (0.0, SentimentPolarity.NEUTRAL),
        (-0.1, SentimentPolarity.NEUTRAL),
        (-0.2, SentimentPolarity.NEGATIVE),
        (-0.31, SentimentPolarity.VERY_NEGATIVE),
    ],
)
def test_polarity_thresholds(score, expected):
    assert determine_polarity(score) == expected


@pytest.mark.asyncio
async def test_emotional_journey_per_segment(engine):
    journey = await engine.emotional_journey("Ich bin glücklich. Das ist schlecht.")

    assert [moment.position for moment in journey] == [0, 1]
    assert [moment.sentiment for moment in journey] == [
        SentimentPolarity.VERY_POSITIVE,
        SentimentPolarity.VERY_NEGATIVE,
    ]
    assert [emotion.type for emotion in journey[0].emotions] == [EmotionType.JOY]
    assert journey[1].emotions == []


@pytest.mark.asyncio
async def test_sarcasm_with_three_indicators(engine):
    analysis = await engine.detect_sarcasm("Oh really? Yeah right, of course.")

    assert analysis.has_sarcasm is True
    assert analysis.confidence == pytest.approx(0.6)
    assert set(analysis.indicators) == {"oh really", "yeah right", "of course"}


def test_single_sarcasm_indicator_is_not_enough(engine):
    analysis = engine.detect_sarcasm_sync("Of course I will come.")

    assert analysis.has_sarcasm is False
    assert analysis.confidence == pytest.approx(0.2)
    assert analysis.indicators == ["of course"]


def test_to_dict_reports_polarity_score(engine):
    data = engine.analyze_sync("Das ist gut", "de").to_dict()

    assert data["polarity"] == "very_positive"
    assert data["polarity_score"] == 1.0
