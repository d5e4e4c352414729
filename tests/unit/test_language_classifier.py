"""
Tests for language detection, segment detection and mixing analysis.
"""

import random

import pytest

from notecore.models.domain.language_domain import LanguageDetectionResult
from notecore.services.language.classifier import LanguageClassifier, combine_results
from notecore.services.language.hypothesis import ProfileHypothesisSource
from notecore.services.language.reference_data import localized_language_name

GERMAN_TEXT = "Der Hund und die Katze sind auf dem Dach, und das ist für mich schön."
ENGLISH_TEXT = "The dog and the cat are on the roof and this is good for you."


class SilentHypothesisSource:
    def rank(self, text, max_hypotheses=5):
        return []


class FixedHypothesisSource:
    def __init__(self, code, probability):
        self.code = code
        self.probability = probability

    def rank(self, text, max_hypotheses=5):
        return [(self.code, self.probability)]


@pytest.fixture
def classifier():
    return LanguageClassifier()


@pytest.mark.parametrize("text", ["", "   ", "\n"])
def test_empty_text_returns_unreliable_english_default(classifier, text):
    detected = classifier.detect_sync(text)

    assert detected.code == "en"
    assert detected.confidence == 0.5
    assert detected.is_reliable is False


@pytest.mark.parametrize("text", ["Hello world", "12345", "!!!", "OK thanks"])
def test_text_without_language_evidence_returns_default(classifier, text):
    detected = classifier.detect_sync(text)

    assert detected.code == "en"
    assert detected.confidence == pytest.approx(0.5)
    assert detected.is_reliable is False


def test_german_stop_words_detected_as_german(classifier):
    detected = classifier.detect_sync(GERMAN_TEXT)

    assert detected.code == "de"
    assert detected.confidence > 0.5
    assert detected.is_german
    assert detected.localized_name == "Deutsch"


def test_text_of_only_german_stop_words(classifier):
    detected = classifier.detect_sync("der die das und ist")

    assert detected.code == "de"
    assert detected.confidence > 0.5


def test_english_text_detected_as_english(classifier):
    detected = classifier.detect_sync(ENGLISH_TEXT)

    assert detected.code == "en"
    assert detected.is_english


@pytest.mark.asyncio
async def test_detect_runs_off_the_event_loop(classifier):
    detected = await classifier.detect(GERMAN_TEXT)

    assert detected.code == "de"


def test_combined_confidence_and_reliability_over_random_pairs():
    rng = random.Random(1234)
    codes = ["de", "en", "fr", "es", "it", "pt"]

    for _ in range(1000):
        nlp = LanguageDetectionResult(rng.choice(codes), rng.uniform(-0.5, 1.5), nlp_based=True)
        statistical = LanguageDetectionResult(
            rng.choice(codes), rng.uniform(-0.5, 1.5), statistical_based=True
        )

        detected = combine_results(nlp, statistical)

        assert 0.0 <= detected.confidence <= 1.0
        assert detected.is_reliable == (detected.confidence > 0.7)

        nlp_confidence = min(max(nlp.confidence, 0.0), 1.0)
        statistical_confidence = min(max(statistical.confidence, 0.0), 1.0)
        expected_code = (
            nlp.language_code
            if nlp_confidence >= statistical_confidence
            else statistical.language_code
        )
        assert detected.code == expected_code
        assert detected.confidence == pytest.approx(
            0.6 * nlp_confidence + 0.4 * statistical_confidence
        )


def test_hypothesis_source_wins_confidence_ties():
    detected = combine_results(
        LanguageDetectionResult("fr", 0.8, nlp_based=True),
        LanguageDetectionResult("de", 0.8, statistical_based=True),
    )

    assert detected.code == "fr"
    assert detected.confidence == pytest.approx(0.8)
    assert detected.is_reliable


def test_missing_hypotheses_fall_back_to_statistics():
    classifier = LanguageClassifier(hypothesis_source=SilentHypothesisSource())

    detected = classifier.detect_sync(GERMAN_TEXT)

    # Hypothesis side defaults to ("en", 0.5); the statistical side is more confident
    assert detected.code == "de"
    assert detected.confidence == pytest.approx(0.6 * 0.5 + 0.4 * 1.0)


def test_injected_hypothesis_source_is_used():
    classifier = LanguageClassifier(hypothesis_source=FixedHypothesisSource("it", 1.0))

    detected = classifier.detect_sync(GERMAN_TEXT)

    assert detected.code == "it"
    assert detected.confidence == pytest.approx(1.0)


def test_profile_source_ranks_normalized_shares():
    ranked = ProfileHypothesisSource().rank(GERMAN_TEXT)

    assert ranked[0][0] == "de"
    assert sum(probability for _, probability in ranked) == pytest.approx(1.0)
    assert ProfileHypothesisSource().rank("xyz qrs") == []


def test_language_change_yields_one_segment_per_unit(classifier):
    segments = classifier.detect_language_change_sync("Das ist gut. This is the house.")

    assert [segment.position for segment in segments] == [0, 1]
    assert [segment.text for segment in segments] == ["Das ist gut", "This is the house"]
    assert [segment.language.code for segment in segments] == ["de", "en"]
    assert all(segment.confidence == segment.language.confidence for segment in segments)


def test_segment_iteration_is_restartable(classifier):
    text = "Das ist gut. This is the house."

    assert list(classifier.iter_language_segments(text)) == list(
        classifier.iter_language_segments(text)
    )


@pytest.mark.asyncio
async def test_mixing_analysis_for_two_languages(classifier):
    analysis = await classifier.analyze_mixing("Das ist gut. This is the house.")

    assert analysis.language_distribution == {"de": 1, "en": 1}
    assert analysis.mixing_score == pytest.approx(0.4)
    assert analysis.is_mixed_language is True
    # First-seen language wins the tie
    assert analysis.dominant_language == "de"


def test_mixing_analysis_without_segments(classifier):
    analysis = classifier.analyze_mixing_sync("...")

    assert analysis.mixing_score == 0.0
    assert analysis.is_mixed_language is False
    assert analysis.dominant_language == "unknown"
    assert analysis.segments == []


def test_localized_names_fall_back_to_upper_case_code():
    assert localized_language_name("fr") == "Français"
    assert localized_language_name("xx") == "XX"
