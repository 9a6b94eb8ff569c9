"""Tests for overall confidence."""

import pytest

from src.services.triage.confidence import blend_confidence, calculate_overall_confidence
from src.services.triage.models import AssessmentValidation
from tests.factories import make_score


def _validation(completeness: float, quality: float = 0.8) -> AssessmentValidation:
    return AssessmentValidation(
        is_valid=True,
        confidence=min(completeness, quality),
        errors=[],
        data_completeness=completeness,
        quality_score=quality,
    )


def test_blend_weights():
    # 0.5 * 0.7 + 0.3 * 0.9 + 0.2 * 0.8
    assert blend_confidence(0.7, 0.9, 0.8) == pytest.approx(0.78)


def test_blend_is_clamped():
    assert blend_confidence(0.0, 0.0, 0.0) == 0.1
    assert blend_confidence(1.0, 1.0, 1.0) == 1.0


def test_overall_confidence_uses_mean_domain_confidence():
    scores = {
        "strategic-alignment": make_score(3.0, confidence=0.6),
        "revenue-engine": make_score(4.0, confidence=0.8),
    }
    assert calculate_overall_confidence(scores, _validation(0.9)) == pytest.approx(0.78)


def test_overall_confidence_with_no_scores():
    assert calculate_overall_confidence({}, _validation(1.0, 1.0)) == pytest.approx(0.5)
