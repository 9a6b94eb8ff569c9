"""Tests for the post-analysis result review."""

import logging

import pytest

from src.config.constants import Severity
from src.services.triage.industry import IndustryContextBuilder, default_industry_context
from src.services.triage.models import (
    IndustryClassification,
    ProcessingMetrics,
    TriageAnalysisResult,
)
from src.services.triage.validator import TriageValidator, calculate_quality_score
from tests.factories import make_domain, make_score, make_scores, make_snapshot


@pytest.fixture
def validator():
    return TriageValidator()


def _result(scores, critical, context=None) -> TriageAnalysisResult:
    return TriageAnalysisResult(
        assessment_id="assessment-1",
        domain_scores=scores,
        critical_domains=critical,
        confidence=0.8,
        reasoning="",
        industry_context=context or default_industry_context(),
        processing_metrics=ProcessingMetrics(processing_time=10.0, model_used="gpt-4o-mini"),
    )


@pytest.fixture
def snapshot():
    return make_snapshot({"strategic-alignment": make_domain(4, 4, completeness=100)})


def test_consistent_result_passes(validator, snapshot):
    scores = make_scores(
        {"strategic-alignment": 4.5, "operational-excellence": 4.2, "people-organization": 4.1}
    )
    review = validator.review(snapshot, _result(scores, list(scores)))
    assert review.is_consistent
    assert review.issues == []


def test_too_few_domains_reported(validator, snapshot):
    scores = make_scores({"strategic-alignment": 4.5, "revenue-engine": 4.0})
    review = validator.review(snapshot, _result(scores, list(scores)))
    assert "Insufficient domains selected: 2 (minimum: 3)" in review.issues


def test_severity_mismatch_reported(validator, snapshot):
    scores = make_scores({"strategic-alignment": 4.5, "revenue-engine": 4.0, "partnerships": 3.0})
    scores["strategic-alignment"] = scores["strategic-alignment"].model_copy(
        update={"severity": Severity.LOW}
    )
    review = validator.review(snapshot, _result(scores, list(scores)))
    assert review.issues == ["Severity mismatch for strategic-alignment: expected critical, got low"]


def test_heavily_regulated_without_risk_compliance(validator, snapshot, caplog):
    context = IndustryContextBuilder().build(IndustryClassification(sector="financial-services"))
    scores = make_scores(
        {"strategic-alignment": 4.5, "revenue-engine": 4.4, "operational-excellence": 4.3}
    )
    result = _result(scores, list(scores), context)
    before = result.model_dump()

    with caplog.at_level(logging.WARNING):
        review = validator.review(snapshot, result)

    assert review.compliance_violations == [
        "Missing required domain for financial-services: risk-compliance",
        "Missing required domain for financial-services: financial-management",
        "Risk-compliance domain required for heavily regulated industries",
    ]
    assert not review.is_consistent
    assert "compliance violations" in caplog.text
    assert result.model_dump() == before


def test_quality_score(snapshot):
    scores = {
        "strategic-alignment": make_score(4.0, confidence=0.9),
        "revenue-engine": make_score(4.0, confidence=0.7),
    }
    # no spread, mean confidence 0.8, reported completeness 100%
    assert calculate_quality_score(snapshot, _result(scores, list(scores))) == pytest.approx(0.92)


def test_confidence_below_minimum_recommends_caution(snapshot):
    scores = make_scores(
        {"strategic-alignment": 4.5, "operational-excellence": 4.2, "people-organization": 4.1}
    )
    review = TriageValidator(confidence_minimum=0.9).review(snapshot, _result(scores, list(scores)))

    assert review.is_consistent
    assert review.recommendations[-1].startswith(
        "Overall confidence (0.80) is below the minimum (0.90)"
    )
    assert review.quality_score > 0.65
