"""Tests for industry context resolution and industry rules."""

import pytest

from src.config.constants import CompanyStage, RegulatoryTier, Sector
from src.config.industry_rules import STAGE_ADJUSTMENTS
from src.services.triage.industry import (
    IndustryContextBuilder,
    get_industry_thresholds,
    get_regulatory_impact,
    get_stage_adjustments,
)
from src.services.triage.models import IndustryClassification


@pytest.fixture
def builder():
    return IndustryContextBuilder()


# ---------------------------------------------------------------------------
# Context building
# ---------------------------------------------------------------------------


class TestBuild:
    def test_financial_services_context(self, builder):
        context = builder.build(IndustryClassification(sector="financial-services"))
        assert context.sector is Sector.FINANCIAL_SERVICES
        assert context.regulatory_classification is RegulatoryTier.HEAVILY
        assert context.specific_rules == ["risk-compliance", "financial-management"]
        assert context.weighting_multipliers["risk-compliance"] == 1.5
        assert context.benchmarks["risk-compliance"] == 4.2

    def test_missing_classification_uses_default(self, builder):
        context = builder.build(None)
        assert context.sector is Sector.UNKNOWN
        assert context.regulatory_classification is RegulatoryTier.LIGHTLY
        assert context.specific_rules == []
        assert context.weighting_multipliers == {}
        assert not context.is_known_sector

    def test_unrecognised_sector_uses_default(self, builder):
        context = builder.build(IndustryClassification(sector="aerospace"))
        assert context.sector is Sector.UNKNOWN
        assert context.benchmarks == {}

    def test_sector_match_is_case_insensitive(self, builder):
        context = builder.build(IndustryClassification(sector=" Healthcare "))
        assert context.sector is Sector.HEALTHCARE
        assert context.specific_rules == ["risk-compliance"]


# ---------------------------------------------------------------------------
# Weighting
# ---------------------------------------------------------------------------


def test_weighting_caps_at_five_for_financial_services(builder):
    """Test that risk-compliance 4.0 x 1.5 is capped to 5.0."""
    weighted = builder.apply_industry_weighting(
        {"risk-compliance": 4.0, "financial-management": 3.0, "partnerships": 2.0},
        "financial-services",
    )
    assert weighted["risk-compliance"] == 5.0
    assert weighted["financial-management"] == pytest.approx(3.9)
    assert weighted["partnerships"] == 2.0


@pytest.mark.parametrize("sector", ["unknown", "aerospace", None])
def test_weighting_unknown_sector_returns_input_unchanged(builder, sector):
    scores = {"risk-compliance": 4.0, "strategic-alignment": 2.5}
    assert builder.apply_industry_weighting(scores, sector) == scores


# ---------------------------------------------------------------------------
# Compliance
# ---------------------------------------------------------------------------


class TestCompliance:
    def test_missing_required_domains(self, builder):
        compliant, violations, _ = builder.validate_industry_compliance(
            ["strategic-alignment", "revenue-engine", "people-organization"],
            Sector.FINANCIAL_SERVICES,
        )
        assert not compliant
        assert violations == [
            "Missing required domain for financial-services: risk-compliance",
            "Missing required domain for financial-services: financial-management",
        ]

    def test_excluded_domain_selected(self, builder):
        compliant, violations, _ = builder.validate_industry_compliance(
            ["technology-data", "supply-chain", "revenue-engine"], "technology"
        )
        assert not compliant
        assert violations == ["Should not include supply-chain domain for technology industry"]

    def test_preferred_domains_recommended_when_room_left(self, builder):
        compliant, violations, recommendations = builder.validate_industry_compliance(
            ["technology-data", "revenue-engine", "people-organization"], "technology"
        )
        assert compliant
        assert violations == []
        assert recommendations == [
            "Consider including strategic-alignment domain for technology optimization"
        ]

    def test_unknown_sector_always_compliant(self, builder):
        assert builder.validate_industry_compliance(["supply-chain"], None) == (True, [], [])


# ---------------------------------------------------------------------------
# Lookups and reasoning
# ---------------------------------------------------------------------------


def test_tier_thresholds():
    assert get_industry_thresholds(RegulatoryTier.HEAVILY).domain_selection == 3.8
    assert get_industry_thresholds(RegulatoryTier.MODERATELY).domain_selection == 4.0
    assert get_industry_thresholds(RegulatoryTier.LIGHTLY).domain_selection == 4.2


def test_regulatory_impact():
    heavy = get_regulatory_impact(RegulatoryTier.HEAVILY)
    assert heavy.compliance_weight == 1.5
    assert "Complete audit trail required" in heavy.audit_requirements
    assert get_regulatory_impact(RegulatoryTier.MODERATELY).risk_tolerance == 0.4


def test_stage_adjustments_default_to_mature():
    assert get_stage_adjustments(None) == STAGE_ADJUSTMENTS[CompanyStage.MATURE]
    assert "revenue-engine" in get_stage_adjustments(CompanyStage.STARTUP).focus_domains


def test_industry_reasoning(builder):
    reasoning = builder.generate_industry_reasoning(
        "financial-services",
        ["risk-compliance", "financial-management", "operational-excellence"],
        RegulatoryTier.HEAVILY,
    )
    assert reasoning.startswith("Industry-specific analysis for financial-services sector")
    assert "Regulatory compliance is mandatory and Financial risk management takes precedence" in reasoning
    assert "Required domains (risk-compliance, financial-management)" in reasoning


def test_industry_reasoning_unknown_sector(builder):
    reasoning = builder.generate_industry_reasoning(
        None, ["strategic-alignment"], RegulatoryTier.LIGHTLY
    )
    assert reasoning == (
        "Standard domain selection for general business analysis: strategic-alignment."
    )


def test_special_considerations_and_benchmarks(builder):
    assert builder.get_special_considerations("retail")[0] == "Customer experience drives retention"
    assert builder.get_industry_benchmarks("retail")["customer-experience"] == 4.0
    assert builder.get_industry_benchmarks("unknown") == {}
