"""
Industry rule table, regulatory tiers, and cross-domain impact matrix.
"""

from dataclasses import dataclass, field

from src.config.constants import CompanyStage, Domain, RegulatoryTier, Sector


@dataclass(frozen=True)
class IndustryRule:
    """Static triage rules for one sector."""

    sector: Sector
    regulatory_classification: RegulatoryTier
    required_domains: tuple[str, ...]
    preferred_domains: tuple[str, ...]
    excluded_domains: tuple[str, ...]
    weighting_multipliers: dict[str, float]
    special_considerations: tuple[str, ...]
    benchmarks: dict[str, float]


@dataclass(frozen=True)
class TierThresholds:
    """Selection and data thresholds for a regulatory tier."""

    domain_selection: float
    confidence_minimum: float
    data_completeness_required: float


@dataclass(frozen=True)
class RegulatoryImpact:
    """How a regulatory tier shifts compliance weight and risk tolerance."""

    compliance_weight: float
    risk_tolerance: float
    audit_requirements: tuple[str, ...]


@dataclass(frozen=True)
class StageAdjustments:
    """Focus domains and weight shifts for a company stage."""

    focus_domains: tuple[str, ...]
    weighting_adjustments: dict[str, float]
    priority_shifts: dict[str, float] = field(default_factory=dict)


INDUSTRY_RULES: dict[Sector, IndustryRule] = {
    # ==========================================================================
    # Heavily regulated
    # ==========================================================================
    Sector.FINANCIAL_SERVICES: IndustryRule(
        sector=Sector.FINANCIAL_SERVICES,
        regulatory_classification=RegulatoryTier.HEAVILY,
        required_domains=(Domain.RISK_COMPLIANCE.value, Domain.FINANCIAL_MANAGEMENT.value),
        preferred_domains=(
            Domain.OPERATIONAL_EXCELLENCE.value,
            Domain.STRATEGIC_ALIGNMENT.value,
            Domain.TECHNOLOGY_DATA.value,
        ),
        excluded_domains=(),
        weighting_multipliers={
            Domain.RISK_COMPLIANCE.value: 1.5,
            Domain.FINANCIAL_MANAGEMENT.value: 1.3,
            Domain.OPERATIONAL_EXCELLENCE.value: 1.2,
            Domain.TECHNOLOGY_DATA.value: 1.1,
            Domain.STRATEGIC_ALIGNMENT.value: 1.1,
        },
        special_considerations=(
            "Regulatory compliance is mandatory",
            "Financial risk management takes precedence",
            "Operational resilience is critical",
            "Customer data protection is paramount",
        ),
        benchmarks={
            Domain.RISK_COMPLIANCE.value: 4.2,
            Domain.FINANCIAL_MANAGEMENT.value: 4.0,
            Domain.OPERATIONAL_EXCELLENCE.value: 3.8,
            Domain.STRATEGIC_ALIGNMENT.value: 3.5,
        },
    ),
    Sector.HEALTHCARE: IndustryRule(
        sector=Sector.HEALTHCARE,
        regulatory_classification=RegulatoryTier.HEAVILY,
        required_domains=(Domain.RISK_COMPLIANCE.value,),
        preferred_domains=(
            Domain.OPERATIONAL_EXCELLENCE.value,
            Domain.PEOPLE_ORGANIZATION.value,
            Domain.TECHNOLOGY_DATA.value,
            Domain.CUSTOMER_EXPERIENCE.value,
        ),
        excluded_domains=(),
        weighting_multipliers={
            Domain.RISK_COMPLIANCE.value: 1.4,
            Domain.OPERATIONAL_EXCELLENCE.value: 1.3,
            Domain.PEOPLE_ORGANIZATION.value: 1.2,
            Domain.TECHNOLOGY_DATA.value: 1.2,
            Domain.CUSTOMER_EXPERIENCE.value: 1.1,
        },
        special_considerations=(
            "Patient safety is paramount",
            "HIPAA compliance required",
            "Clinical workflow efficiency critical",
            "Staff training and retention essential",
        ),
        benchmarks={
            Domain.RISK_COMPLIANCE.value: 4.3,
            Domain.OPERATIONAL_EXCELLENCE.value: 4.0,
            Domain.PEOPLE_ORGANIZATION.value: 3.9,
            Domain.CUSTOMER_EXPERIENCE.value: 3.7,
        },
    ),
    # ==========================================================================
    # Moderately regulated
    # ==========================================================================
    Sector.MANUFACTURING: IndustryRule(
        sector=Sector.MANUFACTURING,
        regulatory_classification=RegulatoryTier.MODERATELY,
        required_domains=(Domain.SUPPLY_CHAIN.value, Domain.OPERATIONAL_EXCELLENCE.value),
        preferred_domains=(
            Domain.PEOPLE_ORGANIZATION.value,
            Domain.RISK_COMPLIANCE.value,
            Domain.STRATEGIC_ALIGNMENT.value,
        ),
        excluded_domains=(),
        weighting_multipliers={
            Domain.SUPPLY_CHAIN.value: 1.5,
            Domain.OPERATIONAL_EXCELLENCE.value: 1.4,
            Domain.PEOPLE_ORGANIZATION.value: 1.2,
            Domain.RISK_COMPLIANCE.value: 1.1,
            Domain.STRATEGIC_ALIGNMENT.value: 1.1,
        },
        special_considerations=(
            "Supply chain resilience critical",
            "Quality control and safety",
            "Equipment maintenance and efficiency",
            "Workforce safety and training",
        ),
        benchmarks={
            Domain.SUPPLY_CHAIN.value: 4.0,
            Domain.OPERATIONAL_EXCELLENCE.value: 4.2,
            Domain.PEOPLE_ORGANIZATION.value: 3.6,
            Domain.RISK_COMPLIANCE.value: 3.8,
        },
    ),
    Sector.PROFESSIONAL_SERVICES: IndustryRule(
        sector=Sector.PROFESSIONAL_SERVICES,
        regulatory_classification=RegulatoryTier.MODERATELY,
        required_domains=(Domain.PEOPLE_ORGANIZATION.value,),
        preferred_domains=(
            Domain.CUSTOMER_SUCCESS.value,
            Domain.STRATEGIC_ALIGNMENT.value,
            Domain.OPERATIONAL_EXCELLENCE.value,
            Domain.REVENUE_ENGINE.value,
        ),
        excluded_domains=(Domain.SUPPLY_CHAIN.value, Domain.TECHNOLOGY_DATA.value),
        weighting_multipliers={
            Domain.PEOPLE_ORGANIZATION.value: 1.5,
            Domain.CUSTOMER_SUCCESS.value: 1.3,
            Domain.STRATEGIC_ALIGNMENT.value: 1.2,
            Domain.OPERATIONAL_EXCELLENCE.value: 1.2,
            Domain.REVENUE_ENGINE.value: 1.1,
        },
        special_considerations=(
            "Talent is the primary asset",
            "Client relationship management",
            "Project delivery excellence",
            "Knowledge management and retention",
        ),
        benchmarks={
            Domain.PEOPLE_ORGANIZATION.value: 4.1,
            Domain.CUSTOMER_SUCCESS.value: 3.9,
            Domain.STRATEGIC_ALIGNMENT.value: 3.7,
            Domain.OPERATIONAL_EXCELLENCE.value: 3.6,
        },
    ),
    # ==========================================================================
    # Lightly regulated
    # ==========================================================================
    Sector.TECHNOLOGY: IndustryRule(
        sector=Sector.TECHNOLOGY,
        regulatory_classification=RegulatoryTier.LIGHTLY,
        required_domains=(),
        preferred_domains=(
            Domain.TECHNOLOGY_DATA.value,
            Domain.REVENUE_ENGINE.value,
            Domain.PEOPLE_ORGANIZATION.value,
            Domain.STRATEGIC_ALIGNMENT.value,
        ),
        # Less relevant for pure software companies
        excluded_domains=(Domain.SUPPLY_CHAIN.value,),
        weighting_multipliers={
            Domain.TECHNOLOGY_DATA.value: 1.4,
            Domain.REVENUE_ENGINE.value: 1.3,
            Domain.PEOPLE_ORGANIZATION.value: 1.2,
            Domain.STRATEGIC_ALIGNMENT.value: 1.2,
            Domain.CUSTOMER_EXPERIENCE.value: 1.1,
        },
        special_considerations=(
            "Technical scalability is critical",
            "Rapid innovation cycles",
            "Talent retention challenges",
            "Product-market fit validation",
        ),
        benchmarks={
            Domain.TECHNOLOGY_DATA.value: 4.1,
            Domain.REVENUE_ENGINE.value: 3.9,
            Domain.PEOPLE_ORGANIZATION.value: 3.7,
            Domain.STRATEGIC_ALIGNMENT.value: 3.8,
        },
    ),
    Sector.RETAIL: IndustryRule(
        sector=Sector.RETAIL,
        regulatory_classification=RegulatoryTier.LIGHTLY,
        required_domains=(Domain.CUSTOMER_EXPERIENCE.value,),
        preferred_domains=(
            Domain.REVENUE_ENGINE.value,
            Domain.SUPPLY_CHAIN.value,
            Domain.CUSTOMER_SUCCESS.value,
            Domain.OPERATIONAL_EXCELLENCE.value,
        ),
        excluded_domains=(),
        weighting_multipliers={
            Domain.CUSTOMER_EXPERIENCE.value: 1.4,
            Domain.REVENUE_ENGINE.value: 1.3,
            Domain.SUPPLY_CHAIN.value: 1.2,
            Domain.CUSTOMER_SUCCESS.value: 1.2,
            Domain.OPERATIONAL_EXCELLENCE.value: 1.1,
        },
        special_considerations=(
            "Customer experience drives retention",
            "Inventory management critical",
            "Omnichannel consistency",
            "Seasonal demand fluctuations",
        ),
        benchmarks={
            Domain.CUSTOMER_EXPERIENCE.value: 4.0,
            Domain.REVENUE_ENGINE.value: 3.8,
            Domain.SUPPLY_CHAIN.value: 3.9,
            Domain.CUSTOMER_SUCCESS.value: 3.7,
        },
    ),
}


# Heavily regulated sectors select at a lower score to surface risk earlier.
TIER_THRESHOLDS: dict[RegulatoryTier, TierThresholds] = {
    RegulatoryTier.HEAVILY: TierThresholds(
        domain_selection=3.8,
        confidence_minimum=0.8,
        data_completeness_required=0.75,
    ),
    RegulatoryTier.MODERATELY: TierThresholds(
        domain_selection=4.0,
        confidence_minimum=0.7,
        data_completeness_required=0.65,
    ),
    RegulatoryTier.LIGHTLY: TierThresholds(
        domain_selection=4.2,
        confidence_minimum=0.6,
        data_completeness_required=0.6,
    ),
}


REGULATORY_IMPACT: dict[RegulatoryTier, RegulatoryImpact] = {
    RegulatoryTier.HEAVILY: RegulatoryImpact(
        compliance_weight=1.5,
        risk_tolerance=0.2,
        audit_requirements=(
            "Complete audit trail required",
            "Regular compliance reviews",
            "External validation necessary",
            "Documentation standards strict",
        ),
    ),
    RegulatoryTier.MODERATELY: RegulatoryImpact(
        compliance_weight=1.2,
        risk_tolerance=0.4,
        audit_requirements=(
            "Standard audit trail",
            "Periodic compliance checks",
            "Internal validation sufficient",
        ),
    ),
    RegulatoryTier.LIGHTLY: RegulatoryImpact(
        compliance_weight=1.0,
        risk_tolerance=0.6,
        audit_requirements=(
            "Basic audit trail",
            "Self-assessment acceptable",
        ),
    ),
}


STAGE_ADJUSTMENTS: dict[CompanyStage, StageAdjustments] = {
    CompanyStage.STARTUP: StageAdjustments(
        focus_domains=(
            Domain.STRATEGIC_ALIGNMENT.value,
            Domain.REVENUE_ENGINE.value,
            Domain.PEOPLE_ORGANIZATION.value,
        ),
        weighting_adjustments={
            Domain.STRATEGIC_ALIGNMENT.value: 1.3,
            Domain.REVENUE_ENGINE.value: 1.4,
            Domain.PEOPLE_ORGANIZATION.value: 1.2,
            Domain.OPERATIONAL_EXCELLENCE.value: 0.9,
            Domain.RISK_COMPLIANCE.value: 0.8,
        },
        priority_shifts={"product-market-fit": 1.5, "cash-flow": 1.4, "team-building": 1.3},
    ),
    CompanyStage.GROWTH: StageAdjustments(
        focus_domains=(
            Domain.OPERATIONAL_EXCELLENCE.value,
            Domain.PEOPLE_ORGANIZATION.value,
            Domain.STRATEGIC_ALIGNMENT.value,
        ),
        weighting_adjustments={
            Domain.OPERATIONAL_EXCELLENCE.value: 1.4,
            Domain.PEOPLE_ORGANIZATION.value: 1.3,
            Domain.STRATEGIC_ALIGNMENT.value: 1.2,
            Domain.REVENUE_ENGINE.value: 1.1,
            Domain.RISK_COMPLIANCE.value: 1.0,
        },
        priority_shifts={"scaling": 1.4, "process-optimization": 1.3, "team-expansion": 1.2},
    ),
    CompanyStage.MATURE: StageAdjustments(
        focus_domains=(
            Domain.STRATEGIC_ALIGNMENT.value,
            Domain.OPERATIONAL_EXCELLENCE.value,
            Domain.RISK_COMPLIANCE.value,
        ),
        weighting_adjustments={
            Domain.STRATEGIC_ALIGNMENT.value: 1.3,
            Domain.OPERATIONAL_EXCELLENCE.value: 1.2,
            Domain.RISK_COMPLIANCE.value: 1.2,
            Domain.CHANGE_MANAGEMENT.value: 1.1,
            Domain.REVENUE_ENGINE.value: 1.0,
        },
        priority_shifts={"optimization": 1.3, "innovation": 1.2, "risk-management": 1.2},
    ),
}


# impact[domain][other] = weight; undefined pairs have weight 0.
CROSS_DOMAIN_IMPACT_MATRIX: dict[str, dict[str, float]] = {
    Domain.STRATEGIC_ALIGNMENT.value: {
        Domain.PEOPLE_ORGANIZATION.value: 0.8,
        Domain.CHANGE_MANAGEMENT.value: 0.9,
        Domain.OPERATIONAL_EXCELLENCE.value: 0.7,
    },
    Domain.FINANCIAL_MANAGEMENT.value: {
        Domain.REVENUE_ENGINE.value: 0.9,
        Domain.OPERATIONAL_EXCELLENCE.value: 0.7,
        Domain.RISK_COMPLIANCE.value: 0.6,
    },
    Domain.REVENUE_ENGINE.value: {
        Domain.CUSTOMER_EXPERIENCE.value: 0.8,
        Domain.CUSTOMER_SUCCESS.value: 0.9,
        Domain.TECHNOLOGY_DATA.value: 0.6,
    },
    Domain.PEOPLE_ORGANIZATION.value: {
        Domain.CHANGE_MANAGEMENT.value: 0.9,
        Domain.OPERATIONAL_EXCELLENCE.value: 0.7,
        Domain.STRATEGIC_ALIGNMENT.value: 0.6,
    },
}


############################################################
# Helper functions
############################################################

def get_industry_rule(sector: Sector) -> IndustryRule | None:
    """Get the rule record for a sector, or None for UNKNOWN."""
    return INDUSTRY_RULES.get(sector)


def get_known_sectors() -> list[Sector]:
    """Get all sectors with a rule record."""
    return list(INDUSTRY_RULES)
