"""Industry context builder and industry rule operations."""

import logging

from src.config.constants import MAX_CRITICAL_DOMAINS, MAX_SCORE, CompanyStage, RegulatoryTier, Sector
from src.config.industry_rules import (
    INDUSTRY_RULES,
    REGULATORY_IMPACT,
    STAGE_ADJUSTMENTS,
    TIER_THRESHOLDS,
    IndustryRule,
    RegulatoryImpact,
    StageAdjustments,
    TierThresholds,
)
from src.services.triage.models import IndustryClassification, IndustryContext

logger = logging.getLogger(__name__)


def default_industry_context() -> IndustryContext:
    """Context used when the sector is missing or has no rule record."""
    return IndustryContext(
        sector=Sector.UNKNOWN,
        regulatory_classification=RegulatoryTier.LIGHTLY,
        specific_rules=[],
        benchmarks={},
        weighting_multipliers={},
    )


class IndustryContextBuilder:
    """Resolves industry classifications against a rule table.

    The rule table defaults to ``INDUSTRY_RULES`` and can be replaced for
    tests or per-deployment configuration.
    """

    def __init__(self, rules: dict[Sector, IndustryRule] | None = None):
        self.rules = rules if rules is not None else INDUSTRY_RULES

    def _rule_for(self, sector: Sector | str | None) -> IndustryRule | None:
        resolved = Sector.from_value(sector)
        if resolved is Sector.UNKNOWN:
            return None
        return self.rules.get(resolved)

    def build(self, classification: IndustryClassification | None) -> IndustryContext:
        """Map an optional classification to its industry context."""
        if classification is None:
            return default_industry_context()

        rule = self._rule_for(classification.sector)
        if rule is None:
            logger.info("No industry rules for sector '%s', using default context", classification.sector)
            return default_industry_context()

        return IndustryContext(
            sector=rule.sector,
            regulatory_classification=rule.regulatory_classification,
            specific_rules=list(rule.required_domains),
            benchmarks=dict(rule.benchmarks),
            weighting_multipliers=dict(rule.weighting_multipliers),
        )

    def apply_industry_weighting(
        self,
        domain_scores: dict[str, float],
        sector: Sector | str | None,
    ) -> dict[str, float]:
        """Multiply scores by the sector's weights, capped at 5.0.

        Unknown sectors return the input map unchanged.
        """
        rule = self._rule_for(sector)
        if rule is None:
            return domain_scores

        return {
            domain: min(MAX_SCORE, score * rule.weighting_multipliers.get(domain, 1.0))
            for domain, score in domain_scores.items()
        }

    def validate_industry_compliance(
        self,
        selected_domains: list[str],
        sector: Sector | str | None,
    ) -> tuple[bool, list[str], list[str]]:
        """
        Check a domain selection against the sector's rules.

        Returns:
            (is_compliant, violations, recommendations)
        """
        rule = self._rule_for(sector)
        if rule is None:
            return True, [], []

        sector_name = rule.sector.value
        violations: list[str] = []
        recommendations: list[str] = []

        for required in rule.required_domains:
            if required not in selected_domains:
                violations.append(f"Missing required domain for {sector_name}: {required}")

        for excluded in rule.excluded_domains:
            if excluded in selected_domains:
                violations.append(f"Should not include {excluded} domain for {sector_name} industry")

        for preferred in rule.preferred_domains:
            if preferred not in selected_domains and len(selected_domains) < MAX_CRITICAL_DOMAINS:
                recommendations.append(
                    f"Consider including {preferred} domain for {sector_name} optimization"
                )

        return not violations, violations, recommendations

    def get_industry_benchmarks(self, sector: Sector | str | None) -> dict[str, float]:
        rule = self._rule_for(sector)
        return dict(rule.benchmarks) if rule else {}

    def get_special_considerations(self, sector: Sector | str | None) -> list[str]:
        rule = self._rule_for(sector)
        return list(rule.special_considerations) if rule else []

    def generate_industry_reasoning(
        self,
        sector: Sector | str | None,
        selected_domains: list[str],
        regulatory_classification: RegulatoryTier,
    ) -> str:
        """Human-readable explanation of an industry-specific selection."""
        rule = self._rule_for(sector)
        if rule is None:
            return (
                "Standard domain selection for general business analysis: "
                f"{', '.join(selected_domains)}."
            )

        considerations = " and ".join(rule.special_considerations[:2])
        required_note = ""
        if rule.required_domains:
            required_note = (
                f" Required domains ({', '.join(rule.required_domains)}) "
                "included per industry standards."
            )

        return (
            f"Industry-specific analysis for {rule.sector.value} sector "
            f"({regulatory_classification.value}). Key considerations: {considerations}. "
            f"Selected domains: {', '.join(selected_domains)}.{required_note}"
        )


def get_industry_thresholds(tier: RegulatoryTier) -> TierThresholds:
    """Selection and data thresholds for a regulatory tier."""
    return TIER_THRESHOLDS[tier]


def get_regulatory_impact(tier: RegulatoryTier) -> RegulatoryImpact:
    return REGULATORY_IMPACT[tier]


def get_stage_adjustments(stage: CompanyStage | None) -> StageAdjustments:
    """Stage-specific focus domains; unknown stages are treated as mature."""
    return STAGE_ADJUSTMENTS[stage or CompanyStage.MATURE]
