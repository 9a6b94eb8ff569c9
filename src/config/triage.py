"""
Triage engine configuration derived from application settings.
"""

from dataclasses import dataclass, field

from src.config.constants import RegulatoryTier, Sector
from src.config.industry_rules import INDUSTRY_RULES, TIER_THRESHOLDS, IndustryRule, TierThresholds
from src.config.settings import Settings


@dataclass(frozen=True)
class PerformanceBudget:
    """Per-triage budget; exceeding it is reported, never enforced."""

    max_processing_time: int = 120_000  # milliseconds
    max_tokens_per_request: int = 8000
    max_cost_per_triage: float = 0.5
    target_confidence: float = 0.7


@dataclass(frozen=True)
class ModelSelection:
    primary: str = "gpt-4o-mini"
    temperature: float = 0.1
    max_tokens: int = 3000


@dataclass(frozen=True)
class CostModel:
    base_call_cost: float = 0.1
    time_cost_per_minute: float = 0.05
    prompt_token_cost_per_1k: float = 0.00015
    completion_token_cost_per_1k: float = 0.0006


@dataclass(frozen=True)
class TriageConfiguration:
    """Immutable configuration for one engine instance."""

    thresholds: TierThresholds = field(
        default_factory=lambda: TierThresholds(
            domain_selection=4.0,
            confidence_minimum=0.7,
            data_completeness_required=0.6,
        )
    )
    performance: PerformanceBudget = field(default_factory=PerformanceBudget)
    models: ModelSelection = field(default_factory=ModelSelection)
    costs: CostModel = field(default_factory=CostModel)
    tier_thresholds: dict[RegulatoryTier, TierThresholds] = field(
        default_factory=lambda: dict(TIER_THRESHOLDS)
    )
    industry_rules: dict[Sector, IndustryRule] = field(
        default_factory=lambda: dict(INDUSTRY_RULES)
    )
    circuit_breaker_threshold: int = 5
    circuit_breaker_reset_seconds: float = 300.0
    enhancement_enabled: bool = True

    def selection_threshold(self, sector: Sector, tier: RegulatoryTier) -> float:
        """Domain selection threshold for a run.

        Known sectors use their regulatory tier's threshold; unknown sectors
        use the configured default.
        """
        if sector is Sector.UNKNOWN:
            return self.thresholds.domain_selection
        tier_thresholds = self.tier_thresholds.get(tier)
        if tier_thresholds is None:
            return self.thresholds.domain_selection
        return tier_thresholds.domain_selection

    @classmethod
    def from_settings(cls, settings: Settings) -> "TriageConfiguration":
        """Build the configuration from environment-backed settings."""
        return cls(
            thresholds=TierThresholds(
                domain_selection=settings.domain_selection_threshold,
                confidence_minimum=settings.confidence_minimum,
                data_completeness_required=settings.data_completeness_required,
            ),
            performance=PerformanceBudget(
                max_processing_time=settings.max_processing_time_ms,
                max_tokens_per_request=settings.max_tokens_per_request,
                max_cost_per_triage=settings.max_cost_per_triage,
                target_confidence=settings.target_confidence,
            ),
            models=ModelSelection(
                primary=settings.triage_agent_model,
                temperature=settings.triage_temperature,
                max_tokens=settings.triage_max_tokens,
            ),
            costs=CostModel(
                base_call_cost=settings.base_call_cost,
                time_cost_per_minute=settings.time_cost_per_minute,
                prompt_token_cost_per_1k=settings.prompt_token_cost_per_1k,
                completion_token_cost_per_1k=settings.completion_token_cost_per_1k,
            ),
            circuit_breaker_threshold=settings.circuit_breaker_threshold,
            circuit_breaker_reset_seconds=settings.circuit_breaker_reset_seconds,
            enhancement_enabled=settings.triage_enhancement_enabled,
        )
