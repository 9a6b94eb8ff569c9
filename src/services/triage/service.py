"""Triage service: entry point owning metrics, result storage and overrides."""

import logging
from collections.abc import Callable
from functools import lru_cache, partial

from src.config.constants import (
    MAX_CRITICAL_DOMAINS,
    MIN_CRITICAL_DOMAINS,
    OVERRIDE_MIN_CONFIDENCE,
    Domain,
    Sector,
)
from src.config.settings import Settings, get_settings
from src.config.triage import TriageConfiguration
from src.infrastructure.llm import CompletionClient, create_completion_client, has_credentials
from src.orchestrator.pipeline import TriagePipeline
from src.services.triage.errors import (
    OverrideValidationError,
    TriageConfigurationError,
    TriageResultNotFoundError,
)
from src.services.triage.metrics import CircuitBreaker, TriageMetricsCollector
from src.services.triage.models import (
    AssessmentSnapshot,
    HealthReport,
    OptimizationRecommendations,
    PerformanceReport,
    ProcessingTimeEstimate,
    TriageAnalysisResult,
    TriageMetricsSnapshot,
    TriageOverride,
)
from src.services.triage.store import InMemoryTriageResultStore, TriageResultStore

logger = logging.getLogger(__name__)


def validate_override_request(
    assessment_id: str,
    new_domains: list[str],
    reason: str,
) -> None:
    """Reject malformed override requests before any state is touched.

    Raises:
        OverrideValidationError: Describing every problem found
    """
    errors: list[str] = []
    if not assessment_id or not assessment_id.strip():
        errors.append("Assessment ID is required")
    if not reason or not reason.strip():
        errors.append("Override reason is required")

    if not MIN_CRITICAL_DOMAINS <= len(new_domains) <= MAX_CRITICAL_DOMAINS:
        errors.append(
            f"Must select between {MIN_CRITICAL_DOMAINS} and {MAX_CRITICAL_DOMAINS} "
            f"domains, got {len(new_domains)}"
        )

    valid = set(Domain.values())
    invalid = [d for d in new_domains if d not in valid]
    if invalid:
        errors.append(f"Invalid domains: {', '.join(invalid)}")

    duplicates = sorted({d for d in new_domains if new_domains.count(d) > 1})
    if duplicates:
        errors.append(f"Duplicate domains: {', '.join(duplicates)}")

    if errors:
        raise OverrideValidationError("; ".join(errors))


class TriageService:
    """Triages assessments and reports on the engine's own health."""

    def __init__(
        self,
        settings: Settings,
        config: TriageConfiguration | None = None,
        metrics: TriageMetricsCollector | None = None,
        store: TriageResultStore | None = None,
        client_factory: Callable[[str], CompletionClient] | None = None,
    ):
        """
        Args:
            settings: Application settings
            config: Engine configuration (defaults to one derived from settings)
            metrics: Shared metrics collector
            store: Result store used by overrides
            client_factory: Completion client builder; defaults to the
                provider matching the configured model

        Raises:
            TriageConfigurationError: Enhancement enabled without provider credentials
        """
        self.settings = settings
        self.config = config or TriageConfiguration.from_settings(settings)

        if client_factory is None and self.config.enhancement_enabled:
            model = self.config.models.primary
            if not has_credentials(settings, model):
                raise TriageConfigurationError(
                    f"API key for model '{model}' is required for triage enhancement"
                )
            client_factory = partial(create_completion_client, settings)

        self.metrics = metrics or TriageMetricsCollector(
            budget=self.config.performance,
            breaker=CircuitBreaker(
                threshold=self.config.circuit_breaker_threshold,
                reset_seconds=self.config.circuit_breaker_reset_seconds,
            ),
            model_recommendation=self.config.models.primary,
        )
        self.store = store or InMemoryTriageResultStore(
            max_size=settings.result_store_max_size,
            ttl_seconds=settings.result_store_ttl,
        )
        self.pipeline = TriagePipeline(self.config, self.metrics, client_factory)

    async def perform_triage(self, snapshot: AssessmentSnapshot) -> TriageAnalysisResult:
        """
        Triage an assessment and record the outcome in the metrics.

        Raises:
            TriageValidationError: Data completeness below the required threshold
            TriageAnalysisError: Unexpected failure while scoring
        """
        try:
            result = await self.pipeline.run(snapshot)
        except Exception:
            classification = snapshot.industry_classification
            sector = Sector.from_value(classification.sector if classification else None)
            self.metrics.record_triage_completion(
                snapshot.id, None, 0.0, sector.value, successful=False
            )
            raise

        self.metrics.record_triage_completion(
            snapshot.id,
            result.processing_metrics,
            result.confidence,
            result.industry_context.sector.value,
            successful=True,
            critical_domains=result.critical_domains,
        )
        self.store.save(result)
        return result

    def override_triage(
        self,
        assessment_id: str,
        new_domains: list[str],
        overridden_by: str,
        reason: str,
    ) -> TriageAnalysisResult:
        """
        Replace the critical domains of a stored result.

        Scores are carried forward; domains without a prior score are listed
        in ``unscored_domains``. No rescoring or enhancement call happens.
        The review of the computed selection is cleared.

        Raises:
            OverrideValidationError: Malformed request
            TriageResultNotFoundError: No stored result for ``assessment_id``
        """
        validate_override_request(assessment_id, new_domains, reason)

        previous = self.store.get(assessment_id)
        if previous is None:
            raise TriageResultNotFoundError(assessment_id)

        record = TriageOverride(
            assessment_id=assessment_id,
            original_selection=list(previous.critical_domains),
            overridden_selection=list(new_domains),
            overridden_by=overridden_by,
            override_reason=reason,
        )
        updated = previous.model_copy(
            update={
                "critical_domains": list(new_domains),
                "unscored_domains": [d for d in new_domains if d not in previous.domain_scores],
                "confidence": max(OVERRIDE_MIN_CONFIDENCE, previous.confidence),
                "reasoning": f"{previous.reasoning} [OVERRIDE: {reason}]",
                "override_history": [*previous.override_history, record],
                "review": None,
            }
        )

        self.store.save(updated)
        self.metrics.record_override(
            assessment_id, previous.critical_domains, list(new_domains), reason
        )
        logger.info(f"Triage override applied for {assessment_id} by {overridden_by}")
        return updated

    def get_result(self, assessment_id: str) -> TriageAnalysisResult:
        result = self.store.get(assessment_id)
        if result is None:
            raise TriageResultNotFoundError(assessment_id)
        return result

    def get_metrics(self) -> TriageMetricsSnapshot:
        return self.metrics.get_metrics()

    def get_health_status(self) -> HealthReport:
        return self.metrics.get_health_status()

    def generate_performance_report(self, timeframe: str = "day") -> PerformanceReport:
        return self.metrics.generate_performance_report(timeframe)

    def get_optimization_recommendations(self) -> OptimizationRecommendations:
        return self.metrics.get_optimization_recommendations()

    def estimate_processing_time(
        self,
        sector: str,
        domain_count: int,
        data_completeness: float,
    ) -> ProcessingTimeEstimate:
        return self.metrics.estimate_processing_time(sector, domain_count, data_completeness)


@lru_cache
def get_triage_service() -> TriageService:
    """Process-wide triage service, so every caller shares one metrics collector."""
    return TriageService(get_settings())
