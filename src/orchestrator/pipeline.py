"""Triage pipeline orchestrator."""

import logging
import time
from collections.abc import Callable

from src.config.constants import TriageStage
from src.config.triage import TriageConfiguration
from src.infrastructure.llm import CompletionClient
from src.infrastructure.logging.logger import StructuredLogger
from src.orchestrator.state import TriageState
from src.orchestrator.step_timer import timed_stage
from src.services.triage.aggregator import calculate_base_domain_scores, validate_assessment
from src.services.triage.confidence import calculate_overall_confidence
from src.services.triage.enhancer import EnhancementAdapter
from src.services.triage.errors import TriageAnalysisError, TriageError, TriageValidationError
from src.services.triage.impact import apply_cross_domain_impacts
from src.services.triage.industry import IndustryContextBuilder
from src.services.triage.metrics import TriageMetricsCollector
from src.services.triage.models import (
    AssessmentSnapshot,
    DomainScore,
    EnhancementSuccess,
    IndustryContext,
    ProcessingMetrics,
    TokenUsage,
    TriageAnalysisResult,
)
from src.services.triage.selector import select_critical_domains
from src.services.triage.validator import TriageValidator

logger = logging.getLogger(__name__)


def generate_triage_reasoning(
    domain_scores: dict[str, DomainScore],
    critical_domains: list[str],
    industry_context: IndustryContext,
) -> str:
    """Human-readable summary of the selection, naming the top three domains."""
    industry_note = ""
    if industry_context.is_known_sector:
        industry_note = (
            f" Given the {industry_context.sector.value} industry context and "
            f"{industry_context.regulatory_classification.value} regulatory environment,"
        )

    parts = []
    for domain in critical_domains[:3]:
        label = domain.replace("-", " ")
        score = domain_scores.get(domain)
        if score is None:
            parts.append(f"{label} (score: N/A, confidence: N/A)")
        else:
            parts.append(
                f"{label} (score: {score.score:.1f}, confidence: {score.confidence * 100:.0f}%)"
            )

    return (
        f"Triage identified {len(critical_domains)} critical domains requiring agent analysis."
        f"{industry_note} Priority domains: {', '.join(parts)}. Analysis will focus on areas "
        "with highest business impact and implementation feasibility."
    )


def estimate_cost(
    config: TriageConfiguration,
    processing_time_ms: float,
    token_usage: TokenUsage,
) -> float:
    """Base call cost plus a per-minute time factor plus token pricing."""
    costs = config.costs
    return (
        costs.base_call_cost
        + (processing_time_ms / 60_000) * costs.time_cost_per_minute
        + (token_usage.prompt / 1000) * costs.prompt_token_cost_per_1k
        + (token_usage.completion / 1000) * costs.completion_token_cost_per_1k
    )


class TriagePipeline:
    """Runs one assessment through validation, scoring, enhancement and selection."""

    def __init__(
        self,
        config: TriageConfiguration,
        metrics: TriageMetricsCollector,
        client_factory: Callable[[str], CompletionClient] | None = None,
        industry_builder: IndustryContextBuilder | None = None,
        validator: TriageValidator | None = None,
    ):
        self.config = config
        self.industry = industry_builder or IndustryContextBuilder(config.industry_rules)
        self.metrics = metrics
        self.enhancer = EnhancementAdapter(config, metrics, client_factory)
        self.validator = validator or TriageValidator(
            self.industry, config.thresholds.confidence_minimum
        )
        self.structured_logger = StructuredLogger(__name__)

    def _step_validation(self, state: TriageState) -> None:
        with timed_stage(TriageStage.VALIDATION, self.structured_logger, state.assessment_id) as stage:
            validation = validate_assessment(
                state.snapshot, self.config.thresholds.data_completeness_required
            )
            stage.record(
                data_completeness=round(validation.data_completeness, 3),
                is_valid=validation.is_valid,
            )
            if not validation.is_valid:
                raise TriageValidationError(validation.errors, validation.data_completeness)
            state.validation = validation

    def _step_industry_context(self, state: TriageState) -> None:
        with timed_stage(TriageStage.INDUSTRY_CONTEXT, self.structured_logger, state.assessment_id) as stage:
            state.industry_context = self.industry.build(state.snapshot.industry_classification)
            stage.record(
                sector=state.industry_context.sector.value,
                regulatory_classification=state.industry_context.regulatory_classification.value,
            )

    def _step_base_scores(self, state: TriageState) -> None:
        with timed_stage(TriageStage.BASE_SCORES, self.structured_logger, state.assessment_id) as stage:
            state.base_scores = calculate_base_domain_scores(state.snapshot)
            stage.record(scored_domains=len(state.base_scores))

    async def _step_enhancement(self, state: TriageState) -> None:
        with timed_stage(TriageStage.ENHANCEMENT, self.structured_logger, state.assessment_id) as stage:
            result = await self.enhancer.enhance(
                state.snapshot, state.base_scores, state.industry_context
            )
            state.enhancement = result
            if isinstance(result, EnhancementSuccess):
                stage.record(applied=True, model=result.model, refined=result.enhanced_domains)
            else:
                stage.record(applied=False, reason=result.reason)

    def _step_cross_domain(self, state: TriageState) -> None:
        with timed_stage(TriageStage.CROSS_DOMAIN, self.structured_logger, state.assessment_id) as stage:
            state.final_scores = apply_cross_domain_impacts(
                state.enhancement.scores, state.industry_context
            )
            stage.record(
                boosted=[d for d, s in state.final_scores.items() if s.cross_domain_impacts]
            )

    def _step_selection(self, state: TriageState) -> None:
        with timed_stage(TriageStage.SELECTION, self.structured_logger, state.assessment_id) as stage:
            context = state.industry_context
            state.threshold = self.config.selection_threshold(
                context.sector, context.regulatory_classification
            )
            state.critical_domains = select_critical_domains(
                state.final_scores, state.threshold, context.specific_rules
            )
            state.unscored_domains = [
                d for d in state.critical_domains if d not in state.final_scores
            ]
            stage.record(
                threshold=state.threshold,
                critical_domains=state.critical_domains,
                unscored_domains=state.unscored_domains,
            )

    def _step_confidence(self, state: TriageState) -> None:
        with timed_stage(TriageStage.CONFIDENCE, self.structured_logger, state.assessment_id) as stage:
            state.confidence = calculate_overall_confidence(state.final_scores, state.validation)
            stage.record(confidence=round(state.confidence, 3))

    def _build_result(self, state: TriageState, processing_time_ms: float) -> TriageAnalysisResult:
        token_usage = state.token_usage
        model_used = (
            state.enhancement.model
            if isinstance(state.enhancement, EnhancementSuccess)
            else self.config.models.primary
        )
        return TriageAnalysisResult(
            assessment_id=state.assessment_id,
            domain_scores=state.final_scores,
            critical_domains=state.critical_domains,
            confidence=state.confidence,
            reasoning=generate_triage_reasoning(
                state.final_scores, state.critical_domains, state.industry_context
            ),
            industry_context=state.industry_context,
            processing_metrics=ProcessingMetrics(
                processing_time=processing_time_ms,
                model_used=model_used,
                token_usage=token_usage,
                cost_estimate=estimate_cost(self.config, processing_time_ms, token_usage),
            ),
            enhancement_applied=state.enhancement_applied,
            unscored_domains=state.unscored_domains,
        )

    async def run(self, snapshot: AssessmentSnapshot) -> TriageAnalysisResult:
        """
        Triage one assessment.

        Args:
            snapshot: Assessment to triage

        Returns:
            TriageAnalysisResult with scores, critical domains and metrics

        Raises:
            TriageValidationError: Data completeness below the required threshold
            TriageAnalysisError: Any unexpected failure while scoring
        """
        start_time = time.perf_counter()
        state = TriageState(snapshot=snapshot)
        logger.info(f"Starting triage for assessment {snapshot.id}")

        try:
            self._step_validation(state)
            self._step_industry_context(state)
            self._step_base_scores(state)
            await self._step_enhancement(state)
            self._step_cross_domain(state)
            self._step_selection(state)
            self._step_confidence(state)

            processing_time_ms = (time.perf_counter() - start_time) * 1000
            result = self._build_result(state, processing_time_ms)
            result = result.model_copy(update={"review": self.validator.review(snapshot, result)})
        except TriageError:
            raise
        except Exception as e:
            logger.error(f"Triage analysis failed for {snapshot.id}: {e}", exc_info=True)
            raise TriageAnalysisError(snapshot.id, str(e)) from e

        if state.enhancement_skipped_by_breaker:
            # an open breaker recovers by one step per analysis completed without the call
            self.metrics.record_enhancement_success()

        logger.info(
            f"Triage completed for {snapshot.id}: {result.critical_domains} "
            f"(confidence {result.confidence:.2f}, {processing_time_ms:.0f}ms)"
        )
        return result
