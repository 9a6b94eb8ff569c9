"""External enhancement adapter.

Asks a completion service to refine the base domain scores. Every outcome is
returned as an explicit ``EnhancementSuccess`` or ``EnhancementFailure``; no
exception leaves :meth:`EnhancementAdapter.enhance`.
"""

import asyncio
import logging
from collections.abc import Callable

from pydantic import ValidationError

from src.config.constants import MAX_CONFIDENCE, MAX_SCORE, MIN_CONFIDENCE, MIN_SCORE
from src.config.prompts import build_triage_analysis_prompt, build_triage_system_prompt
from src.config.triage import TriageConfiguration
from src.infrastructure.llm import CompletionClient, CompletionResult
from src.services.triage.aggregator import (
    clamp,
    classify_priority_level,
    determine_agent_activation,
)
from src.services.triage.errors import EnhancementError, TriageConfigurationError
from src.services.triage.metrics import TriageMetricsCollector
from src.services.triage.models import (
    AssessmentSnapshot,
    DomainAnalysis,
    DomainScore,
    EnhancementFailure,
    EnhancementResponse,
    EnhancementResult,
    EnhancementSuccess,
    IndustryContext,
    TokenUsage,
)
from src.utils.json_parser import JSONParser

logger = logging.getLogger(__name__)

SKIPPED_BREAKER_OPEN = "circuit breaker open"


def merge_enhanced_scores(
    base_scores: dict[str, DomainScore],
    analysis: dict[str, DomainAnalysis],
) -> tuple[dict[str, DomainScore], list[str]]:
    """
    Overlay the fields the completion service supplied onto the base scores.

    Domains absent from ``base_scores`` are ignored. Score and confidence are
    clamped into range; omitted fields keep their base value. Priority and
    activation follow the new score, severity is taken from the response when
    given.

    Returns:
        (merged scores, domains that were refined)
    """
    merged = dict(base_scores)
    enhanced: list[str] = []

    for domain, refinement in analysis.items():
        base = base_scores.get(domain)
        if base is None:
            logger.debug("Ignoring refinement for unscored domain %s", domain)
            continue

        update: dict = {}
        if refinement.adjusted_score is not None:
            score = clamp(refinement.adjusted_score, MIN_SCORE, MAX_SCORE)
            update["score"] = score
            update["priority_level"] = classify_priority_level(score)
            update["agent_activation"] = determine_agent_activation(score)
        if refinement.confidence is not None:
            update["confidence"] = clamp(refinement.confidence, MIN_CONFIDENCE, MAX_CONFIDENCE)
        if refinement.reasoning:
            update["reasoning"] = refinement.reasoning
        if refinement.critical_factors is not None:
            update["critical_factors"] = list(refinement.critical_factors)
        if refinement.severity is not None:
            update["severity"] = refinement.severity

        if update:
            merged[domain] = base.model_copy(update=update)
            enhanced.append(domain)

    return merged, enhanced


def parse_enhancement_response(text: str) -> EnhancementResponse:
    """Parse completion text into an ``EnhancementResponse``.

    Raises:
        EnhancementError: No JSON object, or the object misses ``domainAnalysis``
    """
    payload = JSONParser.extract_json(text)
    if payload is None:
        raise EnhancementError("Completion did not contain a JSON object")
    try:
        return EnhancementResponse.model_validate(payload)
    except ValidationError as e:
        raise EnhancementError(f"Malformed enhancement payload: {e.error_count()} errors") from e


class EnhancementAdapter:
    """Refines base scores through a completion client, guarded by the circuit breaker."""

    def __init__(
        self,
        config: TriageConfiguration,
        metrics: TriageMetricsCollector,
        client_factory: Callable[[str], CompletionClient] | None = None,
    ):
        """
        Args:
            config: Engine configuration (model, temperature, budget)
            metrics: Collector owning the circuit breaker
            client_factory: Builds a completion client for a model name.
                None disables enhancement.
        """
        self.config = config
        self.metrics = metrics
        self._client_factory = client_factory
        self._client: CompletionClient | None = None

    @property
    def enabled(self) -> bool:
        return self.config.enhancement_enabled and self._client_factory is not None

    def _get_client(self) -> CompletionClient:
        if self._client is None:
            if self._client_factory is None:
                raise TriageConfigurationError("No completion client factory configured")
            self._client = self._client_factory(self.config.models.primary)
        return self._client

    async def _call(
        self,
        snapshot: AssessmentSnapshot,
        base_scores: dict[str, DomainScore],
        industry_context: IndustryContext,
    ) -> CompletionResult:
        client = self._get_client()
        timeout = self.config.performance.max_processing_time / 1000
        return await asyncio.wait_for(
            client.complete_json(
                build_triage_system_prompt(),
                build_triage_analysis_prompt(snapshot, base_scores, industry_context),
                max_tokens=self.config.models.max_tokens,
                temperature=self.config.models.temperature,
            ),
            timeout=timeout,
        )

    async def enhance(
        self,
        snapshot: AssessmentSnapshot,
        base_scores: dict[str, DomainScore],
        industry_context: IndustryContext,
    ) -> EnhancementResult:
        """
        Request refined scores for ``base_scores``.

        Returns:
            EnhancementSuccess with merged scores and token usage, or
            EnhancementFailure carrying the unmodified base scores
        """
        if not self.enabled:
            return EnhancementFailure(base_scores, "enhancement disabled", attempted=False)
        if not base_scores:
            return EnhancementFailure(base_scores, "no scored domains", attempted=False)
        if self.metrics.is_circuit_open():
            logger.warning("Circuit breaker open, skipping enhancement for %s", snapshot.id)
            return EnhancementFailure(base_scores, SKIPPED_BREAKER_OPEN, attempted=False)

        try:
            completion = await self._call(snapshot, base_scores, industry_context)
            response = parse_enhancement_response(completion.text)
        except asyncio.TimeoutError:
            return self._fail(snapshot.id, base_scores, "enhancement timed out")
        except asyncio.CancelledError:
            return self._fail(snapshot.id, base_scores, "enhancement cancelled")
        except Exception as e:
            return self._fail(snapshot.id, base_scores, f"{type(e).__name__}: {e}")

        scores, enhanced = merge_enhanced_scores(base_scores, response.domain_analysis)
        self.metrics.record_enhancement_success()
        logger.info(
            "Enhancement applied for %s: %d domains refined by %s",
            snapshot.id,
            len(enhanced),
            completion.model,
        )
        return EnhancementSuccess(
            scores=scores,
            token_usage=TokenUsage(
                prompt=completion.prompt_tokens,
                completion=completion.completion_tokens,
                total=completion.total_tokens,
            ),
            model=completion.model,
            enhanced_domains=enhanced,
        )

    def _fail(
        self,
        assessment_id: str,
        base_scores: dict[str, DomainScore],
        reason: str,
    ) -> EnhancementFailure:
        self.metrics.record_enhancement_failure()
        logger.warning("Enhancement failed for %s, using base scores: %s", assessment_id, reason)
        return EnhancementFailure(base_scores, reason)
