"""Process-wide triage telemetry and the enhancement circuit breaker."""

import logging
import math
import threading
import time
from collections import deque
from collections.abc import Callable

from src.config.constants import HealthStatus, Trend
from src.config.triage import PerformanceBudget
from src.services.triage.models import (
    CircuitBreakerState,
    HealthReport,
    IndustryPerformance,
    OptimizationRecommendations,
    PerformanceReport,
    PerformanceTrends,
    ProcessingMetrics,
    ProcessingTimeEstimate,
    TriageMetricsSnapshot,
)

logger = logging.getLogger(__name__)

GLOBAL_EMA_ALPHA = 0.1
SECTOR_EMA_ALPHA = 0.2
OVERRIDE_EMA_DECAY = 0.95
OVERRIDE_RATE_CRITICAL = 0.2
TREND_BAND = 0.05
DEFAULT_ESTIMATE_MS = 45_000


def _ema(previous: float, sample: float, alpha: float) -> float:
    return previous * (1 - alpha) + sample * alpha


def _confidence_bucket(confidence: float) -> str:
    return str(math.floor(confidence * 10) / 10)


def _trend(older: float, newer: float, lower_is_better: bool = True) -> Trend:
    """Classify the change between two readings with a relative band."""
    if older == newer:
        return Trend.STABLE
    if older == 0:
        change = math.inf if newer > 0 else -math.inf
    else:
        change = (newer - older) / abs(older)
    if abs(change) <= TREND_BAND:
        return Trend.STABLE
    went_down = change < 0
    return Trend.IMPROVING if went_down == lower_is_better else Trend.DEGRADING


class CircuitBreaker:
    """Failure counter that suppresses the enhancement call after repeated failures.

    Not thread-safe on its own; ``TriageMetricsCollector`` serializes access.
    """

    def __init__(
        self,
        threshold: int = 5,
        reset_seconds: float = 300.0,
        clock: Callable[[], float] = time.time,
    ):
        self.threshold = threshold
        self.reset_seconds = reset_seconds
        self._clock = clock
        self.failures = 0
        self.last_failure = 0.0
        self._open = False

    def record_failure(self) -> None:
        self.failures += 1
        self.last_failure = self._clock()
        if not self._open and self.failures >= self.threshold:
            self._open = True
            logger.error(
                "Circuit breaker activated after %d consecutive failures", self.failures
            )

    def record_success(self) -> None:
        if self.failures == 0:
            return
        self.failures -= 1
        if self.failures == 0 and self._open:
            self._open = False
            logger.info("Circuit breaker reset - system recovered")

    def reset(self) -> None:
        self.failures = 0
        self._open = False

    def is_open(self) -> bool:
        """Open state, closing lazily once the reset window has elapsed."""
        if self._open and self._clock() - self.last_failure > self.reset_seconds:
            logger.info("Circuit breaker reset window elapsed, closing")
            self.reset()
        return self._open

    def state(self) -> CircuitBreakerState:
        return CircuitBreakerState(
            failures=self.failures,
            last_failure_timestamp=self.last_failure,
            is_open=self.is_open(),
        )


class TriageMetricsCollector:
    """Rolling latency, cost and accuracy figures shared by all triage calls.

    Every public method takes the collector lock for its whole body and never
    while awaiting, so concurrent triage calls can report safely.
    """

    def __init__(
        self,
        budget: PerformanceBudget | None = None,
        breaker: CircuitBreaker | None = None,
        model_recommendation: str = "gpt-4o-mini",
        history_size: int = 50,
    ):
        self.budget = budget or PerformanceBudget()
        self.breaker = breaker or CircuitBreaker()
        self.model_recommendation = model_recommendation
        self._lock = threading.Lock()
        self._metrics = TriageMetricsSnapshot()
        self._history: deque[tuple[float, float, float]] = deque(maxlen=history_size)

    # ------------------------------------------------------------------
    # Circuit breaker
    # ------------------------------------------------------------------

    def is_circuit_open(self) -> bool:
        with self._lock:
            return self.breaker.is_open()

    def record_enhancement_success(self) -> None:
        with self._lock:
            self.breaker.record_success()

    def record_enhancement_failure(self) -> None:
        with self._lock:
            self.breaker.record_failure()

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_triage_completion(
        self,
        assessment_id: str,
        processing_metrics: ProcessingMetrics | None,
        confidence: float,
        sector: str,
        successful: bool = True,
        critical_domains: list[str] | None = None,
    ) -> None:
        """
        Fold one triage outcome into the rolling metrics.

        Args:
            assessment_id: Assessment that was triaged
            processing_metrics: Timing and cost of the run (None for failures)
            confidence: Overall confidence of the result
            sector: Sector value used for the per-industry breakdown
            successful: False when the triage raised
            critical_domains: Selected domains, counted per sector
        """
        with self._lock:
            m = self._metrics
            m.total_triages += 1

            if not successful or processing_metrics is None:
                m.failed_triages += 1
                logger.warning("Triage failed for assessment %s", assessment_id)
                return

            m.average_processing_time = _ema(
                m.average_processing_time, processing_metrics.processing_time, GLOBAL_EMA_ALPHA
            )
            m.average_token_usage = _ema(
                m.average_token_usage, processing_metrics.token_usage.total, GLOBAL_EMA_ALPHA
            )
            m.average_cost = _ema(
                m.average_cost, processing_metrics.cost_estimate, GLOBAL_EMA_ALPHA
            )
            m.accuracy_score = _ema(m.accuracy_score, confidence, GLOBAL_EMA_ALPHA)

            bucket = _confidence_bucket(confidence)
            m.confidence_distribution[bucket] = m.confidence_distribution.get(bucket, 0) + 1

            self._update_industry(sector, processing_metrics, confidence, critical_domains or [])
            self._history.append((m.average_processing_time, m.average_cost, m.accuracy_score))
            self._check_thresholds(assessment_id, processing_metrics, confidence)

    def _update_industry(
        self,
        sector: str,
        processing_metrics: ProcessingMetrics,
        confidence: float,
        critical_domains: list[str],
    ) -> None:
        industries = self._metrics.industry_performance
        perf = industries.get(sector)
        if perf is None:
            perf = IndustryPerformance(
                average_time=processing_metrics.processing_time,
                average_accuracy=confidence,
            )
            industries[sector] = perf
        else:
            perf.average_time = _ema(perf.average_time, processing_metrics.processing_time, SECTOR_EMA_ALPHA)
            perf.average_accuracy = _ema(perf.average_accuracy, confidence, SECTOR_EMA_ALPHA)
            perf.sample_count += 1

        for domain in critical_domains:
            perf.domain_distribution[domain] = perf.domain_distribution.get(domain, 0) + 1

    def _check_thresholds(
        self,
        assessment_id: str,
        processing_metrics: ProcessingMetrics,
        confidence: float,
    ) -> None:
        violations: list[str] = []
        if processing_metrics.processing_time > self.budget.max_processing_time:
            violations.append(
                f"Processing time exceeded: {round(processing_metrics.processing_time / 1000)}s"
            )
        if processing_metrics.token_usage.total > self.budget.max_tokens_per_request:
            violations.append(f"Token usage exceeded: {processing_metrics.token_usage.total}")
        if processing_metrics.cost_estimate > self.budget.max_cost_per_triage:
            violations.append(f"Cost exceeded: {processing_metrics.cost_estimate:.2f}")
        if confidence < self.budget.target_confidence:
            violations.append(f"Confidence below target: {confidence:.2f}")

        if violations:
            logger.warning(
                "Performance threshold violations for %s: %s", assessment_id, violations
            )

    def record_override(
        self,
        assessment_id: str,
        original_domains: list[str],
        overridden_domains: list[str],
        reason: str,
    ) -> None:
        with self._lock:
            m = self._metrics
            m.override_rate = m.override_rate * OVERRIDE_EMA_DECAY + (1 - OVERRIDE_EMA_DECAY)
            logger.info(
                "Triage override recorded for %s: %s -> %s (reason: %s, override rate: %.3f)",
                assessment_id,
                original_domains,
                overridden_domains,
                reason,
                m.override_rate,
            )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def get_metrics(self) -> TriageMetricsSnapshot:
        """Deep copy of the current metrics, breaker state included."""
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> TriageMetricsSnapshot:
        return self._metrics.model_copy(
            update={"circuit_breaker": self.breaker.state()}, deep=True
        )

    def get_health_status(self) -> HealthReport:
        with self._lock:
            return self._health()

    def _health(self) -> HealthReport:
        m = self._metrics
        issues: list[str] = []
        recommendations: list[str] = []
        status = HealthStatus.HEALTHY

        if m.average_processing_time > self.budget.max_processing_time:
            issues.append(
                f"Average processing time ({round(m.average_processing_time / 1000)}s) exceeds threshold"
            )
            recommendations.append("Consider optimizing prompts or using faster models")
            status = HealthStatus.DEGRADED

        if m.average_cost > self.budget.max_cost_per_triage:
            issues.append(f"Average cost ({m.average_cost:.2f}) exceeds budget")
            recommendations.append("Implement prompt optimization and model fallbacks")
            status = HealthStatus.DEGRADED

        if m.override_rate > OVERRIDE_RATE_CRITICAL:
            issues.append(
                f"High override rate ({round(m.override_rate * 100)}%) indicates accuracy issues"
            )
            recommendations.append("Review triage algorithm and industry rules")
            status = HealthStatus.CRITICAL

        if m.average_token_usage > self.budget.max_tokens_per_request:
            issues.append(f"Average token usage ({round(m.average_token_usage)}) is high")
            recommendations.append("Optimize prompt structure and reduce unnecessary context")

        if self.breaker.is_open():
            issues.append("Circuit breaker is open due to repeated failures")
            recommendations.append("Investigate and resolve underlying service issues")
            status = HealthStatus.CRITICAL

        return HealthReport(status=status, issues=issues, recommendations=recommendations)

    def calculate_trends(self) -> PerformanceTrends:
        with self._lock:
            return self._trends()

    def _trends(self) -> PerformanceTrends:
        if len(self._history) < 2:
            return PerformanceTrends()
        (old_time, old_cost, old_acc), (new_time, new_cost, new_acc) = (
            self._history[-2],
            self._history[-1],
        )
        return PerformanceTrends(
            processing_time=_trend(old_time, new_time),
            cost=_trend(old_cost, new_cost),
            accuracy=_trend(old_acc, new_acc, lower_is_better=False),
        )

    def generate_performance_report(self, timeframe: str = "day") -> PerformanceReport:
        with self._lock:
            summary = self._snapshot()
            return PerformanceReport(
                timeframe=timeframe,
                summary=summary,
                health=self._health(),
                industry_breakdown=summary.industry_performance,
                trends=self._trends(),
            )

    def get_optimization_recommendations(self) -> OptimizationRecommendations:
        with self._lock:
            m = self._metrics
            prompt_optimization: list[str] = []
            caching_strategy: list[str] = []
            batch_processing = False

            if m.average_cost > self.budget.max_cost_per_triage * 0.8:
                prompt_optimization.append("Use more concise prompts for cost optimization")

            if m.average_processing_time > self.budget.max_processing_time * 0.8:
                prompt_optimization.append("Reduce prompt complexity to improve speed")
                caching_strategy.append("Cache industry rules and common patterns")

            if m.average_token_usage > self.budget.max_tokens_per_request * 0.8:
                prompt_optimization.append("Remove unnecessary context from prompts")
                prompt_optimization.append("Use structured outputs to reduce completion tokens")

            if len(m.industry_performance) > 3:
                batch_processing = True
                caching_strategy.append("Implement industry-specific caching")

            return OptimizationRecommendations(
                model_selection=self.model_recommendation,
                prompt_optimization=prompt_optimization,
                caching_strategy=caching_strategy,
                batch_processing=batch_processing,
            )

    def estimate_processing_time(
        self,
        sector: str,
        domain_count: int,
        data_completeness: float,
    ) -> ProcessingTimeEstimate:
        """Predict the duration of a triage from the rolling averages."""
        with self._lock:
            m = self._metrics
            base_time = m.average_processing_time or DEFAULT_ESTIMATE_MS
            factors: list[str] = []

            industry = m.industry_performance.get(sector)
            if industry is not None:
                base_time = industry.average_time
                factors.append(f"Industry-specific baseline: {sector}")

            base_time *= 1 + (domain_count - 3) * 0.1
            if domain_count != 3:
                factors.append(f"Domain count adjustment: {domain_count} domains")

            if data_completeness < 0.8:
                base_time *= 1.2
                factors.append("Incomplete data penalty")

            if self.breaker.failures > 0:
                base_time *= 1.3
                factors.append("System stress factor")

            return ProcessingTimeEstimate(
                estimated_time=round(base_time),
                confidence=0.8 if industry is not None else 0.6,
                factors=factors,
            )
