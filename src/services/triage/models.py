"""Triage service models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.config.constants import (
    AgentActivation,
    CompanyStage,
    HealthStatus,
    PriorityLevel,
    RegulatoryTier,
    Sector,
    Severity,
    Trend,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ==========================================
#  Assessment input
# ==========================================


class QuestionResponse(BaseModel):
    """A single questionnaire answer. Non-numeric or empty values are unanswered."""

    model_config = ConfigDict(frozen=True)

    value: Any = None


class DomainResponse(BaseModel):
    """Answers for one domain, keyed by question id."""

    model_config = ConfigDict(frozen=True)

    questions: dict[str, QuestionResponse] = Field(default_factory=dict)
    completeness: float | None = None  # percentage reported by the questionnaire


class IndustryClassification(BaseModel):
    """Industry classification supplied with the assessment."""

    model_config = ConfigDict(frozen=True)

    sector: str
    sub_sector: str | None = None
    regulatory_classification: RegulatoryTier | None = None
    company_stage: CompanyStage | None = None
    employee_count: int | None = None


class AssessmentContext(BaseModel):
    """Free-text context supplied by the company."""

    model_config = ConfigDict(frozen=True)

    primary_business_challenges: list[str] = Field(default_factory=list)
    strategic_objectives: list[str] = Field(default_factory=list)


class AssessmentSnapshot(BaseModel):
    """Immutable assessment handed to the engine by the assessment store."""

    model_config = ConfigDict(frozen=True)

    id: str
    company_name: str
    company_stage: CompanyStage | None = None
    industry_classification: IndustryClassification | None = None
    domain_responses: dict[str, DomainResponse] = Field(default_factory=dict)
    assessment_context: AssessmentContext | None = None


# ==========================================
#  Scoring
# ==========================================


class DomainScore(BaseModel):
    """Score and derived classifications for one domain."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(ge=1.0, le=5.0)
    confidence: float = Field(ge=0.1, le=1.0)
    reasoning: str = ""
    critical_factors: list[str] = Field(default_factory=list)
    cross_domain_impacts: list[str] = Field(default_factory=list)
    severity: Severity
    priority_level: PriorityLevel
    agent_activation: AgentActivation


class IndustryContext(BaseModel):
    """Industry rules resolved for one triage run."""

    model_config = ConfigDict(frozen=True)

    sector: Sector = Sector.UNKNOWN
    regulatory_classification: RegulatoryTier = RegulatoryTier.LIGHTLY
    specific_rules: list[str] = Field(default_factory=list)
    benchmarks: dict[str, float] = Field(default_factory=dict)
    weighting_multipliers: dict[str, float] = Field(default_factory=dict)

    @property
    def is_known_sector(self) -> bool:
        return self.sector is not Sector.UNKNOWN


class TokenUsage(BaseModel):
    """Token counts reported by the completion service."""

    model_config = ConfigDict(frozen=True)

    prompt: int = 0
    completion: int = 0
    total: int = 0


class ProcessingMetrics(BaseModel):
    """Cost and timing of one triage call."""

    model_config = ConfigDict(frozen=True)

    processing_time: float  # milliseconds
    model_used: str
    token_usage: TokenUsage = Field(default_factory=TokenUsage)
    cost_estimate: float = 0.0


class TriageOverride(BaseModel):
    """Audit record of a manual change to the critical domain list."""

    model_config = ConfigDict(frozen=True)

    assessment_id: str
    original_selection: list[str]
    overridden_selection: list[str]
    overridden_by: str
    override_reason: str
    timestamp: datetime = Field(default_factory=_utcnow)
    approval_status: str = "approved"


class ResultReview(BaseModel):
    """Consistency review of a finished triage result."""

    issues: list[str] = Field(default_factory=list)
    compliance_violations: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    quality_score: float = 0.0

    @property
    def is_consistent(self) -> bool:
        return not self.issues and not self.compliance_violations


class TriageAnalysisResult(BaseModel):
    """Outcome of one triage run."""

    model_config = ConfigDict(frozen=True)

    assessment_id: str
    domain_scores: dict[str, DomainScore]
    critical_domains: list[str]
    confidence: float = Field(ge=0.1, le=1.0)
    reasoning: str
    industry_context: IndustryContext
    processing_metrics: ProcessingMetrics
    enhancement_applied: bool = False
    # Critical domains without a numeric score (never answered, or added by override)
    unscored_domains: list[str] = Field(default_factory=list)
    override_history: list[TriageOverride] = Field(default_factory=list)
    # Review of the computed selection; cleared when an override replaces it
    review: ResultReview | None = None
    created_at: datetime = Field(default_factory=_utcnow)


# ==========================================
#  Completion service payload
# ==========================================


class DomainAnalysis(BaseModel):
    """Per-domain refinement returned by the completion service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)

    adjusted_score: float | None = Field(default=None, alias="adjustedScore")
    confidence: float | None = None
    reasoning: str | None = None
    critical_factors: list[str] | None = Field(default=None, alias="criticalFactors")
    severity: Severity | None = None


class EnhancementResponse(BaseModel):
    """Top-level payload expected from the completion service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    domain_analysis: dict[str, DomainAnalysis] = Field(alias="domainAnalysis")


@dataclass(frozen=True)
class EnhancementSuccess:
    """Scores refined by the completion service."""

    scores: dict[str, DomainScore]
    token_usage: TokenUsage
    model: str
    enhanced_domains: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class EnhancementFailure:
    """No refinement available; ``scores`` are the unmodified base scores."""

    scores: dict[str, DomainScore]
    reason: str
    attempted: bool = True  # False when the call was skipped


EnhancementResult = EnhancementSuccess | EnhancementFailure


# ==========================================
#  Validation
# ==========================================


@dataclass
class AssessmentValidation:
    """Result of the pre-analysis validation pass."""

    is_valid: bool
    confidence: float
    errors: list[str]
    data_completeness: float
    quality_score: float


# ==========================================
#  Telemetry
# ==========================================


class CircuitBreakerState(BaseModel):
    """Snapshot of the circuit breaker."""

    failures: int = 0
    last_failure_timestamp: float = 0.0
    is_open: bool = False


class IndustryPerformance(BaseModel):
    """Rolling performance for one sector."""

    average_time: float
    average_accuracy: float
    sample_count: int = 1
    domain_distribution: dict[str, int] = Field(default_factory=dict)


class TriageMetricsSnapshot(BaseModel):
    """Point-in-time copy of the process-wide triage metrics."""

    average_processing_time: float = 0.0
    average_token_usage: float = 0.0
    average_cost: float = 0.0
    accuracy_score: float = 0.0
    override_rate: float = 0.0
    total_triages: int = 0
    failed_triages: int = 0
    confidence_distribution: dict[str, int] = Field(default_factory=dict)
    industry_performance: dict[str, IndustryPerformance] = Field(default_factory=dict)
    circuit_breaker: CircuitBreakerState = Field(default_factory=CircuitBreakerState)


class HealthReport(BaseModel):
    """Derived health of the triage engine."""

    status: HealthStatus
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class PerformanceTrends(BaseModel):
    processing_time: Trend = Trend.STABLE
    cost: Trend = Trend.STABLE
    accuracy: Trend = Trend.STABLE


class PerformanceReport(BaseModel):
    """Periodic report for the monitoring collaborator."""

    timeframe: str
    summary: TriageMetricsSnapshot
    health: HealthReport
    industry_breakdown: dict[str, IndustryPerformance]
    trends: PerformanceTrends
    generated_at: datetime = Field(default_factory=_utcnow)


class OptimizationRecommendations(BaseModel):
    model_selection: str
    prompt_optimization: list[str] = Field(default_factory=list)
    caching_strategy: list[str] = Field(default_factory=list)
    batch_processing: bool = False


class ProcessingTimeEstimate(BaseModel):
    estimated_time: int  # milliseconds
    confidence: float
    factors: list[str] = Field(default_factory=list)
