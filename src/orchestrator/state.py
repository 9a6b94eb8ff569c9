"""Triage pipeline state model."""

from dataclasses import dataclass, field
from typing import Optional

from src.services.triage.enhancer import SKIPPED_BREAKER_OPEN
from src.services.triage.models import (
    AssessmentSnapshot,
    AssessmentValidation,
    DomainScore,
    EnhancementFailure,
    EnhancementResult,
    EnhancementSuccess,
    IndustryContext,
    TokenUsage,
)


@dataclass
class TriageState:
    """State object passed through the triage pipeline."""

    # Input
    snapshot: AssessmentSnapshot

    # Step 1: Validation
    validation: Optional[AssessmentValidation] = None

    # Step 2: Industry context
    industry_context: Optional[IndustryContext] = None

    # Step 3: Base scores
    base_scores: dict[str, DomainScore] = field(default_factory=dict)

    # Step 4: Enhancement
    enhancement: Optional[EnhancementResult] = None

    # Step 5: Cross-domain impacts
    final_scores: dict[str, DomainScore] = field(default_factory=dict)

    # Step 6: Selection
    threshold: float = 0.0
    critical_domains: list[str] = field(default_factory=list)
    unscored_domains: list[str] = field(default_factory=list)

    # Step 7: Confidence
    confidence: float = 0.0

    @property
    def assessment_id(self) -> str:
        return self.snapshot.id

    @property
    def enhancement_applied(self) -> bool:
        return isinstance(self.enhancement, EnhancementSuccess)

    @property
    def enhancement_skipped_by_breaker(self) -> bool:
        return (
            isinstance(self.enhancement, EnhancementFailure)
            and self.enhancement.reason == SKIPPED_BREAKER_OPEN
        )

    @property
    def token_usage(self) -> TokenUsage:
        if isinstance(self.enhancement, EnhancementSuccess):
            return self.enhancement.token_usage
        return TokenUsage()
