"""Post-analysis review of triage results.

The review is read-only: it reports inconsistencies and compliance gaps but
never rewrites the selection, so required domains and the 3-5 bound chosen by
the selector always stand.
"""

import logging

import numpy as np

from src.config.constants import (
    MAX_CRITICAL_DOMAINS,
    MIN_CRITICAL_DOMAINS,
    Domain,
    RegulatoryTier,
)
from src.services.triage.aggregator import classify_priority_level, classify_severity
from src.services.triage.industry import IndustryContextBuilder
from src.services.triage.models import AssessmentSnapshot, ResultReview, TriageAnalysisResult

logger = logging.getLogger(__name__)

STRATEGY_DOMAINS = frozenset({Domain.STRATEGIC_ALIGNMENT.value, Domain.CHANGE_MANAGEMENT.value})
OPERATIONS_DOMAINS = frozenset(
    {Domain.OPERATIONAL_EXCELLENCE.value, Domain.TECHNOLOGY_DATA.value, Domain.SUPPLY_CHAIN.value}
)
PEOPLE_DOMAINS = frozenset(
    {
        Domain.PEOPLE_ORGANIZATION.value,
        Domain.CUSTOMER_EXPERIENCE.value,
        Domain.CUSTOMER_SUCCESS.value,
    }
)


def calculate_quality_score(snapshot: AssessmentSnapshot, result: TriageAnalysisResult) -> float:
    """Blend score spread, mean confidence and reported completeness into [0, 1]."""
    scores = [s.score for s in result.domain_scores.values()]
    confidences = [s.confidence for s in result.domain_scores.values()]

    variance = float(np.var(scores)) if scores else 0.0
    variance_score = max(0.0, 1 - variance / 4)
    mean_confidence = min(1.0, float(np.mean(confidences))) if confidences else 0.0

    reported = [r.completeness or 0.0 for r in snapshot.domain_responses.values()]
    completeness_score = (sum(reported) / max(len(reported), 1)) / 100

    quality = variance_score * 0.3 + mean_confidence * 0.4 + completeness_score * 0.3
    return max(0.0, min(1.0, quality))


class TriageValidator:
    """Checks a finished result for coverage, consistency and industry compliance."""

    def __init__(
        self,
        industry_builder: IndustryContextBuilder | None = None,
        confidence_minimum: float = 0.7,
    ):
        self.industry_builder = industry_builder or IndustryContextBuilder()
        self.confidence_minimum = confidence_minimum

    def _check_coverage(self, result: TriageAnalysisResult, review: ResultReview) -> None:
        selected = result.critical_domains
        if len(selected) < MIN_CRITICAL_DOMAINS:
            review.issues.append(
                f"Insufficient domains selected: {len(selected)} (minimum: {MIN_CRITICAL_DOMAINS})"
            )
        if len(selected) > MAX_CRITICAL_DOMAINS:
            review.issues.append(
                f"Too many domains selected: {len(selected)} (maximum: {MAX_CRITICAL_DOMAINS})"
            )

        chosen = set(selected)
        if not (chosen & STRATEGY_DOMAINS or chosen & OPERATIONS_DOMAINS or chosen & PEOPLE_DOMAINS):
            review.recommendations.append(
                "Domain selection lacks balance across strategy, operations, and people dimensions"
            )

    def _check_consistency(self, result: TriageAnalysisResult, review: ResultReview) -> None:
        for domain, score in result.domain_scores.items():
            expected_severity = classify_severity(score.score)
            if score.severity is not expected_severity:
                review.issues.append(
                    f"Severity mismatch for {domain}: expected {expected_severity.value}, "
                    f"got {score.severity.value}"
                )
            expected_priority = classify_priority_level(score.score)
            if score.priority_level is not expected_priority:
                review.issues.append(
                    f"Priority level mismatch for {domain}: expected {expected_priority.value}, "
                    f"got {score.priority_level.value}"
                )

    def _check_industry(self, result: TriageAnalysisResult, review: ResultReview) -> None:
        context = result.industry_context
        _, violations, recommendations = self.industry_builder.validate_industry_compliance(
            result.critical_domains, context.sector
        )
        review.compliance_violations.extend(violations)
        review.recommendations.extend(recommendations)

        if (
            context.regulatory_classification is RegulatoryTier.HEAVILY
            and Domain.RISK_COMPLIANCE.value not in result.critical_domains
        ):
            review.compliance_violations.append(
                "Risk-compliance domain required for heavily regulated industries"
            )

    def review(self, snapshot: AssessmentSnapshot, result: TriageAnalysisResult) -> ResultReview:
        """
        Review a triage result without modifying it.

        Args:
            snapshot: Assessment the result was computed from
            result: Result to review

        Returns:
            ResultReview listing issues, compliance violations and recommendations
        """
        review = ResultReview()
        self._check_coverage(result, review)
        self._check_consistency(result, review)
        self._check_industry(result, review)

        if result.confidence < self.confidence_minimum:
            review.recommendations.append(
                f"Overall confidence ({result.confidence:.2f}) is below the minimum "
                f"({self.confidence_minimum:.2f}); treat the selection as provisional"
            )

        quality = calculate_quality_score(snapshot, result)
        review.quality_score = quality
        if quality < 0.65:
            review.recommendations.append(
                f"Response quality ({quality:.2f}) is low; consider collecting more answers"
            )

        if not review.is_consistent:
            logger.warning(
                "Triage review for %s found %d issues and %d compliance violations",
                result.assessment_id,
                len(review.issues),
                len(review.compliance_violations),
            )
        return review
