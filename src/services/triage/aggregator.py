"""Aggregate raw questionnaire answers into base domain scores."""

from __future__ import annotations

import logging
import numbers

import numpy as np

from src.config.constants import (
    BASELINE_QUALITY_SCORE,
    MAX_CONFIDENCE,
    MAX_SCORE,
    MIN_CONFIDENCE,
    MIN_SCORE,
    AgentActivation,
    PriorityLevel,
    Severity,
)
from src.services.triage.models import (
    AssessmentSnapshot,
    AssessmentValidation,
    DomainResponse,
    DomainScore,
)

logger = logging.getLogger(__name__)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``."""
    return max(low, min(high, float(value)))


def classify_severity(score: float) -> Severity:
    """Classify severity from a domain score."""
    if score >= 4.5:
        return Severity.CRITICAL
    if score >= 4.0:
        return Severity.HIGH
    if score >= 3.0:
        return Severity.MEDIUM
    return Severity.LOW


def classify_priority_level(score: float) -> PriorityLevel:
    """Classify priority level from a domain score."""
    if score >= 4.5:
        return PriorityLevel.CRITICAL
    if score >= 4.0:
        return PriorityLevel.HIGH
    if score >= 3.5:
        return PriorityLevel.MODERATE
    return PriorityLevel.HEALTHY


def determine_agent_activation(score: float) -> AgentActivation:
    """Decide whether a specialist agent is needed for a domain score."""
    if score >= 4.0:
        return AgentActivation.REQUIRED
    if score >= 3.5:
        return AgentActivation.CONDITIONAL
    return AgentActivation.NOT_REQUIRED


def identify_base_critical_factors(score: float) -> list[str]:
    factors: list[str] = []
    if score >= 4.0:
        factors.append("Multiple high-severity responses detected")
    if score >= 4.5:
        factors.append("Critical operational gaps identified")
    return factors


def _answered_value(value: object) -> float | None:
    """Return the numeric answer, or None when the question is unanswered."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    number = float(value)
    if not np.isfinite(number) or number <= 0:
        return None
    return number


def answered_values(response: DomainResponse) -> list[float]:
    """Numeric answers of a domain, unanswered entries discarded."""
    values = (_answered_value(q.value) for q in response.questions.values())
    return [v for v in values if v is not None]


def score_domain(response: DomainResponse) -> DomainScore:
    """Compute the base score and confidence of one domain."""
    values = answered_values(response)
    total = max(len(response.questions), 1)

    if values:
        arr = np.asarray(values, dtype=float)
        average = float(arr.mean())
        variance = float(arr.var())  # population variance
    else:
        average = MIN_SCORE
        variance = 0.0

    completeness = len(values) / total
    confidence = clamp(min(completeness, 1 - variance / 25), MIN_CONFIDENCE, MAX_CONFIDENCE)
    score = clamp(average, MIN_SCORE, MAX_SCORE)

    return DomainScore(
        score=score,
        confidence=confidence,
        reasoning=f"Base score calculated from {len(values)} responses",
        critical_factors=identify_base_critical_factors(average),
        cross_domain_impacts=[],
        severity=classify_severity(average),
        priority_level=classify_priority_level(average),
        agent_activation=determine_agent_activation(average),
    )


def calculate_base_domain_scores(snapshot: AssessmentSnapshot) -> dict[str, DomainScore]:
    """Score every domain that declares at least one question."""
    scores: dict[str, DomainScore] = {}
    for domain, response in snapshot.domain_responses.items():
        if not response.questions:
            logger.debug("Skipping domain %s: no questions declared", domain)
            continue
        scores[domain] = score_domain(response)
    return scores


def calculate_response_quality(snapshot: AssessmentSnapshot) -> float:
    """Response quality of an assessment (fixed baseline)."""
    return BASELINE_QUALITY_SCORE


def validate_assessment(
    snapshot: AssessmentSnapshot,
    required_completeness: float,
) -> AssessmentValidation:
    """
    Check that an assessment carries enough answers to be triaged.

    Args:
        snapshot: Assessment to check
        required_completeness: Minimum share of answered questions (0-1)

    Returns:
        AssessmentValidation with completeness, quality and any errors
    """
    if not snapshot.domain_responses:
        return AssessmentValidation(
            is_valid=False,
            confidence=0.0,
            errors=["No domain responses found"],
            data_completeness=0.0,
            quality_score=0.0,
        )

    total_questions = 0
    answered_questions = 0
    for response in snapshot.domain_responses.values():
        total_questions += len(response.questions)
        answered_questions += len(answered_values(response))

    data_completeness = answered_questions / total_questions if total_questions else 0.0

    errors: list[str] = []
    if data_completeness < required_completeness:
        errors.append(
            f"Data completeness ({round(data_completeness * 100)}%) below required "
            f"threshold ({round(required_completeness * 100)}%)"
        )

    quality_score = calculate_response_quality(snapshot)

    return AssessmentValidation(
        is_valid=not errors,
        confidence=min(data_completeness, quality_score),
        errors=errors,
        data_completeness=data_completeness,
        quality_score=quality_score,
    )
