"""Overall triage confidence."""

from __future__ import annotations

from src.config.constants import MAX_CONFIDENCE, MIN_CONFIDENCE
from src.services.triage.aggregator import clamp
from src.services.triage.models import AssessmentValidation, DomainScore

DOMAIN_CONFIDENCE_WEIGHT = 0.5
COMPLETENESS_WEIGHT = 0.3
QUALITY_WEIGHT = 0.2


def blend_confidence(
    mean_domain_confidence: float,
    data_completeness: float,
    quality_score: float,
) -> float:
    score = (
        DOMAIN_CONFIDENCE_WEIGHT * mean_domain_confidence
        + COMPLETENESS_WEIGHT * data_completeness
        + QUALITY_WEIGHT * quality_score
    )
    return clamp(score, MIN_CONFIDENCE, MAX_CONFIDENCE)


def calculate_overall_confidence(
    domain_scores: dict[str, DomainScore],
    validation: AssessmentValidation,
) -> float:
    """Blend mean domain confidence with the validation pass figures."""
    confidences = [s.confidence for s in domain_scores.values()]
    mean_confidence = sum(confidences) / len(confidences) if confidences else 0.0
    return blend_confidence(mean_confidence, validation.data_completeness, validation.quality_score)
