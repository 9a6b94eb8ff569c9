"""Cross-domain impact resolution and industry weighting."""

from src.config.constants import (
    CROSS_DOMAIN_BOOST_FACTOR,
    HIGH_SCORE_THRESHOLD,
    MAX_SCORE,
    MIN_SCORE,
)
from src.config.industry_rules import CROSS_DOMAIN_IMPACT_MATRIX
from src.services.triage.aggregator import (
    clamp,
    classify_priority_level,
    classify_severity,
    determine_agent_activation,
)
from src.services.triage.models import DomainScore, IndustryContext


def apply_cross_domain_impacts(
    domain_scores: dict[str, DomainScore],
    industry_context: IndustryContext,
    impact_matrix: dict[str, dict[str, float]] | None = None,
) -> dict[str, DomainScore]:
    """
    Boost domains whose correlated domains score high, then apply industry weights.

    Every boost reads the incoming scores, so the result does not depend on
    iteration order. A new map is returned; the input is left untouched.

    Args:
        domain_scores: Scores after enhancement
        industry_context: Context supplying the weighting multipliers
        impact_matrix: ``impact[domain][other] = weight``; defaults to the static matrix

    Returns:
        New map of scores with severity, priority and activation recomputed
    """
    matrix = impact_matrix if impact_matrix is not None else CROSS_DOMAIN_IMPACT_MATRIX
    resolved: dict[str, DomainScore] = {}

    for domain, current in domain_scores.items():
        boost = 0.0
        impacts: list[str] = []

        for other, weight in matrix.get(domain, {}).items():
            other_score = domain_scores.get(other)
            if other_score is not None and other_score.score >= HIGH_SCORE_THRESHOLD:
                boost += weight * CROSS_DOMAIN_BOOST_FACTOR
                impacts.append(f"High {other} score increases {domain} priority")

        multiplier = industry_context.weighting_multipliers.get(domain, 1.0)
        # Stays within [1, 5] for any multiplier
        final_score = clamp((current.score + boost) * multiplier, MIN_SCORE, MAX_SCORE)

        resolved[domain] = current.model_copy(
            update={
                "score": final_score,
                "cross_domain_impacts": impacts,
                "severity": classify_severity(final_score),
                "priority_level": classify_priority_level(final_score),
                "agent_activation": determine_agent_activation(final_score),
            }
        )

    return resolved
