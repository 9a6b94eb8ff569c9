"""Critical domain selection."""

import logging

from src.config.constants import DOMAIN_ORDER, MAX_CRITICAL_DOMAINS, MIN_CRITICAL_DOMAINS
from src.services.triage.models import DomainScore

logger = logging.getLogger(__name__)


def _tie_break_key(domain: str) -> tuple[int, str]:
    """Canonical domain order; unrecognised keys sort after known ones, alphabetically."""
    return (DOMAIN_ORDER.get(domain, len(DOMAIN_ORDER)), domain)


def rank_domains(domain_scores: dict[str, DomainScore]) -> list[str]:
    """Domains sorted by descending score with a deterministic tie-break."""
    return sorted(
        domain_scores,
        key=lambda d: (-domain_scores[d].score, *_tie_break_key(d)),
    )


def select_critical_domains(
    domain_scores: dict[str, DomainScore],
    threshold: float,
    required_domains: list[str] | None = None,
) -> list[str]:
    """
    Pick the domains that merit deep analysis.

    Every domain at or above ``threshold`` is selected and every required
    domain is force-included, scored or not. Selections shorter than three
    are backfilled from the ranking; longer than five are cut, keeping
    required domains first and then the highest ranked.

    Args:
        domain_scores: Final domain scores
        threshold: Selection threshold for the run's regulatory tier
        required_domains: Sector-required domains

    Returns:
        Selected domains in ranked order, followed by any unscored required domains
    """
    ranked = rank_domains(domain_scores)
    required = list(dict.fromkeys(required_domains or []))

    picked: set[str] = {d for d in ranked if domain_scores[d].score >= threshold}
    picked.update(required)

    for domain in ranked:
        if len(picked) >= MIN_CRITICAL_DOMAINS:
            break
        picked.add(domain)

    if len(picked) > MAX_CRITICAL_DOMAINS:
        kept = required[:MAX_CRITICAL_DOMAINS]
        for domain in ranked:
            if len(kept) >= MAX_CRITICAL_DOMAINS:
                break
            if domain in picked and domain not in kept:
                kept.append(domain)
        logger.info(
            "Selection capped at %d domains (dropped: %s)",
            MAX_CRITICAL_DOMAINS,
            sorted(picked - set(kept)),
        )
        picked = set(kept)

    selected = [d for d in ranked if d in picked]
    unscored = sorted((d for d in picked if d not in domain_scores), key=_tie_break_key)
    return selected + unscored
