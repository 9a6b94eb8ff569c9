"""Dataset loader for batch triage runs."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from src.config.constants import Sector
from src.services.triage.models import AssessmentSnapshot

logger = logging.getLogger(__name__)


def load_snapshots(path: Path) -> list[AssessmentSnapshot]:
    """Load assessment snapshots from a JSON array.

    Entries that fail validation are logged and skipped.
    """
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError(f"Expected a JSON array of assessments in {path}")

    snapshots: list[AssessmentSnapshot] = []
    for idx, entry in enumerate(raw):
        try:
            snapshots.append(AssessmentSnapshot.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping entry {idx}: {e.error_count()} validation errors")

    logger.info(f"Loaded {len(snapshots)} assessments from {path}")
    return snapshots


def snapshot_sector(snapshot: AssessmentSnapshot) -> Sector:
    classification = snapshot.industry_classification
    return Sector.from_value(classification.sector if classification else None)


def sample_snapshots(snapshots: list[AssessmentSnapshot], n: int = 10) -> list[AssessmentSnapshot]:
    """Sample n snapshots stratified by sector."""
    if n >= len(snapshots):
        return snapshots

    groups: dict[Sector, list[AssessmentSnapshot]] = {}
    for s in snapshots:
        groups.setdefault(snapshot_sector(s), []).append(s)

    per_group = max(1, n // len(groups))
    sampled: list[AssessmentSnapshot] = []
    for group in groups.values():
        sampled.extend(group[:per_group])

    return sampled[:n]
