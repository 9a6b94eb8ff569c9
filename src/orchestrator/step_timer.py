"""Context manager for timing and logging triage pipeline stages."""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from src.config.constants import TriageStage, TriageStageDescription
from src.infrastructure.logging.logger import StructuredLogger

logger = logging.getLogger(__name__)


def log_pipeline_stage(stage: TriageStage) -> None:
    """Log the start of a pipeline stage with its description."""
    logger.debug("%s: %s", stage.value, TriageStageDescription[stage.name].value)


class StageContext:
    """Mutable context for a timed pipeline stage."""

    def __init__(self, assessment_id: str) -> None:
        self.assessment_id = assessment_id
        self.state: dict[str, Any] = {}
        self.elapsed_ms: float = 0.0

    def record(self, **state: Any) -> None:
        self.state.update(state)


@contextmanager
def timed_stage(
    stage: TriageStage,
    structured_logger: StructuredLogger,
    assessment_id: str,
) -> Iterator[StageContext]:
    """Time a pipeline stage and log its recorded state.

    Failures are logged with the stage name and re-raised.
    """
    log_pipeline_stage(stage)
    ctx = StageContext(assessment_id)
    start = time.perf_counter()
    try:
        yield ctx
    except Exception as e:
        ctx.elapsed_ms = (time.perf_counter() - start) * 1000
        structured_logger.log_error(
            stage.value,
            e,
            context={"assessment_id": assessment_id, **ctx.state},
        )
        raise
    ctx.elapsed_ms = (time.perf_counter() - start) * 1000
    structured_logger.log_step(
        stage.value,
        {"assessment_id": assessment_id, **ctx.state},
        duration_ms=ctx.elapsed_ms,
    )
