"""Batch triage script - generates JSON results."""

import argparse
import asyncio
import json
import logging
from datetime import datetime
from typing import Any

from evaluation.config import EvalConfig
from evaluation.loader import load_snapshots, sample_snapshots
from src.config.settings import get_settings
from src.infrastructure.logging.logger import setup_logging
from src.services.triage.errors import TriageError
from src.services.triage.models import AssessmentSnapshot
from src.services.triage.service import TriageService

logger = logging.getLogger(__name__)


async def evaluate_snapshot(service: TriageService, snapshot: AssessmentSnapshot) -> dict[str, Any]:
    """Triage a single assessment; triage errors are recorded, not raised."""
    logger.info(f"[{snapshot.id}] {snapshot.company_name}")
    try:
        result = await service.perform_triage(snapshot)
    except TriageError as e:
        logger.error(f"Triage failed for {snapshot.id}: {e}")
        return {"id": snapshot.id, "company_name": snapshot.company_name, "error": str(e)}

    return {
        "id": snapshot.id,
        "company_name": snapshot.company_name,
        "sector": result.industry_context.sector.value,
        "critical_domains": result.critical_domains,
        "unscored_domains": result.unscored_domains,
        "confidence": result.confidence,
        "enhancement_applied": result.enhancement_applied,
        "processing_time_ms": result.processing_metrics.processing_time,
        "cost_estimate": result.processing_metrics.cost_estimate,
        "compliance_violations": result.review.compliance_violations if result.review else [],
        "quality_score": result.review.quality_score if result.review else None,
        "error": None,
    }


async def run_evaluation(service: TriageService, config: EvalConfig) -> dict[str, Any]:
    """Run the batch and return results plus the performance report."""
    snapshots = load_snapshots(config.data_path)
    if config.sample_size:
        snapshots = sample_snapshots(snapshots, n=config.sample_size)
        logger.info(f"Sampled {len(snapshots)} assessments")

    results: list[dict[str, Any]] = []
    for i, snapshot in enumerate(snapshots):
        results.append(await evaluate_snapshot(service, snapshot))
        logger.info(f"[{i + 1}/{len(snapshots)}] Done")
        if config.delay_between_assessments and i < len(snapshots) - 1:
            await asyncio.sleep(config.delay_between_assessments)

    report = service.generate_performance_report(config.report_timeframe)
    return {
        "metadata": {
            "timestamp": datetime.now().isoformat(),
            "total_assessments": len(results),
            "failed": sum(1 for r in results if r["error"]),
            "dataset": config.data_path.name,
        },
        "results": results,
        "performance_report": report.model_dump(mode="json"),
    }


async def main() -> None:
    parser = argparse.ArgumentParser(description="Run batch domain triage")
    parser.add_argument("--data", type=str, help="Path to a JSON array of assessments")
    parser.add_argument("--sample", type=int, help="Number of assessments to sample")
    parser.add_argument("--delay", type=float, default=0.0, help="Delay between assessments")
    parser.add_argument("--output", type=str, help="Output JSON path")
    parser.add_argument(
        "--timeframe", type=str, default="day", help="Timeframe label of the performance report"
    )
    parser.add_argument(
        "--no-enhancement", action="store_true", help="Score without the completion service"
    )
    config = EvalConfig.from_args(parser.parse_args())

    settings = config.apply_to(get_settings())
    setup_logging(settings.log_level, json_output=False)

    service = TriageService(settings)
    output = await run_evaluation(service, config)

    output_path = config.output_path
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(output, f, indent=2, ensure_ascii=False, default=str)

    logger.info(f"Results saved to {output_path}")


if __name__ == "__main__":
    asyncio.run(main())
