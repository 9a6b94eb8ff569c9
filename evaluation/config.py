"""Batch triage run configuration."""

import argparse
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

EVALUATION_DIR = Path(__file__).parent


@dataclass
class EvalConfig:
    """Inputs, pacing and output location of one batch triage run."""

    data_path: Path = EVALUATION_DIR / "data" / "assessments.json"
    results_dir: Path = EVALUATION_DIR / "results"
    output: Path | None = None

    sample_size: int | None = None  # stratified by sector when set
    delay_between_assessments: float = 0.0
    enhancement_enabled: bool = True
    report_timeframe: str = "day"

    run_id: str = field(default_factory=lambda: datetime.now().strftime("%Y%m%d_%H%M%S"))

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "EvalConfig":
        config = cls(
            sample_size=args.sample,
            delay_between_assessments=args.delay,
            enhancement_enabled=not args.no_enhancement,
            report_timeframe=args.timeframe,
        )
        if args.data:
            config.data_path = Path(args.data)
        if args.output:
            config.output = Path(args.output)
        return config

    def apply_to(self, settings: Settings) -> Settings:
        """Settings for this run. A run can switch enhancement off, never on."""
        if self.enhancement_enabled:
            return settings
        return settings.model_copy(update={"triage_enhancement_enabled": False})

    @property
    def output_path(self) -> Path:
        if self.output is not None:
            return self.output
        mode = "enhanced" if self.enhancement_enabled else "base"
        return self.results_dir / f"triage_{self.run_id}_{mode}.json"
