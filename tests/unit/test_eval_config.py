"""Tests for batch run configuration."""

import argparse
from pathlib import Path

from evaluation.config import EvalConfig


def _args(**overrides):
    values = {
        "data": None,
        "sample": None,
        "delay": 0.0,
        "output": None,
        "timeframe": "day",
        "no_enhancement": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


def test_defaults_point_at_bundled_dataset():
    config = EvalConfig.from_args(_args())
    assert config.data_path.name == "assessments.json"
    assert config.sample_size is None
    assert config.output_path.name == f"triage_{config.run_id}_enhanced.json"


def test_arguments_override_defaults(tmp_path):
    config = EvalConfig.from_args(
        _args(
            data=str(tmp_path / "batch.json"),
            sample=4,
            output=str(tmp_path / "out.json"),
            timeframe="week",
            no_enhancement=True,
        )
    )
    assert config.data_path == tmp_path / "batch.json"
    assert config.sample_size == 4
    assert config.report_timeframe == "week"
    assert config.output_path == Path(tmp_path / "out.json")


def test_disabling_enhancement_updates_settings(settings):
    config = EvalConfig(enhancement_enabled=False)
    assert config.apply_to(settings).triage_enhancement_enabled is False
    assert settings.triage_enhancement_enabled is True
    assert config.output_path.name.endswith("_base.json")


def test_enabled_run_keeps_settings(settings):
    assert EvalConfig().apply_to(settings) is settings
