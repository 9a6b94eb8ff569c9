"""Tests for pipeline stage timing and structured logs."""

import json
import logging

import pytest

from src.config.constants import TriageStage
from src.infrastructure.logging.logger import JSONFormatter, StructuredLogger
from src.orchestrator.step_timer import timed_stage


@pytest.fixture
def structured_logger():
    return StructuredLogger("tests.step_timer")


def _records(caplog):
    return [json.loads(r.getMessage()) for r in caplog.records if r.name == "tests.step_timer"]


def test_stage_logs_recorded_state(structured_logger, caplog):
    with caplog.at_level(logging.INFO, logger="tests.step_timer"):
        with timed_stage(TriageStage.SELECTION, structured_logger, "a1") as stage:
            stage.record(threshold=4.2)

    [record] = _records(caplog)
    assert record["step"] == TriageStage.SELECTION.value
    assert record["state"] == {"assessment_id": "a1", "threshold": 4.2}
    assert record["duration_ms"] >= 0
    assert stage.elapsed_ms >= 0


def test_stage_failure_is_logged_and_reraised(structured_logger, caplog):
    with caplog.at_level(logging.INFO, logger="tests.step_timer"):
        with pytest.raises(KeyError):
            with timed_stage(TriageStage.CROSS_DOMAIN, structured_logger, "a1") as stage:
                stage.record(boosted=[])
                raise KeyError("strategic-alignment")

    [record] = _records(caplog)
    assert record["error_type"] == "KeyError"
    assert record["context"] == {"assessment_id": "a1", "boosted": []}


def test_json_formatter():
    record = logging.LogRecord("triage", logging.WARNING, __file__, 1, "slow %s", ("a1",), None)
    payload = json.loads(JSONFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["message"] == "slow a1"
