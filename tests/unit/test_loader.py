"""Tests for the evaluation dataset loader."""

import json
from pathlib import Path

import pytest

from evaluation.loader import load_snapshots, sample_snapshots
from tests.factories import make_domain, make_snapshot

DATASET = Path(__file__).resolve().parents[2] / "evaluation" / "data" / "assessments.json"


def test_bundled_dataset_loads():
    snapshots = load_snapshots(DATASET)
    assert len(snapshots) == 3
    assert snapshots[0].id == "eval-fin-001"


def test_invalid_entries_are_skipped(tmp_path):
    path = tmp_path / "assessments.json"
    path.write_text(
        json.dumps(
            [
                {"id": "ok", "company_name": "Acme"},
                {"company_name": "Missing id"},
            ]
        )
    )
    snapshots = load_snapshots(path)
    assert [s.id for s in snapshots] == ["ok"]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_snapshots(tmp_path / "nope.json")


def test_non_array_rejected(tmp_path):
    path = tmp_path / "assessments.json"
    path.write_text(json.dumps({"id": "ok"}))
    with pytest.raises(ValueError):
        load_snapshots(path)


def test_sampling_is_stratified_by_sector():
    domains = {"strategic-alignment": make_domain(3)}
    snapshots = [
        make_snapshot(domains, sector="technology", assessment_id="t1"),
        make_snapshot(domains, sector="technology", assessment_id="t2"),
        make_snapshot(domains, sector="retail", assessment_id="r1"),
        make_snapshot(domains, sector="retail", assessment_id="r2"),
    ]
    sampled = sample_snapshots(snapshots, n=2)
    assert [s.id for s in sampled] == ["t1", "r1"]
    assert sample_snapshots(snapshots, n=10) == snapshots


def test_unrecognised_sectors_share_a_stratum():
    snapshots = [
        make_snapshot({}, assessment_id="u1"),
        make_snapshot({}, sector="aerospace", assessment_id="u2"),
        make_snapshot({}, sector="retail", assessment_id="r1"),
    ]
    assert [s.id for s in sample_snapshots(snapshots, n=2)] == ["u1", "r1"]
