"""Tests for the course analysis report."""

import json
from pathlib import Path

import pytest

from procedural_obstacle_course.analysis.course_report import (
    archetype_by_tier,
    compute_course_metrics,
    generate_report,
    summarize,
)
from procedural_obstacle_course.config import CONFIGS


@pytest.fixture
def df():
    return compute_course_metrics(range(6), CONFIGS["short"])


class TestComputeMetrics:
    def test_one_row_per_segment(self, df):
        assert len(df) == 6 * 3
        assert set(df["seed"]) == set(range(6))

    def test_columns(self, df):
        for col in ("archetype", "tier", "difficulty", "length", "hazard_count", "end_z", "end_y"):
            assert col in df.columns

    def test_short_course_stays_low_tier(self, df):
        assert set(df["tier"]) == {0}


class TestSummaries:
    def test_archetype_by_tier_sums_to_one(self, df):
        grid = archetype_by_tier(df)
        assert grid[0].sum() == pytest.approx(1.0)

    def test_summarize(self, df):
        summary = summarize(df)
        assert summary["courses"] == 6
        assert summary["segments"] == 18
        assert summary["course_length_mean"] > 0
        assert summary["hazards_per_course_mean"] >= 0

    def test_summarize_empty(self):
        empty = compute_course_metrics([])
        assert summarize(empty) == {"courses": 0, "segments": 0}


class TestGenerateReport:
    def test_writes_outputs(self, df, tmp_path):
        out = tmp_path / "report"
        summary = generate_report(df, out)
        assert (out / "course_summary.json").exists()
        assert (out / "segments.csv").exists()
        for path in summary["figures"].values():
            assert Path(path).exists()
        with open(out / "course_summary.json") as f:
            saved = json.load(f)
        assert saved["courses"] == 6
