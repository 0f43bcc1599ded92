"""
Unit tests for the pipeline leaderboard.
"""

import pytest

from content_budget.core.leaderboard import build_leaderboard, resolve_pipeline_name
from content_budget.storage.models import BudgetState, GenerationRecord, PipelineStats


def _record(record_id: str, pipeline_id: str, name: str) -> GenerationRecord:
    return GenerationRecord(
        id=record_id,
        timestamp="2024-03-10T12:00:00",
        pipeline_id=pipeline_id,
        pipeline_name=name,
        cost_cents=1,
        latency_ms=1,
    )


class TestLeaderboard:
    """Test ranking and derived figures."""

    def test_empty(self):
        """No statistics, no entries."""
        assert build_leaderboard(BudgetState(current_month_start="2024-03-01T00:00:00")) == []

    def test_derived_figures(self):
        """Win rate and average cost come from the running totals."""
        state = BudgetState(
            current_month_start="2024-03-01T00:00:00",
            pipeline_stats={"p1": PipelineStats(4, 1, 100, 1500.0)},
        )
        entry = build_leaderboard(state)[0]
        assert entry.win_rate == pytest.approx(25.0)
        assert entry.avg_cost_cents == pytest.approx(25.0)
        assert entry.avg_latency_ms == 1500.0

    def test_zero_generations_guarded(self):
        """Pipelines without generations report zeros instead of failing."""
        state = BudgetState(
            current_month_start="2024-03-01T00:00:00",
            pipeline_stats={"p1": PipelineStats()},
        )
        entry = build_leaderboard(state)[0]
        assert entry.win_rate == 0
        assert entry.avg_cost_cents == 0

    def test_sorted_by_win_rate(self):
        """Entries are ordered by win rate, highest first."""
        state = BudgetState(
            current_month_start="2024-03-01T00:00:00",
            pipeline_stats={
                "low": PipelineStats(10, 1, 100, 1.0),
                "high": PipelineStats(10, 8, 100, 1.0),
                "mid": PipelineStats(10, 5, 100, 1.0),
            },
        )
        entries = build_leaderboard(state)
        assert [e.pipeline_id for e in entries] == ["high", "mid", "low"]
        rates = [e.win_rate for e in entries]
        assert rates == sorted(rates, reverse=True)

    def test_tie_break(self):
        """Equal win rates go to more runs, then cheaper, then by id."""
        state = BudgetState(
            current_month_start="2024-03-01T00:00:00",
            pipeline_stats={
                "b-cheap": PipelineStats(4, 2, 40, 1.0),
                "a-cheap": PipelineStats(4, 2, 40, 1.0),
                "pricey": PipelineStats(4, 2, 400, 1.0),
                "busy": PipelineStats(10, 5, 1000, 1.0),
            },
        )
        entries = build_leaderboard(state)
        assert [e.pipeline_id for e in entries] == ["busy", "a-cheap", "b-cheap", "pricey"]


class TestResolvePipelineName:
    """Test display name lookup."""

    def test_most_recent_name_wins(self):
        """The latest record's name is used."""
        state = BudgetState(
            current_month_start="2024-03-01T00:00:00",
            generation_history=[
                _record("g1", "p1", "Old name"),
                _record("g2", "p2", "Other"),
                _record("g3", "p1", "New name"),
            ],
        )
        assert resolve_pipeline_name(state, "p1") == "New name"

    def test_falls_back_to_id(self):
        """Pipelines missing from the history show their id."""
        state = BudgetState(current_month_start="2024-03-01T00:00:00")
        assert resolve_pipeline_name(state, "p9") == "p9"
