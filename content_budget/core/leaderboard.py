"""
Pipeline leaderboard.

Ranks pipelines by human-judged win rate using the running statistics kept
by the store.
"""

from dataclasses import dataclass
from typing import List

from content_budget.storage.models import BudgetState


@dataclass(frozen=True)
class LeaderboardEntry:
    """One ranked pipeline."""
    pipeline_id: str
    pipeline_name: str
    total_generations: int
    win_rate: float
    avg_cost_cents: float
    avg_latency_ms: float


def resolve_pipeline_name(state: BudgetState, pipeline_id: str) -> str:
    """Display name from the most recent history record of a pipeline.

    Falls back to the raw id when the live history has no record for it,
    which happens for pipelines last used before a month rollover.
    """
    for record in reversed(state.generation_history):
        if record.pipeline_id == pipeline_id:
            return record.pipeline_name
    return pipeline_id


def build_leaderboard(state: BudgetState) -> List[LeaderboardEntry]:
    """Build the ranked leaderboard.

    Order is win rate descending; ties go to more generations, then lower
    average cost, then pipeline id.

    Args:
        state: Stored budget state

    Returns:
        Entries for every pipeline that has statistics
    """
    entries = []
    for pipeline_id, stats in state.pipeline_stats.items():
        if stats.total_generations > 0:
            win_rate = (stats.total_wins / stats.total_generations) * 100
            avg_cost_cents = stats.total_cost_cents / stats.total_generations
        else:
            win_rate = 0.0
            avg_cost_cents = 0.0

        entries.append(LeaderboardEntry(
            pipeline_id=pipeline_id,
            pipeline_name=resolve_pipeline_name(state, pipeline_id),
            total_generations=stats.total_generations,
            win_rate=win_rate,
            avg_cost_cents=avg_cost_cents,
            avg_latency_ms=stats.avg_latency_ms,
        ))

    entries.sort(key=lambda e: (
        -e.win_rate,
        -e.total_generations,
        e.avg_cost_cents,
        e.pipeline_id,
    ))
    return entries
