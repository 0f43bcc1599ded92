"""
Data models for storage layer.

Defines generation records, per-pipeline statistics and the serializable
store state.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class GenerationRecord:
    """Immutable record of one AI generation call.

    Only ``was_winner`` ever changes, and it does so by replacing the record
    with a copy rather than mutating it in place.
    """
    id: str
    timestamp: str
    pipeline_id: str
    pipeline_name: str
    cost_cents: int
    latency_ms: float
    content_type: Optional[str] = None
    city_id: Optional[str] = None
    was_winner: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "pipelineId": self.pipeline_id,
            "pipelineName": self.pipeline_name,
            "costCents": self.cost_cents,
            "latencyMs": self.latency_ms,
            "contentType": self.content_type,
            "cityId": self.city_id,
            "wasWinner": self.was_winner,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationRecord":
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            pipeline_id=data["pipelineId"],
            pipeline_name=data["pipelineName"],
            cost_cents=data["costCents"],
            latency_ms=data["latencyMs"],
            content_type=data.get("contentType"),
            city_id=data.get("cityId"),
            was_winner=bool(data.get("wasWinner", False)),
        )


@dataclass
class PipelineStats:
    """Running totals for one pipeline."""
    total_generations: int = 0
    total_wins: int = 0
    total_cost_cents: int = 0
    avg_latency_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalGenerations": self.total_generations,
            "totalWins": self.total_wins,
            "totalCostCents": self.total_cost_cents,
            "avgLatencyMs": self.avg_latency_ms,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineStats":
        return cls(
            total_generations=data["totalGenerations"],
            total_wins=data["totalWins"],
            total_cost_cents=data["totalCostCents"],
            avg_latency_ms=data["avgLatencyMs"],
        )


@dataclass
class BudgetState:
    """Everything the store persists into its slot.

    ``current_month_start`` is the ISO-8601 first instant of the calendar
    month of the last mutation.
    """
    current_month_start: str
    total_spent_cents: int = 0
    generation_history: List[GenerationRecord] = field(default_factory=list)
    pipeline_stats: Dict[str, PipelineStats] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentMonthStart": self.current_month_start,
            "totalSpentCents": self.total_spent_cents,
            "generationHistory": [r.to_dict() for r in self.generation_history],
            "pipelineStats": {
                pipeline_id: stats.to_dict()
                for pipeline_id, stats in self.pipeline_stats.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BudgetState":
        """Rebuild state from a persisted payload.

        Raises:
            KeyError: If a required field is missing
        """
        return cls(
            current_month_start=data["currentMonthStart"],
            total_spent_cents=data["totalSpentCents"],
            generation_history=[
                GenerationRecord.from_dict(r) for r in data.get("generationHistory", [])
            ],
            pipeline_stats={
                pipeline_id: PipelineStats.from_dict(stats)
                for pipeline_id, stats in data.get("pipelineStats", {}).items()
            },
        )
