"""
Monthly budget aggregation.

Derives spent, remaining and percent-used figures for the current calendar
month from the stored budget state.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from content_budget.config.loader import DEFAULT_CRITICAL_PERCENT, DEFAULT_WARNING_PERCENT
from content_budget.storage.models import BudgetState


class BudgetHealth(Enum):
    """How close the month's spend is to the ceiling."""
    HEALTHY = "healthy"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class BudgetStatus:
    """Snapshot of the current month's budget."""
    total_budget_cents: int
    spent_cents: int
    remaining_cents: int
    percent_used: float
    can_generate: bool

    def health(
        self,
        warning_percent: float = DEFAULT_WARNING_PERCENT,
        critical_percent: float = DEFAULT_CRITICAL_PERCENT,
    ) -> BudgetHealth:
        if self.percent_used >= critical_percent:
            return BudgetHealth.CRITICAL
        if self.percent_used >= warning_percent:
            return BudgetHealth.HIGH
        return BudgetHealth.HEALTHY


class BudgetExhaustedError(Exception):
    """Raised by callers that refuse to start a paid generation."""
    def __init__(self, message: str, status: BudgetStatus):
        super().__init__(message)
        self.status = status


def month_start(now: datetime) -> datetime:
    """First instant of the calendar month containing ``now``."""
    return datetime(now.year, now.month, 1)


def is_same_month(month_start_iso: str, now: datetime) -> bool:
    """Whether an ISO-8601 timestamp falls in the same calendar month as ``now``."""
    start = datetime.fromisoformat(month_start_iso)
    return start.year == now.year and start.month == now.month


def fresh_budget_status(total_budget_cents: int) -> BudgetStatus:
    """Status of a month in which nothing has been spent yet."""
    return BudgetStatus(
        total_budget_cents=total_budget_cents,
        spent_cents=0,
        remaining_cents=max(0, total_budget_cents),
        percent_used=0.0 if total_budget_cents > 0 else 100.0,
        can_generate=total_budget_cents > 0,
    )


def compute_budget_status(
    state: BudgetState,
    total_budget_cents: int,
    now: datetime,
) -> BudgetStatus:
    """Compute the budget status for ``now`` without touching ``state``.

    If the stored month is not the current one the result describes an empty
    new month; the stored state is left as it is until the next write.

    Args:
        state: Stored budget state
        total_budget_cents: Monthly ceiling
        now: Current time

    Returns:
        BudgetStatus with remaining clamped at 0 and percent capped at 100.
        A ceiling of 0 or less reads as fully used.
    """
    if not is_same_month(state.current_month_start, now):
        return fresh_budget_status(total_budget_cents)

    spent = state.total_spent_cents
    remaining = total_budget_cents - spent
    if total_budget_cents <= 0:
        percent_used = 100.0
    else:
        percent_used = (spent / total_budget_cents) * 100

    return BudgetStatus(
        total_budget_cents=total_budget_cents,
        spent_cents=spent,
        remaining_cents=max(0, remaining),
        percent_used=min(100.0, percent_used),
        can_generate=remaining > 0,
    )
