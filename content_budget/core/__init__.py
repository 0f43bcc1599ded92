"""
Core modules for Content Budget.

This package contains the generation store, the monthly budget aggregation,
the pipeline leaderboard and the pipeline catalog.
"""

from .budget import BudgetExhaustedError, BudgetHealth, BudgetStatus
from .leaderboard import LeaderboardEntry
from .store import BudgetStore

__all__ = [
    "BudgetExhaustedError",
    "BudgetHealth",
    "BudgetStatus",
    "BudgetStore",
    "LeaderboardEntry",
]
