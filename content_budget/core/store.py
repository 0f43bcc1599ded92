"""
Generation budget store.

Owns the generation history, the monthly spend and the per-pipeline
statistics, and exposes the operations the rest of the application uses to
record generations, pick winners and read the budget and leaderboard.

Persistence is explicit: ``load()`` at startup, ``save()`` after mutations
(automatically when ``autosave`` is on).
"""

import logging
import random
import string
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional

from content_budget.config.loader import DEFAULT_SLOT, MONTHLY_BUDGET_CENTS
from content_budget.storage.models import BudgetState, GenerationRecord, PipelineStats
from content_budget.storage.repository import SlotRepository

from .budget import BudgetStatus, compute_budget_status, is_same_month, month_start
from .leaderboard import LeaderboardEntry, build_leaderboard

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_ID_ALPHABET = string.digits + string.ascii_lowercase


def _new_generation_id(now: datetime) -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"gen-{int(now.timestamp() * 1000)}-{suffix}"


class BudgetStore:
    """Process-local store for generation spend and pipeline ranking.

    Instances are independent; create one per session and pass it to the
    code that needs it.
    """

    def __init__(
        self,
        total_budget_cents: int = MONTHLY_BUDGET_CENTS,
        repository: Optional[SlotRepository] = None,
        slot: str = DEFAULT_SLOT,
        clock: Clock = datetime.now,
        autosave: bool = False,
    ):
        """Create an empty store.

        Args:
            total_budget_cents: Monthly budget ceiling
            repository: Durable layer used by save() and load()
            slot: Slot name the state is stored under
            clock: Source of the current time
            autosave: Save after every mutating call
        """
        self.total_budget_cents = total_budget_cents
        self.repository = repository
        self.slot = slot
        self.clock = clock
        self.autosave = autosave
        self._state = BudgetState(current_month_start=month_start(clock()).isoformat())

    @property
    def state(self) -> BudgetState:
        return self._state

    @property
    def generation_history(self) -> List[GenerationRecord]:
        return list(self._state.generation_history)

    @property
    def generation_count(self) -> int:
        return len(self._state.generation_history)

    @property
    def month_generation_count(self) -> int:
        """Generations recorded in the current month.

        Stored history from a month that has ended counts as 0 until the next
        write replaces it.
        """
        if not is_same_month(self._state.current_month_start, self.clock()):
            return 0
        return len(self._state.generation_history)


    def record_generation(
        self,
        pipeline_id: str,
        pipeline_name: str,
        cost_cents: int,
        latency_ms: float,
        content_type: Optional[str] = None,
        city_id: Optional[str] = None,
    ) -> str:
        """Append a generation and update the pipeline statistics.

        Values are stored as given. If the stored month is over, the previous
        month's history and spend are dropped and the new record starts the
        month on its own.

        Returns:
            Id of the new record, for a later record_winner call
        """
        now = self.clock()
        record = GenerationRecord(
            id=_new_generation_id(now),
            timestamp=now.isoformat(),
            pipeline_id=pipeline_id,
            pipeline_name=pipeline_name,
            cost_cents=cost_cents,
            latency_ms=latency_ms,
            content_type=content_type,
            city_id=city_id,
        )

        state = self._state
        if is_same_month(state.current_month_start, now):
            state.generation_history.append(record)
            state.total_spent_cents += cost_cents
        else:
            logger.info(
                "Month rolled over from %s; discarding %d records",
                state.current_month_start, len(state.generation_history),
            )
            state.current_month_start = month_start(now).isoformat()
            state.generation_history = [record]
            state.total_spent_cents = cost_cents

        stats = state.pipeline_stats.setdefault(pipeline_id, PipelineStats())
        count = stats.total_generations
        stats.avg_latency_ms = (stats.avg_latency_ms * count + latency_ms) / (count + 1)
        stats.total_generations = count + 1
        stats.total_cost_cents += cost_cents

        if self.autosave:
            self.save()
        return record.id

    def record_winner(self, generation_id: str) -> None:
        """Mark a generation as the winner of a comparison.

        Unknown ids are ignored, and marking the same record twice counts
        one win.
        """
        history = self._state.generation_history
        for index, record in enumerate(history):
            if record.id == generation_id:
                break
        else:
            logger.debug("Ignoring winner for unknown generation %s", generation_id)
            return

        if record.was_winner:
            return

        history[index] = replace(record, was_winner=True)
        stats = self._state.pipeline_stats.get(record.pipeline_id)
        if stats is not None:
            stats.total_wins += 1

        if self.autosave:
            self.save()

    def get_budget_status(self) -> BudgetStatus:
        """Budget status for the current month. Never mutates state."""
        return compute_budget_status(self._state, self.total_budget_cents, self.clock())

    def get_pipeline_leaderboard(self) -> List[LeaderboardEntry]:
        return build_leaderboard(self._state)

    def reset_month(self) -> None:
        """Start the current month over, keeping pipeline statistics."""
        logger.info(
            "Manual month reset; discarding %d records and %d cents of spend",
            len(self._state.generation_history), self._state.total_spent_cents,
        )
        self._state.current_month_start = month_start(self.clock()).isoformat()
        self._state.total_spent_cents = 0
        self._state.generation_history = []

        if self.autosave:
            self.save()

    def save(self) -> None:
        """Write the whole state into the slot.

        Raises:
            RuntimeError: If the store has no repository
            sqlite3.Error: Propagated from the repository
        """
        if self.repository is None:
            raise RuntimeError("BudgetStore has no repository to save to")
        self.repository.save_slot(self.slot, self._state.to_dict())

    def load(self) -> bool:
        """Replace the in-memory state with the slot's content.

        Returns:
            True if a saved state was found, False if the slot is empty

        Raises:
            RuntimeError: If the store has no repository
        """
        if self.repository is None:
            raise RuntimeError("BudgetStore has no repository to load from")
        payload = self.repository.load_slot(self.slot)
        if payload is None:
            return False
        self._state = BudgetState.from_dict(payload)
        logger.debug(
            "Loaded %d records from slot %s", len(self._state.generation_history), self.slot
        )
        return True
