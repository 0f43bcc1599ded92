"""
SQLite file for the store slots.

Each BudgetStore persists its whole state as one JSON row of the
``store_slot`` table; this module only opens the file that holds it.
"""

import sqlite3

from content_budget.config.loader import DEFAULT_DB_PATH


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Open the SQLite file holding the ``store_slot`` table.

    The file is created on first use; the table itself is created by
    SlotRepository.initialize_schema().
    """
    return sqlite3.connect(db_path)
