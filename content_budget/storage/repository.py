"""
Repository pattern for data access.

Stores whole-store snapshots as JSON documents, one per named slot.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from content_budget.config.loader import DEFAULT_DB_PATH

from .db import get_connection

logger = logging.getLogger(__name__)


class SlotRepository:
    """Durable key-value layer keyed by slot name.

    Each save replaces the previous payload of the slot; there is no merge,
    so concurrent writers are last-write-wins.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """Initialize the repository with a database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

    def initialize_schema(self) -> None:
        """Create the store_slot table if it doesn't exist."""
        conn = get_connection(self.db_path)
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS store_slot (
                    name TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def save_slot(self, name: str, payload: Dict[str, Any]) -> None:
        """Write a payload into a slot, replacing any previous content.

        Args:
            name: Slot name
            payload: JSON-serializable document

        Raises:
            sqlite3.Error: Propagated without modification
        """
        document = json.dumps(payload)
        conn = get_connection(self.db_path)
        try:
            conn.execute("""
                INSERT INTO store_slot (name, payload, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
            """, (name, document, datetime.now().isoformat()))
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        logger.debug("Saved slot %s (%d bytes)", name, len(document))

    def load_slot(self, name: str) -> Optional[Dict[str, Any]]:
        """Read a slot.

        Returns:
            The stored document, or None if the slot was never written
        """
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT payload FROM store_slot WHERE name = ?", (name,)
            )
            row = cursor.fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return json.loads(row[0])

    def delete_slot(self, name: str) -> bool:
        """Remove a slot.

        Returns:
            True if a slot was removed
        """
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("DELETE FROM store_slot WHERE name = ?", (name,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()


# Global repository instance
_default_repository: Optional[SlotRepository] = None


def get_repository(db_path: str = DEFAULT_DB_PATH) -> SlotRepository:
    """Get a repository instance.

    Reuses the cached instance while the database path is unchanged.

    Args:
        db_path: Path to SQLite database file

    Returns:
        An instance of SlotRepository
    """
    global _default_repository
    if _default_repository is None or _default_repository.db_path != db_path:
        _default_repository = SlotRepository(db_path)
    return _default_repository
