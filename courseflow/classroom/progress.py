"""
ProgressStore - Persist module progress in ~/.courseflow/progress.db.

A durable string key-value store. Each module uses two keys:
- currentPage-<moduleId>: zero-based section cursor
- sectionlength-<moduleId>: number of sections when last loaded
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from courseflow.config import DEFAULT_PROGRESS_DB
from courseflow.schemas import ModuleProgress


logger = logging.getLogger(__name__)

CURRENT_PAGE_PREFIX = "currentPage-"
SECTION_LENGTH_PREFIX = "sectionlength-"


def current_page_key(module_id: str) -> str:
    return f"{CURRENT_PAGE_PREFIX}{module_id}"


def section_length_key(module_id: str) -> str:
    return f"{SECTION_LENGTH_PREFIX}{module_id}"


def _parse_int(key: str, value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        parsed = int(value)
    except ValueError:
        logger.warning("Ignoring non-integer value %r stored under %s", value, key)
        return None
    if parsed < 0:
        logger.warning("Ignoring negative value %d stored under %s", parsed, key)
        return None
    return parsed


class ProgressStore:
    """
    Keyed progress storage in SQLite.

    Progress lives apart from content so content files can be replaced
    without losing a learner's position. Each operation opens its own
    connection and commits before returning.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize progress store.

        Args:
            db_path: Path to progress.db (default: ~/.courseflow/progress.db)
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_PROGRESS_DB
        self._ensure_database()

    def _ensure_database(self):
        """Create database and tables if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    # -------------------------------------------------------------------------
    # Raw keys
    # -------------------------------------------------------------------------

    def get_value(self, key: str) -> Optional[str]:
        """Get a raw stored value."""
        conn = self._get_connection()
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def set_value(self, key: str, value: str):
        """Set a raw value, replacing any previous one."""
        self._write({key: value})

    def _write(self, values: dict[str, str]):
        conn = self._get_connection()
        try:
            now = datetime.now().isoformat()
            conn.executemany(
                """INSERT INTO kv_store (key, value, updated_at)
                   VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                     value = excluded.value,
                     updated_at = excluded.updated_at""",
                [(key, value, now) for key, value in values.items()],
            )
            conn.commit()
        finally:
            conn.close()

    # -------------------------------------------------------------------------
    # Module progress
    # -------------------------------------------------------------------------

    def get(self, module_id: str) -> Optional[ModuleProgress]:
        """
        Get persisted progress for a module.

        Returns None when no cursor has been stored for the module.
        """
        page_key = current_page_key(module_id)
        length_key = section_length_key(module_id)
        index = _parse_int(page_key, self.get_value(page_key))
        if index is None:
            return None

        count = _parse_int(length_key, self.get_value(length_key))
        if count is not None and index > count:
            # The navigator clamps against the freshly loaded count
            count = None
        return ModuleProgress(module_id=module_id, current_section_index=index, section_count=count)

    def set(self, module_id: str, progress: ModuleProgress):
        """Persist cursor and, when known, the section count in one transaction."""
        values = {current_page_key(module_id): str(progress.current_section_index)}
        if progress.section_count is not None:
            values[section_length_key(module_id)] = str(progress.section_count)
        self._write(values)

    def set_section_count(self, module_id: str, count: int):
        """Snapshot the number of sections last loaded for a module."""
        if count < 0:
            raise ValueError(f"Section count must be >= 0, got {count}")
        self.set_value(section_length_key(module_id), str(count))

    def reset_module(self, module_id: str):
        """Forget all progress for a module."""
        conn = self._get_connection()
        try:
            conn.execute(
                "DELETE FROM kv_store WHERE key IN (?, ?)",
                (current_page_key(module_id), section_length_key(module_id)),
            )
            conn.commit()
        finally:
            conn.close()

    def list_module_ids(self) -> list[str]:
        """Get ids of all modules with a stored cursor, sorted."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT key FROM kv_store WHERE key LIKE ? ORDER BY key",
                (f"{CURRENT_PAGE_PREFIX}%",),
            )
            return [row["key"][len(CURRENT_PAGE_PREFIX):] for row in cursor.fetchall()]
        finally:
            conn.close()
