# =============================================================================
# studio_core/offline/local_database.py
# Local SQLite Key-Value Storage
# =============================================================================
"""
LocalDatabase - SQLite-backed key-value storage for the studio's local data.

Features:
- Automatic schema creation
- Thread-local connections
- Transaction support (commit or roll back)
- Write failures surface as StorageError; read failures degrade to None
"""

from __future__ import annotations
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional, Union

from studio_core.errors import StorageError
from studio_core.logging import get_logger

logger = get_logger(__name__)


class LocalDatabase:
    """
    Local SQLite database holding one row per storage key.

    Values are opaque text; encoding is the caller's concern.
    """

    SCHEMA = {
        "kv_store": """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """,
    }

    def __init__(self, db_path: Union[str, Path]):
        """
        Initialize local database.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._ensure_directory()
        self._local = threading.local()
        self._initialized = False

    def _ensure_directory(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            self._local.connection = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
            )
            self._local.connection.row_factory = sqlite3.Row
        return self._local.connection

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def initialize(self) -> LocalDatabase:
        """Initialize database schema."""
        if self._initialized:
            return self

        try:
            with self.transaction() as conn:
                for table_name, schema in self.SCHEMA.items():
                    conn.execute(schema)
                    logger.debug(f"Created/verified table: {table_name}")
        except sqlite3.Error as e:
            raise StorageError(
                f"Could not initialize local database: {e}",
                key=str(self.db_path),
                operation="initialize",
            ) from e

        self._initialized = True
        logger.info(f"Local database initialized at: {self.db_path}")
        return self

    # =========================================================================
    # KEY-VALUE OPERATIONS
    # =========================================================================

    def get(self, key: str) -> Optional[str]:
        """Return the stored text for key, or None when absent or unreadable."""
        try:
            row = self._get_connection().execute(
                "SELECT value FROM kv_store WHERE key = ?",
                [key]
            ).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"Read failed for {key}: {e}")
            return None
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        """Store text under key, replacing any previous value."""
        try:
            with self.transaction() as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, ?)
                    """,
                    [key, value, datetime.now().isoformat()]
                )
        except sqlite3.Error as e:
            raise StorageError(
                f"Write failed: {e}",
                key=key,
                operation="set",
            ) from e

    def delete(self, key: str) -> bool:
        """Remove key. Returns True if a row was deleted."""
        try:
            with self.transaction() as conn:
                cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", [key])
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise StorageError(
                f"Delete failed: {e}",
                key=key,
                operation="delete",
            ) from e

    def keys(self, prefix: str = "") -> List[str]:
        """List stored keys starting with prefix."""
        try:
            rows = self._get_connection().execute(
                "SELECT key FROM kv_store WHERE substr(key, 1, ?) = ? ORDER BY key",
                [len(prefix), prefix]
            ).fetchall()
        except sqlite3.Error as e:
            logger.warning(f"Key listing failed: {e}")
            return []
        return [row["key"] for row in rows]

    def close(self) -> None:
        """Close database connection."""
        if getattr(self._local, "connection", None) is not None:
            self._local.connection.close()
            self._local.connection = None
