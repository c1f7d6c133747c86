"""Per-user property storage for credentials and panel state."""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Protocol


class PropertyStore(Protocol):
    """String key-value storage scoped to one user."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryPropertyStore:
    """Dict-backed store, used for scripting and tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class SqlitePropertyStore:
    """SQLite-backed store holding the properties of one user."""

    def __init__(self, db_path: Path, user_id: str) -> None:
        self.db_path = Path(db_path)
        self.user_id = user_id
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS user_properties (
                    user_id TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (user_id, key)
                )
            """)

    def get(self, key: str) -> str | None:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM user_properties WHERE user_id = ? AND key = ?",
                (self.user_id, key),
            ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO user_properties (user_id, key, value, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                (self.user_id, key, value, datetime.now().isoformat()),
            )

    def delete(self, key: str) -> None:
        with self._get_connection() as conn:
            conn.execute(
                "DELETE FROM user_properties WHERE user_id = ? AND key = ?",
                (self.user_id, key),
            )

    def keys(self) -> list[str]:
        """List property keys stored for this user."""
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT key FROM user_properties WHERE user_id = ? ORDER BY key",
                (self.user_id,),
            ).fetchall()
        return [row["key"] for row in rows]
