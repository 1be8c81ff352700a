# src/storage/sqlite_repository.py — v1
"""SQLite-backed submission repository.

Uses stdlib sqlite3. Timestamps are stored as ISO-8601 UTC strings so that
lexical order matches chronological order, and (category, created_at) is
indexed for the duplicate detector's window query.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Collection
from datetime import datetime, timezone
from pathlib import Path

from reqintake.core.models import EXCLUDED_STATUSES, Submission
from reqintake.storage.base_repository import SubmissionRepository

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS submissions (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    body TEXT NOT NULL,
    category TEXT NOT NULL,
    type TEXT,
    status TEXT NOT NULL DEFAULT 'pending',
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_submissions_category_created
    ON submissions(category, created_at);
"""

_COLUMNS = "id, title, body, category, type, status, created_at"


def _to_db_time(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class SqliteSubmissionRepository(SubmissionRepository):
    """Submission store in a single SQLite file (``:memory:`` supported)."""

    def __init__(self, db_path: Path | str) -> None:
        if str(db_path) == ":memory:":
            self._db_path = None
            target = ":memory:"
        else:
            self._db_path = Path(db_path).expanduser()
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(self._db_path)
        self._conn = sqlite3.connect(target)
        self._conn.row_factory = sqlite3.Row
        if self._db_path is not None:
            self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def add(self, submission: Submission) -> None:
        self._conn.execute(
            f"INSERT OR REPLACE INTO submissions ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                submission.id,
                submission.title,
                submission.body,
                submission.category,
                submission.type,
                submission.status,
                _to_db_time(submission.created_at),
            ),
        )
        self._conn.commit()

    async def get(self, submission_id: str) -> Submission | None:
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM submissions WHERE id = ?", (submission_id,)
        ).fetchone()
        return self._row_to_submission(row) if row is not None else None

    async def find_recent_submissions(
        self,
        category: str,
        since: datetime,
        excluded_statuses: Collection[str] = EXCLUDED_STATUSES,
    ) -> list[Submission]:
        excluded = sorted(excluded_statuses)
        query = (
            f"SELECT {_COLUMNS} FROM submissions "
            "WHERE category = ? AND created_at >= ?"
        )
        params: list[str] = [category, _to_db_time(since)]
        if excluded:
            query += f" AND status NOT IN ({', '.join('?' for _ in excluded)})"
            params.extend(excluded)
        query += " ORDER BY created_at DESC"
        rows = self._conn.execute(query, params).fetchall()
        return [self._row_to_submission(row) for row in rows]

    async def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM submissions").fetchone()[0]

    async def close(self) -> None:
        self._conn.close()

    @staticmethod
    def _row_to_submission(row: sqlite3.Row) -> Submission:
        return Submission(
            id=row["id"],
            title=row["title"],
            body=row["body"],
            category=row["category"],
            type=row["type"],
            status=row["status"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
