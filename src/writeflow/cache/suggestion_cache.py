"""SQLite cache of suggestion records keyed by document and analyzed snapshot."""

from __future__ import annotations

import hashlib
import sqlite3
import time
from pathlib import Path

from writeflow.models.suggestion import Span, Suggestion

DEFAULT_DB_PATH = Path.home() / ".writeflow" / "suggestions.db"


def snapshot_id(text: str) -> str:
    """Stable id of an analyzed text snapshot."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class SuggestionCache:
    """SQLite-backed store of the last suggestion set per document.

    Records are only returned for the exact snapshot they were computed on.
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS suggestions (
                    id TEXT PRIMARY KEY,
                    document_id TEXT NOT NULL,
                    snapshot_id TEXT NOT NULL,
                    type TEXT NOT NULL CHECK (type IN ('grammar', 'spelling', 'style', 'punctuation')),
                    original TEXT NOT NULL,
                    correction TEXT NOT NULL,
                    explanation TEXT NOT NULL,
                    position_start INTEGER NOT NULL,
                    position_end INTEGER NOT NULL,
                    created_at REAL NOT NULL
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_suggestions_document ON suggestions (document_id)"
            )
            # Analyzed snapshots, kept even when they produced no suggestions.
            conn.execute("""
                CREATE TABLE IF NOT EXISTS analyzed_snapshots (
                    document_id TEXT PRIMARY KEY,
                    snapshot_id TEXT NOT NULL,
                    analyzed_at REAL NOT NULL
                )
            """)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def get(self, document_id: str, text: str) -> list[Suggestion] | None:
        """Cached suggestions for ``text``, or None if this snapshot was never stored."""
        sid = snapshot_id(text)
        with self._connect() as conn:
            marker = conn.execute(
                "SELECT 1 FROM analyzed_snapshots WHERE document_id = ? AND snapshot_id = ?",
                (document_id, sid),
            ).fetchone()
            if marker is None:
                return None
            rows = conn.execute(
                """SELECT id, type, original, correction, explanation,
                          position_start, position_end
                   FROM suggestions
                   WHERE document_id = ? AND snapshot_id = ?
                   ORDER BY position_start""",
                (document_id, sid),
            ).fetchall()

        return [self._row_to_suggestion(row) for row in rows]

    def put(self, document_id: str, text: str, suggestions: list[Suggestion]) -> None:
        """Replace the stored suggestions of ``document_id`` with ``suggestions``."""
        sid = snapshot_id(text)
        now = time.time()
        with self._connect() as conn:
            conn.execute("DELETE FROM suggestions WHERE document_id = ?", (document_id,))
            conn.executemany(
                """INSERT OR REPLACE INTO suggestions
                   (id, document_id, snapshot_id, type, original, correction,
                    explanation, position_start, position_end, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                [
                    (
                        s.id,
                        document_id,
                        sid,
                        s.category.value,
                        s.original,
                        s.correction,
                        s.explanation,
                        s.span.start,
                        s.span.end,
                        now,
                    )
                    for s in suggestions
                ],
            )
            conn.execute(
                """INSERT OR REPLACE INTO analyzed_snapshots
                   (document_id, snapshot_id, analyzed_at)
                   VALUES (?, ?, ?)""",
                (document_id, sid, now),
            )

    def delete(self, suggestion_id: str) -> None:
        """Delete one suggestion record (accepted or rejected)."""
        with self._connect() as conn:
            conn.execute("DELETE FROM suggestions WHERE id = ?", (suggestion_id,))

    def clear(self, document_id: str | None = None) -> int:
        """Clear records, for one document or all. Returns count of deleted rows."""
        with self._connect() as conn:
            if document_id is None:
                cursor = conn.execute("DELETE FROM suggestions")
                conn.execute("DELETE FROM analyzed_snapshots")
            else:
                cursor = conn.execute(
                    "DELETE FROM suggestions WHERE document_id = ?", (document_id,)
                )
                conn.execute(
                    "DELETE FROM analyzed_snapshots WHERE document_id = ?", (document_id,)
                )
            return cursor.rowcount

    def stats(self) -> dict:
        """Return cache statistics."""
        with self._connect() as conn:
            total = conn.execute("SELECT COUNT(*) FROM suggestions").fetchone()[0]
            documents = conn.execute(
                "SELECT COUNT(DISTINCT document_id) FROM suggestions"
            ).fetchone()[0]
            by_type = dict(conn.execute(
                "SELECT type, COUNT(*) FROM suggestions GROUP BY type"
            ).fetchall())
        return {"total": total, "documents": documents, "by_type": by_type}

    @staticmethod
    def _row_to_suggestion(row: tuple) -> Suggestion:
        return Suggestion(
            id=row[0],
            category=row[1],
            original=row[2],
            correction=row[3],
            explanation=row[4],
            span=Span(start=row[5], end=row[6]),
        )
