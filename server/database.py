"""SQLite store for generated artifacts (articles, ads, book chapters)."""

import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from utils.logger import get_logger

logger = get_logger(__name__)

ARTIFACT_KINDS = ("article", "ad", "chapter")


class HistoryStore:
    """Persists generated content; one short-lived connection per call."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create the generated_content table if it doesn't exist."""
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS generated_content (
                    id          INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp   TEXT NOT NULL,
                    kind        TEXT NOT NULL,
                    topic       TEXT NOT NULL,
                    provider    TEXT NOT NULL,
                    model       TEXT NOT NULL,
                    content     TEXT NOT NULL,
                    is_fallback INTEGER NOT NULL DEFAULT 0,
                    latency_ms  INTEGER,
                    tokens      INTEGER
                )
            """)
            conn.commit()
        logger.info("History database initialised at %s", self.db_path)

    def save(
        self,
        *,
        kind: str,
        topic: str,
        provider: str,
        model: str,
        content: str,
        is_fallback: bool = False,
        latency_ms: Optional[int] = None,
        tokens: Optional[int] = None,
    ) -> int:
        """Insert one record and return the new row id."""
        ts = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        with self._get_conn() as conn:
            cur = conn.execute(
                """INSERT INTO generated_content
                   (timestamp, kind, topic, provider, model, content, is_fallback, latency_ms, tokens)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (ts, kind, topic, provider, model, content, int(is_fallback), latency_ms, tokens),
            )
            conn.commit()
            return cur.lastrowid

    def list(self, limit: int = 100, kind: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return recent records, newest first."""
        with self._get_conn() as conn:
            if kind:
                rows = conn.execute(
                    "SELECT * FROM generated_content WHERE kind = ? ORDER BY id DESC LIMIT ?",
                    (kind, limit),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM generated_content ORDER BY id DESC LIMIT ?", (limit,)
                ).fetchall()
        entries = []
        for row in rows:
            entry = dict(row)
            entry["is_fallback"] = bool(entry["is_fallback"])
            entries.append(entry)
        return entries

    def delete(self, entry_id: int) -> bool:
        """Delete a single record. Returns True if a row was removed."""
        with self._get_conn() as conn:
            cur = conn.execute("DELETE FROM generated_content WHERE id = ?", (entry_id,))
            conn.commit()
        return cur.rowcount > 0

    def clear(self) -> int:
        """Delete all records. Returns count of deleted rows."""
        with self._get_conn() as conn:
            cur = conn.execute("DELETE FROM generated_content")
            conn.commit()
        return cur.rowcount

    def record_generation(self, kind: str, topic: str, generated) -> None:
        """
        Persist a GeneratedText without letting storage failures reach the caller.

        Template output is stored too, flagged with ``is_fallback``.
        """
        try:
            self.save(
                kind=kind,
                topic=topic,
                provider=generated.provider,
                model=generated.model,
                content=generated.text,
                is_fallback=generated.is_fallback,
                latency_ms=generated.latency_ms,
                tokens=generated.token_usage.total_tokens,
            )
        except sqlite3.Error as e:
            logger.error(
                f"Failed to persist generated {kind}: {e}",
                extra={"extra_fields": {"kind": kind, "error_type": type(e).__name__}},
            )
