"""SQLite-backed match cache."""
import asyncio
import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Union

from domain.entities import Match
from domain.interfaces import IMatchCache

logger = logging.getLogger(__name__)


class SqliteMatchCache(IMatchCache):
    """Durable ``game id -> serialized match`` table.

    Rows are written once and never updated: ``put`` on an id that is already
    stored is a no-op, enforced by the primary key so that two writers racing
    on the same id still leave a single row. Blocking sqlite calls run on a
    worker thread; one connection is shared behind a lock.
    """

    def __init__(self, db_path: Union[Path, str]):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self._lock = threading.Lock()
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")
        self._create_tables()

    def _create_tables(self) -> None:
        with self._lock:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS matches (id INTEGER PRIMARY KEY, serialized TEXT NOT NULL)"
            )
            self._conn.commit()

    # ── sync primitives (run on a worker thread) ─────────────────────────

    def _select(self, game_id: int) -> Optional[str]:
        with self._lock:
            row = self._conn.execute(
                "SELECT serialized FROM matches WHERE id = ?", (game_id,)
            ).fetchone()
        return row[0] if row else None

    def _insert(self, game_id: int, serialized: str) -> bool:
        with self._lock:
            cur = self._conn.execute(
                "INSERT INTO matches(id, serialized) VALUES(?, ?) ON CONFLICT(id) DO NOTHING",
                (game_id, serialized),
            )
            self._conn.commit()
            return cur.rowcount == 1

    # ── IMatchCache ──────────────────────────────────────────────────────

    async def get(self, game_id: int) -> Optional[Match]:
        serialized = await asyncio.to_thread(self._select, game_id)
        if serialized is None:
            return None
        return Match.from_dict(json.loads(serialized))

    async def put(self, game_id: int, match: Match) -> bool:
        serialized = json.dumps(match.to_dict(), separators=(",", ":"))
        inserted = await asyncio.to_thread(self._insert, game_id, serialized)
        if not inserted:
            logger.debug(f"Game {game_id} already cached")
        return inserted

    # ── inspection ───────────────────────────────────────────────────────

    def count(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM matches").fetchone()[0]

    def contains(self, game_id: int) -> bool:
        return self._select(game_id) is not None

    def ids(self) -> List[int]:
        with self._lock:
            return [r[0] for r in self._conn.execute("SELECT id FROM matches ORDER BY id").fetchall()]

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> "SqliteMatchCache":
        return self

    def __exit__(self, *_) -> None:
        self.close()
