"""
SQLite cache for GRPV results.

A result for the same (symbol, requester) is reused while it is younger than the
TTL (24 hours by default). Writes are serialized per key, so two threads asking
for the same uncached symbol compute it once.
"""

import sqlite3
import threading
import weakref
import logging
from pathlib import Path
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from ezana_scoring.utils.config import CACHE
from ezana_scoring.utils.models import GRPVResult

logger = logging.getLogger(__name__)


class ScoreCache:
    """
    Stores GRPVResult objects as JSON keyed on (symbol, requester).
    """

    def __init__(
        self,
        db_path: str = CACHE['db_path'],
        ttl_hours: float = CACHE['ttl_hours'],
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Args:
            db_path: Path to SQLite database file
            ttl_hours: How long a cached result stays fresh
            clock: Returns the current time, injectable for tests
        """
        self.db_path = db_path
        self.ttl = timedelta(hours=ttl_hours)
        self.clock = clock

        # entries drop out once no caller references their lock
        self._locks = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _init_database(self):
        """Create tables if they don't exist"""
        conn = self._connect()
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS grpv_scores (
                symbol TEXT NOT NULL,
                requester TEXT NOT NULL,
                data TEXT NOT NULL,
                updated_at TIMESTAMP NOT NULL,
                PRIMARY KEY (symbol, requester)
            )
        """)

        conn.commit()
        conn.close()

        logger.info(f"Score cache initialized at {self.db_path}")

    def _lock_for(self, symbol: str, requester: str) -> threading.Lock:
        key = (symbol, requester)
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def is_fresh(self, updated_at: datetime) -> bool:
        return updated_at > self.clock() - self.ttl

    def get(self, symbol: str, requester: str) -> Optional[GRPVResult]:
        """Cached result if one exists and is still fresh"""
        conn = self._connect()
        cursor = conn.cursor()

        cursor.execute(
            "SELECT data, updated_at FROM grpv_scores WHERE symbol = ? AND requester = ?",
            (symbol, requester)
        )

        row = cursor.fetchone()
        conn.close()

        if not row:
            return None

        data_json, updated_at = row
        updated_at = datetime.fromisoformat(updated_at)

        if not self.is_fresh(updated_at):
            age_hours = (self.clock() - updated_at).total_seconds() / 3600
            logger.debug(f"Cached score for {symbol} is stale ({age_hours:.1f}h old)")
            return None

        logger.debug(f"Using cached score for {symbol}")
        return GRPVResult.model_validate_json(data_json)

    def put(self, result: GRPVResult):
        """Save a result, replacing any previous one for the same key"""
        conn = self._connect()
        cursor = conn.cursor()

        cursor.execute("""
            INSERT OR REPLACE INTO grpv_scores (symbol, requester, data, updated_at)
            VALUES (?, ?, ?, ?)
        """, (
            result.symbol,
            result.requester,
            result.model_dump_json(),
            result.updated_at.isoformat()
        ))

        conn.commit()
        conn.close()

        logger.debug(f"Cached score for {result.symbol}")

    def get_or_compute(
        self,
        symbol: str,
        requester: str,
        compute: Callable[[], Optional[GRPVResult]],
        force_refresh: bool = False
    ) -> Optional[GRPVResult]:
        """
        Return the fresh cached result or compute, store and return a new one.

        Only one caller computes a given key at a time, everyone else waits and
        then reads what it stored.
        """
        with self._lock_for(symbol, requester):
            if not force_refresh:
                cached = self.get(symbol, requester)
                if cached:
                    return cached

            result = compute()

            if result is not None:
                self.put(result)

            return result

    def list_for_requester(self, requester: str) -> List[GRPVResult]:
        """Every stored result for a requester, most recently updated first"""
        conn = self._connect()
        cursor = conn.cursor()

        cursor.execute(
            "SELECT data FROM grpv_scores WHERE requester = ? ORDER BY updated_at DESC",
            (requester,)
        )

        rows = cursor.fetchall()
        conn.close()

        return [GRPVResult.model_validate_json(data_json) for (data_json,) in rows]

    def delete(self, symbol: str, requester: str) -> bool:
        """Returns False when there was nothing to delete"""
        conn = self._connect()
        cursor = conn.cursor()

        cursor.execute(
            "DELETE FROM grpv_scores WHERE symbol = ? AND requester = ?",
            (symbol, requester)
        )
        deleted = cursor.rowcount > 0

        conn.commit()
        conn.close()

        return deleted
