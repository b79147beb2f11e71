"""
Persistent query log of corporate hostnames (sqlite3)
"""

import os
import sqlite3
import threading
import time
from dataclasses import dataclass
from typing import List, Optional

from .constants import DEFAULT_LOG_WINDOW, QUERY_LOG_TABLE
from .exceptions import StoreError
from .utils.logger import get_logger


@dataclass(frozen=True)
class LogEntry:
    host: str
    last_seen: int


def _now() -> int:
    try:
        return int(time.time())
    except (OverflowError, ValueError) as e:
        raise StoreError(f"Failed to compute timestamp: {e}")


class QueryLogStore:
    """Host -> last-seen timestamp, one row per host.

    Rows are never expired by loading; ``load_recent`` only filters by the
    window. ``purge`` is the only operation that deletes.
    """

    def __init__(self, db_path: str, *, journal_mode: str = "WAL"):
        self.logger = get_logger(__name__)
        self.db_path = str(db_path)
        self.journal_mode = journal_mode
        self._lock = threading.RLock()
        self._conn = self._init_connection()

    def _init_connection(self) -> sqlite3.Connection:
        db_path = self.db_path
        try:
            if db_path != ":memory:":
                db_path = os.path.abspath(os.path.expanduser(db_path))
                self.db_path = db_path
                dir_path = os.path.dirname(db_path)
                if dir_path:
                    os.makedirs(dir_path, exist_ok=True)

            conn = sqlite3.connect(db_path, check_same_thread=False)
        except (sqlite3.Error, OSError) as e:
            raise StoreError(f"Failed to open query log {db_path}: {e}")

        try:
            conn.execute(f"PRAGMA journal_mode={self.journal_mode}")
        except sqlite3.Error:
            # Some filesystems refuse WAL; the default journal still works.
            pass

        try:
            with conn:
                conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {QUERY_LOG_TABLE} "
                    "(timestamp INTEGER, host TEXT)"
                )
                conn.execute(
                    f"CREATE UNIQUE INDEX IF NOT EXISTS uniq_host ON {QUERY_LOG_TABLE} (host)"
                )
        except sqlite3.Error as e:
            conn.close()
            raise StoreError(f"Failed to initialize query log schema: {e}")
        self.logger.debug(f"Opened query log at {db_path}")
        return conn

    def upsert(self, host: str, now: Optional[int] = None) -> None:
        """Record ``host`` as seen at ``now`` (defaults to the current time)"""
        timestamp = _now() if now is None else int(now)
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    f"INSERT INTO {QUERY_LOG_TABLE} (timestamp, host) VALUES (?, ?) "
                    "ON CONFLICT(host) DO UPDATE SET timestamp=excluded.timestamp",
                    (timestamp, str(host)),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to record {host}: {e}")

    def load_recent(self, now: Optional[int] = None, window: int = DEFAULT_LOG_WINDOW) -> List[LogEntry]:
        """Entries seen within ``window`` seconds before ``now``, in insertion order"""
        since = (_now() if now is None else int(now)) - int(window)
        try:
            with self._lock:
                rows = self._conn.execute(
                    f"SELECT timestamp, host FROM {QUERY_LOG_TABLE} "
                    "WHERE timestamp > ? ORDER BY rowid",
                    (since,),
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to load query log: {e}")

        entries = []
        for timestamp, host in rows:
            if not timestamp or not host:
                continue
            entries.append(LogEntry(host=str(host), last_seen=int(timestamp)))
        return entries

    def purge(self, before: int) -> int:
        """Delete rows last seen at or before ``before``; returns the count"""
        try:
            with self._lock, self._conn:
                cur = self._conn.execute(
                    f"DELETE FROM {QUERY_LOG_TABLE} WHERE timestamp <= ?",
                    (int(before),),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to purge query log: {e}")
        return cur.rowcount

    def count(self) -> int:
        try:
            with self._lock:
                row = self._conn.execute(f"SELECT COUNT(*) FROM {QUERY_LOG_TABLE}").fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to count query log rows: {e}")
        return int(row[0]) if row and row[0] is not None else 0

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> 'QueryLogStore':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
