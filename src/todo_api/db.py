import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

import psycopg2
import psycopg2.extras
from psycopg2.pool import ThreadedConnectionPool

from src.todo_api.config import Settings

logger = logging.getLogger(__name__)


class Database:
    """
    PostgreSQL access through a pooled set of connections.

    The pool is opened lazily on first use (or explicitly via `open`). Every
    helper acquires one connection, runs a single statement and hands the
    connection back, so callers never hold a connection between statements.
    When all `maxconn` connections are checked out, callers wait for one to
    be returned. `close` drains the pool; it is called once from the app
    shutdown hook.
    """

    def __init__(self, dsn: str, minconn: int = 1, maxconn: int = 10) -> None:
        self._dsn = dsn
        self._minconn = minconn
        self._maxconn = maxconn
        self._pool: Optional[ThreadedConnectionPool] = None
        self._pool_lock = threading.Lock()
        # ThreadedConnectionPool raises PoolError when exhausted instead of waiting.
        self._slots = threading.BoundedSemaphore(maxconn)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.dsn, minconn=settings.db_pool_min, maxconn=settings.db_pool_max)

    # PUBLIC_INTERFACE
    def open(self) -> ThreadedConnectionPool:
        """Create the underlying connection pool if it does not exist yet, and return it."""
        with self._pool_lock:
            if self._pool is None:
                self._pool = ThreadedConnectionPool(minconn=self._minconn, maxconn=self._maxconn, dsn=self._dsn)
            return self._pool

    # PUBLIC_INTERFACE
    def close(self) -> None:
        """Close every pooled connection. Safe to call more than once."""
        with self._pool_lock:
            pool, self._pool = self._pool, None
        if pool is None:
            return
        pool.closeall()
        logger.info("Database pool closed")

    @contextmanager
    def _get_conn(self):
        pool = self._pool or self.open()
        self._slots.acquire()
        try:
            conn = pool.getconn()
            try:
                yield conn
            finally:
                pool.putconn(conn)
        finally:
            self._slots.release()

    @staticmethod
    def _dict_cursor(conn):
        return conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)

    # PUBLIC_INTERFACE
    def ping(self) -> None:
        """Round-trip a trivial query; raises psycopg2.Error when unreachable."""
        with self._get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
                cur.fetchone()
            conn.rollback()

    # PUBLIC_INTERFACE
    def fetch_one(self, query: str, params: Optional[Sequence[Any]] = None) -> Optional[Dict[str, Any]]:
        """Fetch a single row as a dict, or None."""
        with self._get_conn() as conn:
            with self._dict_cursor(conn) as cur:
                cur.execute(query, params or [])
                row = cur.fetchone()
            conn.rollback()
            return dict(row) if row else None

    # PUBLIC_INTERFACE
    def fetch_all(self, query: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        """Fetch all rows as dicts."""
        with self._get_conn() as conn:
            with self._dict_cursor(conn) as cur:
                cur.execute(query, params or [])
                rows = cur.fetchall()
            conn.rollback()
            return [dict(r) for r in rows]

    # PUBLIC_INTERFACE
    def execute_returning(self, query: str, params: Optional[Sequence[Any]] = None) -> Optional[Dict[str, Any]]:
        """Execute a statement with RETURNING and return the first row as dict, or None."""
        with self._get_conn() as conn:
            try:
                with self._dict_cursor(conn) as cur:
                    cur.execute(query, params or [])
                    row = cur.fetchone()
                conn.commit()
            except psycopg2.Error:
                conn.rollback()
                raise
            return dict(row) if row else None

    # PUBLIC_INTERFACE
    def execute_returning_one(self, query: str, params: Optional[Sequence[Any]] = None) -> Dict[str, Any]:
        """Like `execute_returning`, but a missing row is an error."""
        row = self.execute_returning(query, params)
        if row is None:
            raise RuntimeError("Expected one row returned, got none.")
        return row
