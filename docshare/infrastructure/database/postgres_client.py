"""PostgreSQL record store client.

Connection-pooled access to the ``profiles``, ``documents`` and
``document_shares`` tables when ``USE_LOCAL_DB=1``. Repositories use the
``fetch_*``/``execute`` helpers and never touch raw connections.
"""
from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Generator

import psycopg2
from psycopg2 import pool
from psycopg2.extras import Json, RealDictCursor

logger = logging.getLogger(__name__)


class PostgresClient:
    """PostgreSQL client with a small connection pool."""

    def __init__(self) -> None:
        self.enabled = os.getenv("USE_LOCAL_DB", "0") == "1"
        self._pool: pool.SimpleConnectionPool | None = None

        if self.enabled:
            host = os.getenv("POSTGRES_HOST", "localhost")
            database = os.getenv("POSTGRES_DB", "docshare")
            try:
                self._pool = pool.SimpleConnectionPool(
                    minconn=1,
                    maxconn=int(os.getenv("POSTGRES_POOL_MAX", "10")),
                    host=host,
                    port=int(os.getenv("POSTGRES_PORT", "5432")),
                    database=database,
                    user=os.getenv("POSTGRES_USER", "docshare"),
                    password=os.getenv("POSTGRES_PASSWORD", "docshare_dev_password"),
                )
            except psycopg2.Error as exc:  # pragma: no cover
                raise RuntimeError(f"Failed to initialize PostgreSQL connection pool: {exc}") from exc
            logger.info("PostgreSQL pool ready (host=%s, db=%s)", host, database)

    @contextmanager
    def cursor(self) -> Generator[Any, None, None]:
        """Yield a dict cursor inside a transaction.

        Commits on clean exit, rolls back on error, and always returns the
        connection to the pool.

        Raises:
            RuntimeError: If the local database is not enabled.
        """
        if not self.enabled or self._pool is None:
            raise RuntimeError("Local PostgreSQL database is not enabled")

        conn = self._pool.getconn()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                yield cur
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    def fetch_one(self, query: str, params: tuple = ()) -> dict[str, Any] | None:
        with self.cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()
            return dict(row) if row else None

    def fetch_all(self, query: str, params: tuple = ()) -> list[dict[str, Any]]:
        with self.cursor() as cur:
            cur.execute(query, params)
            return [dict(row) for row in cur.fetchall()]

    def execute(self, query: str, params: tuple = ()) -> int:
        """Run an INSERT/UPDATE/DELETE and return the affected row count."""
        with self.cursor() as cur:
            cur.execute(query, params)
            return cur.rowcount

    def replace_shares(self, document_id: str, profile_ids: list[str]) -> None:
        # delete and inserts run in one transaction
        with self.cursor() as cur:
            cur.execute("DELETE FROM document_shares WHERE document_id = %s", (document_id,))
            for position, profile_id in enumerate(profile_ids):
                cur.execute(
                    """
                    INSERT INTO document_shares (document_id, profile_id, position)
                    VALUES (%s, %s, %s)
                    """,
                    (document_id, profile_id, position),
                )

    @staticmethod
    def json(value: Any) -> Json:
        return Json(value)

    def close(self) -> None:
        if self._pool:
            self._pool.closeall()


_POSTGRES_CLIENT: PostgresClient | None = None


def get_postgres_client() -> PostgresClient | None:
    """Return the process-wide client, or None when ``USE_LOCAL_DB`` is off."""
    global _POSTGRES_CLIENT
    if os.getenv("USE_LOCAL_DB", "0") != "1":
        return None
    if _POSTGRES_CLIENT is None:
        _POSTGRES_CLIENT = PostgresClient()
    return _POSTGRES_CLIENT
