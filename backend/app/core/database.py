"""
PostgreSQL database access

This module centralizes the two ways the service talks to the database:
- psycopg2 connection pool (runtime queries, explicit transactions)
- SQLAlchemy declarative Base (schema definition, see app/models)

The pool is owned by a Database instance created in the application lifespan
and handed to repositories; nothing here connects at import time.
"""
import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)


# ============================================================================
# SQLAlchemy Configuration (schema only)
# ============================================================================

Base = declarative_base()


def create_schema_engine(database_url: str) -> Engine:
    """SQLAlchemy engine used by schema management scripts"""
    return create_engine(database_url, pool_pre_ping=True)


# ============================================================================
# psycopg2 Connection Pool (runtime queries)
# ============================================================================

class Database:
    """
    Pooled psycopg2 access with explicit transaction boundaries

    Usage:
        db = Database(settings.DATABASE_URL)
        db.open()
        with db.transaction() as cursor:
            cursor.execute("UPDATE orders SET ...")
        db.close()
    """

    def __init__(self, database_url: str, min_connections: int = 1, max_connections: int = 10):
        if not database_url:
            raise ValueError("DATABASE_URL not configured")
        self.database_url = database_url
        self.min_connections = min_connections
        self.max_connections = max_connections
        self._pool: Optional[ThreadedConnectionPool] = None

    def open(self, max_retries: int = 3, retry_delay: float = 1.0) -> None:
        """
        Create the connection pool, retrying on connection failures

        Intermittent SSL/connection errors are retried with exponential
        backoff; anything else fails immediately.

        Raises:
            psycopg2.OperationalError: If all retry attempts fail
        """
        for attempt in range(1, max_retries + 1):
            try:
                logger.debug(f"Database pool attempt {attempt}/{max_retries}")
                self._pool = ThreadedConnectionPool(
                    self.min_connections,
                    self.max_connections,
                    self.database_url,
                    cursor_factory=RealDictCursor,
                )
                logger.info("Database pool ready")
                return
            except psycopg2.OperationalError as e:
                logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")
                if attempt == max_retries:
                    logger.error(f"All {max_retries} connection attempts failed")
                    raise
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)

    def close(self) -> None:
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database pool closed")

    @contextmanager
    def connection(self) -> Iterator["psycopg2.extensions.connection"]:
        """Borrow a connection from the pool and always give it back"""
        if self._pool is None:
            raise RuntimeError("Database pool is not open")
        conn = self._pool.getconn()
        try:
            yield conn
        finally:
            self._pool.putconn(conn)

    @contextmanager
    def transaction(self) -> Iterator["psycopg2.extensions.cursor"]:
        """
        Run a block inside a single transaction

        Commits when the block exits normally, rolls back on any exception
        and re-raises it.
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            try:
                yield cursor
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()

    def ping(self) -> bool:
        """Health check: run SELECT 1"""
        with self.transaction() as cursor:
            cursor.execute("SELECT 1 AS ok")
            return cursor.fetchone()["ok"] == 1
