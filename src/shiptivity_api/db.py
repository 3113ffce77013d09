from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Any, Generator, List, Mapping, Optional

from .errors import StoreError
from .models import ClientEntity
from .repositories import Repository, ensure_mutable_fields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "clients"
    id: str = "id"
    name: str = "name"
    description: str = "description"
    status: str = "status"
    priority: str = "priority"


_COLS = _Cols()


class SQLiteRepository(Repository):
    """
    SQLite repository holding one connection for the life of the process.

    Access is serialised with a lock; close() must be called on shutdown.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._lock = RLock()
        self._conn: Optional[sqlite3.Connection] = None
        try:
            if db_path != ":memory:":
                os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
            # Transactions are opened explicitly in _transaction.
            conn = sqlite3.connect(db_path, check_same_thread=False, isolation_level=None)
            conn.row_factory = sqlite3.Row
            self._conn = conn
            self._init_db()
        except (sqlite3.Error, OSError) as e:
            logger.error("Error opening database %s: %s", db_path, e)
            raise StoreError(long_message=str(e)) from e
        logger.info("Connected to SQLite database at %s", db_path)

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError(long_message="Database connection is closed.")
        return self._conn

    @contextmanager
    def _transaction(self) -> Generator[sqlite3.Connection, None, None]:
        with self._lock:
            conn = self._connection()
            try:
                conn.execute("BEGIN IMMEDIATE")
                yield conn
                conn.execute("COMMIT")
            except (sqlite3.Error, OverflowError) as e:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                logger.error("Database write failed: %s", e)
                raise StoreError("DB update error.", str(e)) from e
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise

    def _query(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        with self._lock:
            try:
                return self._connection().execute(sql, params).fetchall()
            except (sqlite3.Error, OverflowError) as e:
                logger.error("Database read failed: %s", e)
                raise StoreError(long_message=str(e)) from e

    def _init_db(self) -> None:
        self._connection().execute(
            f"""
            CREATE TABLE IF NOT EXISTS {_COLS.table} (
                {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                {_COLS.name} TEXT NULL,
                {_COLS.description} TEXT NULL,
                {_COLS.status} TEXT NOT NULL DEFAULT 'backlog',
                {_COLS.priority} INTEGER NOT NULL DEFAULT 1
            )
            """
        )
        self._connection().execute(
            f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_status ON {_COLS.table}({_COLS.status})"
        )

    def _row_to_entity(self, row: sqlite3.Row) -> ClientEntity:
        return {
            "id": int(row[_COLS.id]),
            "name": row[_COLS.name],
            "description": row[_COLS.description],
            "status": str(row[_COLS.status]),
            "priority": int(row[_COLS.priority]),
        }

    def get(self, client_id: int) -> Optional[ClientEntity]:
        rows = self._query(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (client_id,))
        return self._row_to_entity(rows[0]) if rows else None

    def list(self, status: Optional[str] = None) -> List[ClientEntity]:
        if status is None:
            rows = self._query(f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.id}")
        else:
            rows = self._query(
                f"SELECT * FROM {_COLS.table} WHERE {_COLS.status} = ? ORDER BY {_COLS.id}",
                (status,),
            )
        return [self._row_to_entity(r) for r in rows]

    def update_fields(self, client_id: int, changes: Mapping[str, Any]) -> bool:
        ensure_mutable_fields(changes)
        columns = [c for c in (_COLS.status, _COLS.priority) if c in changes]
        set_sql = ", ".join(f"{c} = ?" for c in columns)
        params = [changes[c] for c in columns]

        with self._transaction() as conn:
            row = conn.execute(
                f"SELECT {_COLS.id} FROM {_COLS.table} WHERE {_COLS.id} = ?", (client_id,)
            ).fetchone()
            if row is None:
                return False
            conn.execute(
                f"UPDATE {_COLS.table} SET {set_sql} WHERE {_COLS.id} = ?",
                (*params, client_id),
            )
            return True

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            try:
                self._conn.close()
            except sqlite3.Error as e:
                logger.error("Error closing database: %s", e)
                raise StoreError(long_message=str(e)) from e
            finally:
                self._conn = None
            logger.info("Database connection closed.")
