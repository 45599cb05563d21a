"""
Record store for the TalentFlow collections.

Provides keyed JSON-record persistence over SQLite with one secondary
equality index per collection, explicit open/close lifecycle, and
all-or-nothing transactions for multi-record mutations.
"""

import json
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from talentflow.db.schema import COLLECTIONS, CollectionSpec, bootstrap_schema
from talentflow.models.errors import (
    DuplicateKeyError,
    ToolError,
    create_db_error,
    create_store_unavailable_error,
    create_validation_error,
)

logger = logging.getLogger(__name__)

# Default database path relative to repository root
DEFAULT_DB_PATH = "data/talentflow.db"

MEMORY_DB_PATH = ":memory:"

Record = Dict[str, Any]


def resolve_db_path(db_path: Optional[str] = None) -> Path:
    """
    Resolve the database path with support for overrides and defaults.

    Resolution order:
    1. Provided db_path parameter
    2. TALENTFLOW_DB environment variable
    3. TALENTFLOW_ROOT/data/talentflow.db
    4. Default path: data/talentflow.db

    Args:
        db_path: Optional database path override

    Returns:
        Resolved absolute Path to the database
    """
    if db_path is not None:
        path_str = db_path
    else:
        db_env = os.getenv("TALENTFLOW_DB")
        if db_env:
            path_str = db_env
        else:
            root_env = os.getenv("TALENTFLOW_ROOT")
            if root_env:
                return Path(root_env) / "data" / "talentflow.db"
            path_str = DEFAULT_DB_PATH

    path = Path(path_str)

    # Relative paths resolve from the repository root
    if not path.is_absolute():
        current_file = Path(__file__).resolve()
        repo_root = current_file.parents[2]  # db/ -> talentflow/ -> repo/
        path = repo_root / path

    return path


def _map_sqlite_error(error: sqlite3.Error) -> ToolError:
    """Map a SQLite failure during an operation to a DB_ERROR."""
    message = str(error)
    retryable = "locked" in message.lower() or "busy" in message.lower()
    return create_db_error(message, retryable=retryable, original_error=error)


def _spec_for(collection: str) -> CollectionSpec:
    spec = COLLECTIONS.get(collection)
    if spec is None:
        allowed = ", ".join(sorted(COLLECTIONS))
        raise create_validation_error(
            f"Unknown collection: '{collection}'. Allowed values are: {allowed}"
        )
    return spec


def _encode(record: Record) -> str:
    try:
        return json.dumps(record, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise create_validation_error(f"Record is not JSON-serializable: {str(e)}") from e


class StoreTransaction:
    """
    Record operations bound to one open connection.

    Instances are handed out by ``RecordStore.transaction()``; every call made
    through the same instance commits or rolls back together.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self, collection: str, key: Any) -> Optional[Record]:
        """Return the record stored under key, or None."""
        spec = _spec_for(collection)
        try:
            row = self.conn.execute(
                f"SELECT body FROM {spec.name} WHERE pk = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise _map_sqlite_error(e) from e
        return json.loads(row["body"]) if row else None

    def get_all(self, collection: str) -> List[Record]:
        """Return every record in natural (ascending key) order."""
        spec = _spec_for(collection)
        try:
            rows = self.conn.execute(f"SELECT body FROM {spec.name} ORDER BY pk").fetchall()
        except sqlite3.Error as e:
            raise _map_sqlite_error(e) from e
        return [json.loads(row["body"]) for row in rows]

    def get_by_index(self, collection: str, field: str, value: Any) -> List[Record]:
        """Return records whose indexed field equals value, in natural order."""
        spec = _spec_for(collection)
        if spec.index_field != field:
            raise create_validation_error(
                f"Collection '{collection}' has no index on field '{field}'"
            )
        try:
            rows = self.conn.execute(
                f"SELECT body FROM {spec.name} WHERE idx = ? ORDER BY pk", (value,)
            ).fetchall()
        except sqlite3.Error as e:
            raise _map_sqlite_error(e) from e
        return [json.loads(row["body"]) for row in rows]

    def count(self, collection: str) -> int:
        """Return the number of records in a collection."""
        spec = _spec_for(collection)
        try:
            row = self.conn.execute(f"SELECT COUNT(*) AS n FROM {spec.name}").fetchone()
        except sqlite3.Error as e:
            raise _map_sqlite_error(e) from e
        return row["n"]

    def put(self, collection: str, record: Record) -> Any:
        """
        Upsert a record by primary key, replacing any existing record wholesale.

        On an auto-key collection a record without a key is inserted with a
        freshly generated key.

        Returns:
            The record's key
        """
        spec = _spec_for(collection)
        key = record.get(spec.key_field)
        if key is None:
            if spec.auto_key:
                return self.add(collection, record)
            raise create_validation_error(
                f"Record for '{collection}' is missing key field '{spec.key_field}'"
            )

        index_value = record.get(spec.index_field) if spec.index_field else None
        body = _encode(record)
        try:
            self.conn.execute(
                f"INSERT OR REPLACE INTO {spec.name} (pk, idx, body) VALUES (?, ?, ?)",
                (key, index_value, body),
            )
        except sqlite3.Error as e:
            raise _map_sqlite_error(e) from e
        return key

    def add(self, collection: str, record: Record) -> Any:
        """
        Insert a new record.

        Auto-key collections receive a fresh key, which is also written into
        the stored record. Explicit-key collections reject existing keys.

        Returns:
            The key of the inserted record

        Raises:
            DuplicateKeyError: If the explicit key already exists
        """
        spec = _spec_for(collection)
        index_value = record.get(spec.index_field) if spec.index_field else None

        if spec.auto_key:
            stored = {k: v for k, v in record.items() if k != spec.key_field}
            try:
                cursor = self.conn.execute(
                    f"INSERT INTO {spec.name} (idx, body) VALUES (?, ?)",
                    (index_value, _encode(stored)),
                )
                key = cursor.lastrowid
                stored = {spec.key_field: key, **stored}
                self.conn.execute(
                    f"UPDATE {spec.name} SET body = ? WHERE pk = ?", (_encode(stored), key)
                )
            except sqlite3.Error as e:
                raise _map_sqlite_error(e) from e
            return key

        key = record.get(spec.key_field)
        if key is None:
            raise create_validation_error(
                f"Record for '{collection}' is missing key field '{spec.key_field}'"
            )
        try:
            self.conn.execute(
                f"INSERT INTO {spec.name} (pk, idx, body) VALUES (?, ?, ?)",
                (key, index_value, _encode(record)),
            )
        except sqlite3.IntegrityError as e:
            raise DuplicateKeyError(
                f"Duplicate key in '{collection}': {key}", operation="add", entity_id=key
            ) from e
        except sqlite3.Error as e:
            raise _map_sqlite_error(e) from e
        return key

    def delete(self, collection: str, key: Any) -> None:
        """Remove a record; deleting an absent key is a no-op."""
        spec = _spec_for(collection)
        try:
            self.conn.execute(f"DELETE FROM {spec.name} WHERE pk = ?", (key,))
        except sqlite3.Error as e:
            raise _map_sqlite_error(e) from e


class RecordStore:
    """
    Explicitly constructed handle to the local record store.

    Usage:
        with RecordStore(db_path) as store:
            store.put("jobs", job)
            with store.transaction() as txn:
                txn.put("candidates", candidate)
                txn.add("timeline", event)
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the store handle without opening it.

        Args:
            db_path: Optional database path override, or ":memory:"
        """
        self.db_path = db_path
        self.resolved_path: Optional[Path] = None
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._txn: Optional[StoreTransaction] = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> "RecordStore":
        """
        Open the connection and bootstrap the schema.

        Returns:
            self

        Raises:
            StoreUnavailableError: If the database cannot be created or opened
        """
        with self._lock:
            if self._conn is not None:
                return self

            if self.db_path == MEMORY_DB_PATH:
                target = MEMORY_DB_PATH
            else:
                self.resolved_path = resolve_db_path(self.db_path)
                target = str(self.resolved_path)
                try:
                    self.resolved_path.parent.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    raise create_store_unavailable_error(target, original_error=e) from e

            try:
                conn = sqlite3.connect(target, isolation_level=None, check_same_thread=False)
                conn.row_factory = sqlite3.Row
            except sqlite3.Error as e:
                raise create_store_unavailable_error(target, original_error=e) from e

            try:
                bootstrap_schema(conn)
            except ToolError as e:
                conn.close()
                raise create_store_unavailable_error(target, original_error=e.original_error) from e

            self._conn = conn
            logger.info("Record store opened: %s", target)
            return self

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                self._txn = None
                logger.info("Record store closed")

    def _require_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise create_store_unavailable_error()
        return self._conn

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """
        Run a block of record operations as one atomic unit.

        Commits when the block exits normally and rolls back when any
        exception escapes it. Nested use on the same thread joins the
        outer transaction.

        Raises:
            StoreUnavailableError: If the store is not open
            ToolError: If BEGIN or COMMIT fails
        """
        with self._lock:
            if self._txn is not None:
                yield self._txn
                return

            conn = self._require_connection()
            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                raise _map_sqlite_error(e) from e

            txn = StoreTransaction(conn)
            self._txn = txn
            try:
                yield txn
            except BaseException:
                self._txn = None
                self._rollback(conn)
                raise

            self._txn = None
            try:
                conn.execute("COMMIT")
            except sqlite3.Error as e:
                self._rollback(conn)
                raise create_db_error(
                    f"Failed to commit transaction: {str(e)}", retryable=True, original_error=e
                ) from e

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        if not conn.in_transaction:
            return
        try:
            conn.execute("ROLLBACK")
        except sqlite3.Error as e:
            # Already unwinding another failure
            logger.warning("Rollback failed: %s", e)

    def _reader(self) -> StoreTransaction:
        if self._txn is not None:
            return self._txn
        return StoreTransaction(self._require_connection())

    # Single-statement reads see a consistent snapshot without BEGIN.

    def get(self, collection: str, key: Any) -> Optional[Record]:
        with self._lock:
            return self._reader().get(collection, key)

    def get_all(self, collection: str) -> List[Record]:
        with self._lock:
            return self._reader().get_all(collection)

    def get_by_index(self, collection: str, field: str, value: Any) -> List[Record]:
        with self._lock:
            return self._reader().get_by_index(collection, field, value)

    def count(self, collection: str) -> int:
        with self._lock:
            return self._reader().count(collection)

    def put(self, collection: str, record: Record) -> Any:
        with self.transaction() as txn:
            return txn.put(collection, record)

    def add(self, collection: str, record: Record) -> Any:
        with self.transaction() as txn:
            return txn.add(collection, record)

    def delete(self, collection: str, key: Any) -> None:
        with self.transaction() as txn:
            txn.delete(collection, key)
