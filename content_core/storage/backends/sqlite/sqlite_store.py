"""
SQLite record store implementation.

This module stores content records in a single relational table. Details
and detail collections are kept as JSON text. Transactions map directly to
SQLite transactions, so a rollback undoes every write made since BEGIN.
"""

import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from content_core.exceptions import StorageError
from content_core.query.query_types import FilterCondition, FilterOperator, QuerySpec
from content_core.storage.unit_of_work import UnitOfWorkStore

_COLUMNS = (
    "record_id",
    "title",
    "name",
    "state",
    "version_of_id",
    "version_index",
    "parent_id",
    "created",
    "updated",
    "published",
    "expires",
    "sort_order",
    "visible",
    "saved_by",
    "details",
    "detail_collections",
)

_JSON_COLUMNS = ("details", "detail_collections")

_OPERATOR_SQL = {
    FilterOperator.EQ: "=",
    FilterOperator.NE: "!=",
    FilterOperator.GT: ">",
    FilterOperator.GTE: ">=",
    FilterOperator.LT: "<",
    FilterOperator.LTE: "<=",
}


def compile_condition(condition: FilterCondition) -> Tuple[str, List[Any]]:
    """Translate a filter condition into a SQL fragment and its parameters."""
    column = condition.field
    value = condition.value

    if condition.operator == FilterOperator.NULL:
        return f"{column} IS NULL", []
    if condition.operator == FilterOperator.IN:
        values = list(value)
        if not values:
            return "0", []
        return f"{column} IN ({', '.join('?' for _ in values)})", values
    if value is None and condition.operator == FilterOperator.EQ:
        return f"{column} IS NULL", []
    if value is None and condition.operator == FilterOperator.NE:
        return f"{column} IS NOT NULL", []
    return f"{column} {_OPERATOR_SQL[condition.operator]} ?", [value]


def compile_query(query_spec: QuerySpec) -> Tuple[str, List[Any]]:
    """Translate a validated query specification into a SELECT statement."""
    sql = f"SELECT {', '.join(_COLUMNS)} FROM records"
    params: List[Any] = []

    if query_spec.criteria:
        groups = []
        for group in query_spec.criteria:
            fragments = []
            for condition in group:
                fragment, fragment_params = compile_condition(condition)
                fragments.append(fragment)
                params.extend(fragment_params)
            groups.append(f"({' AND '.join(fragments)})")
        sql += f" WHERE {' OR '.join(groups)}"

    if query_spec.sorts:
        order = ", ".join(
            f"{sort.field} {'ASC' if sort.ascending else 'DESC'}" for sort in query_spec.sorts
        )
        sql += f" ORDER BY {order}"

    if query_spec.limit is not None or query_spec.offset:
        sql += " LIMIT ? OFFSET ?"
        params.append(query_spec.limit if query_spec.limit is not None else -1)
        params.append(query_spec.offset or 0)

    return sql, params


class SqliteRecordStore(UnitOfWorkStore):
    """
    SQLite-based implementation of the RecordStoreInterface.

    Good balance between simplicity and durability for single-process
    deployments.
    """

    def __init__(self, database_path: str = "./data/records.db"):
        """
        Initialize SqliteRecordStore with database path.

        Args:
            database_path: Path to the SQLite database file, or ':memory:'
        """
        super().__init__()
        self.database_path = database_path
        self._db_connection: Optional[sqlite3.Connection] = None

    # Connection Management
    def _open(self) -> None:
        if self.database_path != ":memory:":
            Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)

        # Autocommit mode, transactions are issued explicitly
        self._db_connection = sqlite3.connect(self.database_path, isolation_level=None)
        self._db_connection.execute("PRAGMA foreign_keys = ON")
        self._create_tables()
        self.logger.info(f"Connected to SQLite database at {self.database_path}")

    def close(self) -> None:
        if not self._connected:
            return
        if self._db_connection:
            self._db_connection.close()
            self._db_connection = None
        self._connected = False
        self.logger.info("Disconnected from SQLite database")

    def is_available(self) -> bool:
        try:
            if self.database_path != ":memory:":
                Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)
            connection = sqlite3.connect(self.database_path)
            try:
                connection.execute("SELECT 1")
            finally:
                connection.close()
            return True
        except (OSError, sqlite3.Error) as e:
            self.logger.error(f"SQLite connection test failed: {e}")
            return False

    def _create_tables(self):
        self._db_connection.execute(
            """
            CREATE TABLE IF NOT EXISTS records (
                record_id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL DEFAULT '',
                name TEXT,
                state TEXT NOT NULL,
                version_of_id INTEGER,
                version_index INTEGER NOT NULL DEFAULT 0,
                parent_id INTEGER,
                created REAL NOT NULL,
                updated REAL NOT NULL,
                published REAL,
                expires REAL,
                sort_order INTEGER NOT NULL DEFAULT 0,
                visible INTEGER NOT NULL DEFAULT 1,
                saved_by TEXT,
                details TEXT NOT NULL DEFAULT '{}',
                detail_collections TEXT NOT NULL DEFAULT '{}'
            )
            """
        )
        self._db_connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_records_version_of ON records (version_of_id)"
        )
        self._db_connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_records_parent ON records (parent_id)"
        )

    # Row-level hooks
    def _execute(self, sql: str, params=()) -> sqlite3.Cursor:
        try:
            return self._db_connection.execute(sql, params)
        except sqlite3.Error as e:
            raise StorageError(f"SQLite error: {e}") from e

    def _to_params(self, row: Dict[str, Any], columns) -> List[Any]:
        return [
            json.dumps(row.get(column) or {}) if column in _JSON_COLUMNS else row.get(column)
            for column in columns
        ]

    def _from_db(self, values) -> Dict[str, Any]:
        row = dict(zip(_COLUMNS, values))
        for column in _JSON_COLUMNS:
            row[column] = json.loads(row[column]) if row[column] else {}
        row["visible"] = bool(row["visible"])
        return row

    def _insert_row(self, row: Dict[str, Any]) -> int:
        columns = [c for c in _COLUMNS if c != "record_id"]
        cursor = self._execute(
            f"INSERT INTO records ({', '.join(columns)}) VALUES ({', '.join('?' for _ in columns)})",
            self._to_params(row, columns),
        )
        return cursor.lastrowid

    def _update_row(self, row: Dict[str, Any]) -> None:
        columns = [c for c in _COLUMNS if c != "record_id"]
        self._execute(
            f"UPDATE records SET {', '.join(f'{c} = ?' for c in columns)} WHERE record_id = ?",
            self._to_params(row, columns) + [row["record_id"]],
        )

    def _delete_row(self, record_id: int) -> None:
        self._execute("DELETE FROM records WHERE record_id = ?", (record_id,))

    def _load_row(self, record_id: int) -> Optional[Dict[str, Any]]:
        cursor = self._execute(
            f"SELECT {', '.join(_COLUMNS)} FROM records WHERE record_id = ?", (record_id,)
        )
        values = cursor.fetchone()
        return self._from_db(values) if values else None

    def _query_rows(self, query_spec: QuerySpec) -> List[Dict[str, Any]]:
        sql, params = compile_query(query_spec)
        return [self._from_db(values) for values in self._execute(sql, params).fetchall()]

    # Transactions
    def _begin(self) -> None:
        self._execute("BEGIN")

    def _commit(self) -> None:
        self._execute("COMMIT")

    def _rollback(self) -> None:
        if self._db_connection is not None and self._db_connection.in_transaction:
            self._execute("ROLLBACK")
