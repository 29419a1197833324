"""
Ownership-scoped access to a single table.

Entries and prompts follow the same rules: a record is loaded, patched
and deleted only through a filter that pins both its ``id`` and its
owner, so a record of another user behaves exactly like a missing one.
``ScopedRecords`` implements those rules once and is configured per
table with its columns, its owner column and the set of columns a
sparse patch may touch.

Every method takes the connection explicitly and commits its own
statement; there are no multi-statement transactions.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Sequence

from ..core.db import format_timestamp
from ..core.errors import NotFound
from ..core.query import Filter, OrderBy, and_, eq


logger = logging.getLogger(__name__)


class ScopedRecords:
    """Scoped CRUD helper for one table.

    Parameters
    ----------
    table : str
        Table name.
    columns : Sequence[str]
        All columns of the table, in insert order.
    patchable : Sequence[str]
        Columns a sparse patch may overwrite.  ``updated_at`` is always
        refreshed and must not be listed.
    owner_column : str
        Column holding the id of the owning user.
    not_found_message : str
        Message of the ``NotFound`` raised by ``require``.
    """

    def __init__(
        self,
        table: str,
        columns: Sequence[str],
        patchable: Sequence[str],
        owner_column: str = "user_id",
        not_found_message: str = "Not found.",
    ) -> None:
        unknown = set(patchable) - set(columns)
        if unknown:
            raise ValueError(f"Unknown patchable columns for {table}: {sorted(unknown)}")
        self.table = table
        self.columns: tuple = tuple(columns)
        self.patchable: FrozenSet[str] = frozenset(patchable)
        self.owner_column = owner_column
        self.not_found_message = not_found_message

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------
    def owned_by(self, user_id: str) -> Filter:
        return eq(self.owner_column, user_id)

    def owned_record(self, record_id: str, user_id: str) -> Filter:
        """Filter matching one record only if ``user_id`` owns it."""
        return and_(eq("id", record_id), self.owned_by(user_id))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def select(
        self,
        conn: sqlite3.Connection,
        where: Filter,
        order_by: Sequence[OrderBy] = (),
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        clause, params = where.render()
        query = f"SELECT {', '.join(self.columns)} FROM {self.table} WHERE {clause}"
        if order_by:
            query += " ORDER BY " + ", ".join(term.render() for term in order_by)
        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params += (limit, offset)
        rows = conn.execute(query, params).fetchall()
        return [dict(row) for row in rows]

    def count(self, conn: sqlite3.Connection, where: Filter) -> int:
        clause, params = where.render()
        row = conn.execute(
            f"SELECT COUNT(*) AS count FROM {self.table} WHERE {clause}", params
        ).fetchone()
        return row["count"]

    def load(self, conn: sqlite3.Connection, record_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        rows = self.select(conn, self.owned_record(record_id, user_id), limit=1)
        return rows[0] if rows else None

    def require(self, conn: sqlite3.Connection, record_id: str, user_id: str) -> Dict[str, Any]:
        """Load a record owned by ``user_id`` or raise ``NotFound``."""
        record = self.load(conn, record_id, user_id)
        if record is None:
            logger.debug("%s %s not found for user %s", self.table, record_id, user_id)
            raise NotFound(self.not_found_message)
        return record

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def insert(self, conn: sqlite3.Connection, record: Mapping[str, Any]) -> None:
        values = tuple(record.get(column) for column in self.columns)
        placeholders = ", ".join("?" for _ in self.columns)
        conn.execute(
            f"INSERT INTO {self.table} ({', '.join(self.columns)}) VALUES ({placeholders})",
            values,
        )
        conn.commit()

    def patch(
        self,
        conn: sqlite3.Connection,
        record_id: str,
        user_id: str,
        changes: Mapping[str, Any],
        now: datetime,
    ) -> None:
        """Apply a sparse patch to a record owned by ``user_id``.

        ``changes`` maps column names to new values; only the keys
        present are written, and a ``None`` value clears the column.
        Keys outside ``patchable`` are ignored.  ``updated_at`` is set
        to ``now`` even when ``changes`` is empty.  The UPDATE repeats
        the ownership filter of the preceding load.
        """
        self.require(conn, record_id, user_id)
        values: Dict[str, Any] = {
            column: value for column, value in changes.items() if column in self.patchable
        }
        values["updated_at"] = format_timestamp(now)
        assignments = ", ".join(f"{column} = ?" for column in values)
        clause, params = self.owned_record(record_id, user_id).render()
        conn.execute(
            f"UPDATE {self.table} SET {assignments} WHERE {clause}",
            tuple(values.values()) + params,
        )
        conn.commit()

    def delete(self, conn: sqlite3.Connection, record_id: str, user_id: str) -> None:
        """Delete a record owned by ``user_id`` or raise ``NotFound``."""
        self.require(conn, record_id, user_id)
        clause, params = self.owned_record(record_id, user_id).render()
        conn.execute(f"DELETE FROM {self.table} WHERE {clause}", params)
        conn.commit()
