"""
Service layer for journal entries.

Entries are private: every operation resolves the caller first and
then reads or writes only rows whose ``user_id`` is the caller's id.
A row owned by someone else is reported as "Entry not found." exactly
like a row that does not exist.

The connection, the clock and the id factory are passed in by the
caller so the service can run against any SQLite database.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..core.db import format_timestamp, new_id, utcnow
from ..core.query import desc
from ..core.security import require_user
from ..schemas.common import Ack, Envelope, IdData, parse_input
from ..schemas.entry import (
    EntryCreate,
    EntryData,
    EntryListQuery,
    EntryPage,
    EntryRead,
    EntryUpdate,
)
from ..schemas.user import CurrentUser
from .scoped_records import ScopedRecords


logger = logging.getLogger(__name__)


entries = ScopedRecords(
    table="mood_journal_entries",
    columns=(
        "id",
        "user_id",
        "entry_date",
        "mood_score",
        "mood_label",
        "tags",
        "title",
        "body",
        "prompt_id",
        "created_at",
        "updated_at",
    ),
    patchable=(
        "entry_date",
        "mood_score",
        "mood_label",
        "tags",
        "title",
        "body",
        "prompt_id",
    ),
    not_found_message="Entry not found.",
)


def _entry_timestamp(value: date) -> str:
    """Store a calendar date as midnight UTC of that day."""
    return format_timestamp(datetime.combine(value, time.min, tzinfo=timezone.utc))


class EntryService:
    """Service class for managing a user's journal entries."""

    @classmethod
    async def create_entry(
        cls,
        conn: sqlite3.Connection,
        user: Optional[CurrentUser],
        data: Union[EntryCreate, Mapping[str, Any]],
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = new_id,
    ) -> Envelope[EntryData]:
        """Insert a new entry owned by the caller and return it.

        ``entry_date`` defaults to the current time when omitted.
        """
        user = require_user(user)
        data = parse_input(EntryCreate, data)
        now = clock()
        created_at = format_timestamp(now)
        record = {
            "id": id_factory(),
            "user_id": user.id,
            "entry_date": _entry_timestamp(data.entry_date) if data.entry_date else created_at,
            "mood_score": data.mood_score,
            "mood_label": data.mood_label,
            "tags": data.tags,
            "title": data.title,
            "body": data.body,
            "prompt_id": data.prompt_id,
            "created_at": created_at,
            "updated_at": created_at,
        }
        entries.insert(conn, record)
        logger.info("Created entry %s for user %s", record["id"], user.id)
        return Envelope[EntryData](data=EntryData(entry=EntryRead.model_validate(record)))

    @classmethod
    async def update_entry(
        cls,
        conn: sqlite3.Connection,
        user: Optional[CurrentUser],
        entry_id: str,
        data: Union[EntryUpdate, Mapping[str, Any]],
        clock: Callable[[], datetime] = utcnow,
    ) -> Envelope[IdData]:
        """Apply a sparse update to one of the caller's entries.

        Fields missing from ``data`` keep their value, fields sent as
        ``null`` are cleared.  ``updated_at`` always moves to now.
        """
        user = require_user(user)
        data = parse_input(EntryUpdate, data)
        changes: Dict[str, Any] = data.to_patch()
        if "entry_date" in changes:
            changes["entry_date"] = _entry_timestamp(changes["entry_date"])
        entries.patch(conn, entry_id, user.id, changes, now=clock())
        logger.info("Updated entry %s (%s)", entry_id, ", ".join(sorted(changes)) or "no fields")
        return Envelope[IdData](data=IdData(id=entry_id))

    @classmethod
    async def delete_entry(
        cls,
        conn: sqlite3.Connection,
        user: Optional[CurrentUser],
        entry_id: str,
    ) -> Ack:
        """Delete one of the caller's entries."""
        user = require_user(user)
        entries.delete(conn, entry_id, user.id)
        logger.info("Deleted entry %s", entry_id)
        return Ack()

    @classmethod
    async def get_entry(
        cls,
        conn: sqlite3.Connection,
        user: Optional[CurrentUser],
        entry_id: str,
    ) -> Envelope[EntryData]:
        user = require_user(user)
        record = entries.require(conn, entry_id, user.id)
        return Envelope[EntryData](data=EntryData(entry=EntryRead.model_validate(record)))

    @classmethod
    async def list_entries(
        cls,
        conn: sqlite3.Connection,
        user: Optional[CurrentUser],
        page: int = 1,
        page_size: int = 20,
    ) -> Envelope[EntryPage]:
        """Return one page of the caller's entries, newest ``entry_date`` first.

        ``total`` counts all of the caller's entries, not just the page.
        """
        user = require_user(user)
        query = parse_input(EntryListQuery, {"page": page, "page_size": page_size})
        offset = (query.page - 1) * query.page_size
        owned = entries.owned_by(user.id)
        rows = entries.select(
            conn,
            owned,
            order_by=(desc("entry_date"), desc("created_at")),
            limit=query.page_size,
            offset=offset,
        )
        total = entries.count(conn, owned)
        return Envelope[EntryPage](
            data=EntryPage(
                items=[EntryRead.model_validate(row) for row in rows],
                total=total,
                page=query.page,
                page_size=query.page_size,
            )
        )
