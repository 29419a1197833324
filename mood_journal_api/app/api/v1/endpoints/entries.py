"""
Journal entry endpoints for API v1.

Bodies are passed to ``EntryService`` as plain mappings: the service
checks the caller before it validates anything, so an anonymous
request is always answered with 401, even when its body is invalid.
"""

import sqlite3
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from mood_journal_api.app.core.db import get_db
from mood_journal_api.app.core.security import resolve_user
from mood_journal_api.app.schemas.common import Ack, Envelope, IdData
from mood_journal_api.app.schemas.entry import EntryData, EntryPage
from mood_journal_api.app.schemas.user import CurrentUser
from mood_journal_api.app.services.entry_service import EntryService

router = APIRouter()


@router.post("/", response_model=Envelope[EntryData], status_code=status.HTTP_201_CREATED)
async def create_entry(
    payload: Any = Body(None, examples=[{"moodScore": 7, "moodLabel": "calm", "title": "Slow Sunday"}]),
    conn: sqlite3.Connection = Depends(get_db),
    current_user: Optional[CurrentUser] = Depends(resolve_user),
) -> Envelope[EntryData]:
    """Create an entry for the authenticated user."""
    return await EntryService.create_entry(conn, current_user, payload)


@router.get("/", response_model=Envelope[EntryPage])
async def list_entries(
    page: int = Query(1),
    page_size: int = Query(20, alias="pageSize"),
    conn: sqlite3.Connection = Depends(get_db),
    current_user: Optional[CurrentUser] = Depends(resolve_user),
) -> Envelope[EntryPage]:
    """Return a page of the user's entries, newest entry date first.

    ``page`` starts at 1 and ``pageSize`` must be between 1 and 100.
    """
    return await EntryService.list_entries(conn, current_user, page=page, page_size=page_size)


@router.get("/{entry_id}", response_model=Envelope[EntryData])
async def get_entry(
    entry_id: str,
    conn: sqlite3.Connection = Depends(get_db),
    current_user: Optional[CurrentUser] = Depends(resolve_user),
) -> Envelope[EntryData]:
    return await EntryService.get_entry(conn, current_user, entry_id)


@router.patch("/{entry_id}", response_model=Envelope[IdData])
async def update_entry(
    entry_id: str,
    payload: Any = Body(None, examples=[{"moodScore": 4, "tags": None}]),
    conn: sqlite3.Connection = Depends(get_db),
    current_user: Optional[CurrentUser] = Depends(resolve_user),
) -> Envelope[IdData]:
    """Update the fields present in the body; ``null`` clears a field."""
    return await EntryService.update_entry(conn, current_user, entry_id, payload)


@router.delete("/{entry_id}", response_model=Ack)
async def delete_entry(
    entry_id: str,
    conn: sqlite3.Connection = Depends(get_db),
    current_user: Optional[CurrentUser] = Depends(resolve_user),
) -> Ack:
    return await EntryService.delete_entry(conn, current_user, entry_id)
