"""
Prompt endpoints for API v1.

Users can create their own prompts, edit them and list them together
with the global prompts.  There is no delete route: a prompt is
retired by setting ``isActive`` to ``false``.
"""

import sqlite3
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from mood_journal_api.app.core.db import get_db
from mood_journal_api.app.core.security import resolve_user
from mood_journal_api.app.schemas.common import Envelope, IdData
from mood_journal_api.app.schemas.prompt import PromptData, PromptList
from mood_journal_api.app.schemas.user import CurrentUser
from mood_journal_api.app.services.prompt_service import PromptService

router = APIRouter()


@router.post("/", response_model=Envelope[PromptData], status_code=status.HTTP_201_CREATED)
async def create_prompt(
    payload: Any = Body(
        None,
        examples=[{"title": "Evening wind-down", "promptText": "What can you let go of tonight?", "category": "reflection"}],
    ),
    conn: sqlite3.Connection = Depends(get_db),
    current_user: Optional[CurrentUser] = Depends(resolve_user),
) -> Envelope[PromptData]:
    return await PromptService.create_prompt(conn, current_user, payload)


@router.get("/", response_model=Envelope[PromptList])
async def list_prompts(
    include_inactive: bool = Query(False, alias="includeInactive"),
    conn: sqlite3.Connection = Depends(get_db),
    current_user: Optional[CurrentUser] = Depends(resolve_user),
) -> Envelope[PromptList]:
    """List the user's prompts and the global prompts, newest first."""
    return await PromptService.list_prompts(conn, current_user, include_inactive=include_inactive)


@router.patch("/{prompt_id}", response_model=Envelope[IdData])
async def update_prompt(
    prompt_id: str,
    payload: Any = Body(None, examples=[{"isActive": False}]),
    conn: sqlite3.Connection = Depends(get_db),
    current_user: Optional[CurrentUser] = Depends(resolve_user),
) -> Envelope[IdData]:
    """Update one of the user's own prompts.

    Global prompts cannot be edited and answer with 404.
    """
    return await PromptService.update_prompt(conn, current_user, prompt_id, payload)
