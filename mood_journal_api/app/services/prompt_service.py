"""
Service layer for journaling prompts.

A prompt is visible to a user when the user owns it or when it has no
owner at all (a global prompt).  Only the owner can change a prompt;
global prompts are read-only here.  Prompts are never deleted, they
are switched off with ``is_active = False`` instead.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from ..core.db import format_timestamp, new_id, utcnow
from ..core.query import and_, desc, eq, or_
from ..core.security import require_user
from ..schemas.common import Envelope, IdData, parse_input
from ..schemas.prompt import (
    PromptCreate,
    PromptData,
    PromptList,
    PromptListQuery,
    PromptRead,
    PromptUpdate,
)
from ..schemas.user import CurrentUser
from .scoped_records import ScopedRecords


logger = logging.getLogger(__name__)


prompts = ScopedRecords(
    table="mood_prompts",
    columns=(
        "id",
        "user_id",
        "title",
        "prompt_text",
        "category",
        "is_system",
        "is_active",
        "created_at",
        "updated_at",
    ),
    patchable=("title", "prompt_text", "category", "is_active"),
    not_found_message="Prompt not found.",
)


class PromptService:
    """Service class for creating, editing and listing prompts."""

    @classmethod
    async def create_prompt(
        cls,
        conn: sqlite3.Connection,
        user: Optional[CurrentUser],
        data: Union[PromptCreate, Mapping[str, Any]],
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = new_id,
    ) -> Envelope[PromptData]:
        """Create a prompt owned by the caller.

        User prompts are never system prompts, whatever the payload says.
        """
        user = require_user(user)
        data = parse_input(PromptCreate, data)
        created_at = format_timestamp(clock())
        record = {
            "id": id_factory(),
            "user_id": user.id,
            "title": data.title,
            "prompt_text": data.prompt_text,
            "category": data.category,
            "is_system": False,
            "is_active": data.is_active,
            "created_at": created_at,
            "updated_at": created_at,
        }
        prompts.insert(conn, record)
        logger.info("Created prompt %s for user %s", record["id"], user.id)
        return Envelope[PromptData](data=PromptData(prompt=PromptRead.model_validate(record)))

    @classmethod
    async def update_prompt(
        cls,
        conn: sqlite3.Connection,
        user: Optional[CurrentUser],
        prompt_id: str,
        data: Union[PromptUpdate, Mapping[str, Any]],
        clock: Callable[[], datetime] = utcnow,
    ) -> Envelope[IdData]:
        """Apply a sparse update to one of the caller's own prompts."""
        user = require_user(user)
        data = parse_input(PromptUpdate, data)
        changes = data.to_patch()
        prompts.patch(conn, prompt_id, user.id, changes, now=clock())
        logger.info("Updated prompt %s (%s)", prompt_id, ", ".join(sorted(changes)) or "no fields")
        return Envelope[IdData](data=IdData(id=prompt_id))

    @classmethod
    async def list_prompts(
        cls,
        conn: sqlite3.Connection,
        user: Optional[CurrentUser],
        include_inactive: bool = False,
    ) -> Envelope[PromptList]:
        """List the caller's prompts and the global ones, newest first.

        Inactive prompts are skipped unless ``include_inactive`` is set.
        """
        user = require_user(user)
        query = parse_input(PromptListQuery, {"include_inactive": include_inactive})
        visible = or_(prompts.owned_by(user.id), eq(prompts.owner_column, None))
        where = visible if query.include_inactive else and_(eq("is_active", True), visible)
        rows = prompts.select(conn, where, order_by=(desc("created_at"),))
        items = [PromptRead.model_validate(row) for row in rows]
        return Envelope[PromptList](data=PromptList(items=items, total=len(items)))
