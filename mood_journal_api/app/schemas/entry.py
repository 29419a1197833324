"""
Pydantic schemas for journal entries.

An entry records the mood of one day: an optional 1-10 score, a short
label, free-form tags, an optional title and body, and optionally the
prompt that inspired it.  Every entry belongs to exactly one user.
"""

import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator

from .common import ApiModel


# Largest value SQLite accepts for LIMIT and OFFSET.
SQLITE_MAX_INTEGER = 2 ** 63 - 1

_CALENDAR_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class EntryFields(ApiModel):
    """Editable entry fields shared by the create and update payloads."""

    entry_date: Optional[date] = Field(None, description="Calendar date the entry is about (YYYY-MM-DD)")
    mood_score: Optional[int] = Field(None, ge=1, le=10, strict=True, description="Mood on a 1-10 scale")
    mood_label: Optional[str] = Field(None, min_length=1, max_length=50, examples=["calm"])
    tags: Optional[str] = Field(None, min_length=1, max_length=255, description="Tags in any caller-defined encoding")
    title: Optional[str] = Field(None, min_length=1, max_length=120)
    body: Optional[str] = Field(None, min_length=1)
    prompt_id: Optional[str] = Field(None, min_length=1, description="Identifier of the prompt answered, if any")

    @field_validator("entry_date", mode="before")
    @classmethod
    def calendar_date(cls, v: Any) -> Any:
        """Accept only ``YYYY-MM-DD`` strings (or ``date`` objects from Python callers)."""
        if v is None or (isinstance(v, date) and not isinstance(v, datetime)):
            return v
        if not isinstance(v, str) or not _CALENDAR_DATE.match(v):
            raise ValueError("entryDate must be a calendar date (YYYY-MM-DD)")
        return date.fromisoformat(v)


class EntryCreate(EntryFields):
    """Schema for creating an entry.  ``entry_date`` defaults to now."""


class EntryUpdate(EntryFields):
    """Schema for a sparse entry update.

    Only fields present in the payload are changed.  A field sent as
    ``null`` is cleared; a field left out keeps its stored value.
    ``entry_date`` can be changed but not cleared.
    """

    @field_validator("entry_date")
    @classmethod
    def entry_date_not_null(cls, v: Optional[date]) -> date:
        if v is None:
            raise ValueError("entryDate cannot be null")
        return v

    def to_patch(self) -> Dict[str, Any]:
        """Return the fields explicitly present in the payload."""
        return self.model_dump(exclude_unset=True)


class EntryRead(ApiModel):
    """Schema for reading an entry."""

    id: str
    user_id: str
    entry_date: datetime
    mood_score: Optional[int] = None
    mood_label: Optional[str] = None
    tags: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    prompt_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EntryListQuery(ApiModel):
    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1, le=100)

    @model_validator(mode="after")
    def offset_in_range(self) -> "EntryListQuery":
        if (self.page - 1) * self.page_size > SQLITE_MAX_INTEGER:
            raise ValueError("page is too large")
        return self


class EntryData(ApiModel):
    entry: EntryRead


class EntryPage(ApiModel):
    """One page of the caller's entries plus the size of the whole set."""

    items: List[EntryRead]
    total: int
    page: int
    page_size: int
