"""
Pydantic schemas for journaling prompts.

A prompt is a suggested question ("What are you grateful for
today?").  Users create their own prompts; prompts without an owner
are global and visible to everyone.  ``is_system`` marks the global
prompts seeded by the application and cannot be set through the API.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .common import ApiModel


class PromptCreate(ApiModel):
    """Schema for creating a prompt owned by the caller."""

    title: str = Field(..., min_length=1, max_length=120, examples=["Gratitude check-in"])
    prompt_text: str = Field(..., min_length=1, description="The question shown to the user")
    category: Optional[str] = Field(None, min_length=1, max_length=80, examples=["gratitude"])
    is_active: bool = Field(True, strict=True, description="Inactive prompts are hidden from the default listing")


class PromptUpdate(ApiModel):
    """Schema for a sparse prompt update.

    ``category`` may be cleared with ``null``; the other fields can
    only be replaced.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=120)
    prompt_text: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=80)
    is_active: Optional[bool] = Field(None, strict=True)

    @field_validator("title", "prompt_text", "is_active")
    @classmethod
    def not_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("value cannot be null")
        return v

    def to_patch(self) -> Dict[str, Any]:
        """Return the fields explicitly present in the payload."""
        return self.model_dump(exclude_unset=True)


class PromptRead(ApiModel):
    """Schema for reading a prompt."""

    id: str
    user_id: Optional[str] = None
    title: str
    prompt_text: str
    category: Optional[str] = None
    is_system: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PromptListQuery(ApiModel):
    include_inactive: bool = False


class PromptData(ApiModel):
    prompt: PromptRead


class PromptList(ApiModel):
    items: List[PromptRead]
    total: int
