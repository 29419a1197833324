"""
Information endpoint for API v1.

Returns the service name and version, and the id of the caller when
the request carries a valid token.  It is publicly accessible and is
handy for checking that a token is accepted.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from mood_journal_api.app.core.config import settings
from mood_journal_api.app.core.security import resolve_user
from mood_journal_api.app.schemas.user import CurrentUser

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
async def get_info(current_user: Optional[CurrentUser] = Depends(resolve_user)) -> Dict[str, Any]:
    return {
        "name": settings.project_name,
        "version": settings.api_version,
        "userId": current_user.id if current_user else None,
    }
