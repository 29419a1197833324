"""
Pydantic model for the authenticated caller.

The API does not manage user accounts itself.  Identities come from
signed bearer tokens whose ``sub`` claim is the user id; this model is
what the identity resolver hands to the services.
"""

from pydantic import BaseModel, Field


class CurrentUser(BaseModel):
    """Identity of the caller of a service operation."""

    id: str = Field(..., min_length=1, examples=["6f1c8a52-2b53-4a4e-9a57-1a7c0f3e5b21"])
