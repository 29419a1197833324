"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
When new domains are introduced, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import entries, info, prompts

router = APIRouter()

router.include_router(entries.router, prefix="/entries", tags=["entries"])
router.include_router(prompts.router, prefix="/prompts", tags=["prompts"])
router.include_router(info.router, prefix="/info", tags=["info"])
