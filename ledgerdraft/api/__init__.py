"""API router aggregator."""

from fastapi import APIRouter

from .drafts import router as drafts_router

api_router = APIRouter()
api_router.include_router(drafts_router, prefix="/api", tags=["drafts"])

__all__ = ["api_router"]
