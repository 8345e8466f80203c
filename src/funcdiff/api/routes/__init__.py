"""API route registration for funcdiff."""

from fastapi import APIRouter

from . import analyze, meta

router = APIRouter()
router.include_router(meta.router)
router.include_router(analyze.router)

__all__ = ["router"]
