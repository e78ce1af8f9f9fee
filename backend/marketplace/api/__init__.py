"""API router aggregation."""

from fastapi import APIRouter

from marketplace.api.recommendations import router as recommendations_router
from marketplace.api.interactions import router as interactions_router

router = APIRouter(prefix="/api")

router.include_router(recommendations_router)
router.include_router(interactions_router)
