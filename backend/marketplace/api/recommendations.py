"""Recommendation API endpoints: personalized, similar, trending and feed."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError

from marketplace.dependencies.auth import require_user_api
from marketplace.dependencies.catalog import get_catalog
from marketplace.models.user import User
from marketplace.schemas.recommendation import RecommendationRead, ScoredRecommendation
from marketplace.services.catalog_repository import CatalogRepository
from marketplace.services import recommendation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


async def _with_bot_cards(
    repo: CatalogRepository,
    recommendations: list[ScoredRecommendation],
) -> list[RecommendationRead]:
    """Attach bot details to every recommendation with a single batched lookup."""
    cards = await repo.get_bot_cards(r.bot_id for r in recommendations)
    return [
        RecommendationRead(**rec.model_dump(), bot=cards.get(rec.bot_id))
        for rec in recommendations
    ]


@router.get("/user", response_model=list[RecommendationRead])
async def user_recommendations(
    user: User = Depends(require_user_api),
    repo: CatalogRepository = Depends(get_catalog),
    limit: int = Query(recommendation_service.DEFAULT_USER_COUNT, ge=1, le=50),
):
    """Personalized recommendations for the logged-in user."""
    try:
        recs = await recommendation_service.rank(repo, user.id, count=limit)
        return await _with_bot_cards(repo, recs)
    except SQLAlchemyError:
        logger.exception("Failed to rank recommendations for user %s", user.id)
        raise HTTPException(status_code=500, detail="Failed to fetch recommendations")


@router.get("/similar/{bot_id}", response_model=list[RecommendationRead])
async def similar_recommendations(
    bot_id: str,
    repo: CatalogRepository = Depends(get_catalog),
    limit: int = Query(recommendation_service.DEFAULT_SIMILAR_COUNT, ge=1, le=50),
):
    """Bots resembling the given bot (same category)."""
    try:
        recs = await recommendation_service.similar_bots(repo, bot_id, count=limit)
        return await _with_bot_cards(repo, recs)
    except SQLAlchemyError:
        logger.exception("Failed to rank bots similar to %s", bot_id)
        raise HTTPException(status_code=500, detail="Failed to fetch similar bots")


@router.get("/trending", response_model=list[RecommendationRead])
async def trending_recommendations(
    repo: CatalogRepository = Depends(get_catalog),
    limit: int = Query(recommendation_service.DEFAULT_TRENDING_COUNT, ge=1, le=50),
):
    """Bots with the most purchases this week."""
    try:
        recs = await recommendation_service.trending(repo, count=limit)
        return await _with_bot_cards(repo, recs)
    except SQLAlchemyError:
        logger.exception("Failed to fetch trending bots")
        raise HTTPException(status_code=500, detail="Failed to fetch trending recommendations")


@router.get("/feed", response_model=list[RecommendationRead])
async def personalized_feed(
    user: User = Depends(require_user_api),
    repo: CatalogRepository = Depends(get_catalog),
):
    """Home page feed mixing personalized and trending bots."""
    try:
        recs = await recommendation_service.personalized_feed(repo, user.id)
        return await _with_bot_cards(repo, recs)
    except SQLAlchemyError:
        logger.exception("Failed to build feed for user %s", user.id)
        raise HTTPException(status_code=500, detail="Failed to fetch feed")
