"""Interaction tracking endpoint: browsing events that feed behavioral scoring."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from marketplace.dependencies.auth import ensure_csrf_token, get_current_user, validate_csrf_token
from marketplace.dependencies.catalog import get_catalog
from marketplace.models.user import User
from marketplace.schemas.interaction import InteractionCreate
from marketplace.services.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interactions", tags=["interactions"])


def _check_csrf(request: Request):
    """Validate CSRF token from the X-CSRF-Token header."""
    token = request.headers.get("X-CSRF-Token", "")
    if not validate_csrf_token(request, token):
        raise HTTPException(status_code=403, detail="Invalid CSRF token")


@router.get("/csrf-token")
async def csrf_token(request: Request):
    """Token the web client echoes back in X-CSRF-Token when posting events."""
    return {"csrf_token": ensure_csrf_token(request)}


@router.post("", status_code=204)
async def record_interaction(
    request: Request,
    payload: InteractionCreate,
    user: User | None = Depends(get_current_user),
    repo: CatalogRepository = Depends(get_catalog),
):
    """Record a view/click/hover/scroll/purchase/review event. Returns 204.

    Anonymous visitors, and sessions whose user no longer exists, are
    accepted and ignored so tracking never breaks a page.
    """
    if user is None:
        return Response(status_code=204)

    _check_csrf(request)

    bot = await repo.get_bot(payload.bot_id)
    if bot is None:
        raise HTTPException(status_code=404, detail="Bot not found")

    if payload.interaction_type == "purchase" and not await repo.has_purchased(user.id, payload.bot_id):
        logger.info("Ignoring purchase event for unpurchased bot %s (user %s)", payload.bot_id, user.id)
        return Response(status_code=204)

    await repo.record_interaction(
        user.id,
        payload.bot_id,
        payload.interaction_type,
        duration_ms=payload.duration_ms,
    )
    return Response(status_code=204)
