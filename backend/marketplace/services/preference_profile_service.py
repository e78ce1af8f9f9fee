"""Preference profile service: derives a user's affinities from purchase, review and browsing history."""

import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Iterable

from marketplace.schemas.recommendation import (
    DEFAULT_AVERAGE_PRICE,
    DEFAULT_MAX_PRICE,
    BotEngagement,
    ComplexityLevel,
    InteractionEvent,
    PurchaseRecord,
    ReviewRecord,
    UserPreferenceProfile,
)

logger = logging.getLogger(__name__)

# Category affinity increments
PURCHASE_AFFINITY = 1.0
HIGH_RATING_AFFINITY = 0.5
HIGH_RATING_THRESHOLD = 4

TOP_FEATURE_COUNT = 5
RECENT_ACTIVITY_WINDOW = timedelta(hours=24)


def _top_features(purchases: list[PurchaseRecord]) -> list[str]:
    """Most frequent features across purchases, ties kept in first-seen order."""
    counts = Counter()
    for purchase in purchases:
        # one vote per bot, even if its listing repeats a feature
        counts.update(dict.fromkeys(purchase.features).keys())
    # Counter preserves insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [feature for feature, _ in ranked[:TOP_FEATURE_COUNT]]


def _complexity_level(purchases: list[PurchaseRecord]) -> ComplexityLevel:
    if not purchases:
        return ComplexityLevel.INTERMEDIATE
    mean = sum(p.complexity for p in purchases) / len(purchases)
    level = int(mean + 0.5)
    return ComplexityLevel(max(ComplexityLevel.BEGINNER, min(ComplexityLevel.ADVANCED, level)))


def _engagement(interactions: Iterable[InteractionEvent], now: datetime) -> dict[str, BotEngagement]:
    """Summarize interaction events per bot: view time, count, types, recent activity."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = now - RECENT_ACTIVITY_WINDOW
    totals: dict[str, dict] = {}

    for event in interactions:
        entry = totals.setdefault(
            event.bot_id,
            {"time_spent_ms": 0, "interaction_count": 0, "interaction_types": [], "recent_count": 0},
        )
        entry["time_spent_ms"] += event.duration_ms
        entry["interaction_count"] += 1
        if event.interaction_type not in entry["interaction_types"]:
            entry["interaction_types"].append(event.interaction_type)
        created_at = event.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        if created_at >= cutoff:
            entry["recent_count"] += 1

    return {bot_id: BotEngagement(**entry) for bot_id, entry in totals.items()}


def profile_from_history(
    purchases: Iterable[PurchaseRecord],
    reviews: Iterable[ReviewRecord],
    interactions: Iterable[InteractionEvent] = (),
    now: datetime | None = None,
) -> UserPreferenceProfile:
    """Build a preference profile from already-loaded history rows.

    A purchase adds 1 to its category's affinity and a review rated 4 or
    higher adds 0.5; both apply when a user bought and rated the same bot.
    With no purchases the price fields fall back to 50 (average) and 100
    (maximum).
    """
    purchases = list(purchases)
    now = now or datetime.now(timezone.utc)

    affinity: dict[str, float] = {}
    for purchase in purchases:
        affinity[purchase.category_id] = affinity.get(purchase.category_id, 0.0) + PURCHASE_AFFINITY
    for review in reviews:
        if review.rating >= HIGH_RATING_THRESHOLD:
            affinity[review.category_id] = affinity.get(review.category_id, 0.0) + HIGH_RATING_AFFINITY

    prices = [p.price for p in purchases]
    average_price = sum(prices) / len(prices) if prices else DEFAULT_AVERAGE_PRICE
    max_price_seen = max(prices) if prices else DEFAULT_MAX_PRICE

    return UserPreferenceProfile(
        category_affinity=affinity,
        average_price=average_price,
        max_price_seen=max_price_seen,
        preferred_features=_top_features(purchases),
        complexity_level=_complexity_level(purchases),
        engagement=_engagement(interactions, now),
    )


async def build_profile(repo, user_id: str, now: datetime | None = None) -> UserPreferenceProfile:
    """Load a user's history through the catalog repository and build their profile."""
    purchases = await repo.get_purchases(user_id)
    reviews = await repo.get_reviews(user_id)
    interactions = await repo.get_interactions(user_id)

    profile = profile_from_history(purchases, reviews, interactions, now=now)
    logger.debug(
        "Built profile for user %s: %d purchases, %d reviews, %d categories",
        user_id, len(purchases), len(reviews), len(profile.category_affinity),
    )
    return profile
