"""Recommendation service: personalized, similar-bot, trending and feed rankings.

All functions take a catalog repository (see CatalogRepository) as their first
argument and compute a fresh ranking per call. Repository errors propagate to
the caller unchanged.
"""

import logging
from datetime import datetime

from marketplace.schemas.bot import CandidateBot
from marketplace.schemas.recommendation import ScoredRecommendation, UserPreferenceProfile
from marketplace.services.bot_scoring_service import (
    HIGHLY_RATED_THRESHOLD,
    POPULAR_DOWNLOADS,
    Neighborhood,
    behavioral_score,
    collaborative_score,
    combine_scores,
    content_score,
    recommendation_reason,
    recommendation_tags,
    similarity_score,
    trending_score,
)
from marketplace.services.preference_profile_service import build_profile

logger = logging.getLogger(__name__)

MIN_RECOMMENDATION_SCORE = 30  # results must score strictly above this

DEFAULT_USER_COUNT = 10
DEFAULT_SIMILAR_COUNT = 6
DEFAULT_TRENDING_COUNT = 15

FEED_PERSONALIZED_COUNT = 6
FEED_TRENDING_COUNT = 4


def _recommendation(bot_id: str, score: float, reason: str, tags: list[str]) -> ScoredRecommendation:
    return ScoredRecommendation(
        bot_id=bot_id,
        score=score,
        confidence=round(min(score / 100, 1.0), 4),
        reason=reason,
        tags=tags,
    )


def _by_score(recommendations: list[ScoredRecommendation]) -> list[ScoredRecommendation]:
    return sorted(recommendations, key=lambda r: r.score, reverse=True)


async def build_neighborhood(repo, user_id: str, purchased_ids: set[str]) -> Neighborhood:
    """Load co-purchasers of the user's bots and their ratings."""
    neighbor_purchases = await repo.get_neighbor_purchases(user_id, purchased_ids)
    neighbor_ratings = await repo.get_ratings(neighbor_purchases.keys())
    return Neighborhood(purchased_ids, neighbor_purchases, neighbor_ratings)


def score_candidate(
    profile: UserPreferenceProfile,
    neighborhood: Neighborhood,
    bot: CandidateBot,
) -> ScoredRecommendation:
    collaborative = collaborative_score(neighborhood, bot)
    components = {
        "collaborative": collaborative or 0.0,
        "content": content_score(profile, bot),
        "behavioral": behavioral_score(profile, bot),
        "trending": trending_score(bot),
    }
    score = combine_scores(components, use_collaborative=collaborative is not None)
    return _recommendation(
        bot.id,
        score,
        recommendation_reason(profile, bot),
        recommendation_tags(profile, bot),
    )


async def _rank_with_owned(
    repo,
    user_id: str,
    count: int,
    now: datetime | None,
) -> tuple[list[ScoredRecommendation], set[str]]:
    profile = await build_profile(repo, user_id, now=now)
    purchased_ids = await repo.get_purchased_bot_ids(user_id)
    neighborhood = await build_neighborhood(repo, user_id, purchased_ids)
    candidates = await repo.get_approved_bots(exclude_ids=purchased_ids)

    scored = [
        score_candidate(profile, neighborhood, bot)
        for bot in candidates
        if bot.id not in purchased_ids
    ]
    kept = [r for r in scored if r.score > MIN_RECOMMENDATION_SCORE]

    logger.debug(
        "Ranked %d candidates for user %s (%d neighbors), %d above threshold",
        len(scored), user_id, len(neighborhood), len(kept),
    )
    return _by_score(kept)[:count], purchased_ids


async def rank(
    repo,
    user_id: str,
    count: int = DEFAULT_USER_COUNT,
    now: datetime | None = None,
) -> list[ScoredRecommendation]:
    """Personalized recommendations for a user, best first.

    Candidates are approved bots the user has not bought. Scores at or
    below MIN_RECOMMENDATION_SCORE are dropped.
    """
    recommendations, _ = await _rank_with_owned(repo, user_id, count, now)
    return recommendations


async def similar_bots(
    repo,
    reference_bot_id: str,
    count: int = DEFAULT_SIMILAR_COUNT,
) -> list[ScoredRecommendation]:
    """Approved bots in the reference bot's category, ranked by resemblance to it."""
    reference = await repo.get_bot(reference_bot_id)
    if reference is None:
        return []

    candidates = await repo.get_bots_in_category(reference.category_id, exclude_id=reference.id)
    recommendations = [
        _recommendation(
            bot.id,
            similarity_score(reference, bot),
            f"Similar to {reference.title}",
            ["similar", "same-category"],
        )
        for bot in candidates
        if bot.id != reference.id and bot.category_id == reference.category_id
    ]
    return _by_score(recommendations)[:count]


async def trending(repo, count: int = DEFAULT_TRENDING_COUNT) -> list[ScoredRecommendation]:
    """Bots with the most purchases this week, in trending-query order."""
    bots = await repo.get_trending_bots(limit=count)

    recommendations = []
    for bot in bots[:count]:
        tags = ["trending"]
        if bot.download_count > POPULAR_DOWNLOADS:
            tags.append("popular")
        if bot.average_rating >= HIGHLY_RATED_THRESHOLD:
            tags.append("highly-rated")
        score = round(trending_score(bot) * 100, 2)
        recommendations.append(_recommendation(bot.id, score, "Trending this week", tags))
    return recommendations


async def personalized_feed(repo, user_id: str, now: datetime | None = None) -> list[ScoredRecommendation]:
    """Home page feed: top personalized picks topped up with trending bots.

    Each bot appears at most once, and trending bots the user already owns
    are skipped.
    """
    personalized, owned = await _rank_with_owned(repo, user_id, FEED_PERSONALIZED_COUNT, now)
    trending_recs = await trending(repo, count=DEFAULT_TRENDING_COUNT)

    seen: set[str] = set()
    feed: list[ScoredRecommendation] = []
    for rec in personalized:
        if rec.bot_id not in seen:
            seen.add(rec.bot_id)
            feed.append(rec)

    added = 0
    for rec in trending_recs:
        if added >= FEED_TRENDING_COUNT:
            break
        if rec.bot_id in seen or rec.bot_id in owned:
            continue
        seen.add(rec.bot_id)
        feed.append(rec)
        added += 1

    return _by_score(feed)
