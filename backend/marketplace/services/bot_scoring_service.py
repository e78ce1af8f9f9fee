"""Bot scoring service: collaborative, content, behavioral and trending signals.

Every scorer returns a float in [0, 1]. Combined and similarity scores are on
the 0-100 scale used by ScoredRecommendation.
"""

import math

from marketplace.schemas.bot import CandidateBot
from marketplace.schemas.recommendation import UserPreferenceProfile

# Final score weights (sum to 1.0)
SCORE_WEIGHTS = {
    "collaborative": 0.4,
    "content": 0.3,
    "behavioral": 0.2,
    "trending": 0.1,
}

# Content-based sub-weights
CATEGORY_WEIGHT = 0.3
PRICE_WEIGHT = 0.2
FEATURE_WEIGHT = 0.3
COMPLEXITY_WEIGHT = 0.2

# Behavioral caps
VIEW_TIME_WEIGHT = 0.4
VIEW_TIME_CAP_MS = 5 * 60 * 1000
INTERACTION_COUNT_WEIGHT = 0.3
INTERACTION_COUNT_CAP = 10
INTERACTION_TYPE_WEIGHT = 0.1
RECENT_INTERACTION_WEIGHT = 0.05

# Trending
DOWNLOAD_SATURATION = 1000
POPULARITY_WEIGHT = 0.6
RATING_WEIGHT = 0.4

# Collaborative: implied rating (out of 1) for a purchase with no review
IMPLICIT_PURCHASE_RATING = 0.8

# Similarity sub-ranges (sum to 100)
SAME_CATEGORY_POINTS = 30.0
PRICE_PROXIMITY_POINTS = 20.0
FEATURE_OVERLAP_POINTS = 35.0
RATING_PROXIMITY_POINTS = 15.0
RATING_PROXIMITY_SLOPE = 3.0

# Reason / tag predicates
HIGHLY_RATED_THRESHOLD = 4.5
POPULAR_DOWNLOADS = 100
AFFORDABLE_PRICE = 20


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def content_score(profile: UserPreferenceProfile, bot: CandidateBot) -> float:
    """Match bot attributes against the user's category, price, feature and complexity preferences."""
    score = 0.0

    # Category, weighted by affinity relative to the user's strongest category
    affinity = profile.category_affinity.get(bot.category_id)
    if affinity:
        strongest = max(profile.category_affinity.values())
        score += CATEGORY_WEIGHT * (affinity / strongest)

    if profile.in_price_range(bot.price):
        score += PRICE_WEIGHT

    if bot.features:
        preferred = set(profile.preferred_features)
        matched = sum(1 for f in set(bot.features) if f in preferred)
        score += FEATURE_WEIGHT * matched / len(set(bot.features))

    complexity_match = 1 - abs(bot.complexity - int(profile.complexity_level)) / 3
    score += COMPLEXITY_WEIGHT * complexity_match

    return _clamp(score)


def behavioral_score(profile: UserPreferenceProfile, bot: CandidateBot) -> float:
    """Score how much the user has engaged with this bot's page."""
    engagement = profile.engagement.get(bot.id)
    if engagement is None:
        return 0.0

    score = VIEW_TIME_WEIGHT * min(1.0, engagement.time_spent_ms / VIEW_TIME_CAP_MS)
    score += INTERACTION_COUNT_WEIGHT * min(1.0, engagement.interaction_count / INTERACTION_COUNT_CAP)
    score += INTERACTION_TYPE_WEIGHT * len(engagement.interaction_types)
    score += RECENT_INTERACTION_WEIGHT * engagement.recent_count

    return _clamp(score)


def trending_score(bot: CandidateBot) -> float:
    """Popularity (downloads, saturating at 1000) blended with average rating."""
    popularity = min(1.0, bot.download_count / DOWNLOAD_SATURATION)
    rating = bot.average_rating / 5
    return _clamp(POPULARITY_WEIGHT * popularity + RATING_WEIGHT * rating)


class Neighborhood:
    """Users who share purchases with the target user, and how they rated bots.

    Similarity is cosine over binary purchase vectors:
    |A & B| / sqrt(|A| * |B|). A neighbor's rating for a bot is their review
    rating / 5, or IMPLICIT_PURCHASE_RATING for an unreviewed purchase.
    """

    def __init__(
        self,
        user_purchases: set[str],
        neighbor_purchases: dict[str, set[str]],
        neighbor_ratings: dict[tuple[str, str], int] | None = None,
    ):
        self.similarities: dict[str, float] = {}
        self.ratings: dict[str, dict[str, float]] = {}
        neighbor_ratings = neighbor_ratings or {}

        for user_id, purchased in neighbor_purchases.items():
            shared = len(user_purchases & purchased)
            if not shared:
                continue
            self.similarities[user_id] = shared / math.sqrt(len(user_purchases) * len(purchased))
            self.ratings[user_id] = {bot_id: IMPLICIT_PURCHASE_RATING for bot_id in purchased}

        for (user_id, bot_id), rating in neighbor_ratings.items():
            if user_id in self.ratings:
                self.ratings[user_id][bot_id] = rating / 5

    @property
    def is_empty(self) -> bool:
        return not self.similarities

    def __len__(self) -> int:
        return len(self.similarities)


def collaborative_score(neighborhood: Neighborhood, bot: CandidateBot) -> float | None:
    """Similarity-weighted average of neighbors' ratings for the bot.

    None when no neighbor bought or rated it, so the caller can leave the
    signal out instead of scoring it as zero.
    """
    weighted = 0.0
    total_similarity = 0.0
    for user_id, similarity in neighborhood.similarities.items():
        rating = neighborhood.ratings[user_id].get(bot.id)
        if rating is not None:
            weighted += similarity * rating
            total_similarity += similarity
    return _clamp(weighted / total_similarity) if total_similarity else None


def combine_scores(components: dict[str, float], use_collaborative: bool = True) -> float:
    """Weighted sum of component scores on the 0-100 scale.

    Without collaborative evidence its weight is dropped and the remaining
    weights are renormalized to sum to 1.
    """
    weights = dict(SCORE_WEIGHTS)
    if not use_collaborative:
        weights.pop("collaborative")
    total_weight = sum(weights.values())
    combined = sum(components.get(name, 0.0) * weight for name, weight in weights.items())
    return round(_clamp(combined / total_weight) * 100, 2)


def similarity_score(reference: CandidateBot, other: CandidateBot) -> float:
    """Score how closely `other` resembles `reference` (0-100)."""
    score = SAME_CATEGORY_POINTS if reference.category_id == other.category_id else 0.0

    highest_price = max(reference.price, other.price)
    if highest_price > 0:
        price_gap = abs(reference.price - other.price) / highest_price
        score += max(0.0, PRICE_PROXIMITY_POINTS - price_gap * PRICE_PROXIMITY_POINTS)
    else:
        score += PRICE_PROXIMITY_POINTS

    ref_features, other_features = set(reference.features), set(other.features)
    union = ref_features | other_features
    if union:
        score += FEATURE_OVERLAP_POINTS * len(ref_features & other_features) / len(union)

    rating_gap = abs(reference.average_rating - other.average_rating)
    score += max(0.0, RATING_PROXIMITY_POINTS - rating_gap * RATING_PROXIMITY_SLOPE)

    return round(min(score, 100.0), 2)


def recommendation_reason(profile: UserPreferenceProfile, bot: CandidateBot) -> str:
    clauses = []
    if bot.category_id in profile.category_affinity:
        clauses.append("matches your interests")
    if profile.in_price_range(bot.price):
        clauses.append("fits your price range")
    if bot.average_rating >= HIGHLY_RATED_THRESHOLD:
        clauses.append("is highly rated")
    if bot.download_count > POPULAR_DOWNLOADS:
        clauses.append("is a popular choice")

    if not clauses:
        return "Recommended for you"
    if len(clauses) == 1:
        return f"Recommended because it {clauses[0]}"
    return f"Recommended because it {', '.join(clauses[:-1])} and {clauses[-1]}"


def recommendation_tags(profile: UserPreferenceProfile, bot: CandidateBot) -> list[str]:
    tags = []
    if bot.category_id in profile.category_affinity:
        tags.append("preferred-category")
    if profile.in_price_range(bot.price):
        tags.append("in-price-range")
    if bot.average_rating >= HIGHLY_RATED_THRESHOLD:
        tags.append("highly-rated")
    if bot.download_count > POPULAR_DOWNLOADS:
        tags.append("popular")
    if bot.price < AFFORDABLE_PRICE:
        tags.append("affordable")
    return tags
