"""Pydantic schemas package."""

from marketplace.schemas.bot import (
    BotCard,
    CandidateBot,
)
from marketplace.schemas.recommendation import (
    BotEngagement,
    ComplexityLevel,
    InteractionEvent,
    PurchaseRecord,
    RecommendationRead,
    ReviewRecord,
    ScoredRecommendation,
    UserPreferenceProfile,
)
from marketplace.schemas.interaction import (
    InteractionCreate,
    InteractionType,
)

__all__ = [
    # Bot
    "BotCard",
    "CandidateBot",
    # Recommendation
    "BotEngagement",
    "ComplexityLevel",
    "InteractionEvent",
    "PurchaseRecord",
    "RecommendationRead",
    "ReviewRecord",
    "ScoredRecommendation",
    "UserPreferenceProfile",
    # Interaction
    "InteractionCreate",
    "InteractionType",
]
