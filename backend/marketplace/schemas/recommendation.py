"""Pydantic schemas for preference profiles and scored recommendations."""

from datetime import datetime
from decimal import Decimal
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from marketplace.schemas.bot import BotCard

# Lower bound of the inferred price range, as a fraction of the average purchase price
PRICE_FLOOR_RATIO = 0.5

DEFAULT_AVERAGE_PRICE = 50.0
DEFAULT_MAX_PRICE = 100.0


class ComplexityLevel(IntEnum):
    BEGINNER = 1
    INTERMEDIATE = 2
    ADVANCED = 3


class PurchaseRecord(BaseModel):
    """A completed purchase joined to the purchased bot's attributes."""

    model_config = ConfigDict(from_attributes=True)

    bot_id: str
    category_id: str
    price: float
    features: list[str] = Field(default_factory=list)
    complexity: int = ComplexityLevel.INTERMEDIATE

    @field_validator("price", mode="before")
    @classmethod
    def _decimal_to_float(cls, value):
        if isinstance(value, Decimal):
            return float(value)
        return value

    @field_validator("features", mode="before")
    @classmethod
    def _features_or_empty(cls, value):
        return list(value or [])


class ReviewRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    bot_id: str
    category_id: str
    rating: int = Field(ge=1, le=5)


class InteractionEvent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    bot_id: str
    interaction_type: str
    duration_ms: int = Field(default=0, ge=0)
    created_at: datetime


class BotEngagement(BaseModel):
    """Per-bot summary of a user's interaction events."""

    model_config = ConfigDict(frozen=True)

    time_spent_ms: int = 0
    interaction_count: int = 0
    interaction_types: list[str] = Field(default_factory=list)
    recent_count: int = 0


class UserPreferenceProfile(BaseModel):
    """Per-request summary of a user's category, price and feature affinities.

    Built fresh from purchase, review and interaction rows on every ranking
    call and never persisted.
    """

    model_config = ConfigDict(frozen=True)

    category_affinity: dict[str, float] = Field(default_factory=dict)
    average_price: float = DEFAULT_AVERAGE_PRICE
    max_price_seen: float = DEFAULT_MAX_PRICE
    preferred_features: list[str] = Field(default_factory=list)
    complexity_level: ComplexityLevel = ComplexityLevel.INTERMEDIATE
    engagement: dict[str, BotEngagement] = Field(default_factory=dict)

    @property
    def min_price(self) -> float:
        return self.average_price * PRICE_FLOOR_RATIO

    @property
    def price_range(self) -> tuple[float, float]:
        return self.min_price, self.max_price_seen

    def in_price_range(self, price: float) -> bool:
        low, high = self.price_range
        return low <= price <= high


class ScoredRecommendation(BaseModel):
    """A ranked bot with its 0-100 score and human-readable justification."""

    bot_id: str
    score: float = Field(ge=0, le=100)
    confidence: float = Field(ge=0, le=1)
    reason: str
    tags: list[str] = Field(default_factory=list)


class RecommendationRead(ScoredRecommendation):
    """API output: a scored recommendation with embedded bot details."""

    bot: BotCard | None = None
