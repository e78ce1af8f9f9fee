"""Pydantic schemas for Bot projections used by the recommendation engine."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CandidateBot(BaseModel):
    """Read-only projection of an approved catalog bot."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    title: str = ""
    category_id: str
    price: float = Field(ge=0)
    features: list[str] = Field(default_factory=list)
    complexity: int = Field(default=2, ge=1, le=3)
    average_rating: float = Field(default=0.0, ge=0, le=5)
    download_count: int = Field(default=0, ge=0)
    view_count: int = Field(default=0, ge=0)
    created_at: datetime | None = None

    @field_validator("price", "average_rating", mode="before")
    @classmethod
    def _decimal_to_float(cls, value):
        if value is None:
            return 0.0
        if isinstance(value, (Decimal, str)):
            return float(value)
        return value

    @field_validator("features", mode="before")
    @classmethod
    def _features_or_empty(cls, value):
        return list(value or [])


class BotCard(BaseModel):
    """Bot details attached to each recommendation in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    price: float
    thumbnail_url: str | None = None
    average_rating: float = 0.0
    download_count: int = 0
    category_id: str
    category_name: str | None = None
    developer_id: str
    developer_name: str | None = None

    @field_validator("price", "average_rating", mode="before")
    @classmethod
    def _decimal_to_float(cls, value):
        if value is None:
            return 0.0
        return float(value)
