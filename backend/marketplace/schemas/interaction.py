"""Pydantic schemas for interaction tracking."""

from typing import Literal

from pydantic import BaseModel, Field

InteractionType = Literal["view", "click", "hover", "scroll", "purchase", "review"]


class InteractionCreate(BaseModel):
    """Client-reported browsing event."""

    bot_id: str = Field(min_length=1, max_length=36)
    interaction_type: InteractionType
    duration_ms: int = Field(default=0, ge=0, le=3_600_000)
