"""Bot interaction model: tracks user-bot browsing events."""

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship

from marketplace.models.base import Base, UUIDMixin

INTERACTION_TYPES = ("view", "click", "hover", "scroll", "purchase", "review")


class BotInteraction(UUIDMixin, Base):
    __tablename__ = "bot_interactions"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    bot_id = Column(String(36), ForeignKey("bots.id", ondelete="CASCADE"), nullable=False)
    interaction_type = Column(String(20), nullable=False)  # view, click, hover, scroll, purchase, review
    duration_ms = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="interactions")
    bot = relationship("Bot")

    __table_args__ = (
        Index("idx_bot_interactions_user", "user_id", "created_at"),
        Index("idx_bot_interactions_bot", "bot_id"),
    )
