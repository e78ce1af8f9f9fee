"""Review model: 1-5 star bot ratings."""

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship

from marketplace.models.base import Base, UUIDMixin


class Review(UUIDMixin, Base):
    __tablename__ = "reviews"

    bot_id = Column(String(36), ForeignKey("bots.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    bot = relationship("Bot", back_populates="reviews")
    user = relationship("User", back_populates="reviews")

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )
