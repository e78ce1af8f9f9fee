"""Bot model: automation bots listed on the marketplace."""

from sqlalchemy import Column, String, Text, Integer, Numeric, ForeignKey, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from marketplace.models.base import Base, TimestampMixin, UUIDMixin

BOT_STATUSES = ("pending", "approved", "rejected")


class Bot(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "bots"

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    developer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False, index=True)
    thumbnail_url = Column(Text)
    features = Column(JSONB, server_default="[]", nullable=False, default=list)
    status = Column(String(20), default="pending", nullable=False)  # pending, approved, rejected
    complexity = Column(Integer, default=2, nullable=False)  # 1 beginner, 2 intermediate, 3 advanced

    # Counters (maintained by refresh_bot_stats and view tracking)
    view_count = Column(Integer, default=0, nullable=False)
    download_count = Column(Integer, default=0, nullable=False)
    average_rating = Column(Numeric(3, 2), default=0)
    review_count = Column(Integer, default=0, nullable=False)

    # Relationships
    developer = relationship("User", back_populates="bots")
    category = relationship("Category", back_populates="bots")
    reviews = relationship("Review", back_populates="bot")

    __table_args__ = (
        Index("idx_bots_status_category", "status", "category_id"),
        Index("idx_bots_status_views", "status", "view_count"),
    )
