"""Bot category model."""

from sqlalchemy import Column, String, Text, Integer
from sqlalchemy.orm import relationship

from marketplace.models.base import Base, UUIDMixin


class Category(UUIDMixin, Base):
    __tablename__ = "categories"

    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)
    icon = Column(String(16))
    bot_count = Column(Integer, default=0, nullable=False)  # approved bots, refreshed by refresh_bot_stats

    bots = relationship("Bot", back_populates="category")
