"""User model: buyers and developers share one table."""

from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from marketplace.models.base import Base, TimestampMixin, UUIDMixin


class User(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    is_developer = Column(Boolean, default=False, nullable=False)

    # Relationships
    bots = relationship("Bot", back_populates="developer")
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan")
    interactions = relationship("BotInteraction", back_populates="user", cascade="all, delete-orphan")
