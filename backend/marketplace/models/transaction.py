"""Transaction model: bot purchases."""

from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship

from marketplace.models.base import Base, UUIDMixin


class Transaction(UUIDMixin, Base):
    __tablename__ = "transactions"

    buyer_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    bot_id = Column(String(36), ForeignKey("bots.id"), nullable=False)
    developer_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), default="pending", nullable=False)  # pending, completed, refunded
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    bot = relationship("Bot")

    __table_args__ = (
        Index("idx_transactions_buyer_status", "buyer_id", "status"),
        Index("idx_transactions_bot_created", "bot_id", "created_at"),
    )
