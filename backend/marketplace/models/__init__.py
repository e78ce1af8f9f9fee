"""SQLAlchemy models. Importing the package registers every mapper."""

from marketplace.models.base import Base
from marketplace.models.user import User
from marketplace.models.category import Category
from marketplace.models.bot import Bot
from marketplace.models.transaction import Transaction
from marketplace.models.review import Review
from marketplace.models.bot_interaction import BotInteraction

__all__ = [
    "Base",
    "User",
    "Category",
    "Bot",
    "Transaction",
    "Review",
    "BotInteraction",
]
