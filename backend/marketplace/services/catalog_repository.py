"""Catalog repository: the purchase, review, interaction and bot reads behind ranking.

Each method issues a single query for its whole id set; callers never loop
per candidate.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable

from sqlalchemy import select, func, and_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from marketplace.models import Bot, BotInteraction, Category, Review, Transaction, User
from marketplace.schemas.bot import BotCard, CandidateBot
from marketplace.schemas.recommendation import InteractionEvent, PurchaseRecord, ReviewRecord

TRENDING_WINDOW_DAYS = 7


class CatalogRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    # --- User history ---

    async def get_purchases(self, user_id: str) -> list[PurchaseRecord]:
        """Completed purchases joined to each bot's category, price and features."""
        result = await self.db.execute(
            select(
                Transaction.bot_id,
                Bot.category_id,
                Bot.price,
                Bot.features,
                Bot.complexity,
            )
            .join(Bot, Transaction.bot_id == Bot.id)
            .where(Transaction.buyer_id == user_id, Transaction.status == "completed")
            .order_by(Transaction.created_at.asc())
        )
        return [PurchaseRecord.model_validate(dict(row)) for row in result.mappings()]

    async def get_reviews(self, user_id: str) -> list[ReviewRecord]:
        result = await self.db.execute(
            select(Review.bot_id, Review.rating, Bot.category_id)
            .join(Bot, Review.bot_id == Bot.id)
            .where(Review.user_id == user_id)
        )
        return [ReviewRecord.model_validate(dict(row)) for row in result.mappings()]

    async def get_interactions(self, user_id: str) -> list[InteractionEvent]:
        result = await self.db.execute(
            select(
                BotInteraction.bot_id,
                BotInteraction.interaction_type,
                BotInteraction.duration_ms,
                BotInteraction.created_at,
            )
            .where(BotInteraction.user_id == user_id)
            .order_by(BotInteraction.created_at.asc())
        )
        return [InteractionEvent.model_validate(dict(row)) for row in result.mappings()]

    async def get_purchased_bot_ids(self, user_id: str) -> set[str]:
        result = await self.db.execute(
            select(Transaction.bot_id)
            .where(Transaction.buyer_id == user_id, Transaction.status == "completed")
            .distinct()
        )
        return set(result.scalars().all())

    async def has_purchased(self, user_id: str, bot_id: str) -> bool:
        result = await self.db.execute(
            select(func.count(Transaction.id)).where(
                Transaction.buyer_id == user_id,
                Transaction.bot_id == bot_id,
                Transaction.status == "completed",
            )
        )
        return (result.scalar() or 0) > 0

    # --- Collaborative filtering inputs ---

    async def get_neighbor_purchases(self, user_id: str, bot_ids: Iterable[str]) -> dict[str, set[str]]:
        """Full purchase sets of every other user who bought any of `bot_ids`."""
        bot_ids = list(bot_ids)
        if not bot_ids:
            return {}

        co_purchase = aliased(Transaction, name="co_purchase")
        co_buyers = (
            select(co_purchase.buyer_id)
            .where(
                co_purchase.bot_id.in_(bot_ids),
                co_purchase.status == "completed",
                co_purchase.buyer_id != user_id,
            )
            .distinct()
        )
        result = await self.db.execute(
            select(Transaction.buyer_id, Transaction.bot_id)
            .where(Transaction.buyer_id.in_(co_buyers), Transaction.status == "completed")
        )

        purchases: dict[str, set[str]] = {}
        for buyer_id, bot_id in result.all():
            purchases.setdefault(buyer_id, set()).add(bot_id)
        return purchases

    async def get_ratings(self, user_ids: Iterable[str]) -> dict[tuple[str, str], int]:
        user_ids = list(user_ids)
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(Review.user_id, Review.bot_id, Review.rating).where(Review.user_id.in_(user_ids))
        )
        return {(user_id, bot_id): rating for user_id, bot_id, rating in result.all()}

    # --- Catalog ---

    async def get_approved_bots(self, exclude_ids: Iterable[str] = ()) -> list[CandidateBot]:
        query = select(Bot).where(Bot.status == "approved")
        exclude_ids = list(exclude_ids)
        if exclude_ids:
            query = query.where(Bot.id.notin_(exclude_ids))
        result = await self.db.execute(query.order_by(Bot.created_at.desc()))
        return [CandidateBot.model_validate(bot) for bot in result.scalars().all()]

    async def get_bot(self, bot_id: str) -> CandidateBot | None:
        result = await self.db.execute(select(Bot).where(Bot.id == bot_id))
        bot = result.scalar_one_or_none()
        return CandidateBot.model_validate(bot) if bot else None

    async def get_bots_in_category(self, category_id: str, exclude_id: str | None = None) -> list[CandidateBot]:
        query = select(Bot).where(Bot.status == "approved", Bot.category_id == category_id)
        if exclude_id:
            query = query.where(Bot.id != exclude_id)
        result = await self.db.execute(query)
        return [CandidateBot.model_validate(bot) for bot in result.scalars().all()]

    async def get_trending_bots(self, limit: int, window_days: int = TRENDING_WINDOW_DAYS) -> list[CandidateBot]:
        """Approved bots ordered by purchases in the window, then lifetime views."""
        since = datetime.now(timezone.utc) - timedelta(days=window_days)
        recent_purchases = func.count(Transaction.id).label("recent_purchases")

        result = await self.db.execute(
            select(Bot, recent_purchases)
            .outerjoin(
                Transaction,
                and_(
                    Transaction.bot_id == Bot.id,
                    Transaction.status == "completed",
                    Transaction.created_at > since,
                ),
            )
            .where(Bot.status == "approved")
            .group_by(Bot.id)
            .order_by(recent_purchases.desc(), Bot.view_count.desc())
            .limit(limit)
        )
        return [CandidateBot.model_validate(bot) for bot, _ in result.all()]

    # --- Interaction tracking ---

    async def record_interaction(
        self,
        user_id: str,
        bot_id: str,
        interaction_type: str,
        duration_ms: int = 0,
    ) -> None:
        """Store an interaction event; views also bump the bot's view counter."""
        self.db.add(
            BotInteraction(
                user_id=user_id,
                bot_id=bot_id,
                interaction_type=interaction_type,
                duration_ms=duration_ms,
            )
        )
        if interaction_type == "view":
            await self.db.execute(
                update(Bot)
                .where(Bot.id == bot_id)
                .values(view_count=Bot.view_count + 1)
                .execution_options(synchronize_session=False)
            )
        await self.db.flush()

    async def get_bot_cards(self, bot_ids: Iterable[str]) -> dict[str, BotCard]:
        """Bot, category and developer details for a whole result set in one query."""
        bot_ids = list(dict.fromkeys(bot_ids))
        if not bot_ids:
            return {}

        result = await self.db.execute(
            select(
                Bot.id,
                Bot.title,
                Bot.price,
                Bot.thumbnail_url,
                Bot.average_rating,
                Bot.download_count,
                Bot.category_id,
                Category.name.label("category_name"),
                Bot.developer_id,
                User.name.label("developer_name"),
            )
            .outerjoin(Category, Bot.category_id == Category.id)
            .outerjoin(User, Bot.developer_id == User.id)
            .where(Bot.id.in_(bot_ids))
        )
        return {row["id"]: BotCard.model_validate(dict(row)) for row in result.mappings()}
