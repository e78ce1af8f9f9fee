"""Shared fixtures: an in-memory catalog repository and bot factories."""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from marketplace.schemas.bot import BotCard, CandidateBot
from marketplace.schemas.recommendation import InteractionEvent, PurchaseRecord, ReviewRecord

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_bot(bot_id: str, **overrides) -> CandidateBot:
    data = {
        "id": bot_id,
        "title": f"Bot {bot_id}",
        "category_id": "cat1",
        "price": 25.0,
        "features": [],
        "complexity": 2,
        "average_rating": 0.0,
        "download_count": 0,
        "view_count": 0,
    }
    data.update(overrides)
    return CandidateBot(**data)


class FakeCatalogRepository:
    """In-memory stand-in for CatalogRepository.

    `bots` are approved listings; `hidden_bots` exist (and can be owned) but
    are never candidates. `purchases` maps user id to purchased bot ids,
    `reviews` maps user id to (bot id, rating) pairs.
    """

    def __init__(
        self,
        bots=(),
        hidden_bots=(),
        purchases=None,
        reviews=None,
        interactions=None,
        trending_order=None,
        fail_on=(),
    ):
        self.approved = {bot.id: bot for bot in bots}
        self.catalog = {**{bot.id: bot for bot in hidden_bots}, **self.approved}
        self.purchases = purchases or {}
        self.reviews = reviews or {}
        self.interactions = interactions or {}
        self.trending_order = trending_order
        self.fail_on = set(fail_on)
        self.recorded = []
        self.calls = []

    def _call(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise OperationalError("SELECT bots", {}, Exception("connection refused"))

    async def get_purchases(self, user_id):
        self._call("get_purchases")
        records = []
        for bot_id in self.purchases.get(user_id, []):
            bot = self.catalog[bot_id]
            records.append(PurchaseRecord(
                bot_id=bot.id,
                category_id=bot.category_id,
                price=bot.price,
                features=bot.features,
                complexity=bot.complexity,
            ))
        return records

    async def get_reviews(self, user_id):
        self._call("get_reviews")
        return [
            ReviewRecord(bot_id=bot_id, category_id=self.catalog[bot_id].category_id, rating=rating)
            for bot_id, rating in self.reviews.get(user_id, [])
        ]

    async def get_interactions(self, user_id):
        self._call("get_interactions")
        return list(self.interactions.get(user_id, []))

    async def get_purchased_bot_ids(self, user_id):
        self._call("get_purchased_bot_ids")
        return set(self.purchases.get(user_id, []))

    async def has_purchased(self, user_id, bot_id):
        self._call("has_purchased")
        return bot_id in self.purchases.get(user_id, [])

    async def get_neighbor_purchases(self, user_id, bot_ids):
        self._call("get_neighbor_purchases")
        bot_ids = set(bot_ids)
        return {
            other: set(owned)
            for other, owned in self.purchases.items()
            if other != user_id and bot_ids & set(owned)
        }

    async def get_ratings(self, user_ids):
        self._call("get_ratings")
        return {
            (user_id, bot_id): rating
            for user_id in user_ids
            for bot_id, rating in self.reviews.get(user_id, [])
        }

    async def get_approved_bots(self, exclude_ids=()):
        self._call("get_approved_bots")
        exclude_ids = set(exclude_ids)
        return [bot for bot in self.approved.values() if bot.id not in exclude_ids]

    async def get_bot(self, bot_id):
        self._call("get_bot")
        return self.catalog.get(bot_id)

    async def get_bots_in_category(self, category_id, exclude_id=None):
        self._call("get_bots_in_category")
        return [
            bot for bot in self.approved.values()
            if bot.category_id == category_id and bot.id != exclude_id
        ]

    async def get_trending_bots(self, limit, window_days=7):
        self._call("get_trending_bots")
        if self.trending_order is not None:
            bots = [self.approved[bot_id] for bot_id in self.trending_order]
        else:
            bots = sorted(self.approved.values(), key=lambda b: b.download_count, reverse=True)
        return bots[:limit]

    async def record_interaction(self, user_id, bot_id, interaction_type, duration_ms=0):
        self._call("record_interaction")
        self.recorded.append((user_id, bot_id, interaction_type, duration_ms))

    async def get_bot_cards(self, bot_ids):
        self._call("get_bot_cards")
        cards = {}
        for bot_id in bot_ids:
            bot = self.catalog[bot_id]
            cards[bot_id] = BotCard(
                id=bot.id,
                title=bot.title,
                price=bot.price,
                average_rating=bot.average_rating,
                download_count=bot.download_count,
                category_id=bot.category_id,
                category_name=f"Category {bot.category_id}",
                developer_id="dev1",
                developer_name="Dev One",
            )
        return cards


def view_event(bot_id: str, duration_ms: int = 0, created_at: datetime = NOW, kind: str = "view") -> InteractionEvent:
    return InteractionEvent(bot_id=bot_id, interaction_type=kind, duration_ms=duration_ms, created_at=created_at)


@pytest.fixture
def cat1_buyer_repo():
    """A user who bought two cat1 auto-reply bots, plus a matching and a dissimilar candidate."""
    owned = [
        make_bot("owned1", price=30.0, features=["auto-reply"]),
        make_bot("owned2", price=30.0, features=["auto-reply"]),
    ]
    candidates = [
        make_bot(
            "match",
            category_id="cat1",
            price=29.99,
            features=["auto-reply", "scheduling"],
            average_rating=4.8,
            download_count=150,
        ),
        make_bot(
            "dissimilar",
            category_id="cat2",
            price=500.0,
            features=["crypto-trading"],
            average_rating=3.0,
            download_count=10,
        ),
    ]
    return FakeCatalogRepository(
        bots=owned + candidates,
        purchases={"u1": ["owned1", "owned2"]},
    )
