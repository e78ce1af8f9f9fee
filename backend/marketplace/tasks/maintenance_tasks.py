"""Maintenance tasks: catalog counters and interaction retention."""

import logging
from datetime import datetime, timezone, timedelta

from sqlalchemy import select, func, update, delete

from marketplace.config import get_settings
from marketplace.tasks.celery_app import celery_app
from marketplace.models.base import SyncSessionLocal
from marketplace.models import Bot, BotInteraction, Category, Review, Transaction

logger = logging.getLogger(__name__)


@celery_app.task(name="marketplace.tasks.maintenance_tasks.refresh_bot_stats")
def refresh_bot_stats():
    """Recompute download, rating and review counters for every bot, and per-category bot counts."""
    with SyncSessionLocal() as session:
        try:
            downloads = (
                select(func.count(Transaction.id))
                .where(Transaction.bot_id == Bot.id, Transaction.status == "completed")
                .scalar_subquery()
            )
            review_count = (
                select(func.count(Review.id))
                .where(Review.bot_id == Bot.id)
                .scalar_subquery()
            )
            average_rating = (
                select(func.coalesce(func.round(func.avg(Review.rating), 2), 0))
                .where(Review.bot_id == Bot.id)
                .scalar_subquery()
            )
            bots_updated = session.execute(
                update(Bot)
                .values(
                    download_count=downloads,
                    review_count=review_count,
                    average_rating=average_rating,
                )
                .execution_options(synchronize_session=False)
            ).rowcount

            approved_in_category = (
                select(func.count(Bot.id))
                .where(Bot.category_id == Category.id, Bot.status == "approved")
                .scalar_subquery()
            )
            categories_updated = session.execute(
                update(Category)
                .values(bot_count=approved_in_category)
                .execution_options(synchronize_session=False)
            ).rowcount

            session.commit()
            logger.info("Refreshed stats for %d bots and %d categories", bots_updated, categories_updated)
            return {"bots": bots_updated, "categories": categories_updated}

        except Exception:
            session.rollback()
            logger.exception("Failed to refresh bot stats")
            raise


@celery_app.task(name="marketplace.tasks.maintenance_tasks.prune_interactions")
def prune_interactions():
    """Delete interaction events older than the retention window."""
    retention_days = get_settings().interaction_retention_days
    with SyncSessionLocal() as session:
        try:
            cutoff = datetime.now(timezone.utc) - timedelta(days=retention_days)
            deleted = session.execute(
                delete(BotInteraction)
                .where(BotInteraction.created_at < cutoff)
                .execution_options(synchronize_session=False)
            ).rowcount
            session.commit()
            logger.info("Pruned %d interaction events older than %d days", deleted, retention_days)
            return {"deleted": deleted}

        except Exception:
            session.rollback()
            logger.exception("Failed to prune interaction events")
            raise
