"""Seed the default marketplace bot categories.

Skips categories whose name already exists, so it is safe to re-run.

Usage:
    docker compose exec backend python -m scripts.seed_categories
"""

import logging

from marketplace.models.base import SyncSessionLocal
from marketplace.models import Category

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "AI & Machine Learning", "description": "Bots powered by artificial intelligence and machine learning", "icon": "🤖"},
    {"name": "Social Media", "description": "Automation for social media platforms", "icon": "📱"},
    {"name": "Business & Productivity", "description": "Tools to streamline business operations and boost productivity", "icon": "💼"},
    {"name": "E-commerce", "description": "Automation for online stores and marketplaces", "icon": "🛒"},
    {"name": "Data Scraping", "description": "Extract and collect data from websites", "icon": "🔍"},
    {"name": "Marketing & SEO", "description": "Marketing automation and SEO tools", "icon": "📊"},
    {"name": "Gaming", "description": "Bots for gaming automation and enhancement", "icon": "🎮"},
    {"name": "Finance & Trading", "description": "Financial automation and trading bots", "icon": "💰"},
]


def seed():
    db = SyncSessionLocal()
    try:
        existing = {name for (name,) in db.query(Category.name).all()}
        created = 0
        for data in DEFAULT_CATEGORIES:
            if data["name"] in existing:
                continue
            db.add(Category(**data))
            created += 1
            logger.info("Added category: %s", data["name"])

        db.commit()
        logger.info("Done: %d categories created, %d already present", created, len(DEFAULT_CATEGORIES) - created)

    except Exception:
        db.rollback()
        logger.exception("Failed to seed categories")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
