"""Catalog repository dependency."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.base import get_db
from marketplace.services.catalog_repository import CatalogRepository


async def get_catalog(db: AsyncSession = Depends(get_db)) -> CatalogRepository:
    return CatalogRepository(db)
