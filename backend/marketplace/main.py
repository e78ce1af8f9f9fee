"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import redis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.sessions import SessionMiddleware
from sqlalchemy import text

from marketplace.config import get_settings
from marketplace.models import Base
from marketplace.models.base import engine, AsyncSessionLocal
from marketplace.api import router as api_router

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info("Starting %s...", settings.app_name)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified")
    yield
    logger.info("Shutting down...")
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Bot recommendations for the automation marketplace",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(GZipMiddleware, minimum_size=500)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Shares the marketplace web app's signed session cookie
app.add_middleware(SessionMiddleware, secret_key=settings.secret_key, same_site="lax")

app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name}



async def _check_database() -> dict:
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        return {"ok": True}
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        return {"ok": False, "message": str(e)}


def _check_redis() -> dict:
    try:
        redis.from_url(settings.redis_url, socket_timeout=5).ping()
        return {"ok": True}
    except Exception as e:
        logger.warning("Redis health check failed: %s", e)
        return {"ok": False, "message": str(e)}


@app.get("/health/detailed")
async def detailed_health_check():
    """Database and broker reachability; `degraded` when either check fails."""
    checks = {"database": await _check_database(), "redis": _check_redis()}
    all_ok = all(check["ok"] for check in checks.values())
    return {
        "status": "healthy" if all_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }
