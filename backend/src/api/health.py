"""
Health check endpoints for monitoring and connectivity verification.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request, Response, status

from ..core.config import Settings, get_settings
from ..database.mongodb import MongoDB
from ..database.redis import RedisCache

logger = structlog.get_logger()

router = APIRouter()


def get_mongodb(request: Request) -> MongoDB:
    """Dependency to get MongoDB instance from app state."""
    mongodb: MongoDB = request.app.state.mongodb
    return mongodb


def get_redis(request: Request) -> RedisCache | None:
    """Dependency to get the Redis cache from app state (None when not configured)."""
    redis: RedisCache | None = request.app.state.redis
    return redis


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness check: the process is up and serving requests."""
    return {"status": "OK", "message": "Krypton API is running"}


@router.get("/health/ready")
async def readiness_check(
    response: Response,
    mongodb: MongoDB = Depends(get_mongodb),
    redis_cache: RedisCache | None = Depends(get_redis),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """
    Readiness probe.

    MongoDB is required. Redis only backs the price cache, so it is reported
    but doesn't affect readiness. Responds 503 when not ready.
    """
    mongodb_status = await mongodb.health_check()
    redis_status: dict[str, Any] = (
        await redis_cache.health_check()
        if redis_cache is not None
        else {"connected": False, "error": "Not configured"}
    )

    ready = bool(mongodb_status.get("connected", False))

    if not ready:
        logger.warning(
            "Readiness check failed",
            mongodb=mongodb_status,
            redis=redis_status,
        )
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "ready": ready,
        "environment": settings.environment,
        "dependencies": {
            "mongodb": mongodb_status,
            "redis": redis_status,
        },
    }
