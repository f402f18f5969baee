"""
FastAPI application entry point for the Krypton backend.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.auth import router as auth_router
from .api.dependencies.rate_limit import limiter
from .api.health import router as health_router
from .api.portfolio import router as portfolio_router
from .api.user import router as user_router
from .api.watchlist import router as watchlist_router
from .core.config import get_settings
from .core.exceptions import AppError
from .database.mongodb import MongoDB
from .database.redis import RedisCache
from .database.repositories.user_repository import UserRepository
from .services.price_oracle import CoinGeckoPriceClient
from .services.token_service import TokenService, resolve_secret_key
from .services.user_locks import UserLocks

# Set the root logger level to INFO so we can see detailed logs
logging.basicConfig(level=logging.INFO)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: connections and long-lived services."""
    settings = get_settings()

    logger.info("Starting Krypton backend", environment=settings.environment)

    # Fail before touching the network if the signing key is required but absent
    token_service = TokenService(
        resolve_secret_key(settings), expire_days=settings.token_expire_days
    )

    mongodb = MongoDB()
    redis_cache: RedisCache | None = None
    price_client: CoinGeckoPriceClient | None = None

    try:
        await mongodb.connect(settings.mongodb_url)

        user_repo = UserRepository(
            mongodb.get_collection("users"), bcrypt_rounds=settings.bcrypt_rounds
        )
        await user_repo.ensure_indexes()
        logger.info("User indexes created")

        # Redis only backs the price cache; run without it if unreachable
        if settings.redis_url:
            redis_cache = RedisCache()
            try:
                await redis_cache.connect(settings.redis_url)
            except Exception as e:
                logger.warning(
                    "Redis unavailable - price cache disabled",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                redis_cache = None

        price_client = CoinGeckoPriceClient(settings, redis_cache=redis_cache)

        # Store in app state for dependency injection
        app.state.mongodb = mongodb
        app.state.redis = redis_cache
        app.state.user_repository = user_repo
        app.state.token_service = token_service
        app.state.price_oracle = price_client
        app.state.user_locks = UserLocks()

        logger.info("Services started", price_cache_enabled=redis_cache is not None)

        yield

    finally:
        if price_client is not None:
            await price_client.close()
        if redis_cache is not None:
            await redis_cache.disconnect()
        await mongodb.disconnect()
        logger.info("Services stopped")


def _validation_message(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into one readable line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(loc) for loc in error.get("loc", ())[1:])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts) or "Invalid request"


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Krypton API",
        description="Crypto watchlist and portfolio tracking with live pricing",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    # Rate limiting - SlowAPI integration
    app.state.limiter = limiter
    # Only add middleware in non-test environments (middleware breaks FastAPI TestClient)
    if settings.environment != "test":
        app.add_middleware(SlowAPIMiddleware)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        logger.warning("Rate limit exceeded", path=request.url.path, limit=exc.detail)
        return JSONResponse(
            status_code=429,
            content={"error": f"Rate limit exceeded: {exc.detail}"},
            headers={"Retry-After": str(60)},
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Map AppError subclasses to their HTTP status with an {"error": ...} body."""
        error_dict = exc.to_dict()
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "Application error occurred",
            path=request.url.path,
            method=request.method,
            **error_dict,
        )

        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
            headers=headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = _validation_message(exc)
        logger.info("Request validation failed", path=request.url.path, error=message)
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
        )
        return JSONResponse(status_code=500, content={"error": "Something went wrong!"})

    # Include routers
    app.include_router(health_router, prefix="/api", tags=["health"])
    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(watchlist_router)
    app.include_router(portfolio_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint for basic connectivity check."""
        return {
            "message": "Krypton API",
            "version": "0.1.0",
            "environment": settings.environment,
        }

    return app


# Create app instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",  # nosec B104 - Required for Docker container
        port=settings.port,
        reload=settings.is_development,
        log_config=None,  # Use structlog configuration
    )
