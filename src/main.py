"""FastAPI application entry point."""

import logging
import logging.config
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from moneybook.api.routes import allocations, auth, health, holdings, money_books
from moneybook.core.config import settings
from moneybook.core.exceptions import AppException, app_exception_handler
from moneybook.core.middleware import RequestLoggingMiddleware
from moneybook.core.rate_limit import limiter, rate_limit_exceeded_handler
from moneybook.db.base import Base
from moneybook.db.session import engine
from moneybook import models  # noqa: F401  registers every table on Base.metadata

# Configure logging
logging.config.dictConfig(settings.logging_config)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan events."""
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})")

    async with engine.begin() as conn:
        # Create tables (use Alembic in production)
        if settings.ENVIRONMENT == "development":
            await conn.run_sync(Base.metadata.create_all)

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=settings.CORS_CREDENTIALS,
    allow_methods=settings.CORS_METHODS,
    allow_headers=settings.CORS_HEADERS,
)

# Add request/response logging middleware
# Note: Middleware is applied in reverse order, so this will be the outermost layer
app.add_middleware(RequestLoggingMiddleware)

# Register exception handlers
app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix="/api/v1/auth", tags=["auth"])
app.include_router(money_books.router, prefix="/api/v1/money-books", tags=["money-books"])
app.include_router(money_books.pocket_router, prefix="/api/v1/pockets", tags=["pockets"])
app.include_router(
    allocations.router,
    prefix="/api/v1/money-books/{book_id}/allocations",
    tags=["allocations"],
)
app.include_router(
    allocations.allocation_router,
    prefix="/api/v1/allocations",
    tags=["allocations"],
)
app.include_router(
    holdings.router,
    prefix="/api/v1/money-books/{book_id}/holdings",
    tags=["holdings"],
)
app.include_router(holdings.holding_router, prefix="/api/v1/holdings", tags=["holdings"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
