"""
Movie Discovery Backend

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from .config import get_settings
from .core.logging import setup_logging, get_logger
from .core.exceptions import register_exception_handlers
from .routers import (
    search_router,
    catalog_router,
    recommendations_router,
    watchlist_router,
    history_router,
    user_router,
)
from .services.cache_service import get_cache_service
from .services.tmdb_client import get_tmdb_client

# Initialize
settings = get_settings()
setup_logging()
logger = get_logger(__name__)

# Rate limiter
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "app_startup",
        environment=settings.environment,
        debug=settings.debug,
        tmdb_configured=bool(settings.tmdb_api_key),
        redis_configured=bool(settings.redis_url),
    )

    yield

    await get_tmdb_client().aclose()
    await get_cache_service().close()
    logger.info("app_shutdown")


# Create FastAPI app
app = FastAPI(
    title="Movie Discovery Backend",
    description="TMDB proxy with trailer enrichment, watchlists and recommendations",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(search_router)
app.include_router(catalog_router)
app.include_router(recommendations_router)
app.include_router(watchlist_router)
app.include_router(history_router)
app.include_router(user_router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "Movie Discovery Backend",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs" if settings.debug else "disabled",
    }


@app.get("/health")
async def health():
    """Health check for load balancers."""
    return {"status": "healthy"}
