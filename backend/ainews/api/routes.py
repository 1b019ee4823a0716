"""
FastAPI routes for the news feed and service information.
"""

import structlog
from fastapi import APIRouter

from ainews.api.dependencies import OptionalUserDep, ServicesDep
from ainews.config import get_settings
from ainews.models.domain import Article, RefreshResponse, utcnow

logger = structlog.get_logger(__name__)
router = APIRouter()

SAMPLE_TEXT = (
    "Scientists have discovered a new species of dinosaur in Argentina. "
    "The fossil remains suggest it was a giant herbivore that lived 90 million years ago. "
    "This discovery helps fill gaps in our understanding of dinosaur evolution."
)

ENDPOINTS = [
    "GET  /api/test - Server health check",
    "GET  /api - This endpoints list",
    "POST /api/register - User registration",
    "POST /api/login - User login",
    "GET  /api/news - Get news articles",
    "PUT  /api/user/categories - Update user categories",
    "GET  /api/user/profile - Get user profile",
    "POST /api/news/refresh - Refresh news manually",
    "GET  /api/health - Health check",
    "GET  /api/ai/models - Configured summary models",
    "GET  /api/ai/test - Summarize a sample text",
]


# ============================================================================
# News Routes
# ============================================================================


@router.get("/news", response_model=list[Article])
async def get_news(services: ServicesDep, user: OptionalUserDep):
    """
    Get news for the caller's categories.

    Authenticated users get their saved categories; everyone else gets the
    configured defaults. Always returns at least one article.
    """
    categories = get_settings().default_categories
    if user and user.categories:
        categories = user.categories

    return await services.news_feed.get_news(categories)


@router.post("/news/refresh", response_model=RefreshResponse)
async def refresh_news(services: ServicesDep):
    """Run the aggregation pipeline now and report what it produced."""
    logger.info("Manual news refresh requested")
    articles = await services.pipeline.run()
    return RefreshResponse(
        message="News refreshed successfully",
        count=len(articles),
        articles=articles[:5],
    )


# ============================================================================
# Summarizer Routes
# ============================================================================


@router.get("/ai/models")
async def list_models(services: ServicesDep):
    """Summary models in the order they are tried."""
    return {"models": services.summarizer.model_names}


@router.get("/ai/test")
async def test_summary(services: ServicesDep):
    """Summarize a fixed sample text through the model chain."""
    summary = await services.summarizer.summarize(SAMPLE_TEXT)
    return {"success": True, "original": SAMPLE_TEXT, "summary": summary}


# ============================================================================
# Service Info
# ============================================================================


@router.get("")
async def list_endpoints():
    return {"endpoints": ENDPOINTS}


@router.get("/test")
async def test():
    settings = get_settings()
    return {
        "message": "Server is working!",
        "timestamp": utcnow().isoformat(),
        "environment": settings.environment,
    }


@router.get("/health")
async def health_check(services: ServicesDep):
    """Health check endpoint."""
    database_ok = await services.database.ping()
    return {
        "status": "OK",
        "message": "AI News Server is running",
        "timestamp": utcnow().isoformat(),
        "database": "Connected" if database_ok else "Disconnected",
        "version": get_settings().app_version,
    }
