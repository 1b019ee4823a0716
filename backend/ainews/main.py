"""
Main FastAPI application for the AI News backend.
"""
from contextlib import asynccontextmanager

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ainews.api import routes, users
from ainews.api.dependencies import set_services
from ainews.config import get_settings
from ainews.container import build_services
from ainews.jobs.news_refresh import NewsRefreshJob, create_scheduler
from ainews.log import configure_logging


# Configure structured logging
configure_logging(get_settings().log_level)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown."""
    settings = get_settings()

    logger.info("Initializing database", url=settings.database_url)
    services = build_services(settings)
    await services.database.create_tables()
    set_services(services)

    logger.info(
        "Services initialized",
        sources=[s.name for s in services.sources if s.enabled],
        summary_models=services.summarizer.model_names,
    )

    scheduler: AsyncIOScheduler | None = None
    if settings.scheduler_enabled:
        scheduler = create_scheduler(NewsRefreshJob(services.pipeline), settings)
        scheduler.start()
        logger.info(
            "Scheduler started",
            interval_minutes=settings.refresh_interval_minutes,
            first_run_in_seconds=settings.refresh_startup_delay_seconds,
        )

    yield

    # Shutdown
    logger.info("Shutting down")
    if scheduler:
        scheduler.shutdown(wait=False)
    set_services(None)
    await services.database.dispose()


settings = get_settings()

app = FastAPI(
    title="AI News Reader",
    description="Aggregated news with AI summaries, filtered by your categories.",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(routes.router, prefix="/api")
app.include_router(users.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ainews.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
