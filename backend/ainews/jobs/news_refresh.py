"""
Periodic news refresh.

Runs the aggregation pipeline shortly after startup and then on a fixed
interval, so read requests are normally answered from stored articles.
"""
from datetime import datetime, timedelta, timezone

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ainews.config import Settings
from ainews.services.aggregation import AggregationPipeline

logger = structlog.get_logger(__name__)

JOB_ID = "news_refresh"


class NewsRefreshJob:
    """Scheduled wrapper around one pipeline run; never lets an error escape."""

    def __init__(self, pipeline: AggregationPipeline):
        self.pipeline = pipeline
        self.runs = 0
        self.failures = 0

    async def run(self) -> int:
        """Run the pipeline once and return the number of articles produced."""
        logger.info("Scheduled news refresh starting")
        try:
            articles = await self.pipeline.run()
        except Exception as e:
            self.failures += 1
            logger.error("Scheduled news refresh failed", error=str(e), exc_info=True)
            return 0

        self.runs += 1
        logger.info("Scheduled news refresh completed", count=len(articles))
        return len(articles)


def create_scheduler(job: NewsRefreshJob, settings: Settings) -> AsyncIOScheduler:
    """Scheduler with one refresh soon after start and then every interval."""
    scheduler = AsyncIOScheduler(timezone="UTC")

    first_run = datetime.now(timezone.utc) + timedelta(seconds=settings.refresh_startup_delay_seconds)
    scheduler.add_job(
        job.run,
        IntervalTrigger(minutes=settings.refresh_interval_minutes, timezone="UTC"),
        id=JOB_ID,
        name="News Refresh",
        next_run_time=first_run,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler
