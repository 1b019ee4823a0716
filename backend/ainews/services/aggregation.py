"""
Aggregation pipeline - orchestrates one news refresh.

Fetches every category from every feed source, deduplicates the combined
batch, summarizes a bounded prefix with the LLM chain and persists the
result. Every stage absorbs its own failures, so a run degrades to fewer
(or zero) articles instead of raising.
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

import structlog

from ainews.config import Settings
from ainews.models.domain import ALL_CATEGORIES, SUMMARY_PENDING, Article, Category, utcnow
from ainews.services.article_store import ArticleStore
from ainews.services.dedupe import dedupe
from ainews.services.summarization import SummarizationService, fallback_summary
from ainews.sources.base import FeedSource

logger = structlog.get_logger(__name__)


@dataclass
class PipelineStats:
    """Counters for one pipeline run."""
    fetched: int = 0
    unique: int = 0
    enriched: int = 0
    persisted: int = 0
    persist_failures: int = 0
    source_failures: int = 0
    duration_seconds: float = 0.0

    def __str__(self) -> str:
        return (
            f"fetched={self.fetched}, unique={self.unique}, enriched={self.enriched}, "
            f"persisted={self.persisted}, persist_failures={self.persist_failures}, "
            f"time={self.duration_seconds:.1f}s"
        )


class AggregationPipeline:
    """
    Multi-source fetch, dedupe, enrichment and persistence.

    Pacing:
    - fetches for one category run concurrently across sources
    - categories are separated by category_delay seconds
    - summaries are requested one at a time, summary_delay seconds apart

    Concurrent run() calls share the run already in flight.
    """

    def __init__(
        self,
        sources: Sequence[FeedSource],
        summarizer: SummarizationService,
        store: ArticleStore,
        categories: Sequence[Category] = ALL_CATEGORIES,
        enrichment_limit: int = 5,
        category_delay: float = 1.0,
        summary_delay: float = 3.0,
    ):
        self.sources = list(sources)
        self.summarizer = summarizer
        self.store = store
        self.categories = list(categories)
        self.enrichment_limit = enrichment_limit
        self.category_delay = category_delay
        self.summary_delay = summary_delay

        self.last_stats: Optional[PipelineStats] = None
        self.last_run_at: Optional[datetime] = None
        self._current: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        sources: Sequence[FeedSource],
        summarizer: SummarizationService,
        store: ArticleStore,
    ) -> "AggregationPipeline":
        return cls(
            sources,
            summarizer,
            store,
            enrichment_limit=settings.enrichment_limit,
            category_delay=settings.category_delay_seconds,
            summary_delay=settings.summary_delay_seconds,
        )

    @property
    def is_running(self) -> bool:
        return self._current is not None and not self._current.done()

    async def run(self) -> list[Article]:
        """
        Execute one refresh and return enriched + placeholder articles.

        Never raises; an empty list means no fresh data was available.
        """
        if self.is_running:
            logger.info("Aggregation already running, joining it")
        else:
            self._current = asyncio.create_task(self._run_guarded())
        return await asyncio.shield(self._current)

    async def _run_guarded(self) -> list[Article]:
        try:
            return await self._run()
        except Exception as e:
            logger.error("Aggregation run failed", error=str(e), exc_info=True)
            return []

    async def _run(self) -> list[Article]:
        start_time = utcnow()
        stats = PipelineStats()
        logger.info("Starting aggregation", categories=len(self.categories), sources=len(self.sources))

        combined = await self._fetch_all(stats)
        stats.fetched = len(combined)

        unique = dedupe(combined)
        stats.unique = len(unique)
        logger.info("Deduplicated articles", before=stats.fetched, after=stats.unique)

        prefix = unique[:self.enrichment_limit]
        remainder = [
            article.model_copy(update={"ai_summary": SUMMARY_PENDING})
            for article in unique[self.enrichment_limit:]
        ]

        enriched = await self._enrich(prefix, stats)

        for article in remainder:
            await self._persist(article, stats)

        stats.duration_seconds = (utcnow() - start_time).total_seconds()
        self.last_stats = stats
        self.last_run_at = start_time
        logger.info("Aggregation completed", stats=str(stats))

        return enriched + remainder

    async def _fetch_all(self, stats: PipelineStats) -> list[Article]:
        """Fetch all categories, one category at a time, sources concurrently."""
        combined: list[Article] = []

        for index, category in enumerate(self.categories):
            if index and self.category_delay:
                await asyncio.sleep(self.category_delay)

            results = await asyncio.gather(
                *(source.fetch(category) for source in self.sources),
                return_exceptions=True,
            )

            for source, result in zip(self.sources, results):
                if isinstance(result, BaseException):
                    # Adapters should not raise; treat it like any other source failure
                    logger.error(
                        "Feed source raised",
                        source=source.name,
                        category=category.value,
                        error=str(result),
                    )
                    stats.source_failures += 1
                    continue
                combined.extend(result)

        return combined

    async def _enrich(self, articles: list[Article], stats: PipelineStats) -> list[Article]:
        """Summarize and persist each article in turn."""
        enriched = []

        for index, article in enumerate(articles):
            if index and self.summary_delay:
                await asyncio.sleep(self.summary_delay)

            logger.info(
                "Summarizing article",
                position=index + 1,
                total=len(articles),
                title=article.title[:50],
            )
            text = article.summarizable_text()
            try:
                summary = await self.summarizer.summarize_remote(text)
            except Exception as e:
                logger.error("Summarization crashed", url=article.url, error=str(e))
                summary = None
                text = article.description or article.title

            # A local fallback never replaces a model summary stored by an earlier run
            local = summary is None
            if local:
                summary = fallback_summary(text)

            article = article.model_copy(update={"ai_summary": summary})
            stats.enriched += 1
            await self._persist(article, stats, preserve_summary=local)
            enriched.append(article)

        return enriched

    async def _persist(self, article: Article, stats: PipelineStats, preserve_summary: bool = False):
        try:
            await self.store.upsert(article, preserve_summary=preserve_summary)
            stats.persisted += 1
        except Exception as e:
            logger.error("Failed to persist article", url=article.url, error=str(e))
            stats.persist_failures += 1
