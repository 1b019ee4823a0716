"""
News feed service - decides whether stored articles are enough to answer
a read request or a live refresh is needed.
"""
from typing import Iterable

import structlog

from ainews.config import Settings
from ainews.models.domain import Article, Category, placeholder_article
from ainews.services.aggregation import AggregationPipeline
from ainews.services.article_store import ArticleStore

logger = structlog.get_logger(__name__)


class NewsFeedService:
    """
    Serves articles for a set of categories.

    Stored articles are used when there are at least min_cached of them;
    otherwise the aggregation pipeline runs synchronously and its result
    is preferred if it has anything for the requested categories. When
    both come up empty a single placeholder article is returned, never an
    empty list.
    """

    def __init__(
        self,
        store: ArticleStore,
        pipeline: AggregationPipeline,
        page_size: int = 20,
        min_cached: int = 5,
    ):
        self.store = store
        self.pipeline = pipeline
        self.page_size = page_size
        self.min_cached = min_cached

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: ArticleStore,
        pipeline: AggregationPipeline,
    ) -> "NewsFeedService":
        return cls(
            store,
            pipeline,
            page_size=settings.page_size,
            min_cached=settings.min_cached_articles,
        )

    async def get_news(self, categories: Iterable[Category]) -> list[Article]:
        wanted = set(categories)
        logger.info("Fetching news", categories=sorted(c.value for c in wanted))

        try:
            news = await self.store.find_by_categories(wanted, limit=self.page_size)
        except Exception as e:
            logger.error("Article store lookup failed", error=str(e))
            news = []
        logger.info("Found stored articles", count=len(news))

        if len(news) < self.min_cached:
            logger.info("Too few stored articles, running refresh", found=len(news), threshold=self.min_cached)
            fresh = await self._fresh_articles(wanted)
            if fresh:
                logger.info("Using fresh articles", count=len(fresh))
                news = fresh

        if not news:
            logger.info("No news available, returning placeholder")
            return [placeholder_article()]

        return news

    async def _fresh_articles(self, categories: set[Category]) -> list[Article]:
        try:
            articles = await self.pipeline.run()
        except Exception as e:
            logger.error("Fresh news fetch failed", error=str(e))
            return []

        matching = [a for a in articles if a.category in categories]
        matching.sort(key=lambda a: a.published_at, reverse=True)
        return matching[:self.page_size]
