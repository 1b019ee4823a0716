"""
Wiring of the services used by the API, the scheduler and the CLI.
"""
from dataclasses import dataclass
from typing import Optional

from ainews.config import Settings
from ainews.models.database import Database
from ainews.services.accounts import AccountService
from ainews.services.aggregation import AggregationPipeline
from ainews.services.article_store import ArticleStore
from ainews.services.news_feed import NewsFeedService
from ainews.services.summarization import SummarizationService
from ainews.sources import FeedSource, build_sources


@dataclass
class Services:
    database: Database
    sources: list[FeedSource]
    store: ArticleStore
    summarizer: SummarizationService
    pipeline: AggregationPipeline
    news_feed: NewsFeedService
    accounts: AccountService


def build_services(settings: Settings, database: Optional[Database] = None) -> Services:
    """Build every service from settings; pass database to share an existing engine."""
    database = database or Database(settings.database_url)
    sources = build_sources(settings)
    store = ArticleStore(database)
    summarizer = SummarizationService.from_settings(settings)
    pipeline = AggregationPipeline.from_settings(settings, sources, summarizer, store)

    return Services(
        database=database,
        sources=sources,
        store=store,
        summarizer=summarizer,
        pipeline=pipeline,
        news_feed=NewsFeedService.from_settings(settings, store, pipeline),
        accounts=AccountService.from_settings(settings, database),
    )
