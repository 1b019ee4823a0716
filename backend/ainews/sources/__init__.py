"""
Feed source adapters for the AI News backend.
"""
from ainews.config import Settings
from ainews.sources.base import FeedSource, FeedSourceError
from ainews.sources.gnews import GNewsSource
from ainews.sources.newsapi import NewsAPISource


def build_sources(settings: Settings) -> list[FeedSource]:
    """Create the configured feed sources, in fetch order."""
    common = {
        "page_size": settings.articles_per_source,
        "timeout": settings.fetch_timeout_seconds,
    }
    return [
        NewsAPISource(settings.newsapi_key, country=settings.news_country, **common),
        GNewsSource(settings.gnews_api_key, language=settings.news_language, **common),
    ]


__all__ = [
    "FeedSource",
    "FeedSourceError",
    "NewsAPISource",
    "GNewsSource",
    "build_sources",
]
