"""
NewsAPI adapter for current headlines.
API docs: https://newsapi.org/docs/endpoints/top-headlines
"""
from typing import Any, Optional

from ainews.models.domain import Article, Category
from ainews.sources.base import FeedSource, FeedSourceError, parse_published_at

# NewsAPI marks taken-down articles with this literal
REMOVED = "[Removed]"


class NewsAPISource(FeedSource):
    """Adapter for fetching top headlines from NewsAPI."""

    BASE_URL = "https://newsapi.org/v2/top-headlines"

    # NewsAPI uses the same category names we do
    CATEGORY_MAP = {category: category.value for category in Category}

    DEFAULT_SOURCE_NAME = "Unknown"

    def __init__(self, api_key: Optional[str], country: str = "us", **kwargs):
        super().__init__(api_key, **kwargs)
        self.country = country

    @property
    def name(self) -> str:
        return "NewsAPI"

    def build_params(self, category: Category) -> dict[str, Any]:
        return {
            "country": self.country,
            "category": self.provider_category(category),
            "pageSize": self.page_size,
            "apiKey": self.api_key,
        }

    def extract_items(self, payload: dict) -> list[dict]:
        if payload.get("status") != "ok":
            raise FeedSourceError(f"NewsAPI error: {payload.get('message')}")

        articles = payload.get("articles")
        if not isinstance(articles, list):
            raise FeedSourceError("NewsAPI response has no article list")
        return articles

    def parse_article(self, item: dict, category: Category) -> Optional[Article]:
        """Parse a NewsAPI article into our Article model."""
        title = item.get("title")
        if not title or title == REMOVED:
            return None

        description = item.get("description")
        if description == REMOVED:
            description = None

        source = item.get("source")
        if not isinstance(source, dict):
            source = {}

        return Article(
            title=title,
            description=description,
            content=item.get("content"),
            url=item.get("url") or "",
            image_url=item.get("urlToImage"),
            source=source.get("name") or self.DEFAULT_SOURCE_NAME,
            category=category,
            published_at=parse_published_at(item.get("publishedAt")),
        )
