"""
GNews adapter for current headlines.
API docs: https://gnews.io/docs/v4#top-headlines-endpoint
"""
from typing import Any, Optional

from ainews.models.domain import Article, Category
from ainews.sources.base import FeedSource, FeedSourceError, parse_published_at


class GNewsSource(FeedSource):
    """Adapter for fetching top headlines from GNews."""

    BASE_URL = "https://gnews.io/api/v4/top-headlines"

    # GNews also has "world" and "nation", which we never request
    CATEGORY_MAP = {
        Category.BUSINESS: "business",
        Category.ENTERTAINMENT: "entertainment",
        Category.GENERAL: "general",
        Category.HEALTH: "health",
        Category.SCIENCE: "science",
        Category.SPORTS: "sports",
        Category.TECHNOLOGY: "technology",
    }

    DEFAULT_SOURCE_NAME = "GNews"

    def __init__(
        self,
        api_key: Optional[str],
        language: str = "en",
        country: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(api_key, **kwargs)
        self.language = language
        self.country = country

    @property
    def name(self) -> str:
        return "GNews"

    def build_params(self, category: Category) -> dict[str, Any]:
        params = {
            "category": self.provider_category(category),
            "lang": self.language,
            "max": self.page_size,
            "apikey": self.api_key,
        }
        if self.country:
            params["country"] = self.country
        return params

    def extract_items(self, payload: dict) -> list[dict]:
        if errors := payload.get("errors"):
            raise FeedSourceError(f"GNews error: {errors}")

        articles = payload.get("articles")
        if not isinstance(articles, list):
            raise FeedSourceError("GNews response has no article list")
        return articles

    def parse_article(self, item: dict, category: Category) -> Optional[Article]:
        """Parse a GNews article into our Article model."""
        title = item.get("title")
        if not title:
            return None

        source = item.get("source")
        if not isinstance(source, dict):
            source = {}

        return Article(
            title=title,
            description=item.get("description"),
            content=item.get("content"),
            url=item.get("url") or "",
            image_url=item.get("image"),
            source=source.get("name") or self.DEFAULT_SOURCE_NAME,
            category=category,
            published_at=parse_published_at(item.get("publishedAt")),
        )
