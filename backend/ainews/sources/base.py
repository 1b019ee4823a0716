"""
Base interface for news feed sources.
All providers (NewsAPI, GNews, ...) implement this interface.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ainews.models.domain import Article, Category, utcnow

logger = structlog.get_logger(__name__)


class FeedSourceError(Exception):
    """Provider answered, but not with a usable article list."""


def parse_published_at(value: Optional[str]) -> datetime:
    """Parse an ISO-8601 provider timestamp into naive UTC, defaulting to now."""
    if not value:
        return utcnow()
    try:
        published = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return utcnow()
    if published.tzinfo is not None:
        published = published.astimezone(timezone.utc).replace(tzinfo=None)
    return published


class FeedSource(ABC):
    """
    Abstract base class for feed source adapters.

    Subclasses describe one provider: its endpoint, how a category is
    translated into the provider's vocabulary, and how one raw item maps
    onto the canonical Article. The shared fetch() guarantees the adapter
    never raises past its own boundary.
    """

    BASE_URL: str = ""

    # Canonical category -> provider category
    CATEGORY_MAP: dict[Category, str] = {}

    # Used when the provider omits the publisher name
    DEFAULT_SOURCE_NAME: str = "Unknown"

    def __init__(
        self,
        api_key: Optional[str],
        page_size: int = 3,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.page_size = page_size
        self.timeout = timeout
        self._transport = transport

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the source."""
        pass

    @abstractmethod
    def build_params(self, category: Category) -> dict[str, Any]:
        """Query parameters for one category request, including the credential."""
        pass

    @abstractmethod
    def extract_items(self, payload: dict) -> list[dict]:
        """Pull the raw article list out of a response body, raising on provider errors."""
        pass

    @abstractmethod
    def parse_article(self, item: dict, category: Category) -> Optional[Article]:
        """Map one raw item onto an Article, or None if it is unusable."""
        pass

    def provider_category(self, category: Category) -> str:
        return self.CATEGORY_MAP.get(category, self.CATEGORY_MAP.get(Category.GENERAL, "general"))

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @retry(
        # Timeouts are not retried; the request timeout bounds the whole call
        retry=retry_if_exception_type((httpx.ConnectError, httpx.RemoteProtocolError)),
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        reraise=True,
    )
    async def _request(self, params: dict[str, Any]) -> dict:
        """GET the provider endpoint and return the decoded JSON body."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(self.BASE_URL, params=params)
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict):
            raise FeedSourceError(f"{self.name}: unexpected payload type {type(data).__name__}")
        return data

    async def fetch(self, category: Category) -> list[Article]:
        """
        Fetch the current headlines for a category.

        Returns an empty list on any failure; the failure is logged.
        Every returned article carries the requested category.
        """
        if not self.enabled:
            logger.warning("Feed source disabled, no API key", source=self.name)
            return []

        try:
            payload = await self._request(self.build_params(category))
            items = self.extract_items(payload)
        except Exception as e:
            logger.error(
                "Feed source fetch failed",
                source=self.name,
                category=category.value,
                error=str(e) or type(e).__name__,
            )
            return []

        articles = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                article = self.parse_article(item, category)
            except Exception as e:
                logger.warning(
                    "Skipping malformed article",
                    source=self.name,
                    url=item.get("url"),
                    error=str(e) or type(e).__name__,
                )
                continue
            if article:
                articles.append(article)

        logger.info("Fetched articles", source=self.name, category=category.value, count=len(articles))
        return articles

    async def health_check(self) -> bool:
        """Check if the source is configured and answering."""
        if not self.enabled:
            return False
        try:
            payload = await self._request(self.build_params(Category.GENERAL))
            self.extract_items(payload)
            return True
        except Exception:
            return False
