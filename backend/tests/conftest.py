"""
Shared fixtures and fakes for the test suite.

Feed sources and summary models are faked at their network boundary so
the real adapter, pipeline and store code runs without network access.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Any, Optional

import httpx
import pytest

from ainews.models.database import Database
from ainews.models.domain import Article, Category
from ainews.services.summarization import RemoteSummaryError, SummaryStrategy
from ainews.sources.base import FeedSource

BASE_TIME = datetime(2024, 1, 15, 12, 0, 0)


def make_article(
    url: str,
    category: Category = Category.GENERAL,
    title: Optional[str] = None,
    hours_ago: int = 0,
    **fields,
) -> Article:
    return Article(
        title=title or f"Article {url}",
        url=url,
        category=category,
        source="Test Source",
        published_at=BASE_TIME - timedelta(hours=hours_ago),
        **fields,
    )


class FakeSource(FeedSource):
    """
    Feed source whose HTTP layer is replaced by canned payloads.

    items: category -> list of raw dicts ({"title", "url", ...})
    fail: raise a transport error for every request
    """

    def __init__(
        self,
        name: str = "Fake",
        items: Optional[dict[Category, list[dict]]] = None,
        fail: bool = False,
        api_key: Optional[str] = "test-key",
    ):
        super().__init__(api_key)
        self._name = name
        self.items = items or {}
        self.fail = fail
        self.requests: list[Category] = []

    @property
    def name(self) -> str:
        return self._name

    def build_params(self, category: Category) -> dict[str, Any]:
        return {"category": category}

    def extract_items(self, payload: dict) -> list[dict]:
        return payload["articles"]

    def parse_article(self, item: dict, category: Category) -> Optional[Article]:
        return Article(
            title=item["title"],
            url=item.get("url", ""),
            description=item.get("description"),
            content=item.get("content"),
            source=self.name,
            category=category,
            published_at=item.get("published_at", BASE_TIME),
        )

    async def _request(self, params: dict[str, Any]) -> dict:
        category = params["category"]
        self.requests.append(category)
        if self.fail:
            raise httpx.ConnectError("connection refused")
        return {"articles": self.items.get(category, [])}


class EchoStrategy(SummaryStrategy):
    """Summary model that always answers."""

    def __init__(self, name: str = "echo"):
        self._name = name
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def summarize(self, text: str) -> str:
        self.calls.append(text)
        return f"Summary by {self._name}: {text[:30]}"


class FailingStrategy(SummaryStrategy):
    """Summary model that always fails."""

    def __init__(self, name: str = "failing"):
        self._name = name
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    async def summarize(self, text: str) -> str:
        self.calls += 1
        raise RemoteSummaryError("model unavailable")


class SlowStrategy(SummaryStrategy):
    """Summary model that never answers in time."""

    @property
    def name(self) -> str:
        return "slow"

    async def summarize(self, text: str) -> str:
        await asyncio.sleep(10)
        return "too late"


@pytest.fixture
def run_with_db(tmp_path):
    """Run scenario(database) on a fresh SQLite file inside one event loop."""

    def runner(scenario):
        async def wrapper():
            database = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
            await database.create_tables()
            try:
                return await scenario(database)
            finally:
                await database.dispose()

        return asyncio.run(wrapper())

    return runner
