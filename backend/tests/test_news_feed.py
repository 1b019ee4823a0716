"""
Tests for the news feed read path.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

from ainews.models.domain import Category, placeholder_article
from ainews.services.news_feed import NewsFeedService

from tests.conftest import make_article


def make_service(stored=None, fresh=None, store_error=None, pipeline_error=None, **kwargs):
    store = MagicMock()
    store.find_by_categories = AsyncMock(return_value=stored or [], side_effect=store_error)
    pipeline = MagicMock()
    pipeline.run = AsyncMock(return_value=fresh or [], side_effect=pipeline_error)
    return NewsFeedService(store, pipeline, **kwargs), store, pipeline


class TestGetNews:
    def test_enough_stored_articles_skip_refresh(self):
        stored = [make_article(f"https://s{i}", hours_ago=i) for i in range(5)]
        service, store, pipeline = make_service(stored=stored)

        result = asyncio.run(service.get_news([Category.GENERAL]))

        assert result == stored
        pipeline.run.assert_not_awaited()
        args, kwargs = store.find_by_categories.call_args
        assert set(args[0]) == {Category.GENERAL}
        assert kwargs["limit"] == 20

    def test_few_stored_prefers_fresh(self):
        stored = [make_article(f"https://s{i}") for i in range(3)]
        fresh = [
            make_article("https://old", hours_ago=5),
            make_article("https://new", hours_ago=1),
            make_article("https://other", category=Category.SPORTS),
        ]
        service, _, pipeline = make_service(stored=stored, fresh=fresh)

        result = asyncio.run(service.get_news([Category.GENERAL]))

        pipeline.run.assert_awaited_once()
        assert [a.url for a in result] == ["https://new", "https://old"]

    def test_fresh_without_matches_keeps_stored(self):
        stored = [make_article("https://s1")]
        fresh = [make_article("https://x", category=Category.SPORTS)]
        service, _, _ = make_service(stored=stored, fresh=fresh)

        assert asyncio.run(service.get_news([Category.GENERAL])) == stored

    def test_fresh_capped_at_page_size(self):
        fresh = [make_article(f"https://f{i}", hours_ago=i) for i in range(30)]
        service, _, _ = make_service(fresh=fresh, page_size=20)

        result = asyncio.run(service.get_news([Category.GENERAL]))

        assert len(result) == 20
        assert result[0].url == "https://f0"

    def test_nothing_anywhere_returns_placeholder(self):
        service, _, _ = make_service()

        result = asyncio.run(service.get_news([Category.HEALTH]))

        assert len(result) == 1
        assert result[0].title == placeholder_article().title
        assert result[0].url == "https://example.com"

    def test_store_failure_triggers_refresh(self):
        fresh = [make_article("https://f1")]
        service, _, pipeline = make_service(fresh=fresh, store_error=RuntimeError("db down"))

        result = asyncio.run(service.get_news([Category.GENERAL]))

        pipeline.run.assert_awaited_once()
        assert [a.url for a in result] == ["https://f1"]

    def test_pipeline_failure_falls_back_to_stored(self):
        stored = [make_article("https://s1")]
        service, _, _ = make_service(stored=stored, pipeline_error=RuntimeError("boom"))

        assert asyncio.run(service.get_news([Category.GENERAL])) == stored

    def test_everything_failing_returns_placeholder(self):
        service, _, _ = make_service(
            store_error=RuntimeError("db down"),
            pipeline_error=RuntimeError("boom"),
        )

        result = asyncio.run(service.get_news([Category.GENERAL]))

        assert [a.source for a in result] == ["AI News System"]

    def test_multiple_categories(self):
        fresh = [
            make_article("https://b", category=Category.BUSINESS, hours_ago=2),
            make_article("https://s", category=Category.SPORTS, hours_ago=1),
            make_article("https://h", category=Category.HEALTH),
        ]
        service, _, _ = make_service(fresh=fresh)

        result = asyncio.run(service.get_news([Category.BUSINESS, Category.SPORTS]))

        assert [a.url for a in result] == ["https://s", "https://b"]

    def test_zero_threshold_never_refreshes(self):
        service, _, pipeline = make_service(min_cached=0)

        result = asyncio.run(service.get_news([Category.GENERAL]))

        pipeline.run.assert_not_awaited()
        assert result[0].title == "Welcome to AI News Reader!"
