"""
Tests for the article store (SQLite via aiosqlite).
"""

import pytest

from ainews.models.domain import SUMMARY_PENDING, Category
from ainews.services.article_store import ArticleStore

from tests.conftest import make_article


class TestUpsert:
    def test_create_then_update(self, run_with_db):
        async def scenario(database):
            store = ArticleStore(database)
            created = await store.upsert(make_article("https://a", title="Old title"))
            updated = await store.upsert(make_article("https://a", title="New title"))
            stored = await store.get_by_url("https://a")
            return created, updated, stored, await store.count()

        created, updated, stored, count = run_with_db(scenario)

        assert created is True
        assert updated is False
        assert stored.title == "New title"
        assert count == 1

    def test_real_summary_replaces_placeholder(self, run_with_db):
        async def scenario(database):
            store = ArticleStore(database)
            await store.upsert(make_article("https://a", ai_summary=SUMMARY_PENDING))
            await store.upsert(make_article("https://a", ai_summary="Real summary."))
            return await store.get_by_url("https://a")

        assert run_with_db(scenario).ai_summary == "Real summary."

    def test_placeholder_keeps_real_summary(self, run_with_db):
        async def scenario(database):
            store = ArticleStore(database)
            await store.upsert(make_article("https://a", ai_summary="Real summary."))
            await store.upsert(make_article("https://a", title="Retitled", ai_summary=SUMMARY_PENDING))
            await store.upsert(make_article("https://a", ai_summary=None))
            return await store.get_by_url("https://a")

        stored = run_with_db(scenario)
        assert stored.ai_summary == "Real summary."
        assert stored.title == "Article https://a"

    def test_preserve_summary_keeps_stored_summary(self, run_with_db):
        async def scenario(database):
            store = ArticleStore(database)
            await store.upsert(make_article("https://a", ai_summary="Model summary."))
            await store.upsert(
                make_article("https://a", title="Retitled", ai_summary="Local sentence"),
                preserve_summary=True,
            )
            return await store.get_by_url("https://a")

        stored = run_with_db(scenario)
        assert stored.ai_summary == "Model summary."
        assert stored.title == "Retitled"

    def test_preserve_summary_fills_missing_summary(self, run_with_db):
        async def scenario(database):
            store = ArticleStore(database)
            await store.upsert(make_article("https://a", ai_summary=SUMMARY_PENDING))
            await store.upsert(make_article("https://a", ai_summary="Local sentence"), preserve_summary=True)
            await store.upsert(make_article("https://b", ai_summary="New row"), preserve_summary=True)
            return await store.get_by_url("https://a"), await store.get_by_url("https://b")

        first, second = run_with_db(scenario)
        assert first.ai_summary == "Local sentence"
        assert second.ai_summary == "New row"

    def test_newer_summary_replaces_older(self, run_with_db):
        async def scenario(database):
            store = ArticleStore(database)
            await store.upsert(make_article("https://a", ai_summary="First."))
            await store.upsert(make_article("https://a", ai_summary="Second."))
            return await store.get_by_url("https://a")

        assert run_with_db(scenario).ai_summary == "Second."

    def test_round_trips_fields(self, run_with_db):
        article = make_article(
            "https://a",
            category=Category.SCIENCE,
            description="desc",
            content="body",
            image_url="https://a/img.png",
            ai_summary="sum",
        )

        async def scenario(database):
            store = ArticleStore(database)
            await store.upsert(article)
            return await store.get_by_url("https://a")

        stored = run_with_db(scenario)
        assert stored.category == Category.SCIENCE
        assert stored.description == "desc"
        assert stored.content == "body"
        assert stored.image_url == "https://a/img.png"
        assert stored.source == "Test Source"
        assert stored.published_at == article.published_at
        assert stored.created_at is not None

    def test_empty_url_rejected(self, run_with_db):
        async def scenario(database):
            await ArticleStore(database).upsert(make_article(""))

        with pytest.raises(ValueError):
            run_with_db(scenario)


class TestFindByCategories:
    def test_filters_sorts_and_limits(self, run_with_db):
        async def scenario(database):
            store = ArticleStore(database)
            await store.upsert(make_article("https://old", Category.SPORTS, hours_ago=5))
            await store.upsert(make_article("https://new", Category.SPORTS, hours_ago=1))
            await store.upsert(make_article("https://mid", Category.HEALTH, hours_ago=3))
            await store.upsert(make_article("https://other", Category.BUSINESS, hours_ago=0))

            both = await store.find_by_categories([Category.SPORTS, Category.HEALTH])
            limited = await store.find_by_categories([Category.SPORTS, Category.HEALTH], limit=2)
            return both, limited

        both, limited = run_with_db(scenario)

        assert [a.url for a in both] == ["https://new", "https://mid", "https://old"]
        assert [a.url for a in limited] == ["https://new", "https://mid"]

    def test_no_categories(self, run_with_db):
        async def scenario(database):
            store = ArticleStore(database)
            await store.upsert(make_article("https://a"))
            return await store.find_by_categories([])

        assert run_with_db(scenario) == []

    def test_missing_url(self, run_with_db):
        async def scenario(database):
            return await ArticleStore(database).get_by_url("https://nothing")

        assert run_with_db(scenario) is None
