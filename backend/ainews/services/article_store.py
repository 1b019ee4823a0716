"""
Persistence for news articles: upsert by url and category queries.
"""
from typing import Iterable

from sqlalchemy import func, select

from ainews.models.database import Database, DBArticle
from ainews.models.domain import SUMMARY_PENDING, Article, Category

# Fields copied from a freshly fetched article onto the stored row
_UPDATABLE_FIELDS = (
    "title",
    "description",
    "content",
    "image_url",
    "source",
    "category",
    "published_at",
)


def to_domain(row: DBArticle) -> Article:
    return Article(
        title=row.title,
        description=row.description,
        content=row.content,
        url=row.url,
        image_url=row.image_url,
        source=row.source,
        category=Category(row.category),
        published_at=row.published_at,
        ai_summary=row.ai_summary,
        created_at=row.created_at,
    )


class ArticleStore:
    """
    Article repository keyed by url.

    Each upsert runs in its own session and commits on its own, so a
    failure never rolls back articles written before it.
    """

    def __init__(self, database: Database):
        self.database = database

    async def upsert(self, article: Article, preserve_summary: bool = False) -> bool:
        """
        Insert the article, or update the stored row with the same url.

        A placeholder summary never replaces a real summary already stored,
        and neither does any summary when preserve_summary is set.
        Returns True if a new row was created.
        """
        if not article.url:
            raise ValueError("Cannot store an article without a url")

        async with self.database.async_session() as session:
            result = await session.execute(
                select(DBArticle).where(DBArticle.url == article.url)
            )
            existing = result.scalar_one_or_none()

            if existing:
                for field in _UPDATABLE_FIELDS:
                    value = getattr(article, field)
                    setattr(existing, field, value.value if field == "category" else value)

                keep_summary = (
                    (preserve_summary or article.ai_summary in (None, SUMMARY_PENDING))
                    and existing.ai_summary not in (None, SUMMARY_PENDING)
                )
                if not keep_summary:
                    existing.ai_summary = article.ai_summary
                created = False
            else:
                session.add(DBArticle(
                    url=article.url,
                    title=article.title,
                    description=article.description,
                    content=article.content,
                    image_url=article.image_url,
                    source=article.source,
                    category=article.category.value,
                    published_at=article.published_at,
                    ai_summary=article.ai_summary,
                ))
                created = True

            await session.commit()
            return created

    async def find_by_categories(
        self,
        categories: Iterable[Category],
        limit: int = 20,
    ) -> list[Article]:
        """Newest-published articles in any of the given categories."""
        values = [c.value for c in categories]
        if not values:
            return []

        async with self.database.async_session() as session:
            result = await session.execute(
                select(DBArticle)
                .where(DBArticle.category.in_(values))
                .order_by(DBArticle.published_at.desc())
                .limit(limit)
            )
            return [to_domain(row) for row in result.scalars().all()]

    async def get_by_url(self, url: str) -> Article | None:
        async with self.database.async_session() as session:
            result = await session.execute(
                select(DBArticle).where(DBArticle.url == url)
            )
            row = result.scalar_one_or_none()
            return to_domain(row) if row else None

    async def count(self) -> int:
        async with self.database.async_session() as session:
            result = await session.execute(select(func.count(DBArticle.id)))
            return result.scalar() or 0
