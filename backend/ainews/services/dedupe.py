"""
Deduplication of a combined multi-source article batch.
"""
from typing import Iterable

from ainews.models.domain import Article


def dedupe(articles: Iterable[Article]) -> list[Article]:
    """
    Keep the first article seen for each url, preserving input order.

    Articles without a url are dropped rather than treated as one
    duplicate group, so distinct unidentified articles are never merged.
    """
    seen: set[str] = set()
    unique = []

    for article in articles:
        if not article.url or article.url in seen:
            continue
        seen.add(article.url)
        unique.append(article)

    return unique
