"""
CLI tool for the AI News backend.

Usage:
    # Fetch and dedupe headlines (no summaries, nothing stored)
    ainews fetch --category technology

    # Run the full pipeline against the configured database
    ainews refresh

    # Summarize a piece of text with the model chain
    ainews summarize "Some news text."

    # Check source health
    ainews health

    # Run the API server
    ainews serve --port 5000
"""

import argparse
import asyncio
import json
import sys

from ainews.config import get_settings
from ainews.container import build_services
from ainews.log import configure_logging
from ainews.models.domain import ALL_CATEGORIES, Category
from ainews.services.dedupe import dedupe
from ainews.services.summarization import SummarizationService
from ainews.sources import build_sources


async def cmd_fetch(args) -> int:
    """Fetch articles from all sources, without summarizing or storing."""
    settings = get_settings()
    sources = build_sources(settings)
    categories = [Category(args.category)] if args.category else ALL_CATEGORIES

    combined = []
    for category in categories:
        results = await asyncio.gather(*(source.fetch(category) for source in sources))
        for source, articles in zip(sources, results):
            print(f"  {source.name:<8} {category.value:<14} {len(articles)} articles")
            combined.extend(articles)

    articles = dedupe(combined)

    print("-" * 60)
    print(f"Total articles: {len(combined)}, after deduplication: {len(articles)}")

    if args.output:
        with open(args.output, "w") as f:
            json.dump([a.model_dump(mode="json", by_alias=True) for a in articles], f, indent=2)
        print(f"\nArticles saved to: {args.output}")

    if args.verbose:
        for article in articles[:10]:
            print(f"\n[{article.source}] {article.title}")
            print(f"  URL: {article.url}")
            print(f"  Date: {article.published_at}")
            print(f"  Category: {article.category.value}")

    return 0


async def cmd_refresh(args) -> int:
    """Run the aggregation pipeline once."""
    services = build_services(get_settings())
    await services.database.create_tables()

    try:
        articles = await services.pipeline.run()
    finally:
        await services.database.dispose()

    print(f"Refreshed {len(articles)} articles")
    if services.pipeline.last_stats:
        print(services.pipeline.last_stats)
    return 0 if articles else 1


async def cmd_summarize(args) -> int:
    """Summarize text with the configured model chain."""
    summarizer = SummarizationService.from_settings(get_settings())
    models = ", ".join(summarizer.model_names) or "none (local fallback only)"
    print(f"Models: {models}")
    print(await summarizer.summarize(args.text))
    return 0


async def cmd_health(args) -> int:
    """Check health of all sources."""
    sources = build_sources(get_settings())

    print("Checking source health...")
    all_healthy = True
    for source in sources:
        is_healthy = await source.health_check()
        status = "OK" if is_healthy else ("DISABLED" if not source.enabled else "FAILED")
        print(f"  {source.name}: {status}")
        all_healthy = all_healthy and is_healthy

    return 0 if all_healthy else 1


def cmd_serve(args) -> int:
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "ainews.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AI News Reader - backend CLI")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    fetch_parser = subparsers.add_parser("fetch", help="Fetch and dedupe headlines")
    fetch_parser.add_argument(
        "--category", "-c",
        choices=[c.value for c in Category],
        help="Single category to fetch (default: all)",
    )
    fetch_parser.add_argument("--output", "-o", help="Output file for articles (JSON)")
    fetch_parser.add_argument("--verbose", "-v", action="store_true", help="Show article previews")

    subparsers.add_parser("refresh", help="Run the full aggregation pipeline")

    summarize_parser = subparsers.add_parser("summarize", help="Summarize a text")
    summarize_parser.add_argument("text", help="Text to summarize")

    subparsers.add_parser("health", help="Check source health")

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", "-p", type=int, help="Port")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(get_settings().log_level, json=False)

    if args.command == "fetch":
        return asyncio.run(cmd_fetch(args))
    elif args.command == "refresh":
        return asyncio.run(cmd_refresh(args))
    elif args.command == "summarize":
        return asyncio.run(cmd_summarize(args))
    elif args.command == "health":
        return asyncio.run(cmd_health(args))
    elif args.command == "serve":
        return cmd_serve(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
