"""
Services layer - core business logic for the AI News backend.

1. Deduplication (dedupe.py):
   - One article per url, first occurrence wins

2. Summarization (summarization.py):
   - Ordered LLM model chain with a first-sentence fallback

3. Aggregation (aggregation.py):
   - Fetch all categories from all sources, dedupe, enrich, persist

4. News feed (news_feed.py):
   - Serve stored articles or trigger a live refresh

5. Accounts (accounts.py):
   - Registration, login, bearer tokens, category preferences
"""

from ainews.services.accounts import (
    AccountError,
    AccountService,
    InvalidCredentialsError,
    InvalidTokenError,
    UserExistsError,
    UserNotFoundError,
)
from ainews.services.aggregation import AggregationPipeline, PipelineStats
from ainews.services.article_store import ArticleStore
from ainews.services.dedupe import dedupe
from ainews.services.news_feed import NewsFeedService
from ainews.services.summarization import (
    AnthropicStrategy,
    ChatCompletionStrategy,
    RemoteSummaryError,
    SummarizationService,
    SummaryStrategy,
    fallback_summary,
)

__all__ = [
    # Accounts
    "AccountError",
    "AccountService",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "UserExistsError",
    "UserNotFoundError",
    # Aggregation
    "AggregationPipeline",
    "PipelineStats",
    "ArticleStore",
    "dedupe",
    "NewsFeedService",
    # Summarization
    "AnthropicStrategy",
    "ChatCompletionStrategy",
    "RemoteSummaryError",
    "SummarizationService",
    "SummaryStrategy",
    "fallback_summary",
]
