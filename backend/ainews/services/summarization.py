"""
Summarization service using LLMs (Perplexity or Claude).
Generates two-sentence summaries for articles shown in the news feed.

Remote models are tried in a fixed order; the first well-formed answer
wins. When every model fails the service falls back to the first
sentence of the input, so callers always get a usable string.
"""
import asyncio
import re
from abc import ABC, abstractmethod
from typing import Optional

import anthropic
import openai
import structlog
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from ainews.config import Settings
from ainews.models.domain import SUMMARY_UNAVAILABLE

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful news assistant that summarizes articles in 2 concise sentences. "
    "Focus on key facts and main points."
)

FALLBACK_MAX_CHARS = 120

_SENTENCE_END = re.compile(r"[.!?]+")


class RemoteSummaryError(Exception):
    """A remote model could not produce a summary."""


def build_prompt(text: str) -> str:
    return f"Summarize this news in 2 sentences: {text}"


def fallback_summary(text: Optional[str], max_chars: int = FALLBACK_MAX_CHARS) -> str:
    """
    Local summary without an LLM: the first sentence, truncated.

    Returns the "not available" sentinel for empty input.
    """
    if not text or not text.strip():
        return SUMMARY_UNAVAILABLE

    first = _SENTENCE_END.split(text, maxsplit=1)[0].strip() or text.strip()
    if len(first) > max_chars:
        return first[:max_chars] + "..."
    return first


class SummaryStrategy(ABC):
    """One remote way of producing a summary."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def summarize(self, text: str) -> str:
        """Return a summary of text, or raise RemoteSummaryError."""
        pass


class ChatCompletionStrategy(SummaryStrategy):
    """
    Summary via an OpenAI-compatible chat completions endpoint.

    Perplexity exposes this API, so the OpenAI SDK is pointed at its base URL.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        max_tokens: int = 100,
        temperature: float = 0.2,
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def name(self) -> str:
        return f"perplexity:{self.model}"

    async def summarize(self, text: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(text)},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except openai.APIError as e:
            raise RemoteSummaryError(str(e)) from e

        choices = getattr(response, "choices", None)
        if not choices or choices[0].message is None:
            raise RemoteSummaryError("Response has no choices")

        content = choices[0].message.content
        if not isinstance(content, str) or not content.strip():
            raise RemoteSummaryError("Response has no message content")
        return content.strip()


class AnthropicStrategy(SummaryStrategy):
    """Summary via the Anthropic messages API."""

    def __init__(
        self,
        client: AsyncAnthropic,
        model: str,
        max_tokens: int = 100,
        temperature: float = 0.2,
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def name(self) -> str:
        return f"anthropic:{self.model}"

    async def summarize(self, text: str) -> str:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": build_prompt(text)}],
            )
        except anthropic.APIError as e:
            raise RemoteSummaryError(str(e)) from e

        blocks = getattr(response, "content", None)
        if not blocks:
            raise RemoteSummaryError("Response has no content blocks")

        content = getattr(blocks[0], "text", None)
        if not isinstance(content, str) or not content.strip():
            raise RemoteSummaryError("Response has no text")
        return content.strip()


def build_strategies(settings: Settings) -> list[SummaryStrategy]:
    """Build the model chain from settings; models without a key are left out."""
    strategies: list[SummaryStrategy] = []

    if settings.perplexity_api_key:
        client = AsyncOpenAI(
            api_key=settings.perplexity_api_key,
            base_url=settings.perplexity_base_url,
            timeout=settings.summary_timeout_seconds,
            max_retries=0,
        )
        for model in settings.summary_models:
            strategies.append(ChatCompletionStrategy(
                client,
                model,
                max_tokens=settings.summary_max_tokens,
                temperature=settings.summary_temperature,
            ))

    if settings.anthropic_api_key:
        client = AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            timeout=settings.summary_timeout_seconds,
            max_retries=0,
        )
        for model in settings.anthropic_models:
            strategies.append(AnthropicStrategy(
                client,
                model,
                max_tokens=settings.summary_max_tokens,
                temperature=settings.summary_temperature,
            ))

    return strategies


class SummarizationService:
    """
    Service for generating article summaries.

    Summaries are generated once when articles are ingested,
    then cached in the database.
    """

    def __init__(
        self,
        strategies: list[SummaryStrategy],
        max_input_chars: int = 1500,
        timeout: float = 30.0,
    ):
        self.strategies = strategies
        self.max_input_chars = max_input_chars
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SummarizationService":
        return cls(
            build_strategies(settings),
            max_input_chars=settings.summary_max_input_chars,
            timeout=settings.summary_timeout_seconds,
        )

    @property
    def model_names(self) -> list[str]:
        return [s.name for s in self.strategies]

    async def summarize(self, text: Optional[str]) -> str:
        """
        Summarize text with the first model that answers.

        Never raises: returns fallback_summary(text) when the chain is
        exhausted, and the "not available" sentinel for empty text.
        """
        summary = await self.summarize_remote(text)
        return summary if summary is not None else fallback_summary(text)

    async def summarize_remote(self, text: Optional[str]) -> Optional[str]:
        """Summary from the first model that answers, or None if none did."""
        if not text or not text.strip():
            return None

        clipped = text.strip()[:self.max_input_chars]

        for strategy in self.strategies:
            try:
                summary = await asyncio.wait_for(strategy.summarize(clipped), timeout=self.timeout)
                logger.info("Summary generated", model=strategy.name)
                return summary
            except asyncio.TimeoutError:
                logger.warning("Summary model timed out", model=strategy.name, timeout=self.timeout)
            except RemoteSummaryError as e:
                logger.warning("Summary model failed", model=strategy.name, error=str(e))
            except Exception as e:
                logger.error("Unexpected summary error", model=strategy.name, error=str(e), exc_info=True)

        logger.info("All summary models failed", models=len(self.strategies))
        return None
