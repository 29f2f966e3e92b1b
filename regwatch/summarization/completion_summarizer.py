"""
Chat-completion summaries for feed items with a truncation fallback.
"""

import asyncio
import threading
from typing import List, Optional

import requests
import structlog

from ..core.config import Settings
from ..core.models import Item
from ..core.results import Failure, Result, Success

logger = structlog.get_logger(__name__)

SNIPPET_SUMMARY_CHARS = 220
UNAVAILABLE_SUMMARY = "Summary unavailable. Open article for details."

PROMPT_TEMPLATE = """You are a compliance analyst. Summarize the following headline and snippet in 2 concise bullets for an AML/compliance audience.
Keep it neutral, plain English, max 45 words total. No emojis. Provide regulatory names and actions if present.
Headline: {title}
Snippet: {snippet}
Output format:
- bullet 1
- bullet 2"""


def fallback_summary(item: Item) -> str:
    """First characters of the raw snippet, or a fixed notice when it is empty."""
    snippet = item.raw_snippet or ""
    return snippet[:SNIPPET_SUMMARY_CHARS] or UNAVAILABLE_SUMMARY


class CompletionSummarizer:
    """Item summarization through an OpenAI-compatible chat completions API."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.api_key = settings.openai_api_key
        self.model = settings.openai_model
        self.base_url = settings.openai_base_url.rstrip("/")
        self.limit = settings.summarize_limit
        self.timeout = settings.summary_timeout_seconds
        self.max_concurrent = settings.max_concurrent_summaries
        self.enabled = settings.summarization_enabled

        self._shared_session = session
        self._local = threading.local()
        if session is not None:
            self._configure(session)

    def _configure(self, session: requests.Session) -> requests.Session:
        if self.enabled:
            session.headers.update({
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            })
        return session

    @property
    def session(self) -> requests.Session:
        """The injected session, else one owned by the calling worker thread."""
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = self._configure(requests.Session())
        return session

    async def summarize_all(self, items: List[Item]) -> List[Item]:
        """
        Attach a summary to every item, preserving order.

        Only the first `summarize_limit` items are sent to the model; the rest
        get the snippet fallback. A failed request only affects its own item.
        """
        if not self.enabled:
            logger.info("No completion credential configured, using snippet summaries",
                        items=len(items))
            return [item.model_copy(update={"summary": fallback_summary(item)}) for item in items]

        to_summarize = items[: self.limit]
        rest = items[self.limit:]

        logger.info("Starting summarization",
                    items=len(to_summarize),
                    skipped_by_limit=len(rest),
                    model=self.model)

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def summarize_one(item: Item) -> Result[str]:
            async with semaphore:
                return await asyncio.to_thread(self.summarize_item, item)

        results = await asyncio.gather(*[summarize_one(item) for item in to_summarize])

        summarized: List[Item] = []
        failures = 0
        for item, result in zip(to_summarize, results):
            if not result.ok:
                failures += 1
                logger.error("Summarization failed", link=item.link, error=result.error)
            summary = result.unwrap_or(fallback_summary(item))
            summarized.append(item.model_copy(update={"summary": summary}))

        passthrough = [item.model_copy(update={"summary": fallback_summary(item)}) for item in rest]

        logger.info("Completed summarization",
                    successful=len(to_summarize) - failures,
                    failed=failures)
        return summarized + passthrough

    def summarize_item(self, item: Item) -> Result[str]:
        """Request one summary. Never raises."""
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": self._build_prompt(item)}],
            "temperature": 0.2,
            "max_tokens": 120,
        }
        try:
            response = self.session.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            return Failure(f"{type(e).__name__}: {e}")
        except ValueError as e:
            return Failure(f"Response is not JSON: {e}")

        return self._parse_response(data)

    def _build_prompt(self, item: Item) -> str:
        return PROMPT_TEMPLATE.format(
            title=item.title,
            snippet=item.raw_snippet or "(no snippet)",
        )

    def _parse_response(self, data) -> Result[str]:
        """Extract the completion text."""
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return Failure("Invalid response format")
        if content is None:
            return Failure("Empty completion")
        if not isinstance(content, str):
            return Failure(f"Invalid response format: content is {type(content).__name__}")
        text = content.strip()
        if not text:
            return Failure("Empty completion")
        return Success(text)

    def health_check(self) -> bool:
        """Check completion API connectivity and authentication."""
        if not self.enabled:
            return False
        try:
            response = self.session.get(f"{self.base_url}/models", timeout=10)
            return response.status_code == 200
        except requests.RequestException as e:
            logger.error("Completion API health check failed", error=str(e))
            return False
