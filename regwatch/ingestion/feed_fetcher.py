"""
Per-endpoint RSS/Atom feed fetching with failure isolation.
"""

import asyncio
import threading
from typing import List, Optional, Tuple

import feedparser
import requests
import structlog

from ..core.config import Settings
from ..core.models import Item
from ..core.results import Failure, Result, Success
from .normalizer import normalize_entry
from .registry import SourceRegistry

logger = structlog.get_logger(__name__)


class FeedFetcher:
    """Retrieves and normalizes feed endpoints."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.max_items = settings.max_items_per_feed
        self.timeout = settings.fetch_timeout_seconds

        self.user_agent = settings.user_agent
        self._shared_session = session
        self._local = threading.local()
        if session is not None:
            self._configure(session)

    def _configure(self, session: requests.Session) -> requests.Session:
        session.headers.update({
            "User-Agent": self.user_agent,
            "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8",
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

    def fetch(self, region: str, url: str) -> Result[List[Item]]:
        """Fetch one endpoint. Never raises; failures come back as Failure."""
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            return Failure(f"{type(e).__name__}: {e}")

        feed = feedparser.parse(response.content)
        if feed.bozo and not feed.entries:
            reason = feed.get("bozo_exception") or "no entries"
            return Failure(f"Malformed feed: {reason}")
        if feed.bozo:
            logger.warning("Feed is not well formed, using parsed entries",
                           region=region, url=url,
                           error=str(feed.get("bozo_exception")))

        try:
            items = [
                normalize_entry(entry, feed.feed, region, url)
                for entry in feed.entries[: self.max_items]
            ]
        except (TypeError, ValueError, AttributeError) as e:
            return Failure(f"Cannot normalize entries: {e}")

        return Success(items)

    async def fetch_all(self, registry: SourceRegistry) -> Tuple[List[Item], int]:
        """Fetch every registry endpoint concurrently.

        Returns the combined items in registry order and the number of
        endpoints that failed.
        """
        semaphore = asyncio.Semaphore(self.settings.max_concurrent_fetches)

        async def fetch_one(region: str, url: str) -> Result[List[Item]]:
            async with semaphore:
                return await asyncio.to_thread(self.fetch, region, url)

        endpoints = list(registry.endpoints())
        results = await asyncio.gather(*[fetch_one(region, url) for region, url in endpoints])

        failed = 0
        combined: List[Item] = []
        for (region, url), result in zip(endpoints, results):
            if not result.ok:
                logger.error("Feed error", region=region, url=url, error=result.error)
                failed += 1
                continue
            logger.info("Fetched feed", region=region, url=url, items=len(result.value))
            combined.extend(result.value)
        return combined, failed
