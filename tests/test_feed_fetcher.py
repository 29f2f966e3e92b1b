"""
Tests for per-endpoint fetching and failure isolation.
"""
import asyncio
import threading
from datetime import timedelta
from unittest.mock import Mock, patch

import pytest
import requests

from regwatch.ingestion.feed_fetcher import FeedFetcher
from regwatch.ingestion.registry import SourceRegistry
from conftest import NOW, build_rss, http_response, rfc822

HEALTHY_URL = "https://healthy.test/rss"
BROKEN_URL = "https://broken.test/rss"


def healthy_feed(count=3):
    return build_rss("Healthy Regulator", [
        {
            "title": f"Notice {i}",
            "link": f"https://healthy.test/notice-{i}",
            "pub_date": rfc822(NOW - timedelta(days=i)),
            "description": f"Notice number {i}.",
        }
        for i in range(count)
    ])


def routed_session(routes):
    """A mocked session whose GET answers per URL; values may be exceptions."""
    session = Mock()
    session.headers = {}

    def get(url, timeout=None):
        outcome = routes[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    session.get.side_effect = get
    return session


class TestFetch:

    def test_healthy_feed(self, settings):
        fetcher = FeedFetcher(settings, session=routed_session({HEALTHY_URL: http_response(healthy_feed())}))
        result = fetcher.fetch("US", HEALTHY_URL)

        assert result.ok
        assert [item.title for item in result.value] == ["Notice 0", "Notice 1", "Notice 2"]
        assert all(item.region == "US" for item in result.value)
        assert result.value[0].source == "Healthy Regulator"

    def test_entries_capped_per_endpoint(self, make_settings):
        settings = make_settings(max_items_per_feed=2)
        fetcher = FeedFetcher(settings, session=routed_session({HEALTHY_URL: http_response(healthy_feed(5))}))
        assert len(fetcher.fetch("US", HEALTHY_URL).value) == 2

    def test_malformed_feed_is_failure(self, settings):
        fetcher = FeedFetcher(settings, session=routed_session({BROKEN_URL: http_response(b"<<<this is not a feed")}))
        result = fetcher.fetch("US", BROKEN_URL)
        assert not result.ok
        assert "Malformed" in result.error

    def test_http_error_is_failure(self, settings):
        fetcher = FeedFetcher(settings, session=routed_session({BROKEN_URL: http_response(b"", status=503)}))
        result = fetcher.fetch("US", BROKEN_URL)
        assert not result.ok
        assert "HTTPError" in result.error

    def test_timeout_is_failure(self, settings):
        fetcher = FeedFetcher(settings, session=routed_session({BROKEN_URL: requests.Timeout("timed out")}))
        result = fetcher.fetch("US", BROKEN_URL)
        assert not result.ok
        assert "Timeout" in result.error

    def test_user_agent_set(self, make_settings):
        session = routed_session({})
        FeedFetcher(make_settings(user_agent="tester/2"), session=session)
        assert session.headers["User-Agent"] == "tester/2"

    def test_each_worker_thread_gets_its_own_session(self, make_settings):
        fetcher = FeedFetcher(make_settings(user_agent="tester/3"))
        seen = []

        with patch("regwatch.ingestion.feed_fetcher.requests.Session", side_effect=lambda: Mock(headers={})):
            seen.append(fetcher.session)
            seen.append(fetcher.session)
            worker = threading.Thread(target=lambda: seen.append(fetcher.session))
            worker.start()
            worker.join()

        assert seen[0] is seen[1]
        assert seen[2] is not seen[0]
        assert all(s.headers["User-Agent"] == "tester/3" for s in seen)


class TestFetchAll:

    def test_broken_endpoint_does_not_reduce_healthy_items(self, settings):
        """Fetch isolation: one malformed endpoint, one healthy endpoint."""
        healthy_only = FeedFetcher(settings, session=routed_session({
            HEALTHY_URL: http_response(healthy_feed()),
        }))
        alone, _ = asyncio.run(healthy_only.fetch_all(SourceRegistry(regions={"US": [HEALTHY_URL]})))

        fetcher = FeedFetcher(settings, session=routed_session({
            BROKEN_URL: http_response(b"<<<this is not a feed"),
            HEALTHY_URL: http_response(healthy_feed()),
        }))
        registry = SourceRegistry(regions={"EU": [BROKEN_URL], "US": [HEALTHY_URL]})
        items, failed = asyncio.run(fetcher.fetch_all(registry))

        assert failed == 1
        assert len(items) == len(alone) == 3
        assert {item.region for item in items} == {"US"}

    def test_results_follow_registry_order(self, settings):
        second = build_rss("Second", [{"title": "S", "link": "https://second.test/s",
                                       "pub_date": rfc822(NOW)}])
        fetcher = FeedFetcher(settings, session=routed_session({
            HEALTHY_URL: http_response(healthy_feed(1)),
            "https://second.test/rss": http_response(second),
        }))
        registry = SourceRegistry(regions={"UK": ["https://second.test/rss"], "US": [HEALTHY_URL]})
        items, failed = asyncio.run(fetcher.fetch_all(registry))

        assert failed == 0
        assert [item.region for item in items] == ["UK", "US"]

    def test_empty_but_valid_feed_is_not_a_failure(self, settings):
        fetcher = FeedFetcher(settings, session=routed_session({
            HEALTHY_URL: http_response(build_rss("Empty", [])),
        }))
        items, failed = asyncio.run(fetcher.fetch_all(SourceRegistry(regions={"US": [HEALTHY_URL]})))
        assert items == []
        assert failed == 0
