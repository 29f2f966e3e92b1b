"""
Shared fixtures: settings, RSS documents and item builders.
"""
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from unittest.mock import Mock

import pytest
import requests

from regwatch.core.config import Settings
from regwatch.core.models import Item

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def build_rss(channel_title, entries):
    """Render a minimal RSS 2.0 document.

    `entries` is a list of dicts with title/link/guid/pub_date/description keys.
    """
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0"><channel>',
        f"<title>{channel_title}</title>" if channel_title else "",
        "<link>https://example.test/</link>",
        "<description>fixture</description>",
    ]
    for entry in entries:
        parts.append("<item>")
        if entry.get("title") is not None:
            parts.append(f"<title>{entry['title']}</title>")
        if entry.get("link"):
            parts.append(f"<link>{entry['link']}</link>")
        if entry.get("guid"):
            parts.append(f'<guid isPermaLink="false">{entry["guid"]}</guid>')
        if entry.get("pub_date"):
            parts.append(f"<pubDate>{entry['pub_date']}</pubDate>")
        if entry.get("description"):
            parts.append(f"<description><![CDATA[{entry['description']}]]></description>")
        parts.append("</item>")
    parts.append("</channel></rss>")
    return "\n".join(parts).encode("utf-8")


def rfc822(moment):
    return format_datetime(moment, usegmt=True)


def http_response(content, status=200):
    """A requests-like response object for mocked sessions."""
    response = Mock()
    response.status_code = status
    response.content = content
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def make_settings(tmp_path):
    """Settings factory that ignores .env and leaves summarization off by default."""
    def factory(**overrides):
        values = {
            "openai_api_key": None,
            "feeds_path": str(tmp_path / "feeds.json"),
            "output_path": str(tmp_path / "out" / "news.json"),
            "log_dir": str(tmp_path / "logs"),
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return factory


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def make_item():
    """Item factory with sensible defaults."""
    def factory(**fields):
        values = {
            "title": "Regulator publishes guidance",
            "link": "https://example.test/a",
            "source": "Example Regulator",
            "region": "UK",
            "published_at": NOW - timedelta(days=1),
            "raw_snippet": "Snippet text.",
        }
        values.update(fields)
        return Item(**values)
    return factory
