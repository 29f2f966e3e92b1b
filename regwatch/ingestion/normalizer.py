"""
Normalization of raw feed entries into canonical items.
"""

import calendar
import re
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

import structlog
from bs4 import BeautifulSoup

from ..core.models import Item, NO_TITLE
from ..core.results import Failure, Result, Success

logger = structlog.get_logger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")

# Structured fields are preferred over their free-text counterparts.
_STRUCTURED_DATE_FIELDS = ("published_parsed", "updated_parsed")
_TEXT_DATE_FIELDS = ("published", "updated")


def _from_struct_time(value: time.struct_time) -> datetime:
    return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)


def _from_text(value: str) -> datetime:
    value = value.strip()
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_timestamp(entry: Mapping[str, Any]) -> Result[datetime]:
    """Coerce the best available timestamp field of an entry to UTC."""
    for field in _STRUCTURED_DATE_FIELDS:
        value = entry.get(field)
        if value:
            try:
                return Success(_from_struct_time(value))
            except (TypeError, ValueError, OverflowError) as e:
                logger.debug("Unusable structured date", field=field, error=str(e))

    errors = []
    for field in _TEXT_DATE_FIELDS:
        value = entry.get(field)
        if value:
            try:
                return Success(_from_text(str(value)))
            except (TypeError, ValueError, OverflowError) as e:
                errors.append(f"{field} {value!r}: {e}")

    if errors:
        return Failure("Cannot parse " + "; ".join(errors))
    return Failure("No timestamp field present")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_snippet(entry: Mapping[str, Any]) -> str:
    """Best-effort plain-text excerpt of an entry."""
    text = entry.get("summary") or entry.get("description") or ""
    if not text:
        content = entry.get("content") or []
        if content:
            first = content[0]
            text = first.get("value", "") if isinstance(first, Mapping) else str(first)
    if not text:
        return ""
    if "<" in text:
        text = BeautifulSoup(text, "html.parser").get_text(" ")
    return collapse_whitespace(text)


def source_name(feed_meta: Mapping[str, Any], url: str) -> str:
    """Feed-declared title, falling back to the endpoint hostname."""
    title = collapse_whitespace(str(feed_meta.get("title") or ""))
    return title or (urlparse(url).hostname or url)


def normalize_entry(
    entry: Mapping[str, Any],
    feed_meta: Mapping[str, Any],
    region: str,
    url: str,
) -> Item:
    """Map a raw feed entry to an Item."""
    title = str(entry.get("title") or "").strip() or NO_TITLE
    link: Optional[str] = (entry.get("link") or "").strip() or None
    guid: Optional[str] = (entry.get("id") or "").strip() or None

    timestamp = parse_timestamp(entry)
    if not timestamp.ok:
        logger.debug("Timestamp unavailable", region=region, link=link, reason=timestamp.error)

    return Item(
        title=title,
        link=link,
        guid=guid,
        source=source_name(feed_meta, url),
        region=region,
        published_at=timestamp.unwrap_or(None),
        raw_snippet=extract_snippet(entry),
    )
