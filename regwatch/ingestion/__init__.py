"""
Feed ingestion: source registry, fetching, and entry normalization.
"""

from .registry import SourceRegistry, load_registry
from .feed_fetcher import FeedFetcher
from .normalizer import normalize_entry, parse_timestamp, extract_snippet

__all__ = [
    "SourceRegistry", "load_registry",
    "FeedFetcher",
    "normalize_entry", "parse_timestamp", "extract_snippet",
]
