"""
Collection-level processing: deduplication, recency filtering, ranking.
"""

from .deduplicator import deduplicate, identity_key
from .recency_filter import filter_recent, is_recent
from .ranker import rank_by_recency

__all__ = ["deduplicate", "identity_key", "filter_recent", "is_recent", "rank_by_recency"]
