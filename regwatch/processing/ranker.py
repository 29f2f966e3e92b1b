"""
Recency ranking.
"""

from typing import Iterable, List

from ..core.models import Item


def rank_by_recency(items: Iterable[Item]) -> List[Item]:
    """Most recent first. Ties keep their incoming order."""
    return sorted(items, key=lambda item: item.published_at, reverse=True)
