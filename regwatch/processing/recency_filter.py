"""
Trailing-window recency filter.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from ..core.models import Item


def is_recent(item: Item, cutoff: datetime) -> bool:
    return item.published_at is not None and item.published_at >= cutoff


def filter_recent(
    items: Iterable[Item],
    days: int,
    now: Optional[datetime] = None,
) -> List[Item]:
    """Keep items published within the last `days` days of `now`.

    Items without a timestamp are always excluded.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days)
    return [item for item in items if is_recent(item, cutoff)]
