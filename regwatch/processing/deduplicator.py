"""
Identity-key deduplication of fetched items.
"""

from typing import Iterable, List, Optional

import structlog

from ..core.models import Item, NO_TITLE

logger = structlog.get_logger(__name__)


def identity_key(item: Item) -> Optional[str]:
    """Link, else feed guid, else title. The placeholder title is not a key."""
    if item.link:
        return item.link
    if item.guid:
        return item.guid
    if item.title and item.title != NO_TITLE:
        return item.title
    return None


def deduplicate(items: Iterable[Item]) -> List[Item]:
    """Keep the first item seen for each identity key, in input order."""
    seen = set()
    kept: List[Item] = []
    dropped_keyless = 0

    for item in items:
        key = identity_key(item)
        if key is None:
            dropped_keyless += 1
            continue
        if key in seen:
            continue
        seen.add(key)
        kept.append(item)

    if dropped_keyless:
        logger.warning("Dropped items without an identity key", count=dropped_keyless)
    return kept
