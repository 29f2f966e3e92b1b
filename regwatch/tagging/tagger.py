"""
Categorical tagging of items by host, title and source name.
"""

from typing import Dict, Iterable, List, Optional, Sequence
from urllib.parse import urlparse

import structlog

from ..core.models import Item
from .rules import HOST_RULES, REGION_PREFERRED_TAGS, SOURCE_RULES, TITLE_RULES, HostRule, KeywordRule

logger = structlog.get_logger(__name__)


def link_hostname(link: Optional[str]) -> str:
    """Lowercased hostname of a link without a leading www., or '' if unparseable."""
    if not link:
        return ""
    try:
        host = urlparse(link).hostname or ""
    except ValueError:
        return ""
    if host.startswith("www."):
        host = host[4:]
    return host


class Tagger:
    """Applies host, title-keyword and source-name rules cumulatively."""

    def __init__(
        self,
        host_rules: Sequence[HostRule] = HOST_RULES,
        title_rules: Sequence[KeywordRule] = TITLE_RULES,
        source_rules: Sequence[KeywordRule] = SOURCE_RULES,
    ):
        self.host_rules = list(host_rules)
        self.title_rules = list(title_rules)
        self.source_rules = list(source_rules)

    def host_tags(self, hostname: str) -> List[str]:
        tags: List[str] = []
        if not hostname:
            return tags
        for rule in self.host_rules:
            if rule.matches(hostname):
                tags.extend(rule.tags)
        return tags

    def tags_for(self, item: Item) -> List[str]:
        tags = self.host_tags(link_hostname(item.link))

        title = item.title or ""
        for rule in self.title_rules:
            if rule.matches(title):
                tags.extend(rule.tags)

        source = item.source or ""
        for rule in self.source_rules:
            if rule.matches(source):
                tags.extend(rule.tags)

        return list(dict.fromkeys(tags))

    def tag_all(self, items: Iterable[Item]) -> List[Item]:
        tagged = [item.model_copy(update={"tags": self.tags_for(item)}) for item in items]
        logger.info("Tagged items",
                    items=len(tagged),
                    untagged=sum(1 for item in tagged if not item.tags))
        return tagged


def tag_vocabulary(items: Iterable[Dict], region: str) -> List[str]:
    """Tag filter choices for one region of a published feed.

    Regions with a preferred vocabulary use it; others list the tags that
    occur on that region's items.
    """
    preferred = REGION_PREFERRED_TAGS.get(region)
    if preferred:
        return list(preferred)
    observed = set()
    for item in items:
        if item.get("region") != region:
            continue
        for tag in item.get("tags") or []:
            observed.add(tag)
    return sorted(observed)
