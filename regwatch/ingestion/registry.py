"""
Source registry: region label to ordered feed endpoint URLs.
"""

import json
from pathlib import Path
from typing import Dict, Iterator, List, Tuple, Union
from urllib.parse import urlparse

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..core.errors import RegistryError

logger = structlog.get_logger(__name__)


class SourceRegistry(BaseModel):
    """Static mapping of region label to feed URLs, in configured order."""

    model_config = ConfigDict(frozen=True)

    regions: Dict[str, List[str]]

    @field_validator("regions")
    @classmethod
    def _clean_regions(cls, value: Dict[str, List[str]]) -> Dict[str, List[str]]:
        cleaned = {}
        for region, urls in value.items():
            region = region.strip()
            if not region:
                raise ValueError("region label must not be empty")
            cleaned[region] = [url.strip() for url in urls if url and url.strip()]
        return cleaned

    def endpoints(self) -> Iterator[Tuple[str, str]]:
        """Yield (region, url) pairs in registry order."""
        for region, urls in self.regions.items():
            for url in urls:
                yield region, url

    @property
    def endpoint_count(self) -> int:
        return sum(len(urls) for urls in self.regions.values())

    def invalid_urls(self) -> List[Tuple[str, str]]:
        """Return (region, url) pairs that are not absolute http(s) URLs."""
        invalid = []
        for region, url in self.endpoints():
            parsed = urlparse(url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                invalid.append((region, url))
        return invalid


def load_registry(path: Union[str, Path]) -> SourceRegistry:
    """Read the registry file. Any failure is fatal for the run."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise RegistryError(f"Cannot read source registry {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise RegistryError(f"Source registry {path} is not valid JSON: {e}") from e

    try:
        registry = SourceRegistry(regions=raw)
    except ValidationError as e:
        raise RegistryError(f"Source registry {path} has the wrong shape: {e}") from e

    logger.info("Loaded source registry",
                path=str(path),
                regions=len(registry.regions),
                endpoints=registry.endpoint_count)
    return registry
