"""
Data models for the regulatory feed pipeline.
"""

from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


NO_TITLE = "(no title)"


def to_iso(value: datetime) -> str:
    """Render a datetime as a UTC ISO-8601 string with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Item(BaseModel):
    """One normalized news or regulatory entry."""

    model_config = ConfigDict(frozen=True)

    title: str = NO_TITLE
    link: Optional[str] = None
    guid: Optional[str] = None
    source: str
    region: str
    published_at: Optional[datetime] = None
    raw_snippet: str = ""
    summary: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        return value or NO_TITLE

    @field_validator("published_at")
    @classmethod
    def _aware_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


def published_link(item: Item) -> str:
    """The link, else a guid that is itself an http(s) URL, else an empty string."""
    if item.link:
        return item.link
    guid = item.guid or ""
    if guid.startswith(("http://", "https://")):
        return guid
    return ""


class PublishedItem(BaseModel):
    """An item as it appears in the published artifact."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    link: str = ""
    source: str
    published_at: datetime = Field(alias="publishedAt")
    region: str
    summary: str = Field(min_length=1)
    tags: List[str] = Field(default_factory=list)

    @field_serializer("published_at")
    def _serialize_published_at(self, value: datetime) -> str:
        return to_iso(value)

    @classmethod
    def from_item(cls, item: Item) -> "PublishedItem":
        return cls(
            title=item.title,
            link=published_link(item),
            source=item.source,
            published_at=item.published_at,
            region=item.region,
            summary=item.summary,
            tags=list(item.tags),
        )


class FeedArtifact(BaseModel):
    """The JSON document consumed by the browser listing."""

    model_config = ConfigDict(populate_by_name=True)

    generated_at: datetime = Field(alias="generatedAt")
    items: List[PublishedItem] = Field(default_factory=list)

    @field_serializer("generated_at")
    def _serialize_generated_at(self, value: datetime) -> str:
        return to_iso(value)


class PipelineRun(BaseModel):
    """Pipeline execution tracking."""
    run_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    status: str = "running"  # running, completed, failed

    endpoints: int = 0
    endpoints_failed: int = 0
    fetched: int = 0
    deduplicated: int = 0
    recent: int = 0
    summarized: int = 0
    published: int = 0

    output_path: Optional[str] = None
    error_message: Optional[str] = None
