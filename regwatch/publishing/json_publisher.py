"""JSON feed publisher for the browser listing."""

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

import structlog

from ..core.errors import PublishError
from ..core.models import FeedArtifact, Item, PublishedItem

logger = structlog.get_logger(__name__)


class JsonPublisher:
    """Publisher that writes the feed artifact as a single JSON file."""

    def __init__(self, output_path: Union[str, Path] = "news.json"):
        """Initialize the JSON publisher.

        Args:
            output_path: Artifact location (default: "news.json")
        """
        self.output_path = Path(output_path)

    def health_check(self) -> bool:
        """Check if the output directory is writable."""
        try:
            directory = self.output_path.parent
            directory.mkdir(parents=True, exist_ok=True)
            test_file = directory / ".test_write"
            test_file.write_text("test")
            test_file.unlink()
            logger.info("JSON publisher health check passed", directory=str(directory))
            return True
        except OSError as e:
            logger.error("JSON publisher health check failed", error=str(e))
            return False

    def build_artifact(self, items: List[Item], generated_at: Optional[datetime] = None) -> FeedArtifact:
        """Strip transient fields and wrap items with the generation time."""
        return FeedArtifact(
            generated_at=generated_at or datetime.now(timezone.utc),
            items=[PublishedItem.from_item(item) for item in items],
        )

    def render(self, artifact: FeedArtifact) -> str:
        return json.dumps(artifact.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)

    def publish(self, items: List[Item], generated_at: Optional[datetime] = None) -> Path:
        """Write the artifact, replacing any previous one.

        Args:
            items: Summarized and tagged items in publication order
            generated_at: Run timestamp; defaults to now

        Returns:
            Path of the written artifact

        Raises:
            PublishError: if the artifact cannot be written. The previous
                artifact is left untouched.
        """
        content = self.render(self.build_artifact(items, generated_at))

        tmp_name = None
        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.output_path.parent,
                prefix=f".{self.output_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(content)
            os.replace(tmp_name, self.output_path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PublishError(f"Cannot write artifact {self.output_path}: {e}") from e

        logger.info("Wrote feed artifact", path=str(self.output_path), items=len(items))
        return self.output_path
