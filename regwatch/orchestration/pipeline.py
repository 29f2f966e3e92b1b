"""
Main pipeline orchestrator for the regulatory feed aggregation system.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

import structlog

from ..core.config import Settings
from ..core.errors import RegistryError, RegwatchError
from ..core.models import Item, PipelineRun
from ..ingestion import FeedFetcher, load_registry
from ..processing import deduplicate, filter_recent, rank_by_recency
from ..publishing import JsonPublisher
from ..summarization import CompletionSummarizer
from ..tagging import Tagger

logger = structlog.get_logger(__name__)


class RegulatoryFeedPipeline:
    """Runs one batch pass: fetch, normalize, dedupe, filter, rank, summarize, tag, publish."""

    def __init__(
        self,
        settings: Settings,
        fetcher: Optional[FeedFetcher] = None,
        summarizer: Optional[CompletionSummarizer] = None,
        tagger: Optional[Tagger] = None,
        publisher: Optional[JsonPublisher] = None,
    ):
        self.settings = settings
        self.fetcher = fetcher or FeedFetcher(settings)
        self.summarizer = summarizer or CompletionSummarizer(settings)
        self.tagger = tagger or Tagger()
        self.publisher = publisher or JsonPublisher(settings.output_path)

    def run(self, now: Optional[datetime] = None, publish: bool = True) -> PipelineRun:
        """
        Execute the complete pipeline.

        Args:
            now: Reference time for the recency window. Defaults to the current time.
            publish: Write the artifact. False runs every stage but skips the write.

        Returns:
            PipelineRun: Results of the pipeline execution.
        """
        return asyncio.run(self.run_async(now=now, publish=publish))

    async def run_async(self, now: Optional[datetime] = None, publish: bool = True) -> PipelineRun:
        start_time = datetime.now(timezone.utc)
        now = now or start_time
        pipeline_run = PipelineRun(run_id=str(uuid.uuid4()), start_time=start_time)

        logger.info("Starting pipeline",
                    run_id=pipeline_run.run_id,
                    days_back=self.settings.days_back,
                    summarization=self.settings.summarization_enabled)

        try:
            # Step 1: Load the source registry
            registry = load_registry(self.settings.feeds_path)
            pipeline_run.endpoints = registry.endpoint_count

            # Step 2: Fetch and normalize every endpoint
            fetched, failed = await self.fetcher.fetch_all(registry)
            pipeline_run.fetched = len(fetched)
            pipeline_run.endpoints_failed = failed
            logger.info("Fetched items", items=len(fetched), endpoints_failed=failed)

            # Step 3: Deduplicate, keep the recency window, newest first
            items = self._select(fetched, now, pipeline_run)

            # Step 4: Summarize
            items = await self.summarizer.summarize_all(items)
            if self.settings.summarization_enabled:
                pipeline_run.summarized = min(len(items), self.settings.summarize_limit)

            # Step 5: Tag
            items = self.tagger.tag_all(items)
            pipeline_run.published = len(items)

            # Step 6: Publish
            if publish:
                path = self.publisher.publish(items, generated_at=datetime.now(timezone.utc))
                pipeline_run.output_path = str(path)
            else:
                logger.info("Dry run, artifact not written", items=len(items))

            pipeline_run.status = "completed"

        except RegwatchError as e:
            pipeline_run.status = "failed"
            pipeline_run.error_message = str(e)
            logger.error("Pipeline failed", run_id=pipeline_run.run_id, error=str(e))

        pipeline_run.end_time = datetime.now(timezone.utc)
        if pipeline_run.status == "completed":
            duration = (pipeline_run.end_time - pipeline_run.start_time).total_seconds()
            logger.info("Pipeline completed successfully",
                        run_id=pipeline_run.run_id,
                        duration_seconds=duration,
                        published=pipeline_run.published)
        return pipeline_run

    def _select(self, fetched: List[Item], now: datetime, pipeline_run: PipelineRun) -> List[Item]:
        deduped = deduplicate(fetched)
        pipeline_run.deduplicated = len(deduped)

        recent = filter_recent(deduped, self.settings.days_back, now=now)
        pipeline_run.recent = len(recent)
        logger.info("Selected items",
                    after_dedup=len(deduped),
                    within_window=len(recent))
        return rank_by_recency(recent)

    def health_check(self) -> Dict[str, bool]:
        """Check the components a run depends on."""
        status = {}
        try:
            load_registry(self.settings.feeds_path)
            status["source_registry"] = True
        except RegistryError as e:
            logger.error("Source registry check failed", error=str(e))
            status["source_registry"] = False

        status["artifact_output"] = self.publisher.health_check()
        status["summarization_credential"] = self.settings.summarization_enabled
        return status
