"""
Configuration management for the regulatory feed pipeline.
"""

from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    # Recency window and per-run caps
    days_back: int = Field(14, ge=1, alias="DAYS_BACK")
    max_items_per_feed: int = Field(30, ge=0, alias="MAX_ITEMS_PER_FEED")
    summarize_limit: int = Field(60, ge=0, alias="SUMMARIZE_LIMIT")

    # Completion API configuration
    openai_api_key: Optional[str] = Field(None, alias="OPENAI_API_KEY")
    openai_model: str = Field("gpt-4o-mini", alias="OPENAI_MODEL")
    openai_base_url: str = Field("https://api.openai.com/v1", alias="OPENAI_BASE_URL")

    # Transport
    fetch_timeout_seconds: float = Field(20, gt=0, alias="FETCH_TIMEOUT_SECONDS")
    summary_timeout_seconds: float = Field(30, gt=0, alias="SUMMARY_TIMEOUT_SECONDS")
    max_concurrent_fetches: int = Field(8, ge=1, alias="MAX_CONCURRENT_FETCHES")
    max_concurrent_summaries: int = Field(8, ge=1, alias="MAX_CONCURRENT_SUMMARIES")
    user_agent: str = Field("regwatch/1.0", alias="USER_AGENT")

    # Input and output paths
    feeds_path: str = Field("config/feeds.json", alias="FEEDS_PATH")
    output_path: str = Field("news.json", alias="OUTPUT_PATH")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_dir: str = Field("logs", alias="LOG_DIR")

    @property
    def summarization_enabled(self) -> bool:
        """True when a completion credential is configured."""
        return bool(self.openai_api_key and self.openai_api_key.strip())

    @property
    def logs_dir(self) -> Path:
        """Get the logs directory."""
        return Path(self.log_dir)


def load_settings(**overrides) -> Settings:
    """Load settings from the environment, applying explicit overrides.

    Overrides whose value is None are ignored so CLI flags that were not
    given fall through to the environment.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**values)
