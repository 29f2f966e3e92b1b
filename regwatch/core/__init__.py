"""
Core module for the regulatory feed pipeline.
"""

from .config import Settings, load_settings
from .errors import RegwatchError, RegistryError, PublishError
from .models import Item, PublishedItem, FeedArtifact, PipelineRun
from .results import Success, Failure, Result

__all__ = [
    "Settings", "load_settings",
    "RegwatchError", "RegistryError", "PublishError",
    "Item", "PublishedItem", "FeedArtifact", "PipelineRun",
    "Success", "Failure", "Result",
]
