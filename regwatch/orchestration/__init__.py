"""
Pipeline orchestration module for the regulatory feed system.
"""

from .pipeline import RegulatoryFeedPipeline

__all__ = ["RegulatoryFeedPipeline"]
