"""
Publishing of the static JSON feed artifact.
"""

from .json_publisher import JsonPublisher

__all__ = ["JsonPublisher"]
