"""
Item tagging by link host, title keywords and source name.
"""

from .tagger import Tagger, link_hostname, tag_vocabulary

__all__ = ["Tagger", "link_hostname", "tag_vocabulary"]
