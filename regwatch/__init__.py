"""
Regulatory Feed Aggregation & Tagging System

A batch pipeline that collects regulatory and compliance news feeds across
jurisdictions, summarizes and tags each item, and publishes a static JSON feed.
"""

__version__ = "1.0.0"
__author__ = "Regwatch"
