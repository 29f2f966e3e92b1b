"""
Item summarization through a completion API with a deterministic fallback.
"""

from .completion_summarizer import CompletionSummarizer, fallback_summary

__all__ = ["CompletionSummarizer", "fallback_summary"]
