"""Utility modules for the nightlife scraper.

Provides shared utilities for:
- HTML reduction before extraction
- Event deduplication against the store
"""

from nightlife_scraper.utils.deduplication import EventReconciler, batched, event_key, normalize_text
from nightlife_scraper.utils.html_reducer import MAX_HTML_LENGTH, is_data_script, reduce_html

__all__ = [
    "EventReconciler",
    "MAX_HTML_LENGTH",
    "batched",
    "event_key",
    "is_data_script",
    "normalize_text",
    "reduce_html",
]
