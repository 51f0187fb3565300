"""
Saved-list storage public API.

    from tiersort.store import ListStore, SortedList
"""

from .lists import ListStore, SortedList, now_ms

__all__ = ["ListStore", "SortedList", "now_ms"]
