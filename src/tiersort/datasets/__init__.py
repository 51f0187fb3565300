"""
Datasets package public API.

Re-export the label generators and item ingestion so callers can write:
    from tiersort.datasets import make_dataset, parse_items, SUPPORTED_DISTS
"""

from .generators import SUPPORTED_DISTS, make_dataset, make_label
from .ingest import parse_items, read_items, unique_labels

__all__ = [
    "SUPPORTED_DISTS",
    "make_dataset",
    "make_label",
    "parse_items",
    "read_items",
    "unique_labels",
]
