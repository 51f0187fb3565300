"""
Turn pasted text or a text file into a list of unique labels.

One label per line. Surrounding whitespace is trimmed, blank lines are
skipped and repeated labels keep only their first occurrence, so the result
satisfies the engine's uniqueness precondition.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

__all__ = ["parse_items", "read_items", "unique_labels"]


def unique_labels(labels: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for label in labels:
        if label in seen:
            continue
        seen.add(label)
        out.append(label)
    return out


def parse_items(text: str) -> List[str]:
    return unique_labels(line.strip() for line in text.splitlines() if line.strip())


def read_items(path: Path) -> List[str]:
    with Path(path).open("r", encoding="utf-8") as f:
        return parse_items(f.read())
