"""
Saved-list store: one JSON document per sorted list, in a directory.

The sort engine never persists anything itself; this is the document store
the CLI hands finished results to. Documents are keyed by an opaque id and
owned by an opaque user id.

Public API (stable):
    ListStore(root).create(doc) -> SortedList
    ListStore(root).get(list_id) -> SortedList
    ListStore(root).update(doc) -> SortedList
    ListStore(root).delete(list_id) -> None
    ListStore(root).list_by_owner(user_id) -> list[SortedList]

Conventions:
- Timestamps are epoch milliseconds.
- `get`, `update` and `delete` raise KeyError for an unknown id.
- `list_by_owner` returns newest first (by created_at) and skips, with a
  warning, any file in the directory that is not a readable saved list.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from tiersort.tiers.partition import TierGroup

log = logging.getLogger(__name__)

__all__ = ["ListStore", "SortedList", "now_ms"]


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class SortedList:
    list_name: str
    items: List[str]
    user_id: str
    sorted_items: Optional[List[str]] = None
    tiered_items: Optional[List[TierGroup]] = None
    completed: bool = False
    id: str = ""
    created_at: int = 0
    completed_at: Optional[int] = None
    updated_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SortedList":
        required = ["id", "list_name", "items", "completed", "created_at", "user_id", "updated_at"]
        missing = [k for k in required if k not in data]
        if missing:
            raise ValueError(f"Saved list is missing required keys: {missing}")
        tiered = data.get("tiered_items", None)
        return cls(
            id=str(data["id"]),
            list_name=str(data["list_name"]),
            items=[str(x) for x in data["items"]],
            sorted_items=None if data.get("sorted_items") is None else [str(x) for x in data["sorted_items"]],
            tiered_items=None if tiered is None else [TierGroup.from_dict(g) for g in tiered],
            completed=bool(data["completed"]),
            created_at=int(data["created_at"]),
            completed_at=None if data.get("completed_at") is None else int(data["completed_at"]),
            user_id=str(data["user_id"]),
            updated_at=int(data["updated_at"]),
        )


class ListStore:
    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def create(self, doc: SortedList) -> SortedList:
        """Assign an id and timestamps, write the document, return the stored copy."""
        stamp = now_ms()
        stored = replace(
            doc,
            id=doc.id or uuid.uuid4().hex,
            created_at=doc.created_at or stamp,
            updated_at=stamp,
        )
        if stored.completed and stored.completed_at is None:
            stored.completed_at = stamp
        path = self._path(stored.id)
        if path.exists():
            raise ValueError(f"Saved list already exists: {stored.id}")
        self._write(stored)
        log.info("created list %s (%s) for %s", stored.id, stored.list_name, stored.user_id)
        return stored

    def get(self, list_id: str) -> SortedList:
        path = self._path(list_id)
        if not path.exists():
            raise KeyError(list_id)
        with path.open("r", encoding="utf-8") as f:
            return SortedList.from_dict(json.load(f))

    def update(self, doc: SortedList) -> SortedList:
        if not doc.id or not self._path(doc.id).exists():
            raise KeyError(doc.id)
        stored = replace(doc, updated_at=now_ms())
        if stored.completed and stored.completed_at is None:
            stored.completed_at = stored.updated_at
        self._write(stored)
        log.info("updated list %s", stored.id)
        return stored

    def delete(self, list_id: str) -> None:
        path = self._path(list_id)
        if not path.exists():
            raise KeyError(list_id)
        path.unlink()
        log.info("deleted list %s", list_id)

    def list_by_owner(self, user_id: str) -> List[SortedList]:
        out: List[SortedList] = []
        for path in sorted(self.root.glob("*.json")):
            try:
                with path.open("r", encoding="utf-8") as f:
                    doc = SortedList.from_dict(json.load(f))
            except (ValueError, KeyError, TypeError) as e:
                log.warning("skipping unreadable saved list %s: %r", path.name, e)
                continue
            if doc.user_id == user_id:
                out.append(doc)
        out.sort(key=lambda d: d.created_at, reverse=True)
        return out

    # ------------------------- helpers ------------------------- #

    def _path(self, list_id: str) -> Path:
        if not list_id or "/" in list_id or "\\" in list_id or list_id.startswith("."):
            raise ValueError(f"Invalid list id: {list_id!r}")
        return self.root / f"{list_id}.json"

    def _write(self, doc: SortedList) -> None:
        path = self._path(doc.id)
        tmp = path.with_suffix(".json.tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(doc.to_dict(), f, indent=2, ensure_ascii=False)
        tmp.replace(path)
