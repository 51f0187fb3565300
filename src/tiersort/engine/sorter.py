"""
Comparison-driven sort engine.

Sorts opaque string labels with a comparator that is a person, not a function.
Two modes:

- Full sort: top-down stable merge sort over `items`.
- Incremental sort: each label of `items` missing from `already_sorted` is
  binary-searched (partition point) into a copy of `already_sorted`.

Every comparison first checks a per-run decision cache. On a miss the engine
publishes the pair as `SortState.current_pair` and suspends the algorithm on
an asyncio future until `submit_comparison` answers it. Only one comparison is
ever pending.

Public API (stable):
    SortEngine.start_sort(items, already_sorted=None) -> list[str]     (coroutine)
    SortEngine.submit_comparison(item_a, item_b, decision) -> None
    SortEngine.cancel_sort() -> None
    SortEngine.state -> SortState
    SortEngine.subscribe(listener) -> Callable[[], None]
    run_with_oracle(engine, items, oracle, already_sorted=None) -> list[str]  (coroutine)

Conventions:
- Ordering values: -1 means the first label goes first, +1 the second, 0 equal.
- One engine instance runs one sort at a time. `start_sort` on an active
  engine raises SortInProgressError; the active run is left untouched.
- `cancel_sort` resolves the outstanding `start_sort` with [] and cancels the
  algorithm task. The pending comparison future is cancelled along with it.
- `total_comparisons` is an estimate. On natural completion the engine forces
  progress=100 and completed_comparisons=total_comparisons.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

log = logging.getLogger(__name__)

__all__ = [
    "ComparisonMismatchError",
    "ComparisonPair",
    "Decision",
    "SortEngine",
    "SortInProgressError",
    "SortState",
    "comparison_key",
    "estimate_comparisons",
    "run_with_oracle",
]


class SortInProgressError(RuntimeError):
    """Raised when `start_sort` is called on an engine that is already sorting."""


class ComparisonMismatchError(ValueError):
    """Raised when a decision arrives with nothing pending, or for another pair."""


class Decision(str, Enum):
    """Answer to one comparison, relative to the order the pair was submitted in."""

    A = "A"
    B = "B"
    EQUAL = "Equal"

    @property
    def ordering(self) -> int:
        if self is Decision.A:
            return -1
        if self is Decision.B:
            return 1
        return 0


@dataclass(frozen=True)
class ComparisonPair:
    item_a: str
    item_b: str

    @property
    def key(self) -> Tuple[str, str]:
        return comparison_key(self.item_a, self.item_b)


@dataclass(frozen=True)
class SortState:
    is_active: bool = False
    current_pair: Optional[ComparisonPair] = None
    progress: int = 0
    total_comparisons: int = 0
    completed_comparisons: int = 0


IDLE_STATE = SortState()

Listener = Callable[[SortState], None]
Oracle = Callable[[str, str], Union[Decision, str]]


def comparison_key(item_a: str, item_b: str) -> Tuple[str, str]:
    """Order-independent cache key for the unordered pair {item_a, item_b}."""
    return (item_a, item_b) if item_a <= item_b else (item_b, item_a)


def estimate_comparisons(n_items: int, n_sorted: int = 0) -> int:
    """
    Heuristic number of comparisons a run will ask, for progress reporting.

    Parameters
    ----------
    n_items : int
        Full sort: number of labels. Incremental: number of *new* labels.
    n_sorted : int
        Length of the already-sorted base list (0 selects the full-sort formula).

    Returns
    -------
    int
        ceil(n * log2(n)) for a full sort, n_new * ceil(log2(n_sorted + 1)) for
        an incremental one. Not a bound in either direction.
    """
    if n_sorted > 0:
        return n_items * math.ceil(math.log2(n_sorted + 1))
    if n_items < 2:
        return 0
    return math.ceil(n_items * math.log2(n_items))


def _percent(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    # half-up, not banker's rounding
    return int(math.floor(100 * completed / total + 0.5))


def _orient(value: int, item_a: str, item_b: str) -> int:
    # Converts between "relative to (item_a, item_b)" and "relative to the
    # canonical key order". The mapping is its own inverse.
    return value if item_a <= item_b else -value


class SortEngine:
    """
    Interactive sort session. Construct one per sorting UI/session.

    Callers observe the engine through `state` (poll) or `subscribe` (push);
    every transition publishes exactly one new frozen SortState. Cache hits
    publish nothing. An exception raised by a listener is logged and does not
    interrupt the transition or the other listeners.
    """

    def __init__(self) -> None:
        self._state: SortState = IDLE_STATE
        self._listeners: List[Listener] = []
        self._cache: Dict[Tuple[str, str], int] = {}
        self._pending: Optional[ComparisonPair] = None
        self._pending_future: Optional[asyncio.Future] = None
        self._result: Optional[asyncio.Future] = None
        self._task: Optional[asyncio.Task] = None

    # ------------------------- observation ------------------------- #

    @property
    def state(self) -> SortState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener` for every published state; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, state: SortState) -> None:
        self._state = state
        for listener in list(self._listeners):
            # A failing listener must not leave a transition half applied.
            try:
                listener(state)
            except Exception:
                log.exception("state listener %r failed", listener)

    # ------------------------- entry points ------------------------- #

    async def start_sort(
        self,
        items: Sequence[str],
        already_sorted: Optional[Sequence[str]] = None,
    ) -> List[str]:
        """
        Sort `items`, asking for every decision not already cached in this run.

        With a non-empty `already_sorted`, only labels of `items` absent from it
        are inserted (incremental mode). Returns [] if the run is cancelled.
        Inputs shorter than two labels, or with nothing new to insert, return
        immediately without activating the engine.
        """
        if self._state.is_active:
            raise SortInProgressError("a sort run is already active on this engine")

        items = list(items)
        base = list(already_sorted) if already_sorted else []

        if base:
            known = set(base)
            new_items = [x for x in items if x not in known]
            if not new_items:
                return base
            total = estimate_comparisons(len(new_items), len(base))
        else:
            if len(items) < 2:
                return items
            new_items = []
            total = estimate_comparisons(len(items))

        loop = asyncio.get_running_loop()
        result: asyncio.Future = loop.create_future()
        self._cache = {}
        self._result = result
        log.debug(
            "sort started: items=%d already_sorted=%d new=%d estimate=%d",
            len(items), len(base), len(new_items), total,
        )
        self._publish(SortState(is_active=True, total_comparisons=total))
        self._task = loop.create_task(self._run(result, items, base, new_items))

        try:
            return await result
        except asyncio.CancelledError:
            if self._result is result:
                self.cancel_sort()
            raise

    def submit_comparison(
        self,
        item_a: str,
        item_b: str,
        decision: Union[Decision, str],
    ) -> None:
        """
        Answer the pending comparison and resume the suspended sort.

        `decision` is relative to (item_a, item_b); the pair may be submitted
        in either order.

        Raises
        ------
        ComparisonMismatchError
            If nothing is pending or {item_a, item_b} is not the pending pair.
        ValueError
            If `decision` is not a Decision value.
        """
        pending, future = self._pending, self._pending_future
        if pending is None or future is None:
            raise ComparisonMismatchError("no comparison is pending")
        if comparison_key(item_a, item_b) != pending.key:
            raise ComparisonMismatchError(
                f"decision for ({item_a!r}, {item_b!r}) does not match pending pair "
                f"({pending.item_a!r}, {pending.item_b!r})"
            )
        value = Decision(decision).ordering

        canonical = _orient(value, item_a, item_b)
        self._cache[pending.key] = canonical
        self._pending = None
        self._pending_future = None

        completed = self._state.completed_comparisons + 1
        self._publish(
            replace(
                self._state,
                current_pair=None,
                completed_comparisons=completed,
                progress=_percent(completed, self._state.total_comparisons),
            )
        )
        if not future.done():
            future.set_result(_orient(canonical, pending.item_a, pending.item_b))

    def cancel_sort(self) -> None:
        """Reset to the idle state and resolve the outstanding sort with []."""
        result, task = self._result, self._task
        self._teardown(IDLE_STATE)
        if result is not None and not result.done():
            result.set_result([])
        if task is not None and not task.done():
            task.cancel()
        log.debug("sort cancelled")

    # ------------------------- algorithm ------------------------- #

    async def _run(
        self,
        result: asyncio.Future,
        items: List[str],
        base: List[str],
        new_items: List[str],
    ) -> None:
        try:
            if base:
                ordered = await self._insert_all(base, new_items)
            else:
                ordered = await self._merge_sort(items)
        except Exception as exc:
            log.debug("sort failed: %r", exc)
            if self._result is result:
                self._teardown(IDLE_STATE)
            if not result.done():
                result.set_exception(exc)
            return

        total = self._state.total_comparisons
        self._teardown(
            SortState(
                is_active=False,
                progress=100,
                total_comparisons=total,
                completed_comparisons=total,
            )
        )
        log.debug("sort finished: %d labels", len(ordered))
        if not result.done():
            result.set_result(ordered)

    async def _merge_sort(self, items: List[str]) -> List[str]:
        if len(items) <= 1:
            return items
        mid = len(items) // 2
        left = await self._merge_sort(items[:mid])
        right = await self._merge_sort(items[mid:])
        return await self._merge(left, right)

    async def _merge(self, left: List[str], right: List[str]) -> List[str]:
        out: List[str] = []
        i = j = 0
        while i < len(left) and j < len(right):
            # Ties take the left head, which keeps the merge stable.
            if await self._compare(left[i], right[j]) <= 0:
                out.append(left[i])
                i += 1
            else:
                out.append(right[j])
                j += 1
        out.extend(left[i:])
        out.extend(right[j:])
        return out

    async def _insert_all(self, base: List[str], new_items: List[str]) -> List[str]:
        result = list(base)
        for item in new_items:
            lo, hi = 0, len(result)
            while lo < hi:
                mid = (lo + hi) // 2
                if await self._compare(item, result[mid]) <= 0:
                    hi = mid
                else:
                    lo = mid + 1
            result.insert(lo, item)
        return result

    async def _compare(self, item_a: str, item_b: str) -> int:
        key = comparison_key(item_a, item_b)
        if key in self._cache:
            return _orient(self._cache[key], item_a, item_b)

        future = asyncio.get_running_loop().create_future()
        self._pending = ComparisonPair(item_a, item_b)
        self._pending_future = future
        log.debug("awaiting decision: %r vs %r", item_a, item_b)
        self._publish(replace(self._state, current_pair=self._pending))
        return await future

    def _teardown(self, final: SortState) -> None:
        self._pending = None
        self._pending_future = None
        self._result = None
        self._task = None
        self._publish(final)


async def run_with_oracle(
    engine: SortEngine,
    items: Sequence[str],
    oracle: Oracle,
    already_sorted: Optional[Sequence[str]] = None,
) -> List[str]:
    """
    Run one sort on `engine`, answering every pending pair with `oracle(a, b)`.

    Answers are delivered on the next event-loop iteration after the pair is
    published, so other subscribers see each state in order. If the oracle
    raises, the run is cancelled and the exception is re-raised here.

    The oracle is called synchronously on the event loop. A blocking oracle
    (such as the CLI's terminal prompt) stalls the loop until it returns, which
    is fine for a single interactive session but not inside a shared server loop.
    """
    loop = asyncio.get_running_loop()
    failures: List[Exception] = []

    def _answer(pair: ComparisonPair) -> None:
        if engine.state.current_pair != pair:
            return
        try:
            decision = oracle(pair.item_a, pair.item_b)
            engine.submit_comparison(pair.item_a, pair.item_b, decision)
        except Exception as exc:
            failures.append(exc)
            engine.cancel_sort()

    def _on_state(state: SortState) -> None:
        if state.current_pair is not None:
            loop.call_soon(_answer, state.current_pair)

    unsubscribe = engine.subscribe(_on_state)
    try:
        ordered = await engine.start_sort(items, already_sorted)
    finally:
        unsubscribe()
    if failures:
        raise failures[0]
    return ordered
