"""
Comparison-cost harness for the interactive sort engine.

Runs exactly one sort with an automated oracle and records how many questions
a person would have been asked, next to the engine's own estimate.

Public API (stable):
    count_comparisons(... ) -> dict

Returned dict schema:
    {
        "mode": "full" | "incremental",
        "n": int,                    # labels passed as `items`
        "asked": int,                # comparisons published as pending
        "estimate": int,             # total_comparisons the engine announced
        "final_progress": int,       # progress of the terminal state
        "elapsed_ns": int,
        "correct": bool | None,      # output == expected, when expected is given
        "output": list[str],
        "status": "ok" | "error",
        "error": str | None,
    }
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, List, Optional, Sequence

from tiersort.engine.sorter import Oracle, SortEngine, SortState, run_with_oracle

__all__ = ["count_comparisons"]


async def _drive(
    items: Sequence[str],
    oracle: Oracle,
    already_sorted: Optional[Sequence[str]],
) -> Dict[str, Any]:
    engine = SortEngine()
    seen: Dict[str, int] = {"asked": 0, "estimate": 0}

    def _track(state: SortState) -> None:
        if state.current_pair is not None:
            seen["asked"] += 1
        if state.is_active:
            seen["estimate"] = state.total_comparisons

    unsubscribe = engine.subscribe(_track)
    try:
        out = await run_with_oracle(engine, items, oracle, already_sorted)
    finally:
        unsubscribe()
    return {"output": out, "final_progress": engine.state.progress, **seen}


def count_comparisons(
    *,
    items: Sequence[str],
    oracle: Oracle,
    already_sorted: Optional[Sequence[str]] = None,
    expected: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Sort `items` once on a fresh engine, answering with `oracle`.

    Parameters
    ----------
    items : sequence of str
        Labels to sort, in presentation order.
    oracle : Callable[[str, str], Decision]
        Automated stand-in for the person answering.
    already_sorted : sequence of str | None
        Base list for incremental mode.
    expected : list[str] | None
        Ground-truth output; when given, `correct` reports whether it matched.

    Returns
    -------
    dict
        See module docstring for exact schema.
    """
    result: Dict[str, Any] = {
        "mode": "incremental" if already_sorted else "full",
        "n": len(items),
        "asked": 0,
        "estimate": 0,
        "final_progress": 0,
        "elapsed_ns": 0,
        "correct": None,
        "output": [],
        "status": "ok",
        "error": None,
    }

    t0 = time.perf_counter_ns()
    try:
        run = asyncio.run(_drive(items, oracle, already_sorted))
    except Exception as e:
        result["status"] = "error"
        result["error"] = f"sort failed: {e!r}"
        return result
    result["elapsed_ns"] = int(time.perf_counter_ns() - t0)

    result.update(run)
    if expected is not None:
        result["correct"] = run["output"] == list(expected)
    return result
