"""
Tests for the comparison-cost harness and the experiment runner.
"""

from __future__ import annotations

import json
import pathlib
import sys

import pandas as pd

_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from tiersort.bench.measure import count_comparisons
from tiersort.bench.runner import run_experiment
from tiersort.engine import Decision
from tiersort.validate import make_oracle


def test_count_comparisons_full_sort() -> None:
    items = ["d", "b", "a", "c"]
    res = count_comparisons(items=items, oracle=make_oracle(), expected=sorted(items))

    assert res["status"] == "ok"
    assert res["mode"] == "full"
    assert res["correct"] is True
    assert res["output"] == ["a", "b", "c", "d"]
    assert res["estimate"] == 8
    assert 3 <= res["asked"] <= 5
    assert res["final_progress"] == 100


def test_count_comparisons_incremental() -> None:
    base = ["a", "b", "c"]
    res = count_comparisons(items=base + ["d"], oracle=make_oracle(), already_sorted=base)
    assert res["mode"] == "incremental"
    assert res["asked"] == 2
    assert res["estimate"] == 2
    assert res["correct"] is None


def test_count_comparisons_reports_oracle_errors() -> None:
    def _bad(a: str, b: str) -> Decision:
        raise RuntimeError("oracle broke")

    res = count_comparisons(items=["b", "a"], oracle=_bad)
    assert res["status"] == "error"
    assert "oracle broke" in res["error"]


def test_run_experiment_writes_outputs(tmp_path: pathlib.Path) -> None:
    cfg = tmp_path / "exp.yaml"
    cfg.write_text(
        "experiment_name: smoke\n"
        f"output_dir: {tmp_path / 'runs'}\n"
        "seed: 3\n"
        "repeats: 2\n"
        "dataset: {dist: random, params: {}}\n"
        "sizes: [4, 9]\n"
        "modes: [full, incremental]\n"
        "base_frac: 0.5\n",
        encoding="utf-8",
    )
    run_dir = run_experiment(cfg)

    for name in ("results.jsonl", "summary.csv", "meta.json", "config_resolved.yaml"):
        assert (run_dir / name).exists()

    rows = [json.loads(line) for line in (run_dir / "results.jsonl").read_text(encoding="utf-8").splitlines()]
    assert len(rows) == 2 * 2 * 2
    assert all(r["correct"] for r in rows)

    summary = pd.read_csv(run_dir / "summary.csv")
    assert sorted(zip(summary["mode"], summary["n"])) == [
        ("full", 4), ("full", 9), ("incremental", 4), ("incremental", 9)
    ]
    assert summary["all_correct"].all()
