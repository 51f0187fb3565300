"""
Experiment runner: measures how many questions the sort engine asks, from a YAML config.

Usage (from repo root):
    python -m tiersort.bench.runner experiments/configs/01_full_vs_incremental.yaml

Config keys:
    experiment_name: str
    output_dir: str
    seed: int
    repeats: int                 # datasets drawn per (mode, n)
    dataset: {dist: random, params: {...}}
    sizes: [8, 16, 32, ...]
    modes: [full, incremental]   # optional; default both
    base_frac: 0.9               # optional; share of labels already sorted in incremental mode

Outputs in a new run directory:
    - config_resolved.yaml    # the config we actually used
    - meta.json               # environment info (python, numpy, cpu/ram, git commit)
    - results.jsonl           # one JSON line per simulated sort
    - summary.csv             # median/min/max questions per (mode, n)
    - (console) rich/tqdm summaries

Design notes:
- The oracle answers by natural label order, so every run also checks the
  output against sorted().
- For incremental mode the base list is the ground-truth order of a random
  subset; the remaining labels are inserted.
"""

from __future__ import annotations

import argparse
import datetime as _dt
import json
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
import psutil
import yaml
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from tiersort.bench.measure import count_comparisons
from tiersort.datasets import make_dataset
from tiersort.validate.oracle import make_oracle, oracle_sort

SUPPORTED_MODES = ("full", "incremental")

_console = Console()

SUMMARY_COLUMNS = ["mode", "n", "samples_ok", "median_asked", "min_asked", "max_asked", "estimate", "all_correct"]


# ------------------------- helpers: IO & meta ------------------------- #

def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _write_yaml(obj: Dict[str, Any], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def _append_jsonl(obj: Dict[str, Any], path: Path) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))
        f.write("\n")


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S")


def _ensure_run_dir(base_dir: Path, experiment_name: str) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = base_dir / f"{_timestamp()}_{experiment_name}"
    run_dir.mkdir(parents=False, exist_ok=False)
    return run_dir


def _git_commit_short() -> Optional[str]:
    try:
        out = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode("utf-8").strip()
    except (OSError, subprocess.CalledProcessError):
        return None


def _gather_meta() -> Dict[str, Any]:
    import platform
    return {
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "psutil": psutil.__version__,
        "git_commit": _git_commit_short(),
        "machine": {
            "cpu": platform.processor() or platform.machine(),
            "cores_logical": psutil.cpu_count(logical=True),
            "ram_gb": round(psutil.virtual_memory().total / (1024**3), 2),
            "platform": platform.platform(),
        },
        "start_time": _dt.datetime.now().isoformat(timespec="seconds"),
        "pid": os.getpid(),
        "cwd": str(Path.cwd()),
    }


def _resolve_modes(cfg_modes: Any) -> List[str]:
    if cfg_modes is None:
        return list(SUPPORTED_MODES)
    if not isinstance(cfg_modes, list) or not cfg_modes:
        raise ValueError("Config 'modes' must be a non-empty list if provided")
    modes: List[str] = []
    for m in cfg_modes:
        if m not in SUPPORTED_MODES:
            raise ValueError(f"Unsupported mode: {m!r}. Supported: {list(SUPPORTED_MODES)}")
        if m in modes:
            raise ValueError(f"Duplicate mode in config: {m}")
        modes.append(m)
    return modes


def _split_base(labels: List[str], base_frac: float, rng: np.random.Generator) -> Tuple[List[str], List[str]]:
    """Return (base in ground-truth order, labels in presentation order)."""
    k = int(np.floor(base_frac * len(labels)))
    k = min(max(k, 1), len(labels) - 1)
    picked = rng.choice(len(labels), size=k, replace=False)
    base = oracle_sort([labels[int(i)] for i in picked])
    return base, labels


def _aggregate_summary(jsonl_path: Path) -> pd.DataFrame:
    if not jsonl_path.exists():
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    df = pd.read_json(jsonl_path, lines=True)
    if "asked" not in df.columns:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    df = df[df["asked"].notna()]
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    out = (
        df.groupby(["mode", "n"], as_index=False)
        .agg(
            samples_ok=("asked", "count"),
            median_asked=("asked", "median"),
            min_asked=("asked", "min"),
            max_asked=("asked", "max"),
            estimate=("estimate", "max"),
            all_correct=("correct", "all"),
        )
    )
    out[["min_asked", "max_asked", "estimate"]] = out[["min_asked", "max_asked", "estimate"]].astype("int64")
    return out.sort_values(["mode", "n"], ignore_index=True)


def _print_rich_summary(summary: pd.DataFrame) -> None:
    table = Table(title="Questions asked per sort (median [min-max] / estimate)")
    table.add_column("Mode", style="bold")
    table.add_column("n", justify="right")
    table.add_column("asked", justify="right")
    table.add_column("estimate", justify="right")
    table.add_column("correct", justify="center")

    for row in summary.itertuples(index=False):
        table.add_row(
            f"[bold]{row.mode}[/]",
            str(int(row.n)),
            f"{row.median_asked:.1f} [{int(row.min_asked)}-{int(row.max_asked)}]",
            str(int(row.estimate)),
            "[green]yes[/]" if bool(row.all_correct) else "[red]no[/]",
        )
    _console.print()
    _console.print(table)
    _console.print()


# ------------------------- core runner ------------------------- #

def run_experiment(config_path: Path) -> Path:
    cfg = _load_yaml(config_path)

    required = ["experiment_name", "output_dir", "seed", "repeats", "dataset", "sizes"]
    missing = [k for k in required if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    experiment_name: str = str(cfg["experiment_name"])
    output_dir = Path(cfg["output_dir"])
    sizes: List[int] = [int(n) for n in cfg["sizes"]]
    repeats: int = int(cfg["repeats"])
    dataset_spec: Dict[str, Any] = dict(cfg["dataset"])
    modes = _resolve_modes(cfg.get("modes", None))
    base_frac = float(cfg.get("base_frac", 0.9))

    if not sizes or any(n < 2 for n in sizes):
        raise ValueError("Config 'sizes' must be a non-empty list of integers >= 2")
    if repeats < 1:
        raise ValueError("Config 'repeats' must be a positive integer")
    if not (0.0 < base_frac < 1.0):
        raise ValueError(f"Config 'base_frac' must be in (0.0, 1.0); got {base_frac}")

    run_dir = _ensure_run_dir(output_dir, experiment_name)
    results_path = run_dir / "results.jsonl"
    summary_path = run_dir / "summary.csv"
    meta_path = run_dir / "meta.json"
    cfg_resolved_path = run_dir / "config_resolved.yaml"

    _write_yaml(cfg, cfg_resolved_path)
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(_gather_meta(), f, indent=2)

    rng = np.random.default_rng(int(cfg["seed"]))
    oracle = make_oracle()

    _console.print(f"[bold green]Run directory:[/bold green] {run_dir}")
    _console.print(f"[bold]Experiment:[/bold] {experiment_name}")
    _console.print(f"[bold]Modes:[/bold] {', '.join(modes)}")
    _console.print()

    for n in tqdm(sizes, desc="Sizes", unit="n"):
        for trial in range(repeats):
            labels = make_dataset(n, dataset_spec, rng)
            expected = oracle_sort(labels)

            for mode in modes:
                if mode == "incremental":
                    base, items = _split_base(labels, base_frac, rng)
                else:
                    base, items = [], labels

                res = count_comparisons(items=items, oracle=oracle, already_sorted=base, expected=expected)
                if res["status"] == "error":
                    _append_jsonl(
                        {"mode": mode, "n": n, "trial": trial, "status": "error", "error": res["error"]},
                        results_path,
                    )
                    continue
                _append_jsonl(
                    {
                        "mode": mode,
                        "n": n,
                        "trial": trial,
                        "base": len(base),
                        "asked": res["asked"],
                        "estimate": res["estimate"],
                        "final_progress": res["final_progress"],
                        "correct": res["correct"],
                        "elapsed_ns": res["elapsed_ns"],
                        "dataset": dataset_spec,
                    },
                    results_path,
                )

    summary_df = _aggregate_summary(results_path)
    summary_df.to_csv(summary_path, index=False)
    _print_rich_summary(summary_df)

    _console.print("[bold green]Done.[/bold green] Wrote:")
    _console.print(f" - {results_path}")
    _console.print(f" - {summary_path}")
    _console.print(f" - {meta_path}")
    _console.print(f" - {cfg_resolved_path}")

    return run_dir


# ------------------------- CLI ------------------------- #

def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Measure sort-engine question counts from a YAML config.")
    p.add_argument("config", type=str, help="Path to YAML experiment config")
    return p.parse_args()


def main() -> None:
    args = _parse_args()
    config_path = Path(args.config).resolve()
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    try:
        run_experiment(config_path)
    except Exception as e:
        _console.print(f"[bold red]Runner failed:[/bold red] {e!r}")
        raise


if __name__ == "__main__":
    main()
