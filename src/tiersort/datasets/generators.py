"""
Label dataset generators for simulated ranking sessions.

Labels are zero-padded strings ("item-0000", "item-0001", ...) so their
natural string order is the ground-truth ranking. The generators only decide
the order in which labels are *presented* to the sort engine.

Currently implemented:
- dist == "sorted":
    Labels already in ground-truth order.

- dist == "reversed":
    Deterministic reversed order.

- dist == "random":
    A uniformly random permutation drawn with the provided RNG.

- dist == "nearly_sorted":
    Start from sorted order then perform ceil(swap_frac * n) random index swaps.

Public API (stable):
    make_dataset(n: int, spec: dict, rng: numpy.random.Generator) -> list[str]
    make_label(i: int, n: int, prefix: str = "item-") -> str

Conventions:
- Returned labels are unique.
- The caller supplies the RNG (for reproducibility across runs).
"""

from __future__ import annotations

from typing import Any, Dict, List

import numpy as np

SUPPORTED_DISTS = {
    "sorted",
    "reversed",
    "random",
    "nearly_sorted",
}
__all__ = ["SUPPORTED_DISTS", "make_dataset", "make_label"]


def make_label(i: int, n: int, prefix: str = "item-") -> str:
    width = max(4, len(str(max(n - 1, 0))))
    return f"{prefix}{i:0{width}d}"


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[str]:
    """
    Generate `n` unique labels presented according to `spec`.

    Parameters
    ----------
    n : int
        Number of labels. Must be >= 0.
    spec : dict
        {
            "dist": "random" | "sorted" | "reversed" | "nearly_sorted",
            "params": {
                "swap_frac": 0.05,      # nearly_sorted only; in [0.0, 1.0]
                "prefix": "item-"       # optional label prefix
            }
        }
    rng : numpy.random.Generator
        Unused by the deterministic distributions.

    Raises
    ------
    ValueError
        If inputs are invalid or the distribution is unsupported.
    """
    _validate_n(n)

    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist", None)
    if dist not in SUPPORTED_DISTS:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )

    params = spec.get("params", {}) or {}
    prefix = params.get("prefix", "item-")
    if not isinstance(prefix, str):
        raise ValueError("params.prefix must be a string")

    labels = [make_label(i, n, prefix) for i in range(n)]
    if n == 0 or dist == "sorted":
        return labels

    if dist == "reversed":
        return labels[::-1]

    if dist == "random":
        order = rng.permutation(n)
        return [labels[int(i)] for i in order]

    if dist == "nearly_sorted":
        swap_frac = _parse_swap_frac(params)
        num_swaps = int(np.ceil(swap_frac * n))
        if num_swaps <= 0:
            return labels
        idxs = rng.integers(0, n, size=2 * num_swaps)
        for k in range(num_swaps):
            i = int(idxs[2 * k])
            j = int(idxs[2 * k + 1])
            labels[i], labels[j] = labels[j], labels[i]
        return labels

    raise ValueError(f"Unhandled dataset dist: {dist!r}")


# ------------------------- helpers ------------------------- #


def _validate_n(n: int) -> None:
    if not isinstance(n, (int, np.integer)) or isinstance(n, bool):
        raise ValueError("n must be an int")
    if n < 0:
        raise ValueError("n must be nonnegative")


def _parse_swap_frac(params: Dict[str, Any]) -> float:
    val = params.get("swap_frac", 0.05)
    try:
        x = float(val)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be a float in [0.0, 1.0]; got {val!r}"
        ) from e
    if not (0.0 <= x <= 1.0):
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be in [0.0, 1.0]; got {x}"
        )
    return x
