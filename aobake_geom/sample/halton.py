"""Radical-inverse (Halton) low-discrepancy sequences."""
from __future__ import annotations

import numpy as np


def _check_base(base: int) -> int:
    base = int(base)
    if base < 2:
        raise ValueError(f"base must be >= 2 (got {base})")
    return base


def radical_inverse(index: int, base: int) -> float:
    """
    n-th term of the radix-inverse sequence in `base`.

    Digits of `index` are mirrored around the radix point:
      index=1, base=2 -> 0.5
      index=3, base=2 -> 0.75
      index=1, base=3 -> 1/3
    Result lies in [0,1). Pure function.
    """
    base = _check_base(base)
    i = int(index)
    if i < 0:
        raise ValueError(f"index must be >= 0 (got {index})")

    inv_base = 1.0 / base
    f = inv_base
    result = 0.0
    while i > 0:
        i, digit = divmod(i, base)
        result += f * digit
        f *= inv_base
    return result


def radical_inverse_array(indices: np.ndarray, base: int) -> np.ndarray:
    """Vectorized radical_inverse over an integer array (float64 result)."""
    base = _check_base(base)
    i = np.array(indices, dtype=np.int64, copy=True)
    if i.size and int(i.min()) < 0:
        raise ValueError("indices must be >= 0")

    inv_base = 1.0 / base
    f = inv_base
    result = np.zeros(i.shape, dtype=np.float64)
    while np.any(i > 0):
        i, digit = np.divmod(i, base)
        result += f * digit
        f *= inv_base
    return result


def halton2d(indices: np.ndarray) -> np.ndarray:
    """(N,2) Halton points in the unit square, bases (2,3)."""
    indices = np.asarray(indices, dtype=np.int64)
    return np.stack(
        [radical_inverse_array(indices, 2), radical_inverse_array(indices, 3)],
        axis=-1,
    )
