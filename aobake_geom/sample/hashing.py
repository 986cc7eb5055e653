"""Small reproducible integer hashing for per-triangle jitter."""
from __future__ import annotations

from typing import Tuple

_MASK32 = 0xFFFFFFFF

_LCG_A = 1664525
_LCG_C = 1013904223


def tea(val0: int, val1: int, rounds: int = 4) -> int:
    """Tiny Encryption Algorithm used as a 32-bit hash of two integers."""
    v0 = int(val0) & _MASK32
    v1 = int(val1) & _MASK32
    s0 = 0
    for _ in range(int(rounds)):
        s0 = (s0 + 0x9E3779B9) & _MASK32
        v0 = (v0 + ((((v1 << 4) + 0xA341316C) & _MASK32) ^ ((v1 + s0) & _MASK32) ^ (((v1 >> 5) + 0xC8013D6E) & _MASK32))) & _MASK32
        v1 = (v1 + ((((v0 << 4) + 0xAD90777D) & _MASK32) ^ ((v0 + s0) & _MASK32) ^ (((v0 >> 5) + 0x7E95761E) & _MASK32))) & _MASK32
    return v0


def lcg(state: int) -> Tuple[int, int]:
    """One LCG step. Returns (new_state, value in [0, 2^24))."""
    state = (_LCG_A * int(state) + _LCG_C) & _MASK32
    return state, state & 0x00FFFFFF


def rnd(state: int) -> Tuple[int, float]:
    """One LCG step mapped to a float in [0,1)."""
    state, value = lcg(state)
    return state, value / float(0x01000000)


def triangle_jitter(tri_idx: int, seed: int = 0) -> Tuple[float, float]:
    """
    Deterministic 2D offset in [0,1)^2 for one triangle.

    Shifts the Halton lattice per triangle so neighbouring triangles do not
    share the same sample pattern. seed=0 hashes (tri_idx, tri_idx).
    """
    tri_idx = int(tri_idx)
    state = tea(tri_idx, tri_idx ^ int(seed))
    state, x = rnd(state)
    state, y = rnd(state)
    return x, y
