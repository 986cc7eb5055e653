"""Low-discrepancy sampling inside a single triangle."""
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from aobake_geom.core.samples import AOSamples
from aobake_geom.ops.features import compute_face_normals, normalize

from .halton import halton2d
from .hashing import triangle_jitter
from .orient import NormalOrienter, default_orienter


def halton_barycentric(count: int, jitter: Tuple[float, float]) -> np.ndarray:
    """
    (count,3) barycentric weights for local samples s = 1..count.

    The jittered Halton point (r1, r2) is folded back into [0,1) and warped
    onto the triangle with the square-root map, which is area-uniform:
      b0 = 1 - sqrt(r1)
      b1 = r2 * sqrt(r1)
      b2 = 1 - b0 - b1
    """
    uv = halton2d(np.arange(1, int(count) + 1, dtype=np.int64))
    r = uv + np.asarray(jitter, dtype=np.float64)[None, :]
    r = r - np.floor(r)

    sqrt_r1 = np.sqrt(r[:, 0])
    bary = np.empty((uv.shape[0], 3), dtype=np.float64)
    bary[:, 0] = 1.0 - sqrt_r1
    bary[:, 1] = r[:, 1] * sqrt_r1
    bary[:, 2] = 1.0 - bary[:, 0] - bary[:, 1]
    # rounding can leave b2 a hair below zero
    np.clip(bary, 0.0, 1.0, out=bary)
    return bary


def sample_triangle(
    tri_idx: int,
    tri_vertices: np.ndarray,
    tri_normals: Optional[np.ndarray],
    offset: int,
    count: int,
    samples: AOSamples,
    *,
    orienter: Optional[NormalOrienter] = None,
    seed: int = 0,
) -> None:
    """
    Fill global slots [offset, offset+count) with samples of one triangle.

    tri_vertices: (3,3) corner positions
    tri_normals:  (3,3) corner shading normals, or None for flat shading

    Writes positions, shading normals, face normals, tri_idx and barycentrics.
    dA is left for the caller, which knows the triangle's final count.
    """
    count = int(count)
    if count <= 0:
        return
    orienter = orienter or default_orienter()

    v = np.asarray(tri_vertices, dtype=np.float64)
    fn = compute_face_normals(v)
    bary = halton_barycentric(count, triangle_jitter(tri_idx, seed))

    sl = slice(int(offset), int(offset) + count)
    samples.sample_positions[sl] = bary @ v
    samples.sample_face_normals[sl] = fn

    if tri_normals is None:
        samples.sample_normals[sl] = fn
    else:
        n = orienter.orient_many(tri_normals, fn)
        samples.sample_normals[sl] = normalize(bary @ n)

    infos = samples.sample_infos[sl]
    infos["tri_idx"] = tri_idx
    infos["bary"] = bary
