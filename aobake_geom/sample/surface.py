from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import numpy as np

from aobake_geom.core.mesh import MeshData
from aobake_geom.core.samples import AOSamples
from aobake_geom.ops.features import compute_face_areas

from .orient import NormalOrienter, default_orienter
from .triangle import sample_triangle

logger = logging.getLogger(__name__)


@dataclass
class SurfaceSamplingConfig:
    """
    Options for sample_surface / sample_surface_random.

      - jitter_seed: mixed into the per-triangle hash (0 keeps the default pattern)
      - num_workers: >1 fills triangles on a thread pool
      - dtype: float dtype of freshly allocated output buffers
    """
    jitter_seed: int = 0
    num_workers: int = 0
    dtype: str = "float32"


@dataclass
class TrianglePlan:
    """
    Final per-triangle allocation.

    Samples of triangle t live in slots [offsets[t], offsets[t] + counts[t]).
    """
    counts: np.ndarray   # (M,) int64
    offsets: np.ndarray  # (M,) int64
    areas: np.ndarray    # (M,) float64
    mesh_area: float

    @property
    def n_triangles(self) -> int:
        return int(self.counts.shape[0])

    @property
    def total(self) -> int:
        return int(self.counts.sum())


def _check_mesh(mesh: MeshData) -> MeshData:
    if not isinstance(mesh, MeshData):
        raise TypeError(f"mesh must be MeshData, got {type(mesh)}")
    return mesh


def plan_triangle_samples(
    mesh: MeshData,
    min_samples_per_triangle: int,
    num_samples: int,
) -> TrianglePlan:
    """
    Decide how many samples each triangle receives.

    1) floor: every triangle gets min_samples_per_triangle
    2) area: the rest is split proportionally to area, truncating, walking
       triangles in index order
    3) residual: one extra sample per triangle, in index order, until the
       target is met
    """
    mesh = _check_mesh(mesh)
    floor = int(min_samples_per_triangle)
    target = int(num_samples)
    n_tri = mesh.n_faces

    if floor < 0:
        raise ValueError(f"min_samples_per_triangle must be >= 0 (got {floor})")
    if target < n_tri * floor:
        raise ValueError(
            f"num_samples={target} is below the per-triangle minimum "
            f"({n_tri} triangles x {floor} = {n_tri * floor})"
        )
    if n_tri == 0 and target > 0:
        raise ValueError(f"cannot place {target} samples on a mesh without triangles")

    counts = np.full(n_tri, floor, dtype=np.int64)
    placed = n_tri * floor

    areas = compute_face_areas(mesh.face_vertices()) if n_tri else np.zeros(0, dtype=np.float64)
    mesh_area = float(areas.sum())

    remaining = target - placed
    if mesh_area > 0.0:
        for t in range(n_tri):
            if placed >= target:
                break
            n = min(target - placed, int(remaining * areas[t] / mesh_area))
            counts[t] += n
            placed += n

    shortfall = target - placed
    if shortfall > n_tri:
        raise RuntimeError(
            f"area allocation left {shortfall} samples for {n_tri} triangles; "
            "residual pass places at most one per triangle"
        )
    if shortfall > 0:
        counts[:shortfall] += 1
        placed += shortfall

    offsets = np.zeros(n_tri, dtype=np.int64)
    if n_tri > 1:
        np.cumsum(counts[:-1], out=offsets[1:])

    if placed != target or int(counts.sum()) != target:
        raise RuntimeError(f"placed {int(counts.sum())} samples, expected {target}")

    return TrianglePlan(counts=counts, offsets=offsets, areas=areas, mesh_area=mesh_area)


def _fill_triangles(
    mesh: MeshData,
    plan: TrianglePlan,
    samples: AOSamples,
    tri_ids: np.ndarray,
    orienter: NormalOrienter,
    seed: int,
) -> None:
    fv = mesh.face_vertices()
    fn = mesh.shading_normals_at_corners()
    for t in tri_ids:
        t = int(t)
        sample_triangle(
            t,
            fv[t],
            None if fn is None else fn[t],
            plan.offsets[t],
            plan.counts[t],
            samples,
            orienter=orienter,
            seed=seed,
        )


def _assign_differential_area(plan: TrianglePlan, samples: AOSamples) -> None:
    if plan.n_triangles and int(plan.counts.min()) == 0:
        empty = np.flatnonzero(plan.counts == 0)
        raise ValueError(
            f"{empty.size} triangle(s) received no samples (first: {int(empty[0])}); "
            "raise num_samples or min_samples_per_triangle"
        )
    dA = plan.areas / plan.counts
    samples.sample_infos["dA"] = np.repeat(dA, plan.counts).astype(np.float32)


def sample_surface_random(
    mesh: MeshData,
    min_samples_per_triangle: int,
    samples: AOSamples,
    *,
    config: Optional[SurfaceSamplingConfig] = None,
    orienter: Optional[NormalOrienter] = None,
) -> TrianglePlan:
    """
    Fill preallocated `samples` with an area-proportional sample set.

    The number of samples is samples.num_samples, which must be at least
    mesh.n_faces * min_samples_per_triangle. Every triangle's samples end up
    contiguous and in triangle order, and for each triangle
    dA * count == area.

    Returns the TrianglePlan that was used.
    """
    cfg = config or SurfaceSamplingConfig()
    orienter = orienter or default_orienter()
    mesh = _check_mesh(mesh)
    if not isinstance(samples, AOSamples):
        raise TypeError(f"samples must be AOSamples, got {type(samples)}")
    samples.validate()

    plan = plan_triangle_samples(mesh, min_samples_per_triangle, samples.num_samples)

    tri_ids = np.arange(plan.n_triangles)
    workers = int(cfg.num_workers)
    if workers > 1 and plan.n_triangles > 1:
        chunks = [c for c in np.array_split(tri_ids, workers) if c.size]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(_fill_triangles, mesh, plan, samples, c, orienter, cfg.jitter_seed)
                for c in chunks
            ]
            for fut in futures:
                fut.result()
    else:
        _fill_triangles(mesh, plan, samples, tri_ids, orienter, cfg.jitter_seed)

    _assign_differential_area(plan, samples)

    floor = int(min_samples_per_triangle)
    if plan.n_triangles and int(plan.counts.min()) < floor:
        raise RuntimeError("a triangle fell below min_samples_per_triangle")

    logger.info(
        "sampled %d points on %d triangles (area %.6g, min/tri %d, max/tri %d)",
        samples.num_samples,
        plan.n_triangles,
        plan.mesh_area,
        int(plan.counts.min()) if plan.n_triangles else 0,
        int(plan.counts.max()) if plan.n_triangles else 0,
    )
    if logger.isEnabledFor(logging.DEBUG):
        for i, info in enumerate(samples.sample_infos):
            b = info["bary"]
            logger.debug(
                "sample info (%d): %d, (%g, %g, %g), %g",
                i, int(info["tri_idx"]), b[0], b[1], b[2], float(info["dA"]),
            )

    return plan


def sample_surface(
    mesh: MeshData,
    num_samples: int,
    *,
    min_samples_per_triangle: int = 1,
    config: Optional[SurfaceSamplingConfig] = None,
    orienter: Optional[NormalOrienter] = None,
) -> AOSamples:
    """
    Allocate AOSamples for `num_samples` and fill them (see sample_surface_random).
    """
    cfg = config or SurfaceSamplingConfig()
    samples = AOSamples.allocate(num_samples, dtype=np.dtype(cfg.dtype))
    sample_surface_random(
        mesh,
        min_samples_per_triangle,
        samples,
        config=cfg,
        orienter=orienter,
    )
    return samples
