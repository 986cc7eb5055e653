from __future__ import annotations

from typing import Any, Tuple

import numpy as np

from aobake_geom.core.mesh import MeshData
from aobake_geom.io.trimesh_bridge import TrimeshBridge


def _as_3tuple(v: Any, default: Tuple[float, float, float]) -> Tuple[float, float, float]:
    if v is None:
        return default
    if isinstance(v, (int, float)):
        x = float(v)
        return (x, x, x)
    if isinstance(v, (list, tuple)) and len(v) == 3:
        return (float(v[0]), float(v[1]), float(v[2]))
    raise TypeError(f"Expected a scalar or 3-tuple, got: {type(v).__name__} {v}")


def build_primitive(name: str, smooth_normals: bool = False, **params) -> MeshData:
    """
    Build simple test/bake meshes.

    Supported primitives:
      - "box":      extents=(x,y,z) or side=s   (aliases: "cube", "cuboid")
      - "sphere":   radius=..., subdivisions=...
      - "cylinder": radius=..., height=..., sections=...
      - "plane":    size=(x,y) at z=0, two triangles, +z normals
      - "triangle": vertices=(3,3), one triangle

    smooth_normals=True attaches trimesh vertex normals (trimesh-backed shapes).
    """
    import trimesh

    key = (name or "").lower().strip()
    bridge = TrimeshBridge(vertex_normals=smooth_normals)

    if key in {"box", "cube", "cuboid"}:
        if "side" in params and params.get("extents") is None:
            extents = _as_3tuple(params.get("side"), (1.0, 1.0, 1.0))
        else:
            extents = _as_3tuple(params.get("extents"), (1.0, 1.0, 1.0))
        ex = tuple(max(1e-12, float(e)) for e in extents)
        return bridge.from_trimesh(trimesh.creation.box(extents=ex))

    if key == "sphere":
        radius = float(params.get("radius", 1.0))
        subdivisions = int(params.get("subdivisions", 2))
        return bridge.from_trimesh(trimesh.creation.icosphere(subdivisions=subdivisions, radius=radius))

    if key == "cylinder":
        radius = float(params.get("radius", 1.0))
        height = float(params.get("height", 1.0))
        sections = int(params.get("sections", 32))
        return bridge.from_trimesh(trimesh.creation.cylinder(radius=radius, height=height, sections=sections))

    if key == "plane":
        size = params.get("size") or (1.0, 1.0)
        sx, sy = float(size[0]), float(size[1])
        v = np.array(
            [
                [-sx / 2, -sy / 2, 0.0],
                [ sx / 2, -sy / 2, 0.0],
                [ sx / 2,  sy / 2, 0.0],
                [-sx / 2,  sy / 2, 0.0],
            ],
            dtype=np.float64,
        )
        f = np.array([[0, 1, 2], [0, 2, 3]], dtype=np.int64)
        if not smooth_normals:
            return MeshData(vertices=v, faces=f)
        n = np.tile([0.0, 0.0, 1.0], (4, 1))
        return MeshData(vertices=v, faces=f, normals=n, normal_faces=f.copy())

    if key == "triangle":
        v = np.asarray(params.get("vertices", [[0, 0, 0], [1, 0, 0], [0, 1, 0]]), dtype=np.float64)
        if v.shape != (3, 3):
            raise ValueError(f"triangle vertices must be (3,3), got {v.shape}")
        return MeshData(vertices=v, faces=np.array([[0, 1, 2]], dtype=np.int64))

    raise ValueError(f"Unsupported primitive '{name}'. Supported: box/cube, sphere, cylinder, plane, triangle.")
