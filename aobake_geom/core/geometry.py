from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .mesh import MeshData


@dataclass
class SceneSpec:
    """
    Declarative scene specification.

    Examples:
      {"kind":"file","path":"model.obj"}
      {"kind":"mesh_file","path":"part.vtu"}
      {"kind":"primitive","name":"sphere","params":{"radius":2.0}}
    """
    kind: str
    name: Optional[str] = None
    path: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SceneLoadOptions:
    """
    Load-time options.

      - scale / translate / rotate_euler_deg: applied to every mesh, in that order
      - vertex_normals: keep per-vertex shading normals when the loader has them
      - units: free-form unit label carried in the asset
    """
    scale: Optional[float] = None
    translate: Optional[Tuple[float, float, float]] = None
    rotate_euler_deg: Optional[Tuple[float, float, float]] = None
    vertex_normals: bool = True
    units: Optional[str] = None


@dataclass
class SceneAsset:
    """
    A loaded scene: one or more triangle meshes plus their joint bounds.

    Attributes:
      - meshes: list of MeshData
      - bounds: (min_xyz, max_xyz) over all meshes
      - units: optional physical units
      - meta: free metadata (source, loader, transforms)
    """
    meshes: List[MeshData]
    bounds: Tuple[np.ndarray, np.ndarray]
    units: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def compute_bounds(meshes: List[MeshData]) -> Tuple[np.ndarray, np.ndarray]:
        non_empty = [m for m in meshes if m.n_vertices]
        if not non_empty:
            return np.zeros(3), np.zeros(3)
        mins = np.stack([m.bounds()[0] for m in non_empty])
        maxs = np.stack([m.bounds()[1] for m in non_empty])
        return mins.min(axis=0), maxs.max(axis=0)

    @property
    def n_faces(self) -> int:
        return sum(m.n_faces for m in self.meshes)

    def bbox_size(self) -> np.ndarray:
        return self.bounds[1] - self.bounds[0]

    def center(self) -> np.ndarray:
        return 0.5 * (self.bounds[0] + self.bounds[1])

    def summary(self) -> Dict[str, Any]:
        return {
            "n_meshes": len(self.meshes),
            "n_vertices": sum(m.n_vertices for m in self.meshes),
            "n_faces": self.n_faces,
            "bounds": (self.bounds[0].tolist(), self.bounds[1].tolist()),
            "units": self.units,
            "meta_keys": list(self.meta.keys()),
        }
