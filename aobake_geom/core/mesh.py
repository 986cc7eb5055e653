from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass
class MeshData:
    """
    Lightweight triangle mesh container (numpy-only).

    vertices:     (V,3) float64
    faces:        (M,3) int64 vertex indices per triangle
    normals:      (K,3) float64 vertex normals, optional
    normal_faces: (M,3) int64 normal indices per triangle, optional

    normals and normal_faces come as a pair: both present or both absent.
    Without them every sample uses the geometric (face) normal.
    """
    vertices: np.ndarray
    faces: np.ndarray
    normals: Optional[np.ndarray] = None
    normal_faces: Optional[np.ndarray] = None

    def __post_init__(self):
        self.vertices = self._as_rows3(self.vertices, np.float64, "vertices")
        self.faces = self._as_rows3(self.faces, np.int64, "faces")

        if (self.normals is None) != (self.normal_faces is None):
            raise ValueError("normals and normal_faces must be given together")

        if self.normals is not None:
            self.normals = self._as_rows3(self.normals, np.float64, "normals")
            self.normal_faces = self._as_rows3(self.normal_faces, np.int64, "normal_faces")
            if self.normal_faces.shape != self.faces.shape:
                raise ValueError(
                    f"normal_faces shape {self.normal_faces.shape} does not match faces shape {self.faces.shape}"
                )

        self._check_indices(self.faces, self.n_vertices, "faces")
        if self.normals is not None:
            self._check_indices(self.normal_faces, self.normals.shape[0], "normal_faces")

    @staticmethod
    def _as_rows3(a, dtype, name: str) -> np.ndarray:
        a = np.ascontiguousarray(a, dtype=dtype)
        if a.size == 0:
            return np.zeros((0, 3), dtype=dtype)
        if a.ndim != 2 or a.shape[1] != 3:
            raise ValueError(f"{name} must have shape (N,3), got {a.shape}")
        return a

    @staticmethod
    def _check_indices(idx: np.ndarray, n: int, name: str) -> None:
        if idx.size == 0:
            return
        lo, hi = int(idx.min()), int(idx.max())
        if lo < 0 or hi >= n:
            raise ValueError(f"{name} index out of range [0,{n}) -> [{lo},{hi}]")

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_faces(self) -> int:
        return int(self.faces.shape[0])

    @property
    def has_normals(self) -> bool:
        return self.normals is not None

    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    def face_vertices(self) -> np.ndarray:
        """(M,3,3) corner positions per triangle."""
        return self.vertices[self.faces]

    def shading_normals_at_corners(self) -> Optional[np.ndarray]:
        """(M,3,3) shading normals per triangle corner, or None."""
        if self.normals is None:
            return None
        return self.normals[self.normal_faces]

    def apply_transform(self, matrix: np.ndarray) -> None:
        """
        Apply 4x4 homogeneous transform in-place.

        Normals are carried by the inverse transpose of the linear part.
        """
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.shape != (4, 4):
            raise ValueError("Transform matrix must be 4x4")
        v = np.ones((self.vertices.shape[0], 4), dtype=np.float64)
        v[:, :3] = self.vertices
        vt = (matrix @ v.T).T
        self.vertices = np.ascontiguousarray(vt[:, :3])

        if self.normals is not None:
            nmat = np.linalg.inv(matrix[:3, :3]).T
            n = self.normals @ nmat.T
            length = np.linalg.norm(n, axis=1, keepdims=True)
            self.normals = np.divide(n, length, out=np.zeros_like(n), where=length > 0)

    def copy(self) -> "MeshData":
        return MeshData(
            vertices=self.vertices.copy(),
            faces=self.faces.copy(),
            normals=None if self.normals is None else self.normals.copy(),
            normal_faces=None if self.normal_faces is None else self.normal_faces.copy(),
        )
