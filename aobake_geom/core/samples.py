from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import numpy as np


# One record per sample: owning triangle, barycentric weights, differential area.
SAMPLE_INFO_DTYPE = np.dtype(
    [
        ("tri_idx", np.uint32),
        ("bary", np.float32, (3,)),
        ("dA", np.float32),
    ]
)


@dataclass
class AOSamples:
    """
    Output buffers of the surface sampler.

    All four arrays are indexed in lockstep: sample i lives at row i of each.

      - sample_positions:    (N,3) float32
      - sample_normals:      (N,3) float32 shading normals (unit length)
      - sample_face_normals: (N,3) float32 geometric normals (unit length)
      - sample_infos:        (N,)  SAMPLE_INFO_DTYPE

    The sampler writes into these buffers; it never allocates or resizes them.
    """
    sample_positions: np.ndarray
    sample_normals: np.ndarray
    sample_face_normals: np.ndarray
    sample_infos: np.ndarray

    @classmethod
    def allocate(cls, num_samples: int, dtype=np.float32) -> "AOSamples":
        n = int(num_samples)
        if n < 0:
            raise ValueError(f"num_samples must be >= 0 (got {num_samples})")
        return cls(
            sample_positions=np.zeros((n, 3), dtype=dtype),
            sample_normals=np.zeros((n, 3), dtype=dtype),
            sample_face_normals=np.zeros((n, 3), dtype=dtype),
            sample_infos=np.zeros((n,), dtype=SAMPLE_INFO_DTYPE),
        )

    @property
    def num_samples(self) -> int:
        return int(self.sample_infos.shape[0])

    @property
    def tri_idx(self) -> np.ndarray:
        return self.sample_infos["tri_idx"]

    @property
    def bary(self) -> np.ndarray:
        return self.sample_infos["bary"]

    @property
    def dA(self) -> np.ndarray:
        return self.sample_infos["dA"]

    def validate(self) -> None:
        for name in ("sample_positions", "sample_normals", "sample_face_normals", "sample_infos"):
            if not isinstance(getattr(self, name), np.ndarray):
                raise TypeError(f"{name} must be a numpy array, got {type(getattr(self, name))}")

        if self.sample_infos.dtype != SAMPLE_INFO_DTYPE or self.sample_infos.ndim != 1:
            raise ValueError(f"sample_infos must be a 1-D array of SAMPLE_INFO_DTYPE, got {self.sample_infos.dtype}")

        n = self.num_samples
        for name in ("sample_positions", "sample_normals", "sample_face_normals"):
            arr = getattr(self, name)
            if arr.shape != (n, 3):
                raise ValueError(f"{name} must have shape ({n}, 3), got {arr.shape}")
            if arr.dtype.kind != "f":
                raise ValueError(f"{name} must be floating point, got {arr.dtype}")

    def tri_sample_counts(self, num_triangles: int) -> np.ndarray:
        return np.bincount(self.tri_idx.astype(np.int64), minlength=int(num_triangles))

    def summary(self) -> Dict[str, Any]:
        dA = self.dA
        return {
            "n_samples": self.num_samples,
            "n_triangles_hit": int(np.unique(self.tri_idx).size),
            "total_area": float(dA.astype(np.float64).sum()),
            "dA_min": float(dA.min()) if dA.size else 0.0,
            "dA_max": float(dA.max()) if dA.size else 0.0,
        }
