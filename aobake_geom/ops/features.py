from __future__ import annotations

import numpy as np


def normalize(v: np.ndarray) -> np.ndarray:
    """Unit vectors along the last axis; zero-length rows stay zero."""
    v = np.asarray(v, dtype=np.float64)
    length = np.linalg.norm(v, axis=-1, keepdims=True)
    return np.divide(v, length, out=np.zeros_like(v), where=length > 0)


def compute_face_cross(face_vertices: np.ndarray) -> np.ndarray:
    """cross(v1 - v0, v2 - v0) for (...,3,3) corner positions."""
    fv = np.asarray(face_vertices, dtype=np.float64)
    return np.cross(fv[..., 1, :] - fv[..., 0, :], fv[..., 2, :] - fv[..., 0, :])


def compute_face_normals(face_vertices: np.ndarray) -> np.ndarray:
    return normalize(compute_face_cross(face_vertices))


def compute_face_areas(face_vertices: np.ndarray) -> np.ndarray:
    # float64 throughout, areas drive the sample allocation
    return 0.5 * np.linalg.norm(compute_face_cross(face_vertices), axis=-1)


def triangle_area(v0, v1, v2) -> float:
    return float(compute_face_areas(np.stack([v0, v1, v2])))


def face_normal(v0, v1, v2) -> np.ndarray:
    return compute_face_normals(np.stack([v0, v1, v2]))
