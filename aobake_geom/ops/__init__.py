from .features import (
    normalize,
    compute_face_cross,
    compute_face_normals,
    compute_face_areas,
    triangle_area,
    face_normal,
)

__all__ = [
    "normalize",
    "compute_face_cross",
    "compute_face_normals",
    "compute_face_areas",
    "triangle_area",
    "face_normal",
]
