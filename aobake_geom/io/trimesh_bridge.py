from __future__ import annotations

from pathlib import Path
from typing import Any, List, Union

import numpy as np

from aobake_geom.core.mesh import MeshData


class TrimeshBridge:
    """
    trimesh <-> MeshData conversion.

    vertex_normals=True carries trimesh's per-vertex normals as shading
    normals (indexed by the face array). trimesh keeps normals read from the
    file and otherwise computes area-weighted smooth ones.
    """
    def __init__(self, vertex_normals: bool = True):
        self.vertex_normals = vertex_normals

    def from_trimesh(self, tm: Any) -> MeshData:
        vertices = np.asarray(tm.vertices, dtype=np.float64)
        faces = np.asarray(tm.faces, dtype=np.int64)
        if self.vertex_normals and len(faces):
            return MeshData(
                vertices=vertices,
                faces=faces,
                normals=np.asarray(tm.vertex_normals, dtype=np.float64),
                normal_faces=faces.copy(),
            )
        return MeshData(vertices=vertices, faces=faces)

    def to_trimesh(self, mesh: MeshData):
        import trimesh
        return trimesh.Trimesh(vertices=mesh.vertices, faces=mesh.faces, process=False)

    def load(self, path: Union[str, Path]) -> List[MeshData]:
        """Load a file; scenes are flattened to one MeshData per geometry."""
        import trimesh

        loaded = trimesh.load(str(path), process=False)
        if isinstance(loaded, trimesh.Scene):
            geoms = loaded.dump()
        else:
            geoms = [loaded]

        meshes = []
        for g in geoms:
            if not isinstance(g, trimesh.Trimesh):
                raise ValueError(f"{path}: geometry {type(g).__name__} is not a triangle mesh")
            meshes.append(self.from_trimesh(g))
        return meshes
