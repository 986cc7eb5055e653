from __future__ import annotations

from pathlib import Path
from typing import Any, Union

import numpy as np

from aobake_geom.core.mesh import MeshData

_NORMAL_KEYS = ("Normals", "normals", "Normal", "normal")


def meshdata_from_meshio(mesh: Any, vertex_normals: bool = True) -> MeshData:
    """
    meshio.Mesh -> MeshData.

    Only triangle cells are used. Point data named Normals/normals (N,3)
    becomes the shading normals.
    """
    if "triangle" not in mesh.cells_dict:
        raise ValueError("Mesh does not contain triangle cells.")
    faces = np.asarray(mesh.cells_dict["triangle"], dtype=np.int64)
    vertices = np.asarray(mesh.points, dtype=np.float64)[:, :3]
    if vertices.shape[1] < 3:
        vertices = np.pad(vertices, ((0, 0), (0, 3 - vertices.shape[1])))

    normals = None
    if vertex_normals:
        for key in _NORMAL_KEYS:
            arr = mesh.point_data.get(key)
            if arr is not None and np.ndim(arr) == 2 and np.shape(arr)[1] == 3:
                normals = np.asarray(arr, dtype=np.float64)
                break

    if normals is None:
        return MeshData(vertices=vertices, faces=faces)
    return MeshData(vertices=vertices, faces=faces, normals=normals, normal_faces=faces.copy())


def load_meshio(path: Union[str, Path], vertex_normals: bool = True) -> MeshData:
    import meshio
    return meshdata_from_meshio(meshio.read(str(path)), vertex_normals=vertex_normals)


def save_meshio(mesh: MeshData, path: Union[str, Path]) -> None:
    import meshio
    point_data = {}
    if mesh.has_normals and np.array_equal(mesh.normal_faces, mesh.faces) and len(mesh.normals) == mesh.n_vertices:
        point_data["Normals"] = mesh.normals
    meshio.write_points_cells(str(path), mesh.vertices, [("triangle", mesh.faces)], point_data=point_data)
