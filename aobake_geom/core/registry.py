from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np

from .geometry import SceneAsset, SceneLoadOptions, SceneSpec
from .mesh import MeshData

logger = logging.getLogger(__name__)

TRIMESH_EXTENSIONS = {".obj", ".stl", ".ply", ".off", ".glb", ".gltf"}
MESHIO_EXTENSIONS = {".vtk", ".vtu", ".msh", ".mesh", ".xdmf", ".xmf", ".inp", ".med"}


def _rotation_matrix_xyz(rx, ry, rz):
    cx, sx = np.cos(rx), np.sin(rx)
    cy, sy = np.cos(ry), np.sin(ry)
    cz, sz = np.cos(rz), np.sin(rz)

    Rx = np.array([[1,0,0,0],[0,cx,-sx,0],[0,sx,cx,0],[0,0,0,1]])
    Ry = np.array([[cy,0,sy,0],[0,1,0,0],[-sy,0,cy,0],[0,0,0,1]])
    Rz = np.array([[cz,-sz,0,0],[sz,cz,0,0],[0,0,1,0],[0,0,0,1]])
    return Rz @ Ry @ Rx


def scene_kind_for_path(path: Union[str, Path]) -> str:
    """
    Pick a loader from the filename extension.

    Surface formats go to trimesh ("file"), FE/volume formats to meshio
    ("mesh_file"). Unknown extensions fall back to meshio with a warning.
    """
    p = Path(path)
    ext = p.suffix.lower()
    if not ext:
        raise ValueError(f"Could not parse filename extension for: {path}")
    if ext in TRIMESH_EXTENSIONS:
        return "file"
    if ext not in MESHIO_EXTENSIONS:
        logger.warning("Unhandled filename extension: %s. Attempting to load with meshio: %s", ext, path)
    return "mesh_file"


def _apply_options(meshes: List[MeshData], options: SceneLoadOptions) -> None:
    for mesh in meshes:
        if options.scale:
            s = float(options.scale)
            mesh.apply_transform(np.diag([s, s, s, 1.0]))

        if options.rotate_euler_deg:
            rx, ry, rz = options.rotate_euler_deg
            R = _rotation_matrix_xyz(
                np.deg2rad(rx),
                np.deg2rad(ry),
                np.deg2rad(rz),
            )
            mesh.apply_transform(R)

        if options.translate:
            t = np.array(options.translate, dtype=np.float64)
            mesh.vertices += t[None, :]


def build_scene_asset(
    spec: Union[Dict[str, Any], SceneSpec],
    *,
    options: Optional[SceneLoadOptions] = None,
) -> SceneAsset:
    """
    Build a SceneAsset from a SceneSpec or spec dict.

    Supported kinds:
      - file       (OBJ/STL/PLY/OFF/GLTF) via trimesh, scenes flattened
      - mesh_file  (VTK/VTU/MSH/...) via meshio, triangle cells only
      - primitive  (aobake_geom.gen.primitives)
    """
    if isinstance(spec, dict):
        spec = SceneSpec(**spec)
    options = options or SceneLoadOptions()

    kind = spec.kind.lower()

    if kind in ("file", "mesh_file"):
        path = Path(spec.path).expanduser().resolve()
        if not path.exists():
            raise FileNotFoundError(path)

        if kind == "file":
            from aobake_geom.io.trimesh_bridge import TrimeshBridge
            meshes = TrimeshBridge(vertex_normals=options.vertex_normals).load(path)
        else:
            from aobake_geom.io.meshio_bridge import load_meshio
            meshes = [load_meshio(path, vertex_normals=options.vertex_normals)]

    elif kind == "primitive":
        from aobake_geom.gen.primitives import build_primitive
        meshes = [build_primitive(spec.name, smooth_normals=options.vertex_normals, **spec.params)]

    else:
        raise ValueError(f"Unsupported SceneSpec kind: {kind}")

    _apply_options(meshes, options)

    bmin, bmax = SceneAsset.compute_bounds(meshes)
    asset = SceneAsset(
        meshes=meshes,
        bounds=(bmin, bmax),
        units=options.units,
        meta={
            "kind": kind,
            "source": spec.path or spec.name,
        },
    )
    logger.info(
        "loaded %s: %d mesh(es), %d triangles",
        asset.meta["source"], len(meshes), asset.n_faces,
    )
    return asset


def load_scene(
    scene: Any,
    *,
    options: Optional[SceneLoadOptions] = None,
) -> SceneAsset:
    """
    Convenience wrapper:
      - Path / str -> loader chosen by extension
      - SceneAsset -> returned as-is
      - MeshData   -> wrapped in a single-mesh SceneAsset
      - dict       -> SceneSpec
    """
    if isinstance(scene, SceneAsset):
        return scene

    if isinstance(scene, MeshData):
        return SceneAsset(meshes=[scene], bounds=SceneAsset.compute_bounds([scene]), meta={"kind": "mesh"})

    if isinstance(scene, (str, Path)):
        spec = SceneSpec(kind=scene_kind_for_path(scene), path=str(scene))
        return build_scene_asset(spec, options=options)

    if isinstance(scene, dict):
        return build_scene_asset(scene, options=options)

    raise TypeError(f"Unsupported scene input type: {type(scene)}")
