# aobake_geom/__init__.py

"""
aobake_geom

Surface sample generation for ambient-occlusion baking.

Focus:
- Load triangle meshes (OBJ/STL/PLY/GLTF via trimesh, VTK/VTU/MSH via meshio)
- Allocate a fixed sample budget over triangles proportionally to area
- Place samples with per-triangle jittered Halton points
- Attach shading normal, face normal and differential area (dA) per sample

Design principles:
- Output buffers are preallocated numpy arrays, filled in place
- Deterministic: same mesh + parameters -> same samples
- Expose a small stable API surface from `__init__`
"""

from .core.geometry import SceneSpec, SceneLoadOptions, SceneAsset
from .core.mesh import MeshData
from .core.samples import SAMPLE_INFO_DTYPE, AOSamples
from .core.registry import build_scene_asset, load_scene
from .io.trimesh_bridge import TrimeshBridge
from .sample.halton import radical_inverse
from .sample.orient import NormalOrienter
from .sample.surface import (
    SurfaceSamplingConfig,
    plan_triangle_samples,
    sample_surface,
    sample_surface_random,
)

__all__ = [
    "SceneSpec",
    "SceneLoadOptions",
    "SceneAsset",
    "MeshData",
    "SAMPLE_INFO_DTYPE",
    "AOSamples",
    "build_scene_asset",
    "load_scene",
    "TrimeshBridge",
    "radical_inverse",
    "NormalOrienter",
    "SurfaceSamplingConfig",
    "plan_triangle_samples",
    "sample_surface",
    "sample_surface_random",
]
