from .geometry import SceneSpec, SceneLoadOptions, SceneAsset
from .mesh import MeshData
from .samples import SAMPLE_INFO_DTYPE, AOSamples
from .registry import build_scene_asset, load_scene

__all__ = [
    "SceneSpec",
    "SceneLoadOptions",
    "SceneAsset",
    "MeshData",
    "SAMPLE_INFO_DTYPE",
    "AOSamples",
    "build_scene_asset",
    "load_scene",
]
