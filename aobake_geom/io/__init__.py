from .meshio_bridge import load_meshio, save_meshio, meshdata_from_meshio
from .trimesh_bridge import TrimeshBridge

__all__ = [
    "load_meshio",
    "save_meshio",
    "meshdata_from_meshio",
    "TrimeshBridge",
]
