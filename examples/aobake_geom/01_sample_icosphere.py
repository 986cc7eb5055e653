import logging

import numpy as np
import trimesh

from aobake_geom.io.trimesh_bridge import TrimeshBridge
from aobake_geom.sample.surface import sample_surface

logging.basicConfig(level=logging.INFO)

# create trimesh geometry
mesh = trimesh.creation.icosphere(subdivisions=3, radius=1.0)

# bridge (keeps smooth vertex normals as shading normals)
bridge = TrimeshBridge()
g = bridge.from_trimesh(mesh)

# 10 samples per triangle on average, at least 3 each
samples = sample_surface(g, 10 * g.n_faces, min_samples_per_triangle=3)

pts = np.asarray(samples.sample_positions)

print("mesh faces:", len(mesh.faces))
print("sample points:", pts.shape, "min/max", pts.min(), pts.max())
print("summary:", samples.summary())
print("sphere area:", 4 * np.pi, "(tessellated:", mesh.area, ")")
