import argparse
import logging

import numpy as np

from aobake_geom import SceneLoadOptions, load_scene, sample_surface

parser = argparse.ArgumentParser(description="Generate AO bake sample points for every mesh in a scene file.")
parser.add_argument("path", help="OBJ/STL/PLY/GLTF (trimesh) or VTK/VTU/MSH (meshio)")
parser.add_argument("--samples-per-triangle", type=float, default=3.0)
parser.add_argument("--min-samples-per-triangle", type=int, default=1)
parser.add_argument("--flat", action="store_true", help="ignore vertex normals")
parser.add_argument("--out", default=None, help="write samples to this .npz")
parser.add_argument("-v", "--verbose", action="store_true")
args = parser.parse_args()

logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

scene = load_scene(args.path, options=SceneLoadOptions(vertex_normals=not args.flat))
print("scene:", scene.summary())

arrays = {}
for i, mesh in enumerate(scene.meshes):
    num_samples = max(
        mesh.n_faces * args.min_samples_per_triangle,
        int(args.samples_per_triangle * mesh.n_faces),
    )
    samples = sample_surface(mesh, num_samples, min_samples_per_triangle=args.min_samples_per_triangle)
    print(f"mesh {i}:", samples.summary())
    arrays[f"positions_{i}"] = samples.sample_positions
    arrays[f"normals_{i}"] = samples.sample_normals
    arrays[f"face_normals_{i}"] = samples.sample_face_normals
    arrays[f"infos_{i}"] = samples.sample_infos

if args.out:
    np.savez(args.out, **arrays)
    print("wrote", args.out)
