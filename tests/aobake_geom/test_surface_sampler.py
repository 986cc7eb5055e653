import logging

import numpy as np
import pytest

from aobake_geom import MeshData, AOSamples, SurfaceSamplingConfig
from aobake_geom.gen.primitives import build_primitive
from aobake_geom.ops.features import compute_face_areas
from aobake_geom.sample.orient import FLIP_WARNING, NormalOrienter, default_orienter
from aobake_geom.sample.surface import plan_triangle_samples, sample_surface, sample_surface_random

def unit_triangles(n):
    """n disjoint right triangles of area 0.5 each, laid out along x."""
    verts, faces = [], []
    for i in range(n):
        x = 2.0 * i
        verts += [[x, 0.0, 0.0], [x + 1.0, 0.0, 0.0], [x, 1.0, 0.0]]
        faces.append([3 * i, 3 * i + 1, 3 * i + 2])
    return MeshData(vertices=np.array(verts), faces=np.array(faces))

def random_mesh(rng, n_tri):
    v = rng.normal(size=(n_tri * 3, 3))
    f = np.arange(n_tri * 3).reshape(n_tri, 3)
    return MeshData(vertices=v, faces=f)

def check_invariants(mesh, samples, floor):
    counts = samples.tri_sample_counts(mesh.n_faces)
    assert counts.sum() == samples.num_samples
    assert (counts >= floor).all()

    # contiguous, triangle-ordered layout
    np.testing.assert_array_equal(samples.tri_idx, np.repeat(np.arange(mesh.n_faces), counts))

    bary = samples.bary.astype(np.float64)
    assert (bary >= 0.0).all() and (bary <= 1.0).all()
    np.testing.assert_allclose(bary.sum(axis=1), 1.0, atol=1e-5)

    areas = compute_face_areas(mesh.face_vertices())
    for t in range(mesh.n_faces):
        dA = samples.dA[samples.tri_idx == t].astype(np.float64)
        assert (dA == dA[0]).all()
        assert dA[0] * counts[t] == pytest.approx(areas[t], rel=1e-5)

def test_scenario_equal_areas_with_floor(sink):
    mesh = unit_triangles(2)
    plan = plan_triangle_samples(mesh, 2, 10)
    assert plan.counts.tolist() == [5, 5]
    assert plan.offsets.tolist() == [0, 5]

    samples = sample_surface(mesh, 10, min_samples_per_triangle=2, orienter=NormalOrienter(sink=sink))
    assert samples.tri_sample_counts(2).tolist() == [5, 5]
    check_invariants(mesh, samples, 2)

def test_scenario_residual_goes_to_first_triangle():
    mesh = unit_triangles(3)
    plan = plan_triangle_samples(mesh, 0, 10)
    assert plan.counts.tolist() == [4, 3, 3]
    assert plan.offsets.tolist() == [0, 4, 7]
    assert plan.mesh_area == pytest.approx(1.5)

def test_scenario_single_sample_carries_whole_area(sink):
    mesh = build_primitive("triangle", vertices=[[0, 0, 0], [3, 0, 0], [0, 4, 0]])
    samples = sample_surface(mesh, 1, min_samples_per_triangle=1, orienter=NormalOrienter(sink=sink))
    assert samples.num_samples == 1
    assert samples.dA[0] == 6.0
    assert samples.tri_idx[0] == 0

def test_scenario_flipped_vertex_normals_warn_once(sink):
    # every vertex normal points against its face normal (+z)
    mesh = unit_triangles(20)
    normals = np.tile([0.0, 0.0, -1.0], (mesh.n_vertices, 1))
    mesh = MeshData(vertices=mesh.vertices, faces=mesh.faces, normals=normals, normal_faces=mesh.faces)
    orienter = NormalOrienter(sink=sink)

    for _ in range(3):
        samples = sample_surface(mesh, 100, orienter=orienter)
        np.testing.assert_allclose(samples.sample_normals, np.tile([0.0, 0.0, 1.0], (100, 1)), atol=1e-6)

    assert sink.messages == [FLIP_WARNING]
    assert orienter.flip_count == 3 * 20 * 3

def test_flat_fallback_uses_face_normals_exactly(sink):
    mesh = build_primitive("sphere", subdivisions=1)
    assert not mesh.has_normals
    samples = sample_surface(mesh, 400, orienter=NormalOrienter(sink=sink))
    assert (samples.sample_normals == samples.sample_face_normals).all()

def test_smooth_sphere_normals_point_outward(sink):
    mesh = build_primitive("sphere", subdivisions=2, smooth_normals=True)
    samples = sample_surface(mesh, 2000, min_samples_per_triangle=2, orienter=NormalOrienter(sink=sink))
    check_invariants(mesh, samples, 2)
    p = samples.sample_positions.astype(np.float64)
    assert (np.einsum("ij,ij->i", p, samples.sample_normals) > 0).all()
    assert sink.messages == []

def test_total_area_is_conserved(sink):
    mesh = build_primitive("box", extents=(1.0, 2.0, 3.0))
    samples = sample_surface(mesh, 1000, orienter=NormalOrienter(sink=sink))
    assert samples.summary()["total_area"] == pytest.approx(22.0, rel=1e-5)

@pytest.mark.parametrize("floor", [1, 3])
def test_random_meshes_coverage_and_area(rng_seed, floor, sink):
    rng = np.random.default_rng(rng_seed + floor)
    for _ in range(5):
        n_tri = int(rng.integers(1, 40))
        mesh = random_mesh(rng, n_tri)
        target = n_tri * floor + int(rng.integers(0, 500))
        samples = sample_surface(mesh, target, min_samples_per_triangle=floor, orienter=NormalOrienter(sink=sink))
        check_invariants(mesh, samples, floor)

def test_skewed_areas_small_targets_keep_shortfall_bounded(rng_seed):
    rng = np.random.default_rng(rng_seed)
    for _ in range(50):
        n_tri = int(rng.integers(2, 30))
        mesh = random_mesh(rng, n_tri)
        # shrink all but one triangle by up to 12 orders of magnitude
        scale = 10.0 ** -rng.uniform(0, 12, size=n_tri)
        scale[rng.integers(n_tri)] = 1.0
        v = mesh.vertices.reshape(n_tri, 3, 3)
        v = v[:, :1] + (v - v[:, :1]) * scale[:, None, None]
        mesh = MeshData(vertices=v.reshape(-1, 3), faces=mesh.faces)

        for floor in (0, 1):
            target = n_tri * floor + int(rng.integers(0, 3 * n_tri))
            plan = plan_triangle_samples(mesh, floor, target)
            assert plan.total == target
            assert (plan.counts >= floor).all()

def test_reproducible_runs(sink):
    mesh = build_primitive("cylinder", sections=12, smooth_normals=True)
    a = sample_surface(mesh, 777, min_samples_per_triangle=1, orienter=NormalOrienter(sink=sink))
    b = sample_surface(mesh, 777, min_samples_per_triangle=1, orienter=NormalOrienter(sink=sink))
    np.testing.assert_array_equal(a.sample_positions, b.sample_positions)
    np.testing.assert_array_equal(a.sample_normals, b.sample_normals)
    np.testing.assert_array_equal(a.sample_face_normals, b.sample_face_normals)
    np.testing.assert_array_equal(a.sample_infos, b.sample_infos)

def test_jitter_seed_changes_positions_not_counts(sink):
    mesh = unit_triangles(4)
    a = sample_surface(mesh, 40, orienter=NormalOrienter(sink=sink))
    b = sample_surface(mesh, 40, config=SurfaceSamplingConfig(jitter_seed=17), orienter=NormalOrienter(sink=sink))
    np.testing.assert_array_equal(a.tri_idx, b.tri_idx)
    np.testing.assert_array_equal(a.dA, b.dA)
    assert not np.array_equal(a.sample_positions, b.sample_positions)

def test_thread_pool_matches_sequential(sink):
    mesh = build_primitive("sphere", subdivisions=2, smooth_normals=True)
    seq = sample_surface(mesh, 3000, orienter=NormalOrienter(sink=sink))
    par = sample_surface(
        mesh, 3000,
        config=SurfaceSamplingConfig(num_workers=4),
        orienter=NormalOrienter(sink=sink),
    )
    np.testing.assert_array_equal(seq.sample_positions, par.sample_positions)
    np.testing.assert_array_equal(seq.sample_normals, par.sample_normals)
    np.testing.assert_array_equal(seq.sample_infos, par.sample_infos)

def test_fills_caller_buffers_in_place(sink):
    mesh = unit_triangles(3)
    samples = AOSamples.allocate(12)
    positions = samples.sample_positions
    plan = sample_surface_random(mesh, 1, samples, orienter=NormalOrienter(sink=sink))
    assert samples.sample_positions is positions
    assert plan.total == 12
    check_invariants(mesh, samples, 1)

def test_target_below_floor_is_rejected():
    mesh = unit_triangles(3)
    with pytest.raises(ValueError):
        sample_surface(mesh, 5, min_samples_per_triangle=2)
    with pytest.raises(ValueError):
        plan_triangle_samples(mesh, -1, 5)

def test_triangle_without_samples_is_fatal(sink):
    mesh = unit_triangles(4)
    with pytest.raises(ValueError, match="no samples"):
        sample_surface(mesh, 2, min_samples_per_triangle=0, orienter=NormalOrienter(sink=sink))

def test_bad_buffers_are_rejected():
    mesh = unit_triangles(2)
    samples = AOSamples.allocate(4)
    samples.sample_face_normals = np.zeros((3, 3), dtype=np.float32)
    with pytest.raises(ValueError):
        sample_surface_random(mesh, 1, samples)
    with pytest.raises(TypeError):
        sample_surface_random(mesh, 1, {"sample_positions": None})
    with pytest.raises(TypeError):
        sample_surface_random({"vertices": []}, 1, AOSamples.allocate(4))

def test_empty_mesh():
    mesh = MeshData(vertices=np.zeros((0, 3)), faces=np.zeros((0, 3), dtype=np.int64))
    assert sample_surface(mesh, 0).num_samples == 0
    with pytest.raises(ValueError):
        sample_surface(mesh, 3)

def test_zero_area_mesh_uses_residual_pass(sink):
    v = np.array([[0, 0, 0], [1, 0, 0], [2, 0, 0]], dtype=np.float64)
    mesh = MeshData(vertices=v, faces=[[0, 1, 2], [2, 1, 0]])
    samples = sample_surface(mesh, 2, min_samples_per_triangle=0, orienter=NormalOrienter(sink=sink))
    assert samples.tri_sample_counts(2).tolist() == [1, 1]
    assert (samples.dA == 0.0).all()
    with pytest.raises(RuntimeError):
        plan_triangle_samples(mesh, 0, 3)

def test_debug_logging_dumps_sample_infos(caplog, sink):
    caplog.set_level(logging.DEBUG, logger="aobake_geom.sample.surface")
    sample_surface(unit_triangles(1), 3, orienter=NormalOrienter(sink=sink))
    msgs = [r.getMessage() for r in caplog.records if r.name == "aobake_geom.sample.surface"]
    assert any(m.startswith("sampled 3 points on 1 triangles") for m in msgs)
    assert sum(m.startswith("sample info (") for m in msgs) == 3

def test_process_wide_orienter_warns_once_across_runs(caplog):
    mesh = unit_triangles(5)
    normals = np.tile([0.0, 0.0, -1.0], (mesh.n_vertices, 1))
    mesh = MeshData(vertices=mesh.vertices, faces=mesh.faces, normals=normals, normal_faces=mesh.faces)

    default_orienter().reset()
    caplog.set_level(logging.WARNING, logger="aobake_geom.sample.orient")
    try:
        sample_surface(mesh, 20)
        sample_surface(mesh, 30)
    finally:
        default_orienter().reset()

    records = [r for r in caplog.records if r.name == "aobake_geom.sample.orient"]
    assert [r.getMessage() for r in records] == [FLIP_WARNING]
    assert records[0].levelno == logging.WARNING
