from .halton import (
    radical_inverse,
    radical_inverse_array,
    halton2d,
)
from .hashing import tea, rnd, triangle_jitter
from .orient import (
    DiagnosticsSink,
    LoggingDiagnostics,
    NormalOrienter,
    default_orienter,
)
from .triangle import halton_barycentric, sample_triangle
from .surface import (
    SurfaceSamplingConfig,
    TrianglePlan,
    plan_triangle_samples,
    sample_surface,
    sample_surface_random,
)

__all__ = [
    "radical_inverse",
    "radical_inverse_array",
    "halton2d",
    "tea",
    "rnd",
    "triangle_jitter",
    "DiagnosticsSink",
    "LoggingDiagnostics",
    "NormalOrienter",
    "default_orienter",
    "halton_barycentric",
    "sample_triangle",
    "SurfaceSamplingConfig",
    "TrianglePlan",
    "plan_triangle_samples",
    "sample_surface",
    "sample_surface_random",
]
