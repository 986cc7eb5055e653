from .primitives import build_primitive

__all__ = ["build_primitive"]
