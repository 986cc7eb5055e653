from __future__ import annotations

import logging
import threading
from typing import Optional, Protocol

import numpy as np

logger = logging.getLogger(__name__)

FLIP_WARNING = "Reversing vertex normals to point in same direction as face normals"


class DiagnosticsSink(Protocol):
    def warn(self, message: str) -> None: ...


class LoggingDiagnostics:
    """Routes advisories to a logger at WARNING level."""
    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def warn(self, message: str) -> None:
        self.log.warning(message)


class NormalOrienter:
    """
    Face-forward vertex normals against the triangle's geometric normal.

    A normal whose dot product with the face normal is not positive is negated.
    The first negation reports FLIP_WARNING through the sink; later ones are
    silent until reset(). Safe to share between threads.
    """
    def __init__(self, sink: Optional[DiagnosticsSink] = None):
        self.sink = sink or LoggingDiagnostics()
        self._lock = threading.Lock()
        self._warned = False
        self.flip_count = 0

    @property
    def warned(self) -> bool:
        return self._warned

    def reset(self) -> None:
        with self._lock:
            self._warned = False
            self.flip_count = 0

    def _note_flips(self, n: int) -> None:
        if n <= 0:
            return
        with self._lock:
            self.flip_count += n
            if self._warned:
                return
            self._warned = True
        self.sink.warn(FLIP_WARNING)

    def orient(self, normal: np.ndarray, face_normal: np.ndarray) -> np.ndarray:
        return self.orient_many(np.asarray(normal)[None, :], face_normal)[0]

    def orient_many(self, normals: np.ndarray, face_normal: np.ndarray) -> np.ndarray:
        """
        normals:     (k,3)
        face_normal: (3,)
        returns:     (k,3) oriented copy
        """
        normals = np.asarray(normals, dtype=np.float64)
        face_normal = np.asarray(face_normal, dtype=np.float64)
        if not np.any(face_normal):
            # degenerate triangle: no hemisphere to compare against
            return normals.copy()

        flip = (normals @ face_normal) <= 0.0
        out = np.where(flip[:, None], -normals, normals)
        self._note_flips(int(flip.sum()))
        return out


_default_orienter = NormalOrienter()


def default_orienter() -> NormalOrienter:
    """Process-wide orienter: one flip warning per process."""
    return _default_orienter
