"""4x4 matrix helpers for the camera stack.

Matrices are ``float64`` numpy arrays in mathematical (row-major) layout and
transform column vectors, ``M @ v``. Every builder below post-multiplies its
input (``m @ op``), so a chain of calls applies the *last* operation to a
vertex first, matching the usual OpenGL matrix-stack idiom.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np


def identity() -> np.ndarray:
    return np.identity(4, dtype=np.float64)


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Return a perspective projection for a vertical field of view ``fovy``."""

    f = 1.0 / math.tan(fovy / 2.0)
    nf = 1.0 / (near - far)
    return np.array(
        [
            [f / aspect, 0.0, 0.0, 0.0],
            [0.0, f, 0.0, 0.0],
            [0.0, 0.0, (far + near) * nf, 2.0 * far * near * nf],
            [0.0, 0.0, -1.0, 0.0],
        ],
        dtype=np.float64,
    )


def translate(m: np.ndarray, v: Sequence[float]) -> np.ndarray:
    t = identity()
    t[0:3, 3] = v
    return m @ t


def scale(m: np.ndarray, v: Sequence[float]) -> np.ndarray:
    s = np.diag([float(v[0]), float(v[1]), float(v[2]), 1.0])
    return m @ s


def rotate_x(m: np.ndarray, rad: float) -> np.ndarray:
    c = math.cos(rad)
    s = math.sin(rad)
    r = np.array(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, c, -s, 0.0],
            [0.0, s, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=np.float64,
    )
    return m @ r


def rotate_z(m: np.ndarray, rad: float) -> np.ndarray:
    c = math.cos(rad)
    s = math.sin(rad)
    r = np.array(
        [
            [c, -s, 0.0, 0.0],
            [s, c, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=np.float64,
    )
    return m @ r


def invert(m: np.ndarray) -> np.ndarray | None:
    """Return the inverse of ``m`` or ``None`` when it is singular."""

    if not np.all(np.isfinite(m)):
        return None
    try:
        inverse = np.linalg.inv(m)
    except np.linalg.LinAlgError:
        return None
    if not np.all(np.isfinite(inverse)):
        return None
    return inverse


def transform_vec4(m: np.ndarray, v: Sequence[float]) -> np.ndarray:
    return m @ np.asarray(v, dtype=np.float64)


def to_gl(m: np.ndarray) -> np.ndarray:
    """Return ``m`` flattened column-major as ``float32`` for a uniform upload."""

    return np.asarray(m, dtype=np.float32).flatten(order="F")


__all__ = [
    "identity",
    "invert",
    "perspective",
    "rotate_x",
    "rotate_z",
    "scale",
    "to_gl",
    "transform_vec4",
    "translate",
]
