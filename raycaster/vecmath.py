"""Small vector helpers built on numpy arrays."""

from __future__ import annotations

import random
from typing import Any

import numpy as np

EPSILON = 1e-4
"""Tolerance used by intersection and bounding-volume tests."""

INFTY = 1e20
"""A value treated as infinitely large for bounding volumes."""


def vec3(x: float, y: float, z: float) -> np.ndarray:
    """Return a three-component float vector."""
    return np.array([x, y, z], dtype=float)


def normalize(v: Any) -> np.ndarray:
    """Return ``v`` scaled to unit length; a zero vector stays zero."""
    arr = np.asarray(v, dtype=float)
    length = float(np.linalg.norm(arr))
    return arr / length if length else arr * 0.0


def random_tangents(normal: Any, rng: Any = None) -> tuple[np.ndarray, np.ndarray]:
    """Return two random unit vectors spanning a plane around ``normal``.

    ``rng`` is any object with a ``random()`` method returning values in [0, 1).
    """
    source = rng if rng is not None else random
    s1 = source.random()
    s2 = source.random()
    nx, ny, nz = (float(c) for c in np.asarray(normal, dtype=float))

    if abs(nx) > 0.1:
        first = vec3(-(s1 * ny + s2 * nz) / nx, s1, s2)
    elif abs(ny) > 0.1:
        first = vec3(s1, -(s1 * nx + s2 * nz / ny), s2)
    else:
        first = vec3(s1, s2, -(s1 * nx + s2 * ny) / nz)

    second = np.cross(np.asarray(normal, dtype=float), first)
    return normalize(first), normalize(second)


def transform_point(p: Any, t: Any) -> np.ndarray:
    """Apply the 4x4 affine matrix ``t`` to the point ``p``."""
    matrix = np.asarray(t, dtype=float)
    homogeneous = matrix @ np.append(np.asarray(p, dtype=float), 1.0)
    w = homogeneous[3]
    if w not in (0.0, 1.0):
        return homogeneous[:3] / w
    return homogeneous[:3]


def transform_vector(v: Any, t: Any) -> np.ndarray:
    """Apply the linear part of the 4x4 matrix ``t`` to the vector ``v``."""
    matrix = np.asarray(t, dtype=float)
    return matrix[:3, :3] @ np.asarray(v, dtype=float)