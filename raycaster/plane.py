"""Infinite plane primitive."""

from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np

from raycaster.bounding_box import BoundingBox
from raycaster.prim import Prim
from raycaster.vecmath import EPSILON, INFTY, normalize, transform_vector


def _surface_axis(normal: np.ndarray) -> np.ndarray:
    """Return a vector lying in the plane with the given normal."""
    if normal[1] < 1.0:
        return np.cross(np.array([0.0, 1.0, 0.0]), normal)
    return np.cross(normal, np.array([0.0, 0.0, 1.0]))


def plane_distance(origin: np.ndarray, normal: np.ndarray, ray: Any) -> Optional[float]:
    """Return the distance along ``ray`` to the plane, or None if out of (EPSILON, ray.t]."""
    denom = float(ray.dir @ normal)
    if denom == 0:
        return None
    dist = float((origin - ray.org) @ normal) / denom
    if dist < EPSILON or math.isinf(dist) or dist > ray.t:
        return None
    return dist


class Plane(Prim):
    """An infinite plane through ``origin`` with the given ``normal``."""

    def __init__(self, shader: Any, origin: Any, normal: Any) -> None:
        super().__init__(shader, origin)
        self._normal = np.array(normal, dtype=float)
        self._u = _surface_axis(self._normal)
        self._v = np.cross(self._u, self._normal)

    def intersect(self, ray: Any) -> bool:
        """Update ``ray`` with the hit on the plane, if closer than ``ray.t``."""
        dist = plane_distance(self._origin, self._normal, ray)
        if dist is None:
            return False
        ray.t = dist
        ray.hit = self
        return True

    def if_intersect(self, ray: Any) -> bool:
        """Return whether ``ray`` hits the plane, leaving ``ray`` unchanged."""
        return plane_distance(self._origin, self._normal, ray) is not None

    def texture_coords(self, ray: Any) -> np.ndarray:
        """Return the hit point projected onto the plane's two surface axes."""
        hit = self.wcs2ocs(ray.hit_point())
        if np.linalg.norm(hit) > EPSILON:
            return np.array([float(hit @ self._u), float(hit @ self._v)])
        return np.zeros(2)

    def dp(self, p: Any) -> tuple[np.ndarray, np.ndarray]:
        """Return the plane's two surface axes in world coordinates."""
        return self.ocs2wcs(self._u), self.ocs2wcs(self._v)

    def bounding_box(self) -> BoundingBox:
        """Return an infinite box, flat along an axis the plane is orthogonal to."""
        min_point = np.full(3, -INFTY)
        max_point = np.full(3, INFTY)
        for i in range(3):
            if self._normal[i] == 1:
                min_point[i] = self._origin[i]
                max_point[i] = self._origin[i]
                break
        return BoundingBox(min_point, max_point)

    def _base_normal(self, ray: Any) -> np.ndarray:
        return self._normal.copy()

    def _apply_transform(self, t: np.ndarray) -> None:
        normal_matrix = np.linalg.inv(t).T
        self._normal = normalize(transform_vector(self._normal, normal_matrix))