"""Sphere primitive."""

from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np

from raycaster.bounding_box import BoundingBox
from raycaster.prim import Prim
from raycaster.vecmath import EPSILON, normalize, transform_vector


class Sphere(Prim):
    """A sphere given by its centre and radius."""

    def __init__(self, shader: Any, origin: Any, radius: float) -> None:
        super().__init__(shader, origin)
        self._radius = float(radius)

    @property
    def radius(self) -> float:
        """The current radius of the sphere."""
        return self._radius

    def _hit_distance(self, ray: Any) -> Optional[float]:
        r2 = self._radius * self._radius
        to_center = self._origin - ray.org
        tb = float(to_center @ ray.dir)
        h2 = float(to_center @ to_center) - tb * tb
        if h2 > r2:
            return None

        delta = math.sqrt(r2 - h2)
        t0 = tb - delta
        t1 = tb + delta

        if t0 > ray.t:
            return None
        if t0 <= EPSILON:
            t0 = 0.0
            if t1 < EPSILON or t1 > ray.t:
                return None
        return t0 if t0 > EPSILON else t1

    def intersect(self, ray: Any) -> bool:
        """Update ``ray`` with the nearest hit on the sphere, if closer than ``ray.t``."""
        dist = self._hit_distance(ray)
        if dist is None:
            return False
        ray.t = dist
        ray.hit = self
        return True

    def if_intersect(self, ray: Any) -> bool:
        """Return whether ``ray`` hits the sphere, leaving ``ray`` unchanged."""
        return self._hit_distance(ray) is not None

    def texture_coords(self, ray: Any) -> np.ndarray:
        """Return spherical (longitude, latitude) coordinates scaled to unit ranges."""
        hit = self.wcs2ocs(ray.hit_point())
        r = float(np.linalg.norm(hit))
        phi = -math.atan2(hit[2], hit[0])
        theta = math.acos(min(r, float(hit[1])) / r)
        return np.array([0.5 * phi / math.pi, theta / math.pi])

    def dp(self, p: Any) -> tuple[np.ndarray, np.ndarray]:
        """Return the derivatives of the sphere surface at point ``p``."""
        x, y, z = (float(c) for c in self.wcs2ocs(p))
        rm = math.sqrt(x * x + y * y)
        dpdu = self.ocs2wcs(2 * math.pi * np.array([z, 0.0, -x]))
        dpdv = self.ocs2wcs(math.pi * np.array([x * y / rm, -rm, z * y / rm]))
        return dpdu, dpdv

    def bounding_box(self) -> BoundingBox:
        """Return the cube enclosing the sphere."""
        return BoundingBox(self._origin - self._radius, self._origin + self._radius)

    def _base_normal(self, ray: Any) -> np.ndarray:
        return normalize(ray.hit_point() - self._origin)

    def _apply_transform(self, t: np.ndarray) -> None:
        r = self._radius * normalize(np.ones(3))
        self._radius = float(np.linalg.norm(transform_vector(r, t)))