"""Disc and annulus primitive."""

from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np

from raycaster.bounding_box import BoundingBox
from raycaster.plane import _surface_axis, plane_distance
from raycaster.prim import Prim
from raycaster.vecmath import normalize, transform_vector


class Disc(Prim):
    """A flat disc, or an annulus when ``inner_radius`` is above zero."""

    def __init__(
        self,
        shader: Any,
        origin: Any,
        normal: Any,
        radius: float,
        inner_radius: float = 0.0,
    ) -> None:
        super().__init__(shader, origin)
        self._normal = np.array(normal, dtype=float)
        self._radius = float(radius)
        self._inner_radius = float(inner_radius)
        # Initial geometry, kept for texturing
        self._n0 = self._normal.copy()
        self._t0 = _surface_axis(self._normal)
        self._r0 = self._radius
        self._ri0 = self._inner_radius

    @property
    def radius(self) -> float:
        """The current outer radius."""
        return self._radius

    @property
    def inner_radius(self) -> float:
        """The current inner radius."""
        return self._inner_radius

    def _hit_distance(self, ray: Any) -> Optional[float]:
        dist = plane_distance(self._origin, self._normal, ray)
        if dist is None:
            return None
        r = float(np.linalg.norm(ray.org + ray.dir * dist - self._origin))
        if r > self._radius or r < self._inner_radius:
            return None
        return dist

    def intersect(self, ray: Any) -> bool:
        """Update ``ray`` with the hit on the disc, if closer than ``ray.t``."""
        dist = self._hit_distance(ray)
        if dist is None:
            return False
        ray.t = dist
        ray.hit = self
        return True

    def if_intersect(self, ray: Any) -> bool:
        """Return whether ``ray`` hits the disc, leaving ``ray`` unchanged."""
        return self._hit_distance(ray) is not None

    def texture_coords(self, ray: Any) -> np.ndarray:
        """Return (angle, radial position) coordinates; the radial one is 0 on the rim."""
        hit = self.wcs2ocs(ray.hit_point())
        r = float(np.linalg.norm(hit))
        dot = float(self._t0 @ hit)
        det = float(self._n0 @ np.cross(self._t0, hit))
        phi = math.atan2(det, dot)
        return np.array([-0.5 * phi / math.pi, (self._r0 - r) / (self._r0 - self._ri0)])

    def dp(self, p: Any) -> tuple[np.ndarray, np.ndarray]:
        """Return the derivatives of the disc surface at point ``p``."""
        hit = normalize(self.wcs2ocs(p))
        dpdu = self.ocs2wcs(2 * math.pi * np.cross(hit, self._n0))
        dpdv = self.ocs2wcs((self._ri0 - self._r0) * hit)
        return dpdu, dpdv

    def bounding_box(self) -> BoundingBox:
        """Return the tight axis-aligned box around the disc."""
        extent = self._radius * np.sqrt(np.maximum(0.0, 1 - self._normal * self._normal))
        return BoundingBox(self._origin - extent, self._origin + extent)

    def _base_normal(self, ray: Any) -> np.ndarray:
        return self._normal.copy()

    def _apply_transform(self, t: np.ndarray) -> None:
        normal_matrix = np.linalg.inv(t).T
        self._normal = normalize(transform_vector(self._normal, normal_matrix))

        r = self._radius * normalize(np.ones(3))
        scale = float(np.linalg.norm(transform_vector(r, t))) / self._radius
        self._radius *= scale
        self._inner_radius *= scale