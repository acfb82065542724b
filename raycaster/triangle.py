"""Triangle primitive."""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from raycaster.bounding_box import BoundingBox
from raycaster.prim import Prim
from raycaster.vecmath import EPSILON, normalize, transform_point, transform_vector

_DET_EPSILON = float(np.finfo(np.float32).eps)


def _optional_vector(v: Any) -> Optional[np.ndarray]:
    return None if v is None else np.array(v, dtype=float)


def _tex(v: Any) -> np.ndarray:
    return np.zeros(2) if v is None else np.array(v, dtype=float)


class Triangle(Prim):
    """A triangle with optional per-vertex texture coordinates and normals.

    Without an explicit ``origin`` the pivot is placed at ``0.33 * (a + b + c)``.
    """

    def __init__(
        self,
        shader: Any,
        a: Any,
        b: Any,
        c: Any,
        ta: Any = None,
        tb: Any = None,
        tc: Any = None,
        na: Any = None,
        nb: Any = None,
        nc: Any = None,
        *,
        origin: Any = None,
    ) -> None:
        a = np.array(a, dtype=float)
        b = np.array(b, dtype=float)
        c = np.array(c, dtype=float)
        super().__init__(shader, 0.33 * (a + b + c) if origin is None else origin)
        self._a, self._b, self._c = a, b, c
        self._ta, self._tb, self._tc = _tex(ta), _tex(tb), _tex(tc)
        self._na = _optional_vector(na)
        self._nb = _optional_vector(nb)
        self._nc = _optional_vector(nc)
        self._update_edges()
        self._normal = normalize(np.cross(self._edge1, self._edge2))

    @property
    def vertices(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """The three vertex positions."""
        return self._a.copy(), self._b.copy(), self._c.copy()

    def _update_edges(self) -> None:
        self._edge1 = self._b - self._a
        self._edge2 = self._c - self._a

    def _moeller_trumbore(self, ray: Any) -> Optional[tuple[float, float, float]]:
        pvec = np.cross(ray.dir, self._edge2)
        det = float(self._edge1 @ pvec)
        if abs(det) < _DET_EPSILON:
            return None
        inv_det = 1.0 / det

        tvec = ray.org - self._a
        lam = float(tvec @ pvec) * inv_det
        if lam < 0.0 or lam > 1.0:
            return None

        qvec = np.cross(tvec, self._edge1)
        mue = float(ray.dir @ qvec) * inv_det
        if mue < 0.0 or mue + lam > 1.0:
            return None

        t = float(self._edge2 @ qvec) * inv_det
        if ray.t <= t or t < EPSILON:
            return None
        return t, lam, mue

    def intersect(self, ray: Any) -> bool:
        """Update ``ray`` with the hit distance and barycentrics, if closer than ``ray.t``."""
        found = self._moeller_trumbore(ray)
        if found is None:
            return False
        ray.t, ray.b1, ray.b2 = found
        ray.hit = self
        return True

    def if_intersect(self, ray: Any) -> bool:
        """Return whether ``ray`` hits the triangle, leaving ``ray`` unchanged."""
        return self._moeller_trumbore(ray) is not None

    def texture_coords(self, ray: Any) -> np.ndarray:
        """Return the vertex texture coordinates interpolated at the ray's barycentrics."""
        return (1.0 - ray.b1 - ray.b2) * self._ta + ray.b1 * self._tb + ray.b2 * self._tc

    def dp(self, p: Any) -> tuple[np.ndarray, np.ndarray]:
        """Return the surface derivatives along the texture axes."""
        dpdu = np.array([1.0, 0.0, 0.0])
        dpdv = np.array([0.0, 0.0, 1.0])

        du1 = self._ta[0] - self._tc[0]
        du2 = self._tb[0] - self._tc[0]
        dv1 = self._ta[1] - self._tc[1]
        dv2 = self._tb[1] - self._tc[1]
        dp1 = self._a - self._c
        dp2 = self._b - self._c

        determinant = du1 * dv2 - dv1 * du2
        if determinant != 0:
            inv_det = 1.0 / determinant
            dpdu = (dv2 * dp1 - dv1 * dp2) * inv_det
            dpdv = (-du2 * dp1 + du1 * dp2) * inv_det
        return dpdu, dpdv

    def bounding_box(self) -> BoundingBox:
        """Return the smallest box containing the three vertices."""
        box = BoundingBox()
        for vertex in (self._a, self._b, self._c):
            box.extend(vertex)
        return box

    def _base_normal(self, ray: Any) -> np.ndarray:
        return self._normal.copy()

    def _base_shading_normal(self, ray: Any) -> np.ndarray:
        if self._na is not None and self._nb is not None and self._nc is not None:
            return (1.0 - ray.b1 - ray.b2) * self._na + ray.b1 * self._nb + ray.b2 * self._nc
        return self._normal.copy()

    def _apply_transform(self, t: np.ndarray) -> None:
        self._a = transform_point(self._a, t)
        self._b = transform_point(self._b, t)
        self._c = transform_point(self._c, t)

        normal_matrix = np.linalg.inv(t).T
        self._normal = normalize(transform_vector(self._normal, normal_matrix))
        if self._na is not None:
            self._na = normalize(transform_vector(self._na, normal_matrix))
        if self._nb is not None:
            self._nb = normalize(transform_vector(self._nb, normal_matrix))
        if self._nc is not None:
            self._nc = normalize(transform_vector(self._nc, normal_matrix))

        self._update_edges()