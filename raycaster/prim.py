"""The base class of all geometric primitives."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

from raycaster.vecmath import transform_point, transform_vector


class Prim(ABC):
    """A geometric primitive with a shader, an origin and an object coordinate system.

    The primitive keeps the accumulated 4x4 transformation taking object
    coordinates to world coordinates; initially it is a translation to ``origin``.
    """

    def __init__(self, shader: Any, origin: Any) -> None:
        self._shader = shader
        self._origin = np.array(origin, dtype=float)
        self._flipped = False
        self.name = ""
        self._ocs_matrix = np.eye(4)
        self._ocs_matrix[:3, 3] = self._origin

    @property
    def shader(self) -> Any:
        """The shader applied to the primitive."""
        return self._shader

    @property
    def origin(self) -> np.ndarray:
        """The centre (pivot) of the primitive."""
        return self._origin.copy()

    @property
    def flipped(self) -> bool:
        """Whether the primitive's normal is reversed."""
        return self._flipped

    @abstractmethod
    def intersect(self, ray: Any) -> bool:
        """Test ``ray`` for a hit closer than ``ray.t``; on a hit update ``ray.t`` and ``ray.hit``."""

    @abstractmethod
    def if_intersect(self, ray: Any) -> bool:
        """Return whether ``ray`` hits the primitive, leaving ``ray`` unchanged."""

    @abstractmethod
    def texture_coords(self, ray: Any) -> np.ndarray:
        """Return the texture coordinates at the ray's hit point."""

    @abstractmethod
    def dp(self, p: Any) -> tuple[np.ndarray, np.ndarray]:
        """Return the surface derivatives dp/du and dp/dv at point ``p``."""

    @abstractmethod
    def bounding_box(self) -> Any:
        """Return the smallest axis-aligned box containing the primitive."""

    @abstractmethod
    def _base_normal(self, ray: Any) -> np.ndarray:
        """Return the geometric unit normal at the ray's hit point."""

    @abstractmethod
    def _apply_transform(self, t: np.ndarray) -> None:
        """Transform the primitive's own geometry by the 4x4 matrix ``t``."""

    def _base_shading_normal(self, ray: Any) -> np.ndarray:
        """Return the interpolated unit normal at the ray's hit point."""
        return self._base_normal(ray)

    def flip_normal(self) -> None:
        """Reverse the primitive's normal."""
        self._flipped = not self._flipped

    def normal(self, ray: Any) -> np.ndarray:
        """Return the unit normal at the ray's hit point, reversed if flipped."""
        n = self._base_normal(ray)
        return -n if self._flipped else n

    def shading_normal(self, ray: Any) -> np.ndarray:
        """Return the shading normal at the ray's hit point, reversed if flipped."""
        n = self._base_shading_normal(ray)
        return -n if self._flipped else n

    def transform(self, t: Any) -> None:
        """Apply the 4x4 affine matrix ``t`` relative to the world origin."""
        matrix = np.asarray(t, dtype=float)
        self._origin = transform_point(self._origin, matrix)
        self._ocs_matrix = matrix @ self._ocs_matrix
        self._apply_transform(matrix)

    def wcs2ocs(self, p: Any) -> np.ndarray:
        """Map the point ``p`` from world to object coordinates."""
        return transform_point(p, np.linalg.inv(self._ocs_matrix))

    def ocs2wcs(self, v: Any) -> np.ndarray:
        """Map the vector ``v`` from object to world coordinates."""
        return transform_vector(v, self._ocs_matrix)

    def _describe(self) -> Optional[str]:
        return self.name or None

    def __repr__(self) -> str:
        label = self._describe()
        suffix = f" {label!r}" if label else ""
        return f"<{type(self).__name__}{suffix} at {self._origin.tolist()}>"