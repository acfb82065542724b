"""Light sources that illuminate surface points through shadow rays."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

from raycaster.sampler import (
    Sampler,
    StratifiedSampler,
    cosine_sample_hemisphere,
    transform_sample_to_wcs,
)
from raycaster.vecmath import normalize

_FLOAT_EPSILON = float(np.finfo(np.float32).eps)


def _vector(v: Any) -> np.ndarray:
    return np.array(v, dtype=float)


def _aim(ray: Any, target: np.ndarray) -> None:
    """Turn ``ray`` into a shadow ray from its origin towards ``target``."""
    offset = target - ray.org
    ray.t = float(np.linalg.norm(offset))
    ray.dir = normalize(offset)
    ray.hit = None


class Light(ABC):
    """A light source with an emission colour and strength."""

    def __init__(self, intensity: Any, cast_shadow: bool = True) -> None:
        self.intensity = _vector(intensity)
        self.cast_shadow = cast_shadow

    @property
    @abstractmethod
    def num_samples(self) -> int:
        """The number of shadow rays the light needs per shaded point."""

    @abstractmethod
    def illuminate(self, ray: Any) -> Optional[np.ndarray]:
        """Turn ``ray`` (whose origin is the shaded point) into a shadow ray.

        Returns the incoming radiance, or None if the point receives no light.
        """


class OmniLight(Light):
    """A point light shining equally in all directions."""

    def __init__(self, intensity: Any, org: Any, cast_shadow: bool = True) -> None:
        super().__init__(intensity, cast_shadow)
        self.origin = _vector(org)

    @property
    def num_samples(self) -> int:
        return 1

    def illuminate(self, ray: Any) -> Optional[np.ndarray]:
        """Aim ``ray`` at the light and return the intensity falling off with squared distance."""
        _aim(ray, self.origin)
        return self.intensity * (1 / (ray.t * ray.t))


class SpotLight(OmniLight):
    """A point light limited to a cone, with a soft edge of ``beta`` degrees.

    ``alpha`` is the full opening angle of the fully lit cone and ``beta``
    the additional full angle over which the light fades out.
    """

    def __init__(
        self,
        intensity: Any,
        org: Any,
        dir: Any,
        alpha: float,
        beta: float = 0.0,
        cast_shadow: bool = True,
    ) -> None:
        super().__init__(intensity, org, cast_shadow)
        self.direction = normalize(dir)
        self._alpha = alpha / 2
        self._beta = beta / 2

    def illuminate(self, ray: Any) -> Optional[np.ndarray]:
        """Aim ``ray`` at the light and return the light attenuated by the cone."""
        res = super().illuminate(ray)
        cos_angle = float(np.clip(self.direction @ -ray.dir, -1.0, 1.0))
        angle = math.degrees(math.acos(cos_angle))
        if angle > self._alpha + self._beta:
            return None
        if angle <= self._alpha:
            return res
        k = (angle - self._alpha) / self._beta
        scale = (1 + math.cos(math.pi * k)) / 2
        return res * scale


class AreaLight(Light):
    """A quadrangular luminous surface given by its four corners ``p0`` .. ``p3``."""

    def __init__(
        self,
        intensity: Any,
        p0: Any,
        p1: Any,
        p2: Any,
        p3: Any,
        sampler: Optional[Sampler] = None,
        cast_shadow: bool = True,
    ) -> None:
        super().__init__(intensity, cast_shadow)
        self._org = _vector(p0)
        self._edge1 = _vector(p1) - self._org
        self._edge2 = _vector(p3) - self._org
        cross = np.cross(self._edge1, self._edge2)
        self._area = float(np.linalg.norm(cross))
        self._normal = normalize(cross)
        self._sampler = sampler if sampler is not None else StratifiedSampler(4, True)

    @property
    def num_samples(self) -> int:
        return self._sampler.num_samples

    @property
    def area(self) -> float:
        """The area of the luminous surface."""
        return self._area

    @property
    def normal(self) -> np.ndarray:
        """The unit normal of the luminous surface."""
        return self._normal.copy()

    def illuminate(self, ray: Any) -> Optional[np.ndarray]:
        """Aim ``ray`` at a sampled point of the surface and return its contribution."""
        s = self._sampler.next_sample()
        target = self._org + s[0] * self._edge1 + s[1] * self._edge2
        _aim(ray, target)
        cos_n = -float(ray.dir @ self._normal)
        if cos_n > 0:
            return self.intensity * (self._area * cos_n / (ray.t * ray.t))
        return None


class SkyLight(Light):
    """Ambient occlusion: light from the whole hemisphere above the shaded point.

    Occluders are searched within ``max_distance``; a non-positive value
    means an unlimited distance.
    """

    def __init__(
        self,
        intensity: Any,
        max_distance: float = 4.0,
        sampler: Optional[Sampler] = None,
        cast_shadow: bool = True,
    ) -> None:
        super().__init__(intensity, cast_shadow)
        self.max_distance = float(max_distance) if max_distance > _FLOAT_EPSILON else math.inf
        self._sampler = sampler if sampler is not None else StratifiedSampler(4, True, True)

    @property
    def num_samples(self) -> int:
        return self._sampler.num_samples

    def illuminate(self, ray: Any) -> Optional[np.ndarray]:
        """Aim ``ray`` into the hemisphere around the normal of the primitive it hit."""
        ray.t = 0.0
        normal = ray.hit.normal(ray)

        hemisphere_sample = cosine_sample_hemisphere(self._sampler.next_sample())
        ray.dir = transform_sample_to_wcs(hemisphere_sample, normal)
        ray.t = self.max_distance
        ray.hit = None

        cos_n = float(ray.dir @ normal)
        if cos_n > 0:
            return self.intensity / cos_n
        return None