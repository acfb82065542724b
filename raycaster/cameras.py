"""Cameras that turn pixel coordinates into primary rays."""

from __future__ import annotations

import math
import random
import warnings
from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

from raycaster.ray import Ray
from raycaster.sampler import uniform_sample_regular_ngon
from raycaster.vecmath import normalize

_CENTER = (0.5, 0.5)


def _vector(v: Any) -> np.ndarray:
    return np.array(v, dtype=float)


class Camera(ABC):
    """A camera with a resolution of ``(width, height)`` pixels."""

    def __init__(self, resolution: tuple[int, int]) -> None:
        width, height = resolution
        if width <= 0 or height <= 0:
            raise ValueError(f"Camera resolution must be positive, got {resolution}")
        self._resolution = (int(width), int(height))

    @property
    def resolution(self) -> tuple[int, int]:
        """The image size as ``(width, height)`` in pixels."""
        return self._resolution

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        width, height = self._resolution
        return width / height

    @property
    @abstractmethod
    def x_axis(self) -> np.ndarray:
        """The camera x-axis in world coordinates."""

    @property
    @abstractmethod
    def y_axis(self) -> np.ndarray:
        """The camera y-axis in world coordinates."""

    @property
    @abstractmethod
    def z_axis(self) -> np.ndarray:
        """The camera z-axis in world coordinates."""

    @abstractmethod
    def init_ray(self, x: int, y: int, sample: Any = _CENTER) -> Ray:
        """Return the primary ray through pixel ``(x, y)`` at sub-pixel position ``sample``."""

    def _ndc(self, x: int, y: int, sample: Any) -> tuple[float, float]:
        width, height = self._resolution
        if x >= width:
            warnings.warn(
                f"Argument x = {x} exceeds the camera resolution width ({width})",
                RuntimeWarning,
            )
        if y >= height:
            warnings.warn(
                f"Argument y = {y} exceeds the camera resolution height ({height})",
                RuntimeWarning,
            )
        return (x + float(sample[0])) / width, (y + float(sample[1])) / height


class _OrientedCamera(Camera):
    """A camera placed at a position, looking along a direction with an up-vector."""

    def __init__(
        self,
        resolution: tuple[int, int],
        pos: Any = (0.0, 0.0, 0.0),
        dir: Any = (0.0, 0.0, 1.0),
        up: Any = (0.0, 1.0, 0.0),
    ) -> None:
        super().__init__(resolution)
        self._pos = _vector(pos)
        self._dir = _vector(dir)
        self._up = _vector(up)
        self._axes: Optional[tuple[np.ndarray, np.ndarray, np.ndarray]] = None

    @property
    def position(self) -> np.ndarray:
        """The camera origin (centre of projection)."""
        return self._pos.copy()

    @position.setter
    def position(self, pos: Any) -> None:
        self._pos = _vector(pos)

    @property
    def direction(self) -> np.ndarray:
        """The viewing direction."""
        return self._dir.copy()

    @direction.setter
    def direction(self, dir: Any) -> None:
        self._dir = _vector(dir)
        self._axes = None

    @property
    def up(self) -> np.ndarray:
        """The up-vector."""
        return self._up.copy()

    @up.setter
    def up(self, up: Any) -> None:
        self._up = _vector(up)
        self._axes = None

    def _camera_axes(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        if self._axes is None:
            z = self._dir.copy()
            x = normalize(np.cross(z, self._up))
            y = normalize(np.cross(z, x))
            self._axes = (x, y, z)
        return self._axes

    @property
    def x_axis(self) -> np.ndarray:
        return self._camera_axes()[0].copy()

    @property
    def y_axis(self) -> np.ndarray:
        return self._camera_axes()[1].copy()

    @property
    def z_axis(self) -> np.ndarray:
        return self._camera_axes()[2].copy()


class PerspectiveCamera(_OrientedCamera):
    """A pinhole camera with a vertical opening angle given in degrees."""

    def __init__(
        self,
        resolution: tuple[int, int],
        pos: Any = (0.0, 0.0, 0.0),
        dir: Any = (0.0, 0.0, 1.0),
        up: Any = (0.0, 1.0, 0.0),
        angle: float = 90.0,
    ) -> None:
        super().__init__(resolution, pos, dir, up)
        self.angle = angle

    @property
    def angle(self) -> float:
        """The full vertical opening angle of the viewing frustum in degrees."""
        return 360 * math.atan(1.0 / self._focus) / math.pi

    @angle.setter
    def angle(self, angle: float) -> None:
        self._focus = 1.0 / math.tan(angle * math.pi / 360)

    @property
    def focus(self) -> float:
        """The focal length, ``1 / tan(angle / 2)``."""
        return self._focus

    def init_ray(self, x: int, y: int, sample: Any = _CENTER) -> Ray:
        """Return the ray from the camera origin through pixel ``(x, y)``."""
        ndcx, ndcy = self._ndc(x, y, sample)
        sscx = 2 * ndcx - 1
        sscy = 2 * ndcy - 1
        xa, ya, za = self._camera_axes()
        direction = normalize(self.aspect_ratio * sscx * xa + sscy * ya + self._focus * za)
        return Ray(self._pos.copy(), direction, np.array([ndcx, ndcy]))


class OrthographicCamera(_OrientedCamera):
    """A parallel-projection camera whose sensor spans ``size`` units vertically from the centre."""

    def __init__(
        self,
        resolution: tuple[int, int],
        pos: Any = (0.0, 0.0, 0.0),
        dir: Any = (0.0, 0.0, 1.0),
        up: Any = (0.0, 1.0, 0.0),
        size: float = 1.0,
    ) -> None:
        super().__init__(resolution, pos, dir, up)
        self.size = float(size)

    def init_ray(self, x: int, y: int, sample: Any = _CENTER) -> Ray:
        """Return the ray from the sensor point of pixel ``(x, y)`` along the viewing direction."""
        ndcx, ndcy = self._ndc(x, y, sample)
        sscx = 2 * ndcx - 1
        sscy = 2 * ndcy - 1
        xa, ya, _ = self._camera_axes()
        origin = self._pos + self.size * (self.aspect_ratio * sscx * xa + sscy * ya)
        return Ray(origin, self._dir.copy(), np.array([ndcx, ndcy]))


class EnvironmentCamera(_OrientedCamera):
    """A 360-degree spherical panorama camera.

    A non-zero pupillary distance ``pd`` shifts the eye sideways for stereo
    images: negative for the left eye, positive for the right.
    """

    def __init__(
        self,
        resolution: tuple[int, int],
        pos: Any = (0.0, 0.0, 0.0),
        dir: Any = (0.0, 0.0, 1.0),
        up: Any = (0.0, 1.0, 0.0),
        pd: float = 0.0,
    ) -> None:
        super().__init__(resolution, pos, dir, up)
        self.pd = float(pd)

    @property
    def x_axis(self) -> np.ndarray:
        return np.zeros(3)

    @property
    def y_axis(self) -> np.ndarray:
        return np.zeros(3)

    @property
    def z_axis(self) -> np.ndarray:
        return np.zeros(3)

    def init_ray(self, x: int, y: int, sample: Any = _CENTER) -> Ray:
        """Return the ray for pixel ``(x, y)`` in the equirectangular panorama."""
        ndcx, ndcy = self._ndc(x, y, sample)
        xa, ya, za = self._camera_axes()

        phi = math.pi * (2 * ndcx - 1)
        theta = math.pi * ndcy
        eq_dir = math.cos(phi) * za + math.sin(phi) * xa

        origin = self._pos.copy()
        if self.pd:
            eq_right = normalize(np.cross(eq_dir, self._up))
            origin = origin + self.pd * eq_right

        direction = normalize(math.sin(theta) * eq_dir - math.cos(theta) * ya)
        return Ray(origin, direction, np.array([ndcx, ndcy]))


class ThinLensCamera(Camera):
    """Adds depth of field to another camera by sampling points on a lens.

    ``n_blades`` of 0 gives a round aperture; otherwise it must lie in [3, 16]
    and the aperture is a regular polygon.
    """

    def __init__(
        self,
        camera: Camera,
        lens_radius: float = 0.0,
        focal_distance: float = 10.0,
        n_blades: int = 0,
        rng: Any = None,
    ) -> None:
        if not (n_blades == 0 or 3 <= n_blades <= 16):
            raise ValueError(f"Number of blades must be 0 or in [3; 16], got {n_blades}")
        super().__init__(camera.resolution)
        self._camera = camera
        self.lens_radius = float(lens_radius)
        self.focal_distance = float(focal_distance)
        self.n_blades = n_blades
        self._rng = rng if rng is not None else random

    @property
    def camera(self) -> Camera:
        """The underlying camera."""
        return self._camera

    @property
    def x_axis(self) -> np.ndarray:
        return self._camera.x_axis

    @property
    def y_axis(self) -> np.ndarray:
        return self._camera.y_axis

    @property
    def z_axis(self) -> np.ndarray:
        return self._camera.z_axis

    def init_ray(self, x: int, y: int, sample: Any = _CENTER) -> Ray:
        """Return the base camera's ray, moved to a random lens point and aimed at the focal plane."""
        ray = self._camera.init_ray(x, y, sample)
        if self.lens_radius <= 0:
            return ray

        lens_sample = (self._rng.random(), math.sqrt(self._rng.random()))
        side = self._rng.randint(1, self.n_blades) if self.n_blades else 0
        lens_point = self.lens_radius * uniform_sample_regular_ngon(
            lens_sample, self.n_blades, side
        )

        focus_point = ray.org + ray.dir * self.focal_distance
        ray.org = ray.org + lens_point[0] * self._camera.x_axis + lens_point[1] * self._camera.y_axis
        ray.dir = normalize(focus_point - ray.org)
        return ray