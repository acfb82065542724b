"""The scene: geometry, lights and cameras, and rendering of images."""

from __future__ import annotations

import dataclasses
import math
import warnings
from typing import Any, Callable, Iterable, Optional

import numpy as np

from raycaster.bsp import BSPTree
from raycaster.cameras import Camera
from raycaster.lights import Light
from raycaster.prim import Prim
from raycaster.ray import Ray
from raycaster.sampler import Sampler

_CENTER = np.array([0.5, 0.5])


class Scene:
    """Holds primitives, lights and cameras and renders the view of the active camera.

    Rays that hit nothing take ``bg_map(ray)`` if a background map is given,
    otherwise ``bg_color``.
    """

    def __init__(
        self,
        bg_color: Any = (0.0, 0.0, 0.0),
        bg_map: Optional[Callable[[Ray], Any]] = None,
    ) -> None:
        self._bg_color = np.array(bg_color, dtype=float)
        self._bg_map = bg_map
        self._ambient_color = np.ones(3)
        self._prims: list[Prim] = []
        self._lights: list[Light] = []
        self._cameras: list[Camera] = []
        self._active_camera = 0
        self._tree: Optional[BSPTree] = None

    @property
    def prims(self) -> list[Prim]:
        """The primitives of the scene."""
        return list(self._prims)

    @property
    def lights(self) -> list[Light]:
        """The light sources of the scene."""
        return list(self._lights)

    @property
    def cameras(self) -> list[Camera]:
        """The cameras of the scene."""
        return list(self._cameras)

    @property
    def ambient_color(self) -> np.ndarray:
        """The ambient colour."""
        return self._ambient_color.copy()

    @property
    def active_camera(self) -> Optional[Camera]:
        """The active camera, or None if there are no cameras."""
        return self._cameras[self._active_camera] if self._cameras else None

    def clear(self) -> None:
        """Remove all geometry, lights and cameras."""
        self._prims.clear()
        self._lights.clear()
        self._cameras.clear()
        self._active_camera = 0
        self._tree = None

    def add(self, item: Any) -> None:
        """Add a primitive, a light, a camera, or every primitive of an iterable solid.

        An added camera becomes the active one.
        """
        if isinstance(item, Prim):
            self._prims.append(item)
        elif isinstance(item, Light):
            self._lights.append(item)
        elif isinstance(item, Camera):
            self._cameras.append(item)
            self._active_camera = len(self._cameras) - 1
        elif isinstance(item, Iterable) and not isinstance(item, (str, bytes)):
            for prim in item:
                if not isinstance(prim, Prim):
                    raise TypeError(f"A solid may hold only primitives, got {prim!r}")
                self._prims.append(prim)
        else:
            raise TypeError(f"Cannot add {item!r} to a scene")

    def set_active_camera(self, index: int) -> None:
        """Make the camera at ``index`` active; an index out of range is ignored with a warning."""
        if 0 <= index < len(self._cameras):
            self._active_camera = index
        else:
            warnings.warn(
                f"Camera index ({index}) exceeds the number of cameras in scene "
                f"({len(self._cameras)}) and was not set.",
                RuntimeWarning,
            )

    def build_accel_structure(self, max_depth: int = 20, min_primitives: int = 3) -> None:
        """(Re)build the BSP tree over the current primitives; later tracing uses it."""
        tree = BSPTree()
        tree.build(self._prims, max_depth, min_primitives)
        self._tree = tree

    def _require_camera(self) -> Camera:
        camera = self.active_camera
        if camera is None:
            raise RuntimeError("Camera is not found. Add at least one camera to the scene.")
        return camera

    def _pixels(self, sampler: Optional[Sampler], trace: Callable[[Ray], Any], shape: tuple):
        camera = self._require_camera()
        width, height = camera.resolution
        image = np.zeros((height, width) + shape, dtype=float)
        for y in range(height):
            for x in range(width):
                n = sampler.num_samples if sampler is not None else 1
                total = np.zeros(shape, dtype=float)
                for _ in range(n):
                    sample = sampler.next_sample() if sampler is not None else _CENTER
                    total = total + trace(camera.init_ray(x, y, sample))
                image[y, x] = total / n
        return image

    def render(self, sampler: Optional[Sampler] = None) -> np.ndarray:
        """Render the view of the active camera as a (height, width, 3) uint8 image."""
        image = self._pixels(sampler, self.ray_trace, (3,))
        return np.clip(np.rint(image * 255), 0, 255).astype(np.uint8)

    def render_depth(self, sampler: Optional[Sampler] = None) -> np.ndarray:
        """Render the distance to the nearest surface as a (height, width) float array."""
        return self._pixels(sampler, self.ray_trace_depth, ())

    def intersect(self, ray: Ray) -> bool:
        """Find the closest primitive hit by ``ray``, updating ``ray.t`` and ``ray.hit``."""
        if self._tree is not None:
            return self._tree.intersect(ray)
        hit = False
        for prim in self._prims:
            hit |= prim.intersect(ray)
        return hit

    def if_intersect(self, ray: Ray) -> bool:
        """Return whether ``ray`` hits anything, leaving ``ray`` unchanged."""
        if self._tree is not None:
            return self._tree.intersect(dataclasses.replace(ray))
        return any(prim.if_intersect(ray) for prim in self._prims)

    def ray_trace(self, ray: Ray) -> np.ndarray:
        """Return the colour seen along ``ray``."""
        if self.intersect(ray):
            return np.asarray(ray.hit.shader.shade(ray), dtype=float)
        if self._bg_map is not None:
            return np.asarray(self._bg_map(ray), dtype=float)
        return self._bg_color.copy()

    def ray_trace_depth(self, ray: Ray) -> float:
        """Return the distance to the nearest hit along ``ray``, or infinity."""
        return float(ray.t) if self.intersect(ray) else math.inf