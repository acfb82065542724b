"""The ray record used throughout tracing."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from raycaster.vecmath import normalize

_ELEVATION = 1e-2


def _zeros(n: int):
    return lambda: np.zeros(n, dtype=float)


@dataclass
class Ray:
    """A ray with origin, direction and the state of its closest hit."""

    org: np.ndarray = field(default_factory=_zeros(3))
    dir: np.ndarray = field(default_factory=_zeros(3))
    ndc: np.ndarray = field(default_factory=_zeros(2))
    counter: int = 0
    t: float = math.inf
    hit: Any = None
    b1: float = 0.0
    b2: float = 0.0

    def __post_init__(self) -> None:
        self.org = np.asarray(self.org, dtype=float)
        self.dir = np.asarray(self.dir, dtype=float)
        self.ndc = np.asarray(self.ndc, dtype=float)

    def __str__(self) -> str:
        return f"org: {self.org}\ndir: {self.dir}\nt: {self.t}\n"

    def hit_point(self, normal: Any = None) -> np.ndarray:
        """Return ``org + t * dir``, lifted slightly along ``normal`` if given."""
        point = self.org + self.dir * self.t
        if normal is None:
            return point
        return point + np.asarray(normal, dtype=float) * _ELEVATION

    def reflected(self, normal: Any) -> "Ray":
        """Return the ray mirrored about ``normal`` at the hit point."""
        normal = np.asarray(normal, dtype=float)
        cos_alpha = -float(self.dir @ normal)
        origin = self.hit_point(normal)
        if cos_alpha > 0:
            direction = normalize(self.dir + 2 * cos_alpha * normal)
        else:
            direction = self.dir
        return Ray(origin, direction, self.ndc, self.counter)

    def refracted(self, normal: Any, k: float) -> Optional["Ray"]:
        """Return the ray bent through the surface, or None on total internal reflection."""
        normal = np.asarray(normal, dtype=float)
        if k == 1:
            return Ray(self.hit_point(-normal), self.dir, self.ndc, self.counter)

        cos_alpha = -float(self.dir @ normal)
        sin2_alpha = 1.0 - cos_alpha * cos_alpha
        k2_sin2_alpha = k * k * sin2_alpha
        if k2_sin2_alpha > 1:
            return None
        cos_beta = math.sqrt(1.0 - k2_sin2_alpha)
        direction = normalize((k * cos_alpha - cos_beta) * normal + k * self.dir)
        return Ray(self.hit_point(-normal), direction, self.ndc, self.counter)

    def retrace(self, scene: Any, max_counter: int = 5, exit_color: Any = None) -> np.ndarray:
        """Reset the hit state and trace the ray again in ``scene``.

        Once the ray has been traced ``max_counter`` times, ``exit_color``
        (black by default) is returned instead.
        """
        self.hit = None
        self.t = math.inf
        previous = self.counter
        self.counter += 1
        if previous >= max_counter:
            return np.zeros(3) if exit_color is None else np.asarray(exit_color, dtype=float)
        return scene.ray_trace(self)