"""Seeded Perlin gradient noise with fractional Brownian motion."""

from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np

from raycaster.vecmath import normalize

_SIZE = 256


def _smootherstep(x: float) -> float:
    if x < 0:
        return 0.0
    if x > 1:
        return 1.0
    return x * x * x * (x * (x * 6 - 15) + 10)


def _lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


class PerlinNoise:
    """3D Perlin noise whose pattern is fixed by ``seed``."""

    def __init__(
        self,
        seed: int,
        amplitude: float = 1.0,
        frequency: float = 1.0,
        num_octaves: int = 1,
        gain: float = 0.5,
        lacunarity: float = 2.0,
    ) -> None:
        self.amplitude = amplitude
        self.frequency = frequency
        self.num_octaves = num_octaves
        self.gain = gain
        self.lacunarity = lacunarity

        rng = np.random.default_rng(seed)
        self._permutation = [int(v) for v in rng.permutation(_SIZE)]
        self._gradients = [
            normalize(rng.uniform(-1.0, 1.0, size=3)) for _ in range(_SIZE)
        ]

    def _hash(self, x: int, y: int, z: int) -> int:
        perm = self._permutation
        return perm[(perm[(perm[x] + y) % _SIZE] + z) % _SIZE]

    def eval(self, p: Any) -> float:
        """Return the noise value at point ``p``, roughly in [-1, 1]."""
        px, py, pz = (float(c) for c in p)
        mask = _SIZE - 1
        fx, fy, fz = math.floor(px), math.floor(py), math.floor(pz)

        xi0, yi0, zi0 = int(fx) & mask, int(fy) & mask, int(fz) & mask
        xi1, yi1, zi1 = (xi0 + 1) & mask, (yi0 + 1) & mask, (zi0 + 1) & mask

        tx, ty, tz = px - fx, py - fy, pz - fz
        u, v, w = _smootherstep(tx), _smootherstep(ty), _smootherstep(tz)

        def corner(xi: int, yi: int, zi: int, dx: float, dy: float, dz: float) -> float:
            g = self._gradients[self._hash(xi, yi, zi)]
            return float(g[0] * dx + g[1] * dy + g[2] * dz)

        x0, x1 = tx, tx - 1
        y0, y1 = ty, ty - 1
        z0, z1 = tz, tz - 1

        a = _lerp(corner(xi0, yi0, zi0, x0, y0, z0), corner(xi1, yi0, zi0, x1, y0, z0), u)
        b = _lerp(corner(xi0, yi1, zi0, x0, y1, z0), corner(xi1, yi1, zi0, x1, y1, z0), u)
        c = _lerp(corner(xi0, yi0, zi1, x0, y0, z1), corner(xi1, yi0, zi1, x1, y0, z1), u)
        d = _lerp(corner(xi0, yi1, zi1, x0, y1, z1), corner(xi1, yi1, zi1, x1, y1, z1), u)

        return _lerp(_lerp(a, b, v), _lerp(c, d, v), w)

    def eval_fbm(
        self,
        p: Any,
        amplitude: Optional[float] = None,
        frequency: Optional[float] = None,
        num_octaves: Optional[int] = None,
        gain: Optional[float] = None,
        lacunarity: Optional[float] = None,
    ) -> float:
        """Sum ``num_octaves`` layers of noise with growing frequency and shrinking amplitude.

        Parameters left as None take the values given to the constructor.
        """
        amplitude = self.amplitude if amplitude is None else amplitude
        frequency = self.frequency if frequency is None else frequency
        num_octaves = self.num_octaves if num_octaves is None else num_octaves
        gain = self.gain if gain is None else gain
        lacunarity = self.lacunarity if lacunarity is None else lacunarity

        point = np.asarray(p, dtype=float)
        result = 0.0
        for _ in range(num_octaves):
            result += amplitude * self.eval(frequency * point)
            frequency *= lacunarity
            amplitude *= gain
        return result