"""Sample generators over the unit square and warps onto discs and hemispheres."""

from __future__ import annotations

import math
import random
from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from raycaster.vecmath import normalize, vec3


class Sampler(ABC):
    """Produces series of 2D samples in [0, 1)^2, one sample per call.

    A series holds ``n_samples ** 2`` samples. It is generated when first
    needed and, if ``renewable``, generated afresh each time it is exhausted;
    otherwise the same series is handed out again and again.
    Not safe to share between threads.
    """

    def __init__(self, n_samples: int, renewable: bool) -> None:
        if n_samples < 0:
            raise ValueError(f"Number of samples must not be negative, got {n_samples}")
        self._size = n_samples * n_samples
        self._renewable = renewable
        self._need_generation = True
        self._samples: list[np.ndarray] = []
        self._idx = 0

    @property
    def num_samples(self) -> int:
        """The number of samples in one series (at least 1)."""
        return max(1, self._size)

    @property
    def renewable(self) -> bool:
        """Whether a new series is generated after each one is exhausted."""
        return self._renewable

    def next_sample(self) -> np.ndarray:
        """Return the next sample of the current series.

        A sampler with no samples always returns the centre ``(0.5, 0.5)``.
        """
        if self._size == 0:
            return np.full(2, 0.5)

        if self._idx == 0 and self._need_generation:
            self._need_generation = self._renewable
            self._samples = [np.asarray(s, dtype=float) for s in self.generate_series(self._size)]

        result = self._samples[self._idx]
        self._idx = (self._idx + 1) % self._size
        return result.copy()

    @abstractmethod
    def generate_series(self, count: int) -> list[np.ndarray]:
        """Return a new series of ``count`` samples in [0, 1)^2."""


class RandomSampler(Sampler):
    """Samples spread uniformly at random over the unit square."""

    def __init__(self, n_samples: int, renewable: bool = True, rng: Any = None) -> None:
        super().__init__(n_samples, renewable)
        self._rng = rng if rng is not None else random

    def generate_series(self, count: int) -> list[np.ndarray]:
        """Return ``count`` independent uniform samples."""
        return [np.array([self._rng.random(), self._rng.random()]) for _ in range(count)]


class StratifiedSampler(Sampler):
    """One sample in each cell of a regular grid, optionally jittered within it."""

    def __init__(
        self,
        n_samples: int,
        renewable: bool = True,
        jitter: bool = True,
        rng: Any = None,
    ) -> None:
        super().__init__(n_samples, renewable)
        self._jitter = jitter
        self._rng = rng if rng is not None else random

    @property
    def jitter(self) -> bool:
        """Whether samples are placed randomly inside their cells."""
        return self._jitter

    def _offset(self) -> float:
        return self._rng.random() if self._jitter else 0.5

    def generate_series(self, count: int) -> list[np.ndarray]:
        """Return one sample per cell of a ``sqrt(count)`` square grid, row by row."""
        n = math.isqrt(count)
        if n == 0:
            return []
        delta = 1.0 / n
        return [
            delta * np.array([x + self._offset(), y + self._offset()])
            for y in range(n)
            for x in range(n)
        ]


def naive_sample_disk(sample: Any) -> np.ndarray:
    """Map a unit-square sample onto the unit disc, taking radius linearly."""
    r = float(sample[0])
    theta = 2 * math.pi * float(sample[1])
    return np.array([r * math.cos(theta), r * math.sin(theta)])


def uniform_sample_disk(sample: Any) -> np.ndarray:
    """Map a unit-square sample uniformly onto the unit disc."""
    r = math.sqrt(float(sample[0]))
    theta = 2 * math.pi * float(sample[1])
    return np.array([r * math.cos(theta), r * math.sin(theta)])


def concentric_sample_disk(sample: Any) -> np.ndarray:
    """Map a unit-square sample onto the unit disc with the concentric mapping."""
    sx = 2 * float(sample[0]) - 1
    sy = 2 * float(sample[1]) - 1

    if sx == 0 and sy == 0:
        return np.zeros(2)

    if abs(sx) > abs(sy):
        r = sx
        theta = 0.25 * math.pi * sy / r
    else:
        r = sy
        theta = 0.5 * math.pi - 0.25 * math.pi * sx / r

    return np.array([r * math.cos(theta), r * math.sin(theta)])


def uniform_sample_hemisphere(sample: Any, m: float = 0.0) -> np.ndarray:
    """Map a unit-square sample onto the upper unit hemisphere.

    ``m`` above zero pushes the samples towards the pole.
    """
    z = float(sample[0]) ** (1 / (m + 1))
    r = math.sqrt(max(0.0, 1.0 - z * z))
    phi = 2 * math.pi * float(sample[1])
    return vec3(r * math.cos(phi), r * math.sin(phi), z)


def cosine_sample_hemisphere(sample: Any) -> np.ndarray:
    """Map a unit-square sample onto the upper hemisphere with cosine weighting."""
    s = concentric_sample_disk(sample)
    z = math.sqrt(max(0.0, 1.0 - s[0] * s[0] - s[1] * s[1]))
    return vec3(s[0], s[1], z)


def uniform_sample_regular_ngon(sample: Any, n_sides: int, side: int) -> np.ndarray:
    """Map a unit-square sample into the triangle ``side`` of a regular polygon.

    Sides are numbered from 1 to ``n_sides``. With ``n_sides == 0`` the
    polygon becomes a disc and the concentric disc mapping is used.
    """
    if n_sides == 0:
        return concentric_sample_disk(sample)
    if not 0 < side <= n_sides:
        raise ValueError(f"Side {side} is not in range [1; {n_sides}]")

    theta = 2 * math.pi / n_sides
    a = np.array([math.sin(theta * (side - 1)), math.cos(theta * (side - 1))])
    b = np.array([math.sin(theta * side), math.cos(theta * side)])
    s0 = float(sample[0])
    c = s0 * a + (1.0 - s0) * b
    return math.sqrt(float(sample[1])) * c


def transform_sample_to_wcs(sample: Any, normal: Any) -> np.ndarray:
    """Rotate a hemisphere sample so that its pole (0, 0, 1) points along ``normal``."""
    v = np.asarray(sample, dtype=float)
    axis = normalize((vec3(0, 0, 1) + np.asarray(normal, dtype=float)) / 2)
    return -v + axis * float(axis @ v) * 2