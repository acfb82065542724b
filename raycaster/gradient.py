"""Colour gradients over the unit interval."""

from __future__ import annotations

import bisect
import warnings
from typing import Any, Mapping, Optional

import numpy as np


class Gradient:
    """Interpolates linearly between colours placed at positions in [0, 1]."""

    def __init__(
        self,
        color0: Any = None,
        color1: Any = None,
        *,
        colors: Optional[Mapping[float, Any]] = None,
    ) -> None:
        if colors is not None:
            self._colors = {float(k): np.asarray(v, dtype=float) for k, v in colors.items()}
        else:
            self._colors = {
                0.0: np.zeros(3) if color0 is None else np.asarray(color0, dtype=float),
                1.0: np.ones(3) if color1 is None else np.asarray(color1, dtype=float),
            }
        self._positions = sorted(self._colors)

    def add_color(self, pos: float, color: Any) -> None:
        """Place ``color`` at ``pos``, replacing any colour already there."""
        pos = float(pos)
        if pos not in self._colors:
            bisect.insort(self._positions, pos)
        self._colors[pos] = np.asarray(color, dtype=float)

    def color_at(self, x: float) -> np.ndarray:
        """Return the interpolated colour at ``x``."""
        if x < 0 or x > 1:
            warnings.warn(
                f"The argument is out of allowed range [0; 1]. x = {x}", RuntimeWarning
            )
        index = bisect.bisect_left(self._positions, x)
        if index == 0:
            return self._colors[self._positions[0]]
        if index == len(self._positions):
            return self._colors[self._positions[-1]]
        a = self._positions[index - 1]
        b = self._positions[index]
        y = (x - a) / (b - a)
        return (1 - y) * self._colors[a] + y * self._colors[b]