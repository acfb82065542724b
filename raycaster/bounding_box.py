"""Axis-aligned bounding boxes."""

from __future__ import annotations

from typing import Any

import numpy as np

from raycaster.vecmath import EPSILON, INFTY


class BoundingBox:
    """An axis-aligned box given by its minimal and maximal corners.

    A default box is empty: its minimum is +infinity and its maximum -infinity.
    """

    def __init__(self, min_point: Any = None, max_point: Any = None) -> None:
        self.min_point = (
            np.full(3, INFTY) if min_point is None else np.array(min_point, dtype=float)
        )
        self.max_point = (
            np.full(3, -INFTY) if max_point is None else np.array(max_point, dtype=float)
        )

    def __str__(self) -> str:
        return f"{self.min_point} {self.max_point}"

    def __repr__(self) -> str:
        return f"BoundingBox({self.min_point.tolist()}, {self.max_point.tolist()})"

    def extend(self, p: Any) -> None:
        """Grow the box to contain point ``p``."""
        p = np.asarray(p, dtype=float)
        self.min_point = np.minimum(p, self.min_point)
        self.max_point = np.maximum(p, self.max_point)

    def extend_box(self, box: "BoundingBox") -> None:
        """Grow the box to contain ``box``, padded by EPSILON on every side."""
        self.extend(box.min_point - EPSILON)
        self.extend(box.max_point + EPSILON)

    def split(self, dim: int, val: float) -> tuple["BoundingBox", "BoundingBox"]:
        """Cut the box with the plane ``x[dim] == val`` into lower and upper halves."""
        if not 0 <= dim < 3:
            raise ValueError(f"Splitting dimension {dim} is not in range [0; 2]")
        if not self.min_point[dim] < val < self.max_point[dim]:
            raise ValueError(
                f"Splitting value {val} does not lie in AABB range "
                f"[{self.min_point[dim]}: {self.max_point[dim]}]"
            )
        left = BoundingBox(self.min_point, self.max_point)
        right = BoundingBox(self.min_point, self.max_point)
        left.max_point[dim] = val
        right.min_point[dim] = val
        return left, right

    def overlaps(self, box: "BoundingBox") -> bool:
        """Return True if ``box`` touches this box, within EPSILON."""
        return not (
            np.any(box.min_point - EPSILON > self.max_point)
            or np.any(box.max_point + EPSILON < self.min_point)
        )

    def clip(self, ray: Any, t0: float, t1: float) -> tuple[float, float]:
        """Clip the ray interval [t0, t1] to the box.

        Returns the new interval; if the ray misses the box, the returned
        t1 is smaller than t0.
        """
        for dim in range(3):
            d = float(ray.dir[dim])
            if d == 0:
                continue
            den = 1.0 / d
            near, far = (
                (self.min_point[dim], self.max_point[dim])
                if d > 0
                else (self.max_point[dim], self.min_point[dim])
            )
            enter = (near - ray.org[dim]) * den
            if enter > t0:
                t0 = float(enter)
            leave = (far - ray.org[dim]) * den
            if leave < t1:
                t1 = float(leave)
            if dim < 2 and t0 > t1:
                break
        return t0, t1

    def center(self) -> np.ndarray:
        """Return the centre point of the box."""
        return (self.min_point + self.max_point) / 2