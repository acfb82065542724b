"""Binary space partitioning tree for accelerating ray-primitive tests."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

import numpy as np

from raycaster.bounding_box import BoundingBox
from raycaster.vecmath import EPSILON


def _split_distance(num: float, den: float) -> float:
    """Divide with IEEE semantics: a zero denominator gives +-inf or nan."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(num) / np.float64(den))


def _widest_dim(extent: np.ndarray) -> int:
    x, y, z = (float(c) for c in extent)
    if x > y:
        return 0 if x > z else 2
    return 1 if y > z else 2


class BSPNode:
    """A node of a BSP tree: a leaf holding primitives or a branch with two children."""

    def __init__(
        self,
        prims: Optional[Iterable[Any]] = None,
        split_dim: int = 0,
        split_val: float = 0.0,
        left: Optional["BSPNode"] = None,
        right: Optional["BSPNode"] = None,
    ) -> None:
        self.prims = list(prims) if prims is not None else []
        self.split_dim = split_dim
        self.split_val = float(split_val)
        self.left = left
        self.right = right

    @property
    def is_leaf(self) -> bool:
        """True if the node has no children."""
        return self.left is None and self.right is None

    def intersect(self, ray: Any, t0: float, t1: float) -> bool:
        """Trace ``ray`` through the node over the interval [t0, t1].

        On a hit ``ray.t`` and ``ray.hit`` are updated by the primitives.
        """
        if self.is_leaf:
            for prim in self.prims:
                prim.intersect(ray)
            return ray.hit is not None and ray.t < t1 + EPSILON

        dim = self.split_dim
        direction = float(ray.dir[dim])
        d = _split_distance(self.split_val - float(ray.org[dim]), direction)

        if direction < 0:
            front, back = self.right, self.left
        else:
            front, back = self.left, self.right

        if d <= t0:
            return back.intersect(ray, t0, t1)
        if d >= t1:
            return front.intersect(ray, t0, t1)
        if front.intersect(ray, t0, d):
            return True
        return back.intersect(ray, d, t1)


class BSPTree:
    """A BSP tree over a set of primitives, split at the middle of the widest axis."""

    def __init__(self) -> None:
        self._box = BoundingBox()
        self._max_depth = 0
        self._min_primitives = 0
        self._root: Optional[BSPNode] = None

    @property
    def root(self) -> Optional[BSPNode]:
        """The root node, or None before the tree is built."""
        return self._root

    @property
    def bounding_box(self) -> BoundingBox:
        """The box enclosing every primitive in the tree."""
        return self._box

    def build(
        self, prims: Sequence[Any], max_depth: int = 20, min_primitives: int = 3
    ) -> None:
        """(Re)build the tree for ``prims``.

        Recursion stops at ``max_depth`` or when a node holds at most
        ``min_primitives`` primitives.
        """
        prims = list(prims)
        box = BoundingBox()
        for prim in prims:
            box.extend_box(prim.bounding_box())
        self._box = box
        self._max_depth = max_depth
        self._min_primitives = min_primitives
        self._root = self._build(box, prims, 0)

    def _build(self, box: BoundingBox, prims: list, depth: int) -> BSPNode:
        if depth >= self._max_depth or len(prims) <= self._min_primitives:
            return BSPNode(prims)

        split_dim = _widest_dim(box.max_point - box.min_point)
        split_val = float((box.min_point[split_dim] + box.max_point[split_dim]) / 2)
        left_box, right_box = box.split(split_dim, split_val)

        left_prims = []
        right_prims = []
        for prim in prims:
            prim_box = prim.bounding_box()
            if prim_box.overlaps(left_box):
                left_prims.append(prim)
            if prim_box.overlaps(right_box):
                right_prims.append(prim)

        left = self._build(left_box, left_prims, depth + 1)
        right = self._build(right_box, right_prims, depth + 1)
        return BSPNode(None, split_dim, split_val, left, right)

    def intersect(self, ray: Any) -> bool:
        """Find the closest hit of a fresh ``ray``; ``ray.t`` and ``ray.hit`` are updated."""
        if ray.hit is not None:
            raise ValueError("The ray has already hit a primitive")
        if self._root is None:
            raise RuntimeError("The BSP tree has not been built")

        t0, t1 = self._box.clip(ray, 0.0, ray.t)
        if t1 < t0:
            return False
        return self._root.intersect(ray, t0, t1)