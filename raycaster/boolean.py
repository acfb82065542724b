"""Constructive solid geometry: boolean combinations of two solids."""

from __future__ import annotations

import dataclasses
import enum
import warnings
from typing import Any, Iterable, Optional

import numpy as np

from raycaster.bounding_box import BoundingBox
from raycaster.bsp import BSPTree
from raycaster.prim import Prim
from raycaster.ray import Ray

_MAX_ITERATIONS = 100


class BoolOp(enum.Enum):
    """Boolean operators on two solids."""

    UNION = "union"
    INTERSECTION = "intersection"
    SUBTRACTION = "subtraction"


class _State(enum.Enum):
    ENTER = enum.auto()
    EXIT = enum.auto()
    MISS = enum.auto()


class BooleanPrim(Prim):
    """A compound primitive combining the primitives of solids A and B.

    ``a`` and ``b`` are the primitives bounding each solid. For subtraction
    the normals of B are flipped on construction. With ``accel`` each
    operand is indexed by a BSP tree of ``max_depth`` and ``max_primitives``.
    """

    def __init__(
        self,
        a: Iterable[Prim],
        b: Iterable[Prim],
        operation: BoolOp,
        max_depth: int = 20,
        max_primitives: int = 3,
        *,
        pivot: Any = None,
        accel: bool = False,
    ) -> None:
        super().__init__(None, np.zeros(3) if pivot is None else pivot)
        self._prims_a = list(a)
        self._prims_b = list(b)
        self._operation = BoolOp(operation)
        self._flipped_normal = False
        self._max_depth = max_depth
        self._max_primitives = max_primitives
        self._trees: Optional[tuple[BSPTree, BSPTree]] = (
            (BSPTree(), BSPTree()) if accel else None
        )

        if self._operation is BoolOp.SUBTRACTION:
            for prim in self._prims_b:
                prim.flip_normal()
        self._box = BoundingBox()
        self._refresh()

    @property
    def operation(self) -> BoolOp:
        """The boolean operation applied to the operands."""
        return self._operation

    @property
    def prims_a(self) -> list[Prim]:
        """The primitives of the first operand."""
        return list(self._prims_a)

    @property
    def prims_b(self) -> list[Prim]:
        """The primitives of the second operand."""
        return list(self._prims_b)

    def _refresh(self) -> None:
        self._compute_bounding_box()
        if self._trees is not None:
            self._trees[0].build(self._prims_a, self._max_depth, self._max_primitives)
            self._trees[1].build(self._prims_b, self._max_depth, self._max_primitives)

    def _trace(self, which: int, ray: Ray) -> None:
        if self._trees is not None:
            self._trees[which].intersect(ray)
        else:
            for prim in (self._prims_a, self._prims_b)[which]:
                prim.intersect(ray)

    def _classify(self, ray: Ray) -> _State:
        if ray.hit is None:
            return _State.MISS
        normal = ray.hit.normal(ray)
        if self._flipped_normal:
            normal = -normal
        return _State.ENTER if float(normal @ ray.dir) < 0 else _State.EXIT

    def _probe(self, which: int, ray: Ray) -> tuple[Ray, _State]:
        probe = dataclasses.replace(ray)
        self._trace(which, probe)
        return probe, self._classify(probe)

    def _max_depth_reached(self) -> None:
        warnings.warn("The maximum depth of calculations is reached.", RuntimeWarning)

    def _compute_union(self, ray: Ray) -> Optional[Ray]:
        min_ray = Ray(ray.org, ray.dir)
        for _ in range(_MAX_ITERATIONS):
            ra, sa = self._probe(0, min_ray)
            rb, sb = self._probe(1, min_ray)

            if sa is _State.MISS and sb is _State.MISS:
                return None
            if sa is _State.MISS:
                return rb
            if sb is _State.MISS:
                return ra
            if sa is sb:
                if sa is _State.ENTER:
                    return ra if ra.t < rb.t else rb
                return ra if ra.t > rb.t else rb
            if sa is _State.ENTER:
                if rb.t < ra.t:
                    return rb
                min_ray.org = ra.hit_point()
            else:
                if ra.t < rb.t:
                    return ra
                min_ray.org = rb.hit_point()
        self._max_depth_reached()
        return None

    def _compute_intersection(self, ray: Ray) -> Optional[Ray]:
        min_ray = Ray(ray.org, ray.dir)
        for _ in range(_MAX_ITERATIONS):
            ra, sa = self._probe(0, min_ray)
            rb, sb = self._probe(1, min_ray)

            if sa is _State.MISS or sb is _State.MISS:
                return None
            if sa is _State.ENTER and sb is _State.ENTER:
                min_ray.org = ra.hit_point() if ra.t < rb.t else rb.hit_point()
                continue
            if sa is _State.EXIT and sb is _State.EXIT:
                return ra if ra.t < rb.t else rb
            if sa is _State.ENTER:
                if ra.t < rb.t:
                    return ra
                min_ray.org = rb.hit_point()
            else:
                if rb.t < ra.t:
                    return rb
                min_ray.org = ra.hit_point()
        self._max_depth_reached()
        return None

    def _compute_subtraction(self, ray: Ray) -> Optional[Ray]:
        min_ray = Ray(ray.org, ray.dir)
        for _ in range(_MAX_ITERATIONS):
            ra, sa = self._probe(0, min_ray)
            if sa is _State.MISS:
                return None

            rb, sb = self._probe(1, min_ray)
            if sb is _State.MISS:
                return ra
            # B's normals are flipped, so its classification is reversed
            sb = _State.EXIT if sb is _State.ENTER else _State.ENTER

            if sa is _State.ENTER and sb is _State.ENTER:
                if ra.t < rb.t:
                    return ra
                min_ray.org = rb.hit_point()
            elif sa is _State.ENTER and sb is _State.EXIT:
                min_ray.org = ra.hit_point() if ra.t < rb.t else rb.hit_point()
            elif sa is _State.EXIT and sb is _State.EXIT:
                if rb.t < ra.t:
                    return rb
                min_ray.org = ra.hit_point()
            else:
                return ra if ra.t < rb.t else rb
        self._max_depth_reached()
        return None

    def intersect(self, ray: Any) -> bool:
        """Update ``ray`` with the closest hit on the compound surface, if closer than ``ray.t``.

        ``ray.hit`` is set to the underlying primitive that was hit.
        """
        compute = {
            BoolOp.UNION: self._compute_union,
            BoolOp.INTERSECTION: self._compute_intersection,
            BoolOp.SUBTRACTION: self._compute_subtraction,
        }[self._operation]
        found = compute(ray)
        if found is None:
            return False

        t = float(np.linalg.norm(ray.org - found.hit_point()))
        if t > ray.t:
            return False
        ray.t = t
        ray.hit = found.hit
        ray.b1 = found.b1
        ray.b2 = found.b2
        return True

    def if_intersect(self, ray: Any) -> bool:
        """Return whether ``ray`` hits the compound surface, leaving ``ray`` unchanged."""
        return self.intersect(dataclasses.replace(ray))

    def texture_coords(self, ray: Any) -> np.ndarray:
        """Not available: hits are always reported on the underlying primitives."""
        raise RuntimeError("A boolean primitive has no texture coordinates of its own")

    def dp(self, p: Any) -> tuple[np.ndarray, np.ndarray]:
        """Not available: hits are always reported on the underlying primitives."""
        raise RuntimeError("A boolean primitive has no surface derivatives of its own")

    def bounding_box(self) -> BoundingBox:
        """Return the box enclosing the result of the operation."""
        return self._box

    def flip_normal(self) -> None:
        """Reverse the normals of every primitive of both operands."""
        for prim in self._prims_a:
            prim.flip_normal()
        for prim in self._prims_b:
            prim.flip_normal()
        self._flipped_normal = not self._flipped_normal

    def _base_normal(self, ray: Any) -> np.ndarray:
        raise RuntimeError("A boolean primitive has no normal of its own")

    def _apply_transform(self, t: np.ndarray) -> None:
        for prim in self._prims_a:
            prim.transform(t)
        for prim in self._prims_b:
            prim.transform(t)
        self._refresh()

    def _compute_bounding_box(self) -> None:
        box_a = BoundingBox()
        box_b = BoundingBox()
        for prim in self._prims_a:
            box_a.extend_box(prim.bounding_box())
        for prim in self._prims_b:
            box_b.extend_box(prim.bounding_box())

        if self._operation is BoolOp.UNION:
            lo = np.minimum(box_a.min_point, box_b.min_point)
            hi = np.maximum(box_a.max_point, box_b.max_point)
        elif self._operation is BoolOp.INTERSECTION:
            lo = np.maximum(box_a.min_point, box_b.min_point)
            hi = np.minimum(box_a.max_point, box_b.max_point)
        else:
            lo = box_a.min_point.copy()
            hi = box_a.max_point.copy()
        self._box = BoundingBox(lo, hi)