import math

import numpy as np
import pytest

from raycaster.bounding_box import BoundingBox
from raycaster.ray import Ray
from raycaster.vecmath import EPSILON, vec3


def unit_box():
    return BoundingBox(vec3(0, 0, 0), vec3(1, 1, 1))


def test_extend_points():
    box = BoundingBox()
    box.extend(vec3(1, -2, 3))
    box.extend(vec3(-1, 4, 0))
    assert np.allclose(box.min_point, [-1, -2, 0])
    assert np.allclose(box.max_point, [1, 4, 3])


def test_extend_box_adds_epsilon_padding():
    box = BoundingBox()
    box.extend_box(unit_box())
    assert np.allclose(box.min_point, [-EPSILON] * 3)
    assert np.allclose(box.max_point, [1 + EPSILON] * 3)


def test_split_halves():
    left, right = BoundingBox(vec3(0, 0, 0), vec3(4, 2, 2)).split(0, 1.5)
    assert np.allclose(left.max_point, [1.5, 2, 2])
    assert np.allclose(left.min_point, [0, 0, 0])
    assert np.allclose(right.min_point, [1.5, 0, 0])
    assert np.allclose(right.max_point, [4, 2, 2])


def test_split_does_not_modify_original():
    box = unit_box()
    box.split(1, 0.5)
    assert np.allclose(box.max_point, [1, 1, 1])


@pytest.mark.parametrize("dim, val", [(3, 0.5), (-1, 0.5), (0, 0.0), (0, 2.0)])
def test_split_rejects_bad_arguments(dim, val):
    with pytest.raises(ValueError):
        unit_box().split(dim, val)


def test_overlaps():
    a = unit_box()
    assert a.overlaps(BoundingBox(vec3(0.5, 0.5, 0.5), vec3(2, 2, 2)))
    assert a.overlaps(BoundingBox(vec3(1, 0, 0), vec3(2, 1, 1)))
    assert not a.overlaps(BoundingBox(vec3(1.1, 0, 0), vec3(2, 1, 1)))
    assert not a.overlaps(BoundingBox(vec3(0, -3, 0), vec3(1, -0.5, 1)))


def test_clip_hit():
    ray = Ray(vec3(0.5, 0.5, -2), vec3(0, 0, 1))
    t0, t1 = unit_box().clip(ray, 0, math.inf)
    assert t0 == pytest.approx(2)
    assert t1 == pytest.approx(3)


def test_clip_negative_direction():
    ray = Ray(vec3(0.5, 3, 0.5), vec3(0, -1, 0))
    t0, t1 = unit_box().clip(ray, 0, math.inf)
    assert t0 == pytest.approx(2)
    assert t1 == pytest.approx(3)


def test_clip_miss():
    ray = Ray(vec3(5, 5, -2), vec3(0, 0, 1))
    t0, t1 = unit_box().clip(ray, 0, math.inf)
    assert t1 < t0


def test_center():
    box = BoundingBox(vec3(-2, 0, 4), vec3(2, 6, 8))
    assert np.allclose(box.center(), [0, 3, 6])