import math

import numpy as np
import pytest

from raycaster.plane import Plane
from raycaster.ray import Ray
from raycaster.vecmath import INFTY


def make_ray(org, direction):
    return Ray(np.array(org, dtype=float), np.array(direction, dtype=float))


def test_hit_from_above():
    plane = Plane(None, (0, 0, 0), (0, 1, 0))
    ray = make_ray((0, 5, 0), (0, -1, 0))
    assert plane.intersect(ray)
    assert ray.t == pytest.approx(5)
    assert ray.hit is plane


def test_parallel_ray_misses():
    plane = Plane(None, (0, 0, 0), (0, 1, 0))
    ray = make_ray((0, 5, 0), (1, 0, 0))
    assert not plane.intersect(ray)
    assert ray.t == math.inf


def test_plane_behind_ray_misses():
    plane = Plane(None, (0, 0, 0), (0, 1, 0))
    assert not plane.intersect(make_ray((0, 5, 0), (0, 1, 0)))


def test_hit_beyond_current_distance_is_rejected():
    plane = Plane(None, (0, 0, 0), (0, 1, 0))
    ray = make_ray((0, 5, 0), (0, -1, 0))
    ray.t = 2.0
    assert not plane.intersect(ray)
    assert ray.t == 2.0


def test_if_intersect_does_not_modify_ray():
    plane = Plane(None, (0, 0, 0), (0, 1, 0))
    ray = make_ray((0, 5, 0), (0, -1, 0))
    assert plane.if_intersect(ray)
    assert ray.t == math.inf
    assert ray.hit is None


def test_bounding_box_flat_along_axis_normal():
    box = Plane(None, (1, 2, 3), (0, 1, 0)).bounding_box()
    assert box.min_point[1] == 2
    assert box.max_point[1] == 2
    assert box.min_point[0] == -INFTY
    assert box.max_point[2] == INFTY


def test_bounding_box_of_tilted_plane_is_unbounded():
    box = Plane(None, (0, 0, 0), np.array([1, 1, 0]) / math.sqrt(2)).bounding_box()
    assert np.all(box.min_point == -INFTY)
    assert np.all(box.max_point == INFTY)


def test_texture_coordinates_follow_surface_axes():
    plane = Plane(None, (0, 0, 0), (0, 1, 0))
    ray = make_ray((2, 5, 3), (0, -1, 0))
    assert plane.intersect(ray)
    assert np.allclose(plane.texture_coords(ray), [2, 3])


def test_texture_coordinates_at_origin_are_zero():
    plane = Plane(None, (0, 0, 0), (0, 1, 0))
    ray = make_ray((0, 5, 0), (0, -1, 0))
    assert plane.intersect(ray)
    assert np.allclose(plane.texture_coords(ray), [0, 0])


def test_dp_axes_are_orthogonal_to_normal_and_each_other():
    plane = Plane(None, (0, 0, 0), (0, 0, 1))
    dpdu, dpdv = plane.dp((1, 1, 0))
    n = np.array([0, 0, 1.0])
    assert dpdu @ n == pytest.approx(0)
    assert dpdv @ n == pytest.approx(0)
    assert dpdu @ dpdv == pytest.approx(0)
    assert np.linalg.norm(dpdu) > 0


def test_translation_moves_plane_and_keeps_normal():
    plane = Plane(None, (0, 0, 0), (0, 1, 0))
    move = np.eye(4)
    move[:3, 3] = [0, 2, 0]
    plane.transform(move)
    ray = make_ray((1, 5, 1), (0, -1, 0))
    assert plane.intersect(ray)
    assert ray.hit_point()[1] == pytest.approx(2)
    assert np.allclose(plane.normal(ray), [0, 1, 0])


def test_flip_normal():
    plane = Plane(None, (0, 0, 0), (0, 1, 0))
    ray = make_ray((0, 5, 0), (0, -1, 0))
    plane.flip_normal()
    assert np.allclose(plane.normal(ray), [0, -1, 0])