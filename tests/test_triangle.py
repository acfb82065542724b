import math

import numpy as np
import pytest

from raycaster.ray import Ray
from raycaster.triangle import Triangle

A = (0.0, 0.0, 0.0)
B = (1.0, 0.0, 0.0)
C = (0.0, 1.0, 0.0)


def make_ray(org, direction):
    return Ray(np.array(org, dtype=float), np.array(direction, dtype=float))


def test_hit_sets_distance_and_barycentrics():
    tri = Triangle(None, A, B, C)
    ray = make_ray((0.25, 0.25, 1), (0, 0, -1))
    assert tri.intersect(ray)
    assert ray.hit is tri
    assert ray.t == pytest.approx(1)
    rebuilt = (1 - ray.b1 - ray.b2) * np.array(A) + ray.b1 * np.array(B) + ray.b2 * np.array(C)
    assert np.allclose(rebuilt, ray.hit_point())


def test_miss_outside_triangle():
    tri = Triangle(None, A, B, C)
    ray = make_ray((0.8, 0.8, 1), (0, 0, -1))
    assert not tri.intersect(ray)
    assert ray.t == math.inf
    assert ray.hit is None


def test_parallel_ray_misses():
    tri = Triangle(None, A, B, C)
    assert not tri.intersect(make_ray((0.2, 0.2, 1), (1, 0, 0)))


def test_hit_beyond_current_distance_is_rejected():
    tri = Triangle(None, A, B, C)
    ray = make_ray((0.25, 0.25, 1), (0, 0, -1))
    ray.t = 0.5
    assert not tri.intersect(ray)
    assert ray.t == 0.5


def test_if_intersect_does_not_modify_ray():
    tri = Triangle(None, A, B, C)
    ray = make_ray((0.25, 0.25, 1), (0, 0, -1))
    assert tri.if_intersect(ray)
    assert ray.t == math.inf
    assert ray.hit is None


def test_geometric_normal_is_unit_and_orthogonal_to_edges():
    tri = Triangle(None, A, B, C)
    ray = make_ray((0.25, 0.25, 1), (0, 0, -1))
    assert tri.intersect(ray)
    n = tri.normal(ray)
    assert np.linalg.norm(n) == pytest.approx(1)
    assert n @ (np.array(B) - np.array(A)) == pytest.approx(0)
    assert n @ (np.array(C) - np.array(A)) == pytest.approx(0)


def test_shading_normal_uses_vertex_normals_when_all_given():
    up = (0.0, 0.6, 0.8)
    tri = Triangle(None, A, B, C, na=up, nb=up, nc=up)
    ray = make_ray((0.2, 0.3, 1), (0, 0, -1))
    assert tri.intersect(ray)
    assert np.allclose(tri.shading_normal(ray), up)


def test_shading_normal_falls_back_to_geometric_normal():
    tri = Triangle(None, A, B, C, na=(0, 0.6, 0.8))
    ray = make_ray((0.2, 0.3, 1), (0, 0, -1))
    assert tri.intersect(ray)
    assert np.allclose(tri.shading_normal(ray), tri.normal(ray))


def test_texture_coordinates_interpolate_vertex_coordinates():
    tri = Triangle(None, A, B, C, (0, 0), (1, 0), (0, 1))
    ray = make_ray((0.3, 0.1, 1), (0, 0, -1))
    assert tri.intersect(ray)
    assert np.allclose(tri.texture_coords(ray), [ray.b1, ray.b2])


def test_dp_follows_edges_for_matching_texture_coordinates():
    tri = Triangle(None, A, B, C, (0, 0), (1, 0), (0, 1))
    dpdu, dpdv = tri.dp((0.2, 0.2, 0))
    assert np.allclose(dpdu, np.array(B) - np.array(A))
    assert np.allclose(dpdv, np.array(C) - np.array(A))


def test_dp_defaults_when_texture_coordinates_are_degenerate():
    dpdu, dpdv = Triangle(None, A, B, C).dp((0.2, 0.2, 0))
    assert np.allclose(dpdu, [1, 0, 0])
    assert np.allclose(dpdv, [0, 0, 1])


def test_bounding_box_contains_vertices():
    box = Triangle(None, A, B, C).bounding_box()
    assert np.allclose(box.min_point, A)
    assert np.allclose(box.max_point, (1, 1, 0))


def test_explicit_origin_is_kept():
    tri = Triangle(None, A, B, C, origin=(5, 5, 5))
    assert np.allclose(tri.origin, (5, 5, 5))


def test_translation_moves_vertices():
    tri = Triangle(None, A, B, C)
    move = np.eye(4)
    move[:3, 3] = [10, 0, 0]
    tri.transform(move)
    a, b, c = tri.vertices
    assert np.allclose(a, (10, 0, 0))
    assert np.allclose(c, (10, 1, 0))
    assert not tri.intersect(make_ray((0.25, 0.25, 1), (0, 0, -1)))
    assert tri.intersect(make_ray((10.25, 0.25, 1), (0, 0, -1)))