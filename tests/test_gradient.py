import numpy as np
import pytest

from raycaster.gradient import Gradient
from raycaster.vecmath import vec3


def test_default_endpoints():
    g = Gradient()
    assert np.allclose(g.color_at(0), [0, 0, 0])
    assert np.allclose(g.color_at(1), [1, 1, 1])


def test_default_is_linear():
    g = Gradient()
    for x in (0.1, 0.37, 0.8):
        assert np.allclose(g.color_at(x), [x, x, x])


def test_add_color_in_middle():
    red = vec3(1, 0, 0)
    g = Gradient()
    g.add_color(0.5, red)
    assert np.allclose(g.color_at(0.5), red)
    assert np.allclose(g.color_at(0.25), red / 2)
    assert np.allclose(g.color_at(0.75), (red + vec3(1, 1, 1)) / 2)


def test_add_color_replaces_existing():
    g = Gradient()
    g.add_color(1.0, vec3(0, 0, 1))
    assert np.allclose(g.color_at(1.0), [0, 0, 1])


def test_from_mapping():
    g = Gradient(colors={0.0: vec3(0, 1, 0), 1.0: vec3(0, 0, 1)})
    assert np.allclose(g.color_at(0.5), [0, 0.5, 0.5])


def test_out_of_range_warns_and_clamps():
    g = Gradient(vec3(0.2, 0.2, 0.2), vec3(0.9, 0.9, 0.9))
    with pytest.warns(RuntimeWarning):
        below = g.color_at(-0.5)
    with pytest.warns(RuntimeWarning):
        above = g.color_at(1.5)
    assert np.allclose(below, [0.2, 0.2, 0.2])
    assert np.allclose(above, [0.9, 0.9, 0.9])