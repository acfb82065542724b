import math
import random

import numpy as np
import pytest

from raycaster.sampler import (
    RandomSampler,
    StratifiedSampler,
    concentric_sample_disk,
    cosine_sample_hemisphere,
    naive_sample_disk,
    transform_sample_to_wcs,
    uniform_sample_disk,
    uniform_sample_hemisphere,
    uniform_sample_regular_ngon,
)


def _grid(n=5):
    return [((i + 0.5) / n, (j + 0.5) / n) for i in range(n) for j in range(n)]


def test_empty_sampler_returns_centre():
    sampler = StratifiedSampler(0)
    assert sampler.num_samples == 1
    np.testing.assert_allclose(sampler.next_sample(), [0.5, 0.5])
    np.testing.assert_allclose(sampler.next_sample(), [0.5, 0.5])


def test_num_samples_is_square():
    assert RandomSampler(3).num_samples == 9


def test_negative_count_rejected():
    with pytest.raises(ValueError):
        RandomSampler(-1)


def test_non_renewable_repeats_series():
    sampler = StratifiedSampler(2, False, rng=random.Random(11))
    first = [sampler.next_sample() for _ in range(4)]
    second = [sampler.next_sample() for _ in range(4)]
    for a, b in zip(first, second):
        np.testing.assert_array_equal(a, b)


def test_renewable_regenerates_after_exhaustion():
    sampler = StratifiedSampler(2, True, rng=random.Random(11))
    first = [tuple(sampler.next_sample()) for _ in range(4)]
    second = [tuple(sampler.next_sample()) for _ in range(4)]
    assert first != second
    for index, s in enumerate(second):
        x, y = index % 2, index // 2
        assert x / 2 <= s[0] < (x + 1) / 2
        assert y / 2 <= s[1] < (y + 1) / 2


def test_samples_handed_out_in_order():
    sampler = StratifiedSampler(2, jitter=False)
    samples = [sampler.next_sample() for _ in range(4)]
    expected = [[0.25, 0.25], [0.75, 0.25], [0.25, 0.75], [0.75, 0.75]]
    for got, want in zip(samples, expected):
        np.testing.assert_allclose(got, want)


def test_stratified_without_jitter_hits_cell_centres():
    sampler = StratifiedSampler(4, jitter=False)
    series = sampler.generate_series(16)
    assert len(series) == 16
    for index, s in enumerate(series):
        x, y = index % 4, index // 4
        np.testing.assert_allclose(s, [(x + 0.5) / 4, (y + 0.5) / 4])


def test_stratified_jitter_stays_in_cells():
    sampler = StratifiedSampler(3, rng=random.Random(7))
    series = sampler.generate_series(9)
    for index, s in enumerate(series):
        x, y = index % 3, index // 3
        assert x / 3 <= s[0] < (x + 1) / 3
        assert y / 3 <= s[1] < (y + 1) / 3


def test_random_sampler_in_unit_square():
    sampler = RandomSampler(4, rng=random.Random(1))
    samples = [sampler.next_sample() for _ in range(32)]
    for s in samples:
        assert 0 <= s[0] < 1 and 0 <= s[1] < 1
    assert len({tuple(s) for s in samples}) == 32


def test_random_sampler_is_reproducible_with_seed():
    a = RandomSampler(2, rng=random.Random(3)).generate_series(4)
    b = RandomSampler(2, rng=random.Random(3)).generate_series(4)
    for x, y in zip(a, b):
        np.testing.assert_array_equal(x, y)


@pytest.mark.parametrize("warp", [naive_sample_disk, uniform_sample_disk, concentric_sample_disk])
def test_disk_warps_stay_in_unit_disc(warp):
    for s in _grid():
        assert np.linalg.norm(warp(s)) <= 1 + 1e-12


def test_concentric_centre_maps_to_origin():
    np.testing.assert_array_equal(concentric_sample_disk((0.5, 0.5)), [0.0, 0.0])


def test_uniform_disk_radius_is_sqrt():
    point = uniform_sample_disk((0.25, 0.0))
    np.testing.assert_allclose(point, [math.sqrt(0.25), 0.0])


@pytest.mark.parametrize("m", [0.0, 2.0])
def test_uniform_hemisphere_unit_and_upper(m):
    for s in _grid():
        v = uniform_sample_hemisphere(s, m)
        assert v[2] >= 0
        assert np.linalg.norm(v) == pytest.approx(1.0)


def test_hemisphere_exponent_narrows_towards_pole():
    plain = uniform_sample_hemisphere((0.3, 0.1), 0.0)
    narrow = uniform_sample_hemisphere((0.3, 0.1), 3.0)
    assert narrow[2] > plain[2]


def test_cosine_hemisphere_unit_and_upper():
    for s in _grid():
        v = cosine_sample_hemisphere(s)
        assert v[2] >= 0
        assert np.linalg.norm(v) == pytest.approx(1.0)


def test_ngon_zero_sides_is_concentric_disk():
    s = (0.2, 0.9)
    np.testing.assert_allclose(uniform_sample_regular_ngon(s, 0, 0), concentric_sample_disk(s))


@pytest.mark.parametrize("side", [0, 7])
def test_ngon_side_out_of_range(side):
    with pytest.raises(ValueError):
        uniform_sample_regular_ngon((0.5, 0.5), 6, side)


def test_ngon_samples_inside_unit_circle():
    for side in range(1, 6):
        for s in _grid():
            assert np.linalg.norm(uniform_sample_regular_ngon(s, 5, side)) <= 1 + 1e-12


@pytest.mark.parametrize(
    "normal", [(0.0, 0.0, 1.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.6, 0.0, 0.8)]
)
def test_pole_maps_to_normal(normal):
    np.testing.assert_allclose(transform_sample_to_wcs((0.0, 0.0, 1.0), normal), normal, atol=1e-12)


def test_transform_preserves_length():
    sample = cosine_sample_hemisphere((0.3, 0.7))
    rotated = transform_sample_to_wcs(sample, (0.0, 1.0, 0.0))
    assert np.linalg.norm(rotated) == pytest.approx(1.0)
    assert rotated[1] == pytest.approx(sample[2])