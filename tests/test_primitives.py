import math
import random

import pytest

from noisekit.core.noise.primitives import gain, simplex_noise, value_noise, wobble
from noisekit.core.numeric import golden_floats, reverse_bits32, rotl64, to_int32, to_int64


def test_integer_wrapping():
    assert to_int64(2**63) == -(2**63)
    assert to_int64(-1) == -1
    assert to_int32(0xFFFFFFFF) == -1
    assert to_int32(0xD1CEDBEEF0FFA) == to_int32(0xBEEF0FFA) < 0
    assert rotl64(1, 1) == 2
    assert rotl64(1 << 63, 1) == 1
    assert reverse_bits32(1) == 0x80000000


def test_golden_floats():
    table = golden_floats()
    assert len(table) == 10
    assert table[0][0] == pytest.approx(0.6180339887498949, abs=1e-12)
    # Plastic number 1.3247...
    assert table[1][0] == pytest.approx(1 / 1.324717957244746, abs=1e-12)
    assert len(table[9]) == 10


def test_gain_keeps_sign_and_endpoints():
    assert gain(0.0, 0.5) == 0.0
    assert gain(1.0, 0.6) == pytest.approx(1.0)
    assert gain(-1.0, 0.6) == pytest.approx(-1.0)
    assert gain(-0.3, 0.4) == -gain(0.3, 0.4)
    assert gain(0.3, 0.8) > 0.3


@pytest.mark.parametrize("dims", [2, 3, 4, 5, 6])
def test_simplex_range_and_determinism(dims):
    rng = random.Random(dims)
    values = []
    for _ in range(40):
        point = [rng.uniform(-1000, 1000) for _ in range(dims)]
        seed = rng.getrandbits(64) - 2**63
        value = simplex_noise(point, seed)
        assert -1.0 <= value <= 1.0
        assert simplex_noise(point, seed) == value
        values.append(value)
    assert len(set(values)) > 1


def test_simplex_rejects_other_dimensions():
    with pytest.raises(ValueError):
        simplex_noise([0.0] * 7, 1)


@pytest.mark.parametrize("dims", [5, 6])
def test_high_dimensional_simplex_is_continuous(dims):
    point = [0.37 * (i + 1) for i in range(dims)]
    nudged = [p + 1e-7 for p in point]
    assert abs(simplex_noise(point, 42) - simplex_noise(nudged, 42)) < 1e-3


def test_value_noise_range_and_seed():
    rng = random.Random(7)
    for dims in range(2, 7):
        point = [rng.uniform(-1000, 1000) for _ in range(dims)]
        value = value_noise(point, 99)
        assert -1.0 <= value <= 1.0
        assert value_noise(point, 99) == value
    assert value_noise([0.5, 0.5], 1) != value_noise([0.5, 0.5], 2)


def test_wobble_is_smooth_across_integers():
    seed = 123456789
    for value in (3.0, -2.0, 100.0):
        assert abs(wobble(seed, value - 1e-9) - wobble(seed, value)) < 1e-6
    rng = random.Random(3)
    for _ in range(200):
        result = wobble(rng.getrandbits(64), rng.uniform(-1000, 1000))
        assert -1.0 < result < 1.0
        assert math.isfinite(result)


def test_gain_with_zero_denominator_follows_float_division():
    assert math.isnan(gain(0.0, 1.0))
    assert gain(0.5, 2.0) == math.inf
    assert gain(-0.5, 2.0) == -math.inf


@pytest.mark.parametrize("dims", [5, 6])
def test_high_dimensional_simplex_reaches_most_of_the_range(dims):
    rng = random.Random(100 + dims)
    peak = max(abs(simplex_noise([rng.uniform(-1000, 1000) for _ in range(dims)], 7)) for _ in range(1000))
    assert peak > 0.6
