import math
import random

import numpy as np
import pytest

from noisekit.core.noise.base import NoiseDimensionError
from noisekit.core.noise.flan import FlanNoise, regular_simplex, rotated_simplex
from noisekit.core.noise.foamplex import FoamplexNoise
from noisekit.core.noise.honey import HoneyNoise
from noisekit.core.noise.simplex import SimplexNoise, ValueNoise
from noisekit.core.noise.tooth import ToothNoise
from noisekit.core.numeric import as_float32, to_int64
from noisekit.core.serial.codec import SerializationError, float_to_reversed_int_bits


def _cases():
    for dims in range(2, 7):
        yield HoneyNoise(), dims
        yield HoneyNoise(-77, 0.9), dims
        yield FoamplexNoise(), dims
        yield SimplexNoise(5), dims
        yield ValueNoise(5), dims
        yield FlanNoise(dimension=dims), dims
        yield FlanNoise(seed=1, dimension=dims, sharpness=0.99), dims
    yield ToothNoise(), 2
    yield ToothNoise(), 3


@pytest.mark.parametrize("noise,dims", list(_cases()), ids=lambda v: repr(v))
def test_output_stays_in_range(noise, dims):
    rng = random.Random(f"{noise!r}{dims}")
    for _ in range(15):
        point = [rng.uniform(-1000, 1000) for _ in range(dims)]
        seed = rng.getrandbits(64) - 2**63
        for value in (noise.get_noise(*point), noise.get_noise_with_seed(*point, seed=seed)):
            assert math.isfinite(value)
            assert -1.0 <= value <= 1.0


@pytest.mark.parametrize("noise", [HoneyNoise(3), FoamplexNoise(3), FlanNoise(3, 4), SimplexNoise(3)], ids=repr)
def test_same_input_same_output(noise):
    point = [1.25, -7.5, 3.0, 0.5][: noise.min_dimension]
    assert noise.get_noise(*point) == noise.get_noise(*point)
    assert noise.get_noise_with_seed(*point, seed=99) == noise.get_noise_with_seed(*point, seed=99)


def test_seeded_call_does_not_mutate():
    honey = HoneyNoise(5, 0.4)
    before = honey.copy()
    honey.get_noise_with_seed(1.0, 2.0, seed=123)
    assert honey == before
    assert honey.seed == 5

    flan = FlanNoise(5, 3)
    vertices = flan.vertices
    flan.get_noise_with_seed(1.0, 2.0, 3.0, seed=123)
    assert flan.seed == 5
    assert np.array_equal(flan.vertices, vertices)


def test_efficient_seed_matches_stored_seed():
    assert HoneyNoise(0, 0.6).get_noise_with_seed(3.5, -1.25, seed=42) == HoneyNoise(42, 0.6).get_noise(3.5, -1.25)
    assert FoamplexNoise(0).get_noise_with_seed(1.0, 2.0, 3.0, seed=42) == FoamplexNoise(42).get_noise(1.0, 2.0, 3.0)


def test_seed_wraps_to_int64():
    honey = HoneyNoise(2**64 + 5)
    assert honey.seed == 5
    honey.set_seed(2**63)
    assert honey.get_seed() == -(2**63)


def test_seed_changes_output():
    assert HoneyNoise(1).get_noise(10.5, 20.5) != HoneyNoise(2).get_noise(10.5, 20.5)
    assert FoamplexNoise(1).get_noise(10.5, 20.5) != FoamplexNoise(2).get_noise(10.5, 20.5)
    assert FlanNoise(1, 2).get_noise(10.5, 20.5) != FlanNoise(2, 2).get_noise(10.5, 20.5)


def test_dimension_errors():
    with pytest.raises(NoiseDimensionError):
        HoneyNoise().get_noise(1.0)
    with pytest.raises(NoiseDimensionError):
        HoneyNoise().get_noise(*([1.0] * 7))
    with pytest.raises(NoiseDimensionError):
        FlanNoise(dimension=2).get_noise(1.0, 2.0, 3.0)


# HoneyNoise


def test_honey_roundtrip_known_case():
    honey = HoneyNoise(42, 0.6)
    record = honey.string_serialize()
    assert record == f"`42~{float_to_reversed_int_bits(0.6)}`"
    restored = HoneyNoise.recreate_from_string(record)
    assert restored.get_seed() == 42
    assert restored == honey
    assert restored.get_noise(1.5, 2.5) == honey.get_noise(1.5, 2.5)


def test_honey_defaults_and_float32_sharpness():
    honey = HoneyNoise()
    assert honey.seed == 0xD1CEDBEEF0FFA
    assert honey.sharpness == as_float32(0.6)
    assert honey.tag == "HnyN"


def test_string_deserialize_mutates_and_returns_receiver():
    honey = HoneyNoise()
    result = honey.string_deserialize(HoneyNoise(9, 0.25).string_serialize())
    assert result is honey
    assert honey.seed == 9
    assert honey.sharpness == 0.25


def test_empty_input_handling():
    assert HoneyNoise.recreate_from_string(None) is None
    assert HoneyNoise.recreate_from_string("") is None
    with pytest.raises(SerializationError):
        HoneyNoise().string_deserialize("")


@pytest.mark.parametrize("record", ["`42`", "`42~`", "`x~1`", "42~1", "`42~1", "`42~1`~", "`42~1~2`"])
def test_malformed_honey_records(record):
    honey = HoneyNoise(7, 0.5)
    with pytest.raises(SerializationError):
        honey.string_deserialize(record)


def test_failed_parse_leaves_generator_untouched():
    honey = HoneyNoise(7, 0.5)
    with pytest.raises(SerializationError):
        honey.string_deserialize("`42~nope`")
    assert honey == HoneyNoise(7, 0.5)


def test_equality_and_hash():
    assert HoneyNoise(1, 0.5) == HoneyNoise(1, 0.5)
    assert hash(HoneyNoise(1, 0.5)) == hash(HoneyNoise(1, 0.5))
    assert HoneyNoise(1, 0.5) != HoneyNoise(2, 0.5)
    assert HoneyNoise(1, 0.5) != HoneyNoise(1, 0.25)
    assert SimplexNoise(1) != ValueNoise(1)
    assert len({FoamplexNoise(3), FoamplexNoise(3), FoamplexNoise(4)}) == 2


def test_copy_is_independent():
    honey = HoneyNoise(1, 0.5)
    clone = honey.copy()
    assert clone == honey and clone is not honey
    clone.seed = 2
    assert honey.seed == 1


# FoamplexNoise


def test_foamplex_record():
    assert FoamplexNoise().string_serialize() == "`1234567890`"
    assert FoamplexNoise.recreate_from_string("`-12`") == FoamplexNoise(-12)


# FlanNoise


@pytest.mark.parametrize("dim", [2, 3, 4, 5, 6])
def test_regular_simplex_geometry(dim):
    vertices = regular_simplex(dim)
    assert vertices.shape == (dim + 1, dim)
    gram = vertices @ vertices.T
    expected = np.full((dim + 1, dim + 1), -1.0 / dim)
    np.fill_diagonal(expected, 1.0)
    assert np.allclose(gram, expected)
    assert np.allclose(vertices.sum(axis=0), 0.0)


def test_rotated_simplex_keeps_unit_length_and_depends_on_seed():
    a = rotated_simplex(4, 1)
    b = rotated_simplex(4, 2)
    assert np.allclose(np.linalg.norm(a, axis=1), 1.0)
    assert not np.allclose(a, b)
    assert np.array_equal(a, rotated_simplex(4, 1))


def test_flan_dimension_is_clamped():
    low = FlanNoise(dimension=1)
    assert low.dimension == 2
    assert low.min_dimension == low.max_dimension == 2
    high = FlanNoise(dimension=9)
    assert high.dimension == 6


def test_flan_defaults():
    flan = FlanNoise()
    assert flan.seed == to_int64(0xFEEDBEEF1337CAFE)
    assert flan.dimension == 3
    assert flan.sharpness == 0.5
    assert flan.has_efficient_set_seed is False


def test_flan_set_seed_rebuilds_basis():
    flan = FlanNoise(1, 3)
    before = flan.vertices
    flan.seed = 2
    assert not np.allclose(before, flan.vertices)
    assert flan == FlanNoise(2, 3)


def test_flan_roundtrip():
    flan = FlanNoise(7, 4, 0.25)
    record = flan.string_serialize()
    assert record == f"`7~4~{float_to_reversed_int_bits(4.0)}`"
    restored = FlanNoise.recreate_from_string(record)
    assert restored == flan
    assert restored.sharpness == 0.25
    point = (1.5, -2.5, 3.25, 0.125)
    assert restored.get_noise(*point) == flan.get_noise(*point)


@pytest.mark.parametrize("inverse", [0.0, math.inf, math.nan])
def test_flan_rejects_unusable_inverse_sharpness(inverse):
    flan = FlanNoise(1, 3)
    with pytest.raises(SerializationError):
        flan.string_deserialize(f"`1~3~{float_to_reversed_int_bits(inverse)}`")
    assert flan == FlanNoise(1, 3)
    assert flan.sharpness == 0.5


def test_flan_copy_has_its_own_buffers():
    flan = FlanNoise(3, 3)
    clone = flan.copy()
    assert clone == flan
    assert clone.get_noise(1.0, 2.0, 3.0) == flan.get_noise(1.0, 2.0, 3.0)
    assert clone._points is not flan._points


# ToothNoise


def test_tooth_is_stateless():
    tooth = ToothNoise()
    assert tooth.can_use_seed is False
    tooth.set_seed(55)
    assert tooth.get_seed() == 0
    assert tooth.get_noise_with_seed(1.5, 2.5, seed=99) == tooth.get_noise(1.5, 2.5)
    assert ToothNoise() == ToothNoise()


def test_tooth_2d_and_3d_are_deterministic_and_vary():
    tooth = ToothNoise()
    assert tooth.get_noise(1.5, 2.5) == ToothNoise().get_noise(1.5, 2.5)
    assert tooth.get_noise(1.5, 2.5, 3.5) == ToothNoise().get_noise(1.5, 2.5, 3.5)
    assert tooth.get_noise(1.5, 2.5) != tooth.get_noise(10.5, 2.5)
    assert tooth.get_noise(1.5, 2.5, 3.5) != tooth.get_noise(1.5, 2.5, 30.5)


def test_tooth_higher_dimensions_return_zero():
    tooth = ToothNoise()
    assert tooth.max_dimension == 6
    assert tooth.get_noise(1.0, 2.0, 3.0, 4.0) == 0.0
    assert tooth.get_noise(1.0, 2.0, 3.0, 4.0, 5.0) == 0.0
    assert tooth.get_noise(1.0, 2.0, 3.0, 4.0, 5.0, 6.0) == 0.0
    with pytest.raises(NoiseDimensionError):
        tooth.get_noise(*([1.0] * 7))


def test_tooth_record_is_empty():
    assert ToothNoise().string_serialize() == "``"
    assert ToothNoise.recreate_from_string("``") == ToothNoise()
    with pytest.raises(SerializationError):
        ToothNoise().string_deserialize("`1`")
