from __future__ import annotations

from typing import List, Sequence

from noisekit.core.constants import HONEY_DEFAULT_SEED, HONEY_DEFAULT_SHARPNESS
from noisekit.core.noise.base import NoiseGenerator, register_noise
from noisekit.core.noise.primitives import gain, simplex_noise, value_noise
from noisekit.core.numeric import as_float32, to_int32, to_int64
from noisekit.core.serial.codec import float_to_reversed_int_bits, format_int
from noisekit.core.serial.record import RecordReader


class HoneyNoise(NoiseGenerator):
    """
    Average of value noise and simplex noise at the same point, pushed through
    a sign-preserving gain curve.

    ``sharpness`` should stay in (0, 1); it is stored as float32 so that the
    bit-exact record encoding round-trips. Values of 1 or more are not rejected
    but make the gain denominator reach zero.
    """

    tag = "HnyN"

    def __init__(self, seed: int = HONEY_DEFAULT_SEED, sharpness: float = HONEY_DEFAULT_SHARPNESS):
        self._seed = to_int64(seed)
        self._sharpness = as_float32(sharpness)

    @property
    def seed(self) -> int:
        return self._seed

    @seed.setter
    def seed(self, value: int) -> None:
        self._seed = to_int64(value)

    @property
    def sharpness(self) -> float:
        return self._sharpness

    @sharpness.setter
    def sharpness(self, value: float) -> None:
        self._sharpness = as_float32(value)

    def _evaluate(self, coords: Sequence[float], seed: int) -> float:
        n = (value_noise(coords, to_int32(seed)) + simplex_noise(coords, seed)) * 0.5
        return gain(n, self._sharpness)

    def _write_fields(self) -> List[str]:
        return [format_int(self._seed), format_int(float_to_reversed_int_bits(self._sharpness))]

    def _read_fields(self, reader: RecordReader) -> None:
        seed = reader.read_int()
        sharpness = reader.read_reversed_float()
        self._seed = seed
        self._sharpness = sharpness

    def copy(self) -> HoneyNoise:
        return HoneyNoise(self._seed, self._sharpness)

    def _config_key(self) -> tuple:
        return (self._seed, self._sharpness)

    def __repr__(self) -> str:
        return f"HoneyNoise(seed={self._seed}, sharpness={self._sharpness})"


register_noise(HoneyNoise)
