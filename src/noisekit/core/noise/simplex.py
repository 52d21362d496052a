from __future__ import annotations

from typing import List, Sequence

from noisekit.core.noise.base import NoiseGenerator, register_noise
from noisekit.core.noise.primitives import simplex_noise, value_noise
from noisekit.core.numeric import to_int32, to_int64
from noisekit.core.serial.codec import format_int
from noisekit.core.serial.record import RecordReader


class _SeededPrimitive(NoiseGenerator):
    """A single base primitive exposed as a seeded generator, serialized as `<seed>`."""

    def __init__(self, seed: int = 0):
        self._seed = to_int64(seed)

    @property
    def seed(self) -> int:
        return self._seed

    @seed.setter
    def seed(self, value: int) -> None:
        self._seed = to_int64(value)

    def _write_fields(self) -> List[str]:
        return [format_int(self._seed)]

    def _read_fields(self, reader: RecordReader) -> None:
        self._seed = reader.read_int()

    def copy(self):
        return type(self)(self._seed)

    def _config_key(self) -> tuple:
        return (self._seed,)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(seed={self._seed})"


class SimplexNoise(_SeededPrimitive):
    tag = "SimN"

    def _evaluate(self, coords: Sequence[float], seed: int) -> float:
        return simplex_noise(coords, seed)


class ValueNoise(_SeededPrimitive):
    tag = "ValN"

    def _evaluate(self, coords: Sequence[float], seed: int) -> float:
        return value_noise(coords, to_int32(seed))


register_noise(SimplexNoise)
register_noise(ValueNoise)
