from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from noisekit.core.constants import (
    WRAPPER_DEFAULT_FREQUENCY,
    WRAPPER_DEFAULT_OCTAVES,
    WRAPPER_DEFAULT_SEED,
)
from noisekit.core.noise.base import NoiseGenerator, read_tagged, register_noise, serialize_noise
from noisekit.core.noise.simplex import SimplexNoise
from noisekit.core.numeric import to_int64
from noisekit.core.serial.codec import format_bool, format_float, format_int
from noisekit.core.serial.record import RecordReader

FBM = 0
BILLOW = 1
RIDGED_MULTI = 2
DOMAIN_WARP = 3
EXO = 4

MODE_NAMES: Dict[str, int] = {
    "fbm": FBM,
    "billow": BILLOW,
    "ridged": RIDGED_MULTI,
    "warp": DOMAIN_WARP,
    "exo": EXO,
}

_SPIRAL_ANGLE = math.pi * (3.0 - math.sqrt(5.0))
_SPIRAL_COS = math.cos(_SPIRAL_ANGLE)
_SPIRAL_SIN = math.sin(_SPIRAL_ANGLE)


def _spiral(coords: List[float]) -> None:
    """Turn each adjacent axis pair by the golden angle, in place."""
    for i in range(len(coords) - 1):
        a, b = coords[i], coords[i + 1]
        coords[i] = a * _SPIRAL_COS - b * _SPIRAL_SIN
        coords[i + 1] = a * _SPIRAL_SIN + b * _SPIRAL_COS


class NoiseWrapper(NoiseGenerator):
    """
    Fractal layering over any wrapped generator.

    Coordinates are scaled by ``frequency`` and then summed over ``octaves``
    layers according to ``mode`` (FBM, BILLOW, RIDGED_MULTI, DOMAIN_WARP or
    EXO; anything else behaves as FBM). Octave ``i`` asks the wrapped generator
    for noise with seed ``seed + i``. The wrapper owns its wrapped generator:
    copy() copies it too and setting the seed reseeds it.
    """

    tag = "Wrap"

    def __init__(
        self,
        wrapped: Optional[NoiseGenerator] = None,
        seed: Optional[int] = None,
        frequency: float = WRAPPER_DEFAULT_FREQUENCY,
        mode: int = FBM,
        octaves: int = WRAPPER_DEFAULT_OCTAVES,
        fractal_spiral: bool = False,
    ):
        if wrapped is None:
            wrapped = SimplexNoise(WRAPPER_DEFAULT_SEED)
            if seed is None:
                seed = WRAPPER_DEFAULT_SEED
        self.wrapped = wrapped
        self.seed = wrapped.seed if seed is None else seed
        self.frequency = float(frequency)
        self.mode = int(mode)
        self.octaves = octaves
        self.fractal_spiral = bool(fractal_spiral)

    @property
    def seed(self) -> int:
        return self._seed

    @seed.setter
    def seed(self, value: int) -> None:
        self._seed = to_int64(value)
        self.wrapped.seed = self._seed

    @property
    def octaves(self) -> int:
        return self._octaves

    @octaves.setter
    def octaves(self, value: int) -> None:
        self._octaves = max(1, int(value))

    @property
    def min_dimension(self) -> int:
        return self.wrapped.min_dimension

    @property
    def max_dimension(self) -> int:
        return self.wrapped.max_dimension

    @property
    def has_efficient_set_seed(self) -> bool:
        return self.wrapped.has_efficient_set_seed

    # Evaluation

    def get_noise_with_seed(self, *coords: float, seed: int) -> float:
        self._check_dimension(coords)
        return self._evaluate(coords, to_int64(seed))

    def _evaluate(self, coords: Sequence[float], seed: int) -> float:
        return self._fractal([c * self.frequency for c in coords], seed)

    def _fractal(self, coords: List[float], seed: int) -> float:
        modes: Dict[int, Callable[[List[float], int], float]] = {
            BILLOW: self._billow,
            RIDGED_MULTI: self._ridged,
            DOMAIN_WARP: self._warp,
            EXO: self._exo,
        }
        return modes.get(self.mode, self._fbm)(coords, seed)

    def _sample(self, coords: Sequence[float], seed: int) -> float:
        return self.wrapped.get_noise_with_seed(*coords, seed=to_int64(seed))

    def _next_octave(self, coords: List[float]) -> None:
        if self.fractal_spiral:
            _spiral(coords)
        for i in range(len(coords)):
            coords[i] *= 2.0

    def _fbm(self, coords: List[float], seed: int) -> float:
        total = self._sample(coords, seed)
        amp = 1.0
        for i in range(1, self._octaves):
            self._next_octave(coords)
            amp *= 0.5
            total += self._sample(coords, seed + i) * amp
        return total / (amp * ((1 << self._octaves) - 1))

    def _billow(self, coords: List[float], seed: int) -> float:
        total = abs(self._sample(coords, seed)) * 2 - 1
        amp = 1.0
        for i in range(1, self._octaves):
            self._next_octave(coords)
            amp *= 0.5
            total += (abs(self._sample(coords, seed + i)) * 2 - 1) * amp
        return total / (amp * ((1 << self._octaves) - 1))

    def _ridged(self, coords: List[float], seed: int) -> float:
        total = 0.0
        exp = 1.0
        correction = 0.0
        for i in range(self._octaves):
            spike = 1.0 - abs(self._sample(coords, seed + i))
            total += spike * exp
            exp *= 0.5
            correction += exp
            self._next_octave(coords)
        return total / correction - 1.0

    def _warp(self, coords: List[float], seed: int) -> float:
        latest = self._sample(coords, seed)
        total = latest
        amp = 1.0
        n = len(coords)
        for i in range(1, self._octaves):
            self._next_octave(coords)
            # Offsets are evenly phased sines of the previous octave's value
            shifted = [c + math.sin(math.pi * (latest + k / n)) for k, c in enumerate(coords)]
            amp *= 0.5
            latest = self._sample(shifted, seed + i)
            total += latest * amp
        return total / (amp * ((1 << self._octaves) - 1))

    def _exo(self, coords: List[float], seed: int) -> float:
        power = 0.5
        striation = self._sample([c * 0.25 for c in coords], seed + 1111)
        distort = self._sample([c * 0.3 for c in coords], seed + 2222)
        warped = list(coords)
        warped[0] += striation - distort
        warped[1] += striation + distort
        result = self._sample(warped, seed) * power
        for i in range(1, self._octaves):
            if self.fractal_spiral:
                _spiral(coords)
            striation = self._sample([c * 0.125 for c in coords], seed + i + 3333)
            distort = self._sample([c * 0.15 for c in coords], seed + i + 4444)
            warped = [c * 0.5 for c in coords]
            warped[0] += striation - distort
            warped[1] += striation + distort
            octave = self._sample(warped, seed + i) * 1.5
            for k in range(len(coords)):
                coords[k] *= 2.0
            power *= 0.5
            result += octave * octave * octave * power
        result /= 0.6 * power * ((1 << self._octaves) - 1)
        return math.tanh(result)

    # Serialization

    def _write_fields(self) -> List[str]:
        return [
            serialize_noise(self.wrapped),
            format_int(self._seed),
            format_float(self.frequency),
            format_int(self.mode),
            format_int(self._octaves),
            format_bool(self.fractal_spiral),
        ]

    def _read_wrapper_fields(self, reader: RecordReader) -> Tuple[NoiseGenerator, int, float, int, int, bool]:
        """Parse the NoiseWrapper fields without touching this instance."""
        wrapped = read_tagged(reader)
        seed = reader.read_int()
        frequency = reader.read_float()
        mode = reader.read_int(bits=32)
        octaves = reader.read_int(bits=32)
        fractal_spiral = reader.read_bool()
        return wrapped, seed, frequency, mode, octaves, fractal_spiral

    def _apply_wrapper_fields(self, fields: Tuple[NoiseGenerator, int, float, int, int, bool]) -> None:
        wrapped, seed, frequency, mode, octaves, fractal_spiral = fields
        self.wrapped = wrapped
        self.seed = seed
        self.frequency = frequency
        self.mode = mode
        self.octaves = octaves
        self.fractal_spiral = fractal_spiral

    def _read_fields(self, reader: RecordReader) -> None:
        self._apply_wrapper_fields(self._read_wrapper_fields(reader))

    # Value semantics

    def copy(self) -> NoiseWrapper:
        return NoiseWrapper(
            self.wrapped.copy(), self._seed, self.frequency, self.mode, self._octaves, self.fractal_spiral
        )

    def _config_key(self) -> tuple:
        return (self.wrapped, self._seed, self.frequency, self.mode, self._octaves, self.fractal_spiral)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(wrapped={self.wrapped!r}, seed={self._seed}, frequency={self.frequency}, "
            f"mode={self.mode}, octaves={self._octaves}, fractal_spiral={self.fractal_spiral})"
        )


register_noise(NoiseWrapper)
