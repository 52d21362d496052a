"""
FoamplexNoise: rotated multi-sample resampling of lower-dimensional simplex noise.

For a d-dimensional query, the point is projected onto d+1 fixed directions
spread like the vertices of a regular simplex. Each of the d+1 samples reads a
d-subset of those projections from the simplex primitive, with its first input
nudged by a quarter of the previous sample and its seed offset by a fixed
constant. The samples are averaged and sharpened with a dimension-specific gain.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from noisekit.core.constants import (
    FOAMPLEX_DEFAULT_SEED,
    FOAMPLEX_INPUT_SCALE,
    FOAMPLEX_SEED_OFFSETS,
    FOAMPLEX_SHARPNESS,
    FOAMPLEX_WARP,
)
from noisekit.core.noise.base import NoiseGenerator, register_noise
from noisekit.core.noise.primitives import gain, simplex_noise
from noisekit.core.numeric import to_int64
from noisekit.core.serial.codec import format_int
from noisekit.core.serial.record import RecordReader

Row = Tuple[float, ...]

# Projection rows per dimension; missing trailing coefficients are zero.
_PROJECTIONS: Dict[int, Tuple[Row, ...]] = {
    2: (
        (1.0,),
        (-0.5, 0.8660254037844386),
        (-0.5, -0.8660254037844387),
    ),
    3: (
        (1.0,),
        (-1.0 / 3.0, 0.9428090415820634),
        (-1.0 / 3.0, -0.4714045207910317, 0.816496580927726),
        (-1.0 / 3.0, -0.4714045207910317, -0.816496580927726),
    ),
    4: (
        (1.0,),
        (-0.25, 0.9682458365518543),
        (-0.25, -0.3227486121839514, 0.9128709291752769),
        (-0.25, -0.3227486121839514, -0.45643546458763834, 0.7905694150420949),
        (-0.25, -0.3227486121839514, -0.45643546458763834, -0.7905694150420947),
    ),
    5: (
        (0.8157559148337911, 0.5797766823136037),
        (-0.7314923478726791, 0.6832997137249108),
        (-0.0208603044412437, -0.3155296974329846, 0.9486832980505138),
        (-0.0208603044412437, -0.3155296974329846, -0.316227766016838, 0.8944271909999159),
        (-0.0208603044412437, -0.3155296974329846, -0.316227766016838, -0.44721359549995804,
         0.7745966692414833),
        (-0.0208603044412437, -0.3155296974329846, -0.316227766016838, -0.44721359549995804,
         -0.7745966692414836),
    ),
    6: (
        (1.0,),
        (-1.0 / 6.0, 0.9860132971832694),
        (-1.0 / 6.0, -0.19720265943665383, 0.9660917830792959),
        (-1.0 / 6.0, -0.19720265943665383, -0.24152294576982394, 0.9354143466934853),
        (-1.0 / 6.0, -0.19720265943665383, -0.24152294576982394, -0.31180478223116176,
         0.8819171036881969),
        (-1.0 / 6.0, -0.19720265943665383, -0.24152294576982394, -0.31180478223116176,
         -0.4409585518440984, 0.7637626158259734),
        (-1.0 / 6.0, -0.19720265943665383, -0.24152294576982394, -0.31180478223116176,
         -0.4409585518440984, -0.7637626158259732),
    ),
}


def _leave_one_out(count: int) -> Tuple[Tuple[int, ...], ...]:
    return tuple(tuple(j for j in range(count) if j != i) for i in range(count))


# Which projections each sample reads, in order
_SAMPLE_ORDERS: Dict[int, Tuple[Tuple[int, ...], ...]] = {
    2: ((1, 2), (2, 0), (0, 1)),
    3: _leave_one_out(4),
    4: _leave_one_out(5),
    5: _leave_one_out(6),
    6: (
        (0, 5, 3, 6, 1, 4),
        (2, 6, 0, 4, 5, 3),
        (1, 2, 3, 4, 6, 5),
        (6, 0, 2, 5, 4, 1),
        (2, 1, 5, 0, 3, 6),
        (0, 4, 6, 3, 1, 2),
        (5, 1, 2, 3, 4, 0),
    ),
}


def _project(coords: Sequence[float]) -> List[float]:
    rows = _PROJECTIONS[len(coords)]
    return [FOAMPLEX_INPUT_SCALE * sum(c * x for c, x in zip(row, coords)) for row in rows]


class FoamplexNoise(NoiseGenerator):
    tag = "FplN"

    def __init__(self, seed: int = FOAMPLEX_DEFAULT_SEED):
        self._seed = to_int64(seed)

    @property
    def seed(self) -> int:
        return self._seed

    @seed.setter
    def seed(self, value: int) -> None:
        self._seed = to_int64(value)

    def _evaluate(self, coords: Sequence[float], seed: int) -> float:
        dim = len(coords)
        points = _project(coords)
        previous = 0.0
        total = 0.0
        for i, order in enumerate(_SAMPLE_ORDERS[dim]):
            sample = [points[j] for j in order]
            sample[0] += FOAMPLEX_WARP * previous
            previous = simplex_noise(sample, to_int64(seed + FOAMPLEX_SEED_OFFSETS[i]))
            total += previous
        return gain(total / (dim + 1), FOAMPLEX_SHARPNESS[dim])

    def _write_fields(self) -> List[str]:
        return [format_int(self._seed)]

    def _read_fields(self, reader: RecordReader) -> None:
        self._seed = reader.read_int()

    def copy(self) -> FoamplexNoise:
        return FoamplexNoise(self._seed)

    def _config_key(self) -> tuple:
        return (self._seed,)

    def __repr__(self) -> str:
        return f"FoamplexNoise(seed={self._seed})"


register_noise(FoamplexNoise)
