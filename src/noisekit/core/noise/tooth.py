from __future__ import annotations

from math import sin
from typing import List, Sequence

from noisekit.core.noise.base import NoiseGenerator, register_noise
from noisekit.core.noise.primitives import wobble
from noisekit.core.numeric import golden_floats
from noisekit.core.serial.record import RecordReader

_G = golden_floats()


def _tooth2(x: float, y: float) -> float:
    sx = sin(1 + x * _G[0][0] + sin(2 + x * _G[2][0] + sin(3 + x * _G[4][0] + y)))
    sy = sin(4 + y * _G[1][1] + sin(5 + y * _G[3][1] + sin(6 + y * _G[5][1] + x)))
    q = (sx + sy) * 6
    return sin(7 + q * _G[6][0] + sin(8 + q * _G[6][1] + sin(9 + q * _G[6][2] + x + y)))


def _tooth3(x: float, y: float, z: float) -> float:
    sx = wobble(121212, 1 + x * _G[0][0] + sin(2 + x * _G[3][0] + sin(3 + x * _G[6][0] + z - y)))
    sy = wobble(343434, 4 + y * _G[1][1] + sin(5 + y * _G[4][1] + sin(6 + y * _G[7][1] + x - z)))
    sz = wobble(565656, 7 + z * _G[2][2] + sin(8 + z * _G[5][2] + sin(9 + z * _G[8][2] + y - x)))
    q = (sx + sy + sz) * 4
    return wobble(123456789, 10 + q * _G[9][0] + sin(11 + q * _G[9][1] + sin(12 + q * _G[9][2])))


class ToothNoise(NoiseGenerator):
    """
    Stateless nested-sine noise with no seed.

    Only 2D and 3D produce noise. The contract still reports a maximum of 6
    dimensions, and 4D to 6D queries return 0.0.
    """

    tag = "TooN"

    @property
    def can_use_seed(self) -> bool:
        return False

    @property
    def seed(self) -> int:
        return 0

    @seed.setter
    def seed(self, value: int) -> None:
        pass

    def _evaluate(self, coords: Sequence[float], seed: int) -> float:
        if len(coords) == 2:
            return _tooth2(*coords)
        if len(coords) == 3:
            return _tooth3(*coords)
        return 0.0

    def get_noise_with_seed(self, *coords: float, seed: int) -> float:
        return self.get_noise(*coords)

    def _write_fields(self) -> List[str]:
        return []

    def _read_fields(self, reader: RecordReader) -> None:
        pass

    def copy(self) -> ToothNoise:
        return ToothNoise()

    def _config_key(self) -> tuple:
        return ()

    def __repr__(self) -> str:
        return "ToothNoise()"


register_noise(ToothNoise)
