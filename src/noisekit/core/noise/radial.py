from __future__ import annotations

import math
from typing import List, Optional, Sequence

from noisekit.core.constants import (
    RADIAL_DEFAULT_DIVISIONS,
    WRAPPER_DEFAULT_FREQUENCY,
    WRAPPER_DEFAULT_OCTAVES,
)
from noisekit.core.noise.base import NoiseGenerator, register_noise
from noisekit.core.noise.wrapper import FBM, NoiseWrapper
from noisekit.core.serial.codec import SerializationError, format_bool, format_float, format_int
from noisekit.core.serial.record import RecordReader


def _takes_3d(noise: NoiseGenerator) -> bool:
    return noise.min_dimension <= 3 <= noise.max_dimension


class RadialNoiseWrapper(NoiseWrapper):
    """
    Repeats the wrapped noise ``divisions`` times around a center point.

    A 2D query ``(x, y)`` becomes polar ``(len, theta)`` about the center with
    theta in turns; theta is multiplied by ``divisions`` and, when ``mirror``
    is set, negated in every odd wedge. The wrapped generator is then asked for
    3D noise at ``(cos(theta) * len / divisions, sin(theta) * len / divisions, len)``,
    with ``len - z`` as the third coordinate for 3D queries, through the same
    fractal layering as NoiseWrapper.
    """

    tag = "RadN"

    def __init__(
        self,
        wrapped: Optional[NoiseGenerator] = None,
        seed: Optional[int] = None,
        frequency: float = WRAPPER_DEFAULT_FREQUENCY,
        mode: int = FBM,
        octaves: int = WRAPPER_DEFAULT_OCTAVES,
        fractal_spiral: bool = False,
        center_x: float = 0.0,
        center_y: float = 0.0,
        divisions: int = RADIAL_DEFAULT_DIVISIONS,
        mirror: bool = False,
    ):
        super().__init__(wrapped, seed, frequency, mode, octaves, fractal_spiral)
        if not _takes_3d(self.wrapped):
            raise ValueError(
                f"RadialNoiseWrapper samples its wrapped generator in 3D, but {self.wrapped!r} "
                f"supports {self.wrapped.min_dimension}D to {self.wrapped.max_dimension}D"
            )
        self.center_x = float(center_x)
        self.center_y = float(center_y)
        self.divisions = divisions
        self.mirror = bool(mirror)

    @property
    def divisions(self) -> int:
        return self._divisions

    @divisions.setter
    def divisions(self, value: int) -> None:
        if int(value) <= 0:
            raise ValueError(f"divisions must be positive, got {value}")
        self._divisions = int(value)

    def set_center(self, center_x: float, center_y: float) -> RadialNoiseWrapper:
        self.center_x = float(center_x)
        self.center_y = float(center_y)
        return self

    @property
    def min_dimension(self) -> int:
        return 2

    @property
    def max_dimension(self) -> int:
        return 3

    def _to_radial(self, coords: Sequence[float]) -> List[float]:
        x = coords[0] - self.center_x
        y = coords[1] - self.center_y
        length = math.hypot(x, y)
        shrunk = length / self._divisions
        theta = (math.atan2(y, x) / math.tau) % 1.0 * self._divisions
        if self.mirror and int(theta) & 1:
            theta = -theta
        depth = length - coords[2] if len(coords) == 3 else length
        return [math.cos(theta * math.tau) * shrunk, math.sin(theta * math.tau) * shrunk, depth]

    def _evaluate(self, coords: Sequence[float], seed: int) -> float:
        return super()._evaluate(self._to_radial(coords), seed)

    def _write_fields(self) -> List[str]:
        return super()._write_fields() + [
            format_float(self.center_x),
            format_float(self.center_y),
            format_int(self._divisions),
            format_bool(self.mirror),
        ]

    def _read_fields(self, reader: RecordReader) -> None:
        fields = self._read_wrapper_fields(reader)
        center_x = reader.read_float()
        center_y = reader.read_float()
        divisions = reader.read_int(bits=32)
        mirror = reader.read_bool()
        if divisions <= 0:
            raise SerializationError(f"RadialNoiseWrapper divisions must be positive, got {divisions}")
        if not _takes_3d(fields[0]):
            raise SerializationError(f"RadialNoiseWrapper cannot wrap {fields[0]!r}, which does not accept 3D input")
        self._apply_wrapper_fields(fields)
        self.divisions = divisions
        self.center_x = center_x
        self.center_y = center_y
        self.mirror = mirror

    def copy(self) -> RadialNoiseWrapper:
        return RadialNoiseWrapper(
            self.wrapped.copy(),
            self._seed,
            self.frequency,
            self.mode,
            self._octaves,
            self.fractal_spiral,
            self.center_x,
            self.center_y,
            self._divisions,
            self.mirror,
        )

    def _config_key(self) -> tuple:
        return super()._config_key() + (self.center_x, self.center_y, self._divisions, self.mirror)

    def __repr__(self) -> str:
        return (
            super().__repr__()[:-1]
            + f", center_x={self.center_x}, center_y={self.center_y}, divisions={self._divisions}, mirror={self.mirror})"
        )


register_noise(RadialNoiseWrapper)
