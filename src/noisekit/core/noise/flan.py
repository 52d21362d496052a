from __future__ import annotations

import math
from typing import List, Sequence

import numpy as np

from noisekit.core.constants import (
    FLAN_DEFAULT_DIMENSION,
    FLAN_DEFAULT_SEED,
    FLAN_DEFAULT_SHARPNESS,
    FLAN_LAYERS,
    FLAN_ORIGIN_SHIFT,
    MAX_DIMENSION,
    MIN_DIMENSION,
)
from noisekit.core.noise.base import NoiseGenerator, register_noise
from noisekit.core.noise.primitives import hash_point, wobble
from noisekit.core.numeric import as_float32, rotl64, to_int64
from noisekit.core.serial.codec import SerializationError, float_to_reversed_int_bits, format_int
from noisekit.core.serial.record import RecordReader
from noisekit.utils.logging import get_logger

logger = get_logger(__name__)

_STATE_START = 1111111
_STATE_STEP = 1234567


def regular_simplex(dim: int) -> np.ndarray:
    """
    The ``dim + 1`` unit vertices of a regular simplex centred on the origin.

    Vertex ``i`` is solved component by component: entries below the diagonal
    follow from the pairwise dot product ``-1 / dim`` with earlier vertices and
    the diagonal entry from unit length. The last vertex has no diagonal entry.
    """
    vertices = np.zeros((dim + 1, dim), dtype=np.float64)
    target = -1.0 / dim
    for i in range(dim + 1):
        for j in range(min(i, dim)):
            partial = float(np.dot(vertices[i, :j], vertices[j, :j]))
            vertices[i, j] = (target - partial) / vertices[j, j]
        if i < dim:
            vertices[i, i] = math.sqrt(max(0.0, 1.0 - float(np.dot(vertices[i, :i], vertices[i, :i]))))
    return vertices


def rotated_simplex(dim: int, seed: int) -> np.ndarray:
    """regular_simplex() with each vertex's first two components turned by a seeded angle."""
    vertices = regular_simplex(dim)
    for i, vertex in enumerate(vertices):
        angle = (hash_point(seed, (i,)) >> 11) * 2.0 ** -53 * math.tau
        c, s = math.cos(angle), math.sin(angle)
        x, y = vertex[0], vertex[1]
        vertex[0] = x * c - y * s
        vertex[1] = x * s + y * c
    return vertices


class FlanNoise(NoiseGenerator):
    """
    Layered wobble noise over the vertices of a seeded, rotated simplex.

    Only the dimension given at construction is supported (clamped to 2..6).
    Each evaluation projects ``coords - 5`` onto the vertices, then runs five
    layers of warped 1D wobble samples and squashes the sum with
    ``(v - 1) / (v + 1)`` where ``v = (1 + sharpness) ** sum``.

    Evaluation writes into per-instance scratch arrays, so one instance must
    not be evaluated from several threads at once; give each worker a copy().
    Changing the seed rebuilds the vertex basis, so per-call seeds shift the
    coordinates instead.
    """

    tag = "FlaN"

    def __init__(
        self,
        seed: int = FLAN_DEFAULT_SEED,
        dimension: int = FLAN_DEFAULT_DIMENSION,
        sharpness: float = FLAN_DEFAULT_SHARPNESS,
    ):
        self._dim = min(MAX_DIMENSION, max(MIN_DIMENSION, int(dimension)))
        self._inverse = as_float32(1.0 / sharpness)
        self._seed = to_int64(seed)
        self._build()

    def _build(self) -> None:
        self._vertices = rotated_simplex(self._dim, self._seed)
        self._points = np.zeros(self._dim + 1, dtype=np.float64)
        self._working = np.zeros(self._dim + 1, dtype=np.float64)
        logger.debug("Built %dD FlanNoise basis for seed %d", self._dim, self._seed)

    @property
    def dimension(self) -> int:
        return self._dim

    @property
    def min_dimension(self) -> int:
        return self._dim

    @property
    def max_dimension(self) -> int:
        return self._dim

    @property
    def has_efficient_set_seed(self) -> bool:
        return False

    @property
    def seed(self) -> int:
        return self._seed

    @seed.setter
    def seed(self, value: int) -> None:
        self._seed = to_int64(value)
        self._build()

    @property
    def sharpness(self) -> float:
        return 1.0 / self._inverse

    @property
    def vertices(self) -> np.ndarray:
        return self._vertices.copy()

    def _evaluate(self, coords: Sequence[float], seed: int) -> float:
        shifted = np.asarray(coords, dtype=np.float64) - FLAN_ORIGIN_SHIFT
        np.dot(self._vertices, shifted, out=self._points)
        working = self._working
        working[:] = self._points
        count = self._dim + 1
        state = seed
        ctr = _STATE_START
        result = 0.0
        for layer in range(FLAN_LAYERS):
            warp = 0.0
            for i in range(count):
                state = (rotl64(state, 21) + ctr) & 0xFFFFFFFFFFFFFFFF
                ctr += _STATE_STEP
                warp = wobble(state, float(working[i]) + warp)
                result += warp
                if layer:
                    working[i + 1:] += layer * self._vertices[i + 1:, i % self._dim]
        v = (1.0 + self.sharpness) ** result
        return (v - 1.0) / (v + 1.0)

    def _write_fields(self) -> List[str]:
        return [
            format_int(self._seed),
            format_int(self._dim),
            format_int(float_to_reversed_int_bits(self._inverse)),
        ]

    def _read_fields(self, reader: RecordReader) -> None:
        seed = reader.read_int()
        dimension = reader.read_int(bits=32)
        inverse = reader.read_reversed_float()
        if inverse == 0.0 or not math.isfinite(inverse):
            raise SerializationError(f"FlanNoise inverse sharpness must be finite and non-zero, got {inverse}")
        self._seed = to_int64(seed)
        self._dim = min(MAX_DIMENSION, max(MIN_DIMENSION, dimension))
        self._inverse = inverse
        self._build()

    def copy(self) -> FlanNoise:
        clone = FlanNoise.__new__(FlanNoise)
        clone._seed = self._seed
        clone._dim = self._dim
        clone._inverse = self._inverse
        clone._build()
        return clone

    def _config_key(self) -> tuple:
        return (self._seed, self._dim, self._inverse)

    def __repr__(self) -> str:
        return f"FlanNoise(seed={self._seed}, dimension={self._dim}, sharpness={self.sharpness})"


register_noise(FlanNoise)
