"""
Seeded base primitives the composite generators are built from.

Each primitive takes a coordinate sequence and an int seed and returns a value
in [-1, 1]. 2D-4D simplex noise comes from ``opensimplex``; 5D and 6D use a
generic skewed-simplex lattice with hashed gradients.
"""

from __future__ import annotations

import itertools
import math
from functools import lru_cache
from typing import List, Sequence

from opensimplex import OpenSimplex

from noisekit.core.numeric import MASK64, to_int64

_HASH_MUL = 0x9E3779B97F4A7C15
_MIX_MUL_A = 0xBF58476D1CE4E5B9
_MIX_MUL_B = 0x94D049BB133111EB

_WOBBLE_STEP = 0x6C8E9CF570932BD5
_WOBBLE_SCALE = float.fromhex("0x0.fffffffffffffbp-63")

_SIMPLEX_RADIUS = 0.5
_SIMPLEX_SCALE = {5: 54.0, 6: 56.0}


def _mix64(h: int) -> int:
    h = ((h ^ (h >> 30)) * _MIX_MUL_A) & MASK64
    h = ((h ^ (h >> 27)) * _MIX_MUL_B) & MASK64
    return h ^ (h >> 31)


def hash_point(seed: int, cell: Sequence[int]) -> int:
    """64-bit unsigned hash of an integer lattice point under a seed."""
    h = seed & MASK64
    for c in cell:
        h = ((h ^ (c & MASK64)) * _HASH_MUL) & MASK64
        h ^= h >> 32
    return _mix64(h)


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6 - 15) + 10)


def gain(n: float, sharpness: float) -> float:
    """Sign-preserving rational contrast curve mapping [-1, 1] onto itself."""
    denominator = sharpness * abs(n) + (1.0 - sharpness)
    if denominator == 0.0:
        # Only reachable with sharpness >= 1; follows IEEE float division
        return math.nan if n == 0.0 else math.copysign(math.inf, n)
    return n / denominator


@lru_cache(maxsize=256)
def _open_simplex(seed: int) -> OpenSimplex:
    return OpenSimplex(seed=seed)


def _gradient(seed: int, cell: Sequence[int], n: int) -> List[float]:
    # Components are +-1 with one axis zeroed, the higher-dimensional analogue of the 4D gradient set
    h = hash_point(seed, cell)
    skip = h % n
    h >>= 8
    grad = []
    for i in range(n):
        if i == skip:
            grad.append(0.0)
        else:
            grad.append(1.0 if h & 1 else -1.0)
            h >>= 1
    return grad


def _simplex_nd(coords: Sequence[float], seed: int) -> float:
    n = len(coords)
    skew = (math.sqrt(n + 1) - 1) / n
    unskew = (1 - 1 / math.sqrt(n + 1)) / n

    s = sum(coords) * skew
    cell = [math.floor(c + s) for c in coords]
    t = sum(cell) * unskew
    base = [c - (k - t) for c, k in zip(coords, cell)]
    order = sorted(range(n), key=lambda i: base[i], reverse=True)

    offset = [0] * n
    total = 0.0
    for step in range(n + 1):
        if step:
            offset[order[step - 1]] = 1
        delta = [b - o + step * unskew for b, o in zip(base, offset)]
        falloff = _SIMPLEX_RADIUS - sum(d * d for d in delta)
        if falloff > 0:
            grad = _gradient(seed, [k + o for k, o in zip(cell, offset)], n)
            falloff *= falloff
            total += falloff * falloff * sum(g * d for g, d in zip(grad, delta))
    return max(-1.0, min(1.0, total * _SIMPLEX_SCALE[n]))


def simplex_noise(coords: Sequence[float], seed: int) -> float:
    n = len(coords)
    if n == 2:
        value = _open_simplex(seed).noise2(coords[0], coords[1])
    elif n == 3:
        value = _open_simplex(seed).noise3(coords[0], coords[1], coords[2])
    elif n == 4:
        value = _open_simplex(seed).noise4(coords[0], coords[1], coords[2], coords[3])
    elif n in _SIMPLEX_SCALE:
        return _simplex_nd(coords, seed)
    else:
        raise ValueError(f"simplex_noise supports 2 to 6 dimensions, got {n}")
    return max(-1.0, min(1.0, float(value)))


def value_noise(coords: Sequence[float], seed: int) -> float:
    """Hashed lattice values in [-1, 1) blended with quintic weights."""
    floors = [math.floor(c) for c in coords]
    weights = [_fade(c - f) for c, f in zip(coords, floors)]
    total = 0.0
    for corner in itertools.product((0, 1), repeat=len(coords)):
        w = 1.0
        for bit, t in zip(corner, weights):
            w *= t if bit else 1.0 - t
        if w == 0.0:
            continue
        h = hash_point(seed, [f + b for f, b in zip(floors, corner)])
        total += w * ((h >> 11) * 2.0 ** -52 - 1.0)
    return total


def _wobble_point(state: int) -> float:
    h = ((state ^ (state >> 25)) * (state | 0xA529)) & MASK64
    return to_int64(h) * _WOBBLE_SCALE


def wobble(seed: int, value: float) -> float:
    """
    Smooth seeded 1D noise in (-1, 1).

    Random peaks sit at integer inputs and are joined by cubic (smoothstep)
    interpolation, so the result changes direction only near integers.
    """
    floor = math.floor(value)
    state = (seed + floor * _WOBBLE_STEP) & MASK64
    start = _wobble_point(state)
    end = _wobble_point((state + _WOBBLE_STEP) & MASK64)
    t = value - floor
    t *= t * (3.0 - 2.0 * t)
    return (1.0 - t) * start + t * end
