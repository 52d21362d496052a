from __future__ import annotations

from functools import lru_cache
from typing import List

import numpy as np

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF


def to_int64(value: int) -> int:
    """Wrap any Python int into the signed 64-bit range."""
    value = int(value) & MASK64
    return value - (1 << 64) if value >= (1 << 63) else value


def to_int32(value: int) -> int:
    """Keep the low 32 bits of value as a signed int, like a Java (int) cast."""
    value = int(value) & MASK32
    return value - (1 << 32) if value >= (1 << 31) else value


def rotl64(value: int, shift: int) -> int:
    value &= MASK64
    return ((value << shift) | (value >> (64 - shift))) & MASK64


def as_float32(value: float) -> float:
    """Round value to the nearest float32 and hand it back as a Python float."""
    return float(np.float32(value))


def float32_bits(value: float) -> int:
    return int(np.array([value], dtype=np.float32).view(np.uint32)[0])


def float32_from_bits(bits: int) -> float:
    return float(np.array([bits & MASK32], dtype=np.uint32).view(np.float32)[0])


def reverse_bits32(value: int) -> int:
    return int(f"{value & MASK32:032b}"[::-1], 2)


@lru_cache(maxsize=None)
def golden_floats(rows: int = 10) -> List[List[float]]:
    """
    Generalized golden ratios for quasi-random sequences.

    Row ``d - 1`` holds ``d`` values ``phi_d ** -(j + 1)``, where ``phi_d`` is the
    positive root of ``x ** (d + 1) = x + 1`` (row 0 starts with 0.618...).
    """
    table = []
    for d in range(1, rows + 1):
        phi = 2.0
        for _ in range(64):
            phi = (1.0 + phi) ** (1.0 / (d + 1))
        table.append([phi ** -(j + 1) for j in range(d)])
    return table
