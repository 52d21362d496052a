from __future__ import annotations

import hashlib
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np

from noisekit.core.constants import DEFAULT_FIELD_SCALE, DEFAULT_FIELD_SIZE
from noisekit.core.noise import catalog  # noqa: F401 (registers every generator)
from noisekit.core.noise.base import (
    NoiseDimensionError,
    NoiseGenerator,
    deserialize_noise,
    get_noise,
    list_noise_tags,
    serialize_noise,
)
from noisekit.io.formats import read_record_text, write_record_text
from noisekit.utils.logging import get_logger

logger = get_logger(__name__)


def field_fingerprint(field: np.ndarray) -> str:
    """SHA-256 fingerprint over the field bytes (row-major)."""
    return hashlib.sha256(field.tobytes(order="C")).hexdigest()


def build_noise_field(
    noise: NoiseGenerator,
    size: int = DEFAULT_FIELD_SIZE,
    scale: float = DEFAULT_FIELD_SCALE,
    offset: Tuple[float, float] = (0.0, 0.0),
    extra: Sequence[float] = (),
    seed: Optional[int] = None,
) -> tuple[np.ndarray, str]:
    """
    Sample a size x size slice of noise.

    Cell ``[x, y]`` holds the noise at ``(offset[0] + x * scale, offset[1] + y * scale, *extra)``,
    so ``extra`` picks the slice of a higher-dimensional field. With ``seed`` the
    per-call seeded evaluation is used and the generator is left untouched.
    """
    dims = 2 + len(extra)
    if not noise.min_dimension <= dims <= noise.max_dimension:
        raise NoiseDimensionError(
            f"{noise.tag} supports {noise.min_dimension}D to {noise.max_dimension}D, cannot sample a {dims}D field"
        )
    logger.debug("Sampling %s field size=%d scale=%s dims=%d", noise.tag, size, scale, dims)
    extra = tuple(float(e) for e in extra)
    field = np.empty((size, size), dtype=np.float64, order="C")
    for x in range(size):
        for y in range(size):
            point = (offset[0] + x * scale, offset[1] + y * scale) + extra
            if seed is None:
                field[x, y] = noise.get_noise(*point)
            else:
                field[x, y] = noise.get_noise_with_seed(*point, seed=seed)
    fingerprint = field_fingerprint(field)
    logger.debug("Noise field fingerprint=%s", fingerprint)
    return field, fingerprint


def save_generator(noise: NoiseGenerator, path: Path) -> str:
    record = serialize_noise(noise)
    write_record_text(path, record)
    logger.debug("Saved %s record (%d chars) to %s", noise.tag, len(record), path)
    return record


def load_generator(path: Path) -> NoiseGenerator:
    noise = deserialize_noise(read_record_text(path))
    logger.debug("Loaded %r from %s", noise, path)
    return noise


def roundtrip(noise: NoiseGenerator, probe: Optional[Sequence[float]] = None) -> tuple[str, NoiseGenerator, bool]:
    """
    Serialize noise, read it back, and report whether the copy matches.

    The copy must compare equal and, when a probe point is given, evaluate to
    the identical value there.
    """
    record = serialize_noise(noise)
    restored = deserialize_noise(record)
    matches = restored == noise
    if matches and probe is not None:
        matches = restored.get_noise(*probe) == noise.get_noise(*probe)
    logger.debug("Round trip of %s matches=%s record=%s", noise.tag, matches, record)
    return record, restored, matches


def selftest_failures() -> List[str]:
    """Known-answer checks over every registered generator; returns failure messages."""
    from noisekit.core.noise.honey import HoneyNoise
    from noisekit.core.noise.tooth import ToothNoise

    failures: List[str] = []
    honey = HoneyNoise(42, 0.6)
    _, restored, ok = roundtrip(honey, probe=(1.5, 2.5))
    if not ok or restored.seed != 42:
        failures.append("HoneyNoise(42, 0.6) did not survive serialization")

    for tag in list_noise_tags():
        noise = get_noise(tag)
        probe = [0.5] * noise.min_dimension
        _, _, ok = roundtrip(noise, probe=probe)
        if not ok:
            failures.append(f"{tag} default generator did not survive serialization")
        value = noise.get_noise(*probe)
        if not -1.0 <= value <= 1.0:
            failures.append(f"{tag} produced {value} outside [-1, 1]")

    tooth = ToothNoise()
    if tooth.get_noise(1.0, 2.0, 3.0, 4.0) != 0.0:
        failures.append("ToothNoise 4D is expected to return 0.0")
    return failures
