from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Tuple

import yaml

from noisekit.core.constants import (
    DEFAULT_FIELD_SCALE,
    DEFAULT_FIELD_SIZE,
    RADIAL_DEFAULT_DIVISIONS,
    WRAPPER_DEFAULT_FREQUENCY,
    WRAPPER_DEFAULT_OCTAVES,
)
from noisekit.core.noise.base import NoiseGenerator, deserialize_noise
from noisekit.core.noise.catalog import resolve_tag
from noisekit.core.noise.flan import FlanNoise
from noisekit.core.noise.foamplex import FoamplexNoise
from noisekit.core.noise.honey import HoneyNoise
from noisekit.core.noise.radial import RadialNoiseWrapper
from noisekit.core.noise.simplex import SimplexNoise, ValueNoise
from noisekit.core.noise.tooth import ToothNoise
from noisekit.core.noise.wrapper import MODE_NAMES, NoiseWrapper
from noisekit.core.serial.codec import SerializationError


# -------------------------
# Config structures
# -------------------------


@dataclass(frozen=True)
class FieldConfig:
    size: int
    scale: float
    offset: Tuple[float, float]
    extra: Tuple[float, ...]


@dataclass(frozen=True)
class FullConfig:
    noise: NoiseGenerator
    field: FieldConfig


# -------------------------
# Config parsing/validation
# -------------------------


class ConfigError(Exception):
    """Raised when a noise config is invalid."""


def _require(mapping: Dict[str, Any], key: str, expected_type: Tuple[type, ...]):
    if key not in mapping:
        raise ConfigError(f"Missing required key '{key}'")
    val = mapping[key]
    if not isinstance(val, expected_type):
        raise ConfigError(f"Key '{key}' must be of type {expected_type}, got {type(val)}")
    return val


def _optional(mapping: Dict[str, Any], key: str, expected_type: Tuple[type, ...], default: Any):
    if key not in mapping:
        return default
    return _require(mapping, key, expected_type)


def _check_keys(mapping: Dict[str, Any], allowed: Tuple[str, ...], where: str) -> None:
    unknown = sorted(set(mapping) - set(allowed) - {"type"})
    if unknown:
        raise ConfigError(f"Unknown keys for {where}: {unknown}. Allowed: {sorted(allowed)}")


def _seed(mapping: Dict[str, Any], default: Any) -> Any:
    return _optional(mapping, "seed", (int,), default)


def _mode(mapping: Dict[str, Any]) -> int:
    mode = _optional(mapping, "mode", (str, int), 0)
    if isinstance(mode, str):
        if mode.lower() not in MODE_NAMES:
            raise ConfigError(f"Unknown mode '{mode}'. Available: {sorted(MODE_NAMES)}")
        return MODE_NAMES[mode.lower()]
    return mode


def _wrapper_args(mapping: Dict[str, Any]) -> Dict[str, Any]:
    wrapped = mapping.get("wrapped")
    return {
        "wrapped": build_generator(wrapped) if wrapped is not None else None,
        "seed": _seed(mapping, None),
        "frequency": float(_optional(mapping, "frequency", (int, float), WRAPPER_DEFAULT_FREQUENCY)),
        "mode": _mode(mapping),
        "octaves": _optional(mapping, "octaves", (int,), WRAPPER_DEFAULT_OCTAVES),
        "fractal_spiral": _optional(mapping, "fractal_spiral", (bool,), False),
    }


_WRAPPER_KEYS = ("wrapped", "seed", "frequency", "mode", "octaves", "fractal_spiral")


def _build_simplex(m: Dict[str, Any]) -> NoiseGenerator:
    _check_keys(m, ("seed",), "simplex")
    return SimplexNoise(_seed(m, 0))


def _build_value(m: Dict[str, Any]) -> NoiseGenerator:
    _check_keys(m, ("seed",), "value")
    return ValueNoise(_seed(m, 0))


def _build_honey(m: Dict[str, Any]) -> NoiseGenerator:
    _check_keys(m, ("seed", "sharpness"), "honey")
    noise = HoneyNoise()
    noise.seed = _seed(m, noise.seed)
    noise.sharpness = float(_optional(m, "sharpness", (int, float), noise.sharpness))
    return noise


def _build_foamplex(m: Dict[str, Any]) -> NoiseGenerator:
    _check_keys(m, ("seed",), "foamplex")
    noise = FoamplexNoise()
    noise.seed = _seed(m, noise.seed)
    return noise


def _build_flan(m: Dict[str, Any]) -> NoiseGenerator:
    _check_keys(m, ("seed", "dimension", "sharpness"), "flan")
    default = FlanNoise()
    sharpness = float(_optional(m, "sharpness", (int, float), default.sharpness))
    if sharpness == 0:
        raise ConfigError("flan sharpness must be non-zero")
    return FlanNoise(
        seed=_seed(m, default.seed),
        dimension=_optional(m, "dimension", (int,), default.dimension),
        sharpness=sharpness,
    )


def _build_tooth(m: Dict[str, Any]) -> NoiseGenerator:
    _check_keys(m, (), "tooth")
    return ToothNoise()


def _build_wrapper(m: Dict[str, Any]) -> NoiseGenerator:
    _check_keys(m, _WRAPPER_KEYS, "wrapper")
    return NoiseWrapper(**_wrapper_args(m))


def _build_radial(m: Dict[str, Any]) -> NoiseGenerator:
    _check_keys(m, _WRAPPER_KEYS + ("center", "divisions", "mirror"), "radial")
    center = _optional(m, "center", (list, tuple), (0.0, 0.0))
    if len(center) != 2:
        raise ConfigError("radial center must have exactly two entries (x,y)")
    divisions = _optional(m, "divisions", (int,), RADIAL_DEFAULT_DIVISIONS)
    if divisions <= 0:
        raise ConfigError(f"radial divisions must be positive, got {divisions}")
    args = _wrapper_args(m)
    try:
        return RadialNoiseWrapper(
            **args,
            center_x=float(center[0]),
            center_y=float(center[1]),
            divisions=divisions,
            mirror=_optional(m, "mirror", (bool,), False),
        )
    except ValueError as exc:
        raise ConfigError(f"Invalid radial config: {exc}") from exc


BUILDERS: Dict[str, Callable[[Dict[str, Any]], NoiseGenerator]] = {
    "SimN": _build_simplex,
    "ValN": _build_value,
    "HnyN": _build_honey,
    "FplN": _build_foamplex,
    "FlaN": _build_flan,
    "TooN": _build_tooth,
    "Wrap": _build_wrapper,
    "RadN": _build_radial,
}


def build_generator(mapping: Any) -> NoiseGenerator:
    """
    Build a generator tree from a config mapping.

    The mapping names a ``type`` (a friendly name such as ``honey`` or a tag
    such as ``HnyN``) plus that generator's parameters; wrappers take a nested
    ``wrapped`` mapping. ``record`` may be given instead, holding a serialized
    tagged record.
    """
    if isinstance(mapping, str):
        mapping = {"type": mapping}
    if not isinstance(mapping, dict):
        raise ConfigError(f"Noise config must be a mapping, got {type(mapping)}")
    if "record" in mapping:
        _check_keys(mapping, ("record",), "record")
        try:
            return deserialize_noise(_require(mapping, "record", (str,)))
        except SerializationError as exc:
            raise ConfigError(f"Invalid noise record: {exc}") from exc
    try:
        tag = resolve_tag(_require(mapping, "type", (str,)))
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    if tag not in BUILDERS:
        raise ConfigError(f"Noise type '{mapping['type']}' cannot be configured; use a serialized record")
    return BUILDERS[tag](mapping)


def parse_field(field: Dict[str, Any]) -> FieldConfig:
    offset = _optional(field, "offset", (list, tuple), (0.0, 0.0))
    if len(offset) != 2:
        raise ConfigError("field.offset must have exactly two entries (x,y)")
    extra = _optional(field, "extra", (list, tuple), ())
    if not all(isinstance(e, (int, float)) for e in extra):
        raise ConfigError("field.extra must be a list of numbers")
    size = int(_optional(field, "size", (int,), DEFAULT_FIELD_SIZE))
    if size <= 0:
        raise ConfigError(f"field.size must be positive, got {size}")
    return FieldConfig(
        size=size,
        scale=float(_optional(field, "scale", (int, float), DEFAULT_FIELD_SCALE)),
        offset=(float(offset[0]), float(offset[1])),
        extra=tuple(float(e) for e in extra),
    )


def parse_config(path: Path) -> FullConfig:
    try:
        data = yaml.safe_load(path.read_text())
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"Failed to read YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Top-level YAML must be a mapping.")

    noise = build_generator(_require(data, "noise", (dict, str)))
    field = parse_field(_optional(data, "field", (dict,), {}))
    dims = 2 + len(field.extra)
    if not noise.min_dimension <= dims <= noise.max_dimension:
        raise ConfigError(
            f"{noise.tag} supports {noise.min_dimension}D to {noise.max_dimension}D, "
            f"but field.extra makes the field {dims}D"
        )
    return FullConfig(noise=noise, field=field)
