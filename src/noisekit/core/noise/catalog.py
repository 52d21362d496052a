"""Import every generator module so that each one registers its tag."""

from __future__ import annotations

from noisekit.core.noise import (  # noqa: F401 (registers)
    flan,
    foamplex,
    honey,
    radial,
    simplex,
    tooth,
    wrapper,
)
from noisekit.core.noise.base import NOISE_REGISTRY, NoiseGenerator, get_noise, list_noise_tags

NAMES = {
    "simplex": "SimN",
    "value": "ValN",
    "honey": "HnyN",
    "foamplex": "FplN",
    "flan": "FlaN",
    "tooth": "TooN",
    "wrapper": "Wrap",
    "radial": "RadN",
}


def resolve_tag(name: str) -> str:
    """Accept either a registered tag or one of the friendly names in NAMES."""
    if name in NOISE_REGISTRY:
        return name
    tag = NAMES.get(name.lower())
    if tag is None:
        raise ValueError(f"Unknown noise type '{name}'. Available: {sorted(NAMES)} or tags {list_noise_tags()}")
    return tag


def describe(noise: NoiseGenerator) -> dict:
    return {
        "tag": noise.tag,
        "class": type(noise).__name__,
        "min_dimension": noise.min_dimension,
        "max_dimension": noise.max_dimension,
        "can_use_seed": noise.can_use_seed,
        "has_efficient_set_seed": noise.has_efficient_set_seed,
        "seed": noise.seed,
        "repr": repr(noise),
    }


def describe_tag(tag: str) -> dict:
    return describe(get_noise(resolve_tag(tag)))
