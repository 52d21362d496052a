from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Dict, List, Optional, Sequence, Type, TypeVar

from noisekit.core.constants import MAX_DIMENSION, MIN_DIMENSION, SEED_SHIFT_SCALE
from noisekit.core.numeric import to_int64
from noisekit.core.serial.codec import SerializationError
from noisekit.core.serial.record import RecordReader, format_record
from noisekit.utils.logging import get_logger

logger = get_logger(__name__)

N = TypeVar("N", bound="NoiseGenerator")


class NoiseDimensionError(ValueError):
    """Raised when a generator is asked for a dimension it does not advertise."""


class UnknownNoiseTagError(SerializationError):
    """Raised when a serialized record names a tag nobody registered."""


class NoiseGenerator(ABC):
    """
    Capability contract shared by every noise algorithm and wrapper.

    Subclasses provide ``_evaluate(coords, seed)``, ``_write_fields()`` and
    ``_read_fields(reader)``; everything else (dimension checks, seeded calls,
    record framing) lives here.
    """

    tag: ClassVar[str] = "(NO)"

    @property
    def min_dimension(self) -> int:
        return MIN_DIMENSION

    @property
    def max_dimension(self) -> int:
        return MAX_DIMENSION

    @property
    def can_use_seed(self) -> bool:
        return True

    @property
    def has_efficient_set_seed(self) -> bool:
        return True

    @property
    @abstractmethod
    def seed(self) -> int:
        ...

    @seed.setter
    @abstractmethod
    def seed(self, value: int) -> None:
        ...

    def get_seed(self) -> int:
        return self.seed

    def set_seed(self, seed: int) -> None:
        self.seed = seed

    def get_tag(self) -> str:
        return self.tag

    # Evaluation

    def _check_dimension(self, coords: Sequence[float]) -> None:
        if not self.min_dimension <= len(coords) <= self.max_dimension:
            raise NoiseDimensionError(
                f"{type(self).__name__} supports {self.min_dimension}D to {self.max_dimension}D, "
                f"got {len(coords)} coordinates"
            )

    @abstractmethod
    def _evaluate(self, coords: Sequence[float], seed: int) -> float:
        """Noise at coords for an already-validated dimension and int64 seed."""

    def get_noise(self, *coords: float) -> float:
        self._check_dimension(coords)
        return self._evaluate(coords, self.seed)

    def get_noise_with_seed(self, *coords: float, seed: int) -> float:
        self._check_dimension(coords)
        if not self.has_efficient_set_seed:
            shift = to_int64(seed) * SEED_SHIFT_SCALE
            return self._evaluate([c + shift for c in coords], self.seed)
        return self._evaluate(coords, to_int64(seed))

    # Serialization

    @abstractmethod
    def _write_fields(self) -> List[str]:
        ...

    @abstractmethod
    def _read_fields(self, reader: RecordReader) -> None:
        ...

    def string_serialize(self) -> str:
        return format_record(*self._write_fields())

    def read_record(self, reader: RecordReader) -> NoiseGenerator:
        reader.open()
        self._read_fields(reader)
        reader.close()
        return self

    def string_deserialize(self: N, data: Optional[str]) -> N:
        if not data:
            raise SerializationError(f"No data to deserialize into {type(self).__name__}")
        # Parse into a copy so a malformed record leaves this instance unchanged
        reader = RecordReader(data)
        parsed = self.copy()
        parsed.read_record(reader)
        reader.expect_end()
        vars(self).update(vars(parsed))
        return self

    @classmethod
    def recreate_from_string(cls: Type[N], data: Optional[str]) -> Optional[N]:
        if not data:
            return None
        return cls().string_deserialize(data)

    # Value semantics

    @abstractmethod
    def copy(self: N) -> N:
        ...

    @abstractmethod
    def _config_key(self) -> tuple:
        """Every configuration field, used for equality and hashing."""

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self._config_key() == other._config_key()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__,) + self._config_key())


NoiseFactory = Callable[[], NoiseGenerator]

NOISE_REGISTRY: Dict[str, NoiseFactory] = {}


def register_noise(factory: NoiseFactory, tag: Optional[str] = None) -> None:
    """Register a zero-argument factory (usually the class itself) under its tag."""
    tag = tag or getattr(factory, "tag", None) or factory().tag
    if tag in NOISE_REGISTRY:
        logger.warning("When registering a noise generator, a duplicate tag failed to register: %s", tag)
        return
    NOISE_REGISTRY[tag] = factory


def get_noise(tag: str) -> NoiseGenerator:
    if tag not in NOISE_REGISTRY:
        raise UnknownNoiseTagError(f"Unknown noise tag '{tag}'. Available: {list_noise_tags()}")
    return NOISE_REGISTRY[tag]()


def list_noise_tags() -> List[str]:
    return sorted(NOISE_REGISTRY.keys())


def serialize_noise(noise: NoiseGenerator) -> str:
    """Tag-prefixed record that deserialize_noise() can read without knowing the type."""
    return noise.tag + noise.string_serialize()


def read_tagged(reader: RecordReader) -> NoiseGenerator:
    start = reader.pos
    tag = reader.read_tag()
    noise = get_noise(tag).read_record(reader)
    logger.debug("Read %s record spanning [%d, %d) at depth %d", tag, start, reader.pos, reader.depth)
    return noise


def deserialize_noise(data: Optional[str]) -> NoiseGenerator:
    if not data:
        raise SerializationError("String given cannot represent a valid noise generator.")
    if "`" not in data:
        raise SerializationError(f"String given cannot represent a valid noise generator: '{data}'")
    reader = RecordReader(data)
    noise = read_tagged(reader)
    reader.expect_end()
    return noise
