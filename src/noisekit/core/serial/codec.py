from __future__ import annotations

import re

from noisekit.core.numeric import float32_bits, float32_from_bits, reverse_bits32, to_int32

_INT_RE = re.compile(r"-?[0-9]+\Z")


class SerializationError(ValueError):
    """Raised when a serialized noise record cannot be parsed."""


def format_int(value: int) -> str:
    return str(int(value))


def parse_int(text: str, bits: int = 64) -> int:
    if not _INT_RE.match(text):
        raise SerializationError(f"Expected a decimal integer, got '{text}'")
    value = int(text)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise SerializationError(f"Integer '{text}' does not fit in {bits} bits")
    return value


def format_float(value: float) -> str:
    return repr(float(value))


def parse_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError as exc:
        raise SerializationError(f"Expected a decimal float, got '{text}'") from exc
    if not text.strip() or text != text.strip():
        raise SerializationError(f"Expected a decimal float, got '{text}'")
    return value


def format_bool(value: bool) -> str:
    return "1" if value else "0"


def parse_bool(text: str) -> bool:
    if text not in ("0", "1"):
        raise SerializationError(f"Expected '0' or '1', got '{text}'")
    return text == "1"


def float_to_reversed_int_bits(value: float) -> int:
    """
    Encode value as float32, reverse the order of its 32 bits and read the
    result as a signed int. Typical small values turn into short decimals and
    the float32 value survives the trip exactly.
    """
    return to_int32(reverse_bits32(float32_bits(value)))


def reversed_int_bits_to_float(bits: int) -> float:
    return float32_from_bits(reverse_bits32(bits))
