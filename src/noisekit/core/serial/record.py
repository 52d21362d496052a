from __future__ import annotations

from typing import List

from noisekit.core.serial.codec import (
    SerializationError,
    parse_bool,
    parse_float,
    parse_int,
    reversed_int_bits_to_float,
)

RECORD_MARK = "`"
FIELD_SEP = "~"


def format_record(*fields: str) -> str:
    """Join already-encoded fields into one backtick-delimited record."""
    return RECORD_MARK + FIELD_SEP.join(fields) + RECORD_MARK


class RecordReader:
    """
    Recursive-descent cursor over serialized noise records.

    Grammar::

        record := '`' [field ('~' field)*] '`'
        field  := scalar | TAG record

    A nested record is read by handing this same reader to whichever generator
    owns it, so its whole span (tildes and inner backticks included) is consumed
    before the enclosing record reads its next field. ``pos`` always points at
    the next unread character.
    """

    def __init__(self, data: str, pos: int = 0):
        if not data:
            raise SerializationError("Cannot read a noise record from empty data")
        self.data = data
        self.pos = pos
        self._field_counts: List[int] = []

    @property
    def depth(self) -> int:
        return len(self._field_counts)

    def _peek(self) -> str:
        if self.pos >= len(self.data):
            raise SerializationError(f"Record truncated at position {self.pos}: '{self.data}'")
        return self.data[self.pos]

    def _expect(self, char: str) -> None:
        found = self._peek()
        if found != char:
            raise SerializationError(
                f"Expected '{char}' at position {self.pos} but found '{found}' in '{self.data}'"
            )
        self.pos += 1

    def _begin_field(self) -> None:
        if not self._field_counts:
            return
        if self._field_counts[-1] > 0:
            self._expect(FIELD_SEP)
        self._field_counts[-1] += 1

    def open(self) -> None:
        self._expect(RECORD_MARK)
        self._field_counts.append(0)

    def close(self) -> None:
        if not self._field_counts:
            raise SerializationError("close() called without a matching open()")
        self._expect(RECORD_MARK)
        self._field_counts.pop()

    def expect_end(self) -> None:
        if self.pos != len(self.data):
            raise SerializationError(
                f"Unexpected trailing data at position {self.pos}: '{self.data[self.pos:]}'"
            )

    def text(self) -> str:
        """Read one scalar field, stopping before the next '~' or '`'."""
        self._begin_field()
        start = self.pos
        while self._peek() not in (FIELD_SEP, RECORD_MARK):
            self.pos += 1
        return self.data[start:self.pos]

    def read_int(self, bits: int = 64) -> int:
        return parse_int(self.text(), bits)

    def read_float(self) -> float:
        return parse_float(self.text())

    def read_bool(self) -> bool:
        return parse_bool(self.text())

    def read_reversed_float(self) -> float:
        return reversed_int_bits_to_float(self.read_int(bits=32))

    def read_tag(self) -> str:
        """Read the tag that prefixes a nested record, leaving the cursor on its '`'."""
        self._begin_field()
        start = self.pos
        while self._peek() != RECORD_MARK:
            if self.data[self.pos] == FIELD_SEP:
                raise SerializationError(f"Expected a tagged record at position {start} in '{self.data}'")
            self.pos += 1
        if self.pos == start:
            raise SerializationError(f"Missing tag before record at position {start} in '{self.data}'")
        return self.data[start:self.pos]
