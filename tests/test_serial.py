import pytest

from noisekit.core.numeric import as_float32
from noisekit.core.serial.codec import (
    SerializationError,
    float_to_reversed_int_bits,
    format_float,
    parse_bool,
    parse_float,
    parse_int,
    reversed_int_bits_to_float,
)
from noisekit.core.serial.record import RecordReader, format_record


def test_format_record_joins_fields():
    assert format_record("1", "2", "3") == "`1~2~3`"
    assert format_record() == "``"


def test_parse_int_bounds_and_garbage():
    assert parse_int("-5") == -5
    assert parse_int(str(2**63 - 1)) == 2**63 - 1
    with pytest.raises(SerializationError):
        parse_int(str(2**63))
    with pytest.raises(SerializationError):
        parse_int("12a")
    with pytest.raises(SerializationError):
        parse_int(" 5")
    with pytest.raises(SerializationError):
        parse_int("")
    with pytest.raises(SerializationError):
        parse_int(str(2**31), bits=32)


def test_float_text_is_exact():
    for value in (0.1, 1.0 / 3.0, -2.5e-300, 0.03125):
        assert parse_float(format_float(value)) == value
    with pytest.raises(SerializationError):
        parse_float("abc")
    with pytest.raises(SerializationError):
        parse_float(" 0.5")


def test_parse_bool():
    assert parse_bool("1") is True
    assert parse_bool("0") is False
    with pytest.raises(SerializationError):
        parse_bool("true")


def test_reversed_bits_encoding():
    assert float_to_reversed_int_bits(0.0) == 0
    # 1.0f is 0x3F800000; reversed it is 0x000001FC
    assert float_to_reversed_int_bits(1.0) == 0x1FC
    for value in (0.6, 0.5, 0.25, 1.75, -3.5):
        bits = float_to_reversed_int_bits(value)
        assert -(2**31) <= bits < 2**31
        assert reversed_int_bits_to_float(bits) == as_float32(value)


def test_reader_walks_nested_record():
    reader = RecordReader("`1~X`2~3`~4`")
    reader.open()
    assert reader.read_int() == 1
    assert reader.read_tag() == "X"
    reader.open()
    assert reader.depth == 2
    assert reader.read_int() == 2
    assert reader.read_int() == 3
    reader.close()
    assert reader.read_int() == 4
    reader.close()
    reader.expect_end()
    assert reader.depth == 0


def test_reader_keeps_inner_tildes_inside_nested_record():
    reader = RecordReader("`A`1~2~3`~9`")
    reader.open()
    assert reader.read_tag() == "A"
    reader.open()
    assert [reader.read_int(), reader.read_int(), reader.read_int()] == [1, 2, 3]
    reader.close()
    assert reader.read_int() == 9
    reader.close()
    reader.expect_end()


def test_reader_rejects_truncation_and_trailing_data():
    reader = RecordReader("`1~2")
    reader.open()
    reader.read_int()
    with pytest.raises(SerializationError):
        reader.read_int()

    reader = RecordReader("`1`extra")
    reader.open()
    reader.read_int()
    reader.close()
    with pytest.raises(SerializationError):
        reader.expect_end()


def test_reader_tag_errors():
    with pytest.raises(SerializationError):
        RecordReader("")
    reader = RecordReader("`1`")
    with pytest.raises(SerializationError):
        reader.read_tag()
    reader = RecordReader("AB~C`1`")
    with pytest.raises(SerializationError):
        reader.read_tag()
