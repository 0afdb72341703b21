"""Unit tests for the cursor reader and byte writer."""

from __future__ import annotations

import struct

import pytest

from xjcodec import DecodeError, TruncatedInputError
from xjcodec.codec.reader import CursorReader
from xjcodec.codec.writer import ByteWriter


class TestByteWriter:
    """Test ByteWriter functionality."""

    def test_write_primitives(self) -> None:
        """Test writing fixed-width little-endian primitives."""
        writer = ByteWriter()
        writer.write_u8(0x2A)
        writer.write_u16_le(0x0102)
        writer.write_u32_le(0x01020304)

        assert len(writer) == 7
        assert writer.to_bytes() == b"\x2a\x02\x01\x04\x03\x02\x01"

    def test_write_f64(self) -> None:
        """Test writing a double."""
        writer = ByteWriter()
        writer.write_f64_le(1.5)
        assert writer.to_bytes() == struct.pack("<d", 1.5)

    def test_write_u8_bounds(self) -> None:
        """Test byte bounds checking."""
        writer = ByteWriter()

        with pytest.raises(ValueError):
            writer.write_u8(256)

        with pytest.raises(ValueError):
            writer.write_u8(-1)

    def test_write_wide_bounds(self) -> None:
        """Test wider primitives reject out-of-range values with struct.error."""
        writer = ByteWriter()

        with pytest.raises(struct.error):
            writer.write_u16_le(0x10000)
        with pytest.raises(struct.error):
            writer.write_u32_le(-1)
        with pytest.raises(struct.error):
            writer.write_f64_le("1.5")  # type: ignore[arg-type]

        assert len(writer) == 0

    def test_truncate(self) -> None:
        """Test rolling back to an earlier position."""
        writer = ByteWriter()
        writer.write_bytes(b"keep")
        mark = writer.tell()
        writer.write_bytes(b"drop")

        writer.truncate(mark)
        assert writer.to_bytes() == b"keep"

    def test_empty_writer(self) -> None:
        """Test empty writer."""
        writer = ByteWriter()
        assert len(writer) == 0
        assert writer.to_bytes() == b""


class TestCursorReader:
    """Test CursorReader functionality."""

    def test_read_primitives(self) -> None:
        """Test reading fixed-width primitives."""
        data = b"\x2a\x02\x01\x04\x03\x02\x01" + struct.pack("<d", -2.25)
        reader = CursorReader(data)

        assert reader.read_u8() == 0x2A
        assert reader.read_u16_le() == 0x0102
        assert reader.read_u32_le() == 0x01020304
        assert reader.read_f64_le() == -2.25
        assert not reader.has_remaining()

    def test_read_bytes_is_view(self) -> None:
        """Test that slices are views, not copies."""
        data = bytearray(b"\x00abc")
        reader = CursorReader(data)
        reader.skip(1)

        view = reader.read_bytes(3)
        assert isinstance(view, memoryview)
        assert view == b"abc"

        data[1] = ord("z")
        assert view == b"zbc"

    def test_offset_and_remaining(self) -> None:
        """Test position tracking."""
        reader = CursorReader(b"\x01\x02\x03")

        assert reader.offset == 0
        assert reader.remaining == 3
        reader.read_u8()
        assert reader.offset == 1
        assert reader.remaining == 2

    def test_truncation_error(self) -> None:
        """Test error on reading past end."""
        reader = CursorReader(b"\xff")
        reader.read_u8()

        with pytest.raises(TruncatedInputError, match="[Tt]runcated"):
            reader.read_u8()

    def test_failed_read_keeps_offset(self) -> None:
        """Test that a failed read does not move the cursor."""
        reader = CursorReader(b"\x01\x02\x03")
        reader.read_u8()

        with pytest.raises(TruncatedInputError) as exc_info:
            reader.read_u32_le()

        assert exc_info.value.offset == 1
        assert exc_info.value.needed == 4
        assert exc_info.value.available == 2
        assert reader.offset == 1
        assert reader.read_u16_le() == 0x0302

    def test_read_bytes_negative(self) -> None:
        """Test negative sizes are rejected."""
        reader = CursorReader(b"\x00")
        with pytest.raises(ValueError, match="non-negative"):
            reader.read_bytes(-1)

    def test_subregion(self) -> None:
        """Test reading a view that starts inside a larger buffer."""
        big = bytes(range(10))
        reader = CursorReader(memoryview(big)[5:8])

        assert reader.read_u8() == 5
        assert reader.read_u16_le() == 0x0706
        assert not reader.has_remaining()


class TestReadCount:
    """Test length/count decoding."""

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (b"\xf0", 0),
            (b"\xff", 15),
            (b"\x16\x10", 16),
            (b"\x19\x00\x01", 256),
            (b"\x1b\x00\x00\x01\x00", 65536),
            (b"\x03" + struct.pack("<d", 2.0**32), 2**32),
        ],
    )
    def test_valid_counts(self, data: bytes, expected: int) -> None:
        """Test every form a count can take."""
        reader = CursorReader(data)
        assert reader.read_count() == expected
        assert not reader.has_remaining()

    @pytest.mark.parametrize(
        "data",
        [
            b"\x18\x01",  # negative
            b"\x03" + struct.pack("<d", 1.5),  # fractional
            b"\x03" + struct.pack("<d", float("nan")),
            b"\xe1a",  # string
            b"\x00",  # null
        ],
    )
    def test_invalid_counts(self, data: bytes) -> None:
        """Test that non-count values are rejected."""
        reader = CursorReader(data)
        with pytest.raises(DecodeError, match="Invalid length"):
            reader.read_count()
        assert reader.offset == 0

    def test_length_prefixed_bytes(self) -> None:
        """Test count times element size."""
        reader = CursorReader(b"\xf2\x01\x00\x02\x00\x99")

        assert reader.read_length_prefixed_bytes(2) == b"\x01\x00\x02\x00"
        assert reader.read_u8() == 0x99

    def test_length_prefixed_bytes_truncated(self) -> None:
        """Test that a payload shorter than its count fails without moving."""
        reader = CursorReader(b"\xf4ab")

        with pytest.raises(TruncatedInputError):
            reader.read_length_prefixed_bytes()
        assert reader.offset == 0
