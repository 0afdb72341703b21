"""Bounds-checked cursor over a byte region.

This module provides the CursorReader used by the decoder. All reads are
forward-only and little-endian; a read that would run past the end of the
region raises TruncatedInputError and leaves the cursor where it was.
"""

from __future__ import annotations

import struct
from typing import Union

from ..constants import (
    SMALL_MAX,
    SMALLINT_BASE,
    TAG_FLOAT64,
    TAG_POS_U8,
    TAG_POS_U16,
    TAG_POS_U32,
)
from ..exceptions import DecodeError, TruncatedInputError

Buffer = Union[bytes, bytearray, memoryview]

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_F64 = struct.Struct("<d")


class CursorReader:
    """Reads fixed-width primitives and byte slices from a byte region.

    The region is wrapped in a flat unsigned-byte ``memoryview``; slices
    returned by ``read_bytes`` are views into it, not copies.

    Example:
        >>> reader = CursorReader(b"\\x2a\\x01\\x00")
        >>> reader.read_u8()
        42
        >>> reader.read_u16_le()
        1
        >>> reader.has_remaining()
        False
    """

    def __init__(self, data: Buffer) -> None:
        """Initialize a reader over ``data``.

        Args:
            data: Any object supporting the buffer protocol
        """
        self._view = memoryview(data).cast("B")
        self._offset = 0

    @property
    def offset(self) -> int:
        """Current read position."""
        return self._offset

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._view) - self._offset

    def has_remaining(self) -> bool:
        """Return True if at least one byte is left to read."""
        return self._offset < len(self._view)

    def _require(self, size: int) -> None:
        if size > self.remaining:
            raise TruncatedInputError(self._offset, size, self.remaining)

    def read_u8(self) -> int:
        """Read one unsigned byte.

        Raises:
            TruncatedInputError: If the region is exhausted
        """
        self._require(1)
        value = self._view[self._offset]
        self._offset += 1
        return value

    def read_u16_le(self) -> int:
        """Read a little-endian unsigned 16-bit integer."""
        return self._unpack(_U16)

    def read_u32_le(self) -> int:
        """Read a little-endian unsigned 32-bit integer."""
        return self._unpack(_U32)

    def read_f64_le(self) -> float:
        """Read a little-endian IEEE-754 double."""
        return self._unpack(_F64)

    def _unpack(self, fmt: struct.Struct) -> int | float:
        self._require(fmt.size)
        (value,) = fmt.unpack_from(self._view, self._offset)
        self._offset += fmt.size
        return value

    def read_bytes(self, size: int) -> memoryview:
        """Read ``size`` bytes as a view into the region.

        Args:
            size: Number of bytes to read

        Returns:
            Zero-copy view of the bytes read

        Raises:
            TruncatedInputError: If fewer than ``size`` bytes remain
            ValueError: If size is negative
        """
        if size < 0:
            raise ValueError(f"read_bytes requires non-negative size, got {size}")
        self._require(size)
        start = self._offset
        self._offset += size
        return self._view[start : self._offset]

    def skip(self, size: int) -> None:
        """Advance past ``size`` bytes without returning them."""
        self.read_bytes(size)

    def read_count(self) -> int:
        """Read a length or count field.

        Counts use the number encoding, so they can be a packed small integer,
        a positive 1/2/4-byte integer, or an integral double for very large
        values.

        Returns:
            Non-negative integer count

        Raises:
            DecodeError: If the field is not a non-negative integer
            TruncatedInputError: If the region ends inside the field
        """
        start = self._offset
        try:
            return self._read_count(start)
        except DecodeError:
            self._offset = start
            raise

    def _read_count(self, start: int) -> int:
        tag = self.read_u8()
        if SMALLINT_BASE <= tag <= SMALLINT_BASE + SMALL_MAX:
            return tag - SMALLINT_BASE
        if tag == TAG_POS_U8:
            return self.read_u8()
        if tag == TAG_POS_U16:
            return self.read_u16_le()
        if tag == TAG_POS_U32:
            return self.read_u32_le()
        if tag == TAG_FLOAT64:
            value = self.read_f64_le()
            if value >= 0 and value.is_integer():
                return int(value)
            raise DecodeError(f"Invalid length {value!r} at offset {start}", offset=start)
        raise DecodeError(
            f"Invalid length: tag 0x{tag:02x} is not a non-negative integer at offset {start}",
            offset=start,
        )

    def read_length_prefixed_bytes(self, element_size: int = 1) -> memoryview:
        """Read a count followed by ``count * element_size`` bytes.

        Args:
            element_size: Width of one element in bytes

        Returns:
            Zero-copy view of the payload
        """
        start = self._offset
        count = self.read_count()
        try:
            return self.read_bytes(count * element_size)
        except TruncatedInputError:
            self._offset = start
            raise
