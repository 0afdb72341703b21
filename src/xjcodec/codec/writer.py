"""Byte buffer assembly for the encoder.

This module provides the ByteWriter used while encoding. All multi-byte
primitives are written little-endian.
"""

from __future__ import annotations

import struct

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_F64 = struct.Struct("<d")


class ByteWriter:
    """Appends encoded chunks to a growing byte buffer.

    Example:
        >>> writer = ByteWriter()
        >>> writer.write_u8(0x19)
        >>> writer.write_u16_le(1000)
        >>> writer.to_bytes()
        b'\\x19\\xe8\\x03'
    """

    def __init__(self) -> None:
        """Initialize an empty writer."""
        self._buffer = bytearray()

    def write_u8(self, value: int) -> None:
        """Write one unsigned byte.

        Raises:
            ValueError: If value is outside 0..255
        """
        self._buffer.append(value)

    def write_u16_le(self, value: int) -> None:
        """Write a little-endian unsigned 16-bit integer.

        Raises:
            struct.error: If value is outside 0..65535
        """
        self._buffer += _U16.pack(value)

    def write_u32_le(self, value: int) -> None:
        """Write a little-endian unsigned 32-bit integer.

        Raises:
            struct.error: If value is outside 0..2**32-1
        """
        self._buffer += _U32.pack(value)

    def write_f64_le(self, value: float) -> None:
        """Write a little-endian IEEE-754 double.

        Raises:
            struct.error: If value is not a number
        """
        self._buffer += _F64.pack(value)

    def write_bytes(self, data: bytes | bytearray | memoryview) -> None:
        """Write raw bytes."""
        self._buffer += data

    def tell(self) -> int:
        """Return the number of bytes written so far."""
        return len(self._buffer)

    def truncate(self, size: int) -> None:
        """Discard everything written after the first ``size`` bytes."""
        del self._buffer[size:]

    def __len__(self) -> int:
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        """Return the written bytes as an immutable copy."""
        return bytes(self._buffer)
