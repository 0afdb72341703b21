"""Tests pinning the exact byte layout of each value kind."""

from __future__ import annotations

import struct
from typing import Any

import pytest

from xjcodec import UNDEFINED, BigInt, ElementKind, ErrorValue, TypedVector, decode, encode


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, b"\x00"),
        (False, b"\x01"),
        (True, b"\x02"),
        (UNDEFINED, b"\x15"),
        # Packed small integers
        (0, b"\xf0"),
        (15, b"\xff"),
        # Sign-and-width integers
        (16, b"\x16\x10"),
        (255, b"\x16\xff"),
        (-1, b"\x18\x01"),
        (-255, b"\x18\xff"),
        (256, b"\x19\x00\x01"),
        (-256, b"\x1a\x00\x01"),
        (65535, b"\x19\xff\xff"),
        (65536, b"\x1b\x00\x00\x01\x00"),
        (-65536, b"\x1c\x00\x00\x01\x00"),
        (2**32 - 1, b"\x1b\xff\xff\xff\xff"),
        (-0.0, b"\x18\x00"),
        # Doubles
        (2**32, b"\x03" + struct.pack("<d", 2.0**32)),
        (1.5, b"\x03" + struct.pack("<d", 1.5)),
        # Bigints: big-endian magnitude, length as a number
        (BigInt(0), b"\x04\xf0"),
        (BigInt(-1234567890), b"\x17\xf4\x49\x96\x02\xd2"),
        (BigInt(256), b"\x04\xf2\x01\x00"),
        # Strings
        ("", b"\xe0"),
        ("x", b"\xe1x"),
        ("é", b"\xe2\xc3\xa9"),
        ("a" * 15, b"\xef" + b"a" * 15),
        ("a" * 16, b"\x05\x16\x10" + b"a" * 16),
        # Buffers and vectors
        (b"", b"\x06\xf0"),
        (b"\x01\x02", b"\x06\xf2\x01\x02"),
        (TypedVector.from_values(ElementKind.INT16, [1, -2]), b"\x08\xf2\x01\x00\xfe\xff"),
        (TypedVector(ElementKind.UINT8_CLAMPED, b""), b"\x0d\xf0"),
        # Containers
        ([], b"\x12\xf0"),
        ([1, [None]], b"\x12\xf2\xf1\x12\xf1\x00"),
        ({"b": 1, "a": 2}, b"\x13\xf2\xe1a\xf2\xe1b\xf1"),
        # Errors: name, message, stack, cause flag
        (ErrorValue(name="E", message="m"), b"\x14\xe1E\xe1m\xe0\x00"),
        (ErrorValue(name="E", cause=None), b"\x14\xe1E\xe0\xe0\x01\x00"),
    ],
)
def test_encoding(value: Any, expected: bytes) -> None:
    """Test the encoding of a value and its decoding back."""
    assert encode(value) == expected
    assert encode(*decode(expected)) == expected


@pytest.mark.parametrize(
    ("kind", "tag"),
    [
        (ElementKind.INT8, 0x07),
        (ElementKind.INT16, 0x08),
        (ElementKind.INT32, 0x09),
        (ElementKind.UINT8, 0x0A),
        (ElementKind.UINT16, 0x0B),
        (ElementKind.UINT32, 0x0C),
        (ElementKind.UINT8_CLAMPED, 0x0D),
        (ElementKind.FLOAT32, 0x0E),
        (ElementKind.FLOAT64, 0x0F),
        (ElementKind.INT64, 0x10),
        (ElementKind.UINT64, 0x11),
    ],
)
def test_vector_tags(kind: ElementKind, tag: int) -> None:
    """Test each element kind has its own tag and the count is in elements."""
    vector = TypedVector.from_values(kind, [1, 2, 3])

    data = encode(vector)
    assert data[0] == tag
    assert data[1] == 0xF3
    assert data[2:] == vector.data
    assert len(data[2:]) == 3 * kind.width


def test_compact_multi_value() -> None:
    """Test small integers and null cost one byte each."""
    assert encode(0x0F, 0x00, None) == b"\xff\xf0\x00"


@pytest.mark.parametrize("tag", range(0xE0, 0x100))
def test_packed_tag_ranges(tag: int) -> None:
    """Test every byte of the packed ranges decodes."""
    if tag >= 0xF0:
        assert decode(bytes([tag])) == [tag - 0xF0]
    else:
        size = tag - 0xE0
        assert decode(bytes([tag]) + b"z" * size) == ["z" * size]
