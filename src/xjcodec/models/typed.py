"""Homogeneous numeric vectors with a fixed element kind.

A ``TypedVector`` is the codec's counterpart of a typed array: a run of
fixed-width numbers stored as little-endian bytes. The element kind is part of
the value's identity, so ``uint8`` and ``uint8-clamped`` vectors holding the
same bytes are different values.
"""

from __future__ import annotations

import array
import enum
import math
import struct
import sys
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from ..constants import (
    TAG_FLOAT32_VECTOR,
    TAG_FLOAT64_VECTOR,
    TAG_INT8_VECTOR,
    TAG_INT16_VECTOR,
    TAG_INT32_VECTOR,
    TAG_INT64_VECTOR,
    TAG_UINT8_CLAMPED_VECTOR,
    TAG_UINT8_VECTOR,
    TAG_UINT16_VECTOR,
    TAG_UINT32_VECTOR,
    TAG_UINT64_VECTOR,
)


class ElementKind(enum.Enum):
    """Element kind of a typed vector.

    Each member carries its wire tag, its ``struct`` format character and its
    width in bytes.
    """

    INT8 = (TAG_INT8_VECTOR, "b", 1)
    INT16 = (TAG_INT16_VECTOR, "h", 2)
    INT32 = (TAG_INT32_VECTOR, "i", 4)
    UINT8 = (TAG_UINT8_VECTOR, "B", 1)
    UINT16 = (TAG_UINT16_VECTOR, "H", 2)
    UINT32 = (TAG_UINT32_VECTOR, "I", 4)
    UINT8_CLAMPED = (TAG_UINT8_CLAMPED_VECTOR, "B", 1)
    FLOAT32 = (TAG_FLOAT32_VECTOR, "f", 4)
    FLOAT64 = (TAG_FLOAT64_VECTOR, "d", 8)
    INT64 = (TAG_INT64_VECTOR, "q", 8)
    UINT64 = (TAG_UINT64_VECTOR, "Q", 8)

    def __init__(self, tag: int, fmt: str, width: int) -> None:
        self.tag = tag
        self.fmt = fmt
        self.width = width

    @classmethod
    def from_tag(cls, tag: int) -> Optional[ElementKind]:
        """Return the kind whose wire tag is ``tag``, or None."""
        return _KINDS_BY_TAG.get(tag)

    @classmethod
    def from_array(cls, arr: array.array) -> Optional[ElementKind]:
        """Return the kind matching an ``array.array``'s typecode and item size, or None."""
        return _KINDS_BY_TYPECODE.get((arr.typecode, arr.itemsize))


_KINDS_BY_TAG = {kind.tag: kind for kind in ElementKind}

# (typecode, itemsize) -> kind; "l"/"L" and "i"/"I" vary in size by platform
_KINDS_BY_TYPECODE = {
    ("b", 1): ElementKind.INT8,
    ("B", 1): ElementKind.UINT8,
    ("h", 2): ElementKind.INT16,
    ("H", 2): ElementKind.UINT16,
    ("i", 4): ElementKind.INT32,
    ("I", 4): ElementKind.UINT32,
    ("l", 4): ElementKind.INT32,
    ("L", 4): ElementKind.UINT32,
    ("l", 8): ElementKind.INT64,
    ("L", 8): ElementKind.UINT64,
    ("q", 8): ElementKind.INT64,
    ("Q", 8): ElementKind.UINT64,
    ("f", 4): ElementKind.FLOAT32,
    ("d", 8): ElementKind.FLOAT64,
}


def _clamp_u8(value: Any) -> int:
    """Round half to even and clamp into 0..255; NaN becomes 0."""
    if isinstance(value, float):
        if math.isnan(value):
            return 0
        if math.isinf(value):
            return 255 if value > 0 else 0
    return min(255, max(0, round(value)))


@dataclass(frozen=True)
class TypedVector:
    """Fixed-kind numeric vector backed by little-endian element bytes.

    Attributes:
        kind: Element kind
        data: Raw element bytes, little-endian, ``len(self) * kind.width`` long

    Example:
        >>> vec = TypedVector.from_values(ElementKind.INT16, [1, -2, 300])
        >>> vec.data
        b'\\x01\\x00\\xfe\\xff,\\x01'
        >>> vec.tolist()
        [1, -2, 300]
    """

    kind: ElementKind
    data: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ElementKind):
            raise TypeError(f"kind must be an ElementKind, got {type(self.kind).__name__}")
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))
        if len(self.data) % self.kind.width:
            raise ValueError(
                f"{self.kind.name} vector data must be a multiple of {self.kind.width} bytes, "
                f"got {len(self.data)}"
            )

    @classmethod
    def from_values(cls, kind: ElementKind, values: Iterable[Any]) -> TypedVector:
        """Pack numbers into a vector of the given kind.

        Args:
            kind: Element kind
            values: Numbers to pack; ``UINT8_CLAMPED`` values are rounded and
                clamped into 0..255 instead of being rejected

        Returns:
            New TypedVector

        Raises:
            ValueError: If a value does not fit the element kind
        """
        items = list(values)
        if kind is ElementKind.UINT8_CLAMPED:
            items = [_clamp_u8(item) for item in items]
        try:
            data = struct.pack(f"<{len(items)}{kind.fmt}", *items)
        except (struct.error, OverflowError) as err:
            raise ValueError(f"Values do not fit {kind.name}: {err}") from err
        return cls(kind, data)

    @classmethod
    def from_array(cls, arr: array.array) -> TypedVector:
        """Build a vector from an ``array.array``.

        Raises:
            ValueError: If the array's typecode has no matching element kind
        """
        kind = ElementKind.from_array(arr)
        if kind is None:
            raise ValueError(
                f"array typecode {arr.typecode!r} (itemsize {arr.itemsize}) has no element kind"
            )
        if sys.byteorder != "little":
            arr = array.array(arr.typecode, arr)
            arr.byteswap()
        return cls(kind, arr.tobytes())

    @property
    def itemsize(self) -> int:
        """Width of one element in bytes."""
        return self.kind.width

    def tolist(self) -> list[Any]:
        """Unpack all elements into a list of Python numbers."""
        return list(struct.unpack(f"<{len(self)}{self.kind.fmt}", self.data))

    def __len__(self) -> int:
        return len(self.data) // self.kind.width

    def __iter__(self) -> Iterator[Any]:
        for (item,) in struct.iter_unpack(f"<{self.kind.fmt}", self.data):
            yield item

    def __getitem__(self, index: int) -> Any:
        length = len(self)
        if index < 0:
            index += length
        if not 0 <= index < length:
            raise IndexError("TypedVector index out of range")
        return struct.unpack_from(f"<{self.kind.fmt}", self.data, index * self.kind.width)[0]

    def __repr__(self) -> str:
        return f"TypedVector({self.kind.name}, {self.tolist()!r})"
