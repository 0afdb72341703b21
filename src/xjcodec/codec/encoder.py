"""Binary encoder for xjcodec values.

This module provides the encode() function that converts one or more Python
values to the tagged binary format. Each value becomes a self-delimiting run
of bytes, so several values can be concatenated and decoded back in order.

Small values get compact forms:
    - Integers 0..15 fit in the tag byte itself (1 byte total)
    - Other safe integers use a 1, 2 or 4 byte magnitude with a sign tag
    - Strings of up to 15 UTF-8 bytes carry their length in the tag byte
"""

from __future__ import annotations

import array
import logging
import math
from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import BaseModel

from ..constants import (
    CAUSE_ABSENT,
    CAUSE_PRESENT,
    MAX_SAFE_INTEGER,
    MAX_STRING_BYTES,
    MAX_U8,
    MAX_U16,
    MAX_U32,
    SMALL_MAX,
    SMALLINT_BASE,
    SMALLSTR_BASE,
    TAG_ARRAY,
    TAG_BIGINT_NEG,
    TAG_BIGINT_POS,
    TAG_BUFFER,
    TAG_ERROR,
    TAG_FALSE,
    TAG_FLOAT64,
    TAG_NEG_U8,
    TAG_NEG_U16,
    TAG_NEG_U32,
    TAG_NULL,
    TAG_POS_U8,
    TAG_POS_U16,
    TAG_POS_U32,
    TAG_RECORD,
    TAG_STRING,
    TAG_TRUE,
    TAG_UNDEFINED,
)
from ..exceptions import (
    CyclicValueError,
    EncodeError,
    MaxDepthExceededError,
    UnsupportedTypeError,
)
from ..models.base import CodecOptions, resolve_options
from ..models.error import ErrorValue
from ..models.typed import TypedVector
from ..models.values import UNDEFINED, BigInt
from .writer import ByteWriter

logger = structlog.wrap_logger(logging.getLogger(__name__))

Ancestry = frozenset[int]


def encode(*values: Any, options: CodecOptions | None = None) -> bytes:
    """Encode values to compact binary format.

    Each value is encoded independently and the results are concatenated.
    Record keys are written in sorted order, so two mappings with the same
    items encode identically regardless of insertion order.

    Args:
        *values: Values to encode, in order
        options: Codec options (default depth limit if None)

    Returns:
        Concatenated binary representation of all values

    Raises:
        UnsupportedTypeError: If a value (or a nested value) has no wire kind
        CyclicValueError: If a container contains itself
        MaxDepthExceededError: If containers nest deeper than options.max_depth
        EncodeError: If a string cannot be encoded

    Examples:
        ```python
        from xjcodec import decode, encode

        data = encode(15, 0, None)
        assert data == b"\\xff\\xf0\\x00"

        data = encode({"b": 1, "a": [1.5, "x"]})
        assert list(decode(data)[0]) == ["a", "b"]
        ```
    """
    opts = resolve_options(options)
    writer = ByteWriter()
    encoder = _Encoder(writer, opts.max_depth)

    for value in values:
        try:
            encoder.encode_value(value, frozenset(), 0)
        except RecursionError as err:
            raise MaxDepthExceededError(opts.max_depth) from err

    return writer.to_bytes()


def _utf16_sort_key(key: str) -> bytes:
    """Sort key matching UTF-16 code unit order."""
    return key.encode("utf-16-be", "surrogatepass")


class _Encoder:
    """Recursive per-value encoder writing into a ByteWriter.

    ``ancestry`` holds the ids of the containers on the path from the
    top-level value to the current node. It is never shared between siblings,
    so the same object may appear in several places as long as it is not its
    own ancestor.
    """

    def __init__(self, writer: ByteWriter, max_depth: int) -> None:
        self._writer = writer
        self._max_depth = max_depth

    def encode_value(self, value: Any, ancestry: Ancestry, depth: int) -> None:
        """Encode a single value.

        Args:
            value: Value to encode
            ancestry: Ids of the containers enclosing ``value``
            depth: Number of containers enclosing ``value``

        Raises:
            EncodeError: If the value or a nested value cannot be encoded
        """
        writer = self._writer

        if value is None:
            writer.write_u8(TAG_NULL)
            return

        if value is UNDEFINED:
            writer.write_u8(TAG_UNDEFINED)
            return

        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            writer.write_u8(TAG_TRUE if value else TAG_FALSE)
            return

        if isinstance(value, BigInt):
            self._encode_bigint(value)
            return

        if isinstance(value, int):
            if abs(value) > MAX_SAFE_INTEGER:
                self._encode_bigint(value)
            else:
                self._encode_integral(abs(value), value < 0)
            return

        if isinstance(value, float):
            self._encode_float(value)
            return

        if isinstance(value, str):
            self._encode_string(value)
            return

        if isinstance(value, (bytes, bytearray, memoryview)):
            self._encode_buffer(value)
            return

        if isinstance(value, TypedVector):
            self._encode_vector(value)
            return

        if isinstance(value, array.array):
            try:
                vector = TypedVector.from_array(value)
            except ValueError as err:
                raise UnsupportedTypeError(str(err)) from err
            self._encode_vector(vector)
            return

        if isinstance(value, (list, tuple)):
            self._encode_array(value, ancestry, depth)
            return

        if isinstance(value, ErrorValue):
            self._encode_error(value, value, ancestry, depth)
            return

        if isinstance(value, BaseException):
            self._encode_error(value, ErrorValue.from_exception(value), ancestry, depth)
            return

        if isinstance(value, Mapping):
            self._encode_record(value, value, ancestry, depth)
            return

        if isinstance(value, BaseModel):
            fields = {name: getattr(value, name) for name in type(value).model_fields}
            self._encode_record(value, fields, ancestry, depth)
            return

        raise UnsupportedTypeError(f"Cannot encode value of type {type(value).__name__}")

    def _enter(self, container: Any, ancestry: Ancestry, depth: int) -> tuple[Ancestry, int]:
        """Check a container against its ancestry and the depth limit.

        Returns:
            Ancestry and depth for the container's children
        """
        if id(container) in ancestry:
            raise CyclicValueError(
                f"{type(container).__name__} at depth {depth} is its own ancestor"
            )
        depth += 1
        if depth > self._max_depth:
            raise MaxDepthExceededError(self._max_depth)
        return ancestry | {id(container)}, depth

    def _encode_integral(self, magnitude: int, negative: bool) -> None:
        """Encode an integer-valued number given as sign and magnitude.

        ``magnitude`` must not exceed MAX_SAFE_INTEGER. Magnitudes wider than
        32 bits fall back to a double, which holds them exactly.
        """
        writer = self._writer

        if not negative and magnitude <= SMALL_MAX:
            writer.write_u8(SMALLINT_BASE | magnitude)
        elif magnitude <= MAX_U8:
            writer.write_u8(TAG_NEG_U8 if negative else TAG_POS_U8)
            writer.write_u8(magnitude)
        elif magnitude <= MAX_U16:
            writer.write_u8(TAG_NEG_U16 if negative else TAG_POS_U16)
            writer.write_u16_le(magnitude)
        elif magnitude <= MAX_U32:
            writer.write_u8(TAG_NEG_U32 if negative else TAG_POS_U32)
            writer.write_u32_le(magnitude)
        else:
            writer.write_u8(TAG_FLOAT64)
            writer.write_f64_le(float(-magnitude if negative else magnitude))

    def _encode_count(self, count: int) -> None:
        self._encode_integral(count, False)

    def _encode_float(self, value: float) -> None:
        # is_integer() is False for NaN and the infinities
        if value.is_integer() and abs(value) <= MAX_SAFE_INTEGER:
            # copysign keeps -0.0 negative so it survives the round trip
            self._encode_integral(int(abs(value)), math.copysign(1.0, value) < 0)
            return

        self._writer.write_u8(TAG_FLOAT64)
        self._writer.write_f64_le(value)

    def _encode_bigint(self, value: int) -> None:
        negative = value < 0
        magnitude = -int(value) if negative else int(value)
        # Minimal big-endian magnitude; zero has no bytes
        raw = magnitude.to_bytes((magnitude.bit_length() + 7) // 8, "big")

        self._writer.write_u8(TAG_BIGINT_NEG if negative else TAG_BIGINT_POS)
        self._encode_count(len(raw))
        self._writer.write_bytes(raw)

    def _encode_string(self, value: str) -> None:
        try:
            raw = value.encode("utf-8")
        except UnicodeEncodeError as err:
            raise EncodeError(f"String is not valid Unicode text: {err}") from err

        size = len(raw)
        if size <= SMALL_MAX:
            self._writer.write_u8(SMALLSTR_BASE | size)
        else:
            if size > MAX_STRING_BYTES:
                raise EncodeError(
                    f"String of {size} UTF-8 bytes exceeds the maximum of {MAX_STRING_BYTES}"
                )
            self._writer.write_u8(TAG_STRING)
            self._encode_count(size)
        self._writer.write_bytes(raw)

    def _encode_buffer(self, value: bytes | bytearray | memoryview) -> None:
        data = value.tobytes() if isinstance(value, memoryview) else value
        self._writer.write_u8(TAG_BUFFER)
        self._encode_count(len(data))
        self._writer.write_bytes(data)

    def _encode_vector(self, vector: TypedVector) -> None:
        self._writer.write_u8(vector.kind.tag)
        self._encode_count(len(vector))
        self._writer.write_bytes(vector.data)

    def _encode_array(self, value: list[Any] | tuple[Any, ...], ancestry: Ancestry, depth: int) -> None:
        child_ancestry, child_depth = self._enter(value, ancestry, depth)

        self._writer.write_u8(TAG_ARRAY)
        self._encode_count(len(value))
        for item in value:
            self.encode_value(item, child_ancestry, child_depth)

    def _encode_record(
        self, container: Any, items: Mapping[Any, Any], ancestry: Ancestry, depth: int
    ) -> None:
        child_ancestry, child_depth = self._enter(container, ancestry, depth)

        keys = list(items.keys())
        for key in keys:
            if not isinstance(key, str):
                raise UnsupportedTypeError(
                    f"Record keys must be str, got {type(key).__name__} key {key!r}"
                )
        keys.sort(key=_utf16_sort_key)

        self._writer.write_u8(TAG_RECORD)
        self._encode_count(len(keys))
        for key in keys:
            self._encode_string(key)
            self.encode_value(items[key], child_ancestry, child_depth)

    def _encode_error(
        self, container: Any, error: ErrorValue, ancestry: Ancestry, depth: int
    ) -> None:
        child_ancestry, child_depth = self._enter(container, ancestry, depth)

        self._writer.write_u8(TAG_ERROR)
        for text in (error.name, error.message, error.stack):
            self._encode_string(text)

        if not error.has_cause:
            self._writer.write_u8(CAUSE_ABSENT)
            return

        # A cause that fails to encode is dropped, not propagated
        mark = self._writer.tell()
        self._writer.write_u8(CAUSE_PRESENT)
        try:
            self.encode_value(error.cause, child_ancestry, child_depth)
        except EncodeError as err:
            self._writer.truncate(mark)
            self._writer.write_u8(CAUSE_ABSENT)
            logger.debug(
                "error cause dropped",
                error_name=error.name,
                cause_type=type(error.cause).__name__,
                reason=str(err),
            )
