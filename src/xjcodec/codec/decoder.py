"""Binary decoder for xjcodec values.

This module provides decode() and iter_decode(), which turn the output of
encode() back into Python values. Decoding reads one tag byte per value and
dispatches on it; containers recurse.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Iterator, Optional, Union

import structlog

from ..constants import (
    CAUSE_ABSENT,
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
from ..exceptions import DecodeError, MalformedTagError, MaxDepthExceededError
from ..models.base import CodecOptions, resolve_options
from ..models.error import ErrorValue
from ..models.typed import ElementKind, TypedVector
from ..models.values import UNDEFINED, BigInt
from .reader import Buffer, CursorReader

logger = structlog.wrap_logger(logging.getLogger(__name__))

_CONSTANTS: dict[int, Any] = {
    TAG_NULL: None,
    TAG_UNDEFINED: UNDEFINED,
    TAG_FALSE: False,
    TAG_TRUE: True,
}

# tag -> (magnitude width in bytes, negative)
_INTEGER_TAGS: dict[int, tuple[int, bool]] = {
    TAG_POS_U8: (1, False),
    TAG_NEG_U8: (1, True),
    TAG_POS_U16: (2, False),
    TAG_NEG_U16: (2, True),
    TAG_POS_U32: (4, False),
    TAG_NEG_U32: (4, True),
}


def iter_decode(
    data: Union[Buffer, str], *, options: Optional[CodecOptions] = None
) -> Iterator[Any]:
    """Lazily decode the top-level values in ``data``.

    Values are decoded one at a time as the iterator is advanced, so bytes
    after the last value consumed are never read.

    Args:
        data: Encoded bytes (any buffer-protocol object, including a
            memoryview into a larger buffer), or a str to be UTF-8 encoded first
        options: Codec options (default depth limit if None)

    Yields:
        Decoded values in stream order

    Raises:
        DecodeError: If the data is truncated or malformed
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    opts = resolve_options(options)
    decoder = _Decoder(CursorReader(data), opts.max_depth)

    while decoder.reader.has_remaining():
        offset = decoder.reader.offset
        try:
            value = decoder.decode_value(0)
        except RecursionError as err:
            raise MaxDepthExceededError(opts.max_depth, offset=offset) from err
        yield value


def decode(
    data: Union[Buffer, str], limit: Optional[int] = None, *, options: Optional[CodecOptions] = None
) -> list[Any]:
    """Decode up to ``limit`` top-level values from ``data``.

    Decoding stops when the input is exhausted or ``limit`` values have been
    produced, whichever comes first. Trailing bytes past the limit are left
    unread and need not be valid.

    Args:
        data: Encoded bytes, or a str to be UTF-8 encoded first
        limit: Maximum number of values to decode (None for all)
        options: Codec options (default depth limit if None)

    Returns:
        List of decoded values

    Raises:
        ValueError: If limit is negative
        TruncatedInputError: If the data ends inside a value
        MalformedTagError: If an unknown tag byte is found
        MaxDepthExceededError: If containers nest deeper than options.max_depth
        DecodeError: If a payload is invalid (bad UTF-8, bad length field)

    Examples:
        ```python
        from xjcodec import decode, encode

        data = encode(4, 100, ["str"])
        assert decode(data) == [4, 100, ["str"]]
        assert decode(data, 2) == [4, 100]

        # Decode a value embedded in a larger buffer
        framed = bytes(5) + data
        assert decode(memoryview(framed)[5:], 1) == [4]
        ```
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    return list(itertools.islice(iter_decode(data, options=options), limit))


class _Decoder:
    """Recursive per-value decoder reading from a CursorReader."""

    def __init__(self, reader: CursorReader, max_depth: int) -> None:
        self.reader = reader
        self._max_depth = max_depth

    def decode_value(self, depth: int) -> Any:
        """Decode one value at the reader's current position.

        Args:
            depth: Number of containers enclosing the value

        Returns:
            Decoded value

        Raises:
            DecodeError: If data is invalid
        """
        reader = self.reader
        offset = reader.offset
        tag = reader.read_u8()

        # Packed ranges first: 0xF0..0xFF small integers, 0xE0..0xEF short strings
        if tag >= SMALLINT_BASE:
            return tag - SMALLINT_BASE
        if tag >= SMALLSTR_BASE:
            return self._read_text(tag - SMALLSTR_BASE)

        if tag in _CONSTANTS:
            return _CONSTANTS[tag]

        if tag in _INTEGER_TAGS:
            width, negative = _INTEGER_TAGS[tag]
            magnitude = self._read_uint(width)
            if not negative:
                return magnitude
            # A negative tag with zero magnitude is -0.0
            return -magnitude if magnitude else -0.0

        if tag == TAG_FLOAT64:
            return reader.read_f64_le()

        if tag in (TAG_BIGINT_POS, TAG_BIGINT_NEG):
            magnitude = int.from_bytes(reader.read_length_prefixed_bytes(), "big")
            return BigInt(-magnitude if tag == TAG_BIGINT_NEG else magnitude)

        if tag == TAG_STRING:
            return self._read_text(reader.read_count())

        if tag == TAG_BUFFER:
            return bytes(reader.read_length_prefixed_bytes())

        kind = ElementKind.from_tag(tag)
        if kind is not None:
            return TypedVector(kind, bytes(reader.read_length_prefixed_bytes(kind.width)))

        if tag == TAG_ARRAY:
            return self._decode_array(self._descend(depth, offset))

        if tag == TAG_RECORD:
            return self._decode_record(self._descend(depth, offset))

        if tag == TAG_ERROR:
            return self._decode_error(self._descend(depth, offset))

        raise MalformedTagError(tag, offset)

    def _descend(self, depth: int, offset: int) -> int:
        depth += 1
        if depth > self._max_depth:
            raise MaxDepthExceededError(self._max_depth, offset=offset)
        return depth

    def _read_uint(self, width: int) -> int:
        if width == 1:
            return self.reader.read_u8()
        if width == 2:
            return self.reader.read_u16_le()
        return self.reader.read_u32_le()

    def _read_text(self, size: int) -> str:
        offset = self.reader.offset
        raw = self.reader.read_bytes(size)
        try:
            return str(raw, "utf-8")
        except UnicodeDecodeError as err:
            raise DecodeError(f"Invalid UTF-8 in string at offset {offset}: {err}", offset=offset) from err

    def _decode_string(self) -> str:
        """Decode a value that must be a string (record keys, error fields)."""
        offset = self.reader.offset
        tag = self.reader.read_u8()
        if SMALLSTR_BASE <= tag <= SMALLSTR_BASE + SMALL_MAX:
            return self._read_text(tag - SMALLSTR_BASE)
        if tag == TAG_STRING:
            return self._read_text(self.reader.read_count())
        raise MalformedTagError(tag, offset, expected="string")

    def _decode_array(self, depth: int) -> list[Any]:
        count = self.reader.read_count()
        items: list[Any] = []
        for _ in range(count):
            items.append(self.decode_value(depth))
        return items

    def _decode_record(self, depth: int) -> dict[str, Any]:
        count = self.reader.read_count()
        result: dict[str, Any] = {}
        for _ in range(count):
            key = self._decode_string()
            if key in result:
                logger.debug("duplicate record key", key=key, offset=self.reader.offset)
            # Last write wins
            result[key] = self.decode_value(depth)
        return result

    def _decode_error(self, depth: int) -> ErrorValue:
        name = self._decode_string()
        message = self._decode_string()
        stack = self._decode_string()

        has_cause = self.reader.read_u8() != CAUSE_ABSENT
        cause = self.decode_value(depth) if has_cause else UNDEFINED

        return ErrorValue(name=name, message=message, stack=stack, cause=cause)
