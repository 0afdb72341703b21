"""Exception hierarchy for xjcodec.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from XJCodecError for easy catching of any codec error.
"""

from __future__ import annotations

from typing import Optional


class XJCodecError(Exception):
    """Base exception for all xjcodec errors."""

    pass


class EncodeError(XJCodecError):
    """Raised when encoding a value fails.

    Examples:
        - String longer than 2**31-1 UTF-8 bytes
        - String holding lone surrogates
        - Record key that is not a string
    """

    pass


class UnsupportedTypeError(EncodeError):
    """Raised when the encoder is given a value outside the supported kinds.

    Examples:
        - Functions, sets, complex numbers
        - Arbitrary objects that are neither mappings nor pydantic models
        - ``array.array`` with a typecode that has no element kind
    """

    pass


class CyclicValueError(EncodeError):
    """Raised when a container is reached again through its own descendants."""

    pass


class DecodeError(XJCodecError):
    """Raised when decoding binary data fails.

    Examples:
        - Truncated data (insufficient bytes)
        - Unknown tag byte
        - Invalid UTF-8 in a string payload
        - Length field that is not a non-negative integer

    Attributes:
        offset: Byte offset in the decoded region where the failure was
            detected, or None if not known
    """

    def __init__(self, message: str, *, offset: Optional[int] = None) -> None:
        super().__init__(message)
        self.offset = offset


class TruncatedInputError(DecodeError):
    """Raised when a read would run past the end of the input.

    Attributes:
        offset: Read position when the read was attempted
        needed: Number of bytes the read asked for
        available: Number of bytes left in the region
    """

    def __init__(self, offset: int, needed: int, available: int) -> None:
        super().__init__(
            f"Truncated input at offset {offset}: need {needed} bytes, have {available}",
            offset=offset,
        )
        self.needed = needed
        self.available = available


class MalformedTagError(DecodeError):
    """Raised when a tag byte is not valid at the position it was read.

    Attributes:
        tag: The offending tag byte
    """

    def __init__(self, tag: int, offset: int, expected: str = "") -> None:
        message = f"Unexpected tag 0x{tag:02x} at offset {offset}"
        if expected:
            message = f"{message} (expected {expected})"
        super().__init__(message, offset=offset)
        self.tag = tag


class MaxDepthExceededError(EncodeError, DecodeError):
    """Raised when containers nest deeper than the configured maximum depth."""

    def __init__(self, max_depth: int, offset: Optional[int] = None) -> None:
        DecodeError.__init__(
            self, f"Nesting deeper than max_depth={max_depth}", offset=offset
        )
        self.max_depth = max_depth
