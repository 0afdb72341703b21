"""Encoded size helpers.

This module provides functions to measure how many bytes values take once
encoded.
"""

from __future__ import annotations

from typing import Any, Optional

from ..codec.encoder import encode
from ..models.base import CodecOptions


def encoded_size(*values: Any, options: Optional[CodecOptions] = None) -> int:
    """Calculate the encoded size of values in bytes.

    Args:
        *values: Values to measure, as they would be passed to encode()
        options: Codec options (default depth limit if None)

    Returns:
        Size in bytes of ``encode(*values)``

    Raises:
        EncodeError: If a value cannot be encoded

    Example:
        >>> encoded_size(15, 0, None)
        3
        >>> encoded_size("hello")
        6
    """
    return len(encode(*values, options=options))


def encoded_sizes(*values: Any, options: Optional[CodecOptions] = None) -> list[int]:
    """Get the encoded size in bytes of each top-level value.

    Args:
        *values: Values to measure

    Returns:
        One size per value, in argument order

    Example:
        >>> encoded_sizes(7, 300, "abc")
        [1, 3, 4]
    """
    return [len(encode(value, options=options)) for value in values]
