"""Tagged binary codec for xjcodec.

This module provides encoding and decoding of supported values to and from a
compact, self-delimiting binary format.
"""

from __future__ import annotations

from .decoder import decode, iter_decode
from .encoder import encode
from .reader import CursorReader
from .writer import ByteWriter

__all__ = [
    "encode",
    "decode",
    "iter_decode",
    "CursorReader",
    "ByteWriter",
]
