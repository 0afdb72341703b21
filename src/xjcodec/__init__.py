"""xjcodec: Compact Tagged Binary Value Codec

A Python library for encoding structured values (numbers, bigints, strings,
byte buffers, typed numeric vectors, arrays, records and errors) into a
compact, self-delimiting byte stream and back, keeping each value's kind
across the round trip.

Key Features:
- One tag byte per value, with integers 0-15 and short strings packed inline
- Distinct null/undefined and number/bigint kinds
- Canonical record encoding (sorted keys)
- Multi-value streams with bounded decoding
- Cycle and depth guards

Quick Start:
    >>> from xjcodec import UNDEFINED, BigInt, decode, encode
    >>>
    >>> data = encode({"id": 42, "tags": ["a", "b"], "big": BigInt(2**70)}, UNDEFINED)
    >>> record, missing = decode(data)
    >>> record["big"]
    BigInt(1180591620717411303424)
    >>> missing is UNDEFINED
    True
"""

from __future__ import annotations

import logging

from .codec import decode, encode, iter_decode
from .exceptions import (
    CyclicValueError,
    DecodeError,
    EncodeError,
    MalformedTagError,
    MaxDepthExceededError,
    TruncatedInputError,
    UnsupportedTypeError,
    XJCodecError,
)
from .models import (
    UNDEFINED,
    BigInt,
    CodecOptions,
    ElementKind,
    ErrorValue,
    RemoteError,
    TypedVector,
    Undefined,
)
from .utils import encoded_size, encoded_sizes

__version__ = "0.1.0"

# Silent unless the host application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core API
    "encode",
    "decode",
    "iter_decode",
    "CodecOptions",
    # Value types
    "UNDEFINED",
    "Undefined",
    "BigInt",
    "ElementKind",
    "TypedVector",
    "ErrorValue",
    "RemoteError",
    # Exceptions
    "XJCodecError",
    "EncodeError",
    "DecodeError",
    "UnsupportedTypeError",
    "CyclicValueError",
    "TruncatedInputError",
    "MalformedTagError",
    "MaxDepthExceededError",
    # Sizing
    "encoded_size",
    "encoded_sizes",
    # Version
    "__version__",
]
