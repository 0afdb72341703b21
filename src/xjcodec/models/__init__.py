"""Python value model for xjcodec.

This module provides the types that stand in for wire kinds with no direct
Python builtin, plus the codec options model.
"""

from __future__ import annotations

from .base import CodecOptions
from .error import ErrorValue, RemoteError
from .typed import ElementKind, TypedVector
from .values import UNDEFINED, BigInt, Undefined

__all__ = [
    "BigInt",
    "CodecOptions",
    "ElementKind",
    "ErrorValue",
    "RemoteError",
    "TypedVector",
    "UNDEFINED",
    "Undefined",
]
