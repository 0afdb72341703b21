"""Scalar value types that have no direct Python builtin.

Python has a single ``None`` and a single ``int``, while the wire format
distinguishes null from undefined and double-precision numbers from bigints.
"""

from __future__ import annotations

import enum


class Undefined(enum.Enum):
    """The undefined absent-value, distinct from ``None`` (null).

    Use the module-level ``UNDEFINED`` singleton:

        >>> from xjcodec import UNDEFINED, decode, encode
        >>> decode(encode(UNDEFINED))[0] is UNDEFINED
        True
    """

    UNDEFINED = "undefined"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = Undefined.UNDEFINED


class BigInt(int):
    """Integer that always travels with the bigint tags.

    Plain ``int`` values inside the safe-integer range encode as numbers. Wrap a
    value in ``BigInt`` to keep it a bigint across the round trip:

        >>> from xjcodec import BigInt, decode, encode
        >>> decode(encode(BigInt(5)))[0]
        BigInt(5)

    Arithmetic on a ``BigInt`` returns plain ``int``.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"BigInt({int(self)})"
