"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from xjcodec import UNDEFINED, BigInt, ElementKind, ErrorValue, TypedVector


@pytest.fixture
def sample_record() -> dict[str, Any]:
    """Record with keys in non-sorted insertion order and mixed value kinds."""
    return {
        "zeta": [1, 2.5, "three"],
        "alpha": None,
        "mid": {"inner": UNDEFINED, "flag": True},
        "big": BigInt(-(2**70)),
        "blob": b"\x00\x01\xfe\xff",
        "vec": TypedVector.from_values(ElementKind.INT32, [1, -1, 2**31 - 1]),
    }


@pytest.fixture
def sample_error() -> ErrorValue:
    """Error whose cause is itself an error."""
    root = ErrorValue(name="OSError", message="disk full", stack="OSError: disk full\n  at write")
    return ErrorValue(name="SaveError", message="could not save", stack="SaveError", cause=root)
