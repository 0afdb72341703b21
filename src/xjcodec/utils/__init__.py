"""Utility functions for xjcodec.

This module provides size calculation helpers.
"""

from __future__ import annotations

from .sizing import encoded_size, encoded_sizes

__all__ = [
    "encoded_size",
    "encoded_sizes",
]
