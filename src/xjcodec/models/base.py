"""Codec configuration.

This module provides the CodecOptions model accepted by the encode/decode
entry points.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..constants import DEFAULT_MAX_DEPTH, MAX_DEPTH_CEILING


class CodecOptions(BaseModel):
    """Options shared by encoding and decoding.

    Example:
        >>> from xjcodec import CodecOptions, encode
        >>> data = encode([[1, 2], [3]], options=CodecOptions(max_depth=8))

    Attributes:
        max_depth: Maximum container nesting (arrays, records, error causes).
            A top-level container sits at depth 1.
    """

    model_config = ConfigDict(
        # Validate on assignment
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, le=MAX_DEPTH_CEILING)


DEFAULT_OPTIONS = CodecOptions()


def resolve_options(options: CodecOptions | None) -> CodecOptions:
    """Return ``options``, or the shared defaults when None."""
    return DEFAULT_OPTIONS if options is None else options
