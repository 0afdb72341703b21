"""Structured error values.

An ``ErrorValue`` is the portable form of an exception: its name, message and
stack text, plus an optional cause of any supported kind.
"""

from __future__ import annotations

import traceback
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from .values import UNDEFINED


class RemoteError(Exception):
    """Raisable stand-in for a decoded ``ErrorValue``.

    Attributes:
        name: Name of the original error class
        stack: Stack text captured where the original error was raised
        cause: Cause value as decoded (``UNDEFINED`` when there was none)
    """

    def __init__(self, name: str, message: str, stack: str = "", cause: Any = UNDEFINED) -> None:
        super().__init__(message)
        self.name = name
        self.message = message
        self.stack = stack
        self.cause = cause

    def __str__(self) -> str:
        return f"{self.name}: {self.message}" if self.message else self.name


class ErrorValue(BaseModel):
    """Error triple (name, message, stack) with an optional cause.

    ``cause`` is ``UNDEFINED`` when the error has no cause. Any other value,
    including ``None``, is a cause and is encoded recursively. A cause that
    cannot be encoded is dropped rather than failing the whole error.

    Example:
        >>> root = ErrorValue(name="OSError", message="disk full")
        >>> err = ErrorValue(name="SaveError", message="save failed", cause=root)
        >>> err.has_cause
        True
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra="forbid",
    )

    name: str = "Error"
    message: str = ""
    stack: str = ""
    cause: Any = UNDEFINED

    @property
    def has_cause(self) -> bool:
        """True if a cause is attached."""
        return self.cause is not UNDEFINED

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorValue:
        """Capture an exception as an error value.

        The stack text is the formatted traceback. An explicit ``__cause__``
        (``raise ... from ...``) becomes the cause; it is kept as the exception
        object and converted when encoded.

        Args:
            exc: Exception to capture

        Returns:
            ErrorValue describing ``exc``
        """
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        cause: Any = exc.__cause__ if exc.__cause__ is not None else UNDEFINED
        return cls(name=type(exc).__name__, message=str(exc), stack=stack, cause=cause)

    def to_exception(self) -> RemoteError:
        """Build a raisable exception, chaining error-valued causes via ``__cause__``."""
        error = RemoteError(self.name, self.message, self.stack, self.cause)
        cause_error: Optional[BaseException] = None
        if isinstance(self.cause, ErrorValue):
            cause_error = self.cause.to_exception()
        elif isinstance(self.cause, BaseException):
            cause_error = self.cause
        error.__cause__ = cause_error
        return error
