"""Middleware error types."""

from __future__ import annotations

from typing import Any


class MiddlewareError(Exception):
    """Base class for errors raised by the middleware engine itself.

    Faults raised by a middleware's own body are never wrapped in this type;
    they reach the caller unchanged.
    """

    pass


class InvalidMiddlewareError(MiddlewareError, TypeError):
    """Raised when a value is neither callable, a generator, nor a sequence."""

    default_message = (
        "The middleware MUST be a callable, a generator or a sequence of middlewares"
    )

    def __init__(self, value: Any = None, message: str | None = None):
        self.value = value
        if message is None:
            message = self.default_message
            if value is not None:
                message = f"{message}, got {type(value).__name__}: {value!r}"
        super().__init__(message)
