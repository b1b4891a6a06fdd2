"""Onion-model middleware composition — synchronous, single-threaded.

Public surface::

    from middleware import (
        compose,
        ComposedMiddleware,
        ComposeConfig,
        MiddlewareSystem,
        Context,
        ContextLike,
        ElapsedTimeMiddleware,
        collaborate,
        STOP,
        InvalidMiddlewareError,
    )
"""

from .collaborate import Collaboration, collaborate
from .compose import ComposedMiddleware, compose
from .config import ComposeConfig
from .context import Context, ContextLike
from .elapsed import ElapsedTime, ElapsedTimeMiddleware
from .errors import InvalidMiddlewareError, MiddlewareError
from .protocol import STOP, Middleware, MiddlewareProtocol
from .system import MiddlewareSystem
from .units import Frame, UnitKind, classify, is_unit

__all__ = [
    # Composition
    "compose",
    "ComposedMiddleware",
    "ComposeConfig",
    "STOP",
    # Units
    "Middleware",
    "MiddlewareProtocol",
    "UnitKind",
    "Frame",
    "classify",
    "is_unit",
    # Collaborators
    "MiddlewareSystem",
    "Context",
    "ContextLike",
    "ElapsedTime",
    "ElapsedTimeMiddleware",
    "collaborate",
    "Collaboration",
    # Errors
    "MiddlewareError",
    "InvalidMiddlewareError",
]
