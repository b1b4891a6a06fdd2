"""Configuration for composed middleware dispatch."""

from dataclasses import dataclass
from typing import Tuple, Type


@dataclass(frozen=True)
class ComposeConfig:
    """Configuration for :func:`~middleware.compose.compose`.

    Attributes:
        capture: Exception types captured as the pending fault and injected
            into suspended middlewares during unwind (default: ``(Exception,)``).
            Anything outside these types is not injected: remaining frames are
            closed (``finally`` blocks run) and the exception propagates.
        strict: Raise :class:`~middleware.errors.InvalidMiddlewareError` for
            unrecognized pipeline members (default: True). When False they
            are skipped with a warning.
    """

    capture: Tuple[Type[BaseException], ...] = (Exception,)
    strict: bool = True


DEFAULT_CONFIG = ComposeConfig()
