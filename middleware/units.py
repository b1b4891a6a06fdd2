"""Classification of pipeline members and the suspended-frame state object."""

from __future__ import annotations

import inspect
from collections.abc import Sequence
from enum import Enum
from typing import Any, Generator, Optional

from .errors import InvalidMiddlewareError
from .protocol import MiddlewareProtocol


class UnitKind(Enum):
    """The three shapes a pipeline member can take."""

    PLAIN = "plain"
    SUSPENDING = "suspending"
    SEQUENCE = "sequence"


def _is_sequence(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, Sequence)


def classify(value: Any) -> UnitKind:
    """Return the :class:`UnitKind` of *value*.

    Generators are checked before callables and callables before sequences,
    so a callable object that also happens to be a sequence runs as a plain
    middleware.

    Raises:
        InvalidMiddlewareError: If *value* is none of the three kinds.
    """
    if inspect.isgenerator(value):
        return UnitKind.SUSPENDING
    if isinstance(value, MiddlewareProtocol):
        return UnitKind.PLAIN
    if _is_sequence(value):
        return UnitKind.SEQUENCE
    raise InvalidMiddlewareError(value)


def is_unit(value: Any) -> bool:
    """Return True when *value* can be dispatched as a middleware."""
    try:
        classify(value)
    except InvalidMiddlewareError:
        return False
    return True


def is_substitute(value: Any) -> bool:
    """Return True when a middleware's return value should replace it.

    Empty sequences count as "nothing returned".
    """
    if not is_unit(value):
        return False
    if _is_sequence(value) and not callable(value):
        return len(value) > 0
    return True


class Frame:
    """Two-phase middleware backed by a generator.

    The code before the generator's first ``yield`` is its *before* section;
    everything after is its *after* section. A frame is advanced once during
    forward dispatch and then resumed during unwind until it finishes.

    Attributes:
        generator: The wrapped generator.
        yielded: Value produced at the most recent suspension point.
        result: The generator's return value, set once it has finished.
    """

    __slots__ = ("generator", "yielded", "result")

    def __init__(self, generator: Generator[Any, Any, Any]) -> None:
        self.generator = generator
        self.yielded: Any = None
        self.result: Any = None

    @property
    def suspended(self) -> bool:
        """Whether the generator is paused at a ``yield`` with work left."""
        return inspect.getgeneratorstate(self.generator) == inspect.GEN_SUSPENDED

    @property
    def done(self) -> bool:
        return inspect.getgeneratorstate(self.generator) == inspect.GEN_CLOSED

    def start(self) -> bool:
        """Run the before section unless the generator was already started.

        A generator handed over mid-suspension stays where it is; one that
        has already finished contributes no frame. Python does not keep a
        finished generator's return value, so :attr:`result` stays ``None``
        for it and a ``return False`` made before it joined the pipeline
        does not stop dispatch.
        """
        if inspect.getgeneratorstate(self.generator) == inspect.GEN_CREATED:
            return self.advance()
        return self.suspended

    def advance(self) -> bool:
        """Resume to the next suspension point or to completion.

        Returns:
            True while the generator is still suspended.
        """
        try:
            self.yielded = next(self.generator)
        except StopIteration as stop:
            self._finish(stop.value)
        return self.suspended

    def throw(self, exc: BaseException) -> bool:
        """Raise *exc* at the suspension point.

        Returns normally when the generator absorbs the exception; otherwise
        the exception it raises (the same one or another) propagates.
        """
        try:
            self.yielded = self.generator.throw(exc)
        except StopIteration as stop:
            self._finish(stop.value)
        return self.suspended

    def close(self) -> None:
        """Raise ``GeneratorExit`` at the suspension point and mark the frame done."""
        self.generator.close()
        self._finish(None)

    def _finish(self, value: Optional[Any]) -> None:
        self.yielded = None
        self.result = value

    def __repr__(self) -> str:
        name = getattr(self.generator, "__qualname__", type(self.generator).__name__)
        state = inspect.getgeneratorstate(self.generator)
        return f"Frame({name}, {state})"
