"""MiddlewareSystem — register middlewares around a ``handle`` method."""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Hashable, List, Optional, Set, Tuple

from .compose import compose
from .config import ComposeConfig
from .context import ContextLike
from .protocol import Middleware
from .units import classify

logger = logging.getLogger(__name__)


def _registration_key(middleware: Middleware) -> Hashable:
    """Identity used to spot repeated registrations.

    Every ``obj.method`` access builds a new bound method, so methods are
    keyed on their owner and function instead of the bound-method object.
    """
    if inspect.ismethod(middleware):
        return (id(middleware.__self__), middleware.__func__)
    if inspect.isbuiltin(middleware) and not inspect.ismodule(middleware.__self__):
        return (id(middleware.__self__), middleware.__name__)
    return id(middleware)


class MiddlewareSystem(ABC):
    """Abstract base class for a handler wrapped in two middleware lists.

    Outer middlewares run before :meth:`handle`, inner middlewares after it;
    generator middlewares in the outer list wrap ``handle`` and everything
    registered with :meth:`after`. A run composes::

        [*outer, self.handle, *inner]

    Registering the same object (or the same method of the same object) twice
    in one list, or registering the system with itself, is ignored. A system
    is itself a callable middleware and can be nested in another pipeline or
    system.

    Args:
        config: Dispatch options passed to :func:`~middleware.compose.compose`.
    """

    def __init__(self, *, config: Optional[ComposeConfig] = None) -> None:
        self.config = config
        self._before: List[Middleware] = []
        self._after: List[Middleware] = []
        self._before_keys: Set[Hashable] = set()
        self._after_keys: Set[Hashable] = set()

    @abstractmethod
    def handle(self, ctx: ContextLike) -> Any:
        """The system's own logic; may return ``False`` or be a generator."""
        ...

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    @property
    def before_middlewares(self) -> Tuple[Middleware, ...]:
        return tuple(self._before)

    @property
    def after_middlewares(self) -> Tuple[Middleware, ...]:
        return tuple(self._after)

    def use(self, middleware: Middleware) -> "MiddlewareSystem":
        """Append to the outer list; earlier registrations run first."""
        if self._accept(middleware, self._before_keys):
            self._before.append(middleware)
        return self

    def before(self, middleware: Middleware) -> "MiddlewareSystem":
        """Prepend to the outer list; later registrations run first."""
        if self._accept(middleware, self._before_keys):
            self._before.insert(0, middleware)
        return self

    def after(self, middleware: Middleware) -> "MiddlewareSystem":
        """Append to the inner list, which runs after :meth:`handle`."""
        if self._accept(middleware, self._after_keys):
            self._after.append(middleware)
        return self

    def clear_before(self) -> "MiddlewareSystem":
        self._before.clear()
        self._before_keys.clear()
        return self

    def clear_after(self) -> "MiddlewareSystem":
        self._after.clear()
        self._after_keys.clear()
        return self

    def clear(self) -> "MiddlewareSystem":
        return self.clear_before().clear_after()

    def _accept(self, middleware: Middleware, keys: Set[Hashable]) -> bool:
        classify(middleware)
        key = _registration_key(middleware)
        if middleware is self or key in keys:
            logger.debug("Ignoring repeated registration of %r", middleware)
            return False
        keys.add(key)
        return True

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self, ctx: ContextLike) -> Optional[bool]:
        """Run outer middlewares, :meth:`handle`, then inner middlewares."""
        pipeline = compose(*self._before, self.handle, *self._after, config=self.config)
        return pipeline(ctx)

    def __call__(self, ctx: ContextLike) -> Optional[bool]:
        return self.run(ctx)
