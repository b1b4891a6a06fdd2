"""Onion-model dispatcher — composes middlewares into a single callable.

Forward dispatch runs every middleware left to right. Generator middlewares
run their *before* section, then park as suspended frames; once forward
dispatch ends (exhausted, stopped, or failed) the unwind phase resumes the
frames most-recent-first until every one of them has finished. A frame with
more than one ``yield`` goes to the back of the queue after each resume.

Example::

    def auth(ctx):
        if not ctx.user:
            return False                # stop; nothing after this runs

    def transaction(ctx):
        ctx.tx = begin()
        try:
            yield
        except Exception:
            ctx.tx.rollback()           # absorbs the fault
        else:
            ctx.tx.commit()

    run = compose(auth, transaction, handler)
    run(ctx)                            # None, or False when stopped
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Deque, Dict, Iterable, Optional, Tuple

from .config import DEFAULT_CONFIG, ComposeConfig
from .errors import InvalidMiddlewareError
from .protocol import STOP, Middleware
from .units import Frame, UnitKind, classify, is_substitute

logger = logging.getLogger(__name__)


class ComposedMiddleware:
    """Reusable callable returned by :func:`compose`.

    Each call is an independent dispatch over :attr:`middlewares`. Generator
    *objects* placed directly in the pipeline are exhausted by the first call;
    use generator *functions* for pipelines that run more than once.
    """

    def __init__(
        self,
        middlewares: Iterable[Middleware],
        config: Optional[ComposeConfig] = None,
    ) -> None:
        self.middlewares: Tuple[Middleware, ...] = tuple(middlewares)
        self.config = config or DEFAULT_CONFIG

    def __call__(self, *args: Any, **kwargs: Any) -> Optional[bool]:
        return _Dispatch(self.config, args, kwargs).run(self.middlewares)

    def __len__(self) -> int:
        return len(self.middlewares)

    def __repr__(self) -> str:
        return f"ComposedMiddleware({len(self.middlewares)} middlewares)"


def compose(
    *middlewares: Middleware, config: Optional[ComposeConfig] = None
) -> ComposedMiddleware:
    """Compose *middlewares* into one callable.

    Args:
        *middlewares: Callables, generators, or nested sequences of either.
        config: Dispatch options; nested sequences inherit it.

    Returns:
        A callable taking the pipeline's arguments. It returns ``False`` when
        any middleware requested a stop, otherwise ``None``, and re-raises
        the last unhandled middleware exception after all frames finished.
    """
    return ComposedMiddleware(middlewares, config)


class _Dispatch:
    """State of a single invocation: suspended frames, pending fault, stop flag."""

    def __init__(
        self, config: ComposeConfig, args: Tuple[Any, ...], kwargs: Dict[str, Any]
    ) -> None:
        self.config = config
        self.args = args
        self.kwargs = kwargs
        # Right end is the most recently suspended frame.
        self.frames: Deque[Frame] = deque()
        self.fault: Optional[BaseException] = None
        self.stopped = False

    def run(self, middlewares: Iterable[Middleware]) -> Optional[bool]:
        try:
            try:
                self._forward(middlewares)
            except self.config.capture as exc:
                logger.debug("Forward dispatch failed: %r", exc)
                self.fault = exc

            self._unwind()
        except BaseException:
            self._close_remaining()
            raise

        if self.fault is not None:
            fault, self.fault = self.fault, None
            raise fault
        return STOP if self.stopped else None

    # ------------------------------------------------------------------
    # Forward phase
    # ------------------------------------------------------------------

    def _forward(self, middlewares: Iterable[Middleware]) -> None:
        for middleware in middlewares:
            if self._dispatch(middleware):
                logger.debug("Stop requested by %r", middleware)
                self.stopped = True
                return

    def _dispatch(self, middleware: Middleware) -> bool:
        """Run one pipeline member; return True when it requested a stop."""
        while True:
            try:
                kind = classify(middleware)
            except InvalidMiddlewareError:
                if self.config.strict:
                    raise
                logger.warning("Skipping unrecognized middleware %r", middleware)
                return False

            if kind is UnitKind.SEQUENCE:
                nested = _Dispatch(self.config, self.args, self.kwargs)
                return nested.run(middleware) is STOP

            if kind is UnitKind.SUSPENDING:
                frame = Frame(middleware)
                if frame.start():
                    self.frames.append(frame)
                    logger.debug("Suspended %r", frame)
                    # Only the first suspension point can stop forward dispatch.
                    return frame.yielded is STOP
                return frame.result is STOP

            returned = middleware(*self.args, **self.kwargs)
            if returned is STOP:
                return True
            if not is_substitute(returned):
                return False
            middleware = returned

    # ------------------------------------------------------------------
    # Unwind phase
    # ------------------------------------------------------------------

    def _unwind(self) -> None:
        while self.frames:
            frame = self.frames.pop()
            logger.debug("Resuming %r", frame)
            try:
                if self.fault is not None:
                    frame.throw(self.fault)
                    logger.debug("%r absorbed %r", frame, self.fault)
                    self.fault = None
                else:
                    frame.advance()
            except self.config.capture as exc:
                logger.debug("%r raised %r during unwind", frame, exc)
                self.fault = exc
                continue

            if frame.suspended:
                self.frames.appendleft(frame)
            else:
                logger.debug("Completed %r", frame)
                if frame.result is STOP:
                    self.stopped = True

    def _close_remaining(self) -> None:
        """Close frames left behind by an exception outside ``config.capture``.

        ``close()`` raises ``GeneratorExit`` at the suspension point, so
        ``finally`` blocks and context managers in after sections still run.
        """
        while self.frames:
            frame = self.frames.pop()
            logger.debug("Closing %r", frame)
            try:
                frame.close()
            except Exception as exc:
                logger.warning("%r raised %r while closing", frame, exc)
