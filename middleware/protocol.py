"""Structural types shared by the dispatcher and the registration helpers."""

from __future__ import annotations

from typing import Any, Generator, Protocol, Sequence, Union, runtime_checkable

#: Reserved result meaning "do not dispatch any further middleware".
STOP = False


@runtime_checkable
class MiddlewareProtocol(Protocol):
    """Structural protocol for a callable middleware.

    A middleware receives the pipeline's invocation arguments (usually a
    single context object) and returns one of:

    * ``None`` or ``True``: continue with the next middleware.
    * ``False`` (:data:`STOP`): stop dispatching further middlewares.
    * Another middleware (generator, callable, or non-empty sequence): it
      replaces the current middleware and runs immediately.

    Generator functions are the usual way to write onion-style middlewares::

        def timing(ctx):
            started = time.time()
            yield                       # everything after this middleware runs here
            ctx["elapsed"] = time.time() - started
    """

    def __call__(self, *args: Any, **kwargs: Any) -> Any: ...


#: A pipeline member: a plain callable, a started or unstarted generator, or
#: a nested sequence of members executed as a self-contained sub-pipeline.
Middleware = Union[
    MiddlewareProtocol,
    Generator[Any, Any, Any],
    Sequence["Middleware"],
]
