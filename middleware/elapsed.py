"""ElapsedTimeMiddleware — measures how long the wrapped pipeline takes."""

from __future__ import annotations

import math
import time
from typing import Callable, Generator, Hashable, Optional

from pydantic import BaseModel, Field

from .context import ContextLike


class ElapsedTime(BaseModel):
    """Timing record stored on the context by :class:`ElapsedTimeMiddleware`."""

    begin_sec: float = Field(..., description="Clock reading before the inner chain ran")
    end_sec: Optional[float] = Field(
        default=None, description="Clock reading after the inner chain finished"
    )
    used_sec: Optional[float] = Field(default=None, description="end_sec - begin_sec")
    used_msec: Optional[int] = Field(
        default=None, description="used_sec in milliseconds, rounded up"
    )

    @property
    def finished(self) -> bool:
        return self.end_sec is not None


class ElapsedTimeMiddleware:
    """Generator middleware recording the time spent by everything after it.

    Stores an :class:`ElapsedTime` under ``key`` before suspending and replaces
    it with the complete record once resumed. The record is also written when
    the inner chain raised; the exception keeps propagating.

    Args:
        key: Context name the record is stored under (default: "elapsed_time").
        clock: Zero-argument callable returning seconds (default: ``time.time``).
    """

    def __init__(
        self,
        key: Hashable = "elapsed_time",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.key = key
        self.clock = clock

    def __call__(self, ctx: ContextLike) -> Generator[None, None, None]:
        begin = self.clock()
        ctx.set_data(self.key, ElapsedTime(begin_sec=begin))
        try:
            yield
        finally:
            end = self.clock()
            used = end - begin
            ctx.set_data(
                self.key,
                ElapsedTime(
                    begin_sec=begin,
                    end_sec=end,
                    used_sec=used,
                    used_msec=math.ceil(used * 1000),
                ),
            )

    def __repr__(self) -> str:
        return f"ElapsedTimeMiddleware(key={self.key!r})"
