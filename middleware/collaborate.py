"""Producer/participants pipeline.

A *starter* produces values; each value is handed through the *participants*
in order, every participant receiving what the previous one returned::

    def numbers(limit):
        yield from range(limit)

    def double(n):
        return n * 2

    def collector(out):
        def participant(_first):
            while True:
                value = yield           # receive
                out.append(value)
                yield None              # pass the value through unchanged
        return participant

    results = []
    collaborate(numbers, double, collector(results))(3)
    # results == [0, 2, 4]

Unlike :func:`~middleware.compose.compose`, no onion model is involved:
participants are independent stages applied to each produced value.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable
from typing import Any, Callable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

Participant = Union[Callable[[Any], Any], Any]


def _replaces_value(value: Any) -> bool:
    return value is not None and not isinstance(value, bool)


class Collaboration:
    """Callable returned by :func:`collaborate`."""

    def __init__(self, starter: Any, participants: Tuple[Participant, ...]) -> None:
        if not callable(starter) and not isinstance(starter, Iterable):
            raise TypeError("The starter MUST be callable or iterable")
        for participant in participants:
            if participant and not (
                callable(participant) or inspect.isgenerator(participant)
            ):
                raise TypeError(
                    f"A participant MUST be callable or a generator, got {participant!r}"
                )
        self.starter = starter
        self.participants = participants

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        source = self.starter
        if callable(source):
            source = source(*args, **kwargs)
            if not isinstance(source, Iterable):
                raise TypeError("The callable starter MUST return an iterable")

        # Replacements (callable -> generator, finished -> None) last for this call only.
        participants: List[Optional[Participant]] = list(self.participants)
        for value in source:
            current = value
            for index, participant in enumerate(participants):
                if not participant:
                    continue
                if not inspect.isgenerator(participant):
                    returned = participant(current)
                    if returned is False:
                        break
                    if not inspect.isgenerator(returned):
                        if returned is not True and returned is not None:
                            current = returned
                        continue
                    participant = participants[index] = returned

                returned, finished = self._exchange(participant, current)
                if finished:
                    logger.debug("Participant %r finished", participant)
                    participants[index] = None
                if returned is False:
                    break
                if _replaces_value(returned):
                    current = returned

    @staticmethod
    def _exchange(generator: Any, value: Any) -> Tuple[Any, bool]:
        """Send *value* to the receiving ``yield`` and collect the result.

        Leaves the generator parked at its next receiving ``yield``.
        """
        try:
            if inspect.getgeneratorstate(generator) == inspect.GEN_CREATED:
                next(generator)
            returned = generator.send(value)
        except StopIteration:
            return None, True
        try:
            next(generator)
        except StopIteration:
            return returned, True
        return returned, False


def collaborate(starter: Any, *participants: Participant) -> Collaboration:
    """Build a producer/participants pipeline.

    Args:
        starter: An iterable of values, or a callable that receives the
            invocation arguments and returns one.
        *participants: Plain callables, generator functions, or generators.
            A plain participant returning ``False`` drops the current value;
            any other non-``None``, non-``True`` return becomes the value
            seen by the next participant. A generator participant yields
            twice per value: first to receive it, then to return its result.

    Raises:
        TypeError: If the starter or a participant has the wrong type.
    """
    return Collaboration(starter, participants)
