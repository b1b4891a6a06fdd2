"""Mutable context object shared by every middleware of a single run."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, Dict, Hashable, Iterator, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class ContextLike(Protocol):
    """Protocol for context objects passed through a middleware pipeline.

    :class:`Context` satisfies this structurally. Middlewares and the bundled
    helpers depend on the protocol, not the implementation.
    """

    def get_data(self, name: Hashable) -> Any: ...

    def set_data(self, name: Hashable, value: Any) -> None: ...

    def set_datas(self, datas: Mapping[Hashable, Any]) -> None: ...


class Context(MutableMapping):
    """Key/value store middlewares use to pass data to one another.

    Item access behaves like a ``dict`` (missing keys raise ``KeyError``).
    :meth:`get_data` and attribute access return ``None`` for missing names::

        ctx = Context(user="alice")
        ctx["user"]            # "alice"
        ctx.user               # "alice"
        ctx.missing            # None
        ctx.request_id = 42    # same as ctx["request_id"] = 42

    Names starting with an underscore are never routed to the store.
    """

    def __init__(self, data: Optional[Mapping[Hashable, Any]] = None, **kwargs: Any):
        object.__setattr__(self, "_data", {})
        if data:
            self._data.update(data)
        self._data.update(kwargs)

    def get_data(self, name: Hashable) -> Any:
        return self._data.get(name)

    def set_data(self, name: Hashable, value: Any) -> None:
        self._data[name] = value

    def set_datas(self, datas: Mapping[Hashable, Any]) -> None:
        """Merge *datas* into the store; keys not in *datas* are kept."""
        self._data.update(datas)

    def to_dict(self) -> Dict[Hashable, Any]:
        return dict(self._data)

    # MutableMapping
    def __getitem__(self, key: Hashable) -> Any:
        return self._data[key]

    def __setitem__(self, key: Hashable, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: Hashable) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    # Attribute access
    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._data.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            self._data[name] = value

    def __delattr__(self, name: str) -> None:
        if name.startswith("_"):
            object.__delattr__(self, name)
            return
        try:
            del self._data[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        return f"Context({self._data!r})"
