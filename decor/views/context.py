"""Per-view context: override values that views answer as operations."""

from collections.abc import Mapping
from typing import Any, Callable, Iterator, Optional


class Deferred:
    """A zero-argument producer whose result is used as a context value.

    The producer runs every time the entry is read; nothing is cached.
    """

    __slots__ = ("producer",)

    def __init__(self, producer: Callable[[], Any]):
        if not callable(producer):
            raise TypeError(f"Deferred producer must be callable, got {type(producer).__name__}")
        self.producer = producer

    def __call__(self) -> Any:
        return self.producer()

    def __repr__(self) -> str:
        return f"Deferred({self.producer!r})"


class Context(Mapping):
    """Ordered, read-only mapping of override name -> value or Deferred.

    Reading an entry materializes Deferred producers; ``raw`` returns the
    stored object untouched.
    """

    def __init__(self, entries: Optional[Mapping[str, Any]] = None, /, **overrides: Any):
        data = dict(entries or {})
        data.update(overrides)
        self._data = data

    def __getitem__(self, name: str) -> Any:
        value = self._data[name]
        if isinstance(value, Deferred):
            return value()
        return value

    def raw(self, name: str) -> Any:
        return self._data[name]

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Context({self._data!r})"
