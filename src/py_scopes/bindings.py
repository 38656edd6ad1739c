"""Binding handles and update results.

A lookup with ``get`` hands back a value.  Sometimes a caller needs more:
a way to *write* to the binding it just found, wherever in the chain that
binding happens to live.  ``Binding`` is that handle.  It remembers the
level that owns the key, so assigning through it rebinds the original
definition instead of shadowing it locally.

``UpdateResult`` is what ``Environment.update`` returns.  It is truthy
when a binding was found and overwritten, falsy when nothing was bound
and the value was handed back untouched.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class Binding(Generic[K, V]):
    """A writable handle onto one key of one level's local mapping.

    The handle does not cache the value: every read and write goes to the
    owning level, so it always reflects the current state of that level.
    """

    def __init__(self, *, key: K, store: dict[K, V], depth: int) -> None:
        """Create a handle onto ``store[key]``.

        Args:
            key: The bound key.
            store: The local mapping of the level that holds the key.
            depth: Parent hops from the searching environment (0 = local).

        """
        self._key = key
        self._store = store
        self._depth = depth

    @property
    def key(self) -> K:
        """Return the bound key."""
        return self._key

    @property
    def depth(self) -> int:
        """Return how many levels above the searching environment the key lives."""
        return self._depth

    @property
    def is_local(self) -> bool:
        """Return True if the binding lives in the searching environment itself."""
        return self._depth == 0

    @property
    def value(self) -> V:
        """Return the current value of the binding."""
        return self._store[self._key]

    @value.setter
    def value(self, value: V) -> None:
        """Overwrite the binding in place at its owning level."""
        self._store[self._key] = value

    def __repr__(self) -> str:
        """Return a readable representation."""
        return f"Binding(key={self._key!r}, value={self.value!r}, depth={self._depth})"


@dataclass(frozen=True)
class UpdateResult(Generic[V]):
    """Outcome of ``Environment.update``.

    Attributes:
        value: The new value when ``updated``; otherwise the caller's value,
            returned unused.
        updated: Whether an existing binding was overwritten.
        depth: Parent hops to the level that was written, or None.

    """

    value: V
    updated: bool
    depth: int | None = None

    def __bool__(self) -> bool:
        """Return True only if a binding was overwritten."""
        return self.updated
