"""Environments — chained scopes of key-value bindings.

Every interpreter and compiler needs a symbol table that understands
nesting.  A function body sees its own locals, then the enclosing
function's, then the module's, then the builtins.  An inner name can
*shadow* an outer one without destroying it: when the inner scope ends,
the outer binding is visible again.

An ``Environment`` is one level of that nesting: a local dict plus an
optional link to the parent level.  The chain from a level up to the
root is singly linked and acyclic, because a child is only ever built
on top of a parent that already exists.

Three ways to bind a name, three different rules:

- ``set`` — always writes locally.  This is how shadowing is created.
- ``define`` — writes locally only if the key is not visible *anywhere*
  in the chain; otherwise the pair is handed back untouched.
- ``update`` — finds the level that already holds the key and rebinds
  it there, like assignment to an existing variable.  Nothing is
  inserted when the key is unbound.

Key design properties:
    - **Hashable keys** — the key type needs ``__hash__`` and a
      consistent ``__eq__``, like any dict key.
    - **Loops, not recursion** — every walk up the chain is a plain
      loop, so a chain thousands of levels deep is fine.
    - **No exceptions for expected outcomes** — a rejected ``define``
      or a missed ``update`` is reported through the return value.
      Only ``env[key]`` raises, because that is what ``KeyError`` is for.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Hashable, Iterable, Iterator, KeysView, Mapping
from itertools import zip_longest
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from py_scopes.bindings import Binding, UpdateResult
from py_scopes.config import DEFAULT_OPTIONS, Precedence, ScopeOptions
from py_scopes.logging import Logger, LogLevel, Operation
from py_scopes.render import render_debug, render_display

_MISSING: Any = object()

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class Environment(Generic[K, V]):
    """One level of a chained scope.

    Lookups search the local mapping first and then each ancestor in
    turn.  ``size()`` counts every stored entry on every level, while
    ``len()`` counts distinct visible keys.
    """

    def __init__(
        self,
        bindings: Mapping[K, V] | Iterable[tuple[K, V]] | None = None,
        *,
        parent: Environment[K, V] | None = None,
        options: ScopeOptions | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create an environment, optionally pre-populated.

        Args:
            bindings: Starting local bindings, as a mapping or an iterable
                of ``(key, value)`` pairs (copied; later duplicates win).
            parent: The environment this one extends, or None for a root.
            options: Chain behaviour.  Inherited from ``parent`` if omitted.
            logger: Audit log.  Inherited from ``parent`` if omitted.

        """
        self._locals: dict[K, V] = dict(bindings) if bindings is not None else {}
        self._parent = parent
        if options is None:
            options = parent.options if parent is not None else DEFAULT_OPTIONS
        if logger is None and parent is not None:
            logger = parent.logger
        self._options = options
        self._logger = logger

    # -- Construction -------------------------------------------------------

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[K, V]], **kwargs: Any) -> Environment[K, V]:
        """Build a root environment from ``(key, value)`` pairs.

        Duplicate keys overwrite: the last pair for a key wins.
        """
        return cls(pairs, **kwargs)

    @classmethod
    def new_from(cls, parent: Environment[K, V] | None, **kwargs: Any) -> Environment[K, V]:
        """Return an empty environment extending *parent* (a root if None).

        *parent* is linked, not copied.  A chain is meant to have one child
        per level: calling this twice with the same parent makes both
        children share it, and writes through one show up in the other.
        Pass ``parent.copy()`` instead when the branches must be
        independent.
        """
        return cls(parent=parent, **kwargs)

    def extend(self) -> Environment[K, V]:
        """Return a new empty level whose parent is this environment.

        Nothing is copied: the child links to ``self`` directly, so later
        writes through either one are visible to the other.  Each level
        should have at most one child.  Extending the same environment
        twice is not rejected, but the two children then share it and
        see each other's ancestor writes.  Use ``extension`` to branch
        off an independent chain instead.
        """
        return type(self)(parent=self, options=self._options, logger=self._logger)

    def extension(self) -> Environment[K, V]:
        """Return a new empty level whose parent is a copy of this chain.

        ``self`` is left untouched and unlinked.  Copying costs time and
        memory proportional to the whole chain, not just this level.
        """
        clone = self.copy()
        self._record(LogLevel.DEBUG, Operation.EXTENSION, f"copied {clone.depth} levels")
        return type(self)(parent=clone, options=self._options, logger=self._logger)

    def copy(self) -> Environment[K, V]:
        """Return an independent deep copy of the whole chain.

        Values are copied with ``copy.deepcopy``, so a value that refers
        back to a level of this chain (a closure capturing its own scope)
        refers to the matching level of the copy.  Options and the logger
        are shared with the original.
        """
        return copy.deepcopy(self)

    def __copy__(self) -> Environment[K, V]:
        """Support ``copy.copy``: every level is new, values are shared."""
        return self._clone(dict, None)

    def __deepcopy__(self, memo: dict[int, Any]) -> Environment[K, V]:
        """Support ``copy.deepcopy``."""
        return self._clone(lambda local: copy.deepcopy(local, memo), memo)

    def _clone(
        self,
        copy_locals: Callable[[dict[K, V]], dict[K, V]],
        memo: dict[int, Any] | None,
    ) -> Environment[K, V]:
        """Duplicate the chain level by level.

        Every new level is linked and registered in *memo* before any
        values are copied, so values that point back into the chain
        resolve to the copy.  An ancestor already in *memo* is reused
        and ends the walk.
        """
        pairs: list[tuple[Environment[K, V], Environment[K, V]]] = []
        tail: Environment[K, V] | None = None
        for node in self._chain():
            if memo is not None and id(node) in memo:
                tail = memo[id(node)]
                break
            level = type(self)(options=node._options, logger=node._logger)
            if memo is not None:
                memo[id(node)] = level
            pairs.append((node, level))

        for (_, level), (_, above) in zip(pairs, pairs[1:], strict=False):
            level._parent = above
        pairs[-1][1]._parent = tail

        for node, level in pairs:
            level._locals = copy_locals(node._locals)
        return pairs[0][1]

    # -- Structure ----------------------------------------------------------

    @property
    def options(self) -> ScopeOptions:
        """Return the options governing this level."""
        return self._options

    @property
    def logger(self) -> Logger | None:
        """Return the audit logger, or None if events are not recorded."""
        return self._logger

    @property
    def depth(self) -> int:
        """Return the number of levels in the chain (a root alone is 1)."""
        return sum(1 for _ in self._chain())

    def get_locals(self) -> Mapping[K, V]:
        """Return a read-only view of the local bindings."""
        return MappingProxyType(self._locals)

    def get_parent(self) -> Environment[K, V] | None:
        """Return the parent environment, or None for a root."""
        return self._parent

    def has_parent(self) -> bool:
        """Return True if this environment extends another."""
        return self._parent is not None

    def size(self) -> int:
        """Return the number of entries stored across every level.

        Shadowed keys are counted once per level that binds them.
        """
        return sum(len(node._locals) for node in self._chain())

    def _chain(self) -> Iterator[Environment[K, V]]:
        """Yield this environment and then each ancestor, innermost first."""
        node: Environment[K, V] | None = self
        while node is not None:
            yield node
            node = node._parent

    # -- Lookup -------------------------------------------------------------

    def contains_local(self, key: K) -> bool:
        """Return True if *key* is bound at this level."""
        return key in self._locals

    def contains(self, key: K) -> bool:
        """Return True if *key* is bound at this level or any ancestor."""
        return any(key in node._locals for node in self._chain())

    def get(self, key: K, default: V | None = None) -> V | None:
        """Return the innermost value bound to *key*, or *default*."""
        for node in self._chain():
            if key in node._locals:
                return node._locals[key]
        return default

    def get_mut(self, key: K) -> Binding[K, V] | None:
        """Return a writable handle onto the innermost binding of *key*.

        The handle may point into an ancestor: writing through it rebinds
        the key at the level that defines it, not locally.

        Returns:
            The handle, or None if *key* is unbound anywhere in the chain.

        """
        for depth, node in enumerate(self._chain()):
            if key in node._locals:
                return Binding(key=key, store=node._locals, depth=depth)
        return None

    # -- Mutation -----------------------------------------------------------

    def define(self, key: K, value: V) -> tuple[K, V] | None:
        """Bind *key* locally unless it is already visible in the chain.

        Returns:
            None if the binding was added, otherwise the rejected
            ``(key, value)`` pair, unchanged.

        """
        if self.contains(key):
            self._record(LogLevel.DEBUG, Operation.DEFINE, f"rejected {key!r}")
            return (key, value)
        self._locals[key] = value
        return None

    def set(self, key: K, value: V) -> V | None:
        """Bind *key* locally, shadowing any ancestor binding.

        Returns:
            The previous local value, or None if there was none.

        """
        previous = self._locals.get(key)
        self._locals[key] = value
        return previous

    def update(self, key: K, value: V) -> UpdateResult[V]:
        """Rebind *key* at whichever level already binds it.

        Returns:
            A truthy result carrying the new value if a binding was
            overwritten, or a falsy result carrying *value* back unused
            if *key* is unbound everywhere.  Nothing is inserted then.

        """
        binding = self.get_mut(key)
        if binding is None:
            self._record(LogLevel.DEBUG, Operation.UPDATE, f"missed {key!r}")
            return UpdateResult(value=value, updated=False)
        binding.value = value
        return UpdateResult(value=binding.value, updated=True, depth=binding.depth)

    # -- Aggregates ---------------------------------------------------------

    def flatten(self, precedence: Precedence | None = None) -> Environment[K, V]:
        """Merge every level into a single parentless environment.

        Args:
            precedence: Which level wins a shadowed key.  Defaults to the
                chain's ``options.precedence``.  ``INNERMOST`` keeps the
                binding lookup would see; ``OUTERMOST`` keeps the root-most.

        """
        if precedence is None:
            precedence = self._options.precedence
        levels = list(self._chain())
        # later writes win, so visit the winning side last
        ordered = levels if precedence is Precedence.OUTERMOST else levels[::-1]
        flat: Environment[K, V] = type(self)(options=self._options, logger=self._logger)
        for node in ordered:
            flat._locals.update(node._locals)
        self._record(
            LogLevel.INFO,
            Operation.FLATTEN,
            f"merged {len(levels)} levels into {len(flat._locals)} bindings",
        )
        return flat

    def keylist(self) -> list[KeysView[K]]:
        """Return one live key view per level, innermost first."""
        return [node._locals.keys() for node in self._chain()]

    def keyset(self) -> set[K]:
        """Return every distinct key bound anywhere in the chain."""
        keys: set[K] = set()
        for node in self._chain():
            keys.update(node._locals)
        return keys

    def stack(self) -> dict[K, list[V]]:
        """Map each key to all of its bound values, innermost first."""
        stacked: dict[K, list[V]] = {}
        for node in self._chain():
            for key, value in node._locals.items():
                stacked.setdefault(key, []).append(value)
        return stacked

    def difference(self, other: Environment[K, V]) -> Environment[K, V]:
        """Return the bindings whose keys appear in this chain but not in *other*.

        Only keys are compared.  Each surviving key carries the value
        lookup in ``self`` would return.  The result has no parent.
        """
        excluded = other.keyset()
        result: Environment[K, V] = type(self)(options=self._options, logger=self._logger)
        for node in self._chain():
            for key, value in node._locals.items():
                if key not in excluded and key not in result._locals:
                    result._locals[key] = value
        return result

    # -- Python protocols ---------------------------------------------------

    def __contains__(self, key: object) -> bool:
        """Return True if *key* is visible anywhere in the chain."""
        return any(key in node._locals for node in self._chain())

    def __getitem__(self, key: K) -> V:
        """Return the innermost value for *key*.

        Raises:
            KeyError: If *key* is unbound anywhere in the chain.

        """
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key: K, value: V) -> None:
        """Bind *key* locally (same as ``set``)."""
        self._locals[key] = value

    def __iter__(self) -> Iterator[K]:
        """Yield each distinct visible key once, innermost level first."""
        seen: set[K] = set()
        for node in self._chain():
            for key in node._locals:
                if key not in seen:
                    seen.add(key)
                    yield key

    def __len__(self) -> int:
        """Return the number of distinct visible keys."""
        return len(self.keyset())

    def __eq__(self, other: object) -> bool:
        """Compare level by level; chains of different depth are unequal."""
        if not isinstance(other, Environment):
            return NotImplemented
        for mine, theirs in zip_longest(self._chain(), other._chain()):
            if mine is None or theirs is None or mine._locals != theirs._locals:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Return a structural representation of the chain."""
        return render_debug([node._locals for node in self._chain()], name=type(self).__name__)

    def __str__(self) -> str:
        """Return the chain as nested, indented brace blocks."""
        return render_display([node._locals for node in self._chain()])

    def _record(self, level: LogLevel, operation: Operation, message: str) -> None:
        """Log an event if a logger is attached and *level* passes the threshold."""
        if self._logger is not None and level >= self._options.log_level:
            self._logger.log(level, operation, message, depth=self.depth)
