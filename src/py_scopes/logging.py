"""Scope event logging — an audit trail of what happened to a chain.

Environments are quiet by default.  When one carries a ``Logger``, the
interesting moments of its life get recorded: a ``define`` that was
rejected because the name was already visible, an ``update`` that found
nothing to rebind, a ``flatten`` that collapsed several levels, an
``extension`` that paid for a full copy of the chain.

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **Operation** — which environment operation produced the event.
- **ScopeEvent** — one immutable record (level, operation, message, depth).
- **Logger** — the event buffer, queryable by level, operation and depth.
"""

from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum, StrEnum


class LogLevel(IntEnum):
    """Severity levels for scope events.

    Using IntEnum means levels compare with ``<`` / ``>`` naturally,
    which makes threshold checks a single comparison.
    """

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


class Operation(StrEnum):
    """The environment operations that can report events."""

    DEFINE = "define"
    UPDATE = "update"
    FLATTEN = "flatten"
    EXTENSION = "extension"


@dataclass(frozen=True)
class ScopeEvent:
    """A single recorded event.

    Attributes:
        level: How notable the event is.
        operation: The environment operation that reported it.
        message: What happened, e.g. ``rejected 'x'``.
        depth: Number of levels in the chain that reported it.

    """

    level: LogLevel
    operation: Operation
    message: str
    depth: int = 1

    def __str__(self) -> str:
        """Format as ``[LEVEL] operation@depth: message``."""
        return f"[{self.level.name}] {self.operation}@{self.depth}: {self.message}"


class Logger:
    """Event buffer shared by the levels of a chain.

    Children created with ``extend`` or ``extension`` inherit their
    parent's logger, so one ``Logger`` sees the whole chain's history.
    """

    def __init__(self) -> None:
        """Create a logger with no events."""
        self._events: list[ScopeEvent] = []

    @property
    def events(self) -> tuple[ScopeEvent, ...]:
        """Return every event, oldest first."""
        return tuple(self._events)

    def log(
        self,
        level: LogLevel,
        operation: Operation,
        message: str,
        *,
        depth: int = 1,
    ) -> ScopeEvent:
        """Record an event and return it."""
        event = ScopeEvent(level=level, operation=operation, message=message, depth=depth)
        self._events.append(event)
        return event

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        operation: Operation | None = None,
        depth: int | None = None,
    ) -> list[ScopeEvent]:
        """Return the events matching every criterion given.

        Args:
            min_level: Keep events at or above this level.
            operation: Keep events reported by this operation.
            depth: Keep events reported by a chain of exactly this depth.

        """
        return [
            event
            for event in self._events
            if (min_level is None or event.level >= min_level)
            and (operation is None or event.operation is operation)
            and (depth is None or event.depth == depth)
        ]

    def counts(self) -> Counter[Operation]:
        """Return how many events each operation has reported."""
        return Counter(event.operation for event in self._events)

    def clear(self) -> None:
        """Forget every event."""
        self._events.clear()

    def __iter__(self) -> Iterator[ScopeEvent]:
        """Iterate over events, oldest first."""
        return iter(self.events)

    def __len__(self) -> int:
        """Return the number of recorded events."""
        return len(self._events)
