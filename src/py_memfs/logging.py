"""Operation log — a bounded, structured record of bridge calls.

The dispatcher writes one entry per callback it handles, much like a
kernel ring buffer (``dmesg``) or an ``strace`` transcript:

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — one immutable record (level, message, source, op).
- **Logger** — an append-only buffer that forgets its oldest entries
  once ``capacity`` is reached.

The engine itself never writes here: failures are reported to the
caller as values, and only the dispatcher decides what is worth noting.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import IntEnum

DEFAULT_CAPACITY = 1024


class LogLevel(IntEnum):
    """Severity levels; IntEnum so ``min_level`` filtering is a comparison."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The subsystem that generated the event (e.g. "ops").
        op: The bridge operation involved, if any.

    """

    level: LogLevel
    message: str
    source: str
    op: str | None = None

    def __str__(self) -> str:
        """Format as ``[LEVEL] source(op): message``."""
        where = f"{self.source}({self.op})" if self.op else self.source
        return f"[{self.level.name}] {where}: {self.message}"


class Logger:
    """Ring buffer of ``LogEntry`` records with simple querying."""

    def __init__(self, capacity: int | None = DEFAULT_CAPACITY) -> None:
        """Create an empty logger keeping at most *capacity* entries.

        ``None`` means unbounded.
        """
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        """Return the number of retained entries."""
        return len(self._entries)

    @property
    def entries(self) -> list[LogEntry]:
        """Return retained entries, oldest first."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        op: str | None = None,
    ) -> None:
        """Append a new entry, evicting the oldest one when full."""
        self._entries.append(LogEntry(level=level, message=message, source=source, op=op))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        op: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching every criterion given.

        Args:
            min_level: If set, only entries at or above this level.
            source: If set, only entries from this source.
            op: If set, only entries for this operation.

        """
        return [
            entry
            for entry in self._entries
            if (min_level is None or entry.level >= min_level)
            and (source is None or entry.source == source)
            and (op is None or entry.op == op)
        ]

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()
