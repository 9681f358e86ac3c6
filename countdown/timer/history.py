"""Recall list of accepted timer inputs (Up/Down in the input field).

The cursor ranges over ``0 .. len(entries)``; ``len(entries)`` is the
"fresh input" position below the newest entry.
"""

from __future__ import annotations


MAX_HISTORY = 20


class InputHistory:
    """Bounded, in-memory list of accepted input strings."""

    def __init__(self, limit: int = MAX_HISTORY) -> None:
        self._limit = limit
        self._entries: list[str] = []
        self._cursor: int = 0

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def at_fresh_input(self) -> bool:
        return self._cursor == len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, raw: str) -> None:
        """Append *raw* unless it repeats the newest entry."""
        if not self._entries or self._entries[-1] != raw:
            self._entries.append(raw)
            if len(self._entries) > self._limit:
                del self._entries[0]
        self._cursor = len(self._entries)

    def previous(self) -> str | None:
        """Step toward older entries.  ``None`` when there is nowhere to go."""
        if not self._entries or self._cursor <= 0:
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def next(self) -> str | None:
        """Step toward newer entries.

        Stepping past the newest entry returns ``""`` (fresh input).
        ``None`` when already at the fresh-input position.
        """
        if not self._entries:
            return None
        if self._cursor < len(self._entries) - 1:
            self._cursor += 1
            return self._entries[self._cursor]
        if self._cursor == len(self._entries) - 1:
            self._cursor = len(self._entries)
            return ""
        return None
