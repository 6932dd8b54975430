"""Breakpoints set on source lines of the code editor."""

from __future__ import annotations

from typing import Iterator

DEFAULT_LIMIT = 99


class Breakpoints:
    """An ordered set of source lines that hold a breakpoint.

    At most ``limit`` breakpoints are held at once. Toggling a new line while
    the set is full leaves it unchanged, as the editor does.
    """

    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"breakpoint limit must be positive, not {limit!r}")
        self.limit = limit
        self._lines: dict[int, None] = {}

    @staticmethod
    def _check(line: int) -> None:
        if line < 0:
            raise ValueError(f"line numbers start at 0, not {line!r}")

    def __contains__(self, line: object) -> bool:
        return line in self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._lines))

    @property
    def full(self) -> bool:
        return len(self._lines) >= self.limit

    def toggle(self, line: int) -> bool:
        """Set or clear the breakpoint on ``line``; return whether one is now set."""
        self._check(line)
        if line in self._lines:
            del self._lines[line]
            return False
        if self.full:
            return False
        self._lines[line] = None
        return True

    def clear(self) -> None:
        """Remove every breakpoint."""
        self._lines.clear()