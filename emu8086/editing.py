"""Text editing helpers used by the code editor: auto-indent, font size, lines."""

from __future__ import annotations

from typing import Sequence

_LINE_ENDS = "\r\n"


def _line_body(line: str) -> str:
    """The part of ``line`` before any line terminator."""
    for index, ch in enumerate(line):
        if ch in _LINE_ENDS:
            return line[:index]
    return line


def previous_line_blank(lines: Sequence[str], index: int) -> bool:
    """Whether line ``index`` holds nothing but indentation.

    The first line never counts as blank. Indentation is spaces, then tabs,
    then spaces again. A line past the end of ``lines`` counts as blank.
    """
    if index < 0:
        raise ValueError(f"line numbers start at 0, not {index!r}")
    if index == 0:
        return False
    if index >= len(lines):
        return True
    rest = _line_body(lines[index]).lstrip(" ")
    if not rest:
        return True
    rest = rest.lstrip("\t").lstrip(" ")
    return not rest


def insert_newline(text: str, offset: int) -> tuple[str, int]:
    """Insert a line break at ``offset``, indenting the new line with a tab.

    The tab is left out when the line the cursor was on is blank. Returns
    the new text and the cursor offset after the insertion.
    """
    if not 0 <= offset <= len(text):
        raise ValueError(f"offset {offset!r} outside text of length {len(text)}")
    line = text.count("\n", 0, offset)
    before = text[:offset] + "\n"
    after = text[offset:]
    lines = (before + after).split("\n")
    if not previous_line_blank(lines, line):
        before += "\t"
    return before + after, len(before)


def change_font_size(font: str, delta: int) -> str:
    """Change the size that ends a font description such as ``"Monospace 14"``."""
    digits = len(font) - len(font.rstrip("0123456789"))
    if digits == 0:
        raise ValueError(f"font description has no size: {font!r}")
    prefix = font[: len(font) - digits]
    size = int(font[len(font) - digits:]) + delta
    return f"{prefix}{size}"


def line_range(text: str, line: int) -> tuple[int, int]:
    """Offsets of the start and end of ``line`` in ``text``, without its newline.

    A line past the last one gives the end of the text for both offsets.
    """
    if line < 0:
        raise ValueError(f"line numbers start at 0, not {line!r}")
    start = 0
    for _ in range(line):
        found = text.find("\n", start)
        if found < 0:
            return len(text), len(text)
        start = found + 1
    end = text.find("\n", start)
    if end < 0:
        end = len(text)
    return start, end