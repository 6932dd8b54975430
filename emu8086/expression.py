"""Integer expression evaluation for assembler operands."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator

REGISTERS = (
    "AL", "CL", "DL", "BL", "AH", "CH", "DH", "BH",
    "AX", "CX", "DX", "BX", "SP", "BP", "SI", "DI",
)

_MASK32 = 0xFFFFFFFF
_DIGITS = "0123456789"
_HEXDIGITS = "0123456789abcdefABCDEF"
_SPACES = " \t\n\r\v\f"

_ESCAPES = {
    "'": ord("'"),
    '"': ord('"'),
    "\\": ord("\\"),
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    "e": 0x1B,
}


class Level(enum.Enum):
    """Severity of a diagnostic message."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Message:
    """A diagnostic tied to a source line."""

    text: str
    line: int
    level: Level = Level.ERROR

    def __str__(self) -> str:
        return self.text


class Diagnostics:
    """Ordered collection of errors and warnings."""

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def error(self, text: str, line: int) -> None:
        self._messages.append(Message(text, line, Level.ERROR))

    def warn(self, text: str, line: int) -> None:
        self._messages.append(Message(text, line, Level.WARNING))

    def clear(self) -> None:
        self._messages.clear()

    @property
    def errors(self) -> list[Message]:
        return [m for m in self._messages if m.level is Level.ERROR]

    @property
    def warnings(self) -> list[Message]:
        return [m for m in self._messages if m.level is Level.WARNING]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))


class ExpressionError(ValueError):
    """Raised when text does not form a valid expression."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.position = position


class SymbolTable:
    """Label names mapped to their values."""

    def __init__(self) -> None:
        self._labels: dict[str, int] = {}

    def define(self, name: str, value: int) -> None:
        """Define ``name``, or give an existing label a new value."""
        self._labels[name] = value

    def find(self, name: str) -> int | None:
        return self._labels.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._labels

    def __len__(self) -> int:
        return len(self._labels)


@dataclass
class ExpressionContext:
    """State an expression is evaluated against."""

    symbols: SymbolTable = field(default_factory=SymbolTable)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    address: int = 0
    start_address: int = 0
    step: int = 0
    line: int = 0
    global_label: str = ""
    undefined: int = 0
    undefined_name: str = ""


def _char(text: str, pos: int) -> str:
    return text[pos] if 0 <= pos < len(text) else ""


def _isdigit(ch: str) -> bool:
    return ch != "" and ch in _DIGITS


def _isxdigit(ch: str) -> bool:
    return ch != "" and ch in _HEXDIGITS


def _isalpha(ch: str) -> bool:
    return len(ch) == 1 and ch.isascii() and ch.isalpha()


def _isspace(ch: str) -> bool:
    return ch != "" and ch in _SPACES


def _is_word(ch: str) -> bool:
    return _isalpha(ch) or _isdigit(ch) or (ch != "" and ch in "_.")


def _wrap(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def _leading(text: str, accept) -> str:
    end = 0
    while end < len(text) and accept(text[end]):
        end += 1
    return text[:end]


def skip_spaces(text: str, pos: int) -> int:
    """Return the first position at or after ``pos`` that is not white space."""
    while _isspace(_char(text, pos)):
        pos += 1
    return pos


def read_character(text: str, pos: int, context: ExpressionContext) -> tuple[int, int]:
    """Read one literal character, handling backslash escapes."""
    ch = _char(text, pos)
    if ch == "":
        return 0, pos
    if ch != "\\":
        return ord(ch), pos + 1
    pos += 1
    ch = _char(text, pos)
    if ch in _ESCAPES:
        return _ESCAPES[ch], pos + 1
    if ch != "" and ch in "01234567":
        value = 0
        while (ch := _char(text, pos)) != "" and ch in "01234567":
            value = value * 8 + int(ch)
            pos += 1
        return value, pos
    context.diagnostics.error("bad escape inside string", context.line)
    return ord("\\"), pos


_LEVELS = (("|",), ("^",), ("&",), ("<<", ">>"), ("+", "-"), ("*", "/", "%"))


def _apply(op: str, left: int, right: int, context: ExpressionContext) -> int:
    if op == "|":
        return left | right
    if op == "^":
        return left ^ right
    if op == "&":
        return left & right
    if op == "<<":
        return _wrap(left << (right & 31))
    if op == ">>":
        return left >> (right & 31)
    if op == "+":
        return _wrap(left + right)
    if op == "-":
        return _wrap(left - right)
    if op == "*":
        return _wrap(left * right)
    if op == "/":
        if right == 0:
            context.diagnostics.warn("division by zero", context.line)
            right = 1
        return _wrap((left & _MASK32) // (right & _MASK32))
    # Modulo keeps the dividend's sign.
    if right == 0:
        if context.step == 2:
            context.diagnostics.error("division by zero", context.line)
        return 0
    remainder = abs(left) % abs(right)
    return -remainder if left < 0 else remainder


def _parse_level(level: int, text: str, pos: int, context: ExpressionContext) -> tuple[int, int]:
    if level == len(_LEVELS):
        return parse_primary(text, pos, context)
    value, pos = _parse_level(level + 1, text, pos, context)
    while True:
        pos = skip_spaces(text, pos)
        op = next((o for o in _LEVELS[level] if text.startswith(o, pos)), None)
        if op is None:
            return value, pos
        right, pos = _parse_level(level + 1, text, pos + len(op), context)
        value = _apply(op, value, right, context)


def parse_expression(text: str, pos: int, context: ExpressionContext) -> tuple[int, int]:
    """Parse an expression at ``pos``; return its value and the position after it."""
    return _parse_level(0, text, pos, context)


def _parse_number_token(token: str, pos: int) -> int | None:
    """Value of a numeric token with an optional H/O/B suffix, or None for a label."""
    last = token[-1]
    before = token[-2] if len(token) > 1 else ""
    if last == "H" and _isxdigit(before):
        return int(_leading(token, _isxdigit), 16)
    if last == "O" and _isdigit(before):
        number = 0
        for digit in _leading(token, _isdigit):
            number = (number << 3) | int(digit)
        return number
    if last == "B" and _isdigit(before):
        body = token[:-1]
        bits = _leading(body, lambda c: c in "01")
        rest = body[len(bits):]
        if rest and _isalpha(rest[0]):
            raise ExpressionError(f"bad binary number '{token}'", pos)
        return int(bits, 2) if bits else 0
    if _isdigit(token[0]):
        digits = _leading(token, _isdigit)
        rest = token[len(digits):]
        if rest and _isalpha(rest[0]):
            raise ExpressionError(f"bad number '{token}'", pos)
        return int(digits)
    return None


def parse_primary(text: str, pos: int, context: ExpressionContext) -> tuple[int, int]:
    """Parse a number, character, label, address or parenthesised term."""
    pos = skip_spaces(text, pos)
    ch = _char(text, pos)
    nxt = _char(text, pos + 1)

    if ch == "(":
        value, pos = parse_expression(text, pos + 1, context)
        pos = skip_spaces(text, pos)
        if _char(text, pos) != ")":
            raise ExpressionError("missing closing parenthesis", pos)
        return value, pos + 1
    if ch == "-":
        value, pos = parse_primary(text, pos + 1, context)
        return _wrap(-value), pos
    if ch == "+":
        return parse_primary(text, pos + 1, context)
    if ch == "0" and nxt.lower() == "b":
        pos += 2
        number = 0
        while (c := _char(text, pos)) != "" and c in "01_":
            if c != "_":
                number = (number << 1) | int(c)
            pos += 1
        return _wrap(number), pos
    if ch == "0" and nxt.lower() == "x" and _isxdigit(_char(text, pos + 2)):
        digits = _leading(text[pos + 2:], _isxdigit)
        return _wrap(int(digits, 16)), pos + 2 + len(digits)
    if ch == "$" and _isdigit(nxt):
        digits = _leading(text[pos + 1:], _isxdigit)
        return _wrap(int(digits, 16)), pos + 1 + len(digits)
    if ch == "'":
        value, pos = read_character(text, pos + 1, context)
        if _char(text, pos) != "'":
            context.diagnostics.error("Missing apostrophe", context.line)
        else:
            pos += 1
        return value, pos
    if _isxdigit(ch):
        end = pos
        while _is_word(_char(text, end)):
            end += 1
        number = _parse_number_token(text[pos:end], pos)
        if number is not None:
            return _wrap(number), skip_spaces(text, end)
    if ch == "$" and nxt == "$":
        return context.start_address, pos + 2
    if ch == "$":
        return context.address, pos + 1
    if _isalpha(ch) or (ch != "" and ch in "_."):
        end = pos
        while _is_word(_char(text, end)):
            end += 1
        word = text[pos:end]
        name = context.global_label + word if word.startswith(".") else word
        if name == "OFFSET":
            pos = skip_spaces(text, end)
            follow_end = pos
            while _is_word(_char(text, follow_end)):
                follow_end += 1
            if pos >= len(text) or _isdigit(_char(text, pos)):
                raise ExpressionError("OFFSET needs a label", pos)
            if text[pos:follow_end] == "OFFSET":
                raise ExpressionError("repeated OFFSET", pos)
            return parse_primary(text, pos, context)
        if name in REGISTERS:
            raise ExpressionError(f"register '{name}' in expression", pos)
        value = context.symbols.find(name)
        if value is None:
            context.undefined += 1
            context.undefined_name = name
            if context.step and name != "WORD":
                context.diagnostics.error(
                    f"Undefined label '{name}' on line {context.line}", context.line
                )
            return 0, end
        return value, end
    raise ExpressionError("expected an expression", pos)


def evaluate(text: str, context: ExpressionContext | None = None) -> int:
    """Evaluate a whole expression; trailing text other than a comment is an error."""
    if context is None:
        context = ExpressionContext()
    value, pos = parse_expression(text, 0, context)
    pos = skip_spaces(text, pos)
    if pos < len(text) and text[pos] != ";":
        raise ExpressionError("extra characters after expression", pos)
    return value