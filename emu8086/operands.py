"""Register and memory operand matching for 8086 instructions."""

from __future__ import annotations

from dataclasses import dataclass

from .expression import (
    REGISTERS,
    ExpressionContext,
    ExpressionError,
    parse_expression,
    skip_spaces,
)

_BX, _BP, _SI, _DI = 3, 5, 6, 7

# Single base or index register -> r/m field, with and without brackets alone.
_SINGLE = {_BX: 0x07, _BP: 0x06, _SI: 0x04, _DI: 0x05}

# Base + index register pairs -> r/m field.
_PAIRS = {
    frozenset((_BX, _SI)): 0x00,
    frozenset((_BX, _DI)): 0x01,
    frozenset((_BP, _SI)): 0x02,
    frozenset((_BP, _DI)): 0x03,
}

_REGISTER_FOLLOWERS = " \t\n\r\v\f,]+-"


@dataclass(frozen=True)
class Addressing:
    """A matched operand: mod/rm bits, displacement and where the text ends."""

    bits: int
    offset: int = 0
    offset_width: int = 0
    end: int = 0


def _char(text: str, pos: int) -> str:
    return text[pos] if 0 <= pos < len(text) else ""


def _isalpha(ch: str) -> bool:
    return len(ch) == 1 and ch.isascii() and ch.isalpha()


def match_register(text: str, pos: int, width: int) -> tuple[int, int] | None:
    """Match an 8- or 16-bit register name at ``pos``.

    Returns the register number and the position after it and any following
    spaces, or None when no register of that width is there.
    """
    pos = skip_spaces(text, pos)
    if not (_isalpha(_char(text, pos)) and _isalpha(_char(text, pos + 1))):
        return None
    follower = _char(text, pos + 2)
    if follower and follower not in _REGISTER_FOLLOWERS:
        return None
    name = text[pos:pos + 2]
    names = REGISTERS[:8] if width == 8 else REGISTERS[8:]
    if name not in names:
        return None
    return names.index(name), skip_spaces(text, pos + 2)


def _displacement_bits(offset: int) -> tuple[int, int]:
    """Mod bits and width for a displacement value."""
    if -0x80 <= offset <= 0x7F:
        return 0x40, 1
    return 0x80, 2


def _closing_bracket(text: str, pos: int) -> int | None:
    pos = skip_spaces(text, pos)
    if _char(text, pos) != "]":
        return None
    return pos + 1


def _match_memory(text: str, pos: int, context: ExpressionContext) -> Addressing | None:
    """Match the inside of a bracketed memory operand; ``pos`` is past ``[``."""
    pos = skip_spaces(text, pos)
    first = match_register(text, pos, 16)

    if first is None:
        offset, pos = parse_expression(text, pos, context)
        end = _closing_bracket(text, pos)
        if end is None:
            return None
        return Addressing(0x06, offset, 2, end)

    reg, pos = first
    pos = skip_spaces(text, pos)
    ch = _char(text, pos)

    if ch == "]":
        if reg == _BP:
            return Addressing(0x46, 0, 1, pos + 1)
        if reg not in _SINGLE:
            return None
        return Addressing(_SINGLE[reg], 0, 0, pos + 1)

    if ch not in ("+", "-") or ch == "":
        return None

    second = None
    if ch == "+":
        pos = skip_spaces(text, pos + 1)
        second = match_register(text, pos, 16)

    if second is not None:
        reg2, after = second
        bits = _PAIRS.get(frozenset((reg, reg2)))
        if bits is None:
            return None
        pos = skip_spaces(text, after)
        ch = _char(text, pos)
        if ch == "]":
            return Addressing(bits, 0, 0, pos + 1)
        if ch not in ("+", "-") or ch == "":
            return None
        offset, pos = parse_expression(text, pos, context)
        end = _closing_bracket(text, pos)
        if end is None:
            return None
        mod, width = _displacement_bits(offset)
        return Addressing(bits | mod, offset, width, end)

    if reg not in _SINGLE:
        return None
    offset, pos = parse_expression(text, pos, context)
    end = _closing_bracket(text, pos)
    if end is None:
        return None
    mod, width = _displacement_bits(offset)
    return Addressing(_SINGLE[reg] | mod, offset, width, end)


def match_addressing(
    text: str, pos: int, width: int, context: ExpressionContext
) -> Addressing | None:
    """Match a register or memory operand at ``pos``.

    Returns None when the text is not a valid operand of that width.
    """
    pos = skip_spaces(text, pos)
    if _char(text, pos) == "[":
        try:
            return _match_memory(text, pos + 1, context)
        except ExpressionError:
            return None
    found = match_register(text, pos, width)
    if found is None:
        return None
    reg, end = found
    return Addressing(0xC0 | reg, 0, 0, end)