# emu8086

Dependency-free building blocks for working with 8086 assembly source:

- an integer expression evaluator with labels, `$` and `$$`, character
  literals and hex, octal, binary and decimal numbers,
- matchers for 8- and 16-bit register operands and for every 8086 memory
  addressing mode, giving the ModR/M bits and displacement,
- a machine model with one megabyte of flat memory and 22 registers,
- helpers for a code editor: a bounded set of breakpoints, auto-indent on
  newline, font-size changes and line offsets.

## Modules

| Module | What it offers |
| --- | --- |
| `emu8086.expression` | `evaluate`, `parse_expression`, `parse_primary`, `read_character` and `skip_spaces`, with `SymbolTable`, `ExpressionContext`, `Diagnostics`, `Message`, `Level` and `ExpressionError`. |
| `emu8086.operands` | `match_register` and `match_addressing`, the latter returning an `Addressing`. |
| `emu8086.machine` | `Machine`, with `load`, `read_byte` and `write_byte`. |
| `emu8086.breakpoints` | `Breakpoints`, an ordered, bounded set of source lines. |
| `emu8086.editing` | `previous_line_blank`, `insert_newline`, `change_font_size` and `line_range`. |

## Expressions

```python
from emu8086.expression import ExpressionContext, evaluate

evaluate("1FH + 2")            # 33

ctx = ExpressionContext(address=0x105, start_address=0x100)
ctx.symbols.define("START", 0x100)
evaluate("START + 4", ctx)     # 260
evaluate("$ - $$", ctx)        # 5
```

Operators, from the loosest binding to the tightest: `|`, `^`, `&`,
`<<` and `>>`, `+` and `-`, then `*`, `/` and `%`. Unary `-` and `+` and
parentheses are accepted. Results wrap to signed 32 bits.

Numbers may be written as `0x1F`, `$1F` (a digit must follow the `$`),
`1FH`, `17O`, `0b1010`, `1010B` or in decimal. `'A'` is a character
literal and takes the escapes `\n`, `\t`, `\e`, `\\`, octal `\101` and
the like. `OFFSET label` is the label's value. A name starting with `.`
is a local label and is prefixed with `ExpressionContext.global_label`.

An unknown label counts as 0; `ExpressionContext.undefined` is increased
and `undefined_name` set, and when `step` is not 0 an error is added to
`ExpressionContext.diagnostics`. Division by zero with `/` adds a warning
and divides by 1. A register name in an expression, a missing `)` or
text that is not an expression raises `ExpressionError`, which carries
the `position` of the problem. `evaluate` also raises on trailing text
other than a `;` comment.

`parse_expression(text, pos, context)` and `parse_primary` return the
value together with the position after what they read, for callers that
go on parsing the rest of a line.

## Operands

```python
from emu8086.expression import ExpressionContext
from emu8086.operands import match_addressing, match_register

match_register("AX, 5", 0, 16)          # (0, 2)
match_addressing("[BX+SI+8]", 0, 16, ExpressionContext())
# Addressing(bits=0x40, offset=8, offset_width=1, end=9)
```

Both return `None` when the text is not an operand of the given width.
A register operand gives bits `0xC0 | register`. A displacement from
-128 to 127 is one byte wide, anything else two; a plain `[address]` is
always two bytes with bits `0x06`, and `[BP]` is encoded with a zero
one-byte displacement.

## Machine

```python
from emu8086.machine import Machine

machine = Machine()
machine.write_byte(0x100, 0x1B4)   # stores 0xB4
machine.read_byte(0x100)           # 0xB4
```

Addresses outside the megabyte raise `IndexError`. `Machine.load`
takes any object with `code`, `start_address`, `end_address` and
`instructions`, copies `code` into memory at `start_address` and raises
`ValueError` if it does not fit. `code_segment` is the load address
divided by 16.

## Editor helpers

```python
from emu8086.breakpoints import Breakpoints
from emu8086.editing import change_font_size, insert_newline, line_range

marks = Breakpoints()        # holds at most 99 lines
marks.toggle(12)             # True: now set
12 in marks                  # True
marks.toggle(12)             # False: removed again

change_font_size("Monospace 14", 2)     # "Monospace 16"
insert_newline("MOV AX, 1", 9)          # ("MOV AX, 1\n\t", 11)
line_range("a\nbc\n", 1)                # (2, 4)
```

Toggling a new line on a full `Breakpoints` leaves it unchanged.
`insert_newline` indents the new line with a tab unless the line the
cursor was on is blank.

## What the package does not do

It has no instruction table, no instruction encoder and no assembler
driver: it evaluates expressions and matches operands, but does not turn
source lines into machine code. `Machine` holds memory and registers but
does not execute instructions. There is no command-line tool and no
graphical editor; the editor helpers work on plain strings.

## Running the tests

Install the `test` extra and run `pytest`.