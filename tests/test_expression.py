import pytest

from emu8086.expression import (
    Diagnostics,
    ExpressionContext,
    ExpressionError,
    Level,
    SymbolTable,
    evaluate,
    parse_expression,
    parse_primary,
    read_character,
    skip_spaces,
)


def test_decimal():
    assert evaluate("42") == 42


@pytest.mark.parametrize("text", ["0x2A", "2AH", "$2A", "0b101010", "0b10_1010", "101010B", "52O"])
def test_number_notations_agree(text):
    assert evaluate(text) == evaluate("42")


def test_precedence():
    assert evaluate("2+3*4") == evaluate("2+(3*4)")
    assert evaluate("(2+3)*4") == evaluate("20")


@pytest.mark.parametrize(
    "text, expected",
    [("6|1", "7"), ("6^3", "5"), ("6&3", "2"), ("1<<4", "16"), ("16>>2", "4"), ("9-4", "5")],
)
def test_binary_operators(text, expected):
    assert evaluate(text) == evaluate(expected)


def test_unary_signs():
    assert evaluate("-5") == -5
    assert evaluate("+5") == 5
    assert evaluate("--5") == 5


def test_left_shift_wraps_to_signed_32_bits():
    assert evaluate("1<<31") < 0


def test_division_is_unsigned():
    assert evaluate("-8/2") > 0
    assert evaluate("-8/2") == evaluate("0x7FFFFFFC")


def test_modulo_keeps_dividend_sign():
    assert evaluate("-7%3") == evaluate("-1")
    assert evaluate("7%3") == evaluate("1")


def test_division_by_zero_warns_and_divides_by_one():
    context = ExpressionContext(line=4)
    assert evaluate("8/0", context) == 8
    [message] = list(context.diagnostics)
    assert message.level is Level.WARNING
    assert message.text == "division by zero"
    assert message.line == 4


def test_modulo_by_zero_is_error_in_final_pass():
    context = ExpressionContext(step=2)
    evaluate("8%0", context)
    assert [m.text for m in context.diagnostics.errors] == ["division by zero"]


def test_character_constants():
    assert evaluate("'A'") == ord("A")
    assert evaluate("'\\n'") == ord("\n")
    assert evaluate("'\\101'") == ord("A")


def test_missing_apostrophe_is_reported():
    context = ExpressionContext()
    value, _ = parse_primary("'AB", 0, context)
    assert value == ord("A")
    assert [m.text for m in context.diagnostics.errors] == ["Missing apostrophe"]


def test_read_character_bad_escape():
    context = ExpressionContext()
    value, pos = read_character("\\q", 0, context)
    assert value == ord("\\")
    assert pos == 1
    assert len(context.diagnostics.errors) == 1


def test_read_character_plain():
    context = ExpressionContext()
    assert read_character("Z", 0, context) == (ord("Z"), 1)


def test_labels():
    context = ExpressionContext()
    context.symbols.define("START", 0x100)
    assert evaluate("START+1", context) == evaluate("0x101")


def test_local_label_uses_global_prefix():
    context = ExpressionContext(global_label="MAIN")
    context.symbols.define("MAIN.LOOP", 77)
    assert evaluate(".LOOP", context) == 77


def test_undefined_label_first_pass_is_silent():
    context = ExpressionContext(step=0)
    assert evaluate("FOO", context) == 0
    assert context.undefined == 1
    assert context.undefined_name == "FOO"
    assert len(context.diagnostics) == 0


def test_undefined_label_later_pass_is_error():
    context = ExpressionContext(step=1, line=3)
    evaluate("FOO", context)
    assert [m.text for m in context.diagnostics.errors] == ["Undefined label 'FOO' on line 3"]


def test_undefined_word_is_not_reported():
    context = ExpressionContext(step=1)
    evaluate("WORD", context)
    assert len(context.diagnostics) == 0
    assert context.undefined == 1


def test_registers_are_rejected():
    with pytest.raises(ExpressionError):
        evaluate("AX")


def test_offset():
    context = ExpressionContext()
    context.symbols.define("DATA", 0x200)
    assert evaluate("OFFSET DATA", context) == 0x200


@pytest.mark.parametrize("text", ["OFFSET 5", "OFFSET OFFSET X", "OFFSET"])
def test_bad_offset(text):
    with pytest.raises(ExpressionError):
        evaluate(text)


def test_current_and_start_address():
    context = ExpressionContext(address=0x120, start_address=0x100)
    assert evaluate("$", context) == 0x120
    assert evaluate("$$", context) == 0x100


@pytest.mark.parametrize("text", ["12X", "(1+2", "1 2", ""])
def test_malformed(text):
    with pytest.raises(ExpressionError):
        evaluate(text)


def test_comment_after_expression_is_allowed():
    assert evaluate("5 ; five") == 5


def test_parse_expression_stops_at_comma():
    text = "1+2, 3"
    value, pos = parse_expression(text, 0, ExpressionContext())
    assert value == evaluate("1+2")
    assert pos == text.index(",")


def test_skip_spaces():
    assert skip_spaces("  \tx", 0) == 3
    assert skip_spaces("x", 0) == 0


def test_symbol_table():
    table = SymbolTable()
    table.define("A", 1)
    table.define("A", 2)
    assert table.find("A") == 2
    assert table.find("B") is None
    assert "A" in table
    assert "B" not in table
    assert len(table) == 1


def test_diagnostics_collects_and_clears():
    diagnostics = Diagnostics()
    diagnostics.error("bad", 1)
    diagnostics.warn("odd", 2)
    assert len(diagnostics) == 2
    assert [m.level for m in diagnostics] == [Level.ERROR, Level.WARNING]
    assert [m.text for m in diagnostics.warnings] == ["odd"]
    diagnostics.clear()
    assert len(diagnostics) == 0