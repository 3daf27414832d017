"""Test the console input validators."""
import pytest

from cli_calculator.common.constants import MenuOption, Operation
from cli_calculator.common.errors import ValidationError
from cli_calculator.common.validation import (
    parse_batch_line,
    validate_advanced_operation,
    validate_basic_operation,
    validate_menu_option,
    validate_number,
    validate_precision,
    validate_yes_no,
)


@pytest.mark.parametrize("text,expected", [
    ("1", MenuOption.BASIC_CALCULATOR),
    ("7", MenuOption.EXIT),
    (" 3 ", MenuOption.BATCH_CALCULATIONS),
])
def test_validate_menu_option(text, expected) -> None:
    """Menu choices 1-7 map to their option."""
    assert validate_menu_option(text) == expected


@pytest.mark.parametrize("text", ["0", "8", "abc", ""])
def test_validate_menu_option_invalid(text) -> None:
    """Out-of-range or non-numeric menu choices are rejected."""
    with pytest.raises(ValidationError):
        validate_menu_option(text)


@pytest.mark.parametrize("text,expected", [
    ("1", Operation.ADDITION),
    ("2", Operation.SUBTRACTION),
    ("3", Operation.MULTIPLICATION),
    ("4", Operation.DIVISION),
])
def test_validate_basic_operation(text, expected) -> None:
    """Basic calculator choices map to + - * /."""
    assert validate_basic_operation(text) == expected


@pytest.mark.parametrize("text,expected", [
    ("1", Operation.POWER),
    ("2", Operation.SQUARE_ROOT),
    ("3", Operation.MODULO),
    ("4", Operation.FACTORIAL),
])
def test_validate_advanced_operation(text, expected) -> None:
    """Advanced calculator choices map to ^ √ % !."""
    assert validate_advanced_operation(text) == expected


@pytest.mark.parametrize("text", ["0", "5", "xyz"])
def test_validate_operation_invalid(text) -> None:
    """Operation choices outside 1-4 are rejected."""
    with pytest.raises(ValidationError):
        validate_basic_operation(text)
    with pytest.raises(ValidationError):
        validate_advanced_operation(text)


@pytest.mark.parametrize("text,expected", [
    ("42", 42.0),
    ("-15", -15.0),
    ("3.14", 3.14),
    ("0", 0.0),
    ("1.5e2", 150.0),
    (" 10.5 ", 10.5),
])
def test_validate_number(text, expected) -> None:
    """Numbers are parsed as floats."""
    assert validate_number(text) == expected


@pytest.mark.parametrize("text", ["abc", "", ".", "1.2.3", "nan", "inf", "2e15"])
def test_validate_number_invalid(text) -> None:
    """Empty, malformed, non-finite and out-of-range numbers are rejected."""
    with pytest.raises(ValidationError):
        validate_number(text)


@pytest.mark.parametrize("precision", [0, 5, 15])
def test_validate_precision(precision) -> None:
    """Precisions 0-15 are accepted."""
    validate_precision(precision)


@pytest.mark.parametrize("precision", [-1, 16])
def test_validate_precision_invalid(precision) -> None:
    """Precisions outside 0-15 are rejected."""
    with pytest.raises(ValidationError):
        validate_precision(precision)


@pytest.mark.parametrize("text,expected", [
    ("yes", True), ("YES", True), ("y", True), ("1", True), ("true", True),
    ("no", False), ("NO", False), ("n", False), ("0", False), ("false", False),
])
def test_validate_yes_no(text, expected) -> None:
    """Yes/no answers are case-insensitive."""
    assert validate_yes_no(text) is expected


def test_validate_yes_no_invalid() -> None:
    """Anything else is rejected."""
    with pytest.raises(ValidationError):
        validate_yes_no("maybe")


@pytest.mark.parametrize("text,operation,operands", [
    ("+ 1 2 3", Operation.ADDITION, [1.0, 2.0, 3.0]),
    ("sub 10 -4", Operation.SUBTRACTION, [10.0, -4.0]),
    ("SQRT 16", Operation.SQUARE_ROOT, [16.0]),
    ("mod 10 3", Operation.MODULO, [10.0, 3.0]),
    ("! 5", Operation.FACTORIAL, [5.0]),
])
def test_parse_batch_line(text, operation, operands) -> None:
    """Batch lines name an operation then its operands."""
    assert parse_batch_line(text) == (operation, operands)


@pytest.mark.parametrize("text", ["", "log 10", "+", "+ 1 abc"])
def test_parse_batch_line_invalid(text) -> None:
    """Unknown operations, missing or invalid operands are rejected."""
    with pytest.raises(ValidationError):
        parse_batch_line(text)
