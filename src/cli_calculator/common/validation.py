"""Parse and validate raw console input."""
import math
from typing import Dict, List, Tuple

from cli_calculator.common.constants import (
    ADVANCED_OPERATIONS,
    BASIC_OPERATIONS,
    MAX_NUMBER_INPUT_VALUE,
    MAX_PRECISION,
    MIN_NUMBER_INPUT_VALUE,
    MIN_PRECISION,
    MenuOption,
    Operation,
)
from cli_calculator.common.errors import ValidationError


YES_ANSWERS = {"y", "yes", "1", "true"}
NO_ANSWERS = {"n", "no", "0", "false"}

# Batch lines may name an operation by symbol or by a short keyword
BATCH_OPERATION_ALIASES: Dict[str, Operation] = {
    "+": Operation.ADDITION,
    "add": Operation.ADDITION,
    "-": Operation.SUBTRACTION,
    "sub": Operation.SUBTRACTION,
    "*": Operation.MULTIPLICATION,
    "x": Operation.MULTIPLICATION,
    "mul": Operation.MULTIPLICATION,
    "/": Operation.DIVISION,
    "div": Operation.DIVISION,
    "^": Operation.POWER,
    "**": Operation.POWER,
    "pow": Operation.POWER,
    "√": Operation.SQUARE_ROOT,
    "sqrt": Operation.SQUARE_ROOT,
    "%": Operation.MODULO,
    "mod": Operation.MODULO,
    "!": Operation.FACTORIAL,
    "fact": Operation.FACTORIAL,
}


def _parse_choice(field: str, text: str, low: int, high: int) -> int:
    trimmed = text.strip()
    try:
        number = int(trimmed)
    except ValueError:
        raise ValidationError(field, trimmed, "not a valid number") from None
    if number < low or number > high:
        raise ValidationError(field, trimmed, f"must be between {low} and {high}")
    return number


def validate_menu_option(text: str) -> MenuOption:
    """
    Parse a main menu choice.

    :param str text: Raw user input

    :return: Selected menu option
    :rtype: MenuOption
    :raises ValidationError: If the input is not an integer between 1 and 7
    """
    return MenuOption(_parse_choice("menu_option", text, min(MenuOption).value, max(MenuOption).value))


def validate_basic_operation(text: str) -> Operation:
    """Map a basic calculator choice (1-4) to ``+ - * /``."""
    number = _parse_choice("operation", text, 1, len(BASIC_OPERATIONS))
    return BASIC_OPERATIONS[number - 1]


def validate_advanced_operation(text: str) -> Operation:
    """Map an advanced calculator choice (1-4) to ``^ √ % !``."""
    number = _parse_choice("operation", text, 1, len(ADVANCED_OPERATIONS))
    return ADVANCED_OPERATIONS[number - 1]


def validate_number(text: str) -> float:
    """
    Parse a numeric operand.

    :param str text: Raw user input

    :return: Parsed number
    :rtype: float
    :raises ValidationError: If the input is empty, not a number or outside the safe range
    """
    trimmed = text.strip()
    if not trimmed:
        raise ValidationError("number", trimmed, "cannot be empty")

    try:
        number = float(trimmed)
    except ValueError:
        raise ValidationError("number", trimmed, "not a valid number") from None

    if math.isnan(number) or number > MAX_NUMBER_INPUT_VALUE or number < MIN_NUMBER_INPUT_VALUE:
        raise ValidationError("number", trimmed, "value out of allowed range")
    return number


def validate_precision(precision: int) -> None:
    """Reject a precision outside 0-15."""
    if precision < MIN_PRECISION or precision > MAX_PRECISION:
        raise ValidationError(
            "precision", str(precision), f"must be between {MIN_PRECISION} and {MAX_PRECISION}"
        )


def validate_yes_no(text: str) -> bool:
    """
    Parse a yes/no answer.

    :param str text: Raw user input

    :return: True for yes, False for no
    :rtype: bool
    :raises ValidationError: If the answer is neither
    """
    answer = text.strip().lower()
    if answer in YES_ANSWERS:
        return True
    if answer in NO_ANSWERS:
        return False
    raise ValidationError("yes_no", text, "must be yes/no, y/n, or true/false")


def parse_batch_line(text: str) -> Tuple[Operation, List[float]]:
    """
    Parse one batch calculation line.

    A line is an operation symbol or keyword followed by space-separated
    operands, e.g. ``+ 1 2 3``, ``sqrt 16`` or ``mod 10 3``.

    :param str text: Raw batch line

    :return: Tuple of (operation, operands)
    :rtype: Tuple[Operation, List[float]]
    :raises ValidationError: If the operation is unknown or an operand is invalid
    """
    tokens = text.split()
    if not tokens:
        raise ValidationError("batch_line", text, "cannot be empty")

    keyword = tokens[0].lower()
    operation = BATCH_OPERATION_ALIASES.get(keyword)
    if operation is None:
        raise ValidationError("operation", tokens[0], "unknown operation")
    if len(tokens) == 1:
        raise ValidationError("operands", "none", "at least one operand is required")

    return operation, [validate_number(token) for token in tokens[1:]]
