"""Validate operands and perform calculator operations."""
from collections.abc import Callable as ABCCallable
from functools import reduce
import math
import operator
from typing import Callable, Dict, List, Sequence

from cli_calculator.common.constants import (
    MAX_FACTORIAL_INPUT,
    MAX_NUMBER_INPUT_VALUE,
    MIN_NUMBER_INPUT_VALUE,
    Operation,
)
from cli_calculator.common.errors import (
    ERR_DIVISION_BY_ZERO,
    ERR_INVALID_INPUT,
    ERR_INVALID_OPERATION,
    ERR_NEGATIVE_SQUARE_ROOT,
    ERR_OUT_OF_RANGE,
    CalculationError,
    ValidationError,
)


# Type alias for operation handlers (taking the operand list, returning a float)
HandlerFn: ABCCallable[[List[float]], float] = Callable[[List[float]], float]


def _add(operands: List[float]) -> float:
    return reduce(operator.add, operands, 0.0)


def _subtract(operands: List[float]) -> float:
    # First operand minus the sum of the others
    return operands[0] - reduce(operator.add, operands[1:], 0.0)


def _multiply(operands: List[float]) -> float:
    return reduce(operator.mul, operands, 1.0)


def _divide(operands: List[float]) -> float:
    a, b = operands
    if b == 0:
        raise CalculationError("Division", [a, b], "division by zero", ERR_DIVISION_BY_ZERO)

    result = a / b
    if math.isinf(result):
        raise CalculationError("Division", [a, b], "result is infinity (overflow)")
    return result


def _power(operands: List[float]) -> float:
    """
    Raise ``a`` to the power ``b`` with IEEE semantics.

    ``math.pow`` raises where IEEE ``pow`` returns a special value; those
    cases are mapped back to NaN or a signed infinity.
    """
    a, b = operands
    odd_exponent = b.is_integer() and int(b) % 2 == 1
    try:
        return math.pow(a, b)
    except OverflowError:
        return -math.inf if a < 0 and odd_exponent else math.inf
    except ValueError:
        if a == 0:
            # Zero to a negative power
            return math.copysign(math.inf, a) if odd_exponent else math.inf
        # Negative base with a fractional exponent
        return math.nan


def _square_root(operands: List[float]) -> float:
    (a,) = operands
    if a < 0:
        raise CalculationError(
            "Square Root",
            [a],
            "cannot calculate square root of negative number",
            ERR_NEGATIVE_SQUARE_ROOT,
        )
    return math.sqrt(a)


def _modulo(operands: List[float]) -> float:
    a, b = operands
    if b == 0:
        raise CalculationError(
            "Modulo", [a, b], "division by zero in modulo operation", ERR_DIVISION_BY_ZERO
        )
    # fmod keeps the sign of the dividend, unlike Python's % operator
    return math.fmod(a, b)


def _factorial(operands: List[float]) -> float:
    (n,) = operands
    if not n.is_integer():
        raise CalculationError("Factorial", [n], "factorial requires an integer", ERR_INVALID_INPUT)
    if n < 0:
        raise CalculationError(
            "Factorial", [n], "factorial of negative number is undefined", ERR_INVALID_INPUT
        )
    if n > MAX_FACTORIAL_INPUT:
        raise CalculationError(
            "Factorial", [n], "factorial result would overflow (too large)", ERR_OUT_OF_RANGE
        )

    result = 1.0
    for i in range(2, int(n) + 1):
        result *= i
    return result


# Mapping of operations to their handler
HANDLERS: Dict[Operation, HandlerFn] = {
    Operation.ADDITION: _add,
    Operation.SUBTRACTION: _subtract,
    Operation.MULTIPLICATION: _multiply,
    Operation.DIVISION: _divide,
    Operation.POWER: _power,
    Operation.SQUARE_ROOT: _square_root,
    Operation.MODULO: _modulo,
    Operation.FACTORIAL: _factorial,
}


class Calculator:
    """
    Stateless calculation engine.

    Design constraints:
        - Pure functions only, no I/O and no logging
        - Operands are fully validated before any arithmetic runs
        - Every failure is a ValidationError or a CalculationError

    Supported operations:
        - Addition, Subtraction, Multiplication: one or more operands, reduced left to right
        - Division, Power, Modulo: exactly two operands
        - Square Root, Factorial: exactly one operand
    """

    @staticmethod
    def validate(operation: Operation, operands: Sequence[float]) -> None:
        """
        Check operand count and operand values for an operation.

        :param Operation operation: Requested operation
        :param Sequence[float] operands: Operands in input order

        :raises ValidationError: If there are no operands, the count does not match
            the operation, or an operand is NaN, infinite or out of the safe range
        """
        if not operands:
            raise ValidationError("operands", "none", "at least one operand is required")

        minimum, maximum = operation.arity
        count = len(operands)
        if count < minimum or (maximum is not None and count > maximum):
            if minimum == maximum:
                expected = f"exactly {minimum}"
            else:
                expected = f"at least {minimum}"
            raise ValidationError(
                "operands",
                str(count),
                f"{operation} requires {expected} operand(s), got {count}",
            )

        for i, value in enumerate(operands):
            if math.isnan(value):
                raise ValidationError(f"operand[{i}]", "NaN", "operand cannot be NaN")
            if math.isinf(value):
                raise ValidationError(f"operand[{i}]", "Inf", "operand cannot be infinity")
            if value > MAX_NUMBER_INPUT_VALUE or value < MIN_NUMBER_INPUT_VALUE:
                raise ValidationError(
                    f"operand[{i}]",
                    f"{value:f}",
                    f"operand must be between {MIN_NUMBER_INPUT_VALUE:e} and {MAX_NUMBER_INPUT_VALUE:e}",
                )

    @staticmethod
    def calculate(operation: Operation, operands: Sequence[float]) -> float:
        """
        Validate the operands and perform the operation.

        :param Operation operation: Operation to perform
        :param Sequence[float] operands: Operands in input order

        :return: Result of the operation
        :rtype: float
        :raises ValidationError: If the operands are rejected before dispatch
        :raises CalculationError: If the operation fails or is not supported
        """
        values: List[float] = [float(value) for value in operands]
        Calculator.validate(operation, values)

        handler = HANDLERS.get(operation)
        if handler is None:
            raise CalculationError(
                str(operation), values, "unsupported operation", ERR_INVALID_OPERATION
            )
        return handler(values)

    @staticmethod
    def format_result(value: float, precision: int) -> str:
        """
        Format a result with a fixed number of decimal places.

        NaN and infinities are rendered as ``NaN``, ``+Inf`` and ``-Inf``.

        :param float value: Result to format
        :param int precision: Digits after the decimal point (0-15)

        :return: Formatted result
        :rtype: str
        """
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
        return f"{value:.{precision}f}"

    @staticmethod
    def build_expression(operation: Operation, operands: Sequence[float]) -> str:
        """
        Build the human-readable expression recorded in history.

        Examples:
            - Square Root of 16: ``√16.00``
            - Factorial of 5: ``5!``
            - Addition of 1, 2 and 3: ``1.00 + 2.00 + 3.00``

        :param Operation operation: Operation performed
        :param Sequence[float] operands: Operands in input order

        :return: Expression string
        :rtype: str
        """
        if operation is Operation.SQUARE_ROOT and operands:
            return f"√{operands[0]:.2f}"
        if operation is Operation.FACTORIAL and operands:
            return f"{operands[0]:.0f}!"
        if operation is not Operation.UNKNOWN and len(operands) >= 2:
            return f" {operation.symbol} ".join(f"{value:.2f}" for value in operands)
        return f"{operation}({', '.join(str(value) for value in operands)})"
