"""Test the error taxonomy."""
import pytest

from cli_calculator.common.errors import (
    ERR_DIVISION_BY_ZERO,
    ERR_OUT_OF_RANGE,
    CalculationError,
    CalculatorError,
    FileError,
    ValidationError,
    is_caused_by,
)


def test_validation_error_message() -> None:
    """ValidationError keeps its context and formats it."""
    err = ValidationError("precision", "20", "must be between 0 and 15")
    assert err.field == "precision"
    assert err.value == "20"
    assert str(err) == "validation error for precision='20': must be between 0 and 15"


def test_calculation_error_message_with_cause() -> None:
    """CalculationError mentions its cause when it has one."""
    err = CalculationError("Division", [1, 0], "division by zero", ERR_DIVISION_BY_ZERO)
    assert err.operands == [1, 0]
    assert str(err) == "calculation error in Division: division by zero (caused by: division by zero)"


def test_calculation_error_message_without_cause() -> None:
    """CalculationError without cause only shows the reason."""
    err = CalculationError("Division", [1e15, 1e-300], "result is infinity (overflow)")
    assert str(err) == "calculation error in Division: result is infinity (overflow)"
    assert err.root_cause() is err


def test_file_error_message() -> None:
    """FileError names the path and the failed operation."""
    cause = PermissionError("denied")
    err = FileError("/tmp/history.json", "write", cause)
    assert err.path == "/tmp/history.json"
    assert err.operation == "write"
    assert err.root_cause() is cause
    assert str(err) == "file error during write on '/tmp/history.json': denied"


@pytest.mark.parametrize("err", [
    ValidationError("number", "abc", "not a valid number"),
    CalculationError("Modulo", [1, 0], "division by zero", ERR_DIVISION_BY_ZERO),
    FileError("config.json", "read", OSError("boom")),
])
def test_each_error_has_exactly_one_kind(err) -> None:
    """Every error is a CalculatorError of exactly one concrete kind."""
    kinds = [kind for kind in (ValidationError, CalculationError, FileError) if isinstance(err, kind)]
    assert isinstance(err, CalculatorError)
    assert len(kinds) == 1


def test_is_caused_by_follows_the_chain() -> None:
    """is_caused_by finds a sentinel through nested causes."""
    inner = CalculationError("Factorial", [171], "too large", ERR_OUT_OF_RANGE)
    outer = CalculationError("Batch", [171], "batch line failed", inner)
    assert is_caused_by(outer, ERR_OUT_OF_RANGE)
    assert not is_caused_by(outer, ERR_DIVISION_BY_ZERO)
    assert outer.root_cause() is ERR_OUT_OF_RANGE


def test_is_caused_by_without_cause() -> None:
    """Errors without cause only match themselves."""
    err = ValidationError("operands", "none", "at least one operand is required")
    assert not is_caused_by(err, ERR_DIVISION_BY_ZERO)
    assert is_caused_by(ERR_DIVISION_BY_ZERO, ERR_DIVISION_BY_ZERO)
