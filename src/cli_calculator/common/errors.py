"""Error taxonomy shared by the calculator, history and configuration layers."""
from typing import List, Optional, Sequence


class SentinelError(Exception):
    """Predefined error value identifying a well-known failure condition."""


# Sentinel errors, compared by identity through ``is_caused_by``
ERR_INVALID_INPUT = SentinelError("invalid input provided")
ERR_DIVISION_BY_ZERO = SentinelError("division by zero")
ERR_NEGATIVE_SQUARE_ROOT = SentinelError("cannot calculate square root of negative number")
ERR_INVALID_OPERATION = SentinelError("invalid operation")
ERR_OUT_OF_RANGE = SentinelError("value out of allowed range")
ERR_FILE_NOT_FOUND = SentinelError("file not found")
ERR_FILE_READ_FAILED = SentinelError("failed to read file")
ERR_FILE_WRITE_FAILED = SentinelError("failed to write file")
ERR_CONFIG_INVALID = SentinelError("configuration is invalid")
ERR_HISTORY_FULL = SentinelError("history is full")


class CalculatorError(Exception):
    """
    Base class of every error surfaced by the calculator.

    Concrete errors are always one of :class:`ValidationError`,
    :class:`CalculationError` or :class:`FileError`, so callers can branch on
    the kind with ``isinstance`` instead of matching messages.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause: Optional[BaseException] = cause

    def root_cause(self) -> BaseException:
        """
        Follow the chain of causes down to the innermost error.

        :return: The deepest cause, or the error itself when it has no cause
        :rtype: BaseException
        """
        current: BaseException = self
        while isinstance(current, CalculatorError) and current.cause is not None:
            current = current.cause
        return current


class ValidationError(CalculatorError):
    """Bad user input detected before any calculation takes place."""

    def __init__(self, field: str, value: str, message: str) -> None:
        self.field = field
        self.value = value
        self.message = message
        super().__init__(f"validation error for {field}='{value}': {message}")


class CalculationError(CalculatorError):
    """Arithmetic-domain failure raised by the calculation engine."""

    def __init__(
        self,
        operation: str,
        operands: Sequence[float],
        reason: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.operation = operation
        self.operands: List[float] = list(operands)
        self.reason = reason
        if cause is not None:
            message = f"calculation error in {operation}: {reason} (caused by: {cause})"
        else:
            message = f"calculation error in {operation}: {reason}"
        super().__init__(message, cause)


class FileError(CalculatorError):
    """I/O or decoding failure on a persisted file."""

    def __init__(self, path: str, operation: str, cause: BaseException) -> None:
        self.path = str(path)
        self.operation = operation
        super().__init__(f"file error during {operation} on '{path}': {cause}", cause)


def is_caused_by(err: BaseException, sentinel: SentinelError) -> bool:
    """
    Tell whether ``sentinel`` appears anywhere in the cause chain of ``err``.

    :param BaseException err: Error to inspect
    :param SentinelError sentinel: Sentinel to look for

    :return: True if the sentinel is the error itself or one of its causes
    :rtype: bool
    """
    current: Optional[BaseException] = err
    while current is not None:
        if current is sentinel:
            return True
        current = current.cause if isinstance(current, CalculatorError) else None
    return False
