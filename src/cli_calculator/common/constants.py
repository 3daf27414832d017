"""Application-wide constants and enumerations."""
from enum import Enum, IntEnum
from typing import Optional, Tuple


APP_NAME = "CLI Calculator"
APP_VERSION = "1.0.0"
CONFIG_FILE_NAME = ".calculator_config.json"
HISTORY_FILE_NAME = ".calculator_history.json"
MAX_HISTORY_ENTRIES = 100
DEFAULT_PRECISION = 2

MIN_PRECISION = 0
MAX_PRECISION = 15
MIN_HISTORY_SIZE = 0
MAX_HISTORY_SIZE = 10000

# Safe operand bounds, limiting overflow of intermediate results
MAX_NUMBER_INPUT_VALUE = 1e15
MIN_NUMBER_INPUT_VALUE = -1e15

# Largest n whose factorial fits in a 64-bit float
MAX_FACTORIAL_INPUT = 170


class ExitCode(IntEnum):
    """Process exit status codes."""

    SUCCESS = 0
    ERROR = 1
    INVALID_INPUT = 2
    FILE_ERROR = 3
    CONFIG_ERROR = 4


class MenuOption(IntEnum):
    """Main menu choices."""

    BASIC_CALCULATOR = 1
    ADVANCED_CALCULATOR = 2
    BATCH_CALCULATIONS = 3
    HISTORY = 4
    SETTINGS = 5
    HELP = 6
    EXIT = 7


class Operation(Enum):
    """
    Calculator operations.

    Each member carries its display name and its mathematical symbol.
    """

    UNKNOWN = ("Unknown", "?")
    ADDITION = ("Addition", "+")
    SUBTRACTION = ("Subtraction", "-")
    MULTIPLICATION = ("Multiplication", "*")
    DIVISION = ("Division", "/")
    POWER = ("Power", "^")
    SQUARE_ROOT = ("Square Root", "√")
    MODULO = ("Modulo", "%")
    FACTORIAL = ("Factorial", "!")

    def __init__(self, display_name: str, symbol: str) -> None:
        self.display_name = display_name
        self.symbol = symbol

    def __str__(self) -> str:
        return self.display_name

    @property
    def arity(self) -> Tuple[int, Optional[int]]:
        """
        Accepted operand count as ``(minimum, maximum)``.

        ``maximum`` is None for operations reducing any number of operands.
        """
        if self in (Operation.SQUARE_ROOT, Operation.FACTORIAL):
            return 1, 1
        if self in (Operation.DIVISION, Operation.POWER, Operation.MODULO):
            return 2, 2
        return 1, None

    @property
    def is_unary(self) -> bool:
        return self.arity == (1, 1)


BASIC_OPERATIONS = (
    Operation.ADDITION,
    Operation.SUBTRACTION,
    Operation.MULTIPLICATION,
    Operation.DIVISION,
)

ADVANCED_OPERATIONS = (
    Operation.POWER,
    Operation.SQUARE_ROOT,
    Operation.MODULO,
    Operation.FACTORIAL,
)
