"""Console presentation: menus, prompts and coloured status lines."""
import sys
from typing import Any, Callable

from pydantic import BaseModel, Field

from cli_calculator.common.constants import APP_NAME, APP_VERSION
from cli_calculator.common.errors import ValidationError
from cli_calculator.common.validation import validate_yes_no


DIVIDER = "═" * 56

RESET = "\033[0m"
GREEN = "\033[32m"
RED = "\033[31m"
YELLOW = "\033[33m"
CYAN = "\033[36m"


class Console(BaseModel):
    """
    Thin wrapper around standard input and output.

    Input is read through ``input_fn`` and output goes to ``stream`` so the
    menus can be driven by scripted input in tests.
    """

    input_fn: Callable[[str], str] = Field(default=input, description="Reads one line after a prompt")
    stream: Any = Field(default_factory=lambda: sys.stdout, description="Output stream (text file object)")
    color: bool = Field(default=False, description="Wrap status lines in ANSI colours")

    def write(self, text: str = "") -> None:
        print(text, file=self.stream)

    def _status(self, symbol: str, colour: str, message: str) -> None:
        if self.color:
            self.write(f"{colour}{symbol} {message}{RESET}")
        else:
            self.write(f"{symbol} {message}")

    def success(self, message: str) -> None:
        self._status("✓", GREEN, message)

    def error(self, err: BaseException) -> None:
        self._status("✗", RED, f"Error: {err}")

    def warning(self, message: str) -> None:
        self._status("⚠", YELLOW, message)

    def info(self, message: str) -> None:
        self._status("ℹ", CYAN, message)

    def divider(self) -> None:
        self.write(DIVIDER)

    def clear(self) -> None:
        # ANSI cursor home + clear screen
        self.stream.write("\033[H\033[2J")
        self.stream.flush()

    def prompt(self, message: str) -> str:
        """
        Read one line of input after showing ``message``.

        :raises EOFError: If the input is closed
        """
        return self.input_fn(message).strip()

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question until a valid answer is given."""
        while True:
            try:
                return validate_yes_no(self.prompt(f"{message} (y/n): "))
            except ValidationError as exc:
                self.error(exc)

    def pause(self) -> None:
        self.prompt("\nPress Enter to continue...")

    def result(self, operation: str, expression: str, result: str) -> None:
        self.write()
        self.divider()
        self.success(f"{operation}: {expression} = {result}")
        self.divider()

    def welcome(self) -> None:
        self.write("╔" + "═" * 54 + "╗")
        self.write(f"║{f'{APP_NAME} v{APP_VERSION}':^54}║")
        self.write("╠" + "═" * 54 + "╣")
        self.write("║  A simple yet powerful command-line calculator       ║")
        self.write("║  with support for basic and advanced operations      ║")
        self.write("╚" + "═" * 54 + "╝")
        self.write()

    def main_menu(self) -> None:
        self.write("MAIN MENU:")
        self.divider()
        self.write("1. Basic Calculator (+, -, *, /)")
        self.write("2. Advanced Calculator (^, √, %, !)")
        self.write("3. Batch Calculations (multiple operations)")
        self.write("4. Calculation History")
        self.write("5. Settings")
        self.write("6. Help & Instructions")
        self.write("7. Exit")
        self.divider()

    def basic_menu(self) -> None:
        self.write("BASIC CALCULATOR MENU:")
        self.divider()
        self.write("1. Addition (+)")
        self.write("2. Subtraction (-)")
        self.write("3. Multiplication (*)")
        self.write("4. Division (/)")
        self.write("0. Back to Main Menu")
        self.divider()

    def advanced_menu(self) -> None:
        self.write("ADVANCED CALCULATOR MENU:")
        self.divider()
        self.write("1. Power (x^y)")
        self.write("2. Square Root (√x)")
        self.write("3. Modulo (x % y)")
        self.write("4. Factorial (x!)")
        self.write("0. Back to Main Menu")
        self.divider()

    def help(self) -> None:
        self.write("HELP & INSTRUCTIONS:")
        self.divider()
        self.write("BASIC OPERATIONS:")
        self.write("  Addition       : Adds two or more numbers")
        self.write("  Subtraction    : Subtracts the following numbers from the first")
        self.write("  Multiplication : Multiplies two or more numbers")
        self.write("  Division       : Divides first number by second")
        self.write()
        self.write("ADVANCED OPERATIONS:")
        self.write("  Power          : Raises first number to power of second")
        self.write("  Square Root    : Calculates square root of a number")
        self.write("  Modulo         : Remainder of division, with the sign of the dividend")
        self.write("  Factorial      : Calculates factorial (n!), n from 0 to 170")
        self.write()
        self.write("BATCH CALCULATIONS:")
        self.write("  One calculation per line, e.g. '+ 1 2 3', 'sqrt 16', 'mod 10 3'")
        self.write("  Finish with an empty line")
        self.write()
        self.write("FEATURES:")
        self.write("  - History tracking of all calculations")
        self.write("  - Configurable precision for results")
        self.write("  - Persistent settings saved to disk")
        self.write("  - Error handling with detailed messages")
        self.divider()
