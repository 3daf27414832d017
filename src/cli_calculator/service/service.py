"""Menu-driven orchestration of the calculator, its history and its settings."""
import logging
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from cli_calculator.common.constants import MenuOption, Operation
from cli_calculator.common.errors import CalculationError, FileError, ValidationError
from cli_calculator.common.validation import (
    parse_batch_line,
    validate_advanced_operation,
    validate_basic_operation,
    validate_menu_option,
    validate_number,
    validate_precision,
)
from cli_calculator.config.config import CalculatorConfig
from cli_calculator.engine.calculator import Calculator
from cli_calculator.history.history import History
from cli_calculator.service.console import Console


class CalculatorService(BaseModel):
    """
    Interactive calculator session.

    Lifecycle:
        - Created from a loaded configuration, loading the saved history
        - Runs the main menu until the user exits or input is closed
        - Persists history and settings on exit when auto-save is enabled

    Errors never end the session: invalid input is reported and re-prompted,
    calculation errors are reported and recorded, file errors are logged.
    """

    # Allow arbitrary types like logging.Logger
    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: CalculatorConfig = Field(..., description="Session settings")
    history: History = Field(..., description="Calculation history")
    console: Console = Field(default_factory=Console, description="Console input and output")
    logger: logging.Logger = Field(..., description="Application logger")

    @classmethod
    def create(
        cls,
        config: CalculatorConfig,
        logger: logging.Logger,
        console: Optional[Console] = None,
    ) -> "CalculatorService":
        """
        Build a session and load the saved history.

        A history that cannot be loaded is logged and replaced by an empty one.

        :param CalculatorConfig config: Session settings
        :param logging.Logger logger: Application logger
        :param Console console: Console, standard input and output when omitted

        :return: Ready-to-run session
        :rtype: CalculatorService
        """
        history = History(
            file_path=config.resolved_history_path,
            max_size=config.max_history,
            logger=logger,
        )
        try:
            history.load()
        except FileError as exc:
            logger.warning(f"🗂️❌ Failed to load history: {exc}")
            history.clear()

        if console is None:
            console = Console(color=config.color_output)
        return cls(config=config, history=history, console=console, logger=logger)

    def _handlers(self) -> Dict[MenuOption, Callable[[], bool]]:
        # Each handler returns True when the session must end
        return {
            MenuOption.BASIC_CALCULATOR: self.handle_basic_calculator,
            MenuOption.ADVANCED_CALCULATOR: self.handle_advanced_calculator,
            MenuOption.BATCH_CALCULATIONS: self.handle_batch_calculations,
            MenuOption.HISTORY: self.handle_history,
            MenuOption.SETTINGS: self.handle_settings,
            MenuOption.HELP: self.handle_help,
            MenuOption.EXIT: self.handle_exit,
        }

    def run(self) -> None:
        """Run the main menu loop until the user exits or input is closed."""
        self.logger.info("🧮 Session started")
        if self.config.show_welcome:
            self.console.welcome()

        handlers = self._handlers()
        while True:
            self.console.main_menu()
            try:
                choice = self.console.prompt("Enter your choice (1-7): ")
                try:
                    option = validate_menu_option(choice)
                except ValidationError as exc:
                    self.console.error(exc)
                    continue

                self.logger.debug(f"Handling menu option: {option.value}")
                if handlers[option]():
                    break
            except EOFError:
                self.logger.info("🔌 Input closed, ending session")
                self.persist()
                break

        self.logger.info("🧮 Session ended")

    # Calculations

    def perform_calculation(self, operation: Operation, operands: List[float]) -> Optional[float]:
        """
        Calculate, display and record one operation.

        :param Operation operation: Operation to perform
        :param List[float] operands: Operands in input order

        :return: The result, or None when the calculation failed
        :rtype: Optional[float]
        """
        expression = Calculator.build_expression(operation, operands)
        try:
            result = Calculator.calculate(operation, operands)
        except (ValidationError, CalculationError) as exc:
            self.logger.warning(f"🧮❌ Calculation failed: {expression}: {exc}")
            if self.config.save_history:
                self.history.add_error(str(operation), expression, exc)
                if self.config.auto_save:
                    self.save_history()
            self.console.error(exc)
            return None

        formatted = Calculator.format_result(result, self.config.precision)
        self.console.result(str(operation), expression, formatted)

        if self.config.save_history:
            self.history.add_success(str(operation), expression, result)
            if self.config.auto_save:
                self.save_history()

        self.logger.info(f"🧮✅ Calculation completed: {expression} = {formatted}")
        return result

    def read_number(self, prompt: str) -> float:
        """Prompt until a valid number is entered."""
        while True:
            try:
                return validate_number(self.console.prompt(prompt))
            except ValidationError as exc:
                self.console.error(exc)

    def read_operands(self, operation: Operation) -> List[float]:
        """
        Collect the operands required by ``operation``.

        Reducing operations read a space-separated list on a single line.
        """
        if operation.is_unary:
            return [self.read_number("Enter number: ")]

        minimum, maximum = operation.arity
        if maximum is None:
            while True:
                text = self.console.prompt("Enter numbers separated by spaces: ")
                try:
                    operands = [validate_number(token) for token in text.split()]
                    if len(operands) < minimum:
                        raise ValidationError("operands", "none", "at least one operand is required")
                    return operands
                except ValidationError as exc:
                    self.console.error(exc)

        return [
            self.read_number("Enter first number: "),
            self.read_number("Enter second number: "),
        ]

    def _calculator_submenu(self, show_menu: Callable[[], None], parse: Callable[[str], Operation]) -> bool:
        if self.config.clear_screen:
            self.console.clear()
        show_menu()

        while True:
            choice = self.console.prompt("Enter operation (1-4) or 0 to go back: ")
            if choice == "0":
                return False
            try:
                operation = parse(choice)
            except ValidationError as exc:
                self.console.error(exc)
                continue

            self.perform_calculation(operation, self.read_operands(operation))
            self.console.pause()
            return False

    def handle_basic_calculator(self) -> bool:
        return self._calculator_submenu(self.console.basic_menu, validate_basic_operation)

    def handle_advanced_calculator(self) -> bool:
        return self._calculator_submenu(self.console.advanced_menu, validate_advanced_operation)

    def handle_batch_calculations(self) -> bool:
        """
        Evaluate one calculation per line until an empty line is entered.

        Lines read ``<operation> <operand> ...``, e.g. ``+ 1 2 3`` or ``sqrt 16``.
        """
        self.console.write("BATCH CALCULATIONS:")
        self.console.divider()
        self.console.info("Enter one calculation per line, e.g. '+ 1 2 3' or 'sqrt 16'.")
        self.console.info("Finish with an empty line.")

        succeeded = 0
        failed = 0
        line_number = 0
        while True:
            line = self.console.prompt(f"[{line_number + 1}] ")
            if not line:
                break
            line_number += 1

            try:
                operation, operands = parse_batch_line(line)
            except ValidationError as exc:
                self.logger.warning(f"🧾❌ Batch line {line_number} rejected: {exc}")
                self.console.error(exc)
                failed += 1
                continue

            if self.perform_calculation(operation, operands) is None:
                failed += 1
            else:
                succeeded += 1

        self.console.divider()
        self.console.info(f"Batch complete: {succeeded} succeeded, {failed} failed")
        self.logger.info(f"🧾 Batch finished: {succeeded} succeeded, {failed} failed")
        return False

    # History, settings, help and exit

    def handle_history(self) -> bool:
        if self.config.clear_screen:
            self.console.clear()

        self.console.write("CALCULATION HISTORY:")
        self.console.divider()

        entries = self.history.get_all()
        if not entries:
            self.console.info("No calculation history available.")
            self.console.divider()
            self.console.pause()
            return False

        for i, entry in enumerate(entries, start=1):
            status = "✓" if entry.success else "✗"
            when = entry.timestamp.strftime("%H:%M:%S") if entry.timestamp else "--:--:--"
            if entry.success:
                outcome = Calculator.format_result(entry.result, self.config.precision)
            else:
                outcome = f"Error: {entry.error}"
            self.console.write(f"{i}. [{status}] {when}: {entry.expression} = {outcome}")

        stats = self.history.get_statistics()
        self.console.write()
        self.console.divider()
        self.console.write(
            f"Total: {stats.total_calculations} | Successful: {stats.successful_count} "
            f"| Failed: {stats.failed_count}"
        )
        if stats.successful_count:
            average = Calculator.format_result(stats.average_result, self.config.precision)
            self.console.write(f"Average result: {average}")
        if stats.most_used_operation:
            self.console.write(f"Most used operation: {stats.most_used_operation}")
        self.console.divider()

        if self.console.confirm("Clear history?"):
            self.history.clear()
            self.console.success("History cleared.")
            if self.config.auto_save:
                self.save_history()
        return False

    def handle_settings(self) -> bool:
        """Show the settings and toggle or edit them one at a time."""
        toggles = {
            "2": "save_history",
            "3": "auto_save",
            "4": "clear_screen",
            "5": "confirm_exit",
            "6": "color_output",
        }

        while True:
            if self.config.clear_screen:
                self.console.clear()
            self.console.write("SETTINGS:")
            self.console.divider()
            self.console.write(f"1. Precision: {self.config.precision} decimal places")
            self.console.write(f"2. Save History: {self.config.save_history}")
            self.console.write(f"3. Auto-save: {self.config.auto_save}")
            self.console.write(f"4. Clear Screen: {self.config.clear_screen}")
            self.console.write(f"5. Confirm Exit: {self.config.confirm_exit}")
            self.console.write(f"6. Color Output: {self.config.color_output}")
            self.console.write(f"7. Max History: {self.config.max_history} entries")
            self.console.write("0. Back to Main Menu")
            self.console.divider()

            choice = self.console.prompt("Select a setting to change (0-7): ")
            if choice == "0":
                return False

            try:
                if choice == "1":
                    precision = self._read_int("New precision (0-15): ", "precision")
                    validate_precision(precision)
                    self.config.precision = precision
                elif choice in toggles:
                    name = toggles[choice]
                    setattr(self.config, name, not getattr(self.config, name))
                    self.console.color = self.config.color_output
                elif choice == "7":
                    size = self._read_int("New maximum history size (0-10000): ", "max_history")
                    self.history.resize(size)
                    self.config.max_history = size
                else:
                    raise ValidationError("setting", choice, "must be between 0 and 7")
            except ValidationError as exc:
                self.console.error(exc)
                continue
            except ValueError as exc:
                self.console.error(ValidationError("max_history", choice, str(exc)))
                continue

            self.logger.debug(f"⚙️ Setting {choice} changed")
            self.console.success("Setting updated.")
            if self.config.auto_save:
                self.save_config()

    def _read_int(self, prompt: str, field: str) -> int:
        text = self.console.prompt(prompt)
        try:
            return int(text)
        except ValueError:
            raise ValidationError(field, text, "not a valid number") from None

    def handle_help(self) -> bool:
        if self.config.clear_screen:
            self.console.clear()
        self.console.help()
        self.console.pause()
        return False

    def handle_exit(self) -> bool:
        if self.config.confirm_exit and not self.console.confirm("Are you sure you want to exit?"):
            return False

        self.persist()
        self.console.write()
        self.console.write("Thank you for using CLI Calculator!")
        return True

    # Persistence

    def save_history(self) -> None:
        """Save history, logging instead of raising on failure."""
        try:
            self.history.save()
        except FileError as exc:
            self.logger.warning(f"💾❌ Failed to save history: {exc}")

    def save_config(self) -> None:
        """Save settings, logging instead of raising on failure."""
        try:
            self.config.save()
        except FileError as exc:
            self.logger.warning(f"💾❌ Failed to save configuration: {exc}")

    def persist(self) -> None:
        """Persist history and settings according to the auto-save settings."""
        if self.config.auto_save and self.config.save_history:
            self.save_history()
        if self.config.auto_save:
            self.save_config()
