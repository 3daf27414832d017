"""
Command-line entry point of the calculator.

This script:
- Parses and validates the command-line flags
- Loads the configuration, falling back to defaults when it is unusable
- Applies flag overrides and runs the interactive session
- Maps errors escaping the session to process exit codes
"""
import argparse
from pathlib import Path
import sys
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from cli_calculator.common.constants import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_PRECISION,
    MAX_PRECISION,
    MIN_PRECISION,
    ExitCode,
)
from cli_calculator.common.errors import CalculatorError, FileError, ValidationError
from cli_calculator.common.logger import build_logger
from cli_calculator.config.config import CalculatorConfig
from cli_calculator.service.console import Console
from cli_calculator.service.service import CalculatorService


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    precision : int
        Decimal places for results, between 0 and 15.
    config_path, history_path : Path, optional
        File overrides; the home-directory defaults are used when absent.
    """

    version: bool = False
    show_help: bool = False
    verbose: bool = False
    no_color: bool = False
    precision: int = Field(default=DEFAULT_PRECISION, ge=MIN_PRECISION, le=MAX_PRECISION)
    config_path: Optional[Path] = None
    history_path: Optional[Path] = None


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser; single- and double-dash spellings are both accepted."""
    parser = argparse.ArgumentParser(
        prog="cli-calculator",
        description=f"{APP_NAME} - a menu-driven command-line calculator",
        add_help=False,
        allow_abbrev=False,
        epilog=(
            "examples:\n"
            "  cli-calculator                 start the calculator\n"
            "  cli-calculator -precision 5    start with high precision\n"
            "  cli-calculator -verbose        start with debug logging"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-version", "--version", action="store_true", help="Show version information")
    parser.add_argument("-help", "--help", "-h", dest="show_help", action="store_true", help="Show help information")
    parser.add_argument("-verbose", "--verbose", action="store_true", help="Enable verbose logging (debug level)")
    parser.add_argument("-no-color", "--no-color", dest="no_color", action="store_true", help="Disable colored output")
    parser.add_argument(
        "-precision", "--precision", type=int, default=DEFAULT_PRECISION,
        help="Number of decimal places for results (0-15)",
    )
    parser.add_argument("-config", "--config", dest="config_path", help="Path to the configuration file")
    parser.add_argument("-history", "--history", dest="history_path", help="Path to the history file")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    Invalid arguments end the process with exit code 2 (invalid input).

    :param List[str] argv: Arguments, ``sys.argv[1:]`` when omitted

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        return CliArgs(**vars(args))
    except PydanticValidationError as exc:
        # argparse exits with status 2, which is ExitCode.INVALID_INPUT
        parser.error(f"precision must be between {MIN_PRECISION} and {MAX_PRECISION}: {exc.errors()[0]['msg']}")


def show_version() -> None:
    print(f"{APP_NAME} version {APP_VERSION}")
    print("A menu-driven command-line calculator with persistent history")


def run(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> ExitCode:
    """
    Run the calculator and return the process exit code.

    :param List[str] argv: Command-line arguments, ``sys.argv[1:]`` when omitted
    :param Console console: Console override, standard input and output when omitted

    :return: Exit code
    :rtype: ExitCode
    """
    cli_args = parse_args(argv)

    if cli_args.version:
        show_version()
        return ExitCode.SUCCESS
    if cli_args.show_help:
        build_parser().print_help()
        return ExitCode.SUCCESS

    logger = build_logger(verbose=cli_args.verbose)
    if cli_args.verbose:
        logger.info("🔎 Verbose logging enabled")
    logger.info(f"🚀 Starting {APP_NAME} v{APP_VERSION}")

    try:
        config = CalculatorConfig.load(cli_args.config_path, cli_args.history_path, logger)
    except (FileError, ValidationError) as exc:
        logger.error(f"⚙️❌ Failed to load configuration, using defaults: {exc}")
        config = CalculatorConfig(config_path=cli_args.config_path, history_path=cli_args.history_path)

    # Flag overrides
    if cli_args.precision != DEFAULT_PRECISION:
        config.precision = cli_args.precision
        logger.debug(f"Precision set to {cli_args.precision} via command-line flag")
    if cli_args.no_color:
        config.color_output = False
        logger.debug("Color output disabled via command-line flag")

    service = CalculatorService.create(config, logger, console)

    try:
        service.run()
    except ValidationError as exc:
        logger.error(f"❌ Invalid input: {exc}")
        return ExitCode.INVALID_INPUT
    except FileError as exc:
        logger.error(f"💾❌ File error: {exc}")
        return ExitCode.FILE_ERROR
    except PydanticValidationError as exc:
        logger.error(f"⚙️❌ Invalid configuration: {exc}")
        return ExitCode.CONFIG_ERROR
    except CalculatorError as exc:
        logger.error(f"❌ Unexpected error: {exc}")
        return ExitCode.ERROR

    logger.info("👋 Application terminated successfully")
    return ExitCode.SUCCESS


def main() -> None:
    """
    Main function executed by the ``cli-calculator`` console script.
    """
    sys.exit(int(run()))


if __name__ == "__main__":
    main()
