"""Application configuration persisted as JSON in the user's home directory."""
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from cli_calculator.common.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_PRECISION,
    HISTORY_FILE_NAME,
    MAX_HISTORY_ENTRIES,
    MAX_HISTORY_SIZE,
    MAX_PRECISION,
    MIN_HISTORY_SIZE,
    MIN_PRECISION,
)
from cli_calculator.common.errors import FileError, ValidationError


# Pydantic error types meaning the file is not a JSON object at all
UNPARSEABLE_ERROR_TYPES = {"json_invalid", "json_type", "model_type"}


def _home_dir() -> Path:
    try:
        return Path.home()
    except RuntimeError:
        # Home directory cannot be resolved, fall back to the working directory
        return Path(".")


def _to_validation_error(exc: PydanticValidationError) -> ValidationError:
    """Translate the first pydantic error into the calculator's ValidationError."""
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "config"
    return ValidationError(field, str(first.get("input")), first["msg"])


class CalculatorConfig(BaseModel):
    """
    User settings of the calculator.

    ``config_path`` and ``history_path`` are optional: when unset, the
    default files in the user's home directory are used. They are never
    written to the configuration file.
    """

    # Re-validate on assignment so settings changed at runtime stay in range
    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    # Display settings
    precision: int = Field(
        default=DEFAULT_PRECISION, ge=MIN_PRECISION, le=MAX_PRECISION,
        description="Number of decimal places",
    )
    show_welcome: bool = Field(default=True, description="Show welcome banner")
    clear_screen: bool = Field(default=True, description="Clear screen between operations")
    color_output: bool = Field(default=False, description="Enable coloured output")

    # Behaviour settings
    save_history: bool = Field(default=True, description="Record calculations in history")
    max_history: int = Field(
        default=MAX_HISTORY_ENTRIES, ge=MIN_HISTORY_SIZE, le=MAX_HISTORY_SIZE,
        description="Maximum history entries",
    )
    auto_save: bool = Field(default=True, description="Save history and settings automatically")
    confirm_exit: bool = Field(default=False, description="Ask confirmation before exit")

    # Reserved for future features
    use_radians: bool = False
    scientific_mode: bool = False
    thousand_sep: bool = False

    config_path: Optional[Path] = Field(default=None, exclude=True, description="Config file override")
    history_path: Optional[Path] = Field(default=None, exclude=True, description="History file override")

    @property
    def resolved_config_path(self) -> Path:
        return self.config_path if self.config_path is not None else _home_dir() / CONFIG_FILE_NAME

    @property
    def resolved_history_path(self) -> Path:
        return self.history_path if self.history_path is not None else _home_dir() / HISTORY_FILE_NAME

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        history_path: Optional[Path] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "CalculatorConfig":
        """
        Load the configuration file, falling back to defaults when it does not exist.

        :param Path config_path: Config file, the home-directory default when omitted
        :param Path history_path: History file, the home-directory default when omitted
        :param logging.Logger logger: Optional logger

        :return: Loaded configuration
        :rtype: CalculatorConfig
        :raises FileError: If the file cannot be read or is not valid JSON
        :raises ValidationError: If a setting is out of range
        """
        config = cls(config_path=config_path, history_path=history_path)
        path = config.resolved_config_path

        try:
            data = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            if logger is not None:
                logger.debug(f"⚙️ No config file at {path}, using defaults")
            return config
        except UnicodeDecodeError as exc:
            raise FileError(str(path), "parse", exc) from exc
        except OSError as exc:
            raise FileError(str(path), "read", exc) from exc

        try:
            loaded = cls.model_validate_json(data)
        except PydanticValidationError as exc:
            if any(error["type"] in UNPARSEABLE_ERROR_TYPES for error in exc.errors()):
                raise FileError(str(path), "parse", exc) from exc
            raise _to_validation_error(exc) from exc

        # Paths are not stored in the file
        loaded.config_path = config_path
        loaded.history_path = history_path
        if logger is not None:
            logger.info(f"⚙️ Configuration loaded from {path}")
        return loaded

    def save(self) -> None:
        """
        Write the configuration file.

        :raises FileError: If the file cannot be written
        """
        path = self.resolved_config_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        except OSError as exc:
            raise FileError(str(path), "write", exc) from exc

    def validate_settings(self) -> None:
        """
        Check every setting against its allowed range.

        :raises ValidationError: If a setting is out of range
        """
        try:
            type(self).model_validate(self.model_dump())
        except PydanticValidationError as exc:
            raise _to_validation_error(exc) from exc

    def reset(self) -> None:
        """Restore default settings, keeping the file paths."""
        defaults = type(self)()
        for name in type(self).model_fields:
            if name not in ("config_path", "history_path"):
                setattr(self, name, getattr(defaults, name))

    def clone(self) -> "CalculatorConfig":
        return self.model_copy(deep=True)
