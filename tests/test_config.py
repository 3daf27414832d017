"""Test class CalculatorConfig."""
import json
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError
import pytest

from cli_calculator.common.constants import CONFIG_FILE_NAME, HISTORY_FILE_NAME
from cli_calculator.common.errors import FileError, ValidationError
from cli_calculator.config.config import CalculatorConfig


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Create a temporary config file path."""
    return tmp_path / "config.json"


def test_defaults() -> None:
    """A fresh configuration carries the documented defaults."""
    config = CalculatorConfig()
    assert config.precision == 2
    assert config.show_welcome is True
    assert config.clear_screen is True
    assert config.color_output is False
    assert config.save_history is True
    assert config.max_history == 100
    assert config.auto_save is True
    assert config.confirm_exit is False
    assert not (config.use_radians or config.scientific_mode or config.thousand_sep)
    assert config.config_path is None
    assert config.history_path is None


def test_default_paths_live_in_home(monkeypatch, tmp_path: Path) -> None:
    """Unset paths resolve to dotfiles in the home directory."""
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    config = CalculatorConfig()
    assert config.resolved_config_path == tmp_path / CONFIG_FILE_NAME
    assert config.resolved_history_path == tmp_path / HISTORY_FILE_NAME


def test_explicit_paths_override_defaults(tmp_path: Path) -> None:
    """Explicit paths are used as given."""
    config = CalculatorConfig(config_path=tmp_path / "c.json", history_path=tmp_path / "h.json")
    assert config.resolved_config_path == tmp_path / "c.json"
    assert config.resolved_history_path == tmp_path / "h.json"


def test_load_missing_file_returns_defaults(config_file: Path) -> None:
    """A missing config file is not an error."""
    config = CalculatorConfig.load(config_file)
    assert config == CalculatorConfig(config_path=config_file)


def test_save_and_load_round_trip(config_file: Path, tmp_path: Path) -> None:
    """Saved settings load back; paths are not written to the file."""
    history_file = tmp_path / "history.json"
    config = CalculatorConfig(config_path=config_file, history_path=history_file)
    config.precision = 6
    config.confirm_exit = True
    config.max_history = 42
    config.save()

    data = json.loads(config_file.read_text(encoding="utf-8"))
    assert data["precision"] == 6
    assert "config_path" not in data and "history_path" not in data
    assert set(data) >= {"use_radians", "scientific_mode", "thousand_sep"}

    loaded = CalculatorConfig.load(config_file, history_file)
    assert loaded == config


def test_load_ignores_unknown_keys(config_file: Path) -> None:
    """Unknown keys in the file are ignored."""
    config_file.write_text(json.dumps({"precision": 4, "theme": "dark"}), encoding="utf-8")
    config = CalculatorConfig.load(config_file)
    assert config.precision == 4
    assert config.show_welcome is True


@pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
def test_load_unparseable_file(config_file: Path, content: str) -> None:
    """Unparseable content is a FileError."""
    config_file.write_text(content, encoding="utf-8")
    with pytest.raises(FileError):
        CalculatorConfig.load(config_file)


@pytest.mark.parametrize("content", ['{"precision": 99}', '{"max_history": -1}', '{"max_history": 10001}'])
def test_load_out_of_range_values(config_file: Path, content: str) -> None:
    """Out-of-range settings are a ValidationError."""
    config_file.write_text(content, encoding="utf-8")
    with pytest.raises(ValidationError):
        CalculatorConfig.load(config_file)


def test_save_failure(tmp_path: Path) -> None:
    """A config path that cannot be written is a FileError."""
    config = CalculatorConfig(config_path=tmp_path)
    with pytest.raises(FileError):
        config.save()


def test_assignment_is_validated() -> None:
    """Settings changed at runtime stay in range."""
    config = CalculatorConfig()
    with pytest.raises(PydanticValidationError):
        config.precision = 16
    with pytest.raises(PydanticValidationError):
        config.max_history = 10001
    config.validate_settings()


def test_validate_settings_reports_bad_values() -> None:
    """validate_settings translates range violations into ValidationError."""
    config = CalculatorConfig.model_construct(precision=-1)
    with pytest.raises(ValidationError) as exc_info:
        config.validate_settings()
    assert exc_info.value.field == "precision"


def test_reset_keeps_paths(tmp_path: Path) -> None:
    """Reset restores defaults but keeps the file paths."""
    config = CalculatorConfig(config_path=tmp_path / "c.json", precision=9, auto_save=False)
    config.reset()
    assert config.precision == 2
    assert config.auto_save is True
    assert config.config_path == tmp_path / "c.json"


def test_clone_is_independent(tmp_path: Path) -> None:
    """A clone can be changed without touching the original."""
    config = CalculatorConfig(config_path=tmp_path / "c.json")
    clone = config.clone()
    clone.precision = 10
    clone.config_path = tmp_path / "other.json"
    assert config.precision == 2
    assert config.config_path == tmp_path / "c.json"


def test_load_non_utf8_file(config_file: Path) -> None:
    """Bytes that are not UTF-8 are a parse FileError."""
    config_file.write_bytes(b'\xff\xfe{"precision": 3}')
    with pytest.raises(FileError) as exc_info:
        CalculatorConfig.load(config_file)
    assert exc_info.value.operation == "parse"
