"""Bounded calculation history with JSON file persistence."""
from collections import Counter
from datetime import datetime
import logging
import math
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_serializer, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from cli_calculator.common.constants import MAX_HISTORY_ENTRIES, MAX_HISTORY_SIZE, MIN_HISTORY_SIZE
from cli_calculator.common.errors import FileError

# JSON spelling of the results JSON cannot represent
NON_FINITE_NAMES = {"nan": "NaN", "inf": "Infinity", "-inf": "-Infinity"}


class HistoryEntry(BaseModel):
    """A single recorded calculation attempt."""

    # Entries are never modified once recorded
    model_config = ConfigDict(frozen=True)

    timestamp: Optional[datetime] = Field(default=None, description="When the calculation was performed")
    operation: str = Field(..., description="Operation display name, e.g. 'Addition'")
    expression: str = Field(..., description="Human-readable expression, e.g. '10.00 + 5.00'")
    result: Optional[float] = Field(default=None, description="Result, present only on success")
    success: bool = Field(..., description="Whether the calculation succeeded")
    error: Optional[str] = Field(default=None, description="Error message, present only on failure")

    @field_validator("timestamp")
    @classmethod
    def make_timestamp_aware(cls, value: Optional[datetime]) -> Optional[datetime]:
        """Interpret timestamps without an offset as local time."""
        if value is not None and value.tzinfo is None:
            return value.astimezone()
        return value

    @field_validator("result", mode="before")
    @classmethod
    def parse_special_result(cls, value: Any) -> Any:
        if isinstance(value, str) and value in NON_FINITE_NAMES.values():
            return float(value)
        return value

    @field_serializer("result", when_used="json")
    def serialize_result(self, value: Optional[float]) -> Union[float, str, None]:
        """JSON has no NaN or infinities, they are written as strings."""
        if value is None or math.isfinite(value):
            return value
        if math.isnan(value):
            return NON_FINITE_NAMES["nan"]
        return NON_FINITE_NAMES["inf"] if value > 0 else NON_FINITE_NAMES["-inf"]

    @model_validator(mode="before")
    @classmethod
    def keep_outcome_consistent(cls, data: Any) -> Any:
        """Drop the field that does not belong to the entry's outcome."""
        if isinstance(data, dict):
            data = dict(data)
            if data.get("success"):
                data.pop("error", None)
            else:
                # Older files store a zero result on failed entries
                data.pop("result", None)
        return data


class Statistics(BaseModel):
    """Aggregate figures computed over the whole history."""

    total_calculations: int = 0
    successful_count: int = 0
    failed_count: int = 0
    most_used_operation: Optional[str] = None
    average_result: float = 0.0
    first_calculation: Optional[datetime] = None
    last_calculation: Optional[datetime] = None


class HistoryFile(BaseModel):
    """On-disk envelope of a saved history."""

    entries: List[HistoryEntry] = Field(default_factory=list)
    max_size: int = MAX_HISTORY_ENTRIES


Predicate = Callable[[HistoryEntry], bool]


class History(BaseModel):
    """
    Append-only calculation log bounded to ``max_size`` entries.

    When an insertion or a load pushes the log past ``max_size``, the oldest
    entries are evicted in one batch so that only the most recent
    ``max_size`` entries survive, in insertion order.
    """

    # Allow arbitrary types like logging.Logger
    model_config = ConfigDict(arbitrary_types_allowed=True)

    file_path: Path = Field(..., description="Backing JSON file")
    max_size: int = Field(
        default=MAX_HISTORY_ENTRIES, ge=MIN_HISTORY_SIZE, le=MAX_HISTORY_SIZE,
        description="Maximum number of entries kept",
    )
    logger: Optional[logging.Logger] = Field(default=None, exclude=True, description="Optional logger")

    _entries: List[HistoryEntry] = PrivateAttr(default_factory=list)

    def _truncate(self) -> None:
        excess = len(self._entries) - self.max_size
        if excess > 0:
            del self._entries[:excess]
            if self.logger is not None:
                self.logger.debug(f"🗂️ Evicted {excess} oldest history entries")

    def add(self, entry: HistoryEntry) -> None:
        """
        Append an entry, stamping it with the current time when it has none.

        :param HistoryEntry entry: Entry to record
        """
        if entry.timestamp is None:
            entry = entry.model_copy(update={"timestamp": datetime.now().astimezone()})
        self._entries.append(entry)
        self._truncate()

    def add_success(self, operation: str, expression: str, result: float) -> None:
        """Record a successful calculation."""
        self.add(HistoryEntry(operation=operation, expression=expression, result=result, success=True))

    def add_error(self, operation: str, expression: str, err: Optional[BaseException]) -> None:
        """Record a failed calculation with the message of ``err``."""
        message = str(err) if err is not None else ""
        self.add(HistoryEntry(operation=operation, expression=expression, success=False, error=message))

    def resize(self, max_size: int) -> None:
        """
        Change the bound and evict the oldest entries that no longer fit.

        :param int max_size: New maximum number of entries
        :raises ValueError: If the size is outside the allowed range
        """
        if max_size < MIN_HISTORY_SIZE or max_size > MAX_HISTORY_SIZE:
            raise ValueError(f"max_size must be between {MIN_HISTORY_SIZE} and {MAX_HISTORY_SIZE}")
        self.max_size = max_size
        self._truncate()

    def get_recent(self, n: int) -> List[HistoryEntry]:
        """
        Return the last ``n`` entries, oldest first.

        :param int n: Number of entries wanted

        :return: At most ``n`` entries; empty when ``n <= 0``
        :rtype: List[HistoryEntry]
        """
        if n <= 0:
            return []
        return list(self._entries[-n:])

    def get_all(self) -> List[HistoryEntry]:
        return list(self._entries)

    def count(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries = []

    def filter(self, predicate: Predicate) -> List[HistoryEntry]:
        """Return the entries matching ``predicate``, in insertion order."""
        return [entry for entry in self._entries if predicate(entry)]

    def get_successful(self) -> List[HistoryEntry]:
        return self.filter(lambda entry: entry.success)

    def get_failed(self) -> List[HistoryEntry]:
        return self.filter(lambda entry: not entry.success)

    def get_statistics(self) -> Statistics:
        """
        Compute statistics in a single pass over the history.

        ``average_result`` only averages successful results. On ties,
        ``most_used_operation`` is the operation recorded first.

        :return: Statistics of the current entries
        :rtype: Statistics
        """
        stats = Statistics(total_calculations=len(self._entries))
        # Counter keeps first-insertion order, most_common() breaks ties with it
        operation_counts: Counter = Counter()
        total_result = 0.0

        for entry in self._entries:
            if entry.success:
                stats.successful_count += 1
                total_result += entry.result or 0.0
            else:
                stats.failed_count += 1

            operation_counts[entry.operation] += 1

            if entry.timestamp is not None:
                if stats.first_calculation is None or entry.timestamp < stats.first_calculation:
                    stats.first_calculation = entry.timestamp
                if stats.last_calculation is None or entry.timestamp > stats.last_calculation:
                    stats.last_calculation = entry.timestamp

        if stats.successful_count:
            stats.average_result = total_result / stats.successful_count
        if operation_counts:
            stats.most_used_operation = operation_counts.most_common(1)[0][0]
        return stats

    def load(self) -> None:
        """
        Replace the entries with the content of the backing file.

        A missing file is not an error: the history stays empty. The current
        ``max_size`` is applied to the loaded entries.

        :raises FileError: If the file cannot be read or parsed
        """
        if not self.file_path.exists():
            if self.logger is not None:
                self.logger.debug(f"🗂️ No history file at {self.file_path}, starting empty")
            return

        try:
            data = self.file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise FileError(str(self.file_path), "parse", exc) from exc
        except OSError as exc:
            raise FileError(str(self.file_path), "read", exc) from exc

        try:
            loaded = HistoryFile.model_validate_json(data)
        except PydanticValidationError as exc:
            raise FileError(str(self.file_path), "parse", exc) from exc

        self._entries = list(loaded.entries)
        self._truncate()
        if self.logger is not None:
            self.logger.info(f"🗂️ Loaded {len(self._entries)} history entries from {self.file_path}")

    def save(self) -> None:
        """
        Overwrite the backing file with every entry and ``max_size``.

        :raises FileError: If the file cannot be written
        """
        payload = HistoryFile(entries=self._entries, max_size=self.max_size)
        data = payload.model_dump_json(indent=2, exclude_none=True)

        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            self.file_path.write_text(data, encoding="utf-8")
        except OSError as exc:
            raise FileError(str(self.file_path), "write", exc) from exc

        if self.logger is not None:
            self.logger.debug(f"💾 Saved {len(self._entries)} history entries to {self.file_path}")
