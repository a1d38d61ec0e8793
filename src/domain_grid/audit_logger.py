"""
Audit Logger module for the domain grid system.

Structured entries are written as JSON lines, human-readable text, or both,
and filtered by a minimum severity. A logger can be bound to extra context
(for example a run's generation) so every entry it writes carries those
fields. Components take an optional logger and stay silent when none is
given.
"""

import copy
import json
import sys
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, TextIO

from domain_grid.enums import LogLevel


OUTPUT_FORMATS = ("json", "text", "both")

# In-memory history kept for inspection; a large run at debug level would
# otherwise hold one entry per flush and per invalid domain indefinitely
DEFAULT_MAX_ENTRIES = 10_000


@dataclass
class LogEntry:
    """One structured log record."""

    timestamp: str
    level: LogLevel
    component: str
    message: str
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "level": self.level.value,
            "component": self.component,
            "message": self.message,
            "data": self.data,
        }


class AuditLogger:
    """
    Structured logger with JSON and/or text output.

    Bound children created with ``bind`` share the parent's stream, level
    and history.
    """

    def __init__(
        self,
        output_format: str = "both",
        output_stream: Optional[TextIO] = None,
        min_level: LogLevel = LogLevel.DEBUG,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        """
        Initialize the audit logger.

        Args:
            output_format: 'json', 'text', or 'both'
            output_stream: Destination stream (defaults to sys.stderr)
            min_level: Entries below this level are dropped
            max_entries: Size of the in-memory history (oldest dropped first)
        """
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Invalid output_format: {output_format}")

        self._output_format = output_format
        self._stream = output_stream or sys.stderr
        self._min_level = min_level
        self._history: deque[LogEntry] = deque(maxlen=max_entries)
        self._context: dict = {}

    @property
    def output_format(self) -> str:
        return self._output_format

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    @property
    def context(self) -> dict:
        """Fields merged into every entry written by this logger."""
        return dict(self._context)

    @property
    def entries(self) -> list[LogEntry]:
        """Snapshot of the retained history, oldest first."""
        return list(self._history)

    def bind(self, **context) -> "AuditLogger":
        """
        Return a logger that adds ``context`` to every entry's data.

        Explicit data passed to ``log`` wins over bound fields of the same name.
        """
        child = copy.copy(self)
        child._context = {**self._context, **context}
        return child

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level.severity >= self._min_level.severity

    def log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Write one entry.

        Args:
            level: Severity
            component: Emitting component (e.g. 'orchestrator', 'batcher')
            message: Human-readable message
            data: Structured fields

        Returns:
            The entry, or None if its level is below the threshold
        """
        if not self.is_enabled_for(level):
            return None

        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=level,
            component=component,
            message=message,
            data={**self._context, **(data or {})},
        )
        self._history.append(entry)
        self._write(entry)
        return entry

    def log_error(
        self,
        component: str,
        message: str,
        error: Optional[BaseException] = None,
        additional_data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """Write an ERROR entry carrying the exception's type and message."""
        data = dict(additional_data or {})
        if error is not None:
            data["error_type"] = type(error).__name__
            data["error_message"] = str(error)
        return self.log(LogLevel.ERROR, component, message, data)

    def _write(self, entry: LogEntry) -> None:
        lines = []
        if self._output_format != "text":
            lines.append(self.get_json_output(entry))
        if self._output_format != "json":
            lines.append(self.get_text_output(entry))

        for line in lines:
            self._stream.write(line + "\n")
        self._stream.flush()

    def get_json_output(self, entry: LogEntry) -> str:
        """Render an entry as a single JSON line."""
        return json.dumps(entry.to_dict(), ensure_ascii=False, default=str)

    def get_text_output(self, entry: LogEntry) -> str:
        """Render an entry as '[timestamp] LEVEL [component] message {data}'."""
        text = (
            f"[{entry.timestamp}] {entry.level.value.upper()} "
            f"[{entry.component}] {entry.message}"
        )
        if entry.data:
            text += " " + json.dumps(entry.data, ensure_ascii=False, default=str)
        return text

    def clear_entries(self) -> None:
        """Forget the retained history (shared with bound loggers)."""
        self._history.clear()


def create_logger(
    level: str = "info",
    output_format: str = "text",
    output_stream: Optional[TextIO] = None,
) -> AuditLogger:
    """Build a logger from LoggingConfig-style string settings."""
    return AuditLogger(
        output_format=output_format,
        output_stream=output_stream,
        min_level=LogLevel(level),
    )
