"""Soft assertion capture logger with event history tracking."""

from __future__ import annotations

import json
import logging
import sys
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Deque, Dict, List, Optional

if TYPE_CHECKING:
    from soft_pytest.config.models import SoftAssertConfig
    from soft_pytest.core.classifier import InvocationRecord
    from soft_pytest.core.collector import CapturedFailure


class EventKind(Enum):
    """Kind of soft assertion event."""

    CAPTURE = "capture"
    POISONED = "poisoned"
    DRAIN = "drain"


@dataclass
class CaptureEvent:
    """Represents a logged soft assertion event."""

    timestamp: datetime
    kind: EventKind
    call: Optional[str] = None
    sequence: Optional[int] = None
    label: Optional[str] = None
    message: Optional[str] = None
    failure_count: Optional[int] = None

    def summary(self) -> str:
        """One-line plain text rendering."""
        if self.kind is EventKind.DRAIN:
            return f"drained {self.failure_count} failure(s)"
        if self.kind is EventKind.POISONED:
            return f"{self.call} poisoned its branch ({self.message})"
        first_line = (self.message or "").splitlines()[0] if self.message else ""
        return f"#{self.sequence} {self.call}: {first_line}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON export."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "kind": self.kind.value,
            "call": self.call,
            "sequence": self.sequence,
            "label": self.label,
            "message": self.message,
            "failure_count": self.failure_count,
        }


class ColoredFormatter(logging.Formatter):
    """Formatter with color support for console output."""

    COLORS = {
        "RESET": "\033[0m",
        "BOLD": "\033[1m",
        "YELLOW": "\033[93m",
        "RED": "\033[91m",
        "CYAN": "\033[96m",
        "MAGENTA": "\033[95m",
    }

    KIND_COLORS = {
        EventKind.CAPTURE: "YELLOW",
        EventKind.POISONED: "MAGENTA",
        EventKind.DRAIN: "CYAN",
    }

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        event = getattr(record, "soft_event", None)

        if event and isinstance(event, CaptureEvent):
            return self._format_event(event)

        return super().format(record)

    def _format_event(self, event: CaptureEvent) -> str:
        """Format an event for console output."""
        timestamp = event.timestamp.strftime("%H:%M:%S.%f")[:-3]

        symbol = {
            EventKind.CAPTURE: "✗",
            EventKind.POISONED: "☠",
            EventKind.DRAIN: "◆",
        }.get(event.kind, "?")

        parts = [f"[{timestamp}]", symbol]
        if event.label:
            parts.append(f"[{event.label}]")
        parts.append(event.summary())

        text = " ".join(parts)
        color = self.KIND_COLORS.get(event.kind, "RESET")

        if self.use_colors:
            return f"{self.COLORS[color]}{text}{self.COLORS['RESET']}"
        return text


class CaptureLogger:
    """
    Logger for soft assertion activity.

    Provides:
    - One event per captured failure, poisoned branch and drain
    - Console output with colors
    - JSON export for debugging
    - Event history tracking, keeping the most recent max_events events
    """

    def __init__(
        self,
        name: str = "captures",
        level: str = "INFO",
        log_to_console: bool = True,
        log_to_file: Optional[Path] = None,
        use_colors: bool = True,
        max_events: Optional[int] = 1000,
    ):
        """
        Initialize capture logger.

        Args:
            name: Logger name.
            level: Logging level (DEBUG, INFO, WARNING, ERROR).
            log_to_console: Whether to log to console.
            log_to_file: Optional path to log file.
            use_colors: Whether to use colors in console output.
            max_events: Size of the event history; older events are dropped.
                None keeps every event.
        """
        self._name = name
        self._logger = logging.getLogger(f"soft_pytest.{name}")
        self._logger.setLevel(getattr(logging, level.upper()))
        self._events: Deque[CaptureEvent] = deque(maxlen=max_events)
        self._dropped = 0
        self._lock = threading.Lock()

        # Prevent duplicate handlers
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

        if log_to_console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(ColoredFormatter(use_colors=use_colors))
            self._logger.addHandler(console_handler)

        if log_to_file:
            file_handler = logging.FileHandler(log_to_file)
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
            )
            self._logger.addHandler(file_handler)

    @classmethod
    def from_config(cls, config: SoftAssertConfig, log_to_console: bool = True) -> CaptureLogger:
        """Build a capture logger from configuration."""
        return cls(
            level=config.log_level,
            log_to_console=log_to_console,
            log_to_file=config.log_file,
            use_colors=config.use_colors,
            max_events=config.max_logged_events,
        )

    def log_capture(self, record: InvocationRecord, failure: CapturedFailure) -> None:
        """
        Log a captured failure.

        Args:
            record: The chained call that failed.
            failure: The failure as stored in the collector.
        """
        self._emit(
            CaptureEvent(
                timestamp=datetime.now(),
                kind=EventKind.CAPTURE,
                call=record.describe(),
                sequence=failure.sequence,
                label=failure.label,
                message=failure.message,
            ),
            level=logging.WARNING,
        )

    def log_poisoned(self, record: InvocationRecord, target: type) -> None:
        """
        Log a navigation failure that poisoned its branch.

        Args:
            record: The navigation call.
            target: Assertion type the poisoned proxy stands in for.
        """
        self._emit(
            CaptureEvent(
                timestamp=datetime.now(),
                kind=EventKind.POISONED,
                call=record.describe(),
                message=f"further {target.__name__} calls are ignored",
            ),
            level=logging.DEBUG,
        )

    def log_drain(self, failures: List[CapturedFailure]) -> None:
        """Log the end of a session."""
        self._emit(
            CaptureEvent(
                timestamp=datetime.now(),
                kind=EventKind.DRAIN,
                failure_count=len(failures),
            ),
            level=logging.INFO,
        )

    def _emit(self, event: CaptureEvent, level: int = logging.INFO) -> None:
        """Record an event and log it through the Python logger."""
        with self._lock:
            if len(self._events) == self._events.maxlen:
                self._dropped += 1
            self._events.append(event)

        if not self._logger.isEnabledFor(level):
            return

        record = self._logger.makeRecord(
            name=self._logger.name,
            level=level,
            fn="",
            lno=0,
            msg=event.summary(),
            args=(),
            exc_info=None,
        )
        record.soft_event = event
        self._logger.handle(record)

    def get_events(self, kind: Optional[EventKind] = None) -> List[CaptureEvent]:
        """
        Get logged events with optional filtering.

        Args:
            kind: Filter by event kind.

        Returns:
            List of matching events.
        """
        with self._lock:
            events = list(self._events)

        if kind:
            events = [e for e in events if e.kind == kind]

        return events

    def export_to_json(self, filepath: Path | str) -> None:
        """
        Export all events to JSON file.

        Args:
            filepath: Path to output JSON file.
        """
        data = [event.to_dict() for event in self.get_events()]

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)

    def clear(self) -> None:
        """Clear event history."""
        with self._lock:
            self._events.clear()
            self._dropped = 0

    @property
    def event_count(self) -> int:
        """Get total number of logged events."""
        with self._lock:
            return len(self._events)

    @property
    def dropped_count(self) -> int:
        """Number of events pushed out of the history by newer ones."""
        with self._lock:
            return self._dropped
