"""Logging of soft assertion activity."""

from soft_pytest.logging.capture_logger import CaptureEvent, CaptureLogger, ColoredFormatter, EventKind

__all__ = ["CaptureEvent", "CaptureLogger", "ColoredFormatter", "EventKind"]
