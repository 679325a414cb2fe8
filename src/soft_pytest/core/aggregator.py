"""Turn a session's captured failures into one aggregate failure."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from soft_pytest.core.errors import AggregateFailure

if TYPE_CHECKING:
    from soft_pytest.core.collector import ErrorCollector
    from soft_pytest.logging.capture_logger import CaptureLogger

logger = logging.getLogger(__name__)


class SessionAggregator:
    """Drain a collector at session end."""

    def __init__(self, capture_logger: Optional[CaptureLogger] = None):
        self._capture_logger = capture_logger

    def assert_all(self, collector: ErrorCollector) -> None:
        """
        Drain the collector and raise if anything was captured.

        Draining closes the collector whether or not it held failures, and
        draining a closed collector is a no-op.

        Raises:
            AggregateFailure: Listing every captured failure in sequence order.
        """
        was_open = not collector.closed
        captured = collector.drain()

        if was_open and self._capture_logger:
            self._capture_logger.log_drain(captured)

        if not captured:
            return

        logger.info(f"Soft assertions collected {len(captured)} failure(s)")
        raise AggregateFailure(captured)
