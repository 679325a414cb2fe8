"""Ordered, thread-safe store of failures captured during a soft-assertion session."""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapturedFailure:
    """
    One deferred failure.

    Attributes:
        sequence: Position in the session, starting at 1.
        label: Label active on the chain when the failure was captured.
        message: Resolved failure message (label prefix and override applied).
        error: The underlying exception.
    """

    sequence: int
    label: Optional[str]
    message: str
    error: BaseException

    @property
    def cause(self) -> Optional[BaseException]:
        """Foreign exception that triggered the failure, if any."""
        return self.error.__cause__

    def __str__(self) -> str:
        return f"[{self.sequence}] {self.message}"


class ErrorCollector:
    """
    Append-only failure store owned by exactly one session.

    Features:
    - Monotonic sequence numbers across every proxy sharing the collector
    - Snapshot reads
    - Thread-safe appends
    - One-time drain, after which late captures are dropped
    """

    def __init__(self):
        """Initialize an empty, open collector."""
        self._failures: List[CapturedFailure] = []
        self._lock = threading.Lock()
        self._sequence = itertools.count(1)
        self._closed = False

    def append(
        self,
        error: BaseException,
        label: Optional[str] = None,
    ) -> Optional[CapturedFailure]:
        """
        Record a failure.

        Never raises. Once the collector has been drained the failure is
        dropped and a warning is logged.

        Args:
            error: The failure to record; its text is the resolved message.
            label: Label active on the chain at capture time.

        Returns:
            The CapturedFailure, or None if the collector is closed.
        """
        with self._lock:
            if self._closed:
                logger.warning(f"Dropping failure captured after drain: {error}")
                return None

            failure = CapturedFailure(
                sequence=next(self._sequence),
                label=label,
                message=str(error),
                error=error,
            )
            self._failures.append(failure)

        logger.debug(f"Captured failure #{failure.sequence}: {failure.message}")
        return failure

    def collected(self) -> List[CapturedFailure]:
        """Get a snapshot of the captured failures in sequence order."""
        with self._lock:
            return list(self._failures)

    def is_empty(self) -> bool:
        """Check whether nothing has been captured."""
        with self._lock:
            return not self._failures

    def drain(self) -> List[CapturedFailure]:
        """
        Close the collector and hand over everything captured.

        Draining a closed collector returns an empty list.

        Returns:
            Captured failures in sequence order.
        """
        with self._lock:
            if self._closed:
                return []
            self._closed = True
            drained, self._failures = self._failures, []

        logger.debug(f"Drained {len(drained)} failure(s)")
        return drained

    @property
    def closed(self) -> bool:
        """Whether the collector has been drained."""
        return self._closed

    def __len__(self) -> int:
        with self._lock:
            return len(self._failures)
