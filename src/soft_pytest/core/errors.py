"""Exception types raised and captured by the soft-assertion engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from soft_pytest.core.collector import CapturedFailure


class SoftAssertionError(Exception):
    """Base class for engine errors that are not assertion failures."""


class ConfigurationError(SoftAssertionError, ValueError):
    """Invalid session or proxy construction, or use of a drained session."""


class TerminalInvocationError(SoftAssertionError):
    """
    A terminal accessor could not produce its value.

    Terminal calls are never captured, so this always reaches the caller.
    """


class CheckFailure(AssertionError):
    """A check method found that the actual value does not satisfy it."""


class NavigationFailure(AssertionError):
    """Switching to a new object under test failed."""


class AggregateFailure(AssertionError):
    """
    Single failure raised when a soft-assertion session is drained.

    Attributes:
        captured: The CapturedFailure records, in sequence order.
        failures: The underlying exceptions, in sequence order.
    """

    def __init__(self, captured: List[CapturedFailure]):
        self.captured = list(captured)
        self.failures: List[BaseException] = [c.error for c in self.captured]
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        count = len(self.captured)
        noun = "failure" if count == 1 else "failures"
        lines = [f"Multiple Failures ({count} {noun})"]
        for index, failure in enumerate(self.captured, start=1):
            lines.append(f"-- failure {index} --")
            lines.append(failure.message)
        return "\n".join(lines)

    @property
    def messages(self) -> List[str]:
        """Resolved messages of all captured failures."""
        return [c.message for c in self.captured]


def describe_exception(error: BaseException, fallback: Optional[str] = None) -> str:
    """Render a foreign exception as ``"<Type>: <text>"``."""
    text = str(error) or (fallback or "")
    name = type(error).__name__
    return f"{name}: {text}" if text else name
