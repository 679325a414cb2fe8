"""Soft-assertion session: one collector, from creation to assert_all()."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Type

from soft_pytest.assertions.factory import assertion_for
from soft_pytest.core.aggregator import SessionAggregator
from soft_pytest.core.collector import CapturedFailure, ErrorCollector
from soft_pytest.core.errors import CheckFailure, ConfigurationError
from soft_pytest.core.proxy import AssertionProxy, AssertionProxyFactory
from soft_pytest.core.state import ChainState

if TYPE_CHECKING:
    from soft_pytest.config.models import SoftAssertConfig
    from soft_pytest.logging.capture_logger import CaptureLogger

logger = logging.getLogger(__name__)


class SoftAssertions:
    """
    Collect assertion failures instead of stopping at the first one.

    Usage:
        softly = SoftAssertions()
        softly.assert_that(1).is_equal_to(2)
        softly.assert_that([]).first().is_none()
        softly.assert_all()  # raises AggregateFailure listing both failures

    or as a context manager, which calls assert_all() on a clean exit:
        with SoftAssertions() as softly:
            softly.assert_that("abc").starts_with("b")
    """

    def __init__(
        self,
        capture_logger: Optional[CaptureLogger] = None,
        label: Optional[str] = None,
    ):
        """
        Initialize a session.

        Args:
            capture_logger: Optional logger for capture events.
            label: Default label for chains started with assert_that().
        """
        self._collector = ErrorCollector()
        self._factory = AssertionProxyFactory(self._collector, capture_logger)
        self._aggregator = SessionAggregator(capture_logger)
        self._label = label

    @property
    def collector(self) -> ErrorCollector:
        return self._collector

    @property
    def closed(self) -> bool:
        """Whether assert_all() has drained this session."""
        return self._collector.closed

    def wrap(self, delegate: Any, contract: Optional[type] = None) -> AssertionProxy:
        """
        Wrap an assertion object so its failures are deferred.

        Args:
            delegate: Concrete assertion object.
            contract: Assertion type the proxy must satisfy.

        Raises:
            ConfigurationError: If the session is drained, or delegate is
                absent or does not implement contract.
        """
        self._ensure_open()
        state = getattr(delegate, "state", None)
        if self._label is not None and isinstance(state, ChainState) and state.label is None:
            state = state.with_label(self._label)
        return self._factory.wrap(delegate, contract, state)

    def assert_that(self, actual: Any) -> AssertionProxy:
        """Start a soft chain on actual, using the assertion family for its type."""
        self._ensure_open()
        return self.wrap(assertion_for(actual))

    def fail(self, message: str, *args: Any, cause: Optional[BaseException] = None) -> None:
        """
        Record a failure directly.

        Args:
            message: Failure message, a ``str.format`` template when args are given.
            args: Values interpolated into message.
            cause: Exception attached as the failure's cause.
        """
        error = CheckFailure(message.format(*args) if args else message)
        if cause is not None:
            error.__cause__ = cause
        self._collector.append(error)

    def should_have_thrown(self, exception_type: Type[BaseException]) -> None:
        """Record that exception_type was expected but never raised."""
        self.fail(f"{exception_type.__name__} should have been thrown")

    def collected_failures(self) -> List[CapturedFailure]:
        """Snapshot of the failures captured so far, in call order."""
        return self._collector.collected()

    def errors_collected(self) -> List[BaseException]:
        """Underlying exceptions of the failures captured so far."""
        return [f.error for f in self._collector.collected()]

    def was_success(self) -> bool:
        return self._collector.is_empty()

    def assert_all(self) -> None:
        """
        Drain the session.

        Raises:
            AggregateFailure: If any failure was captured.
        """
        self._aggregator.assert_all(self._collector)

    def _ensure_open(self) -> None:
        if self._collector.closed:
            raise ConfigurationError(
                "Soft assertion session already drained; start a new session"
            )

    def __enter__(self) -> SoftAssertions:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        if exc_type is None:
            self.assert_all()
            return False

        # the block aborted (for instance on a terminal call); let that error win
        pending = self._collector.drain()
        if pending:
            logger.warning(
                f"Discarding {len(pending)} soft failure(s) after {exc_type.__name__}"
            )
        return False

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"{len(self._collector)} failure(s)"
        return f"SoftAssertions({state})"


def begin_session(
    config: Optional[SoftAssertConfig] = None,
    capture_logger: Optional[CaptureLogger] = None,
    label: Optional[str] = None,
) -> SoftAssertions:
    """
    Start a soft-assertion session.

    Args:
        config: When given and no capture_logger is passed, a capture logger
            is built from it if capture logging is enabled.
        capture_logger: Logger for capture events.
        label: Default label for assert_that() chains.

    Returns:
        A fresh SoftAssertions session.
    """
    if capture_logger is None and config is not None and config.log_captures:
        from soft_pytest.logging.capture_logger import CaptureLogger

        capture_logger = CaptureLogger.from_config(config)
    return SoftAssertions(capture_logger=capture_logger, label=label)


def soft_assertions(**kwargs: Any) -> SoftAssertions:
    """
    Context-manager entry point.

    Usage:
        with soft_assertions() as softly:
            softly.assert_that(42).is_equal_to(43)
    """
    return begin_session(**kwargs)


def assert_softly(block: Callable[[SoftAssertions], Any], **kwargs: Any) -> None:
    """Run block against a fresh session, then assert_all()."""
    with begin_session(**kwargs) as softly:
        block(softly)
