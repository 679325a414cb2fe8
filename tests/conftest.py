"""
Pytest configuration for soft-pytest tests.

The plugin itself is loaded through its pytest11 entry point, so the
``softly`` fixture is available here just as in any project that installs
soft-pytest. Plugin behaviour end to end is tested with ``pytester``.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from soft_pytest.core.collector import ErrorCollector
from soft_pytest.core.proxy import AssertionProxyFactory
from soft_pytest.core.session import SoftAssertions
from soft_pytest.logging.capture_logger import CaptureLogger


@pytest.fixture
def session() -> SoftAssertions:
    """A fresh soft-assertion session."""
    return SoftAssertions()


@pytest.fixture
def collector() -> ErrorCollector:
    return ErrorCollector()


@pytest.fixture
def factory(collector: ErrorCollector) -> AssertionProxyFactory:
    return AssertionProxyFactory(collector)


@pytest.fixture
def capture_logger() -> Iterator[CaptureLogger]:
    """Capture logger that records events without console output."""
    capture_logger = CaptureLogger(name="test_captures", level="DEBUG", log_to_console=False)
    yield capture_logger
    capture_logger.clear()
