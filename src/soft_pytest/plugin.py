"""
Pytest plugin for soft assertions.

This module provides the ``softly`` fixture and the hooks that turn the
failures it collects into a single test failure.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Generator, List, Optional

import pytest

from soft_pytest.config.loader import ConfigLoader
from soft_pytest.config.models import SoftAssertConfig
from soft_pytest.core.collector import CapturedFailure
from soft_pytest.core.session import SoftAssertions, begin_session
from soft_pytest.logging.capture_logger import CaptureLogger

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.config.argparsing import Parser

logger = logging.getLogger(__name__)

captured_key = pytest.StashKey[List[CapturedFailure]]()


# =============================================================================
# Pytest Hooks - Configuration and Options
# =============================================================================


def pytest_addoption(parser: Parser) -> None:
    """Register pytest command-line and ini options."""
    group = parser.getgroup("soft", "Soft Assertion Options")

    group.addoption(
        "--soft-config",
        dest="soft_config",
        metavar="PATH",
        help="Path to soft assertions YAML configuration file",
    )

    group.addoption(
        "--soft-log-level",
        dest="soft_log_level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Capture log level",
    )

    group.addoption(
        "--soft-no-auto-assert",
        action="store_true",
        dest="soft_no_auto_assert",
        help="Do not call assert_all() on the softly fixture after each test",
    )

    # INI options
    parser.addini(
        "soft_config_file",
        help="Default soft assertions configuration file path",
        default="",
    )

    parser.addini(
        "soft_log_captures",
        help="Log captured soft assertion failures to the console",
        type="bool",
        default=True,
    )


def pytest_configure(config: Config) -> None:
    """Configure the soft assertions pytest plugin."""
    config.addinivalue_line(
        "markers",
        "soft_label(text): Label every softly.assert_that() chain in this test",
    )
    config.addinivalue_line(
        "markers",
        "soft_no_auto_assert: Do not call softly.assert_all() after this test",
    )


# =============================================================================
# Session-scoped Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def soft_config(request: pytest.FixtureRequest) -> SoftAssertConfig:
    """
    Load soft assertion configuration.

    This fixture loads configuration from:
    1. --soft-config command line option
    2. soft_config_file ini option
    3. Default config file search

    Returns:
        SoftAssertConfig instance.
    """
    config_path = request.config.getoption("soft_config")

    if config_path is None:
        config_path = request.config.getini("soft_config_file") or None

    root_dir = Path(request.config.rootpath)

    try:
        soft_cfg = ConfigLoader.load(config_path, root_dir)
    except FileNotFoundError:
        logger.info("No soft assertion configuration file found, using defaults")
        soft_cfg = SoftAssertConfig()

    log_level = request.config.getoption("soft_log_level")
    if log_level is not None:
        soft_cfg = soft_cfg.model_copy(update={"log_level": log_level})

    return soft_cfg


@pytest.fixture(scope="session")
def soft_logger(request: pytest.FixtureRequest, soft_config: SoftAssertConfig) -> CaptureLogger:
    """
    Create capture logger instance.

    Returns:
        CaptureLogger tracking every captured failure.
    """
    log_to_console = request.config.getini("soft_log_captures") and soft_config.log_captures

    return CaptureLogger.from_config(soft_config, log_to_console=log_to_console)


# =============================================================================
# Function-scoped Fixtures
# =============================================================================


@pytest.fixture
def softly(
    soft_logger: CaptureLogger,
    request: pytest.FixtureRequest,
) -> Generator[SoftAssertions, None, None]:
    """
    Function-scoped soft assertion session.

    Failures are collected during the test and raised together, as one
    AggregateFailure, once the test body has finished. Use
    @pytest.mark.soft_no_auto_assert or --soft-no-auto-assert to call
    softly.assert_all() yourself.

    Usage:
        def test_user(softly):
            softly.assert_that(user.name).is_equal_to("Frodo")
            softly.assert_that(user.age).is_greater_than(30)

    Returns:
        SoftAssertions instance.
    """
    label_marker = request.node.get_closest_marker("soft_label")
    label = label_marker.args[0] if label_marker else None

    session = begin_session(capture_logger=soft_logger, label=label)

    yield session

    if not session.closed and not session.was_success():
        logger.debug(f"{request.node.name}: {len(session.collector)} soft failure(s) not asserted")


# =============================================================================
# Pytest Hooks - Running and Reporting
# =============================================================================


def _auto_assert_enabled(item: pytest.Item, soft_cfg: Optional[SoftAssertConfig]) -> bool:
    if item.config.getoption("soft_no_auto_assert"):
        return False
    if item.get_closest_marker("soft_no_auto_assert") is not None:
        return False
    return soft_cfg.auto_assert_all if soft_cfg is not None else True


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item) -> Generator[None, None, None]:
    """Drain the softly fixture once the test body has run."""
    session = getattr(item, "funcargs", {}).get("softly")

    try:
        result = yield
    finally:
        if isinstance(session, SoftAssertions):
            item.stash[captured_key] = session.collected_failures()

    if isinstance(session, SoftAssertions) and _auto_assert_enabled(
        item, item.funcargs.get("soft_config")
    ):
        session.assert_all()

    return result


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call):
    """Attach captured soft failures to the test report."""
    outcome = yield
    rep = outcome.get_result()

    if rep.when != "call":
        return

    captured = item.stash.get(captured_key, [])
    rep.soft_failures = [c.message for c in captured]

    if captured:
        soft_cfg = getattr(item, "funcargs", {}).get("soft_config")
        limit = soft_cfg.max_report_failures if soft_cfg is not None else len(captured)
        lines = [str(c) for c in captured[:limit]]
        if len(captured) > limit:
            lines.append(f"... and {len(captured) - limit} more")
        rep.sections.append(("Captured soft failures", "\n".join(lines)))


# Optional: pytest-html integration
try:
    import pytest_html

    @pytest.hookimpl(optionalhook=True)
    def pytest_html_results_table_header(cells):
        """Add soft failure column to HTML report."""
        cells.insert(2, "<th>Soft Failures</th>")

    @pytest.hookimpl(optionalhook=True)
    def pytest_html_results_table_row(report, cells):
        """Add soft failure count to HTML report row."""
        count = len(getattr(report, "soft_failures", []))
        cells.insert(2, f"<td>{count}</td>")

except ImportError:
    pass  # pytest-html not installed
