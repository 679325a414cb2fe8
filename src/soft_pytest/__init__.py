"""
soft-pytest: soft assertions for pytest.

This package collects assertion failures across a whole chain of checks and
reports them together instead of stopping at the first one.
"""

from soft_pytest.config.models import SoftAssertConfig
from soft_pytest.config.loader import ConfigLoader
from soft_pytest.core.session import SoftAssertions, begin_session, soft_assertions, assert_softly
from soft_pytest.core.collector import CapturedFailure, ErrorCollector
from soft_pytest.core.errors import (
    AggregateFailure,
    CheckFailure,
    ConfigurationError,
    NavigationFailure,
    SoftAssertionError,
    TerminalInvocationError,
)
from soft_pytest.core.proxy import AssertionProxy, ProxyStatus
from soft_pytest.core.representation import (
    Representation,
    StandardRepresentation,
    UnicodeRepresentation,
    STANDARD_REPRESENTATION,
    UNICODE_REPRESENTATION,
)
from soft_pytest.core.state import ChainState, ComparatorScope
from soft_pytest.assertions import (
    AbstractAssert,
    ObjectAssert,
    BoolAssert,
    NumberAssert,
    StringAssert,
    ListAssert,
    ListSizeAssert,
    DictAssert,
    ExceptionAssert,
    assert_that,
)
from soft_pytest.logging.capture_logger import CaptureLogger

__version__ = "0.1.0"

__all__ = [
    # Config
    "SoftAssertConfig",
    "ConfigLoader",
    # Session
    "SoftAssertions",
    "begin_session",
    "soft_assertions",
    "assert_softly",
    "CapturedFailure",
    "ErrorCollector",
    "AssertionProxy",
    "ProxyStatus",
    "ChainState",
    "ComparatorScope",
    # Errors
    "AggregateFailure",
    "CheckFailure",
    "ConfigurationError",
    "NavigationFailure",
    "SoftAssertionError",
    "TerminalInvocationError",
    # Representation
    "Representation",
    "StandardRepresentation",
    "UnicodeRepresentation",
    "STANDARD_REPRESENTATION",
    "UNICODE_REPRESENTATION",
    # Assertions
    "AbstractAssert",
    "ObjectAssert",
    "BoolAssert",
    "NumberAssert",
    "StringAssert",
    "ListAssert",
    "ListSizeAssert",
    "DictAssert",
    "ExceptionAssert",
    "assert_that",
    # Logging
    "CaptureLogger",
]
