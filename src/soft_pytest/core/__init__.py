"""Soft-assertion engine: capture, classification, proxies and aggregation."""

from soft_pytest.core.classifier import InvocationClassifier, InvocationKind, InvocationRecord
from soft_pytest.core.collector import CapturedFailure, ErrorCollector
from soft_pytest.core.errors import (
    AggregateFailure,
    CheckFailure,
    ConfigurationError,
    NavigationFailure,
    SoftAssertionError,
    TerminalInvocationError,
)
from soft_pytest.core.proxy import AssertionProxy, AssertionProxyFactory, ProxyStatus
from soft_pytest.core.state import ChainState, ComparatorRegistry, ComparatorScope

__all__ = [
    "InvocationClassifier",
    "InvocationKind",
    "InvocationRecord",
    "CapturedFailure",
    "ErrorCollector",
    "AggregateFailure",
    "CheckFailure",
    "ConfigurationError",
    "NavigationFailure",
    "SoftAssertionError",
    "TerminalInvocationError",
    "AssertionProxy",
    "AssertionProxyFactory",
    "ProxyStatus",
    "ChainState",
    "ComparatorRegistry",
    "ComparatorScope",
]
