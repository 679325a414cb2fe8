"""
Proxies that defer assertion failures.

An AssertionProxy stands in for a concrete assertion object. Every chained
call is looked up in the assertion class's static dispatch table:

- check calls run against the wrapped object; a failure is captured and the
  same proxy is returned so the chain keeps going;
- navigation calls run eagerly; the new assertion object is wrapped in a new
  proxy carrying a fork of the chain state, or, if navigating failed, the
  failure is captured and a poisoned proxy absorbs the rest of the chain;
- terminal calls are handed straight to the wrapped object.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Type

from soft_pytest.core.classifier import (
    InvocationClassifier,
    InvocationKind,
    InvocationRecord,
    is_assertion_type,
)
from soft_pytest.core.errors import (
    CheckFailure,
    ConfigurationError,
    NavigationFailure,
    describe_exception,
)
from soft_pytest.core.state import ChainState, Comparator, ComparatorScope

if TYPE_CHECKING:
    from soft_pytest.core.collector import ErrorCollector
    from soft_pytest.core.representation import Representation
    from soft_pytest.logging.capture_logger import CaptureLogger

logger = logging.getLogger(__name__)


class ProxyStatus(Enum):
    """Tag of a proxy's chain position."""

    ACTIVE = "active"
    POISONED = "poisoned"


class AssertionProxyFactory:
    """
    Build proxies bound to one session's collector.

    Usage:
        factory = AssertionProxyFactory(collector)
        proxy = factory.wrap(ListAssert([]))
        proxy.first().is_none()  # one captured failure, no crash
    """

    def __init__(
        self,
        collector: ErrorCollector,
        capture_logger: Optional[CaptureLogger] = None,
    ):
        """
        Initialize proxy factory.

        Args:
            collector: Collector receiving every captured failure.
            capture_logger: Optional logger for capture events.
        """
        self._collector = collector
        self._capture_logger = capture_logger

    @property
    def collector(self) -> ErrorCollector:
        return self._collector

    @property
    def capture_logger(self) -> Optional[CaptureLogger]:
        return self._capture_logger

    def wrap(
        self,
        delegate: Any,
        contract: Optional[type] = None,
        state: Optional[ChainState] = None,
    ) -> AssertionProxy:
        """
        Wrap an assertion object.

        Args:
            delegate: The concrete assertion object.
            contract: Assertion type the proxy must satisfy. Defaults to the
                delegate's own type.
            state: Chain state of the new chain position.

        Returns:
            An active AssertionProxy.

        Raises:
            ConfigurationError: If delegate is absent or does not satisfy contract.
        """
        if delegate is None:
            raise ConfigurationError("Cannot wrap an absent assertion object")
        if not is_assertion_type(type(delegate)):
            raise ConfigurationError(
                f"Cannot wrap {type(delegate).__name__}: not an assertion object"
            )

        contract = contract if contract is not None else type(delegate)
        if not is_assertion_type(contract):
            raise ConfigurationError(f"{contract!r} is not an assertion type")
        if not isinstance(delegate, contract):
            raise ConfigurationError(
                f"{type(delegate).__name__} does not implement {contract.__name__}"
            )

        if state is None:
            state = getattr(delegate, "state", None) or ChainState()

        return AssertionProxy(
            factory=self,
            contract=contract,
            status=ProxyStatus.ACTIVE,
            delegate=delegate,
            state=state,
        )

    def poisoned(self, contract: type) -> AssertionProxy:
        """Build a proxy that absorbs every further call."""
        return AssertionProxy(
            factory=self,
            contract=contract,
            status=ProxyStatus.POISONED,
        )


class AssertionProxy:
    """
    Soft stand-in for an assertion object.

    Satisfies the wrapped contract both structurally and for isinstance().
    The chain-state operations (labels, message overrides, comparators,
    representation) are owned by the proxy; everything else is dispatched
    to the wrapped object.
    """

    def __init__(
        self,
        factory: AssertionProxyFactory,
        contract: type,
        status: ProxyStatus,
        delegate: Any = None,
        state: Optional[ChainState] = None,
    ):
        self._factory = factory
        self._contract = contract
        self._status = status
        self._delegate = delegate
        self._state = state if state is not None else ChainState()
        self._table: Dict[str, InvocationKind] = (
            InvocationClassifier.dispatch_table(type(delegate))
            if status is ProxyStatus.ACTIVE
            else {}
        )

    # isinstance(proxy, contract) holds, as for unittest.mock specs
    @property
    def __class__(self) -> Type[Any]:
        return self._contract

    @property
    def proxy_status(self) -> ProxyStatus:
        return self._status

    @property
    def chain_state(self) -> ChainState:
        """Chain state at this position."""
        return self._state

    @property
    def is_poisoned(self) -> bool:
        return self._status is ProxyStatus.POISONED

    # =========================================================================
    # Chain-state operations
    # =========================================================================

    def described_as(self, description: str, *args: Any) -> AssertionProxy:
        """Label failures recorded from this point of the chain."""
        if self._status is ProxyStatus.ACTIVE:
            label = description.format(*args) if args else description
            self._state = self._state.with_label(label)
        return self

    as_ = described_as

    def with_fail_message(self, message: str, *args: Any) -> AssertionProxy:
        """Replace the message of the next failure recorded on this chain position."""
        if self._status is ProxyStatus.ACTIVE:
            self._state = self._state.with_message_override(message, *args)
        return self

    overriding_error_message = with_fail_message

    def using_element_comparator(self, comparator: Comparator) -> AssertionProxy:
        """Compare elements with comparator, here and after navigation."""
        return self._with_comparator(ComparatorScope.ELEMENTS, comparator)

    def using_comparator_for_type(self, comparator: Comparator, element_type: type) -> AssertionProxy:
        return self._with_comparator(element_type, comparator)

    def using_comparator_for_fields(self, comparator: Comparator, *field_paths: str) -> AssertionProxy:
        for path in field_paths:
            self._with_comparator(path, comparator)
        return self

    def with_representation(self, representation: Representation) -> AssertionProxy:
        if self._status is ProxyStatus.ACTIVE:
            self._state = self._state.with_representation(representation)
        return self

    def _with_comparator(self, scope: Any, comparator: Comparator) -> AssertionProxy:
        if self._status is ProxyStatus.ACTIVE:
            self._state = self._state.with_comparator(scope, comparator)
        return self

    # =========================================================================
    # Dispatch
    # =========================================================================

    def __getattr__(self, name: str) -> Any:
        # only reached for names the proxy itself does not define
        if name.startswith("_"):
            raise AttributeError(name)

        if self._status is ProxyStatus.POISONED:
            return self._absorb

        kind = self._table.get(name, InvocationKind.TERMINAL)
        self._bind()
        member = getattr(self._delegate, name)

        if kind is InvocationKind.TERMINAL:
            return member
        if kind is InvocationKind.CHECK:
            return self._deferred(name, member, self._run_check)
        return self._deferred(name, member, self._run_navigation)

    def _deferred(self, name: str, method: Callable[..., Any], runner: Callable[..., Any]) -> Callable[..., Any]:
        def call(*args: Any, **kwargs: Any) -> Any:
            return runner(name, method, args, kwargs)

        call.__name__ = name
        call.__doc__ = getattr(method, "__doc__", None)
        return call

    def _run_check(self, name: str, method: Callable[..., Any], args: tuple, kwargs: dict) -> AssertionProxy:
        record = InvocationRecord(name, InvocationKind.CHECK, args, kwargs)
        self._bind()
        try:
            method(*args, **kwargs)
        except Exception as error:
            self._capture(record, error, CheckFailure)
        return self

    def _run_navigation(self, name: str, method: Callable[..., Any], args: tuple, kwargs: dict) -> AssertionProxy:
        record = InvocationRecord(name, InvocationKind.NAVIGATION, args, kwargs)
        self._bind()
        try:
            result = method(*args, **kwargs)
            if not is_assertion_type(type(result)):
                raise NavigationFailure(
                    f"{record.describe()} returned {type(result).__name__} "
                    f"instead of an assertion object: {result!r}"
                )
        except Exception as error:
            self._capture(record, error, NavigationFailure)
            target = InvocationClassifier.declared_target(type(self._delegate), name)
            if self._factory.capture_logger:
                self._factory.capture_logger.log_poisoned(record, target)
            logger.debug(f"Poisoned branch after {record.describe()}")
            return self._factory.poisoned(target)

        # a pending override moves to the new position
        child = self._factory.wrap(result, type(result), self._state.fork())
        self._state = self._state.consume_override()
        self._bind()
        return child

    def _capture(self, record: InvocationRecord, error: Exception, failure_type: Type[AssertionError]) -> None:
        """Record a failure with its message resolved against this position."""
        if isinstance(error, (CheckFailure, NavigationFailure)):
            default, cause = str(error), error.__cause__
            failure_type = CheckFailure if isinstance(error, CheckFailure) else NavigationFailure
        elif isinstance(error, AssertionError):
            default, cause = str(error) or describe_exception(error), error
        else:
            default, cause = describe_exception(error), error

        message = self._state.resolve_message(default)
        if cause is error or message != default:
            resolved = failure_type(message)
            resolved.__cause__ = cause
            error = resolved

        failure = self._factory.collector.append(error, label=self._state.label)
        self._state = self._state.consume_override()
        self._bind()

        if failure is not None and self._factory.capture_logger:
            self._factory.capture_logger.log_capture(record, failure)

    def _bind(self) -> None:
        """Expose the current chain state to the wrapped object."""
        # label and override are applied in _capture
        self._delegate.state = self._state.without_message_context()

    def _absorb(self, *args: Any, **kwargs: Any) -> AssertionProxy:
        return self

    def __dir__(self):
        names = set(object.__dir__(self))
        if self._delegate is not None:
            names.update(dir(self._delegate))
        return sorted(names)

    def __repr__(self) -> str:
        if self._status is ProxyStatus.POISONED:
            return f"<AssertionProxy {self._contract.__name__} poisoned>"
        return f"<AssertionProxy {self._delegate!r}>"
