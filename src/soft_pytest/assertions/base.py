"""Base assertion classes."""

from __future__ import annotations

from abc import ABC
from collections.abc import Mapping
from typing import Any, Callable, Optional, Self, Type, Union

from soft_pytest.core.classifier import register_assertion_type
from soft_pytest.core.errors import CheckFailure, NavigationFailure
from soft_pytest.core.representation import Representation
from soft_pytest.core.state import ChainState, Comparator, ComparatorScope

Extractor = Union[str, Callable[[Any], Any]]

_MISSING = object()


class AbstractAssert(ABC):
    """
    Base class for all assertion objects.

    Subclasses follow one contract so the soft-assertion engine can classify
    their methods from the return annotation alone:
    - check methods return ``Self`` and raise CheckFailure when they fail
    - navigation methods return another assertion type and raise
      NavigationFailure when the new object under test cannot be reached
    - anything else is a terminal accessor

    Failure messages are built through ``self.state`` so labels, message
    overrides and the representation apply whether or not the object is
    wrapped in a proxy.
    """

    def __init__(self, actual: Any):
        """
        Initialize assertion.

        Args:
            actual: The value under test.
        """
        self.actual = actual
        self.state = ChainState()
        self._comparator: Optional[Comparator] = None

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        register_assertion_type(cls)

    # =========================================================================
    # Chain state
    # =========================================================================

    def described_as(self, description: str, *args: Any) -> Self:
        """Label failures of this assertion."""
        self.state = self.state.with_label(description.format(*args) if args else description)
        return self

    as_ = described_as

    def with_fail_message(self, message: str, *args: Any) -> Self:
        """Replace the default message of the next failure."""
        self.state = self.state.with_message_override(message, *args)
        return self

    overriding_error_message = with_fail_message

    def using_element_comparator(self, comparator: Comparator) -> Self:
        self.state = self.state.with_comparator(ComparatorScope.ELEMENTS, comparator)
        return self

    def using_comparator_for_type(self, comparator: Comparator, element_type: type) -> Self:
        self.state = self.state.with_comparator(element_type, comparator)
        return self

    def using_comparator_for_fields(self, comparator: Comparator, *field_paths: str) -> Self:
        for path in field_paths:
            self.state = self.state.with_comparator(path, comparator)
        return self

    def with_representation(self, representation: Representation) -> Self:
        self.state = self.state.with_representation(representation)
        return self

    def using_comparator(self, comparator: Comparator) -> Self:
        """Compare the actual value itself with comparator (not carried by navigation)."""
        self._comparator = comparator
        return self

    def using_default_comparator(self) -> Self:
        self._comparator = None
        return self

    # =========================================================================
    # Terminal accessors
    # =========================================================================

    def actual_value(self) -> Any:
        """The value under test."""
        return self.actual

    # =========================================================================
    # Helpers for subclasses
    # =========================================================================

    def _text(self, value: Any) -> str:
        return self.state.to_text(value)

    def _fail(self, default: str) -> None:
        raise CheckFailure(self.state.resolve_message(default))

    def _fail_navigation(self, default: str) -> None:
        raise NavigationFailure(self.state.resolve_message(default))

    def _navigate(self, target: AbstractAssert) -> AbstractAssert:
        """Hand the chain state over to the next object under test."""
        target.state = self.state.fork()
        self.state = self.state.consume_override()
        return target

    def _equal(self, actual: Any, expected: Any) -> bool:
        if self._comparator is not None:
            return self._comparator(actual, expected) == 0
        return actual == expected

    def _compare(self, actual: Any, other: Any) -> int:
        if self._comparator is not None:
            return self._comparator(actual, other)
        return (actual > other) - (actual < other)

    def _elements_equal(self, element: Any, expected: Any, field_path: Optional[str] = None) -> bool:
        comparator = self.state.comparator_for(element, field_path)
        if comparator is not None:
            return comparator(element, expected) == 0
        return element == expected

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.actual!r})"


register_assertion_type(AbstractAssert)


def extract(value: Any, extractor: Extractor) -> Any:
    """
    Pull a value out of an object.

    Args:
        value: Source object.
        extractor: A callable, or a dotted path of attribute names or mapping keys.

    Raises:
        AttributeError: If a path segment cannot be resolved.
    """
    if callable(extractor):
        return extractor(value)

    current = value
    for segment in extractor.split("."):
        current = _resolve_segment(current, segment, extractor)
    return current


def _resolve_segment(current: Any, segment: str, path: str) -> Any:
    if isinstance(current, Mapping):
        found = current.get(segment, _MISSING)
    else:
        found = getattr(current, segment, _MISSING)
    if found is _MISSING:
        raise AttributeError(
            f"Cannot resolve '{segment}' of '{path}' on {type(current).__name__}"
        )
    return found


class ObjectAssert(AbstractAssert):
    """
    Assertions that apply to any value.

    Usage:
        ObjectAssert(user).is_not_none().has_field_or_property_with_value("name", "Frodo")
    """

    def is_equal_to(self, expected: Any) -> Self:
        if not self._equal(self.actual, expected):
            self._fail(f"expected: {self._text(expected)}\n but was: {self._text(self.actual)}")
        return self

    def is_not_equal_to(self, other: Any) -> Self:
        if self._equal(self.actual, other):
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nnot to be equal to:\n  {self._text(other)}")
        return self

    def is_none(self) -> Self:
        if self.actual is not None:
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nto be None")
        return self

    def is_not_none(self) -> Self:
        if self.actual is None:
            self._fail("Expecting actual not to be None")
        return self

    def is_instance_of(self, expected_type: Union[Type[Any], tuple]) -> Self:
        if not isinstance(self.actual, expected_type):
            self._fail(
                f"Expecting actual:\n  {self._text(self.actual)}\n"
                f"to be an instance of:\n  {_type_names(expected_type)}\n"
                f"but was instance of:\n  {type(self.actual).__name__}"
            )
        return self

    def is_in(self, *values: Any) -> Self:
        if not any(self._equal(self.actual, v) for v in values):
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nto be in:\n  {self._text(list(values))}")
        return self

    def satisfies(self, *requirements: Callable[[Any], Any]) -> Self:
        """
        Run requirement callables that raise AssertionError when unmet.

        Other exceptions raised by a requirement propagate unchanged.
        """
        for requirement in requirements:
            try:
                requirement(self.actual)
            except AssertionError as e:
                self._fail(
                    f"Expecting actual:\n  {self._text(self.actual)}\n"
                    f"to satisfy the given requirements but:\n{e}"
                )
        return self

    def satisfies_any_of(self, *requirements: Callable[[Any], Any]) -> Self:
        """Pass when at least one requirement callable does not raise AssertionError."""
        errors = []
        for requirement in requirements:
            try:
                requirement(self.actual)
            except AssertionError as e:
                errors.append(str(e))
            else:
                return self
        details = "\n".join(f"-- requirement {i} --\n{text}" for i, text in enumerate(errors, start=1))
        self._fail(
            f"Expecting actual:\n  {self._text(self.actual)}\n"
            f"to satisfy at least one of the given requirements but none did:\n{details}"
        )
        return self

    def matches(self, predicate: Callable[[Any], bool], description: str = "given predicate") -> Self:
        if not predicate(self.actual):
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nto match {description}")
        return self

    def returns(self, expected: Any, getter: Callable[[Any], Any]) -> Self:
        value = getter(self.actual)
        if not self._elements_equal(value, expected):
            self._fail(
                f"Expecting actual:\n  {self._text(self.actual)}\n"
                f"to return:\n  {self._text(expected)}\nbut returned:\n  {self._text(value)}"
            )
        return self

    def has_field_or_property_with_value(self, path: str, expected: Any) -> Self:
        """Compare a dotted field path, honouring comparators registered for that path."""
        try:
            value = extract(self.actual, path)
        except AttributeError as e:
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nto have field or property '{path}' but: {e}")
            return self
        if not self._elements_equal(value, expected, field_path=path):
            self._fail(
                f"Expecting '{path}' of:\n  {self._text(self.actual)}\n"
                f"to be:\n  {self._text(expected)}\nbut was:\n  {self._text(value)}"
            )
        return self

    def extracting(self, extractor: Extractor) -> AbstractAssert:
        """Switch to the value extracted from actual."""
        from soft_pytest.assertions.factory import assertion_for

        return self._navigate(assertion_for(extract(self.actual, extractor)))


class BoolAssert(ObjectAssert):
    """Assertions on booleans."""

    def is_true(self) -> Self:
        if self.actual is not True:
            self._fail(f"Expecting value to be true but was {self._text(self.actual)}")
        return self

    def is_false(self) -> Self:
        if self.actual is not False:
            self._fail(f"Expecting value to be false but was {self._text(self.actual)}")
        return self


def _type_names(expected_type: Union[type, tuple]) -> str:
    if isinstance(expected_type, tuple):
        return " | ".join(t.__name__ for t in expected_type)
    return expected_type.__name__
