"""Tests for classifying chained calls from their declared return types."""

from __future__ import annotations

import typing
from typing import Optional, Self

import pytest

from soft_pytest.assertions import (
    AbstractAssert,
    DictAssert,
    ExceptionAssert,
    ListAssert,
    ListSizeAssert,
    NumberAssert,
    ObjectAssert,
    StringAssert,
)
from soft_pytest.assertions.strings import StringAssert as BundledStringAssert
from soft_pytest.core.classifier import (
    InvocationClassifier,
    InvocationKind,
    InvocationRecord,
    is_assertion_type,
)
from soft_pytest.core.errors import ConfigurationError


class TemperatureAssert(ObjectAssert):
    """Assertion family defined outside the package."""

    def is_freezing(self) -> Self:
        if self.actual > 0:
            self._fail(f"Expecting {self.actual} to be freezing")
        return self

    def in_fahrenheit(self) -> NumberAssert:
        return self._navigate(NumberAssert(self.actual * 9 / 5 + 32))

    def reading(self) -> float:
        return self.actual

    def either(self) -> Self | NumberAssert:
        return self

    def unannotated(self):
        return self.actual


class ParityAssert(ObjectAssert):
    """Checks annotated with the class name instead of Self."""

    def is_even(self) -> ParityAssert:
        if self.actual % 2:
            self._fail(f"Expecting {self.actual} to be even")
        return self

    def halved(self) -> NumberAssert:
        return self._navigate(NumberAssert(self.actual // 2))


# =============================================================================
# classify()
# =============================================================================


def test_self_return_is_check():
    assert InvocationClassifier.classify("Self", ObjectAssert) is InvocationKind.CHECK
    assert InvocationClassifier.classify(typing.Self, ObjectAssert) is InvocationKind.CHECK


def test_assertion_type_return_is_navigation():
    assert InvocationClassifier.classify(NumberAssert, StringAssert) is InvocationKind.NAVIGATION
    assert InvocationClassifier.classify("NumberAssert", StringAssert) is InvocationKind.NAVIGATION


def test_same_concrete_type_is_check():
    """A method declaring its own class keeps the object under test."""
    assert InvocationClassifier.classify("ListAssert", ListAssert) is InvocationKind.CHECK
    assert InvocationClassifier.classify(ListAssert, ListAssert) is InvocationKind.CHECK
    assert InvocationClassifier.classify("ListAssert", ObjectAssert, invoked_type=ListAssert) is InvocationKind.CHECK
    assert InvocationClassifier.classify(ObjectAssert, ListAssert) is InvocationKind.NAVIGATION


def test_optional_assertion_type_is_navigation():
    assert InvocationClassifier.classify(Optional[NumberAssert], ObjectAssert) is InvocationKind.NAVIGATION
    assert InvocationClassifier.classify("Optional[NumberAssert]", ObjectAssert) is InvocationKind.NAVIGATION


def test_self_wins_over_navigation_in_a_union():
    assert InvocationClassifier.classify("Self | NumberAssert", ObjectAssert) is InvocationKind.CHECK


@pytest.mark.parametrize("declared", [None, bool, "Any", "float", "None", int])
def test_other_returns_are_terminal(declared):
    assert InvocationClassifier.classify(declared, ObjectAssert) is InvocationKind.TERMINAL


def test_non_callable_member_is_terminal():
    assert (
        InvocationClassifier.classify("Self", ObjectAssert, callable_member=False)
        is InvocationKind.TERMINAL
    )


# =============================================================================
# Dispatch tables
# =============================================================================


def test_object_assert_dispatch_table():
    table = InvocationClassifier.dispatch_table(ObjectAssert)

    assert table["is_equal_to"] is InvocationKind.CHECK
    assert table["described_as"] is InvocationKind.CHECK
    assert table["as_"] is InvocationKind.CHECK
    assert table["extracting"] is InvocationKind.NAVIGATION
    assert table["actual_value"] is InvocationKind.TERMINAL


def test_list_assert_dispatch_table():
    table = InvocationClassifier.dispatch_table(ListAssert)

    assert table["has_size"] is InvocationKind.CHECK
    assert table["is_equal_to"] is InvocationKind.CHECK
    assert table["first"] is InvocationKind.NAVIGATION
    assert table["size"] is InvocationKind.NAVIGATION
    assert table["extracting"] is InvocationKind.NAVIGATION
    assert table["filtered_on"] is InvocationKind.NAVIGATION
    assert table["flat_extracting"] is InvocationKind.NAVIGATION
    assert table["zip_satisfy"] is InvocationKind.CHECK
    assert table["satisfies_any_of"] is InvocationKind.CHECK
    assert table["element_value"] is InvocationKind.TERMINAL
    assert table["elements"] is InvocationKind.TERMINAL


def test_navigation_tables_of_other_families():
    assert InvocationClassifier.dispatch_table(ListSizeAssert)["return_to_list"] is InvocationKind.NAVIGATION
    assert InvocationClassifier.dispatch_table(DictAssert)["keys"] is InvocationKind.NAVIGATION
    assert InvocationClassifier.dispatch_table(DictAssert)["extracting_from_entries"] is InvocationKind.NAVIGATION
    assert InvocationClassifier.dispatch_table(DictAssert)["get_value"] is InvocationKind.TERMINAL
    assert InvocationClassifier.dispatch_table(ExceptionAssert)["cause"] is InvocationKind.NAVIGATION
    assert InvocationClassifier.dispatch_table(ExceptionAssert)["root_cause"] is InvocationKind.NAVIGATION
    assert InvocationClassifier.dispatch_table(ExceptionAssert)["exception_type"] is InvocationKind.TERMINAL
    assert InvocationClassifier.dispatch_table(StringAssert)["length"] is InvocationKind.NAVIGATION


def test_user_defined_family_is_classified():
    """Subclasses register themselves and are classified the same way."""
    table = InvocationClassifier.dispatch_table(TemperatureAssert)

    assert is_assertion_type(TemperatureAssert)
    assert table["is_freezing"] is InvocationKind.CHECK
    assert table["in_fahrenheit"] is InvocationKind.NAVIGATION
    assert table["reading"] is InvocationKind.TERMINAL
    assert table["either"] is InvocationKind.CHECK
    assert table["unannotated"] is InvocationKind.TERMINAL
    assert table["is_equal_to"] is InvocationKind.CHECK


def test_class_named_return_is_check(session):
    """A failed is_even() keeps the chain on the same value."""
    table = InvocationClassifier.dispatch_table(ParityAssert)

    assert table["is_even"] is InvocationKind.CHECK
    assert table["halved"] is InvocationKind.NAVIGATION

    session.wrap(ParityAssert(3)).is_even().is_equal_to(4).halved().is_equal_to(1)

    assert [f.message for f in session.collected_failures()] == [
        "Expecting 3 to be even",
        "expected: 4\n but was: 3",
    ]


def test_same_named_family_does_not_replace_bundled_one(session):
    """Registration is by class, not by class name."""

    class StringAssert(ObjectAssert):
        def is_shouted(self) -> StringAssert:
            if self.actual != self.actual.upper():
                self._fail(f"Expecting {self.actual!r} to be upper case")
            return self

        def word_count(self) -> NumberAssert:
            return self._navigate(NumberAssert(len(self.actual.split())))

    bundled = InvocationClassifier.dispatch_table(BundledStringAssert)
    local = InvocationClassifier.dispatch_table(StringAssert)

    assert is_assertion_type(BundledStringAssert)
    assert is_assertion_type(StringAssert)
    assert bundled["length"] is InvocationKind.NAVIGATION
    assert "is_shouted" not in bundled
    assert local["is_shouted"] is InvocationKind.CHECK
    assert local["word_count"] is InvocationKind.NAVIGATION

    session.assert_that("Frodo").starts_with("Fro").length().is_equal_to(5)
    session.wrap(StringAssert("one ring")).is_shouted().word_count().is_equal_to(2)

    assert [f.message for f in session.collected_failures()] == ["Expecting 'one ring' to be upper case"]


def test_dispatch_table_is_cached():
    assert InvocationClassifier.dispatch_table(StringAssert) is InvocationClassifier.dispatch_table(StringAssert)


def test_dispatch_table_of_unregistered_type():
    with pytest.raises(ConfigurationError):
        InvocationClassifier.dispatch_table(int)


# =============================================================================
# Declared navigation targets
# =============================================================================


def test_declared_target():
    assert InvocationClassifier.declared_target(ListAssert, "size") is ListSizeAssert
    assert InvocationClassifier.declared_target(ExceptionAssert, "cause") is ObjectAssert
    assert InvocationClassifier.declared_target(ListSizeAssert, "return_to_list") is ListAssert
    assert InvocationClassifier.declared_target(ListAssert, "first") is AbstractAssert


def test_declared_target_falls_back_to_root_type():
    assert InvocationClassifier.declared_target(ListAssert, "no_such_method") is AbstractAssert


# =============================================================================
# InvocationRecord
# =============================================================================


def test_invocation_record_describe():
    record = InvocationRecord("filtered_on", InvocationKind.NAVIGATION, ("name",), {"expected": "Frodo"})

    assert record.describe() == "filtered_on('name', expected='Frodo')"
    assert InvocationRecord("first", InvocationKind.NAVIGATION).describe() == "first()"
