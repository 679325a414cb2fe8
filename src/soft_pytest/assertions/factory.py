"""Pick the assertion family matching a value's type."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from numbers import Number
from typing import Any, List, Tuple, Type

from soft_pytest.assertions.base import AbstractAssert, BoolAssert, ObjectAssert
from soft_pytest.assertions.collections import DictAssert, ListAssert
from soft_pytest.assertions.exceptions import ExceptionAssert
from soft_pytest.assertions.numbers import NumberAssert
from soft_pytest.assertions.strings import StringAssert

# first match wins, so bool precedes Number and str precedes Iterable
_FAMILIES: List[Tuple[Tuple[type, ...], Type[AbstractAssert]]] = [
    ((bool,), BoolAssert),
    ((BaseException,), ExceptionAssert),
    ((str,), StringAssert),
    ((bytes, bytearray), ObjectAssert),
    ((Number,), NumberAssert),
    ((Mapping,), DictAssert),
    ((Iterable,), ListAssert),
]


def assertion_for(actual: Any) -> AbstractAssert:
    """
    Build the assertion object for actual.

    Usage:
        assertion_for("abc")   # StringAssert
        assertion_for([1, 2])  # ListAssert
        assertion_for(None)    # ObjectAssert
    """
    for types, family in _FAMILIES:
        if isinstance(actual, types):
            return family(actual)
    return ObjectAssert(actual)


def assert_that(actual: Any) -> AbstractAssert:
    """Hard assertion entry point: the first failure raises immediately."""
    return assertion_for(actual)
