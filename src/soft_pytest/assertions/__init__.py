"""Assertion families wrapped by the soft-assertion engine."""

from soft_pytest.assertions.base import AbstractAssert, BoolAssert, ObjectAssert, extract
from soft_pytest.assertions.collections import DictAssert, ListAssert, ListSizeAssert
from soft_pytest.assertions.exceptions import ExceptionAssert
from soft_pytest.assertions.factory import assert_that, assertion_for
from soft_pytest.assertions.numbers import NumberAssert
from soft_pytest.assertions.strings import StringAssert

__all__ = [
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
    "assertion_for",
    "extract",
]
