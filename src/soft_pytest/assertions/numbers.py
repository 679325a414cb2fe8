"""Numeric assertions."""

from __future__ import annotations

from typing import Any, Self

from soft_pytest.assertions.base import ObjectAssert


class NumberAssert(ObjectAssert):
    """
    Assertions on numbers, ordered with the actual-value comparator if one is set.

    Usage:
        NumberAssert(42).is_positive().is_between(40, 45)
    """

    def is_greater_than(self, other: Any) -> Self:
        if not self._compare(self.actual, other) > 0:
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nto be greater than:\n  {self._text(other)}")
        return self

    def is_greater_than_or_equal_to(self, other: Any) -> Self:
        if not self._compare(self.actual, other) >= 0:
            self._fail(
                f"Expecting actual:\n  {self._text(self.actual)}\nto be greater than or equal to:\n  {self._text(other)}"
            )
        return self

    def is_less_than(self, other: Any) -> Self:
        if not self._compare(self.actual, other) < 0:
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nto be less than:\n  {self._text(other)}")
        return self

    def is_less_than_or_equal_to(self, other: Any) -> Self:
        if not self._compare(self.actual, other) <= 0:
            self._fail(
                f"Expecting actual:\n  {self._text(self.actual)}\nto be less than or equal to:\n  {self._text(other)}"
            )
        return self

    def is_between(self, start: Any, end: Any) -> Self:
        """Inclusive range check."""
        if not (self._compare(self.actual, start) >= 0 and self._compare(self.actual, end) <= 0):
            self._fail(
                f"Expecting actual:\n  {self._text(self.actual)}\n"
                f"to be between:\n  [{self._text(start)}, {self._text(end)}]"
            )
        return self

    def is_positive(self) -> Self:
        return self._check_sign(lambda c: c > 0, "positive")

    def is_negative(self) -> Self:
        return self._check_sign(lambda c: c < 0, "negative")

    def is_zero(self) -> Self:
        return self._check_sign(lambda c: c == 0, "zero")

    def is_close_to(self, expected: Any, tolerance: Any) -> Self:
        if abs(self.actual - expected) > tolerance:
            self._fail(
                f"Expecting actual:\n  {self._text(self.actual)}\n"
                f"to be close to:\n  {self._text(expected)}\n"
                f"by less than {self._text(tolerance)} but difference was {self._text(abs(self.actual - expected))}"
            )
        return self

    def _check_sign(self, accept, name: str) -> Self:
        if not accept(self._compare(self.actual, 0)):
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nto be {name}")
        return self
