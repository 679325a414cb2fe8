"""String assertions."""

from __future__ import annotations

import re
from typing import Self

from soft_pytest.assertions.base import ObjectAssert
from soft_pytest.assertions.numbers import NumberAssert


class StringAssert(ObjectAssert):
    """
    Assertions on text.

    Usage:
        StringAssert("Frodo").starts_with("Fro").length().is_equal_to(5)
    """

    def starts_with(self, prefix: str) -> Self:
        if not self.actual.startswith(prefix):
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nto start with:\n  {self._text(prefix)}")
        return self

    def ends_with(self, suffix: str) -> Self:
        if not self.actual.endswith(suffix):
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nto end with:\n  {self._text(suffix)}")
        return self

    def contains(self, *values: str) -> Self:
        missing = [v for v in values if v not in self.actual]
        if missing:
            self._fail(
                f"Expecting actual:\n  {self._text(self.actual)}\n"
                f"to contain:\n  {self._text(list(values))}\nbut could not find:\n  {self._text(missing)}"
            )
        return self

    def does_not_contain(self, *values: str) -> Self:
        found = [v for v in values if v in self.actual]
        if found:
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nnot to contain:\n  {self._text(found)}")
        return self

    def is_empty(self) -> Self:
        if self.actual != "":
            self._fail(f"Expecting empty but was: {self._text(self.actual)}")
        return self

    def is_not_empty(self) -> Self:
        if self.actual == "":
            self._fail("Expecting actual not to be empty")
        return self

    def is_blank(self) -> Self:
        if self.actual.strip():
            self._fail(f"Expecting blank but was: {self._text(self.actual)}")
        return self

    def has_length(self, length: int) -> Self:
        if len(self.actual) != length:
            self._fail(
                f"Expected size: {length} but was: {len(self.actual)} in:\n{self._text(self.actual)}"
            )
        return self

    def matches_pattern(self, pattern: str, flags: int = 0) -> Self:
        if not re.search(pattern, self.actual, flags):
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nto match pattern:\n  {self._text(pattern)}")
        return self

    def is_equal_to_ignoring_case(self, expected: str) -> Self:
        if self.actual.casefold() != expected.casefold():
            self._fail(
                f"Expecting actual:\n  {self._text(self.actual)}\nto be equal to:\n  {self._text(expected)}\nwhen ignoring case"
            )
        return self

    def length(self) -> NumberAssert:
        """Switch to the length of the text."""
        return self._navigate(NumberAssert(len(self.actual)))
