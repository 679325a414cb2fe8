"""Assertions on exceptions."""

from __future__ import annotations

from typing import Optional, Self, Type

from soft_pytest.assertions.base import ObjectAssert
from soft_pytest.assertions.strings import StringAssert


class ExceptionAssert(ObjectAssert):
    """
    Assertions on exceptions and their cause chain.

    The cause of an exception is its ``__cause__``, or its ``__context__``
    when the context was not suppressed.

    Usage:
        ExceptionAssert(error).has_message("boom").cause().is_instance_of(KeyError)
    """

    def has_message(self, message: str) -> Self:
        if str(self.actual) != message:
            self._fail(
                f"Expecting message to be:\n  {self._text(message)}\n"
                f"but was:\n  {self._text(str(self.actual))}"
            )
        return self

    def has_message_containing(self, text: str) -> Self:
        if text not in str(self.actual):
            self._fail(
                f"Expecting message:\n  {self._text(str(self.actual))}\nto contain:\n  {self._text(text)}"
            )
        return self

    def has_message_starting_with(self, prefix: str) -> Self:
        if not str(self.actual).startswith(prefix):
            self._fail(
                f"Expecting message:\n  {self._text(str(self.actual))}\nto start with:\n  {self._text(prefix)}"
            )
        return self

    def has_cause_instance_of(self, cause_type: Type[BaseException]) -> Self:
        cause = _cause_of(self.actual)
        if not isinstance(cause, cause_type):
            self._fail(
                f"Expecting a cause of type:\n  {cause_type.__name__}\n"
                f"but was:\n  {type(cause).__name__ if cause is not None else None}"
            )
        return self

    def has_no_cause(self) -> Self:
        cause = _cause_of(self.actual)
        if cause is not None:
            self._fail(f"Expecting exception without cause, but cause was:\n  {self._text(cause)}")
        return self

    def cause(self) -> ObjectAssert:
        """Switch to an ExceptionAssert on the direct cause."""
        cause = _cause_of(self.actual)
        if cause is None:
            self._fail_navigation(f"Expecting actual:\n  {self._text(self.actual)}\nto have a cause")
        return self._navigate(ExceptionAssert(cause))

    def root_cause(self) -> ObjectAssert:
        """Switch to an ExceptionAssert on the deepest cause."""
        cause = _cause_of(self.actual)
        if cause is None:
            self._fail_navigation(f"Expecting actual:\n  {self._text(self.actual)}\nto have a root cause")
        seen = {id(self.actual)}
        while _cause_of(cause) is not None and id(cause) not in seen:
            seen.add(id(cause))
            cause = _cause_of(cause)
        return self._navigate(ExceptionAssert(cause))

    def message(self) -> StringAssert:
        """Switch to the exception message."""
        return self._navigate(StringAssert(str(self.actual)))

    def exception_type(self) -> type:
        return type(self.actual)


def _cause_of(error: BaseException) -> Optional[BaseException]:
    if error.__cause__ is not None:
        return error.__cause__
    if error.__context__ is not None and not error.__suppress_context__:
        return error.__context__
    return None
