"""Strategies for rendering values inside failure messages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Representation(ABC):
    """Turns a value into the text shown in failure messages."""

    @abstractmethod
    def to_text(self, value: Any) -> str:
        """Render a value."""
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class StandardRepresentation(Representation):
    """Python ``repr()`` of the value."""

    def to_text(self, value: Any) -> str:
        return repr(value)


class UnicodeRepresentation(StandardRepresentation):
    """
    Like the standard representation, with non-ASCII characters escaped.

    Usage:
        UnicodeRepresentation().to_text("ó")  # "'\\u00f3'"
    """

    def to_text(self, value: Any) -> str:
        text = super().to_text(value)
        return "".join(c if ord(c) < 128 else _escape(c) for c in text)


def _escape(char: str) -> str:
    code = ord(char)
    if code > 0xFFFF:
        return f"\\U{code:08x}"
    return f"\\u{code:04x}"


STANDARD_REPRESENTATION = StandardRepresentation()
UNICODE_REPRESENTATION = UnicodeRepresentation()
