"""Contextual overrides carried along an assertion chain."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Iterator, Optional, Tuple, Union

from soft_pytest.core.representation import STANDARD_REPRESENTATION, Representation

Comparator = Callable[[Any, Any], int]


class ComparatorScope(Enum):
    """Registry scopes that are neither a type nor a field path."""

    ELEMENTS = "elements"


ScopeKey = Union[type, str, ComparatorScope]


class ComparatorRegistry:
    """
    Immutable mapping of comparator scopes to comparators.

    A scope is an element type, a dotted field path, or
    ComparatorScope.ELEMENTS for any element. Comparators follow the
    ``cmp(a, b) -> int`` convention, 0 meaning equal.
    """

    def __init__(self, entries: Optional[Dict[Hashable, Comparator]] = None):
        self._entries: Dict[Hashable, Comparator] = dict(entries or {})

    def with_entry(self, scope: ScopeKey, comparator: Comparator) -> ComparatorRegistry:
        """Return a copy with the entry for scope added or replaced."""
        if not callable(comparator):
            raise TypeError(f"Comparator must be callable, got {comparator!r}")
        entries = dict(self._entries)
        entries[scope] = comparator
        return ComparatorRegistry(entries)

    def lookup(self, value: Any, field_path: Optional[str] = None) -> Optional[Comparator]:
        """
        Find the comparator applying to a value.

        Resolution order: field path, the value's type along its MRO, then
        ComparatorScope.ELEMENTS.
        """
        if field_path is not None and field_path in self._entries:
            return self._entries[field_path]
        for cls in type(value).__mro__:
            if cls in self._entries:
                return self._entries[cls]
        return self._entries.get(ComparatorScope.ELEMENTS)

    def items(self) -> Iterator[Tuple[Hashable, Comparator]]:
        return iter(list(self._entries.items()))

    def __contains__(self, scope: object) -> bool:
        return scope in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComparatorRegistry):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        scopes = ", ".join(_scope_name(s) for s in self._entries)
        return f"ComparatorRegistry({scopes})"


def _scope_name(scope: Hashable) -> str:
    if isinstance(scope, type):
        return scope.__name__
    if isinstance(scope, ComparatorScope):
        return scope.value
    return str(scope)


@dataclass(frozen=True)
class ChainState:
    """
    Label, one-shot message override, representation and comparators of one
    chain position.

    Instances are immutable: every ``with_*`` method returns a new state, and
    ``fork()`` hands a copy to the proxy created at a navigation boundary.
    """

    label: Optional[str] = None
    message_override: Optional[str] = None
    representation: Representation = STANDARD_REPRESENTATION
    comparators: ComparatorRegistry = field(default_factory=ComparatorRegistry)

    def with_label(self, text: str) -> ChainState:
        """Label prefixed to failures recorded from now on."""
        return replace(self, label=text)

    def with_message_override(self, text: str, *args: Any) -> ChainState:
        """
        Replace the message of the next failure only.

        Args:
            text: Override text, a ``str.format`` template when args are given.
            args: Positional values interpolated into text.
        """
        message = text.format(*args) if args else text
        return replace(self, message_override=message)

    def consume_override(self) -> ChainState:
        """State after a failure has been recorded against this position."""
        if self.message_override is None:
            return self
        return replace(self, message_override=None)

    def with_comparator(self, scope: ScopeKey, comparator: Comparator) -> ChainState:
        """Add or replace a comparator registry entry."""
        return replace(self, comparators=self.comparators.with_entry(scope, comparator))

    def with_representation(self, representation: Representation) -> ChainState:
        if not isinstance(representation, Representation):
            raise TypeError(f"Expected a Representation, got {representation!r}")
        return replace(self, representation=representation)

    def fork(self) -> ChainState:
        """
        Copy handed to the proxy produced by a navigation call.

        A pending message override travels with the copy. The navigating
        position drops its own with consume_override(), so one override
        still replaces one message.
        """
        return replace(self)

    def without_message_context(self) -> ChainState:
        """State with no label and no override, for failures resolved later."""
        if self.label is None and self.message_override is None:
            return self
        return replace(self, label=None, message_override=None)

    def resolve_message(self, default: str) -> str:
        """Final failure message: override or default, prefixed with the label."""
        message = self.message_override if self.message_override is not None else default
        if self.label:
            return f"[{self.label}] {message}"
        return message

    def comparator_for(self, value: Any, field_path: Optional[str] = None) -> Optional[Comparator]:
        return self.comparators.lookup(value, field_path)

    def to_text(self, value: Any) -> str:
        """Render a value with the active representation."""
        return self.representation.to_text(value)
