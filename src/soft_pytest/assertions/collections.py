"""Assertions on sequences and mappings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Callable, List, Optional, Self, Tuple, Union

from soft_pytest.assertions.base import AbstractAssert, Extractor, ObjectAssert, extract
from soft_pytest.assertions.numbers import NumberAssert
from soft_pytest.core.errors import TerminalInvocationError


class ListAssert(ObjectAssert):
    """
    Assertions on iterables, seen as an ordered list of elements.

    Element comparisons use the comparators registered on the chain state
    (element type, field path, or any element), falling back to ``==``.

    Usage:
        ListAssert(names).has_size(2).first().is_equal_to("Frodo")
    """

    def __init__(self, actual: Iterable[Any]):
        super().__init__(actual)
        self._elements: List[Any] = list(actual) if actual is not None else []

    @property
    def elements(self) -> List[Any]:
        return list(self._elements)

    # =========================================================================
    # Checks
    # =========================================================================

    def has_size(self, size: int) -> Self:
        if len(self._elements) != size:
            self._fail(
                f"Expected size: {size} but was: {len(self._elements)} in:\n{self._text(self._elements)}"
            )
        return self

    def is_empty(self) -> Self:
        if self._elements:
            self._fail(f"Expecting empty but was: {self._text(self._elements)}")
        return self

    def is_not_empty(self) -> Self:
        if not self._elements:
            self._fail("Expecting actual not to be empty")
        return self

    def contains(self, *values: Any) -> Self:
        missing = [v for v in values if not self._holds(v)]
        if missing:
            self._fail(
                f"Expecting actual:\n  {self._text(self._elements)}\n"
                f"to contain:\n  {self._text(list(values))}\nbut could not find the following element(s):\n  {self._text(missing)}"
            )
        return self

    def does_not_contain(self, *values: Any) -> Self:
        found = [v for v in values if self._holds(v)]
        if found:
            self._fail(
                f"Expecting actual:\n  {self._text(self._elements)}\n"
                f"not to contain:\n  {self._text(list(values))}\nbut found:\n  {self._text(found)}"
            )
        return self

    def contains_exactly(self, *values: Any) -> Self:
        """Same elements, same order."""
        same = len(values) == len(self._elements) and all(
            self._elements_equal(a, e) for a, e in zip(self._elements, values)
        )
        if not same:
            self._fail(
                f"Expecting actual:\n  {self._text(self._elements)}\n"
                f"to contain exactly (and in same order):\n  {self._text(list(values))}"
            )
        return self

    def all_satisfy(self, requirement: Callable[[Any], Any]) -> Self:
        errors = []
        for index, element in enumerate(self._elements):
            try:
                requirement(element)
            except AssertionError as e:
                errors.append(f"  element {index} {self._text(element)}: {e}")
        if errors:
            self._fail(
                f"Expecting all elements of:\n  {self._text(self._elements)}\n"
                f"to satisfy given requirements, but these elements did not:\n" + "\n".join(errors)
            )
        return self

    def zip_satisfy(self, other: Iterable[Any], requirement: Callable[[Any, Any], Any]) -> Self:
        """Run requirement on each pair of elements of actual and other, index by index."""
        others = list(other)
        if len(others) != len(self._elements):
            self._fail(
                f"Expecting actual and other to have the same size but actual size is {len(self._elements)} "
                f"and other size is {len(others)}:\n  {self._text(self._elements)}\n  {self._text(others)}"
            )
            return self
        errors = []
        for index, (element, other_element) in enumerate(zip(self._elements, others)):
            try:
                requirement(element, other_element)
            except AssertionError as e:
                errors.append(f"  ({self._text(element)}, {self._text(other_element)}) at index {index}: {e}")
        if errors:
            self._fail(
                f"Expecting zipped elements of:\n  {self._text(self._elements)}\nand:\n  {self._text(others)}\n"
                f"to satisfy given requirements but these zipped elements did not:\n" + "\n".join(errors)
            )
        return self

    def any_match(self, predicate: Callable[[Any], bool], description: str = "given predicate") -> Self:
        if not any(predicate(e) for e in self._elements):
            self._fail(f"Expecting any element of:\n  {self._text(self._elements)}\nto match {description}")
        return self

    # =========================================================================
    # Navigation
    # =========================================================================

    def first(self) -> AbstractAssert:
        """Switch to the first element."""
        self._require_elements("first element")
        return self._to_element(self._elements[0])

    def last(self) -> AbstractAssert:
        """Switch to the last element."""
        self._require_elements("last element")
        return self._to_element(self._elements[-1])

    def element(self, index: int) -> AbstractAssert:
        """Switch to the element at index."""
        if not -len(self._elements) <= index < len(self._elements):
            self._fail_navigation(
                f"Expecting index {index} to be within the bounds of:\n  {self._text(self._elements)}"
            )
        return self._to_element(self._elements[index])

    def single_element(self) -> AbstractAssert:
        """Switch to the only element."""
        if len(self._elements) != 1:
            self._fail_navigation(
                f"Expected size: 1 but was: {len(self._elements)} in:\n{self._text(self._elements)}"
            )
        return self._to_element(self._elements[0])

    def size(self) -> ListSizeAssert:
        """Switch to the number of elements; return_to_list() comes back."""
        return self._navigate(ListSizeAssert(len(self._elements), self))

    def extracting(self, extractor: Extractor) -> ObjectAssert:
        """Switch to a ListAssert on the values extracted from each element."""
        return self._navigate(ListAssert([extract(e, extractor) for e in self._elements]))

    def flat_extracting(self, *extractors: Extractor) -> ObjectAssert:
        """
        Switch to the values extracted from each element, flattened into one list.

        With one extractor, an iterable result contributes its items. With
        several, every extracted value is one item.
        """
        values: List[Any] = []
        for element in self._elements:
            if len(extractors) == 1:
                values.extend(_items_of(extract(element, extractors[0])))
            else:
                values.extend(extract(element, extractor) for extractor in extractors)
        return self._navigate(ListAssert(values))

    def filtered_on(
        self,
        condition: Union[str, Callable[[Any], bool]],
        expected: Any = None,
    ) -> ObjectAssert:
        """
        Switch to the elements matching a condition.

        Args:
            condition: A predicate, or a dotted field path compared to expected.
            expected: Value the field path must equal.
        """
        if callable(condition):
            kept = [e for e in self._elements if condition(e)]
        else:
            kept = [e for e in self._elements if extract(e, condition) == expected]
        return self._navigate(ListAssert(kept))

    # =========================================================================
    # Terminal
    # =========================================================================

    def element_value(self, index: int) -> Any:
        """The raw element at index."""
        try:
            return self._elements[index]
        except IndexError:
            raise TerminalInvocationError(
                f"No element at index {index}, size is {len(self._elements)}"
            ) from None

    def _require_elements(self, what: str) -> None:
        if not self._elements:
            self._fail_navigation(f"Expecting actual not to be empty to get its {what}")

    def _to_element(self, value: Any) -> AbstractAssert:
        from soft_pytest.assertions.factory import assertion_for

        return self._navigate(assertion_for(value))

    def _holds(self, value: Any) -> bool:
        return any(self._elements_equal(e, value) for e in self._elements)


class ListSizeAssert(NumberAssert):
    """Size of a list, able to navigate back to the list assertion."""

    def __init__(self, size: int, parent: ListAssert):
        super().__init__(size)
        self._parent = parent

    def return_to_list(self) -> ListAssert:
        """Switch back to the list whose size this is."""
        return self._navigate(self._parent)


class DictAssert(ObjectAssert):
    """
    Assertions on mappings.

    Usage:
        DictAssert(config).contains_key("name").extracting_by_key("name").is_equal_to("x")
    """

    def contains_key(self, *keys: Any) -> Self:
        missing = [k for k in keys if k not in self.actual]
        if missing:
            self._fail(
                f"Expecting actual:\n  {self._text(self.actual)}\n"
                f"to contain key(s):\n  {self._text(list(keys))}\nbut could not find:\n  {self._text(missing)}"
            )
        return self

    def does_not_contain_key(self, *keys: Any) -> Self:
        found = [k for k in keys if k in self.actual]
        if found:
            self._fail(f"Expecting actual:\n  {self._text(self.actual)}\nnot to contain key(s):\n  {self._text(found)}")
        return self

    def contains_entry(self, key: Any, value: Any) -> Self:
        if key not in self.actual or not self._elements_equal(self.actual[key], value):
            self._fail(
                f"Expecting actual:\n  {self._text(self.actual)}\n"
                f"to contain entry:\n  {self._text(key)}={self._text(value)}"
            )
        return self

    def has_size(self, size: int) -> Self:
        if len(self.actual) != size:
            self._fail(f"Expected size: {size} but was: {len(self.actual)} in:\n{self._text(self.actual)}")
        return self

    def is_empty(self) -> Self:
        if self.actual:
            self._fail(f"Expecting empty but was: {self._text(self.actual)}")
        return self

    def is_not_empty(self) -> Self:
        if not self.actual:
            self._fail("Expecting actual not to be empty")
        return self

    def extracting_by_key(self, key: Any) -> AbstractAssert:
        """Switch to the value stored under key."""
        from soft_pytest.assertions.factory import assertion_for

        if key not in self.actual:
            self._fail_navigation(
                f"Expecting actual:\n  {self._text(self.actual)}\nto contain key:\n  {self._text(key)}"
            )
        return self._navigate(assertion_for(self.actual[key]))

    def extracting_from_entries(self, *extractors: Callable[[Tuple[Any, Any]], Any]) -> ListAssert:
        """
        Switch to the values extracted from each ``(key, value)`` entry.

        With several extractors each entry becomes a tuple of their results.
        """
        entries = list(self.actual.items())
        if len(extractors) == 1:
            values = [extractors[0](entry) for entry in entries]
        else:
            values = [tuple(extractor(entry) for extractor in extractors) for entry in entries]
        return self._navigate(ListAssert(values))

    def keys(self) -> ListAssert:
        return self._navigate(ListAssert(list(self.actual.keys())))

    def values(self) -> ListAssert:
        return self._navigate(ListAssert(list(self.actual.values())))

    def size(self) -> NumberAssert:
        return self._navigate(NumberAssert(len(self.actual)))

    def get_value(self, key: Any, default: Optional[Any] = None) -> Any:
        """The raw value under key."""
        mapping: Mapping[Any, Any] = self.actual
        return mapping.get(key, default)


def _items_of(value: Any) -> List[Any]:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        return [value]
    return list(value)
