"""
Example test file demonstrating soft-pytest usage.

Every test here passes. The tests that show failures catch the aggregate
failure themselves so you can see what it contains.

Run with:
    pytest examples/test_example.py -v
"""

from dataclasses import dataclass, field
from typing import List

import pytest

from soft_pytest import (
    AggregateFailure,
    UNICODE_REPRESENTATION,
    assert_softly,
    soft_assertions,
)


@dataclass
class Order:
    id: int
    customer: str
    items: List[str] = field(default_factory=list)
    total: float = 0.0


ORDERS = [
    Order(1, "Frodo", ["rope", "lembas"], 12.5),
    Order(2, "Sam", ["pan"], 4.0),
    Order(3, "Bolsón", [], 0.0),
]


# =============================================================================
# Basic Tests
# =============================================================================


def test_order_fields(softly):
    """The softly fixture reports every failed check after the test body."""
    order = ORDERS[0]

    softly.assert_that(order.id).is_positive()
    softly.assert_that(order.customer).starts_with("Fro").has_length(5)
    softly.assert_that(order.items).contains("rope").has_size(2)
    softly.assert_that(order.total).is_close_to(12.5, 0.01)


def test_navigation(softly):
    """Navigate to elements, sizes and extracted values."""
    softly.assert_that(ORDERS).extracting("customer").contains_exactly("Frodo", "Sam", "Bolsón")
    (
        softly.assert_that(ORDERS)
        .filtered_on(lambda o: o.total > 1)
        .size()
        .is_equal_to(2)
        .return_to_list()
        .first()
        .extracting("id")
        .is_equal_to(1)
    )
    softly.assert_that(ORDERS).last().has_field_or_property_with_value("items", [])


@pytest.mark.soft_label("orders")
def test_labelled_chains(softly):
    """Every chain in this test is labelled "orders"."""
    softly.assert_that(ORDERS).has_size(3)


# =============================================================================
# Collecting Failures
# =============================================================================


def test_all_failures_are_reported():
    """One aggregate failure lists every failed check in order."""
    with pytest.raises(AggregateFailure) as exc_info:
        with soft_assertions() as softly:
            softly.assert_that(ORDERS[1].items).described_as("items of order 2").contains("rope")
            softly.assert_that(ORDERS[2].items).first().is_equal_to("pan")
            softly.assert_that(ORDERS[2].customer).with_representation(UNICODE_REPRESENTATION).is_equal_to("Bolson")

    print(exc_info.value)
    assert len(exc_info.value.failures) == 3
    assert exc_info.value.messages[0].startswith("[items of order 2]")


def test_custom_failure_message():
    """A failure message override applies to the next failure only."""

    def checks(softly):
        softly.assert_that(ORDERS[1].total).with_fail_message("order 2 is too cheap").is_greater_than(10).is_greater_than(20)

    with pytest.raises(AggregateFailure) as exc_info:
        assert_softly(checks)

    assert exc_info.value.messages[0] == "order 2 is too cheap"
    assert exc_info.value.messages[1].startswith("Expecting actual:")


@pytest.mark.soft_no_auto_assert
def test_inspect_without_failing(softly):
    """Look at the collected failures yourself."""
    softly.assert_that(ORDERS[2].total).is_positive()

    assert not softly.was_success()
    assert "to be positive" in softly.collected_failures()[0].message
