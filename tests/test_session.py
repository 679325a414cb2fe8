"""Tests for soft-assertion sessions, from begin_session() to assert_all()."""

import logging

import pytest

from soft_pytest import (
    AggregateFailure,
    CheckFailure,
    ConfigurationError,
    ListAssert,
    NumberAssert,
    SoftAssertConfig,
    SoftAssertions,
    StringAssert,
    TerminalInvocationError,
    assert_softly,
    begin_session,
    soft_assertions,
)
from soft_pytest.logging.capture_logger import EventKind


# =============================================================================
# Scenarios
# =============================================================================


def test_failing_then_passing_check(session):
    """One failure from the first call, the second passes silently."""
    proxy = session.wrap(NumberAssert(1))

    proxy.is_equal_to(2)
    proxy.is_equal_to(1)

    assert len(session.collected_failures()) == 1


def test_navigation_into_empty_list(session):
    """One failure from first(), none from the absorbed is_none()."""
    session.wrap(ListAssert([])).first().is_none()

    failures = session.collected_failures()
    assert len(failures) == 1
    assert failures[0].message == "Expecting actual not to be empty to get its first element"


def test_fresh_session_assert_all_returns(session):
    session.assert_all()

    assert session.closed


def test_message_override_scenario(session):
    session.wrap(NumberAssert(1)).with_fail_message("boom").is_equal_to(2)

    assert [f.message for f in session.collected_failures()] == ["boom"]


def test_two_chains_in_call_order(session):
    session.assert_that("Frodo").starts_with("Sam")
    session.assert_that(33).is_greater_than(50)

    failures = session.collected_failures()
    assert len(failures) == 2
    assert [f.sequence for f in failures] == [1, 2]
    assert "to start with" in failures[0].message
    assert "to be greater than" in failures[1].message


# =============================================================================
# Properties
# =============================================================================


@pytest.mark.parametrize("count", [1, 2, 5, 20])
def test_n_failing_checks_give_n_failures(session, count):
    for i in range(count):
        session.assert_that(i).is_equal_to(i + 1)

    failures = session.collected_failures()
    assert len(failures) == count
    assert [f.message for f in failures] == [
        f"expected: {i + 1}\n but was: {i}" for i in range(count)
    ]


def test_assert_all_lists_every_message_in_order(session):
    session.assert_that(1).is_equal_to(2)
    session.assert_that("a").is_equal_to("b")

    with pytest.raises(AggregateFailure) as exc_info:
        session.assert_all()

    assert str(exc_info.value) == (
        "Multiple Failures (2 failures)\n"
        "-- failure 1 --\n"
        "expected: 2\n but was: 1\n"
        "-- failure 2 --\n"
        "expected: 'b'\n but was: 'a'"
    )
    assert len(exc_info.value.failures) == 2


def test_sequence_spans_navigation_forks(session):
    """Sequence numbers increase across every proxy of the session."""
    users = session.assert_that(["Frodo", "Sam"])

    users.has_size(3)
    users.first().is_equal_to("Sam")
    users.size().is_greater_than(5).return_to_list().contains("Pippin")
    session.assert_that(None).is_not_none()

    assert [f.sequence for f in session.collected_failures()] == [1, 2, 3, 4, 5]


# =============================================================================
# Session API
# =============================================================================


def test_assert_that_picks_family(session):
    assert isinstance(session.assert_that("x"), StringAssert)
    assert isinstance(session.assert_that([1]), ListAssert)
    assert isinstance(session.assert_that(1.5), NumberAssert)


def test_fail_records_failure(session):
    cause = KeyError("id")

    session.fail("user {} not found", "frodo", cause=cause)

    failure = session.collected_failures()[0]
    assert failure.message == "user frodo not found"
    assert isinstance(failure.error, CheckFailure)
    assert failure.cause is cause


def test_should_have_thrown(session):
    session.should_have_thrown(ValueError)

    assert session.collected_failures()[0].message == "ValueError should have been thrown"


def test_errors_collected_and_was_success(session):
    assert session.was_success()

    session.assert_that(True).is_false()

    assert not session.was_success()
    errors = session.errors_collected()
    assert len(errors) == 1
    assert str(errors[0]) == "Expecting value to be false but was True"


def test_default_label_applies_to_new_chains():
    session = SoftAssertions(label="user")

    session.assert_that(1).is_equal_to(2)
    session.assert_that(1).described_as("age").is_equal_to(3)

    assert [f.message for f in session.collected_failures()] == [
        "[user] expected: 2\n but was: 1",
        "[age] expected: 3\n but was: 1",
    ]


def test_drained_session_rejects_new_chains(session):
    session.assert_all()

    with pytest.raises(ConfigurationError):
        session.assert_that(1)
    with pytest.raises(ConfigurationError):
        session.wrap(NumberAssert(1))


def test_drained_session_drops_late_captures(session, caplog):
    """A proxy kept past assert_all() no longer records anything."""
    proxy = session.assert_that(1)
    session.assert_all()

    with caplog.at_level(logging.WARNING):
        proxy.is_equal_to(2)

    assert session.collected_failures() == []
    assert "Dropping failure captured after drain" in caplog.text


def test_terminal_failure_aborts_block(session):
    session.assert_that(1).is_equal_to(2)

    with pytest.raises(TerminalInvocationError):
        session.assert_that([]).element_value(0)

    assert len(session.collected_failures()) == 1


def test_repr(session):
    assert repr(session) == "SoftAssertions(0 failure(s))"
    session.assert_all()
    assert repr(session) == "SoftAssertions(closed)"


# =============================================================================
# Entry points
# =============================================================================


def test_context_manager_asserts_on_exit():
    with pytest.raises(AggregateFailure, match="expected: 43"):
        with soft_assertions() as softly:
            softly.assert_that(42).is_equal_to(43)


def test_context_manager_success():
    with soft_assertions() as softly:
        softly.assert_that(42).is_equal_to(42)

    assert softly.closed


def test_context_manager_lets_block_error_win(caplog):
    """An error escaping the block is raised instead of the aggregate."""
    with caplog.at_level(logging.WARNING, logger="soft_pytest.core.session"):
        with pytest.raises(TerminalInvocationError):
            with soft_assertions() as softly:
                softly.assert_that(1).is_equal_to(2)
                softly.assert_that([]).element_value(3)

    assert softly.closed
    assert "Discarding 1 soft failure(s)" in caplog.text


def test_assert_softly():
    def block(softly):
        softly.assert_that("abc").has_length(4)
        softly.assert_that("abc").ends_with("z")

    with pytest.raises(AggregateFailure) as exc_info:
        assert_softly(block)

    assert len(exc_info.value.captured) == 2


def test_assert_softly_success():
    assert_softly(lambda softly: softly.assert_that({"a": 1}).contains_entry("a", 1))


def test_begin_session_with_config_builds_logger():
    config = SoftAssertConfig(log_captures=True, log_level="DEBUG")

    session = begin_session(config=config, label="cfg")
    session.assert_that(1).is_equal_to(2)

    assert session.collected_failures()[0].label == "cfg"


def test_begin_session_with_logger(capture_logger):
    session = begin_session(capture_logger=capture_logger)

    session.assert_that([1]).has_size(2)
    with pytest.raises(AggregateFailure):
        session.assert_all()

    assert len(capture_logger.get_events(EventKind.CAPTURE)) == 1
    assert len(capture_logger.get_events(EventKind.DRAIN)) == 1


def test_begin_session_without_capture_logging():
    session = begin_session(config=SoftAssertConfig(log_captures=False))

    assert session._factory.capture_logger is None
