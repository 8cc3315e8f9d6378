import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from testsuites.unit.fakes import FakeClock, FakeNode, FakeProbe
from waitkit.clock import CancellationToken, SystemClock
from waitkit.conditions import any_of, custom_predicate, gone, presence, text_equals, visibility
from waitkit.engine import WaitEngine, wait_until
from waitkit.errors import (
    ConfigurationError,
    DetachedError,
    FatalProbeError,
    NotFoundError,
    WaitCancelledError,
    WaitTimeoutError,
)
from waitkit.outcome import NOT_YET, Ready, WaitSuccess, WaitTimedOut
from waitkit.policy import WaitPolicy


def never(probe):
    return NOT_YET


def make_engine(responses=None, **probe_kwargs):
    clock = FakeClock()
    probe = FakeProbe(responses, clock=clock, **probe_kwargs)
    return WaitEngine(probe, clock=clock), probe, clock


def test_ready_on_first_call_returns_without_sleeping():
    node = FakeNode()
    engine, probe, clock = make_engine({"#banner": [[node]]})

    outcome = engine.run(presence("#banner"), WaitPolicy(timeout=5, poll_interval=0.5))

    assert isinstance(outcome, WaitSuccess)
    assert outcome.value is node
    assert outcome.elapsed == 0
    assert outcome.attempts == 1
    assert probe.calls == ["#banner"]
    assert clock.sleeps == []


def test_transient_not_found_is_retried_until_node_appears():
    node = FakeNode()
    not_found = NotFoundError("#banner")
    engine, probe, clock = make_engine(
        {"#banner": [not_found, not_found, not_found, [node]]}
    )

    outcome = engine.run(presence("#banner"), WaitPolicy(timeout=5, poll_interval=0.5))

    assert outcome.succeeded
    assert outcome.value is node
    assert outcome.attempts == 4
    assert outcome.elapsed == pytest.approx(1.5)


def test_text_never_matching_times_out_without_error():
    engine, probe, clock = make_engine({"#status": [[FakeNode(text="PENDING")]]})

    outcome = engine.run(
        text_equals("#status", "DONE"), WaitPolicy(timeout=5, poll_interval=0.5)
    )

    assert isinstance(outcome, WaitTimedOut)
    assert outcome.last_error is None
    assert outcome.attempts == 11
    assert outcome.elapsed == pytest.approx(5.0)
    assert outcome.timeout == 5
    assert "'#status'" in outcome.message


def test_gone_succeeds_immediately_when_nothing_matches():
    engine, probe, clock = make_engine()

    outcome = engine.run(gone("#spinner"), WaitPolicy(timeout=5, poll_interval=0.5))

    assert outcome.succeeded
    assert outcome.value is True
    assert outcome.attempts == 1
    assert outcome.elapsed == 0


def test_last_sleep_is_clipped_to_the_deadline():
    engine, probe, clock = make_engine()

    outcome = engine.run(never, WaitPolicy(timeout=1.0, poll_interval=0.375))

    assert not outcome.succeeded
    assert clock.sleeps == [0.375, 0.375, 0.25]
    # one extra attempt lands exactly on the deadline
    assert outcome.attempts == 4
    assert outcome.elapsed == 1.0


def test_interval_longer_than_timeout_makes_single_attempt():
    engine, probe, clock = make_engine()

    outcome = engine.run(never, WaitPolicy(timeout=1.0, poll_interval=2.0))

    assert outcome.attempts == 1
    assert clock.sleeps == []


def test_interval_equal_to_timeout_retries_at_the_boundary():
    engine, probe, clock = make_engine()

    outcome = engine.run(never, WaitPolicy(timeout=1.0, poll_interval=1.0))

    assert outcome.attempts == 2
    assert clock.sleeps == [1.0]


def test_success_on_the_deadline_wins_over_timeout():
    calls = {"n": 0}

    def ready_on_third(probe):
        calls["n"] += 1
        return Ready("ok") if calls["n"] == 3 else NOT_YET

    engine, probe, clock = make_engine()
    outcome = engine.run(ready_on_third, WaitPolicy(timeout=1.0, poll_interval=0.5))

    assert outcome.succeeded
    assert outcome.value == "ok"
    assert outcome.elapsed == 1.0


def test_slow_evaluation_consumes_the_budget():
    engine, probe, clock = make_engine(query_cost=3.0)

    outcome = engine.run(
        presence("#never"), WaitPolicy(timeout=2.0, poll_interval=0.5)
    )

    assert not outcome.succeeded
    assert outcome.attempts == 1
    assert clock.sleeps == []
    assert isinstance(outcome.last_error, NotFoundError)


def test_fatal_error_propagates_on_first_poll():
    fatal = FatalProbeError("session terminated")
    engine, probe, clock = make_engine({"#banner": [fatal]})

    with pytest.raises(FatalProbeError) as exc_info:
        engine.run(presence("#banner"), WaitPolicy(timeout=300, poll_interval=0.5))

    assert exc_info.value is fatal
    assert probe.calls == ["#banner"]
    assert clock.sleeps == []
    notes = getattr(exc_info.value, "__notes__", [])
    assert any("attempts=1" in note and "#banner" in note for note in notes)


def test_error_not_classified_transient_is_fatal():
    def broken(probe):
        raise KeyError("boom")

    engine, probe, clock = make_engine()

    with pytest.raises(KeyError):
        engine.run(custom_predicate(broken), WaitPolicy(timeout=5, poll_interval=0.5))
    assert clock.sleeps == []


def test_policy_ignored_errors_extend_condition_classification():
    def broken(probe):
        raise KeyError("boom")

    engine, probe, clock = make_engine()
    policy = WaitPolicy(timeout=1.0, poll_interval=0.5).ignoring(KeyError)

    outcome = engine.run(custom_predicate(broken), policy)

    assert not outcome.succeeded
    assert outcome.attempts == 3
    assert isinstance(outcome.last_error, KeyError)


class FlakyError(Exception):
    pass


def test_policy_ignored_error_in_any_of_does_not_hide_ready_sibling():
    node = FakeNode()
    engine, probe, clock = make_engine(
        {"#a": [FlakyError("flaky")], "#b": [NotFoundError("#b"), [node]]}
    )
    policy = WaitPolicy(timeout=2.0, poll_interval=0.5).ignoring(FlakyError)

    outcome = engine.run(any_of(presence("#a"), presence("#b")), policy)

    assert outcome.succeeded
    assert outcome.value is node
    assert outcome.attempts == 2
    assert clock.sleeps == [0.5]


def test_any_of_error_outside_policy_is_still_fatal():
    engine, probe, clock = make_engine({"#a": [FlakyError("flaky")]})

    with pytest.raises(FlakyError):
        engine.run(
            any_of(presence("#a"), presence("#b")),
            WaitPolicy(timeout=2.0, poll_interval=0.5),
        )
    assert probe.calls == ["#a", "#b"]
    assert clock.sleeps == []


def test_timeout_reports_last_transient_error():
    detached = FakeNode(detached=True)
    engine, probe, clock = make_engine({"#x": [[detached]]})

    outcome = engine.run(visibility("#x"), WaitPolicy(timeout=1.0, poll_interval=0.5))

    assert isinstance(outcome.last_error, DetachedError)
    assert "DetachedError" in outcome.message
    assert "element '#x' visible" in outcome.message


def test_invalid_policy_fails_before_polling():
    engine, probe, clock = make_engine()

    with pytest.raises(ConfigurationError):
        engine.run(presence("#banner"), {"timeout": 5})
    assert probe.calls == []


def test_zero_timeout_policy_cannot_be_built():
    with pytest.raises(ConfigurationError):
        WaitPolicy(timeout=0, poll_interval=0.5)


def test_unexpected_return_value_is_a_type_error():
    engine, probe, clock = make_engine()

    with pytest.raises(TypeError):
        engine.run(lambda probe: True, WaitPolicy(timeout=1, poll_interval=0.5))


def test_rerun_of_satisfied_condition_is_idempotent():
    engine, probe, clock = make_engine({"#banner": [[FakeNode()]]})
    condition = presence("#banner")
    policy = WaitPolicy(timeout=5, poll_interval=0.5)

    first = engine.run(condition, policy)
    second = engine.run(condition, policy)

    assert first.succeeded and second.succeeded
    assert first.attempts == second.attempts == 1
    assert probe.calls == ["#banner", "#banner"]


def test_plain_callable_condition_is_accepted():
    def banner_ready(probe):
        return Ready(42)

    engine, probe, clock = make_engine()
    outcome = engine.run(banner_ready, WaitPolicy(timeout=1, poll_interval=0.5))

    assert outcome.value == 42
    assert outcome.description == "banner_ready"


def test_cancelled_token_stops_before_first_poll():
    engine, probe, clock = make_engine()
    token = CancellationToken()
    token.cancel()

    with pytest.raises(WaitCancelledError):
        engine.run(presence("#banner"), WaitPolicy(timeout=5), cancel_token=token)
    assert probe.calls == []


@pytest.mark.timing
def test_cancellation_interrupts_real_sleep_promptly():
    engine = WaitEngine(FakeProbe(), clock=SystemClock())
    token = CancellationToken()
    timer = threading.Timer(0.1, token.cancel)
    timer.start()

    started = time.monotonic()
    try:
        with pytest.raises(WaitCancelledError):
            engine.run(never, WaitPolicy(timeout=30, poll_interval=5), cancel_token=token)
    finally:
        timer.cancel()

    assert time.monotonic() - started < 2.0


@pytest.mark.timing
def test_real_clock_timeout_overshoot_is_bounded():
    engine = WaitEngine(FakeProbe())
    policy = WaitPolicy(timeout=0.3, poll_interval=0.05)

    started = time.monotonic()
    outcome = engine.run(never, policy)
    spent = time.monotonic() - started

    assert not outcome.succeeded
    assert spent >= 0.3
    assert spent < 0.3 + 0.05 + 0.25


@pytest.mark.timing
def test_independent_waits_run_concurrently():
    def wait_on_own_probe(index):
        node = FakeNode(text=str(index))
        probe = FakeProbe({"#item": [NotFoundError("#item"), [node]]})
        outcome = WaitEngine(probe).run(
            presence("#item"), WaitPolicy(timeout=2, poll_interval=0.01)
        )
        return outcome.value.text()

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(wait_on_own_probe, range(4)))

    assert results == ["0", "1", "2", "3"]


def test_wait_until_unwraps_value_and_raises_on_timeout():
    node = FakeNode()
    probe = FakeProbe({"#ok": [[node]]})
    policy = WaitPolicy(timeout=0.05, poll_interval=0.01)

    assert wait_until(probe, presence("#ok"), policy) is node

    with pytest.raises(WaitTimeoutError) as exc_info:
        wait_until(probe, presence("#missing"), policy)
    assert isinstance(exc_info.value.outcome, WaitTimedOut)
    assert isinstance(exc_info.value.outcome.last_error, NotFoundError)
