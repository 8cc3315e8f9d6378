import pytest
from playwright.sync_api import Error as PlaywrightError

from testsuites.unit.fakes import FakeClock, FakeHandle, FakePage
from waitkit.conditions import visibility
from waitkit.engine import WaitEngine
from waitkit.errors import DetachedError, FatalProbeError, NotFoundError
from waitkit.playwright_probe import PlaywrightProbe, translate_error
from waitkit.policy import WaitPolicy


def test_query_wraps_handles():
    handle = FakeHandle(text="Welcome", attributes={"role": "banner"})
    probe = PlaywrightProbe(FakePage({"#banner": [handle]}))

    nodes = probe.query("#banner")

    assert len(nodes) == 1
    assert nodes[0].is_visible()
    assert nodes[0].text() == "Welcome"
    assert nodes[0].attribute("role") == "banner"


def test_empty_query_raises_not_found():
    probe = PlaywrightProbe(FakePage())

    with pytest.raises(NotFoundError) as exc_info:
        probe.query("#missing")
    assert exc_info.value.locator == "#missing"


def test_detached_handle_maps_to_detached_error():
    handle = FakeHandle(error="Element is not attached to the DOM")
    node = PlaywrightProbe(FakePage({"#row": [handle]})).query("#row")[0]

    with pytest.raises(DetachedError) as exc_info:
        node.is_visible()
    assert isinstance(exc_info.value.__cause__, PlaywrightError)


def test_closed_page_maps_to_fatal_error():
    probe = PlaywrightProbe(FakePage(error="Target page, context or browser has been closed"))

    with pytest.raises(FatalProbeError):
        probe.query("#banner")


def test_other_playwright_errors_propagate_unchanged():
    error = PlaywrightError("Unexpected token in selector")

    assert translate_error(error) is error
    with pytest.raises(PlaywrightError):
        PlaywrightProbe(FakePage(error="Unexpected token in selector")).query("#x[")


def test_engine_waits_through_playwright_probe():
    page = FakePage({"#toast": [FakeHandle(visible=False)]})
    clock = FakeClock()
    engine = WaitEngine(PlaywrightProbe(page), clock=clock)

    outcome = engine.run(visibility("#toast"), WaitPolicy(timeout=1, poll_interval=0.5))
    assert not outcome.succeeded
    assert outcome.attempts == 3

    page.elements["#toast"] = [FakeHandle(visible=True)]
    assert engine.run(visibility("#toast"), WaitPolicy(timeout=1, poll_interval=0.5)).succeeded
