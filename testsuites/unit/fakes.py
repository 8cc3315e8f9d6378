"""
In-memory stand-ins for the clock, the probe and Playwright objects.

The fake clock only moves when the engine sleeps (or a probe query is given
a cost), so timing assertions are exact.
"""

from playwright.sync_api import Error as PlaywrightError

from waitkit.errors import DetachedError, NotFoundError, WaitCancelledError


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.current = start
        self.sleeps = []

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds

    def sleep(self, seconds, cancel_token=None):
        if cancel_token is not None and cancel_token.cancelled:
            raise WaitCancelledError("Wait cancelled by caller")
        self.sleeps.append(seconds)
        self.current += seconds

    async def sleep_async(self, seconds):
        self.sleeps.append(seconds)
        self.current += seconds


class FakeNode:
    def __init__(self, visible=True, enabled=True, text="", attributes=None, detached=False):
        self.visible = visible
        self.enabled = enabled
        self._text = text
        self.attributes = attributes or {}
        self.detached = detached

    def _check(self):
        if self.detached:
            raise DetachedError("node is no longer attached")

    def is_visible(self):
        self._check()
        return self.visible

    def is_enabled(self):
        self._check()
        return self.enabled

    def text(self):
        self._check()
        return self._text

    def attribute(self, name):
        self._check()
        return self.attributes.get(name)


class FakeProbe:
    """
    Scripted probe: each locator maps to a list of responses consumed one per
    query, the last one repeating. A response is a list of nodes or an
    exception instance to raise. Unknown locators raise NotFoundError.
    """

    def __init__(self, responses=None, clock=None, query_cost=0.0):
        self.responses = {k: list(v) for k, v in (responses or {}).items()}
        self.clock = clock
        self.query_cost = query_cost
        self.calls = []

    def query(self, locator):
        self.calls.append(locator)
        if self.clock is not None and self.query_cost:
            self.clock.advance(self.query_cost)

        script = self.responses.get(locator)
        if not script:
            raise NotFoundError(locator)
        response = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(response, BaseException):
            raise response
        return list(response)


class FakeHandle:
    """Mimics the subset of playwright's ElementHandle the probe uses."""

    def __init__(self, visible=True, enabled=True, text="", attributes=None, error=None):
        self.visible = visible
        self.enabled = enabled
        self._text = text
        self.attributes = attributes or {}
        self.error = error
        self.clicks = 0
        self.filled = []

    def _check(self):
        if self.error is not None:
            raise PlaywrightError(self.error)

    def is_visible(self):
        self._check()
        return self.visible

    def is_enabled(self):
        self._check()
        return self.enabled

    def inner_text(self):
        self._check()
        return self._text

    def get_attribute(self, name):
        self._check()
        return self.attributes.get(name)

    def click(self):
        self._check()
        self.clicks += 1

    def fill(self, value):
        self._check()
        self.filled.append(value)


class FakePage:
    def __init__(self, elements=None, error=None):
        self.elements = elements or {}
        self.error = error
        self.queries = []

    def query_selector_all(self, selector):
        self.queries.append(selector)
        if self.error is not None:
            raise PlaywrightError(self.error)
        return list(self.elements.get(selector, []))
