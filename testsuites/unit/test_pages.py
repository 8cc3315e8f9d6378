import pytest

from testsuites.unit.fakes import FakeClock, FakeHandle, FakePage
from waitkit.config_loader import ConfigLoader
from waitkit.engine import WaitEngine
from waitkit.errors import WaitTimeoutError
from waitkit.pages import BasePage, LoginPage
from waitkit.playwright_probe import PlaywrightProbe


def make_page(cls, elements, **kwargs):
    page = FakePage(elements)
    clock = FakeClock()
    engine = WaitEngine(PlaywrightProbe(page), clock=clock)
    return cls(page, engine=engine, **kwargs), page, clock


def test_login_fills_form_and_clicks_button():
    username, password, button = FakeHandle(), FakeHandle(), FakeHandle()
    login_page, page, clock = make_page(
        LoginPage,
        {"#username": [username], "#password": [password], "#login-button": [button]},
    )

    login_page.login("demo_user", "demo_password")

    assert username.filled == ["demo_user"]
    assert password.filled == ["demo_password"]
    assert button.clicks == 1
    assert ".login-spinner" in page.queries


def test_click_waits_until_button_is_enabled():
    button = FakeHandle(enabled=False)
    base_page, page, clock = make_page(BasePage, {"#save": [button]})

    with pytest.raises(WaitTimeoutError) as exc_info:
        base_page.click("#save", scenario="fast")

    assert button.clicks == 0
    assert "clickable" in str(exc_info.value)
    assert clock.now() == pytest.approx(3.0)


def test_error_message_is_none_when_banner_never_shows():
    login_page, page, clock = make_page(LoginPage, {})

    assert login_page.error_message() is None


def test_error_message_returns_banner_text():
    banner = FakeHandle(text="Invalid credentials")
    login_page, page, clock = make_page(
        LoginPage, {"[data-testid='login-error']": [banner]}
    )

    assert login_page.error_message() == "Invalid credentials"


def test_page_uses_configured_scenario_policy(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("wait:\n  scenarios:\n    element:\n      timeout: 2\n", encoding="utf-8")
    base_page, page, clock = make_page(
        BasePage, {}, config=ConfigLoader(config_path=config_path)
    )

    assert base_page.policy().timeout == 2
    with pytest.raises(WaitTimeoutError):
        base_page.wait_visible("#missing")
    assert clock.now() == pytest.approx(2.0)


def test_wait_timeout_env_reaches_page_objects(monkeypatch, tmp_path):
    monkeypatch.setenv("WAIT_TIMEOUT", "1.5")
    base_page, page, clock = make_page(
        BasePage, {}, config=ConfigLoader(config_path=tmp_path / "absent.yaml")
    )

    assert base_page.policy().timeout == 1.5
    with pytest.raises(WaitTimeoutError):
        base_page.wait_visible("#missing")
    assert clock.now() == pytest.approx(1.5)
