import pytest

from fakes import (EXAMPLE_URL, OTHER_URL, SHOP_URL, FakeDriver, FakePlaywright,
                   FakeSyncPlaywright, FakeWeb, build_shop, el)
from omnibrowser.browser.playwright import driver as playwright_driver
from omnibrowser.browser.playwright.browser import PlaywrightBrowser
from omnibrowser.browser.selenium import browser as selenium_browser
from omnibrowser.browser.selenium.browser import SeleniumBrowser
from omnibrowser.cli.config import CONFIG_ENV_VAR


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep a developer's omnibrowser.json or OMNIBROWSER_CONFIG out of the tests."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def web():
    web = FakeWeb()
    web.add(EXAMPLE_URL, "Example Domain", lambda: [
        el("h1", text="Example Domain"),
        el("a", {"id": "more", "href": OTHER_URL}, text="More information"),
    ])
    web.add(OTHER_URL, "Example Org", lambda: [el("h1", text="Example Org")])
    web.add(SHOP_URL, "Shop", build_shop)
    return web


@pytest.fixture
def fake_playwright(monkeypatch, web):
    engine = FakePlaywright(web)
    monkeypatch.setattr(playwright_driver, "sync_playwright", lambda: FakeSyncPlaywright(engine))
    return engine


@pytest.fixture
def fake_webdriver(monkeypatch, web):
    launched = []

    def setup_webdriver(**kwargs):
        driver = FakeDriver(web)
        launched.append((driver, kwargs))
        return driver

    monkeypatch.setattr(selenium_browser, "setup_webdriver", setup_webdriver)
    return launched


@pytest.fixture
def pw(fake_playwright):
    browser = PlaywrightBrowser.init(logs=False)
    yield browser
    browser.close_browser()


@pytest.fixture
def sel(fake_webdriver):
    # No match waits: missing elements fail immediately
    browser = SeleniumBrowser.init(logs=False, action_timeout=0)
    yield browser
    browser.close_browser()


@pytest.fixture(params=["playwright", "selenium"])
def browser(request, fake_playwright, fake_webdriver):
    """The same session contract, once per backend."""
    if request.param == "playwright":
        session = PlaywrightBrowser.init(logs=False)
    else:
        session = SeleniumBrowser.init(logs=False, action_timeout=0)
    yield session
    session.close_browser()
