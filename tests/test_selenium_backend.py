from types import SimpleNamespace

import pytest
from fakes import SHOP_URL, FakeDriver, FakeWeb, tab_of
from selenium.common.exceptions import TimeoutException
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.remote.command import Command

from omnibrowser import ActionOptions
from omnibrowser.browser.common.exceptions import (ElementNotFoundError,
                                                   UnsupportedBackendError)
from omnibrowser.browser.selenium import driver as selenium_driver
from omnibrowser.browser.selenium.browser import split_chord, to_selenium_key


# Launch

class FakeManager:
    def __init__(self, *args, **kwargs):
        self.kwargs = kwargs

    def install(self):
        return "/drivers/managed"


@pytest.fixture
def webdrivers(monkeypatch):
    built = []

    def factory(name):
        def build(service=None, options=None):
            driver = FakeDriver(FakeWeb())
            built.append((name, service, options, driver))
            return driver
        return build

    monkeypatch.setattr(selenium_driver, "webdriver", SimpleNamespace(
        Chrome=factory("chrome"), Edge=factory("edge"), Firefox=factory("firefox")))
    for manager in ("ChromeDriverManager", "EdgeChromiumDriverManager", "GeckoDriverManager"):
        monkeypatch.setattr(selenium_driver, manager, FakeManager)
    return built


def test_chrome_launch(webdrivers):
    driver = selenium_driver.setup_webdriver(browser_type="chrome", action_timeout=2500)
    name, service, options, _ = webdrivers[0]
    assert name == "chrome"
    assert service.path == "/drivers/managed"
    assert "--headless=new" in options.arguments
    assert driver.page_load_timeouts == [2.5]
    assert driver.script_timeouts == [2.5]


def test_explicit_driver_path_and_visible_mode(webdrivers):
    selenium_driver.setup_webdriver(browser_type="firefox", headless=False, webdriver_path="/usr/bin/geckodriver")
    name, service, options, _ = webdrivers[0]
    assert name == "firefox"
    assert service.path == "/usr/bin/geckodriver"
    assert "-headless" not in options.arguments


def test_stealth_only_for_chromium_family(webdrivers, monkeypatch):
    stealthed = []
    monkeypatch.setattr(selenium_driver, "apply_stealth_mode", stealthed.append)
    chrome = selenium_driver.setup_webdriver(browser_type="chromium", stealth=True)
    selenium_driver.setup_webdriver(browser_type="edge", stealth=True)
    assert stealthed == [chrome]


def test_unknown_variant(webdrivers):
    with pytest.raises(UnsupportedBackendError):
        selenium_driver.setup_webdriver(browser_type="webkit")
    assert webdrivers == []


def test_init_passes_config(fake_webdriver):
    from omnibrowser.browser.selenium.browser import SeleniumBrowser

    browser = SeleniumBrowser.init(browser="firefox", webdriver_path="/x", action_timeout=100)
    _, kwargs = fake_webdriver[0]
    assert kwargs == {"browser_type": "firefox", "headless": True, "action_timeout": 100,
                      "webdriver_path": "/x", "stealth": False}
    assert browser.config.backend == "selenium"
    browser.close_browser()


# Keys

@pytest.mark.parametrize("name, key", [
    ("a", "a"),
    ("Enter", Keys.ENTER),
    ("PageDown", Keys.PAGE_DOWN),
    ("ArrowLeft", Keys.ARROW_LEFT),
    ("Control", Keys.CONTROL),
    ("F5", Keys.F5),
])
def test_key_names(name, key):
    assert to_selenium_key(name) == key


def test_unknown_key_name():
    with pytest.raises(ValueError):
        to_selenium_key("Hyper")


def test_split_chord():
    assert split_chord("Control+Shift+a") == (["Control", "Shift"], "a")
    assert split_chord("+") == ([], "+")
    assert split_chord("Shift++") == (["Shift"], "+")
    assert split_chord("Enter") == ([], "Enter")


# Handle resolution

def test_element_is_resolved_again_after_reload(sel):
    sel.navigate_to(SHOP_URL)
    name = sel.selector("#name")
    name.fill("Ada")
    sel.refresh()
    name.fill("Grace")
    assert name.get_value() == "Grace"


def test_collection_children_survive_reload(sel):
    sel.navigate_to(SHOP_URL)
    items = sel.selector(".item").map(lambda element, index: element)
    sel.refresh()
    assert items[2].get_text() == "Cherry"


def test_removed_element_is_reported_missing(sel):
    sel.navigate_to(SHOP_URL)
    box = sel.selector("#box")
    assert box.get_text() == "Box"
    tab_of(sel).document.body.children[3].remove()
    with pytest.raises(ElementNotFoundError):
        box.get_text()
    assert box.is_visible() is False


def test_ambiguous_match_uses_first(sel):
    sel.navigate_to(SHOP_URL)
    sel.selector(".item").click()
    items = tab_of(sel).document.body.children[0].children
    assert [item.events for item in items] == [["click"], [], []]


def test_hidden_element_wait_times_out(sel):
    sel.navigate_to(SHOP_URL)
    with pytest.raises(TimeoutException):
        sel.selector("#ghost").wait_for_element()


def test_gestures_use_actions_api(sel):
    sel.navigate_to(SHOP_URL)
    box = sel.selector("#box")
    box.hover()
    box.right_click()
    box.double_click()
    sel.selector("#source").drag_and_drop(sel.selector("#target"))
    actions = [params for command, params in sel.driver.commands if command == Command.W3C_ACTIONS]
    assert len(actions) == 4
    assert "node-" in str(actions[0])


def test_page_load_timeout_follows_options(sel):
    sel.navigate_to(SHOP_URL, ActionOptions(timeout=1500))
    sel.navigate_to(SHOP_URL, ActionOptions(timeout=1500))
    sel.refresh()
    assert sel.driver.page_load_timeouts == [1.5, 0]


# Page-level groups

def performed(driver):
    """Flattened W3C actions of each perform() call."""
    return [
        [action for device in params["actions"] for action in device["actions"]]
        for command, params in driver.commands if command == Command.W3C_ACTIONS
    ]


def test_keyboard_and_scroll_send_actions(sel):
    sel.keyboard_actions.press("Control+a")
    sel.scroll.down()
    chord, scroll = performed(sel.driver)
    assert [a["value"] for a in chord if a["type"] == "keyDown"] == [Keys.CONTROL, "a"]
    assert [a["value"] for a in scroll if a["type"] == "keyDown"] == [Keys.PAGE_DOWN]


def test_mouse_sends_pointer_actions(sel):
    sel.mouse_actions.move(5, 6)
    sel.mouse_actions.click(7.6, 8)
    sel.mouse_actions.double_click(9, 10)
    move, click, double = performed(sel.driver)
    assert [(a["x"], a["y"]) for a in move if a["type"] == "pointerMove"] == [(5, 6)]
    assert [a["type"] for a in click] == ["pointerMove", "pointerDown", "pointerUp"]
    assert [a["type"] for a in double].count("pointerDown") == 2


def test_evaluate_wraps_function(sel):
    sel.driver.evaluate_result = "ok"
    assert sel.evaluate("(n) => n + 1", 1) == "ok"
    script, args = sel.driver.scripts[-1]
    assert script == "return ((n) => n + 1).apply(null, arguments);"
    assert args == (1,)


def test_page_load_wait_checks_ready_state(sel):
    sel.wait_for.page_load(ActionOptions(timeout=1000))
    assert "document.readyState" in sel.driver.scripts[-1][0]


def test_tabs_are_window_handles(sel):
    sel.open_tab()
    sel.open_tab()
    assert sel.driver.window_handles == ["window-1", "window-2", "window-3"]
    sel.switch_to_tab(0)
    assert sel.driver.focused == "window-1"
    sel.close_tab()
    assert sel.driver.window_handles == ["window-2", "window-3"]
    assert sel.driver.focused == "window-3"
