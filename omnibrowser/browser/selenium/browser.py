#!/usr/bin/env python3
"""
Selenium browser session module.

SeleniumBrowser implements the Browser interface on top of a Selenium
WebDriver. Tabs are window handles; the driver focuses one window at a
time, so the session and its elements re-focus their own window before
touching the page.
"""

import logging
import re
import time

from selenium.common.exceptions import TimeoutException
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.actions.action_builder import ActionBuilder
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from ...cli.config import BrowserConfig, resolve_config
from ..common.exceptions import SessionClosedError, TabNotFoundError
from ..common.interface import (AlertActions, Browser, KeyboardActions,
                                MouseActions, WaitActions)
from ..common.policy import ActionOptions, ActionPolicy
from ..common.selectors import parse_selector
from .driver import setup_webdriver
from .element import SeleniumElement, seconds

logger = logging.getLogger(__name__)


def to_selenium_key(name):
    """
    Translate a Playwright key name to the string Selenium sends.

    "PageDown" becomes Keys.PAGE_DOWN, "Control" becomes Keys.CONTROL and a
    single character is sent as is.

    Raises:
        ValueError: If the name is not a known key
    """
    if len(name) == 1:
        return name
    key = getattr(Keys, re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name).upper(), None)
    if key is None:
        raise ValueError(f"Unknown key: {name}")
    return key


def split_chord(key):
    """Split "Control+Shift+a" into (["Control", "Shift"], "a")."""
    if len(key) == 1 or "+" not in key:
        return [], key
    if key.endswith("++"):
        return key[:-2].split("+"), "+"
    *modifiers, main = key.split("+")
    return modifiers, main


class SeleniumBrowser(Browser):
    """Browser session backed by a Selenium WebDriver."""

    # Backend overlay between the configuration defaults and call-site options
    action_defaults = ActionOptions()

    def __init__(self, driver, config: BrowserConfig):
        """
        Wrap an already-started WebDriver.

        Not meant to be called directly; use SeleniumBrowser.init() or
        BackendSelector.create(), which start the driver first.
        """
        self.driver = driver
        self._tabs = [driver.current_window_handle]
        self._current = 0
        self._focused = self._tabs[0]
        self._page_load_timeout = config.action_timeout
        self._closed = False
        self.config = config
        self.policy = ActionPolicy(config.action_options(), self.action_defaults)

    @classmethod
    def init(cls, config=None, **overrides):
        """
        Start a WebDriver and return a session with one open tab.

        Args:
            config: Optional BrowserConfig; resolved from defaults and the
                config file when omitted
            **overrides: Configuration fields to override

        Returns:
            SeleniumBrowser: The new session

        Raises:
            UnsupportedBackendError: If the configured engine variant is unknown
        """
        if config is None:
            config = resolve_config(**overrides)
        else:
            config = config.with_overrides(**overrides)
        config = config.with_overrides(backend="selenium")

        driver = setup_webdriver(
            browser_type=config.browser,
            headless=config.headless,
            action_timeout=config.action_timeout,
            webdriver_path=config.webdriver_path,
            stealth=config.stealth,
        )
        return cls(driver, config)

    @property
    def window(self):
        """The current tab's window handle."""
        if self._closed:
            raise SessionClosedError("Browser session is closed")
        return self._tabs[self._current]

    def focus(self, handle):
        """
        Make the driver act on the window with the given handle.

        Returns:
            WebDriver: The driver, focused on that window
        """
        if self._closed:
            raise SessionClosedError("Browser session is closed")
        if self._focused != handle:
            self.driver.switch_to.window(handle)
            self._focused = handle
        return self.driver

    @property
    def page(self):
        """The driver, focused on the current tab."""
        return self.focus(self.window)

    @property
    def tab_count(self):
        return len(self._tabs)

    @property
    def current_tab(self):
        return self._current

    @property
    def closed(self):
        return self._closed

    def selector(self, selector, force_type=None):
        parsed = parse_selector(selector, force_type)
        return SeleniumElement(self, self.window, selector=parsed, description=str(parsed))

    # Navigation

    def _load(self, operation, timeout):
        driver = self.page
        if timeout is not None and timeout != self._page_load_timeout:
            driver.set_page_load_timeout(seconds(timeout))
            self._page_load_timeout = timeout
        operation(driver)

    def navigate_to(self, url, options=None):
        self.policy.execute(
            f"Navigating to {url}", lambda timeout: self._load(lambda driver: driver.get(url), timeout), options)

    def get_url(self, options=None):
        return self.policy.execute("Getting URL", lambda timeout: self.page.current_url, options)

    def get_title(self, options=None):
        return self.policy.execute("Getting title", lambda timeout: self.page.title, options)

    def navigate_back(self, options=None):
        self.policy.execute(
            "Navigating back", lambda timeout: self._load(lambda driver: driver.back(), timeout), options)

    def navigate_forward(self, options=None):
        self.policy.execute(
            "Navigating forward", lambda timeout: self._load(lambda driver: driver.forward(), timeout), options)

    def refresh(self, options=None):
        self.policy.execute(
            "Refreshing page", lambda timeout: self._load(lambda driver: driver.refresh(), timeout), options)

    # Tabs

    def open_tab(self, url=None, options=None):
        def open_new(timeout):
            driver = self.page
            driver.switch_to.new_window("tab")
            handle = driver.current_window_handle
            self._tabs.append(handle)
            self._focused = handle
            self._current = len(self._tabs) - 1
            if url:
                self._load(lambda driver: driver.get(url), timeout)

        self.policy.execute("Opening new tab" + (f" at {url}" if url else ""), open_new, options)

    def close_tab(self, options=None):
        def close_current(timeout):
            if len(self._tabs) == 1:
                # Closing the last window ends the WebDriver session
                logger.info("Last tab closed, shutting down the browser")
                self.focus(self.window)
                self._release()
                return
            self.page.close()
            self._tabs.pop(self._current)
            self._focused = None
            self._current = len(self._tabs) - 1
            self.focus(self._tabs[self._current])

        self.policy.execute("Closing tab", close_current, options)

    def switch_to_tab(self, index, options=None):
        def switch(timeout):
            if self._closed:
                raise SessionClosedError("Browser session is closed")
            if index < 0 or index > len(self._tabs) - 1:
                raise TabNotFoundError(f"Tab {index} does not exist")
            self._current = index
            self.focus(self._tabs[index])

        self.policy.execute(f"Switching to tab {index}", switch, options)

    def close_browser(self, options=None):
        self.policy.execute("Closing browser", lambda timeout: self._release(), options)

    def _release(self):
        if self._closed:
            return
        self._closed = True
        self._tabs = []
        self._current = 0
        self._focused = None
        self.driver.quit()
        logger.info("Selenium browser closed")

    def evaluate(self, function, arg=None, options=None):
        script = f"return ({function}).apply(null, arguments);"
        return self.policy.execute(
            "Evaluating callback", lambda timeout: self.page.execute_script(script, arg), options)

    # Input and event groups

    @property
    def mouse_actions(self):
        return SeleniumMouse(self)

    @property
    def keyboard_actions(self):
        return SeleniumKeyboard(self)

    @property
    def alert(self):
        return SeleniumAlert(self)

    @property
    def wait_for(self):
        return SeleniumWait(self)


class SeleniumMouse(MouseActions):
    def __init__(self, session):
        self._session = session

    def _pointer(self, x, y, gesture):
        builder = ActionBuilder(self._session.page)
        pointer = builder.pointer_action.move_to_location(int(x), int(y))
        if gesture is not None:
            gesture(pointer)
        builder.perform()

    def move(self, x, y, options=None):
        self._session.policy.execute(
            f"Moving mouse to ({x}, {y})", lambda timeout: self._pointer(x, y, None), options)

    def click(self, x, y, options=None):
        self._session.policy.execute(
            f"Clicking mouse at ({x}, {y})",
            lambda timeout: self._pointer(x, y, lambda pointer: pointer.click()), options)

    def double_click(self, x, y, options=None):
        self._session.policy.execute(
            f"Double clicking mouse at ({x}, {y})",
            lambda timeout: self._pointer(x, y, lambda pointer: pointer.double_click()), options)


class SeleniumKeyboard(KeyboardActions):
    def __init__(self, session):
        self._session = session

    def _press(self, key):
        names, main = split_chord(key)
        modifiers = [to_selenium_key(name) for name in names]
        actions = ActionChains(self._session.page)
        for modifier in modifiers:
            actions.key_down(modifier)
        actions.send_keys(to_selenium_key(main))
        for modifier in reversed(modifiers):
            actions.key_up(modifier)
        actions.perform()

    def press(self, key, options=None):
        self._session.policy.execute(f"Pressing {key}", lambda timeout: self._press(key), options)


class SeleniumAlert(AlertActions):
    """
    Dialog handling through the WebDriver alert API.

    A dialog read by get_text() stays open natively, so the next accept,
    dismiss or send_keys call acts on it.
    """

    def __init__(self, session):
        self._session = session

    def _wait_ms(self, options):
        if options is not None and options.timeout is not None:
            return options.timeout
        return self._session.config.alert_timeout

    def _next_alert(self, options):
        driver = self._session.page
        wait_ms = self._wait_ms(options)
        try:
            return WebDriverWait(driver, seconds(wait_ms)).until(EC.alert_is_present())
        except TimeoutException:
            logger.info("No dialog appeared within %sms", wait_ms)
            return None

    def _handle(self, message, respond, options):
        def handle(timeout):
            alert = self._next_alert(options)
            if alert is None:
                return False
            respond(alert)
            return True

        return self._session.policy.execute(message, handle, options)

    def accept(self, options=None):
        return self._handle("Accepting alert", lambda alert: alert.accept(), options)

    def dismiss(self, options=None):
        return self._handle("Dismissing alert", lambda alert: alert.dismiss(), options)

    def send_keys(self, text, options=None):
        def answer(alert):
            alert.send_keys(text)
            alert.accept()

        return self._handle("Sending keys to alert", answer, options)

    def get_text(self, options=None):
        def read(timeout):
            alert = self._next_alert(options)
            return None if alert is None else alert.text

        return self._session.policy.execute("Getting alert text", read, options)


class SeleniumWait(WaitActions):
    def __init__(self, session):
        self._session = session

    def page_load(self, options=None):
        def wait(timeout):
            WebDriverWait(self._session.page, seconds(timeout)).until(
                lambda driver: driver.execute_script("return document.readyState") == "complete"
            )

        self._session.policy.execute("Waiting for page load", wait, options)

    def timeout(self, milliseconds, options=None):
        self._session.policy.execute(
            f"Waiting for {milliseconds}ms", lambda timeout: time.sleep(milliseconds / 1000), options)
