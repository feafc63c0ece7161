#!/usr/bin/env python3
"""
Playwright browser session module.

PlaywrightBrowser implements the Browser interface on top of Playwright's
sync API. The session owns the Playwright driver, the launched browser,
one browsing context and the ordered list of pages (tabs) opened in it.
"""

import logging

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from ...cli.config import BrowserConfig, resolve_config
from ..common.exceptions import SessionClosedError, TabNotFoundError
from ..common.interface import (AlertActions, Browser, KeyboardActions,
                                MouseActions, WaitActions)
from ..common.policy import ActionOptions, ActionPolicy
from ..common.selectors import parse_selector, to_playwright
from .driver import setup_playwright_browser
from .element import PlaywrightElement

logger = logging.getLogger(__name__)


class PlaywrightBrowser(Browser):
    """Browser session backed by Playwright."""

    # Backend overlay between the configuration defaults and call-site options
    action_defaults = ActionOptions()

    def __init__(self, playwright, browser, context, page, config: BrowserConfig):
        """
        Wrap already-launched Playwright objects.

        Not meant to be called directly; use PlaywrightBrowser.init() or
        BackendSelector.create(), which launch the engine first.
        """
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self._tabs = []
        self._current = 0
        self._closed = False
        self._dialogs = {}
        self.config = config
        self.policy = ActionPolicy(config.action_options(), self.action_defaults)
        self._add_tab(page)

    def _add_tab(self, page):
        # Dialogs nobody listens for are dismissed by Playwright, so queue them from the start
        queue = []
        page.on("dialog", queue.append)
        self._dialogs[page] = queue
        self._tabs.append(page)
        self._current = len(self._tabs) - 1

    def _dialog_queue(self, page):
        """Dialogs raised on page that have not been handled yet, oldest first."""
        return self._dialogs.setdefault(page, [])

    @classmethod
    def init(cls, config=None, **overrides):
        """
        Launch a Playwright browser and return a session with one open tab.

        Args:
            config: Optional BrowserConfig; resolved from defaults and the
                config file when omitted
            **overrides: Configuration fields to override

        Returns:
            PlaywrightBrowser: The new session

        Raises:
            UnsupportedBackendError: If the configured engine variant is unknown
        """
        if config is None:
            config = resolve_config(**overrides)
        else:
            config = config.with_overrides(**overrides)
        config = config.with_overrides(backend="playwright")

        playwright, browser, context, page = setup_playwright_browser(
            browser_type=config.browser,
            headless=config.headless,
            action_timeout=config.action_timeout,
        )
        return cls(playwright, browser, context, page, config)

    @property
    def page(self):
        """The current tab's Playwright Page."""
        if self._closed:
            raise SessionClosedError("Browser session is closed")
        return self._tabs[self._current]

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
        return PlaywrightElement(self.page.locator(to_playwright(parsed)), self, str(parsed))

    # Navigation

    def navigate_to(self, url, options=None):
        def navigate(timeout):
            self.page.goto(url, timeout=timeout)

        self.policy.execute(f"Navigating to {url}", navigate, options)

    def get_url(self, options=None):
        return self.policy.execute("Getting URL", lambda timeout: self.page.url, options)

    def get_title(self, options=None):
        return self.policy.execute("Getting title", lambda timeout: self.page.title(), options)

    def navigate_back(self, options=None):
        def back(timeout):
            self.page.go_back(timeout=timeout)

        self.policy.execute("Navigating back", back, options)

    def navigate_forward(self, options=None):
        def forward(timeout):
            self.page.go_forward(timeout=timeout)

        self.policy.execute("Navigating forward", forward, options)

    def refresh(self, options=None):
        def reload(timeout):
            self.page.reload(timeout=timeout)

        self.policy.execute("Refreshing page", reload, options)

    # Tabs

    def open_tab(self, url=None, options=None):
        def open_new(timeout):
            if self._closed:
                raise SessionClosedError("Browser session is closed")
            page = self._context.new_page()
            self._add_tab(page)
            if url:
                page.goto(url, timeout=timeout)

        self.policy.execute("Opening new tab" + (f" at {url}" if url else ""), open_new, options)

    def close_tab(self, options=None):
        def close_current(timeout):
            page = self.page
            page.close()
            self._tabs.pop(self._current)
            self._dialogs.pop(page, None)
            if not self._tabs:
                logger.info("Last tab closed, shutting down the browser")
                self._release()
                return
            self._current = len(self._tabs) - 1

        self.policy.execute("Closing tab", close_current, options)

    def switch_to_tab(self, index, options=None):
        def switch(timeout):
            if self._closed:
                raise SessionClosedError("Browser session is closed")
            if index < 0 or index > len(self._tabs) - 1:
                raise TabNotFoundError(f"Tab {index} does not exist")
            self._current = index
            self._tabs[index].bring_to_front()

        self.policy.execute(f"Switching to tab {index}", switch, options)

    def close_browser(self, options=None):
        self.policy.execute("Closing browser", lambda timeout: self._release(), options)

    def _release(self):
        if self._closed:
            return
        self._closed = True
        self._tabs = []
        self._dialogs = {}
        self._current = 0
        try:
            self._context.close()
            self._browser.close()
        finally:
            self._playwright.stop()
        logger.info("Playwright browser closed")

    def evaluate(self, function, arg=None, options=None):
        return self.policy.execute("Evaluating callback", lambda timeout: self.page.evaluate(function, arg), options)

    # Input and event groups

    @property
    def mouse_actions(self):
        return PlaywrightMouse(self)

    @property
    def keyboard_actions(self):
        return PlaywrightKeyboard(self)

    @property
    def alert(self):
        return PlaywrightAlert(self)

    @property
    def wait_for(self):
        return PlaywrightWait(self)


class PlaywrightMouse(MouseActions):
    def __init__(self, session):
        self._session = session

    def move(self, x, y, options=None):
        self._session.policy.execute(
            f"Moving mouse to ({x}, {y})", lambda timeout: self._session.page.mouse.move(x, y), options)

    def click(self, x, y, options=None):
        self._session.policy.execute(
            f"Clicking mouse at ({x}, {y})", lambda timeout: self._session.page.mouse.click(x, y), options)

    def double_click(self, x, y, options=None):
        self._session.policy.execute(
            f"Double clicking mouse at ({x}, {y})", lambda timeout: self._session.page.mouse.dblclick(x, y), options)


class PlaywrightKeyboard(KeyboardActions):
    def __init__(self, session):
        self._session = session

    def press(self, key, options=None):
        self._session.policy.execute(
            f"Pressing {key}", lambda timeout: self._session.page.keyboard.press(key), options)


class PlaywrightAlert(AlertActions):
    """
    Dialog handling through page "dialog" events.

    Every tab queues its dialogs as they are raised, including ones raised
    before an alert method is called. A dialog read by get_text() stays at
    the head of its tab's queue, so the next accept, dismiss or send_keys
    call on that tab acts on it.
    """

    def __init__(self, session):
        self._session = session

    def _wait_ms(self, options):
        if options is not None and options.timeout is not None:
            return options.timeout
        return self._session.config.alert_timeout

    def _next_dialog(self, options, keep=False):
        page = self._session.page
        queue = self._session._dialog_queue(page)
        if not queue:
            wait_ms = self._wait_ms(options)
            try:
                dialog = page.wait_for_event("dialog", timeout=wait_ms)
            except PlaywrightTimeoutError:
                logger.info("No dialog appeared within %sms", wait_ms)
                return None
            if dialog not in queue:
                queue.append(dialog)
        return queue[0] if keep else queue.pop(0)

    def _handle(self, message, respond, options):
        def handle(timeout):
            dialog = self._next_dialog(options)
            if dialog is None:
                return False
            respond(dialog)
            return True

        return self._session.policy.execute(message, handle, options)

    def accept(self, options=None):
        return self._handle("Accepting alert", lambda dialog: dialog.accept(), options)

    def dismiss(self, options=None):
        return self._handle("Dismissing alert", lambda dialog: dialog.dismiss(), options)

    def send_keys(self, text, options=None):
        return self._handle("Sending keys to alert", lambda dialog: dialog.accept(text), options)

    def get_text(self, options=None):
        def read(timeout):
            dialog = self._next_dialog(options, keep=True)
            return None if dialog is None else dialog.message

        return self._session.policy.execute("Getting alert text", read, options)


class PlaywrightWait(WaitActions):
    def __init__(self, session):
        self._session = session

    def page_load(self, options=None):
        self._session.policy.execute(
            "Waiting for page load", lambda timeout: self._session.page.wait_for_load_state(timeout=timeout), options)

    def timeout(self, milliseconds, options=None):
        self._session.policy.execute(
            f"Waiting for {milliseconds}ms", lambda timeout: self._session.page.wait_for_timeout(milliseconds), options)
