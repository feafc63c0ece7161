#!/usr/bin/env python3
"""
Playwright element module.

PlaywrightElement wraps a Playwright Locator. Locators are lazy recipes
that Playwright re-resolves on every call, so this element never caches
nodes; collection operations derive child locators with nth().

When several nodes match, single-target operations fail with Playwright's
strict-mode error rather than picking one.
"""

import logging

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from ..common.exceptions import (ElementNotFoundError, ElementNotVisibleError,
                                 SessionMismatchError)
from ..common.interface import Element, Location
from ..common.policy import describe
from ..common.selectors import parse_selector, to_playwright

logger = logging.getLogger(__name__)


class PlaywrightElement(Element):
    """Element backed by a Playwright Locator."""

    def __init__(self, locator, session, description):
        """
        Initialize the element.

        Args:
            locator: Playwright Locator this element wraps
            session: Owning PlaywrightBrowser
            description: Readable form of the selector chain, used in messages
        """
        self.locator = locator
        self._session = session
        self._description = description

    def __str__(self):
        return self._description

    def __repr__(self):
        return f"<PlaywrightElement {self._description}>"

    @property
    def session(self):
        return self._session

    def _run(self, message, operation, options):
        return self._session.policy.execute(message, operation, options)

    def _act(self, action):
        # Playwright waits for a match until the timeout; report "nothing matched" as such
        try:
            return action()
        except PlaywrightTimeoutError as e:
            if self.locator.count() == 0:
                raise ElementNotFoundError(f"No element matches {self._description}") from e
            raise

    def _child(self, locator, description):
        return PlaywrightElement(locator, self._session, description)

    # Single-target actions

    def click(self, options=None):
        self._run(f"Clicking on {self}", lambda timeout: self._act(
            lambda: self.locator.click(timeout=timeout)), options)

    def fill(self, text, options=None):
        self._run(f"Filling {self} with '{describe(text)}'", lambda timeout: self._act(
            lambda: self.locator.fill(text, timeout=timeout)), options)

    def clear(self, options=None):
        self._run(f"Clearing {self}", lambda timeout: self._act(
            lambda: self.locator.clear(timeout=timeout)), options)

    def hover(self, options=None):
        self._run(f"Hovering over {self}", lambda timeout: self._act(
            lambda: self.locator.hover(timeout=timeout)), options)

    def right_click(self, options=None):
        self._run(f"Right clicking on {self}", lambda timeout: self._act(
            lambda: self.locator.click(button="right", timeout=timeout)), options)

    def double_click(self, options=None):
        self._run(f"Double clicking on {self}", lambda timeout: self._act(
            lambda: self.locator.dblclick(timeout=timeout)), options)

    def submit(self, options=None):
        self._run(f"Submitting {self}", lambda timeout: self._act(
            lambda: self.locator.evaluate("(el) => (el.form || el).submit()", timeout=timeout)), options)

    def select_option(self, option, options=None):
        def select(timeout):
            if isinstance(option, int):
                return self._act(lambda: self.locator.select_option(index=option, timeout=timeout))
            return self._act(lambda: self.locator.select_option(str(option), timeout=timeout))

        self._run(f"Selecting option {option} in {self}", select, options)

    def drag_and_drop(self, target, options=None):
        def drag(timeout):
            if not isinstance(target, PlaywrightElement) or target.session is not self._session:
                raise SessionMismatchError("Drag and drop target belongs to a different session")
            self._act(lambda: self.locator.drag_to(target.locator, timeout=timeout))

        self._run(f"Dragging {self} onto {target}", drag, options)

    def take_screenshot(self, file_path, options=None):
        self._run(f"Taking screenshot of {self} to {file_path}", lambda timeout: self._act(
            lambda: self.locator.screenshot(path=file_path, timeout=timeout)), options)

    def wait_for_element(self, options=None):
        self._run(f"Waiting for {self}", lambda timeout: self._act(
            lambda: self.locator.wait_for(timeout=timeout)), options)

    # Queries

    def get_text(self, options=None):
        return self._run(f"Getting text from {self}", lambda timeout: self._act(
            lambda: self.locator.inner_text(timeout=timeout)), options)

    def get_value(self, options=None):
        return self._run(f"Getting value from {self}", lambda timeout: self._act(
            lambda: self.locator.input_value(timeout=timeout)), options)

    def get_attribute(self, name, options=None):
        return self._run(f"Getting attribute {name} from {self}", lambda timeout: self._act(
            lambda: self.locator.get_attribute(name, timeout=timeout)), options)

    def get_css_value(self, property_name, options=None):
        return self._run(f"Getting css value {property_name} from {self}", lambda timeout: self._act(
            lambda: self.locator.evaluate(
                "(el, name) => window.getComputedStyle(el).getPropertyValue(name)",
                property_name,
                timeout=timeout,
            )), options)

    def get_tag_name(self, options=None):
        return self._run(f"Getting tag name from {self}", lambda timeout: self._act(
            lambda: self.locator.evaluate("(el) => el.tagName.toLowerCase()", timeout=timeout)), options)

    def get_html(self, options=None):
        return self._run(f"Getting HTML from {self}", lambda timeout: self._act(
            lambda: self.locator.inner_html(timeout=timeout)), options)

    def is_enabled(self, options=None):
        return self._run(f"Checking if {self} is enabled", lambda timeout: self._act(
            lambda: self.locator.is_enabled(timeout=timeout)), options)

    def is_visible(self, options=None):
        # No waiting: a locator that matches nothing is simply not visible
        return self._run(f"Checking if {self} is visible", lambda timeout: self.locator.is_visible(), options)

    def is_selected(self, options=None):
        return self._run(f"Checking if {self} is selected", lambda timeout: self._act(
            lambda: self.locator.evaluate("(el) => !!(el.checked || el.selected)", timeout=timeout)), options)

    def get_location(self, options=None):
        def locate(timeout):
            box = self._act(lambda: self.locator.bounding_box(timeout=timeout))
            if not box:
                raise ElementNotVisibleError(f"Element {self._description} is not visible")
            return Location(box["x"], box["y"])

        return self._run(f"Getting location of {self}", locate, options)

    # Collections

    def count(self, options=None):
        return self._run(f"Counting elements matching {self}", lambda timeout: self.locator.count(), options)

    def _children(self):
        total = self.locator.count()
        for index in range(total):
            yield index, self._child(self.locator.nth(index), f"{self._description} >> nth={index}")

    def for_each(self, callback, options=None):
        def iterate(timeout):
            for index, element in self._children():
                callback(element, index)

        self._run(f"Iterating over {self}", iterate, options)

    def filter(self, callback, options=None):
        return self._run(
            f"Filtering {self}",
            lambda timeout: [element for index, element in self._children() if callback(element, index)],
            options,
        )

    def map(self, callback, options=None):
        return self._run(
            f"Mapping {self}",
            lambda timeout: [callback(element, index) for index, element in self._children()],
            options,
        )

    def nth(self, index):
        return self._child(self.locator.nth(index), f"{self._description} >> nth={index}")

    def selector(self, selector, force_type=None):
        parsed = parse_selector(selector, force_type)
        return self._child(self.locator.locator(to_playwright(parsed)), f"{self._description} >> {parsed}")
