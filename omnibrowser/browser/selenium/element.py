#!/usr/bin/env python3
"""
Selenium element module.

SeleniumElement keeps the recipe that produced it (a selector, or an index
into its parent's matches). Every operation resolves the recipe to a fresh
WebElement handle and holds it for that call only; when the engine reports
the handle stale mid-call, the recipe is resolved again and the operation
re-run once against the new handle. Elements handed out by collection
operations start with the handle they were enumerated with and use it for
their first call.

When several nodes match, single-target operations act on the first match
in document order.
"""

import logging

from selenium.common.exceptions import (NoSuchElementException,
                                        StaleElementReferenceException,
                                        TimeoutException)
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.support.select import Select
from selenium.webdriver.support.ui import WebDriverWait

from ..common.exceptions import (ElementNotFoundError, ElementNotVisibleError,
                                 SessionMismatchError)
from ..common.interface import Element, Location
from ..common.policy import describe
from ..common.selectors import parse_selector, to_selenium

logger = logging.getLogger(__name__)

_BOUNDING_RECT_SCRIPT = (
    "const r = arguments[0].getBoundingClientRect();"
    " return [r.x, r.y, r.width, r.height];"
)


def seconds(milliseconds):
    """Convert a millisecond timeout to the seconds Selenium expects."""
    return (milliseconds or 0) / 1000


class SeleniumElement(Element):
    """Element backed by captured Selenium WebElement handles."""

    def __init__(self, session, window, selector=None, parent=None, index=None,
                 handle=None, description=""):
        """
        Initialize the element.

        Args:
            session: Owning SeleniumBrowser
            window: Window handle of the tab the element was created in
            selector: Parsed Selector to query (with parent as scope when given)
            parent: Parent SeleniumElement, for scoped selectors and nth()
            index: Index into the parent's matches, instead of a selector
            handle: WebElement to use for the first call instead of resolving
            description: Readable form of the recipe, used in messages
        """
        self._session = session
        self._window = window
        self._selector = selector
        self._parent = parent
        self._index = index
        self._seed = handle
        self._description = description

    def __str__(self):
        return self._description

    def __repr__(self):
        return f"<SeleniumElement {self._description}>"

    @property
    def session(self):
        return self._session

    def _run(self, message, operation, options):
        return self._session.policy.execute(message, operation, options)

    # Resolution

    def _find_all(self):
        """Query the current matches of the recipe, in document order."""
        driver = self._session.focus(self._window)
        if self._index is not None:
            matches = self._parent._find_all()
            try:
                return [matches[self._index]]
            except IndexError:
                return []

        if self._parent is None:
            by, value = to_selenium(self._selector)
            return driver.find_elements(by, value)

        by, value = to_selenium(self._selector, scoped=True)
        found, seen = [], set()
        for scope in self._parent._find_all():
            for match in scope.find_elements(by, value):
                if match.id not in seen:
                    seen.add(match.id)
                    found.append(match)
        return found

    def _wait_for_match(self, timeout, predicate=None):
        def first_match(driver):
            matches = self._find_all()
            if matches and (predicate is None or predicate(matches[0])):
                return matches[0]
            return False

        match = first_match(None)
        if match:
            return match
        if timeout:
            wait = WebDriverWait(self._session.driver, seconds(timeout),
                                 ignored_exceptions=(StaleElementReferenceException,))
            try:
                return wait.until(first_match)
            except TimeoutException as e:
                if self._find_all():
                    raise
                raise ElementNotFoundError(f"No element matches {self._description}") from e
        if self._find_all():
            raise TimeoutException(f"Timed out waiting for {self._description}")
        raise ElementNotFoundError(f"No element matches {self._description}")

    def _resolve(self, timeout):
        if self._seed is not None:
            handle, self._seed = self._seed, None
            return handle
        return self._wait_for_match(timeout)

    def _with_handle(self, action, timeout):
        self._session.focus(self._window)
        handle = self._resolve(timeout)
        try:
            return action(handle)
        except StaleElementReferenceException:
            logger.debug("Handle for %s went stale, resolving it again", self._description)
            return action(self._wait_for_match(timeout))

    def _actions(self):
        return ActionChains(self._session.driver)

    # Single-target actions

    def click(self, options=None):
        self._run(f"Clicking on {self}", lambda timeout: self._with_handle(
            lambda handle: handle.click(), timeout), options)

    def fill(self, text, options=None):
        def fill_in(handle):
            handle.clear()
            handle.send_keys(text)

        self._run(f"Filling {self} with '{describe(text)}'", lambda timeout: self._with_handle(
            fill_in, timeout), options)

    def clear(self, options=None):
        self._run(f"Clearing {self}", lambda timeout: self._with_handle(
            lambda handle: handle.clear(), timeout), options)

    def hover(self, options=None):
        self._run(f"Hovering over {self}", lambda timeout: self._with_handle(
            lambda handle: self._actions().move_to_element(handle).perform(), timeout), options)

    def right_click(self, options=None):
        self._run(f"Right clicking on {self}", lambda timeout: self._with_handle(
            lambda handle: self._actions().context_click(handle).perform(), timeout), options)

    def double_click(self, options=None):
        self._run(f"Double clicking on {self}", lambda timeout: self._with_handle(
            lambda handle: self._actions().double_click(handle).perform(), timeout), options)

    def submit(self, options=None):
        self._run(f"Submitting {self}", lambda timeout: self._with_handle(
            lambda handle: self._session.driver.execute_script(
                "(arguments[0].form || arguments[0]).submit();", handle), timeout), options)

    def select_option(self, option, options=None):
        def select(handle):
            dropdown = Select(handle)
            if isinstance(option, int):
                dropdown.select_by_index(option)
                return
            try:
                dropdown.select_by_value(str(option))
            except NoSuchElementException:
                dropdown.select_by_visible_text(str(option))

        self._run(f"Selecting option {option} in {self}", lambda timeout: self._with_handle(
            select, timeout), options)

    def drag_and_drop(self, target, options=None):
        def drag(timeout):
            if not isinstance(target, SeleniumElement) or target.session is not self._session:
                raise SessionMismatchError("Drag and drop target belongs to a different session")
            self._with_handle(lambda source: target._with_handle(
                lambda destination: self._actions().drag_and_drop(source, destination).perform(),
                timeout), timeout)

        self._run(f"Dragging {self} onto {target}", drag, options)

    def take_screenshot(self, file_path, options=None):
        def screenshot(handle):
            if not handle.screenshot(file_path):
                raise OSError(f"Could not write screenshot to {file_path}")

        self._run(f"Taking screenshot of {self} to {file_path}", lambda timeout: self._with_handle(
            screenshot, timeout), options)

    def wait_for_element(self, options=None):
        def wait(timeout):
            self._session.focus(self._window)
            self._wait_for_match(timeout, lambda match: match.is_displayed())

        self._run(f"Waiting for {self}", wait, options)

    # Queries

    def get_text(self, options=None):
        return self._run(f"Getting text from {self}", lambda timeout: self._with_handle(
            lambda handle: handle.text, timeout), options)

    def get_value(self, options=None):
        return self._run(f"Getting value from {self}", lambda timeout: self._with_handle(
            lambda handle: handle.get_property("value"), timeout), options)

    def get_attribute(self, name, options=None):
        return self._run(f"Getting attribute {name} from {self}", lambda timeout: self._with_handle(
            lambda handle: handle.get_dom_attribute(name), timeout), options)

    def get_css_value(self, property_name, options=None):
        return self._run(f"Getting css value {property_name} from {self}", lambda timeout: self._with_handle(
            lambda handle: handle.value_of_css_property(property_name), timeout), options)

    def get_tag_name(self, options=None):
        return self._run(f"Getting tag name from {self}", lambda timeout: self._with_handle(
            lambda handle: handle.tag_name.lower(), timeout), options)

    def get_html(self, options=None):
        return self._run(f"Getting HTML from {self}", lambda timeout: self._with_handle(
            lambda handle: handle.get_property("innerHTML"), timeout), options)

    def is_enabled(self, options=None):
        return self._run(f"Checking if {self} is enabled", lambda timeout: self._with_handle(
            lambda handle: handle.is_enabled(), timeout), options)

    def is_visible(self, options=None):
        # No waiting: a recipe that matches nothing is simply not visible
        def visible(timeout):
            try:
                return self._with_handle(lambda handle: handle.is_displayed(), 0)
            except ElementNotFoundError:
                return False

        return self._run(f"Checking if {self} is visible", visible, options)

    def is_selected(self, options=None):
        return self._run(f"Checking if {self} is selected", lambda timeout: self._with_handle(
            lambda handle: handle.is_selected(), timeout), options)

    def get_location(self, options=None):
        def locate(handle):
            if not handle.is_displayed():
                raise ElementNotVisibleError(f"Element {self._description} is not visible")
            x, y, width, height = self._session.driver.execute_script(_BOUNDING_RECT_SCRIPT, handle)
            if not width and not height:
                raise ElementNotVisibleError(f"Element {self._description} is not visible")
            return Location(x, y)

        return self._run(f"Getting location of {self}", lambda timeout: self._with_handle(
            locate, timeout), options)

    # Collections

    def count(self, options=None):
        return self._run(f"Counting elements matching {self}", lambda timeout: len(self._find_all()), options)

    def _children(self):
        for index, handle in enumerate(self._find_all()):
            yield index, SeleniumElement(
                self._session, self._window, parent=self, index=index, handle=handle,
                description=f"{self._description} >> nth={index}",
            )

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
        return SeleniumElement(self._session, self._window, parent=self, index=index,
                               description=f"{self._description} >> nth={index}")

    def selector(self, selector, force_type=None):
        parsed = parse_selector(selector, force_type)
        return SeleniumElement(self._session, self._window, selector=parsed, parent=self,
                               description=f"{self._description} >> {parsed}")
