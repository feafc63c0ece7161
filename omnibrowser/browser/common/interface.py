#!/usr/bin/env python3
"""
Browser interface definition module.

This module defines the abstract base classes that standardize the
interface between calling code and the different browser backends
(Playwright, Selenium), and the factory that builds a session for a
requested backend.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, NamedTuple, Optional, TypeVar, Union

from .exceptions import UnsupportedBackendError
from .policy import ActionOptions
from .selectors import SelectorType

T = TypeVar("T")

SelectorTypeLike = Optional[Union[SelectorType, str]]


class Location(NamedTuple):
    """Top-left corner of an element's bounding box, in CSS pixels."""
    x: float
    y: float


class Element(ABC):
    """
    Abstract base class for element implementations.

    An Element is a recipe: a selector (or chain of selectors) scoped to a
    session and a tab. Each backend decides how the recipe is resolved to
    DOM nodes, but collection operations always re-query the backend.

    Single-target operations act on one resolved node and raise
    ElementNotFoundError when nothing matches. What happens when several
    nodes match is backend-defined.
    """

    # Single-target actions

    @abstractmethod
    def click(self, options: Optional[ActionOptions] = None) -> None:
        """Click the element."""

    @abstractmethod
    def fill(self, text: str, options: Optional[ActionOptions] = None) -> None:
        """Replace the element's value with text."""

    @abstractmethod
    def clear(self, options: Optional[ActionOptions] = None) -> None:
        """Clear the element's value."""

    @abstractmethod
    def hover(self, options: Optional[ActionOptions] = None) -> None:
        """Move the pointer over the element."""

    @abstractmethod
    def right_click(self, options: Optional[ActionOptions] = None) -> None:
        """Right-click the element."""

    @abstractmethod
    def double_click(self, options: Optional[ActionOptions] = None) -> None:
        """Double-click the element."""

    @abstractmethod
    def submit(self, options: Optional[ActionOptions] = None) -> None:
        """Submit the form the element belongs to (or the element itself if it is a form)."""

    @abstractmethod
    def select_option(self, option: Union[str, int], options: Optional[ActionOptions] = None) -> None:
        """Select an option of a <select>: by index when int, by value or label when str."""

    @abstractmethod
    def drag_and_drop(self, target: "Element", options: Optional[ActionOptions] = None) -> None:
        """Drag this element onto target, which must belong to the same session."""

    @abstractmethod
    def take_screenshot(self, file_path: str, options: Optional[ActionOptions] = None) -> None:
        """Save a screenshot of the element to file_path."""

    @abstractmethod
    def wait_for_element(self, options: Optional[ActionOptions] = None) -> None:
        """Wait until the element is present and visible."""

    # Queries

    @abstractmethod
    def get_text(self, options: Optional[ActionOptions] = None) -> str:
        """Get the rendered text of the element."""

    @abstractmethod
    def get_value(self, options: Optional[ActionOptions] = None) -> str:
        """Get the value of an input, textarea or select."""

    @abstractmethod
    def get_attribute(self, name: str, options: Optional[ActionOptions] = None) -> Optional[str]:
        """Get an attribute value, or None when the attribute is absent."""

    @abstractmethod
    def get_css_value(self, property_name: str, options: Optional[ActionOptions] = None) -> str:
        """Get the computed value of a CSS property."""

    @abstractmethod
    def get_tag_name(self, options: Optional[ActionOptions] = None) -> str:
        """Get the lower-case tag name."""

    @abstractmethod
    def get_html(self, options: Optional[ActionOptions] = None) -> str:
        """Get the inner HTML."""

    @abstractmethod
    def is_enabled(self, options: Optional[ActionOptions] = None) -> bool:
        """Check if the element is enabled."""

    @abstractmethod
    def is_visible(self, options: Optional[ActionOptions] = None) -> bool:
        """Check if the element is visible. False when nothing matches."""

    @abstractmethod
    def is_selected(self, options: Optional[ActionOptions] = None) -> bool:
        """Check if a checkbox, radio button or option is checked/selected."""

    @abstractmethod
    def get_location(self, options: Optional[ActionOptions] = None) -> Location:
        """Get the element's position; raises ElementNotVisibleError if it is not rendered."""

    # Collections

    @abstractmethod
    def count(self, options: Optional[ActionOptions] = None) -> int:
        """Count the nodes currently matching the selector."""

    @abstractmethod
    def for_each(self, callback: Callable[["Element", int], Any],
                 options: Optional[ActionOptions] = None) -> None:
        """Call callback(element, index) for each current match, in document order."""

    @abstractmethod
    def filter(self, callback: Callable[["Element", int], bool],
               options: Optional[ActionOptions] = None) -> List["Element"]:
        """Collect the matches for which callback(element, index) is true."""

    @abstractmethod
    def map(self, callback: Callable[["Element", int], T],
            options: Optional[ActionOptions] = None) -> List[T]:
        """Collect callback(element, index) for each current match."""

    @abstractmethod
    def nth(self, index: int) -> "Element":
        """Get the element for the index-th match. Out of range fails on first use."""

    @abstractmethod
    def selector(self, selector: str, force_type: SelectorTypeLike = None) -> "Element":
        """Get an element for the matches of selector inside this element's matches."""


class MouseActions(ABC):
    """Pointer input on the current tab."""

    @abstractmethod
    def move(self, x: float, y: float, options: Optional[ActionOptions] = None) -> None:
        """Move the mouse to (x, y)."""

    @abstractmethod
    def click(self, x: float, y: float, options: Optional[ActionOptions] = None) -> None:
        """Click at (x, y)."""

    @abstractmethod
    def double_click(self, x: float, y: float, options: Optional[ActionOptions] = None) -> None:
        """Double-click at (x, y)."""


class KeyboardActions(ABC):
    """Keyboard input on the current tab."""

    @abstractmethod
    def press(self, key: str, options: Optional[ActionOptions] = None) -> None:
        """
        Press a key.

        Keys use Playwright names ("Enter", "PageDown", "ArrowLeft", "a"),
        optionally chorded with modifiers ("Control+a", "Shift+Tab").
        """


class AlertActions(ABC):
    """
    Native dialog (alert, confirm, prompt) handling on the current tab.

    Each operation waits for the next dialog up to the configured alert
    timeout. A wait that runs out is not an error: accept, dismiss and
    send_keys return False and get_text returns None.
    """

    @abstractmethod
    def accept(self, options: Optional[ActionOptions] = None) -> bool:
        """Accept the next dialog."""

    @abstractmethod
    def dismiss(self, options: Optional[ActionOptions] = None) -> bool:
        """Dismiss the next dialog."""

    @abstractmethod
    def get_text(self, options: Optional[ActionOptions] = None) -> Optional[str]:
        """Get the message of the next dialog."""

    @abstractmethod
    def send_keys(self, text: str, options: Optional[ActionOptions] = None) -> bool:
        """Type text into the next prompt dialog and accept it."""


class WaitActions(ABC):
    """Waiting on the current tab."""

    @abstractmethod
    def page_load(self, options: Optional[ActionOptions] = None) -> None:
        """Wait for the page to finish loading."""

    @abstractmethod
    def timeout(self, milliseconds: int, options: Optional[ActionOptions] = None) -> None:
        """Wait a fixed amount of time."""


class ScrollActions:
    """Keyboard-driven scrolling, shared by every backend's keyboard group."""

    def __init__(self, keyboard: KeyboardActions):
        self._keyboard = keyboard

    def up(self, options: Optional[ActionOptions] = None) -> None:
        self._keyboard.press("PageUp", options)

    def down(self, options: Optional[ActionOptions] = None) -> None:
        self._keyboard.press("PageDown", options)

    def left(self, options: Optional[ActionOptions] = None) -> None:
        self._keyboard.press("ArrowLeft", options)

    def right(self, options: Optional[ActionOptions] = None) -> None:
        self._keyboard.press("ArrowRight", options)


class Browser(ABC):
    """
    Abstract base class for browser implementations.

    A Browser owns one engine process, one browsing context and an ordered
    list of tabs, one of which is current. Sessions are only created through
    the backend's init() classmethod (or BackendSelector); once the last tab
    is closed the session is closed for good.
    """

    @classmethod
    @abstractmethod
    def init(cls, config=None, **overrides: Any) -> "Browser":
        """Launch the engine and return a session with one open tab."""

    @property
    @abstractmethod
    def tab_count(self) -> int:
        """Number of open tabs."""

    @property
    @abstractmethod
    def current_tab(self) -> int:
        """Index of the current tab."""

    @property
    @abstractmethod
    def closed(self) -> bool:
        """Whether the session has been closed."""

    @abstractmethod
    def selector(self, selector: str, force_type: SelectorTypeLike = None) -> Element:
        """Get an element scoped to the current tab."""

    @abstractmethod
    def navigate_to(self, url: str, options: Optional[ActionOptions] = None) -> None:
        """Navigate the current tab to url."""

    @abstractmethod
    def get_url(self, options: Optional[ActionOptions] = None) -> str:
        """Get the current tab's URL."""

    @abstractmethod
    def get_title(self, options: Optional[ActionOptions] = None) -> str:
        """Get the current tab's title."""

    @abstractmethod
    def navigate_back(self, options: Optional[ActionOptions] = None) -> None:
        """Go back in the current tab's history."""

    @abstractmethod
    def navigate_forward(self, options: Optional[ActionOptions] = None) -> None:
        """Go forward in the current tab's history."""

    @abstractmethod
    def refresh(self, options: Optional[ActionOptions] = None) -> None:
        """Reload the current tab."""

    @abstractmethod
    def open_tab(self, url: Optional[str] = None, options: Optional[ActionOptions] = None) -> None:
        """Open a tab at the end of the tab list, make it current and optionally navigate it."""

    @abstractmethod
    def close_tab(self, options: Optional[ActionOptions] = None) -> None:
        """Close the current tab and make the last remaining tab current."""

    @abstractmethod
    def switch_to_tab(self, index: int, options: Optional[ActionOptions] = None) -> None:
        """Make the tab at index current; raises TabNotFoundError when out of range."""

    @abstractmethod
    def close_browser(self, options: Optional[ActionOptions] = None) -> None:
        """Close the context and the engine process."""

    @abstractmethod
    def evaluate(self, function: str, arg: Any = None, options: Optional[ActionOptions] = None) -> Any:
        """
        Run a JavaScript function in the current page and return its result.

        Args:
            function: A function expression, e.g. "(n) => document.title.repeat(n)"
            arg: Single serializable argument passed to the function
        """

    @property
    @abstractmethod
    def mouse_actions(self) -> MouseActions:
        """Pointer input group."""

    @property
    @abstractmethod
    def keyboard_actions(self) -> KeyboardActions:
        """Keyboard input group."""

    @property
    @abstractmethod
    def alert(self) -> AlertActions:
        """Dialog handling group."""

    @property
    @abstractmethod
    def wait_for(self) -> WaitActions:
        """Waiting group."""

    @property
    def scroll(self) -> ScrollActions:
        """Scrolling group."""
        return ScrollActions(self.keyboard_actions)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if not self.closed:
            self.close_browser()


class BackendSelector:
    """Factory class for creating browser sessions."""

    BACKENDS = ("playwright", "selenium")

    @staticmethod
    def create(backend: Optional[str] = None, config=None, config_file: Optional[str] = None,
               **overrides: Any) -> Browser:
        """
        Create a browser session for the requested backend.

        Args:
            backend: Backend to use ('playwright' or 'selenium'); defaults to the configured one
            config: Optional pre-built BrowserConfig; when omitted the configuration
                is resolved from defaults, the config file and overrides
            config_file: Optional path to a JSON configuration file
            **overrides: Configuration fields overriding the resolved values
                (browser, headless, action_timeout, logs, throw_on_fail, ...)

        Returns:
            Browser: A session implementing the Browser interface

        Raises:
            UnsupportedBackendError: If the backend or engine variant is not recognized
        """
        from ...cli.config import resolve_config

        if config is None:
            config = resolve_config(config_file, backend=backend, **overrides)
        else:
            config = config.with_overrides(backend=backend, **overrides)

        if config.backend == "playwright":
            from ..playwright.browser import PlaywrightBrowser
            return PlaywrightBrowser.init(config)
        if config.backend == "selenium":
            from ..selenium.browser import SeleniumBrowser
            return SeleniumBrowser.init(config)

        raise UnsupportedBackendError(
            f"Backend {config.backend!r} is not supported; choose one of {', '.join(BackendSelector.BACKENDS)}"
        )

    @staticmethod
    def playwright(**overrides: Any) -> Browser:
        """Create a Playwright-backed session."""
        return BackendSelector.create("playwright", **overrides)

    @staticmethod
    def selenium(**overrides: Any) -> Browser:
        """Create a Selenium-backed session."""
        return BackendSelector.create("selenium", **overrides)
