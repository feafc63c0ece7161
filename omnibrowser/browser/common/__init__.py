"""
Common browser interfaces and utilities module.

This package contains interfaces, the action policy, selector handling and
exceptions shared across the browser implementations (Playwright, Selenium).
"""

from .exceptions import (BrowserError, ElementNotFoundError,
                         ElementNotVisibleError, SessionClosedError,
                         SessionMismatchError, TabNotFoundError,
                         UnsupportedBackendError)
from .interface import (AlertActions, BackendSelector, Browser, Element,
                        KeyboardActions, Location, MouseActions, ScrollActions,
                        WaitActions)
from .policy import ActionOptions, ActionPolicy, ActionResult, resolve_options
from .selectors import Selector, SelectorType, parse_selector

__all__ = [
    "Browser",
    "Element",
    "BackendSelector",
    "Location",
    "MouseActions",
    "KeyboardActions",
    "ScrollActions",
    "AlertActions",
    "WaitActions",
    "ActionOptions",
    "ActionPolicy",
    "ActionResult",
    "resolve_options",
    "Selector",
    "SelectorType",
    "parse_selector",
    "BrowserError",
    "UnsupportedBackendError",
    "TabNotFoundError",
    "ElementNotFoundError",
    "ElementNotVisibleError",
    "SessionClosedError",
    "SessionMismatchError",
]
