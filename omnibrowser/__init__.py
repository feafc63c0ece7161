"""
omnibrowser package.

This package provides one browser automation interface (Browser, Element)
that can be backed by Playwright or Selenium, with a uniform per-action
policy for timeouts, logging and failure handling.
"""

__version__ = "1.0.0"

from .browser import (ActionOptions, ActionResult, BackendSelector, Browser,
                      Element, init_browser)
from .browser.common.exceptions import (BrowserError, ElementNotFoundError,
                                        ElementNotVisibleError,
                                        SessionClosedError,
                                        SessionMismatchError, TabNotFoundError,
                                        UnsupportedBackendError)
from .browser.common.selectors import SelectorType
from .cli.config import BrowserConfig, resolve_config

__all__ = [
    "Browser",
    "Element",
    "BackendSelector",
    "init_browser",
    "ActionOptions",
    "ActionResult",
    "SelectorType",
    "BrowserConfig",
    "resolve_config",
    "BrowserError",
    "UnsupportedBackendError",
    "TabNotFoundError",
    "ElementNotFoundError",
    "ElementNotVisibleError",
    "SessionClosedError",
    "SessionMismatchError",
]
