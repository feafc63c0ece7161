"""
Playwright browser module.

This module provides the Playwright-backed Browser and Element
implementations and the function that launches the engine.
"""

from .browser import PlaywrightBrowser
from .driver import setup_playwright_browser
from .element import PlaywrightElement

__all__ = ["PlaywrightBrowser", "PlaywrightElement", "setup_playwright_browser"]
