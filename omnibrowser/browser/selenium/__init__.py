"""
Selenium browser module.

This module provides the Selenium-backed Browser and Element
implementations and the WebDriver setup functions.
"""

from .browser import SeleniumBrowser
from .driver import setup_webdriver
from .element import SeleniumElement

__all__ = ["SeleniumBrowser", "SeleniumElement", "setup_webdriver"]
