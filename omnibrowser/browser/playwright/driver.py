#!/usr/bin/env python3
"""
Playwright browser setup and initialization module.

This module contains the function that starts Playwright, launches the
requested engine variant and creates the browsing context and first page
a PlaywrightBrowser session takes ownership of.
"""

import logging

from playwright.sync_api import sync_playwright

from ..common.exceptions import UnsupportedBackendError

logger = logging.getLogger(__name__)

# engine variant -> (browser type attribute, release channel)
ENGINE_VARIANTS = {
    "chromium": ("chromium", None),
    "chrome": ("chromium", "chrome"),
    "msedge": ("chromium", "msedge"),
    "firefox": ("firefox", None),
    "webkit": ("webkit", None),
}


def setup_playwright_browser(browser_type="chromium", headless=True, action_timeout=5000):
    """
    Start Playwright and launch a browser with one context and one page.

    Args:
        browser_type: Engine variant ("chromium", "chrome", "msedge", "firefox" or "webkit")
        headless: Whether to run in headless mode
        action_timeout: Default timeout for context operations in milliseconds

    Returns:
        tuple: (playwright, browser, context, page)

    Raises:
        UnsupportedBackendError: If browser_type is not a known engine variant
    """
    if browser_type not in ENGINE_VARIANTS:
        raise UnsupportedBackendError(
            f"Browser {browser_type} is not supported for playwright "
            f"(choose one of {', '.join(ENGINE_VARIANTS)})"
        )
    engine, channel = ENGINE_VARIANTS[browser_type]

    playwright = sync_playwright().start()
    try:
        launch_opts = {"headless": headless}
        if channel:
            launch_opts["channel"] = channel

        browser = getattr(playwright, engine).launch(**launch_opts)
        context = browser.new_context()

        # Set context-level timeouts
        context.set_default_timeout(action_timeout)
        context.set_default_navigation_timeout(action_timeout)

        page = context.new_page()
    except Exception:
        # Stopping the driver also tears down anything it launched
        playwright.stop()
        raise

    logger.info("Launched playwright %s (headless=%s)", browser_type, headless)
    return playwright, browser, context, page
