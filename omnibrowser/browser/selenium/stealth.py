"""
Browser stealth configuration to avoid bot detection.
"""

import logging

from selenium_stealth import stealth

logger = logging.getLogger(__name__)


def apply_stealth_mode(driver):
    """
    Apply stealth mode to the WebDriver to avoid bot detection.

    Args:
        driver: Selenium WebDriver instance (chromedriver based)

    Returns:
        WebDriver: The modified WebDriver instance
    """
    stealth(
        driver,
        languages=["en-US", "en"],
        vendor="Google Inc.",
        platform="Win32",
        webgl_vendor="Intel Inc.",
        renderer="Intel Iris OpenGL Engine",
        fix_hairline=True,
    )
    logger.info("Applied stealth mode to WebDriver")
    return driver
