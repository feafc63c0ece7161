#!/usr/bin/env python3
"""
WebDriver setup and initialization module.

This module contains functions for creating and configuring Selenium
WebDriver instances for each supported engine variant. Driver executables
are resolved with webdriver-manager unless an explicit path is given.
"""

import logging

from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.edge.options import Options as EdgeOptions
from selenium.webdriver.edge.service import Service as EdgeService
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.firefox.service import Service as FirefoxService
from webdriver_manager.chrome import ChromeDriverManager
from webdriver_manager.core.os_manager import ChromeType
from webdriver_manager.firefox import GeckoDriverManager
from webdriver_manager.microsoft import EdgeChromiumDriverManager

from ..common.exceptions import UnsupportedBackendError
from .stealth import apply_stealth_mode

logger = logging.getLogger(__name__)

ENGINE_VARIANTS = ("chromium", "chrome", "edge", "firefox", "undetected-chrome")

# Variants driven through chromedriver, where stealth mode can be applied
CHROMIUM_FAMILY = ("chromium", "chrome", "undetected-chrome")

_CHROMIUM_ARGS = (
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-extensions",
    "--disable-notifications",
)


def _chrome_options(headless, options_class=ChromeOptions):
    options = options_class()
    if headless:
        options.add_argument("--headless=new")
    for argument in _CHROMIUM_ARGS:
        options.add_argument(argument)
    return options


def _chrome_driver(browser_type, headless, webdriver_path):
    if webdriver_path:
        service = ChromeService(webdriver_path)
    elif browser_type == "chromium":
        service = ChromeService(ChromeDriverManager(chrome_type=ChromeType.CHROMIUM).install())
    else:
        service = ChromeService(ChromeDriverManager().install())
    return webdriver.Chrome(service=service, options=_chrome_options(headless))


def _edge_driver(headless, webdriver_path):
    service = EdgeService(webdriver_path or EdgeChromiumDriverManager().install())
    return webdriver.Edge(service=service, options=_chrome_options(headless, EdgeOptions))


def _firefox_driver(headless, webdriver_path):
    options = FirefoxOptions()
    if headless:
        options.add_argument("-headless")
    service = FirefoxService(webdriver_path or GeckoDriverManager().install())
    return webdriver.Firefox(service=service, options=options)


def setup_undetected_webdriver(headless=True, webdriver_path=None):
    """
    Set up and return an Undetected ChromeDriver instance.

    Args:
        headless: Whether to run in headless mode
        webdriver_path: Optional path to a chromedriver executable

    Returns:
        WebDriver: Configured Undetected ChromeDriver instance
    """
    import undetected_chromedriver as uc

    options = uc.ChromeOptions()
    if headless:
        options.add_argument("--headless=new")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")

    if webdriver_path:
        return uc.Chrome(options=options, driver_executable_path=webdriver_path)
    return uc.Chrome(options=options)


def setup_webdriver(browser_type="chromium", headless=True, action_timeout=5000,
                    webdriver_path=None, stealth=False):
    """
    Set up and return a Selenium WebDriver instance.

    Args:
        browser_type: Engine variant ("chromium", "chrome", "edge", "firefox"
            or "undetected-chrome")
        headless: Whether to run in headless mode
        action_timeout: Page load and script timeout in milliseconds
        webdriver_path: Path to the WebDriver executable (resolved with
            webdriver-manager when omitted)
        stealth: Whether to apply selenium-stealth (chromium family only)

    Returns:
        WebDriver: Configured Selenium WebDriver instance

    Raises:
        UnsupportedBackendError: If browser_type is not a known engine variant
    """
    if browser_type not in ENGINE_VARIANTS:
        raise UnsupportedBackendError(
            f"Browser {browser_type} is not supported for selenium "
            f"(choose one of {', '.join(ENGINE_VARIANTS)})"
        )

    if browser_type == "undetected-chrome":
        driver = setup_undetected_webdriver(headless=headless, webdriver_path=webdriver_path)
    elif browser_type in ("chromium", "chrome"):
        driver = _chrome_driver(browser_type, headless, webdriver_path)
    elif browser_type == "edge":
        driver = _edge_driver(headless, webdriver_path)
    else:
        driver = _firefox_driver(headless, webdriver_path)

    try:
        # Set timeouts
        driver.set_page_load_timeout(action_timeout / 1000)
        driver.set_script_timeout(action_timeout / 1000)

        if stealth:
            if browser_type in CHROMIUM_FAMILY:
                apply_stealth_mode(driver)
            else:
                logger.warning("Stealth mode is only available for chromium browsers, not %s", browser_type)
    except Exception:
        driver.quit()
        raise

    logger.info("Launched selenium %s (headless=%s)", browser_type, headless)
    return driver
