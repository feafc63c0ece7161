#!/usr/bin/env python3
"""
Command-line argument parsing module.

This module provides functions for setting up and parsing command-line
arguments for the omnibrowser smoke runner.
"""

import argparse
from urllib.parse import urlparse

from ..browser.common.interface import BackendSelector


def create_parser():
    """
    Create the command-line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog='omnibrowser',
        description='Open one or more URLs in tabs of an automated browser and report their titles'
    )

    # Required arguments
    parser.add_argument('urls', type=str, nargs='+', metavar='URL',
                        help='URL to open; the first opens in the initial tab, the rest in new tabs')

    # Browser options
    browser_group = parser.add_argument_group('Browser Options')
    browser_group.add_argument('--backend', type=str, choices=BackendSelector.BACKENDS, default=None,
                        help='Automation backend (default: playwright)')
    browser_group.add_argument('--browser', type=str, default=None,
                        help='Engine variant, e.g. chromium, firefox, webkit (default: chromium)')
    browser_group.add_argument('--visible', action='store_true',
                        help='Run in visible browser mode instead of headless (default: headless)')
    browser_group.add_argument('--webdriver-path', type=str, default=None,
                        help='Path to the webdriver executable (selenium only, optional)')
    browser_group.add_argument('--stealth', action='store_true',
                        help='Apply stealth mode to avoid bot detection (selenium only)')

    # Action policy options
    policy_group = parser.add_argument_group('Action Options')
    policy_group.add_argument('--timeout', type=int, default=None,
                        help='Default action timeout in milliseconds (default: 5000)')
    policy_group.add_argument('--quiet', action='store_true',
                        help='Do not log every browser action')
    policy_group.add_argument('--no-throw', action='store_true',
                        help='Log failed actions and carry on instead of stopping')

    # Configuration file options
    config_group = parser.add_argument_group('Configuration Options')
    config_group.add_argument('--config', type=str, default=None,
                        help='Path to configuration file (JSON)')
    config_group.add_argument('--save-config', type=str, default=None,
                        help='Save current settings to configuration file')

    return parser


def parse_args(args=None):
    """
    Parse command-line arguments.

    Args:
        args: Command-line arguments to parse (uses sys.argv if None)

    Returns:
        argparse.Namespace: Parsed arguments

    Raises:
        SystemExit: If required arguments are missing or invalid
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    # Validate URLs
    for url in parsed_args.urls:
        parsed_url = urlparse(url)
        if not parsed_url.scheme or (parsed_url.scheme in ('http', 'https') and not parsed_url.netloc):
            parser.error(f"Invalid URL: {url}. Please provide a full URL (e.g., https://example.com)")

    if parsed_args.timeout is not None and parsed_args.timeout < 0:
        parser.error("--timeout must not be negative")

    return parsed_args


def print_config_summary(config, urls):
    """
    Print a summary of the session configuration.

    Args:
        config: Resolved BrowserConfig
        urls: URLs that will be opened
    """
    print("\nStarting omnibrowser with the following configuration:")
    print(f"- Backend: {config.backend} ({config.browser})")
    print(f"- Browser mode: {'Headless' if config.headless else 'Visible'}")
    print(f"- Action timeout: {config.action_timeout}ms")
    print(f"- Log actions: {'Yes' if config.logs else 'No'}")
    print(f"- On failure: {'Stop' if config.throw_on_fail else 'Log and continue'}")
    if config.backend == "selenium" and config.stealth:
        print("- Stealth mode: Enabled")
    print(f"- URLs: {len(urls)}")
    print()
