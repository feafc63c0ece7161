#!/usr/bin/env python3
"""
Main entry point for omnibrowser.

This module provides the smoke runner used from the command line: it opens
every given URL in its own tab, prints each tab's URL and title and closes
the browser again.
"""

import logging
import sys
import traceback

from .browser.common.interface import BackendSelector
from .cli.argument_parser import parse_args, print_config_summary
from .cli.config import load_config_from_args, save_config


def visit(browser, urls):
    """
    Open the URLs in tabs of an open browser and collect what they show.

    Returns:
        list: (tab index, url, title) for every open tab
    """
    browser.navigate_to(urls[0])
    for url in urls[1:]:
        browser.open_tab(url)

    tabs = []
    for index in range(browser.tab_count):
        browser.switch_to_tab(index)
        tabs.append((index, browser.get_url(), browser.get_title()))
    return tabs


def main(argv=None):
    """Main entry point for the omnibrowser smoke runner."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        # Parse command-line arguments
        args = parse_args(argv)

        # Resolve configuration
        config = load_config_from_args(args)

        # Save configuration if requested
        if args.save_config:
            save_config(config, args.save_config)
            print(f"Configuration saved to {args.save_config}")

        print_config_summary(config, args.urls)

        with BackendSelector.create(config=config) as browser:
            for index, url, title in visit(browser, args.urls):
                print(f"[{index}] {url} - {title}")

        return 0

    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 130  # Standard exit code for SIGINT

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
