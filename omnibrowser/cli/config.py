#!/usr/bin/env python3
"""
Configuration management module.

This module provides functionality for loading and saving configuration
files, and for resolving the configuration a browser session is built from:
built-in defaults, then an optional JSON file, then explicit overrides.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

from ..browser.common.policy import ActionOptions

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "OMNIBROWSER_CONFIG"
DEFAULT_CONFIG_FILE = "omnibrowser.json"

# camelCase keys, and the engine names used for the browser variant
_KEY_ALIASES = {
    "actionTimeout": "action_timeout",
    "throwOnFail": "throw_on_fail",
    "alertTimeout": "alert_timeout",
    "webdriverPath": "webdriver_path",
    "engine": "browser",
    "engineVariant": "browser",
}


@dataclass
class BrowserConfig:
    """
    Configuration for a browser session.

    This dataclass holds every option a backend needs at launch time and
    the action defaults (timeout, logs, throw_on_fail) each call falls back to.
    """
    # Backend and engine
    backend: str = "playwright"
    browser: str = "chromium"
    headless: bool = True

    # Action policy defaults
    action_timeout: int = 5000  # milliseconds
    logs: bool = True
    throw_on_fail: bool = True

    # Bounded wait for native dialogs
    alert_timeout: int = 30000  # milliseconds

    # Selenium-only options
    stealth: bool = False
    webdriver_path: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.backend = str(self.backend).lower()
        self.browser = str(self.browser).lower()

        for name in ("action_timeout", "alert_timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer number of milliseconds, got {value!r}")
            if value < 0:
                raise ValueError(f"{name} must not be negative, got {value}")

        if self.stealth and self.backend != "selenium":
            logger.warning("stealth is only applied by the selenium backend; ignoring it for %s", self.backend)

    def action_options(self) -> ActionOptions:
        """
        Get the configuration-level action defaults.

        Returns:
            ActionOptions: timeout, log and throw_on_fail taken from this config
        """
        return ActionOptions(
            timeout=self.action_timeout,
            log=self.logs,
            throw_on_fail=self.throw_on_fail,
        )

    def with_overrides(self, **overrides: Any) -> "BrowserConfig":
        """
        Get a copy of this configuration with some fields replaced.

        Overrides that are None are ignored.
        """
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if not overrides:
            return self
        return BrowserConfig.from_dict({**self.to_dict(), **overrides})

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to a dictionary.

        Returns:
            dict: Dictionary representation of the configuration
        """
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "BrowserConfig":
        """
        Create a BrowserConfig instance from a dictionary.

        camelCase keys are mapped to their snake_case fields; keys that match
        no field are logged and ignored.

        Args:
            config_dict: Dictionary containing configuration parameters

        Returns:
            BrowserConfig: Configuration instance
        """
        return cls(**_normalize_keys(config_dict))


def _normalize_keys(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(BrowserConfig)}
    normalized = {}
    for key, value in config_dict.items():
        key = _KEY_ALIASES.get(key, key)
        if key not in known:
            logger.warning("Ignoring unknown configuration key: %s", key)
            continue
        normalized[key] = value
    return normalized


def load_config(config_file: str) -> BrowserConfig:
    """
    Load configuration from a JSON file.

    Args:
        config_file: Path to the configuration file

    Returns:
        BrowserConfig: Configuration instance

    Raises:
        FileNotFoundError: If the configuration file does not exist
        ValueError: If the file is not a JSON object or holds invalid values
    """
    return BrowserConfig.from_dict(_read_config_file(config_file))


def _read_config_file(config_file: str) -> Dict[str, Any]:
    if not os.path.exists(config_file):
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    with open(config_file, "r") as f:
        try:
            config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_file}: {e.msg}") from e

    if not isinstance(config_dict, dict):
        raise ValueError(f"Configuration file {config_file} must contain a JSON object")
    return config_dict


def save_config(config: BrowserConfig, config_file: str) -> None:
    """
    Save configuration to a JSON file.

    Args:
        config: Configuration instance
        config_file: Path to the configuration file
    """
    directory = os.path.dirname(os.path.abspath(config_file))
    if directory and not os.path.exists(directory):
        os.makedirs(directory)

    with open(config_file, "w") as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.info("Configuration saved to %s", config_file)


def find_config_file(config_file: Optional[str] = None) -> Optional[str]:
    """
    Locate the configuration file to use.

    An explicit path wins, then the OMNIBROWSER_CONFIG environment variable,
    then omnibrowser.json in the working directory if it exists.
    """
    if config_file:
        return config_file
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return from_env
    if os.path.exists(DEFAULT_CONFIG_FILE):
        return DEFAULT_CONFIG_FILE
    return None


def resolve_config(config_file: Optional[str] = None, **overrides: Any) -> BrowserConfig:
    """
    Resolve the configuration for a new session.

    Layers are merged as defaults, then the configuration file, then the
    keyword overrides; overrides that are None are ignored.

    Args:
        config_file: Optional path to a JSON configuration file
        **overrides: Field values that take precedence over the file

    Returns:
        BrowserConfig: The resolved configuration
    """
    merged: Dict[str, Any] = {}

    path = find_config_file(config_file)
    if path:
        merged.update(_normalize_keys(_read_config_file(path)))
        logger.debug("Loaded configuration from %s", path)

    merged.update(_normalize_keys({k: v for k, v in overrides.items() if v is not None}))
    return BrowserConfig(**merged)


def load_config_from_args(args):
    """
    Resolve configuration from command-line arguments and a config file.

    Only options given on the command line override the file; the rest
    keep their file or default values.

    Args:
        args: Parsed command-line arguments

    Returns:
        BrowserConfig: The resolved configuration
    """
    return resolve_config(
        args.config,
        backend=args.backend,
        browser=args.browser,
        headless=False if args.visible else None,
        action_timeout=args.timeout,
        logs=False if args.quiet else None,
        throw_on_fail=False if args.no_throw else None,
        stealth=True if args.stealth else None,
        webdriver_path=args.webdriver_path,
    )
