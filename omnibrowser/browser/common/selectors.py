#!/usr/bin/env python3
"""
Selector normalization module.

Callers pass selector strings (optionally with a forced selector type);
this module turns them into a backend-neutral Selector and translates that
into the form each engine understands.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

_UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_LOWER = "abcdefghijklmnopqrstuvwxyz"


class SelectorType(str, Enum):
    """Selector strategies a caller can force."""
    CSS = "css"
    ID = "id"
    CLASS = "class"
    XPATH = "xpath"
    TEXT = "text"
    TAG = "tag"


_PREFIXES = {
    "css=": SelectorType.CSS,
    "xpath=": SelectorType.XPATH,
    "text=": SelectorType.TEXT,
    "id=": SelectorType.ID,
}


@dataclass(frozen=True)
class Selector:
    """A parsed selector: strategy plus raw value."""
    kind: SelectorType
    value: str

    def __str__(self):
        return f"{self.kind.value}={self.value}"


def parse_selector(selector: str, force_type: Optional[Union[SelectorType, str]] = None) -> Selector:
    """
    Parse a selector string into a Selector.

    Args:
        selector: Selector string, e.g. "#login", "//div[@id='x']", "text=Sign in"
        force_type: Optional selector type overriding detection
            ("css", "id", "class", "xpath", "text", "tag")

    Returns:
        Selector: The parsed selector

    Raises:
        ValueError: If the selector is empty or the forced type is unknown
    """
    if not selector or not selector.strip():
        raise ValueError("Selector must be a non-empty string")

    if force_type is not None:
        return Selector(SelectorType(force_type), selector)

    for prefix, kind in _PREFIXES.items():
        if selector.startswith(prefix):
            return Selector(kind, selector[len(prefix):])

    # Same heuristic Playwright applies to bare selectors
    if selector.startswith(("//", "..", "./", "(/")):
        return Selector(SelectorType.XPATH, selector)

    return Selector(SelectorType.CSS, selector)


def _quote_css(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def xpath_literal(value: str) -> str:
    """Quote a string as an XPath literal, using concat() when it holds both quote kinds."""
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    parts = value.split('"')
    return "concat(" + ", '\"', ".join(f'"{part}"' for part in parts) + ")"


def to_playwright(selector: Selector) -> str:
    """Translate a Selector into a Playwright selector string."""
    if selector.kind is SelectorType.ID:
        return f"[id={_quote_css(selector.value)}]"
    if selector.kind is SelectorType.CLASS:
        return "".join(f".{name}" for name in selector.value.split())
    if selector.kind is SelectorType.XPATH:
        return f"xpath={selector.value}"
    if selector.kind is SelectorType.TEXT:
        return f"text={selector.value}"
    # CSS and TAG are both plain CSS for Playwright
    return selector.value


def to_selenium(selector: Selector, scoped: bool = False) -> Tuple[str, str]:
    """
    Translate a Selector into a Selenium (by, value) locator.

    Args:
        selector: Parsed selector
        scoped: Whether the lookup runs inside another element; absolute
            XPath expressions are then made relative to it

    Returns:
        tuple: (By strategy, value)
    """
    from selenium.webdriver.common.by import By

    if selector.kind is SelectorType.ID:
        return By.CSS_SELECTOR, f"[id={_quote_css(selector.value)}]"
    if selector.kind is SelectorType.CLASS:
        return By.CSS_SELECTOR, "".join(f".{name}" for name in selector.value.split())
    if selector.kind is SelectorType.TAG:
        return By.TAG_NAME, selector.value
    if selector.kind is SelectorType.XPATH:
        expression = selector.value
        if scoped and expression.startswith("/"):
            expression = "." + expression
        return By.XPATH, expression
    if selector.kind is SelectorType.TEXT:
        # Case-insensitive substring match on the node's own text, like text= in Playwright
        needle = xpath_literal(selector.value.lower())
        return By.XPATH, (
            f".//*[text()[contains(translate(normalize-space(.), '{_UPPER}', '{_LOWER}'), {needle})]]"
        )
    return By.CSS_SELECTOR, selector.value
