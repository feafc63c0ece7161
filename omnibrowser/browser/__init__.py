"""
Browser module for creating and driving browser sessions.

This package contains the engine-agnostic interfaces and the Playwright and
Selenium implementations behind them. Backends are imported lazily by the
factory, so only the selected engine has to be importable at runtime.
"""

from .common.interface import BackendSelector, Browser, Element
from .common.policy import ActionOptions, ActionResult

# Export the factory function for creating browser sessions
init_browser = BackendSelector.create

__all__ = [
    "Browser",          # Abstract browser interface
    "Element",          # Abstract element interface
    "BackendSelector",  # Factory class
    "init_browser",     # Factory function to create browser sessions
    "ActionOptions",    # Per-call action options
    "ActionResult",     # Outcome of a policy-wrapped action
]
