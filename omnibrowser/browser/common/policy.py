#!/usr/bin/env python3
"""
Action execution policy module.

Every primitive browser or element operation runs through an ActionPolicy,
which resolves the per-call options (timeout, logging, throw-on-fail), logs
the action and decides whether a failure propagates to the caller or is
recorded and swallowed.
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ActionOptions:
    """
    Per-call configuration overlay.

    Fields left as None are unset and fall through to the next layer
    when options are resolved.
    """
    timeout: Optional[int] = None  # milliseconds
    log: Optional[bool] = None
    throw_on_fail: Optional[bool] = None


@dataclass(frozen=True)
class ActionResult(Generic[T]):
    """Outcome of one policy-wrapped operation: a value or an error."""
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the captured error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value


def resolve_options(*layers: Optional[ActionOptions]) -> ActionOptions:
    """
    Merge option layers into one ActionOptions.

    Layers are applied left to right and the last non-None value of each
    field wins, so call-site overrides go last.

    Args:
        *layers: ActionOptions instances (None entries are skipped)

    Returns:
        ActionOptions: The merged options
    """
    merged = ActionOptions()
    for layer in layers:
        if layer is None:
            continue
        updates = {
            f.name: getattr(layer, f.name)
            for f in fields(layer)
            if getattr(layer, f.name) is not None
        }
        if updates:
            merged = replace(merged, **updates)
    return merged


class ActionPolicy:
    """
    Runs operations under resolved action options.

    A policy is created per session from the configuration defaults and is
    shared, read-only, with every element the session hands out.
    """

    def __init__(self, defaults: ActionOptions, backend_defaults: Optional[ActionOptions] = None):
        """
        Initialize the policy.

        Args:
            defaults: Options derived from the resolved configuration
            backend_defaults: Backend-specific overlay applied on top of defaults
        """
        self.defaults = defaults
        self.backend_defaults = backend_defaults or ActionOptions()

    def resolve(self, options: Optional[ActionOptions] = None) -> ActionOptions:
        """Resolve the options for one call (call-site options win)."""
        return resolve_options(self.defaults, self.backend_defaults, options)

    def attempt(self, options: ActionOptions, message: str, operation: Callable[[], T]) -> ActionResult[T]:
        """
        Execute an operation and capture its outcome.

        Args:
            options: Resolved options for this call
            message: Human-readable description of the action
            operation: Zero-argument unit of work

        Returns:
            ActionResult: The value on success, the exception on failure
        """
        if options.log:
            logger.info(message)
        try:
            return ActionResult(value=operation())
        except Exception as e:
            return ActionResult(error=e)

    def run(self, options: ActionOptions, message: str, operation: Callable[[], T]) -> Optional[T]:
        """
        Execute an operation, propagating or swallowing its failure.

        When throw_on_fail is set the failure is re-raised; otherwise it is
        logged and None is returned in place of a result.
        """
        result = self.attempt(options, message, operation)
        if result.ok:
            return result.value
        if options.throw_on_fail:
            raise result.error
        logger.error("%s failed: %s", message, result.error)
        return None

    def execute(self, message: str, operation: Callable[[Optional[int]], T],
                options: Optional[ActionOptions] = None) -> Optional[T]:
        """
        Resolve options and run an operation that takes the resolved timeout.

        This is the entry point the backends use: the timeout is handed to
        the engine call, the policy itself never enforces it.
        """
        resolved = self.resolve(options)
        return self.run(resolved, message, lambda: operation(resolved.timeout))


def describe(value: Any, limit: int = 60) -> str:
    """Shorten a value for inclusion in an action message."""
    text = str(value)
    if len(text) > limit:
        return text[:limit - 3] + "..."
    return text
