"""Browser abstraction layer errors."""


class BrowserError(RuntimeError):
    """Base error for the browser abstraction layer."""


class UnsupportedBackendError(BrowserError, ValueError):
    """The requested backend or engine variant is not recognized."""


class TabNotFoundError(BrowserError, IndexError):
    """A tab index is outside the session's tab sequence."""


class ElementNotFoundError(BrowserError):
    """No DOM node matches the element's selector."""


class ElementNotVisibleError(BrowserError):
    """The element is not rendered, so it has no bounding geometry."""


class SessionClosedError(BrowserError):
    """The session has no tabs left and cannot be used any more."""


class SessionMismatchError(BrowserError, ValueError):
    """Two elements in one gesture belong to different sessions."""
