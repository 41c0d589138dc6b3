"""Exception taxonomy for figmachunk.

Every error raised by the library derives from FigmaChunkError so callers can
catch library failures in one place. Skipping a node is never an error; those
decisions only show up in the page contents and the has_more flag.
"""

from typing import Optional


class FigmaChunkError(Exception):
    """Base class for all figmachunk errors."""
    pass


class InvalidUpstreamData(FigmaChunkError):
    """Raised when the upstream payload has no document root or a malformed node."""
    pass


class InvalidCursor(FigmaChunkError, ValueError):
    """Raised when a resume cursor cannot be parsed.

    Cursors are non-negative decimal integer strings. Anything else is fatal,
    never silently coerced to zero.
    """

    def __init__(self, cursor: object):
        self.cursor = cursor
        super().__init__(f"Invalid cursor: {cursor!r} (expected a non-negative integer string)")


class UpstreamUnavailable(FigmaChunkError):
    """Raised when the remote source cannot be reached or answers with an error.

    The original transport exception is preserved as ``__cause__``.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class InvalidConfiguration(FigmaChunkError, ValueError):
    """Raised when a TraversalConfig fails validation."""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__(f"Invalid configuration: {'; '.join(self.problems)}")


class MissingCredentials(FigmaChunkError):
    """Raised when no Figma access token can be located."""
    pass


class BudgetExhausted(FigmaChunkError):
    """Raised by pass-through endpoints once the session budget has been spent."""
    pass
