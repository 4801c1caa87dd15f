"""Exception types raised by linewrap."""

from __future__ import annotations


class NeverRaise(RuntimeError):
    """Sentinel exception for code paths that must be unreachable.

    Raising this exception signals a broken invariant: a caller handed the
    library data it promised never to produce. The keyword payload given to
    ``never()`` is kept on ``env`` for diagnostics.
    """

    def __init__(self, message: str, *, env: dict[str, object] | None = None):
        super().__init__(message)
        self.reason = message
        self.env = dict(env or {})

    @property
    def payload(self) -> dict[str, object]:
        return {"reason": self.reason, "env": dict(self.env)}


class NeverThrown(NeverRaise):
    """Alias for NeverRaise used by the explicit never() marker."""


class OperationCancelled(RuntimeError):
    """Raised when a cancellation token fires during a suggestion request."""

    def __init__(self, reason: str = "Operation cancelled.") -> None:
        super().__init__(reason)
        self.reason = reason


class SourceParseError(ValueError):
    """Raised when source text cannot be parsed into a syntax index."""
