# src/daygrid/core/errors.py

"""
Engine error types.

Pure computations never raise for bad schedule data (they clamp instead).
Only the gesture controllers and the collaborator boundary raise.
"""

from __future__ import annotations


class DaygridError(Exception):
    """Base class for every error raised by the engine."""


class CollaboratorUnavailable(DaygridError):
    """
    The task store failed or timed out.

    `notice` is a short, human-readable line suitable for a toast/snackbar.
    The original exception is chained via `raise ... from`.
    """

    def __init__(self, operation: str, notice: str | None = None) -> None:
        self.operation = operation
        self.notice = notice or f"Could not {operation}. Your change was not saved."
        super().__init__(f"{operation} failed: {self.notice}")


class ConcurrentGestureRejected(DaygridError):
    """A drag/resize start was requested while another gesture is in flight."""

    def __init__(self, requested: str, active: str) -> None:
        self.requested = requested
        self.active = active
        super().__init__(f"cannot start {requested}: a {active} gesture is already active")


class GestureStateError(DaygridError):
    """A gesture transition was requested in a state that does not allow it."""
