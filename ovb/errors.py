"""Exceptions raised by the browser core.

They extend the built-in types callers already expect, so a bad locus is still
a ``ValueError`` and a missing drawing surface is still a ``RuntimeError``.
"""

from typing import Optional


class LocusError(ValueError):
    """A locus string could not be parsed into a usable region."""

    def __init__(self, locus: str, reason: str = ""):
        self.locus = locus
        self.reason = reason
        msg = f"Invalid locus string: {locus!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class RenderSurfaceError(RuntimeError):
    """The canvas could not provide a 2D drawing context."""


class LayoutError(RuntimeError):
    """A track's layout pass failed while streaming from its adapter."""

    def __init__(self, track_id: str, cause: Optional[BaseException] = None):
        self.track_id = track_id
        self.cause = cause
        msg = f"Layout failed for track {track_id!r}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
