"""
Creation pipeline errors.

Every fatal failure is a :class:`CreateError` tagged with the stage that
raised it.  The top-level command catches ``CreateError``, prints one
line and exits non-zero; the pipeline has already removed the target
directory by then.
"""

from __future__ import annotations

from pathlib import Path


class PathResolutionDegraded(UserWarning):
    """Best-effort path resolution fell back to the raw inputs (non-fatal)."""


class CreateError(Exception):
    """Base class for project creation failures."""

    stage = "create"

    def __init__(self, message: str, *, path: Path | None = None):
        self.path = path
        super().__init__(message)


class TargetExistsNeedsConfirmation(CreateError):
    """The target directory exists; overwriting requires explicit consent."""

    stage = "fetch"


class AbortedByUser(CreateError):
    stage = "confirm"


class FetchFailed(CreateError):
    stage = "fetch"


class NormalizationFailed(CreateError):
    stage = "normalize"


class RewriteFailed(CreateError):
    stage = "rewrite"


class FinalizationFailed(CreateError):
    stage = "finalize"


class TimedOut(CreateError):
    stage = "wait"


class Cancelled(CreateError):
    stage = "wait"
