"""
errors.py - Exception hierarchy for portdog.

EnumerationError is fatal for the command that raised it. TerminationError
is per-PID and gets folded into a TerminationOutcome by the batch kill.
"""

from __future__ import annotations


class PortdogError(Exception):
    """Base class for every error raised by portdog."""


class EnumerationError(PortdogError):
    """The OS socket table could not be read at all."""


class TerminationError(PortdogError):
    """A single PID could not be signalled."""

    def __init__(self, pid: int, cause: str) -> None:
        super().__init__(f"pid {pid}: {cause}")
        self.pid = pid
        self.cause = cause
