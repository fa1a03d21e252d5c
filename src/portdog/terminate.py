"""
terminate.py - Platform-specific process termination.

Two severities, chosen by the caller:
  graceful  POSIX: SIGTERM, which the target may trap or ignore
            Windows: ``taskkill /PID <pid>``
  forced    POSIX: SIGKILL, which cannot be intercepted
            Windows: ``taskkill /PID <pid> /F``

Windows has no signal-trapping distinction, so both severities go through
taskkill and differ only by the /F flag.

Success means the OS accepted the request. Nothing waits for the target
to exit, and nothing escalates from graceful to forced on its own.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from abc import ABC, abstractmethod

from .errors import TerminationError

logger = logging.getLogger(__name__)


class Terminator(ABC):
    """Sends a termination request to a single PID."""

    def terminate(self, pid: int, force: bool = False) -> None:
        """Raise TerminationError with a human-readable cause on failure."""
        if pid <= 0:
            # kill(0) / kill(-1) would hit a whole process group
            raise TerminationError(pid, f"refusing to signal pid {pid}")
        self._send(pid, force)

    @abstractmethod
    def _send(self, pid: int, force: bool) -> None:
        """Deliver the request; raise TerminationError on failure."""


class PosixTerminator(Terminator):
    def _send(self, pid: int, force: bool) -> None:
        sig = signal.SIGKILL if force else signal.SIGTERM
        logger.debug("sending %s to pid %d", sig.name, pid)
        try:
            os.kill(pid, sig)
        except ProcessLookupError as exc:
            raise TerminationError(pid, "no such process") from exc
        except PermissionError as exc:
            raise TerminationError(pid, "permission denied") from exc
        except OSError as exc:
            raise TerminationError(pid, exc.strerror or str(exc)) from exc


class WindowsTerminator(Terminator):
    def _send(self, pid: int, force: bool) -> None:
        cmd = ["taskkill", "/PID", str(pid)]
        if force:
            cmd.append("/F")
        logger.debug("running %s", " ".join(cmd))
        try:
            # taskkill writes in the OEM code page, not the ANSI one
            result = subprocess.run(cmd, capture_output=True, text=True, errors="replace")
        except OSError as exc:
            raise TerminationError(pid, f"failed to invoke taskkill: {exc}") from exc
        if result.returncode != 0:
            detail = (result.stderr or "").strip() or (result.stdout or "").strip()
            raise TerminationError(
                pid, detail or f"taskkill exited with status {result.returncode}"
            )


def default_terminator() -> Terminator:
    return WindowsTerminator() if os.name == "nt" else PosixTerminator()


_default = default_terminator()


def terminate(pid: int, force: bool = False) -> None:
    """Terminate ``pid`` with this platform's terminator."""
    _default.terminate(pid, force)
