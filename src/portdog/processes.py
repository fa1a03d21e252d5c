"""
processes.py - Snapshot of the live process table.

The snapshot is taken once per command so every PID in that command is
resolved against the same view of the system.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional

import psutil

from .config import UNKNOWN
from .models import ProcessInfo

logger = logging.getLogger(__name__)


class ProcessTable:
    """Read-only PID -> ProcessInfo lookup."""

    def __init__(self, entries: Optional[Mapping[int, ProcessInfo]] = None) -> None:
        self._entries: Dict[int, ProcessInfo] = dict(entries or {})

    @classmethod
    def snapshot(cls) -> "ProcessTable":
        """Walk the live process table once."""
        entries: Dict[int, ProcessInfo] = {}
        for proc in psutil.process_iter(["pid", "name", "exe"]):
            try:
                info = proc.info
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
            pid = info.get("pid")
            if pid is None:
                continue
            entries[pid] = ProcessInfo(
                pid=pid,
                name=info.get("name") or UNKNOWN,
                # psutil reports '' or None when the path is not resolvable
                executable_path=info.get("exe") or None,
            )
        logger.debug("process snapshot holds %d entries", len(entries))
        return cls(entries)

    @classmethod
    def from_infos(cls, infos: Iterable[ProcessInfo]) -> "ProcessTable":
        return cls({info.pid: info for info in infos})

    def resolve(self, pid: int) -> Optional[ProcessInfo]:
        """Return the ProcessInfo for ``pid``, or None if it is not in the snapshot."""
        return self._entries.get(pid)
