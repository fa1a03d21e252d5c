"""
inspector.py - Port-to-process resolution and batch termination.

Control flow for both commands:
  SocketTable.query(port) -> owning PIDs -> ProcessTable / Terminator -> report

Every dependency is injectable so the whole flow can run against fixed
snapshots.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .errors import TerminationError
from .models import KillReport, ProtocolFilter, TerminationOutcome, WhoReport
from .processes import ProcessTable
from .sockets import SocketTable, extract_pids
from .terminate import Terminator, default_terminator

logger = logging.getLogger(__name__)


class PortInspector:
    """
    Answers "who is on this port" and frees the port on request.

    Usage::

        inspector = PortInspector()
        report = inspector.who(8080)
        for entry in report.entries():
            ...

        result = inspector.kill(8080, force=False)
        if result.nothing_to_do:
            ...
        for outcome in result.failed:
            ...
    """

    def __init__(
        self,
        sockets: Optional[SocketTable] = None,
        terminator: Optional[Terminator] = None,
        process_table: Optional[Callable[[], ProcessTable]] = None,
    ) -> None:
        self.sockets = sockets or SocketTable()
        self.terminator = terminator or default_terminator()
        self._process_table = process_table or ProcessTable.snapshot

    def who(self, port: int, protocol_filter: ProtocolFilter = ProtocolFilter.ANY) -> WhoReport:
        """Sockets on ``port`` plus process details for each owning PID.

        Raises EnumerationError when the socket table cannot be read.
        """
        records = self.sockets.query(port, protocol_filter)
        report = WhoReport(port=port, protocol_filter=protocol_filter, records=records)
        pids = extract_pids(records)
        if not pids:
            return report

        table = self._process_table()
        for pid in pids:
            info = table.resolve(pid)
            if info is None:
                logger.debug("pid %d not in process snapshot", pid)
            report.processes[pid] = info
        return report

    def kill(
        self,
        port: int,
        force: bool = False,
        protocol_filter: ProtocolFilter = ProtocolFilter.ANY,
    ) -> KillReport:
        """Send a termination request to every PID owning a socket on ``port``.

        Every PID gets exactly one attempt, in ascending order, whatever
        happened to the others. Raises EnumerationError only when the
        socket table cannot be read.
        """
        records = self.sockets.query(port, protocol_filter)
        pids: List[int] = sorted(extract_pids(records))
        report = KillReport(port=port, force=force, records=records, pids=pids)
        if not pids:
            logger.info("port %d: nothing to terminate", port)
            return report

        for pid in pids:
            try:
                self.terminator.terminate(pid, force=force)
            except TerminationError as exc:
                logger.warning("could not terminate pid %d: %s", pid, exc.cause)
                report.outcomes.append(
                    TerminationOutcome(pid=pid, succeeded=False, error_detail=exc.cause)
                )
                continue
            logger.info("termination requested for pid %d (force=%s)", pid, force)
            report.outcomes.append(TerminationOutcome(pid=pid, succeeded=True))
        return report
