"""Public package surface for portdog.

Expose the primary entry points used by consumers of the package.
"""

from portdog.config import __version__
from portdog.errors import EnumerationError, PortdogError, TerminationError
from portdog.inspector import PortInspector
from portdog.models import (
    KillReport,
    ProcessInfo,
    Protocol,
    ProtocolFilter,
    SocketRecord,
    TerminationOutcome,
    WhoReport,
)
from portdog.processes import ProcessTable
from portdog.sockets import SocketTable, extract_pids
from portdog.terminate import Terminator, default_terminator

__all__ = [
    "EnumerationError",
    "KillReport",
    "PortInspector",
    "PortdogError",
    "ProcessInfo",
    "ProcessTable",
    "Protocol",
    "ProtocolFilter",
    "SocketRecord",
    "SocketTable",
    "TerminationError",
    "TerminationOutcome",
    "Terminator",
    "WhoReport",
    "__version__",
    "default_terminator",
    "extract_pids",
]
