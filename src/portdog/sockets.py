"""
sockets.py - One-shot snapshot of the OS socket table.

Responsibilities:
  • Read the live IPv4/IPv6 TCP/UDP socket table through psutil
  • Keep only sockets bound to the requested local port
  • Merge psutil's per-process entries into one SocketRecord per socket
  • Union owning PIDs across matching records

Nothing is cached: every query is a fresh system-wide read, so callers must
tolerate sockets opening or closing between two calls.
"""

from __future__ import annotations

import logging
import socket
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

import psutil

from .errors import EnumerationError
from .models import Protocol, ProtocolFilter, SocketRecord

logger = logging.getLogger(__name__)

MAX_PORT = 65535

_FAMILIES = (socket.AF_INET, socket.AF_INET6)

_PROTOCOL_BY_TYPE = {
    socket.SOCK_STREAM: Protocol.TCP,
    socket.SOCK_DGRAM: Protocol.UDP,
}

# Signature of psutil.net_connections
ConnectionSource = Callable[..., Iterable[Any]]


def validate_port(port: int) -> int:
    if not 0 <= port <= MAX_PORT:
        raise ValueError(f"port must be between 0 and {MAX_PORT}, got {port}")
    return port


def _local_port(laddr: Any) -> Optional[int]:
    if not laddr:
        return None
    try:
        return laddr.port
    except AttributeError:
        # Plain (ip, port) tuple
        return laddr[1] if len(laddr) >= 2 else None


class SocketTable:
    """
    Queries the live socket table.

    Usage::

        table = SocketTable()
        records = table.query(8080, ProtocolFilter.ANY)
        pids = extract_pids(records)

    ``source`` defaults to ``psutil.net_connections`` and can be replaced
    with any callable accepting ``kind=`` to inject a fixed table.
    """

    def __init__(self, source: Optional[ConnectionSource] = None) -> None:
        self._source: ConnectionSource = source or psutil.net_connections

    def query(
        self, port: int, protocol_filter: ProtocolFilter = ProtocolFilter.ANY
    ) -> List[SocketRecord]:
        """Return every socket bound to ``port``; empty when none matches.

        Raises EnumerationError when the table cannot be read.
        """
        validate_port(port)
        kind = protocol_filter.kind
        try:
            connections = list(self._source(kind=kind))
        except psutil.AccessDenied as exc:
            logger.warning("socket table read denied (kind=%s)", kind)
            raise EnumerationError(
                "insufficient privileges to read the socket table (try running as root/administrator)"
            ) from exc
        except (psutil.Error, OSError) as exc:
            raise EnumerationError(f"could not read the socket table: {exc}") from exc

        logger.debug("read %d socket entries (kind=%s)", len(connections), kind)

        # key -> (protocol, state, pids); dict keeps first-seen order
        groups: Dict[Tuple[Any, ...], Tuple[Protocol, Optional[str], Set[int]]] = {}
        for conn in connections:
            if conn.family not in _FAMILIES:
                continue
            protocol = _PROTOCOL_BY_TYPE.get(conn.type)
            if protocol is None or not protocol_filter.accepts(protocol):
                continue
            if _local_port(conn.laddr) != port:
                continue

            state = conn.status if protocol is Protocol.TCP else None
            key = (protocol, conn.family, tuple(conn.laddr), tuple(conn.raddr or ()), state)
            _, _, pids = groups.setdefault(key, (protocol, state, set()))
            # None means the kernel hid the owner; pid 0 is never a real owner
            if conn.pid is not None and conn.pid > 0:
                pids.add(conn.pid)

        records = [
            SocketRecord(protocol=proto, local_port=port, state=state, owning_pids=frozenset(pids))
            for proto, state, pids in groups.values()
        ]
        logger.debug("port %d: %d matching socket(s)", port, len(records))
        return records


def extract_pids(records: Iterable[SocketRecord]) -> Set[int]:
    """Union of owning PIDs across ``records``, deduplicated."""
    pids: Set[int] = set()
    for rec in records:
        pids.update(rec.owning_pids)
    return pids
