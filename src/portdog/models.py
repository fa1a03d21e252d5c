"""
models.py - Runtime dataclasses and output schemas for portdog.

Two layers:
  1. Runtime records built fresh per command (SocketRecord, ProcessInfo,
     TerminationOutcome) and the reports that bundle them
  2. Pydantic output schemas used for ``--json`` rendering
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════════
# Enumerations
# ══════════════════════════════════════════════════════════════════════════════


class Protocol(str, Enum):
    TCP = "tcp"
    UDP = "udp"

    @property
    def label(self) -> str:
        return self.value.upper()


class ProtocolFilter(str, Enum):
    TCP = "tcp"
    UDP = "udp"
    ANY = "any"

    @property
    def kind(self) -> str:
        """psutil ``net_connections`` kind covering IPv4 and IPv6."""
        return "inet" if self is ProtocolFilter.ANY else self.value

    def accepts(self, protocol: Protocol) -> bool:
        return self is ProtocolFilter.ANY or self.value == protocol.value


# ══════════════════════════════════════════════════════════════════════════════
# Runtime records
# ══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SocketRecord:
    """One socket bound to a local port, with the processes that own it."""
    protocol: Protocol
    local_port: int
    state: Optional[str] = None                 # TCP only
    owning_pids: FrozenSet[int] = frozenset()

    @property
    def owner_unknown(self) -> bool:
        return not self.owning_pids


def unknown_owner_records(records: Iterable[SocketRecord]) -> List[SocketRecord]:
    return [rec for rec in records if rec.owner_unknown]


@dataclass(frozen=True)
class ProcessInfo:
    pid: int
    name: str
    executable_path: Optional[str] = None


@dataclass(frozen=True)
class TerminationOutcome:
    pid: int
    succeeded: bool
    error_detail: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════════
# Output schemas
# ══════════════════════════════════════════════════════════════════════════════


class WhoEntry(BaseModel):
    protocol: Protocol
    port: int
    state: Optional[str] = None
    pid: Optional[int] = None
    name: Optional[str] = None
    exe: Optional[str] = None
    info_available: bool = False


class WhoResponse(BaseModel):
    port: int
    protocol: ProtocolFilter
    entries: List[WhoEntry] = Field(default_factory=list)


class KillOutcomeEntry(BaseModel):
    pid: int
    succeeded: bool
    error: Optional[str] = None


class KillResponse(BaseModel):
    port: int
    force: bool
    nothing_to_do: bool
    pids: List[int] = Field(default_factory=list)
    unknown_owner_sockets: int = 0
    outcomes: List[KillOutcomeEntry] = Field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════════
# Reports
# ══════════════════════════════════════════════════════════════════════════════


@dataclass
class WhoReport:
    """Result of ``who``: matched sockets plus one lookup per owning PID.

    ``processes`` maps every owning PID to its ProcessInfo, or to None when
    the PID was absent from the process snapshot.
    """
    port: int
    protocol_filter: ProtocolFilter
    records: List[SocketRecord] = field(default_factory=list)
    processes: Dict[int, Optional[ProcessInfo]] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return bool(self.records)

    def entries(self) -> List[WhoEntry]:
        """Flatten to one entry per (protocol, port, pid) triple.

        A record without a visible owner yields a single entry with
        ``pid=None``. PIDs are listed in ascending order within a record.
        """
        out: List[WhoEntry] = []
        for rec in self.records:
            if rec.owner_unknown:
                out.append(WhoEntry(protocol=rec.protocol, port=rec.local_port, state=rec.state))
                continue
            for pid in sorted(rec.owning_pids):
                info = self.processes.get(pid)
                out.append(
                    WhoEntry(
                        protocol=rec.protocol,
                        port=rec.local_port,
                        state=rec.state,
                        pid=pid,
                        name=info.name if info else None,
                        exe=info.executable_path if info else None,
                        info_available=info is not None,
                    )
                )
        return out

    def to_response(self) -> WhoResponse:
        return WhoResponse(port=self.port, protocol=self.protocol_filter, entries=self.entries())


@dataclass
class KillReport:
    """Result of ``kill``: discovered PIDs and one outcome per PID."""
    port: int
    force: bool
    records: List[SocketRecord] = field(default_factory=list)
    pids: List[int] = field(default_factory=list)
    outcomes: List[TerminationOutcome] = field(default_factory=list)

    @property
    def nothing_to_do(self) -> bool:
        return not self.pids

    @property
    def unknown_owner_count(self) -> int:
        return len(unknown_owner_records(self.records))

    @property
    def succeeded(self) -> List[TerminationOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> List[TerminationOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    def to_response(self) -> KillResponse:
        return KillResponse(
            port=self.port,
            force=self.force,
            nothing_to_do=self.nothing_to_do,
            pids=list(self.pids),
            unknown_owner_sockets=self.unknown_owner_count,
            outcomes=[
                KillOutcomeEntry(pid=o.pid, succeeded=o.succeeded, error=o.error_detail)
                for o in self.outcomes
            ],
        )
