"""
cli.py - Command-line entry point for portdog.

  portdog who  <port> [--proto tcp|udp|any] [--json]
  portdog kill <port> [--force] [--proto tcp|udp|any] [--json]

Exit status is 0 whenever a command completes, including when nothing was
found or every termination failed. A socket table that cannot be read
exits 1; bad arguments exit 2.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import LOG_FORMAT, UNKNOWN, __version__, settings
from .errors import EnumerationError
from .inspector import PortInspector
from .models import KillReport, ProtocolFilter, WhoEntry, WhoReport
from .sockets import validate_port

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════════
# Rendering
# ══════════════════════════════════════════════════════════════════════════════


def format_who_entry(entry: WhoEntry) -> str:
    prefix = f"{entry.protocol.label:>3} :{entry.port:<5}"
    if entry.pid is None:
        return f"{prefix}  PID: {UNKNOWN}  (insufficient privileges?)"
    if not entry.info_available:
        return f"{prefix}  PID: {entry.pid:<7}  (process info unavailable)"
    exe = entry.exe or UNKNOWN
    if entry.state is not None:
        return (
            f"{prefix}  PID: {entry.pid:<7}  STATE: {entry.state:<12}  "
            f"NAME: {entry.name}  EXE: {exe}"
        )
    return f"{prefix}  PID: {entry.pid:<7}  NAME: {entry.name}  EXE: {exe}"


def render_who(report: WhoReport) -> List[str]:
    if not report.found:
        return [f"No process is using port {report.port}."]
    return [format_who_entry(entry) for entry in report.entries()]


def render_kill(report: KillReport) -> List[str]:
    lines: List[str] = []
    unknown = report.unknown_owner_count
    if report.nothing_to_do:
        if unknown:
            lines.append(
                f"No process to terminate on port {report.port}: {unknown} socket(s) "
                "have no visible owner (insufficient privileges?)."
            )
        else:
            lines.append(f"No process is using port {report.port}.")
        return lines

    lines.append(f"Port {report.port} is used by PID(s): {', '.join(str(p) for p in report.pids)}")
    if unknown:
        lines.append(f"  {unknown} socket(s) have no visible owner (insufficient privileges?)")

    mode = "forced" if report.force else "graceful"
    for outcome in report.outcomes:
        if outcome.succeeded:
            lines.append(f"  PID {outcome.pid}: {mode} termination requested")
        else:
            lines.append(f"  PID {outcome.pid}: failed to terminate: {outcome.error_detail}")

    failed = report.failed
    if failed:
        causes = ", ".join(f"PID {o.pid} ({o.error_detail})" for o in failed)
        lines.append(
            f"Failed to terminate {len(failed)} of {len(report.outcomes)} process(es): {causes}"
        )
    return lines


# ══════════════════════════════════════════════════════════════════════════════
# Argument parsing
# ══════════════════════════════════════════════════════════════════════════════


def _port(value: str) -> int:
    try:
        return validate_port(int(value))
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}") from err


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--proto",
        type=ProtocolFilter,
        choices=list(ProtocolFilter),
        default=ProtocolFilter.ANY,
        metavar="{tcp,udp,any}",
        help="Protocol filter (default: any)",
    )
    common.add_argument("--json", action="store_true", help="Print the report as JSON")
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    parser = argparse.ArgumentParser(prog="portdog", description="Ports & processes helper.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", metavar="command", required=True)

    who = sub.add_parser("who", parents=[common], help="Show the processes bound to a port")
    who.add_argument("port", type=_port, help="Local port number")

    kill = sub.add_parser("kill", parents=[common], help="Terminate the processes bound to a port")
    kill.add_argument("port", type=_port, help="Local port number")
    kill.add_argument(
        "--force",
        action="store_true",
        help="Kill unconditionally instead of requesting a graceful shutdown",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    if verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


# ══════════════════════════════════════════════════════════════════════════════
# Entry point
# ══════════════════════════════════════════════════════════════════════════════


def main(argv: Optional[List[str]] = None, inspector: Optional[PortInspector] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    inspector = inspector or PortInspector()
    try:
        if args.command == "who":
            report = inspector.who(args.port, args.proto)
            lines = render_who(report)
        else:
            report = inspector.kill(args.port, force=args.force, protocol_filter=args.proto)
            lines = render_kill(report)
    except EnumerationError as exc:
        logger.debug("enumeration failed", exc_info=True)
        print(f"portdog: error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(report.to_response().model_dump_json(indent=2))
    else:
        print("\n".join(lines))
    return 0


if __name__ == "__main__":
    sys.exit(main())
