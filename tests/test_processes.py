"""Tests for the process table snapshot."""

from __future__ import annotations

import types

import psutil

import portdog.processes as processes_mod
from portdog.models import ProcessInfo
from portdog.processes import ProcessTable


def _proc(pid, name="python", exe="/usr/bin/python3"):
    return types.SimpleNamespace(info={"pid": pid, "name": name, "exe": exe})


class _VanishedProc:
    @property
    def info(self):
        raise psutil.NoSuchProcess(99)


def test_snapshot_reads_name_and_exe(monkeypatch):
    monkeypatch.setattr(
        processes_mod.psutil, "process_iter", lambda attrs: iter([_proc(4321), _proc(1, "init", "/sbin/init")])
    )
    table = ProcessTable.snapshot()

    assert table.resolve(1) == ProcessInfo(1, "init", "/sbin/init")
    assert table.resolve(4321) == ProcessInfo(4321, "python", "/usr/bin/python3")


def test_snapshot_walks_process_table_once(monkeypatch):
    calls = []

    def fake_iter(attrs):
        calls.append(attrs)
        return iter([_proc(1)])

    monkeypatch.setattr(processes_mod.psutil, "process_iter", fake_iter)
    table = ProcessTable.snapshot()
    table.resolve(1)
    table.resolve(2)

    assert calls == [["pid", "name", "exe"]]


def test_unresolvable_exe_is_absent_not_empty(monkeypatch):
    monkeypatch.setattr(
        processes_mod.psutil,
        "process_iter",
        lambda attrs: iter([_proc(2, "kthreadd", ""), _proc(3, "sshd", None)]),
    )
    table = ProcessTable.snapshot()

    assert table.resolve(2).executable_path is None
    assert table.resolve(3).executable_path is None
    assert table.resolve(3).name == "sshd"


def test_missing_name_gets_placeholder(monkeypatch):
    monkeypatch.setattr(processes_mod.psutil, "process_iter", lambda attrs: iter([_proc(5, None, None)]))
    assert ProcessTable.snapshot().resolve(5).name == "<unknown>"


def test_vanished_processes_are_skipped(monkeypatch):
    monkeypatch.setattr(
        processes_mod.psutil, "process_iter", lambda attrs: iter([_VanishedProc(), _proc(7)])
    )
    table = ProcessTable.snapshot()

    assert table.resolve(7) is not None
    assert table.resolve(99) is None


def test_resolve_absent_pid_returns_none():
    table = ProcessTable.from_infos([ProcessInfo(1, "init", "/sbin/init")])
    assert table.resolve(4321) is None


def test_injected_table_is_read_only_copy():
    entries = {1: ProcessInfo(1, "init")}
    table = ProcessTable(entries)
    entries[2] = ProcessInfo(2, "late")
    assert table.resolve(2) is None
