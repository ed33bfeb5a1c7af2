from __future__ import annotations

import os
import subprocess
import sys

import psutil
import pytest
from conftest import MemorySink

from sidecar.core import LifecycleTether, TetherState, resolve_process
from sidecar.core import tether as tether_module
from sidecar.models import EventType


class FakeHandle:
    def __init__(self, exited: bool) -> None:
        self.exited = exited

    def has_exited(self) -> bool:
        return self.exited


def test_zero_parent_never_stops(sink: MemorySink):
    calls: list[int] = []

    def _resolver(pid: int):
        calls.append(pid)
        return None

    tether = LifecycleTether(0, sink, resolver=_resolver)

    for _ in range(5):
        assert tether.check() is TetherState.RUNNING
    assert calls == []
    assert sink.events == []


def test_live_parent_keeps_running(sink: MemorySink):
    tether = LifecycleTether(4242, sink, resolver=lambda pid: FakeHandle(False))

    assert tether.check() is TetherState.RUNNING
    assert not tether.stopped


def test_exited_parent_stops_with_warning(sink: MemorySink):
    tether = LifecycleTether(4242, sink, resolver=lambda pid: FakeHandle(True))

    assert tether.check() is TetherState.STOPPED
    assert sink.kinds() == [EventType.WARN]


def test_unknown_parent_stops_with_error(sink: MemorySink):
    tether = LifecycleTether(4242, sink, resolver=lambda pid: None)

    assert tether.check() is TetherState.STOPPED
    assert sink.kinds() == [EventType.ERROR]


def test_stopped_is_terminal(sink: MemorySink):
    handles = iter([FakeHandle(True), FakeHandle(False)])
    tether = LifecycleTether(4242, sink, resolver=lambda pid: next(handles))

    assert tether.check() is TetherState.STOPPED
    assert tether.check() is TetherState.STOPPED
    assert sink.kinds() == [EventType.WARN]


def test_resolve_current_process_is_alive():
    handle = resolve_process(os.getpid())

    assert handle is not None
    assert handle.has_exited() is False


@pytest.mark.parametrize("pid", [-1, -4242])
def test_resolve_negative_pid_is_not_found(pid: int):
    assert resolve_process(pid) is None


def test_resolve_missing_pid_is_not_found(monkeypatch: pytest.MonkeyPatch):
    def _missing(pid: int):
        raise psutil.NoSuchProcess(pid)

    monkeypatch.setattr(tether_module.psutil, "Process", _missing)

    assert resolve_process(999999) is None


def test_parent_is_resolved_once(sink: MemorySink):
    calls: list[int] = []

    def _resolver(pid: int):
        calls.append(pid)
        return FakeHandle(False)

    tether = LifecycleTether(4242, sink, resolver=_resolver)
    for _ in range(3):
        tether.check()

    assert calls == [4242]


def test_real_parent_exit_is_reported_as_warning(sink: MemorySink):
    child = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
    try:
        tether = LifecycleTether(child.pid, sink)
        assert tether.check() is TetherState.RUNNING
    finally:
        child.kill()
        child.wait()

    assert tether.check() is TetherState.STOPPED
    assert sink.kinds() == [EventType.WARN]


def test_parent_exit_before_first_check_is_a_warning(sink: MemorySink):
    child = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
    try:
        tether = LifecycleTether(child.pid, sink)
    finally:
        child.kill()
        child.wait()

    assert tether.check() is TetherState.STOPPED
    assert sink.kinds() == [EventType.WARN]


def test_parent_is_resolved_when_tether_is_created(sink: MemorySink):
    calls: list[int] = []

    def _resolver(pid: int):
        calls.append(pid)
        return FakeHandle(False)

    LifecycleTether(4242, sink, resolver=_resolver)

    assert calls == [4242]


def test_unreadable_process_counts_as_alive(monkeypatch: pytest.MonkeyPatch):
    def _denied(pid: int):
        raise psutil.AccessDenied(pid)

    monkeypatch.setattr(tether_module.psutil, "Process", _denied)
    monkeypatch.setattr(tether_module.psutil, "pid_exists", lambda pid: True)

    handle = resolve_process(1)

    assert handle is not None
    assert handle.has_exited() is False

    monkeypatch.setattr(tether_module.psutil, "pid_exists", lambda pid: False)
    assert handle.has_exited() is True
