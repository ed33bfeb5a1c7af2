"""Ties the sidecar's lifetime to its parent process."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Protocol

import psutil

from sidecar.sink import EventSink

logger = logging.getLogger(__name__)

NO_PARENT = 0


class TetherState(Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class ProcessHandle(Protocol):
    def has_exited(self) -> bool: ...


class PsutilProcessHandle:
    def __init__(self, process: psutil.Process) -> None:
        self._process = process

    def has_exited(self) -> bool:
        try:
            return (
                not self._process.is_running()
                or self._process.status() == psutil.STATUS_ZOMBIE
            )
        except psutil.NoSuchProcess:
            return True
        except psutil.AccessDenied:
            # Exists but belongs to someone else
            return False


class UnreadableProcessHandle:
    """A process we may not inspect; only its pid can be checked."""

    def __init__(self, pid: int) -> None:
        self._pid = pid

    def has_exited(self) -> bool:
        return not psutil.pid_exists(self._pid)


def resolve_process(pid: int) -> ProcessHandle | None:
    """Look up ``pid``; ``None`` when no such process exists."""
    if pid <= 0:
        return None
    try:
        return PsutilProcessHandle(psutil.Process(pid))
    except psutil.NoSuchProcess:
        return None
    except psutil.AccessDenied:
        return UnreadableProcessHandle(pid)


class LifecycleTether:
    """Decides once per cycle whether the sidecar keeps running.

    A parent pid of ``0`` means the lifetime is managed externally and the
    tether never stops. Any other pid is looked up once, when the tether
    is created, and the handle is kept: a parent that exits later is told
    apart from one that never existed, and a recycled pid is not mistaken
    for the parent. The check is advisory; an exit right after a check is
    noticed on the next cycle.
    """

    def __init__(
        self,
        parent_pid: int,
        sink: EventSink,
        resolver: Callable[[int], ProcessHandle | None] = resolve_process,
    ) -> None:
        self.parent_pid = parent_pid
        self.sink = sink
        self._handle: ProcessHandle | None = None
        if parent_pid != NO_PARENT:
            self._handle = resolver(parent_pid)
        self.state = TetherState.RUNNING

    @property
    def stopped(self) -> bool:
        return self.state is TetherState.STOPPED

    def check(self) -> TetherState:
        if self.stopped or self.parent_pid == NO_PARENT:
            return self.state

        if self._handle is None:
            self.sink.error("Parent PID invalid. Terminating sidecar.")
            self.state = TetherState.STOPPED
        elif self._handle.has_exited():
            self.sink.warn("Parent process has exited. Terminating sidecar.")
            self.state = TetherState.STOPPED

        if self.stopped:
            logger.debug("Tether to pid %d released", self.parent_pid)
        return self.state
