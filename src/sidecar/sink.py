"""Line-oriented event output read by the parent process."""

from __future__ import annotations

import sys
from typing import TextIO

import typer

from sidecar.models import DeviceEvent, DeviceRecord, EventType


def should_emit(kind: EventType, debug: bool) -> bool:
    return debug or kind is not EventType.DEBUG


class EventSink:
    """Writes one ``TAG:message`` line per event.

    DEBUG events are dropped unless the sink was built with ``debug=True``;
    every other kind is always written. Each line is flushed immediately
    since the reader is usually a pipe.
    """

    def __init__(self, debug: bool = False, stream: TextIO | None = None) -> None:
        self.debug_enabled = debug
        self._stream = stream

    def emit(self, event: DeviceEvent) -> None:
        if not should_emit(event.kind, self.debug_enabled):
            return
        typer.echo(event.render(), file=self._stream or sys.stdout)

    def debug(self, message: str) -> None:
        self.emit(DeviceEvent(EventType.DEBUG, message))

    def warn(self, message: str) -> None:
        self.emit(DeviceEvent(EventType.WARN, message))

    def error(self, message: str) -> None:
        self.emit(DeviceEvent(EventType.ERROR, message))

    def device(self, kind: EventType, record: DeviceRecord) -> DeviceEvent:
        event = DeviceEvent.for_record(kind, record)
        self.emit(event)
        return event
