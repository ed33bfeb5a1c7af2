from __future__ import annotations

import io

import pytest

from sidecar.models import DeviceEvent, DeviceRecord, EventType
from sidecar.sink import EventSink, should_emit


@pytest.mark.parametrize("kind", list(EventType))
def test_everything_but_debug_is_always_emitted(kind: EventType):
    assert should_emit(kind, debug=True)
    assert should_emit(kind, debug=False) is (kind is not EventType.DEBUG)


def test_sink_writes_tagged_lines():
    stream = io.StringIO()
    sink = EventSink(debug=False, stream=stream)

    sink.debug("hidden")
    sink.warn("careful")
    sink.error("broken")
    sink.device(
        EventType.REMOVE,
        DeviceRecord(hardware_address="AA:BB", address="10.0.0.5", port=1, ttl=2),
    )

    lines = stream.getvalue().splitlines()
    assert lines[:2] == ["WARN:careful", "EROR:broken"]
    assert lines[2].startswith('_RMV:{"MAC":"AA:BB","IP":"10.0.0.5"')
    assert len(lines) == 3


def test_debug_sink_writes_debug_lines():
    stream = io.StringIO()
    EventSink(debug=True, stream=stream).emit(DeviceEvent(EventType.DEBUG, "hi"))
    assert stream.getvalue() == "DBUG:hi\n"
