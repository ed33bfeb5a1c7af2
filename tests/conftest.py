from __future__ import annotations

import pytest

from sidecar.core import DiscoveredHost, DiscoveredService
from sidecar.models import DeviceEvent, EventType
from sidecar.sink import EventSink, should_emit


class MemorySink(EventSink):
    def __init__(self, debug: bool = False) -> None:
        super().__init__(debug=debug)
        self.events: list[DeviceEvent] = []

    def emit(self, event: DeviceEvent) -> None:
        if should_emit(event.kind, self.debug_enabled):
            self.events.append(event)

    def kinds(self) -> list[EventType]:
        return [event.kind for event in self.events]


def make_host(
    mac: str | None = "AA:BB",
    ip: str | None = "10.0.0.5",
    port: int = 9000,
    ttl: int = 120,
    name: str = "glove-left",
    host_ip: str = "192.168.1.50",
) -> DiscoveredHost:
    properties: dict[str, str] = {}
    if mac is not None:
        properties["MAC"] = mac
    if ip is not None:
        properties["IP"] = ip
    return DiscoveredHost(
        display_name=name,
        ip_address=host_ip,
        services=[DiscoveredService(port=port, ttl=ttl, properties=properties)],
    )


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink(debug=True)
