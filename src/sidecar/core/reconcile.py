"""Turns a discovery batch into add/change/remove transitions."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from sidecar.models import DeviceEvent, DeviceRecord, EventType
from sidecar.sink import EventSink

from .registry import DeviceRegistry
from .resolver import DiscoveredHost

logger = logging.getLogger(__name__)

MAC_PROPERTY = "MAC"
IP_PROPERTY = "IP"


class ReconciliationEngine:
    """Applies each probe batch to the registry and reports what changed.

    Exactly one lifecycle event is emitted per changed device per cycle.
    Additions and changes come first, in batch order, followed by removals
    in the registry's order from before the batch was applied.
    """

    def __init__(self, registry: DeviceRegistry, sink: EventSink) -> None:
        self.registry = registry
        self.sink = sink

    def normalize(self, hosts: Iterable[DiscoveredHost]) -> dict[str, DeviceRecord]:
        probe_batch: dict[str, DeviceRecord] = {}
        for host in hosts:
            for service in host.services:
                if service.properties is None:
                    self.sink.warn(
                        f"Device {host.display_name} is detected but has no properties."
                    )
                    continue

                mac = service.properties.get(MAC_PROPERTY, "")
                ip = service.properties.get(IP_PROPERTY) or host.ip_address
                if not mac.strip():
                    self.sink.debug(
                        f"Device {host.display_name} has IP:{ip} "
                        "and is missing a MAC address."
                    )
                    continue

                # Later advertisements for the same MAC replace earlier ones
                probe_batch[mac] = DeviceRecord(
                    hardware_address=mac,
                    address=ip,
                    display_name=host.display_name,
                    port=service.port,
                    ttl=service.ttl,
                )
        return probe_batch

    def apply(self, probe_batch: Mapping[str, DeviceRecord]) -> list[DeviceEvent]:
        events: list[DeviceEvent] = []

        for mac, observed in probe_batch.items():
            known = self.registry.lookup(mac)
            if known is None:
                self.registry.upsert(observed)
                events.append(self.sink.device(EventType.ADD, observed))
            elif known.has_changed(observed):
                updated = self.registry.upsert(observed)
                events.append(self.sink.device(EventType.CHANGE, updated))

        for removed in self.registry.remove_if_absent_from(probe_batch):
            events.append(self.sink.device(EventType.REMOVE, removed))

        if events:
            logger.debug(
                "Cycle applied %d transitions, %d devices tracked",
                len(events),
                len(self.registry),
            )
        return events

    def reconcile(self, hosts: Iterable[DiscoveredHost]) -> list[DeviceEvent]:
        return self.apply(self.normalize(hosts))
