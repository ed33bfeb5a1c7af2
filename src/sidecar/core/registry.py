from __future__ import annotations

from collections.abc import Mapping

from sidecar.models import DeviceRecord


class DeviceRegistry:
    """Devices seen in the most recent completed discovery cycle.

    Keyed by hardware address, at most one record per key. The registry is
    not locked: a single discovery cycle is its only writer. Running several
    service types concurrently needs one registry per type.
    """

    def __init__(self) -> None:
        self._records: dict[str, DeviceRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, hardware_address: object) -> bool:
        return hardware_address in self._records

    def lookup(self, hardware_address: str) -> DeviceRecord | None:
        return self._records.get(hardware_address)

    def upsert(self, record: DeviceRecord) -> DeviceRecord:
        """Insert ``record`` or copy its mutable fields onto the stored one."""
        existing = self._records.get(record.hardware_address)
        if existing is None:
            self._records[record.hardware_address] = record
            return record
        existing.update_from(record)
        return existing

    def remove_if_absent_from(
        self, probe_batch: Mapping[str, DeviceRecord]
    ) -> list[DeviceRecord]:
        removed: list[DeviceRecord] = []
        for hardware_address in list(self._records):
            if hardware_address not in probe_batch:
                removed.append(self._records.pop(hardware_address))
        return removed

    def keys(self) -> set[str]:
        return set(self._records)

    def records(self) -> list[DeviceRecord]:
        return list(self._records.values())
