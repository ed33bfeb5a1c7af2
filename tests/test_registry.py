from __future__ import annotations

from sidecar.core import DeviceRegistry
from sidecar.models import DeviceRecord


def _record(mac: str, ip: str = "10.0.0.5") -> DeviceRecord:
    return DeviceRecord(hardware_address=mac, address=ip, port=9000, ttl=120)


def test_upsert_inserts_then_updates_in_place():
    registry = DeviceRegistry()
    stored = registry.upsert(_record("AA:BB"))

    updated = registry.upsert(_record("AA:BB", ip="10.0.0.6"))

    assert updated is stored
    assert len(registry) == 1
    assert registry.lookup("AA:BB").address == "10.0.0.6"


def test_lookup_missing_returns_none():
    assert DeviceRegistry().lookup("AA:BB") is None


def test_remove_if_absent_from_keeps_registry_order():
    registry = DeviceRegistry()
    for mac in ("03", "01", "02"):
        registry.upsert(_record(mac))

    removed = registry.remove_if_absent_from({"01": _record("01")})

    assert [record.hardware_address for record in removed] == ["03", "02"]
    assert registry.keys() == {"01"}
    assert [record.hardware_address for record in registry.records()] == ["01"]
    assert "03" not in registry


def test_remove_if_absent_from_empty_batch_clears_registry():
    registry = DeviceRegistry()
    registry.upsert(_record("AA:BB"))

    removed = registry.remove_if_absent_from({})

    assert [record.hardware_address for record in removed] == ["AA:BB"]
    assert len(registry) == 0
