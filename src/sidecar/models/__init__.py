"""Data models for the sidecar."""

from sidecar.models.device import DeviceRecord
from sidecar.models.events import DeviceEvent, EventType

__all__ = [
    "DeviceEvent",
    "DeviceRecord",
    "EventType",
]
