"""sidecar - report mDNS devices for one service type to a parent process."""

from __future__ import annotations

from importlib.metadata import version

from .config import LaunchOptions
from .core import (
    DeviceRegistry,
    DiscoveryLoop,
    LifecycleTether,
    ReconciliationEngine,
    TetherState,
)
from .models import DeviceEvent, DeviceRecord, EventType
from .sink import EventSink

__all__ = [
    "DeviceEvent",
    "DeviceRecord",
    "DeviceRegistry",
    "DiscoveryLoop",
    "EventSink",
    "EventType",
    "LaunchOptions",
    "LifecycleTether",
    "ReconciliationEngine",
    "TetherState",
    "__version__",
]

__version__ = version("mdns-sidecar")
