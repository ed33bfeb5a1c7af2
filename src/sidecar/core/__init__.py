from __future__ import annotations

from .loop import DiscoveryLoop
from .reconcile import ReconciliationEngine
from .registry import DeviceRegistry
from .resolver import (
    DiscoveredHost,
    DiscoveredService,
    Resolver,
    make_resolver,
    normalize_service_type,
    resolve_hosts,
)
from .tether import LifecycleTether, ProcessHandle, TetherState, resolve_process

__all__ = [
    "DeviceRegistry",
    "DiscoveredHost",
    "DiscoveredService",
    "DiscoveryLoop",
    "LifecycleTether",
    "ProcessHandle",
    "ReconciliationEngine",
    "Resolver",
    "TetherState",
    "make_resolver",
    "normalize_service_type",
    "resolve_hosts",
    "resolve_process",
]
