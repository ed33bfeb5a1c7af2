from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sidecar.models.device import DeviceRecord


class EventType(Enum):
    """Event kinds and the tag each one is written with."""

    DEBUG = "DBUG"
    ERROR = "EROR"
    WARN = "WARN"
    ADD = "_ADD"
    REMOVE = "_RMV"
    CHANGE = "_CHG"

    @property
    def is_lifecycle(self) -> bool:
        return self in (EventType.ADD, EventType.REMOVE, EventType.CHANGE)


@dataclass(frozen=True)
class DeviceEvent:
    kind: EventType
    message: str
    record: DeviceRecord | None = None

    @classmethod
    def for_record(cls, kind: EventType, record: DeviceRecord) -> DeviceEvent:
        # Snapshot so later in-place updates don't rewrite emitted events
        snapshot = record.model_copy()
        return cls(kind=kind, message=snapshot.to_wire(), record=snapshot)

    def render(self) -> str:
        return f"{self.kind.value}:{self.message}"
