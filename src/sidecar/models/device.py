from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class DeviceRecord(BaseModel):
    """One device seen advertising the browsed service."""

    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
        "validate_assignment": True,
    }

    hardware_address: str = Field(alias="MAC", frozen=True)
    address: str = Field(alias="IP")
    display_name: str = Field(default="", alias="DisplayName")
    port: int = Field(alias="Port")
    ttl: int = Field(alias="TTL")

    @field_validator("hardware_address")
    @classmethod
    def _require_identity(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("hardware address must not be blank")
        return value

    def has_changed(self, other: DeviceRecord) -> bool:
        """Compare the tracked attributes; the display name never counts."""
        return (
            self.address != other.address
            or self.port != other.port
            or self.ttl != other.ttl
        )

    def update_from(self, other: DeviceRecord) -> None:
        self.address = other.address
        self.port = other.port
        self.ttl = other.ttl

    def to_wire(self) -> str:
        return self.model_dump_json(by_alias=True)
